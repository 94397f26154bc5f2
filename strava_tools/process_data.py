# strava_tools/process_data.py
import pandas as pd


def count_by(activities, field):
    """
    Tallies activities by the exact value of `field` (no trimming, no case folding).
    Returns (value, count) pairs, highest count first. Ties stay in the order
    the values were first seen.
    """
    values = pd.Series([getattr(a, field) for a in activities], dtype=object)
    if values.empty:
        return []

    # sort=False keeps groups in first-seen order, the stable sort preserves it for ties
    counts = values.groupby(values, sort=False, dropna=False).size()
    counts = counts.sort_values(ascending=False, kind='stable')
    return [(value, int(count)) for value, count in counts.items()]


def count_by_name(activities):
    return count_by(activities, 'name')


def count_by_sport_type(activities):
    return count_by(activities, 'sport_type')


def visualize_name(name):
    """Makes stray spaces visible: spaces become '·', leading/trailing ones also get arrows."""
    visualized = name.replace(' ', '·')
    if name[:1].isspace():
        visualized = '→' + visualized
    if name[-1:].isspace():
        visualized = visualized + '←'
    return visualized
