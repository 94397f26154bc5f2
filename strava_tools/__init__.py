"""Small Strava utilities for counting, renaming and cleaning up activities."""

__version__ = "0.1.0"
