# strava_tools/rules.py
import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType

from strava_tools import fetch_data
from strava_tools.errors import StravaToolsError
from strava_tools.models import ActivityUpdate

logger = logging.getLogger(__name__)

DEFAULT_NAME_MAPPINGS = MappingProxyType({
    "Pickup ice Hockey": "Pickup Ice Hockey",
    "Private Training Workout": "Private Training Session",
    "Workout w/Trainer": "Private Training Session",
    "Workout": "Gym Workout",
    "Gym Workou": "Gym Workout",
})


@dataclass(frozen=True)
class PlannedChange:
    activity: object
    update: ActivityUpdate


@dataclass
class ApplyResult:
    updated: list = field(default_factory=list)
    failed: list = field(default_factory=list)


# --- Renamer ---

class Renamer:
    """Renames activities whose exact (case-sensitive) name is in the mapping table."""

    def __init__(self, mappings=DEFAULT_NAME_MAPPINGS):
        self.mappings = MappingProxyType(dict(mappings))

    def plan(self, activities):
        return [
            PlannedChange(a, ActivityUpdate(name=self.mappings[a.name]))
            for a in activities
            if a.name in self.mappings
        ]


def load_name_mappings(path):
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise ValueError(f"'{path}' must hold a JSON object of name -> name strings")
    return MappingProxyType(data)


# --- Whitespace Normalizer ---

def plan_whitespace_fixes(activities):
    return [
        PlannedChange(a, ActivityUpdate(name=a.name.strip()))
        for a in activities
        if a.name.strip() != a.name
    ]


# --- Single Activity Rule ---

@dataclass(frozen=True)
class UpdateRule:
    """Matches an activity by exact name AND sport type, then applies `update`."""
    name: str
    sport_type: str
    update: ActivityUpdate

    def matches(self, activity):
        return activity.name == self.name and activity.sport_type == self.sport_type


DEFAULT_UPDATE_RULE = UpdateRule(
    name="Morning Workout",
    sport_type="Workout",
    update=ActivityUpdate(name="Pickup Ice Hockey", sport_type="IceSkate"),
)


# --- Applying ---

def apply_changes(access_token, changes, dry_run=True, updater=None):
    """
    Sends each planned change, one at a time. A failed update is logged and
    skipped, it never stops the rest of the batch. Dry runs send nothing.
    """
    result = ApplyResult()
    if dry_run:
        return result
    if updater is None:
        updater = fetch_data.update_activity

    for change in changes:
        activity = change.activity
        try:
            updater(access_token, activity.id, change.update)
        except StravaToolsError as e:
            logger.error("Failed to update activity ID %d: %s", activity.id, e)
            result.failed.append(change)
            continue
        logger.info("Successfully updated activity ID %d: '%s' -> '%s'",
                    activity.id, activity.name, change.update.name)
        result.updated.append(change)
    return result
