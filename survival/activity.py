"""
Frostbound - survival/activity.py
Activity Types and their static configuration rows.
==================================================
Version:     0.2
Stack:       Python 3.11+ | Pydantic v2 (rows) | tomllib
Status:      Closed table. Every ActivityType variant must have a row.

The rows live in data/activities.toml. The first lookup validates the table
against the enum and raises ConfigurationError naming every missing variant,
so an incomplete table never reaches a tick.
"""

from enum import Enum
from typing import Dict

from survival.data_loader import ActivityDef, ConfigurationError, get_activity_defs


class ActivityType(str, Enum):
    IDLE = "idle"
    RESTING = "resting"
    SLEEPING = "sleeping"
    TENDING_FIRE = "tending_fire"
    EATING = "eating"
    COOKING = "cooking"
    CRAFTING = "crafting"
    FIGHTING = "fighting"
    ENCOUNTER = "encounter"
    TRAVELING = "traveling"
    FORAGING = "foraging"
    HUNTING = "hunting"
    EXPLORING = "exploring"
    CHOPPING = "chopping"


_VALIDATED_TABLE: Dict[ActivityType, ActivityDef] = {}


def activity_table() -> Dict[ActivityType, ActivityDef]:
    """Full ActivityType -> row mapping. Raises if any variant lacks a row."""
    if _VALIDATED_TABLE:
        return _VALIDATED_TABLE

    defs = get_activity_defs()
    missing = [a.value for a in ActivityType if a.value not in defs]
    if missing:
        raise ConfigurationError(f"Activity table is missing rows for: {', '.join(missing)}")

    _VALIDATED_TABLE.update({a: defs[a.value] for a in ActivityType})
    return _VALIDATED_TABLE


def get_activity_config(activity: ActivityType) -> ActivityDef:
    """Row lookup. Fails fast on an unknown activity instead of defaulting."""
    try:
        activity = ActivityType(activity)
    except ValueError:
        raise ConfigurationError(f"Unknown activity type: {activity!r}") from None
    return activity_table()[activity]
