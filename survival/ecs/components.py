"""
Frostbound - survival/ecs/components.py
ECS Component Definitions for python-tcod-ecs.
==============================================
Version:     0.2
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Stable.

Feature state machines (HeatSource, ForageSampler) are components too; they
live in world/ next to the behaviour that drives them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple

from survival.activity import ActivityType
from survival.skill_check import Skill, SkillType

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

MAX_CALORIES = 2000.0
MAX_HYDRATION = 4000.0      # ml
MAX_ENERGY = 960.0          # minutes awake before exhaustion
BASE_BODY_TEMPERATURE = 98.6


@dataclass
class EntityIdentity:
    entity_id: str
    name: str
    is_player: bool = False

@dataclass
class Needs:
    calories: float = MAX_CALORIES
    hydration: float = MAX_HYDRATION
    energy: float = MAX_ENERGY
    body_temperature: float = BASE_BODY_TEMPERATURE

@dataclass
class Clothing:
    insulation: float = 0.0         # [0, 0.95] after combination with natural insulation

@dataclass
class CurrentActivity:
    activity: ActivityType = ActivityType.IDLE

@dataclass(frozen=True)
class SurvivalContext:
    """Transient per-tick snapshot. Rebuilt every tick, never stored."""
    activity: ActivityType
    location_temperature: float     # °F, night adjustment already applied
    activity_level: float
    fire_proximity: float
    event_multiplier: float
    energy_recovery: float = 0.0
    clothing_insulation: float = 0.0
    natural_insulation: float = 0.0
    temperature_deficit: float = 0.0
    fire_heat_output: float = 0.0   # hottest active heat source here
    is_conscious: bool = True
    is_damaged: bool = False
    limb_ids: Tuple[str, ...] = ()

@dataclass
class Location:
    template_id: str
    name: str
    kind: str                       # "forest" | "clearing" | "riverbank" | "tundra"
    temperature: float              # daytime °F

@dataclass
class ItemIdentity:
    entity_id: str
    name: str
    description: str
    template_origin: str = ""
    value: int = 1

@dataclass
class Quantity:
    amount: int = 1
    max_stack: int = 1

@dataclass
class FoodValue:
    calories: float = 0.0
    water: float = 0.0

@dataclass
class FuelValue:
    hours: float = 0.0

@dataclass
class Skills:
    skills: Dict[SkillType, Skill] = field(
        default_factory=lambda: {s: Skill() for s in SkillType}
    )

    def get(self, skill: SkillType) -> Skill:
        return self.skills.setdefault(SkillType(skill), Skill())
