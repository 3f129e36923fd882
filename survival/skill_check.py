"""
Frostbound - survival/skill_check.py
Skill Check Resolver: success probability, XP reward and skill progression.
==========================================================================
Version:     0.3
Stack:       Python 3.11+ | dataclasses
Status:      Pure functions. No stored state except the Skill record.

Resolution pipeline
-------------------
1. calculate_success_chance(base, level, dc)
       base + (level - dc) * 0.1, clamped to [0.05, 0.95]
2. determine_success(rng, chance)   one uniform draw from the session rng
3. calculate_xp_reward(success, success_xp, failure_xp=1)

No action is ever guaranteed and none is impossible. A failed attempt still
pays the consolation XP.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Protocol

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

SKILL_POINT_MODIFIER = 0.1
MIN_SUCCESS_CHANCE = 0.05
MAX_SUCCESS_CHANCE = 0.95
DEFAULT_FAILURE_XP = 1
XP_PER_LEVEL_STEP = 10   # reaching level n+1 from n costs 10 * (n + 1)


class RandomSource(Protocol):
    def random(self) -> float: ...


class SkillType(str, Enum):
    FIRECRAFT = "firecraft"
    FORAGING = "foraging"
    HUNTING = "hunting"
    CRAFTING = "crafting"
    FIGHTING = "fighting"


# ================================================================================
# PURE RESOLVERS
# ================================================================================

def calculate_success_chance(base_chance: float, skill_level: int, skill_dc: int) -> float:
    chance = base_chance + (skill_level - skill_dc) * SKILL_POINT_MODIFIER
    return max(MIN_SUCCESS_CHANCE, min(MAX_SUCCESS_CHANCE, chance))


def calculate_xp_reward(success: bool, success_xp: int,
                        failure_xp: int = DEFAULT_FAILURE_XP) -> int:
    return success_xp if success else failure_xp


def determine_success(rng: RandomSource, chance: float) -> bool:
    """The random-success primitive. A draw strictly below chance succeeds."""
    return rng.random() < chance


@dataclass(frozen=True)
class SkillCheckResult:
    success: bool
    chance: float
    roll: float
    xp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "chance": self.chance,
                "roll": self.roll, "xp": self.xp}


def resolve_skill_check(rng: RandomSource, base_chance: float, skill_level: int,
                        skill_dc: int, success_xp: int,
                        failure_xp: int = DEFAULT_FAILURE_XP) -> SkillCheckResult:
    """Chance, one roll and the XP it earns, bundled for the caller to apply."""
    chance = calculate_success_chance(base_chance, skill_level, skill_dc)
    roll = rng.random()
    success = roll < chance
    return SkillCheckResult(
        success=success,
        chance=chance,
        roll=roll,
        xp=calculate_xp_reward(success, success_xp, failure_xp),
    )


# ================================================================================
# PROGRESSION
# ================================================================================

def xp_to_next_level(level: int) -> int:
    return XP_PER_LEVEL_STEP * (level + 1)


@dataclass
class Skill:
    level: int = 0
    experience: int = 0

    def gain_experience(self, xp: int) -> int:
        """Adds XP and rolls over into levels. Returns levels gained."""
        if xp <= 0:
            return 0
        self.experience += xp
        gained = 0
        while self.experience >= xp_to_next_level(self.level):
            self.experience -= xp_to_next_level(self.level)
            self.level += 1
            gained += 1
        return gained
