import random

import pytest

from survival.skill_check import (
    Skill,
    SkillCheckResult,
    calculate_success_chance,
    calculate_xp_reward,
    determine_success,
    resolve_skill_check,
    xp_to_next_level,
)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.mark.parametrize("base, level, dc, expected", [
    (0.50, 0, 0, 0.50),
    (0.40, 5, 3, 0.60),
    (0.50, 1, 4, 0.20),
    (0.10, 0, 10, 0.05),   # floor
    (0.80, 10, 0, 0.95),   # ceiling
])
def test_success_chance_reference_values(base, level, dc, expected):
    assert calculate_success_chance(base, level, dc) == pytest.approx(expected)

def test_success_chance_always_within_bounds():
    rng = random.Random(7)
    for _ in range(500):
        base = rng.random()
        level = rng.randint(-50, 50)
        dc = rng.randint(-50, 50)
        chance = calculate_success_chance(base, level, dc)
        assert 0.05 <= chance <= 0.95

def test_success_chance_monotonic_in_level_and_dc():
    for base in (0.0, 0.3, 0.7, 1.0):
        by_level = [calculate_success_chance(base, lvl, 5) for lvl in range(-10, 20)]
        assert by_level == sorted(by_level)
        by_dc = [calculate_success_chance(base, 5, dc) for dc in range(-10, 20)]
        assert by_dc == sorted(by_dc, reverse=True)

def test_xp_reward():
    assert calculate_xp_reward(True, 5, 1) == 5
    assert calculate_xp_reward(False, 5, 1) == 1
    assert calculate_xp_reward(False, 10) == 1

def test_determine_success_is_strict():
    assert determine_success(FixedRng(0.49), 0.5) is True
    assert determine_success(FixedRng(0.5), 0.5) is False

def test_resolve_skill_check_bundles_roll_and_xp():
    result = resolve_skill_check(FixedRng(0.1), 0.5, 0, 0, success_xp=3)
    assert isinstance(result, SkillCheckResult)
    assert result.success
    assert result.chance == pytest.approx(0.5)
    assert result.roll == 0.1
    assert result.xp == 3

    failed = resolve_skill_check(FixedRng(0.99), 0.5, 0, 0, success_xp=3)
    assert not failed.success
    assert failed.xp == 1

def test_even_a_certain_check_can_fail():
    # 0.95 ceiling: a roll of 0.96 fails no matter how skilled
    result = resolve_skill_check(FixedRng(0.96), 1.0, 100, 0, success_xp=5)
    assert not result.success

def test_skill_levels_up_and_carries_over():
    skill = Skill()
    assert xp_to_next_level(0) == 10
    assert skill.gain_experience(9) == 0
    assert skill.level == 0
    assert skill.gain_experience(4) == 1
    assert skill.level == 1
    assert skill.experience == 3

def test_skill_multiple_levels_in_one_gain():
    skill = Skill()
    # 10 for level 1, 20 for level 2
    assert skill.gain_experience(35) == 2
    assert skill.level == 2
    assert skill.experience == 5

def test_skill_ignores_non_positive_xp():
    skill = Skill(level=1, experience=4)
    assert skill.gain_experience(0) == 0
    assert skill.gain_experience(-5) == 0
    assert skill.experience == 4
