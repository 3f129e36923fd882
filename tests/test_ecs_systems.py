import tcod.ecs
import pytest

from survival.activity import ActivityType
from survival.body import Body, DamageInfo, DamageType, HealingInfo
from survival.clock import WorldClock
from survival.ecs.components import Clothing, CurrentActivity, Needs
from survival.ecs.systems import (
    capacity_effect_system,
    heat_source_system,
    needs_decay_system,
    survival_context_system,
)
from survival.needs import NeedsDecayModel, NeedsReport
from world.location import add_heat_source, create_location


def _player(registry):
    player = registry.new_entity()
    player.components[Body] = Body.from_template("human")
    player.components[NeedsDecayModel] = NeedsDecayModel()
    player.components[Needs] = player.components[NeedsDecayModel].needs
    player.components[CurrentActivity] = CurrentActivity(ActivityType.RESTING)
    player.components[Clothing] = Clothing(insulation=0.3)
    return player

def test_context_reflects_location_fire_and_clock():
    registry = tcod.ecs.Registry()
    player = _player(registry)
    clearing = create_location(registry, "clearing")

    day = survival_context_system(player, clearing, WorldClock(total_minutes=12 * 60))
    assert day.location_temperature == 50.0
    assert day.fire_heat_output == 0.0
    assert day.clothing_insulation == 0.3
    assert day.activity == ActivityType.RESTING

    add_heat_source(registry, clearing, name="Lit").add_fuel(1.0)
    night = survival_context_system(player, clearing, WorldClock(total_minutes=22 * 60))
    assert night.location_temperature == 40.0
    assert night.fire_heat_output == 15.0

def test_needs_decay_system_drives_the_model():
    registry = tcod.ecs.Registry()
    player = _player(registry)
    clearing = create_location(registry, "clearing")
    context = survival_context_system(player, clearing, WorldClock())
    report = needs_decay_system(player, 30, context)
    assert report.minutes == 30
    assert player.components[Needs].calories < 2000

def test_capacity_effect_system_applies_report():
    registry = tcod.ecs.Registry()
    player = _player(registry)
    report = NeedsReport(damage=[DamageInfo(7.0, DamageType.INTERNAL, target="left_leg")])
    effects = capacity_effect_system(player, report)
    assert effects.damage_taken == pytest.approx(0.2)

    heal = NeedsReport(healing=[HealingInfo(3.5, target="left_leg")])
    assert capacity_effect_system(player, heal).healing_done == pytest.approx(0.1)

def test_heat_source_system_reports_burn_outs():
    registry = tcod.ecs.Registry()
    forest = create_location(registry, "forest")
    short = add_heat_source(registry, forest, name="Short")
    long = add_heat_source(registry, forest, name="Long")
    short.add_fuel(0.5)
    long.add_fuel(4.0)

    assert heat_source_system(forest, 20) == []
    burned = heat_source_system(forest, 20)
    assert burned == [short]
    assert long.is_active
    assert long.fuel_remaining == pytest.approx(4.0 - 40 / 60)
