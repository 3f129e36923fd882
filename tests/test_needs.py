import math

import pytest

from survival.activity import ActivityType
from survival.body import Body, DamageType
from survival.data_loader import ConfigurationError
from survival.ecs.components import Needs, SurvivalContext, MAX_CALORIES, MAX_ENERGY
from survival.events import EventBus, EVT_NEED_DEPLETED, EVT_TEMPERATURE_STAGE_CHANGED
from survival.needs import (
    CALORIE_BURN_PER_MINUTE,
    HYDRATION_BURN_PER_MINUTE,
    MIN_BODY_TEMPERATURE,
    SKIN_OFFSET,
    NeedsDecayModel,
    TemperatureStage,
    effective_temperature,
    gather_survival_context,
    temperature_stage,
)


def ctx(**overrides):
    values = dict(
        activity=ActivityType.IDLE,
        location_temperature=98.6 - SKIN_OFFSET,   # neutral: body stays at 98.6
        activity_level=1.0,
        fire_proximity=1.0,
        event_multiplier=1.0,
    )
    values.update(overrides)
    return SurvivalContext(**values)


def test_linear_burn_scaled_by_activity_level():
    model = NeedsDecayModel()
    report = model.advance(60, ctx())
    assert report.calories_burned == pytest.approx(CALORIE_BURN_PER_MINUTE * 60)
    assert report.hydration_burned == pytest.approx(HYDRATION_BURN_PER_MINUTE * 60)

    hard = NeedsDecayModel()
    report = hard.advance(60, ctx(activity_level=2.0))
    assert report.calories_burned == pytest.approx(CALORIE_BURN_PER_MINUTE * 120)

def test_needs_clamp_at_zero_and_report_starvation():
    bus = EventBus()
    depleted = []
    bus.subscribe(EVT_NEED_DEPLETED, lambda e: depleted.append(e.data["need"]))
    model = NeedsDecayModel(Needs(calories=10.0), bus=bus)

    report = model.advance(120, ctx())
    assert model.needs.calories == 0.0
    assert "starving" in report.signals
    assert depleted == ["calories"]
    starvation = [d for d in report.damage if d.source == "starvation"]
    assert starvation[0].amount == pytest.approx(2.0)
    assert starvation[0].damage_type == DamageType.INTERNAL

def test_dehydration_hurts_twice_as_fast():
    model = NeedsDecayModel(Needs(hydration=0.0))
    report = model.advance(60, ctx())
    dehydration = [d for d in report.damage if d.source == "dehydration"]
    assert dehydration[0].amount == pytest.approx(2.0)

def test_temperature_holds_in_neutral_conditions():
    model = NeedsDecayModel()
    model.advance(240, ctx())
    assert model.needs.body_temperature == pytest.approx(98.6)

def test_temperature_converges_without_overshoot():
    model = NeedsDecayModel()
    cold = ctx(location_temperature=40.0)   # target 48.4, below the clamp floor
    previous = model.needs.body_temperature
    for _ in range(30):
        model.advance(10, cold)
        current = model.needs.body_temperature
        assert MIN_BODY_TEMPERATURE <= current <= previous
        previous = current
    first = NeedsDecayModel()
    first.advance(1, cold)
    assert 98.6 - first.needs.body_temperature < 1.0

def test_convergence_is_independent_of_step_size():
    coarse, fine = NeedsDecayModel(), NeedsDecayModel()
    cold = ctx(location_temperature=60.0)
    coarse.advance(30, cold)
    for _ in range(30):
        fine.advance(1, cold)
    assert coarse.needs.body_temperature == pytest.approx(fine.needs.body_temperature)

def test_temperature_clamps_to_range():
    model = NeedsDecayModel()
    model.advance(10_000, ctx(location_temperature=-40.0))
    assert model.needs.body_temperature == MIN_BODY_TEMPERATURE

def test_fire_bonus_scales_with_proximity():
    base = ctx(location_temperature=40.0, fire_heat_output=15.0)
    assert effective_temperature(base) == pytest.approx(55.0)
    assert effective_temperature(ctx(location_temperature=40.0, fire_heat_output=15.0,
                                     fire_proximity=0.5)) == pytest.approx(47.5)
    assert effective_temperature(ctx(location_temperature=40.0, fire_heat_output=15.0,
                                     fire_proximity=0.0)) == pytest.approx(40.0)

def test_insulation_pulls_toward_skin_temperature():
    bare = effective_temperature(ctx(location_temperature=30.0))
    dressed = effective_temperature(ctx(location_temperature=30.0, clothing_insulation=0.5))
    assert dressed == pytest.approx(30.0 + 0.5 * (98.6 - SKIN_OFFSET - 30.0))
    assert dressed > bare
    capped = effective_temperature(ctx(location_temperature=30.0, clothing_insulation=3.0))
    assert capped == pytest.approx(30.0 + 0.95 * (98.6 - SKIN_OFFSET - 30.0))

def test_sleep_restores_energy_and_waking_drains_it():
    model = NeedsDecayModel(Needs(energy=100.0))
    model.advance(60, ctx(energy_recovery=2.0))
    assert model.needs.energy == pytest.approx(220.0)
    model.advance(20, ctx())
    assert model.needs.energy == pytest.approx(200.0)
    model.advance(10_000, ctx(energy_recovery=2.0))
    assert model.needs.energy == MAX_ENERGY

def test_unconscious_body_neither_drains_energy_nor_works_hard():
    model = NeedsDecayModel(Needs(energy=300.0))
    report = model.advance(60, ctx(activity_level=3.0, is_conscious=False))
    assert model.needs.energy == 300.0
    assert report.calories_burned == pytest.approx(CALORIE_BURN_PER_MINUTE * 0.7 * 60)

@pytest.mark.parametrize("minutes", [0, -10, math.nan, math.inf])
def test_invalid_or_zero_span_changes_nothing(minutes):
    model = NeedsDecayModel()
    before = Needs()
    report = model.advance(minutes, ctx(location_temperature=-20.0))
    assert model.needs == before
    assert report.damage == [] and report.healing == []

def test_stage_change_is_announced():
    bus = EventBus()
    stages = []
    bus.subscribe(EVT_TEMPERATURE_STAGE_CHANGED, lambda e: stages.append(e.data["new_stage"]))
    model = NeedsDecayModel(bus=bus)
    model.advance(60, ctx(location_temperature=20.0))
    assert stages
    assert stages[-1] == model.stage.value

def test_hypothermia_damages_limbs():
    model = NeedsDecayModel(Needs(body_temperature=80.0))
    limbs = ("left_arm", "right_arm", "left_leg", "right_leg")
    report = model.advance(60, ctx(location_temperature=-30.0, limb_ids=limbs))
    frost = [d for d in report.damage if d.source == "hypothermia"]
    assert sorted(d.target for d in frost) == sorted(limbs)
    assert all(d.damage_type == DamageType.COLD for d in frost)
    total = sum(d.amount for d in frost)
    assert 1.5 < total <= 3.0
    assert "frostbite" in report.signals

def test_heatstroke_damage():
    model = NeedsDecayModel(Needs(body_temperature=107.0))
    report = model.advance(60, ctx(location_temperature=130.0))
    assert any(d.source == "heatstroke" and d.damage_type == DamageType.HEAT for d in report.damage)

def test_regeneration_needs_good_condition():
    fed = NeedsDecayModel()
    report = fed.advance(60, ctx(is_damaged=True))
    assert len(report.healing) == 1
    nutrition = fed.needs.calories / MAX_CALORIES
    assert report.healing[0].amount == pytest.approx(nutrition)

    tired = NeedsDecayModel(Needs(energy=100.0))
    assert tired.advance(60, ctx(is_damaged=True)).healing == []

    healthy = NeedsDecayModel()
    assert healthy.advance(60, ctx(is_damaged=False)).healing == []

def test_event_multiplier_is_exposed():
    report = NeedsDecayModel().advance(5, ctx(event_multiplier=1.5))
    assert report.event_multiplier == 1.5

def test_raises_clamp_to_maximum():
    model = NeedsDecayModel(Needs(calories=1900.0))
    assert model.add_calories(500) == pytest.approx(100.0)
    assert model.needs.calories == MAX_CALORIES
    assert model.add_hydration(-50) == 0.0

@pytest.mark.parametrize("temperature, stage", [
    (85.0, TemperatureStage.FREEZING),
    (92.0, TemperatureStage.COLD),
    (96.5, TemperatureStage.COOL),
    (98.6, TemperatureStage.WARM),
    (101.0, TemperatureStage.HOT),
    (105.0, TemperatureStage.HEATSTROKE),
])
def test_temperature_stages(temperature, stage):
    assert temperature_stage(temperature) == stage


# ---- context gathering ----

def test_gather_uses_activity_row():
    context = gather_survival_context(ActivityType.TRAVELING, 40.0)
    assert context.activity_level == 2.0
    assert context.fire_proximity == 0.0
    assert context.event_multiplier == 1.0

def test_gather_unknown_activity_fails_fast():
    with pytest.raises(ConfigurationError):
        gather_survival_context("swimming", 40.0)

def test_gather_applies_night_and_fire():
    context = gather_survival_context(ActivityType.RESTING, 40.0,
                                      active_heat_outputs=[10.0, 15.0], is_night=True)
    assert context.location_temperature == 30.0
    assert context.fire_heat_output == 15.0

def test_gather_reads_the_body():
    body = Body.from_template("human")
    context = gather_survival_context(ActivityType.IDLE, 40.0, body=body)
    assert context.natural_insulation == pytest.approx(0.10)
    assert context.is_conscious
    assert not context.is_damaged
    assert set(context.limb_ids) == {"left_arm", "right_arm", "left_leg", "right_leg"}
