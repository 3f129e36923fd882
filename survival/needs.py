"""
Frostbound - survival/needs.py
Needs Decay Model: calories, hydration, energy and body temperature per tick.
============================================================================
Version:     0.5
Stack:       Python 3.11+ | dataclasses | EventBus
Status:      Core numeric model.

Per advance(minutes, context)
-----------------------------
1. Burn    calories and hydration fall linearly at base rate * activity level.
           Energy drains one per minute, or recovers while sleeping.
2. Heat    body temperature closes 1 - (1 - 1/120)^minutes of the gap to the
           effective ambient temperature (plus skin offset). It never jumps
           and never overshoots.
3. Report  stage, status signals and the damage / healing the capacity
           layer should apply. This module never touches the Body.

Everything clamps. Only an unknown activity is an error, raised while the
context is gathered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from survival.activity import ActivityType, get_activity_config
from survival.body import Body, Capacity, DamageInfo, DamageType, HealingInfo
from survival.ecs.components import (
    Needs,
    SurvivalContext,
    MAX_CALORIES,
    MAX_HYDRATION,
    MAX_ENERGY,
    BASE_BODY_TEMPERATURE,
)
from survival.events import (
    EventBus,
    emit_to,
    EVT_NEED_DEPLETED,
    EVT_TEMPERATURE_STAGE_CHANGED,
)
from survival.numeric import clamp, clamp01, is_valid_magnitude

logger = logging.getLogger(__name__)

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

CALORIE_BURN_PER_MINUTE = MAX_CALORIES / 1440.0
HYDRATION_BURN_PER_MINUTE = MAX_HYDRATION / 1440.0
ENERGY_DRAIN_PER_MINUTE = 1.0

SKIN_OFFSET = 8.4
CONVERGENCE_RATE = 1.0 / 120.0
MIN_BODY_TEMPERATURE = 70.0
MAX_BODY_TEMPERATURE = 110.0
MAX_INSULATION = 0.95
NATURAL_INSULATION_PER_PUMPING = 0.10
NIGHT_TEMPERATURE_DROP = 10.0
UNCONSCIOUS_ACTIVITY_LEVEL = 0.7

# Thresholds (°F)
FROSTBITE_THRESHOLD = 89.6
HYPOTHERMIA_THRESHOLD = 95.0
COOL_THRESHOLD = 97.7
SHIVERING_THRESHOLD = 97.0
SWEATING_THRESHOLD = 99.0
WARM_CEILING = 99.5
HYPERTHERMIA_THRESHOLD = 100.0
HEATSTROKE_THRESHOLD = 104.0

# Consequences, per hour
STARVATION_DAMAGE = 1.0
DEHYDRATION_DAMAGE = 2.0
HYPOTHERMIA_DAMAGE = 1.5
HEATSTROKE_DAMAGE = 1.5
REGEN_RATE = 1.0
REGEN_MIN_CALORIES = 0.10
REGEN_MIN_HYDRATION = 0.10
REGEN_MIN_ENERGY = 0.50

SIGNAL_SHIVERING = "shivering"
SIGNAL_HYPOTHERMIA = "hypothermia"
SIGNAL_FROSTBITE = "frostbite"
SIGNAL_SWEATING = "sweating"
SIGNAL_HYPERTHERMIA = "hyperthermia"
SIGNAL_STARVING = "starving"
SIGNAL_DEHYDRATED = "dehydrated"
SIGNAL_EXHAUSTED = "exhausted"


class TemperatureStage(str, Enum):
    FREEZING = "freezing"
    COLD = "cold"
    COOL = "cool"
    WARM = "warm"
    HOT = "hot"
    HEATSTROKE = "heatstroke"


def temperature_stage(temperature: float) -> TemperatureStage:
    if temperature < FROSTBITE_THRESHOLD:
        return TemperatureStage.FREEZING
    if temperature < HYPOTHERMIA_THRESHOLD:
        return TemperatureStage.COLD
    if temperature < COOL_THRESHOLD:
        return TemperatureStage.COOL
    if temperature <= WARM_CEILING:
        return TemperatureStage.WARM
    if temperature <= HEATSTROKE_THRESHOLD:
        return TemperatureStage.HOT
    return TemperatureStage.HEATSTROKE


def status_signals(needs: Needs) -> Set[str]:
    temp = needs.body_temperature
    signals = set()
    if temp < SHIVERING_THRESHOLD:
        signals.add(SIGNAL_SHIVERING)
    if temp < HYPOTHERMIA_THRESHOLD:
        signals.add(SIGNAL_HYPOTHERMIA)
    if temp < FROSTBITE_THRESHOLD:
        signals.add(SIGNAL_FROSTBITE)
    if temp > SWEATING_THRESHOLD:
        signals.add(SIGNAL_SWEATING)
    if temp > HYPERTHERMIA_THRESHOLD:
        signals.add(SIGNAL_HYPERTHERMIA)
    if needs.calories <= 0:
        signals.add(SIGNAL_STARVING)
    if needs.hydration <= 0:
        signals.add(SIGNAL_DEHYDRATED)
    if needs.energy <= 0:
        signals.add(SIGNAL_EXHAUSTED)
    return signals


# ================================================================================
# CONTEXT
# ================================================================================

def gather_survival_context(
    activity: ActivityType,
    location_temperature: float,
    body: Optional[Body] = None,
    active_heat_outputs: Iterable[float] = (),
    is_night: bool = False,
    clothing_insulation: float = 0.0,
    temperature_deficit: float = 0.0,
) -> SurvivalContext:
    """
    Snapshot the world for one tick. Raises ConfigurationError when the
    activity has no table row.
    """
    row = get_activity_config(activity)
    if is_night:
        location_temperature -= NIGHT_TEMPERATURE_DROP

    natural = 0.0
    is_conscious = True
    is_damaged = False
    limb_ids: tuple = ()
    if body is not None:
        natural = NATURAL_INSULATION_PER_PUMPING * body.capacity(Capacity.BLOOD_PUMPING)
        is_conscious = body.is_conscious
        is_damaged = body.is_damaged
        limb_ids = tuple(p.id for p in body.limbs)

    return SurvivalContext(
        activity=ActivityType(activity),
        location_temperature=location_temperature,
        activity_level=row.activity_level,
        fire_proximity=row.fire_proximity,
        event_multiplier=row.event_multiplier,
        energy_recovery=row.energy_recovery,
        clothing_insulation=clothing_insulation,
        natural_insulation=natural,
        temperature_deficit=temperature_deficit,
        fire_heat_output=max(active_heat_outputs, default=0.0),
        is_conscious=is_conscious,
        is_damaged=is_damaged,
        limb_ids=limb_ids,
    )


def effective_temperature(context: SurvivalContext) -> float:
    """Ambient temperature as felt through insulation, plus any fire."""
    location = context.location_temperature
    insulation = clamp(context.natural_insulation + context.clothing_insulation, 0.0, MAX_INSULATION)
    effective = location + insulation * (BASE_BODY_TEMPERATURE - SKIN_OFFSET - location)
    effective -= context.temperature_deficit
    if context.fire_proximity > 0 and context.fire_heat_output > 0:
        effective += context.fire_heat_output * context.fire_proximity
    return effective


# ================================================================================
# MODEL
# ================================================================================

@dataclass
class NeedsReport:
    minutes: float = 0.0
    calories_burned: float = 0.0
    hydration_burned: float = 0.0
    energy_delta: float = 0.0
    temperature_before: float = BASE_BODY_TEMPERATURE
    temperature_after: float = BASE_BODY_TEMPERATURE
    stage: TemperatureStage = TemperatureStage.WARM
    signals: Set[str] = field(default_factory=set)
    event_multiplier: float = 0.0
    damage: List[DamageInfo] = field(default_factory=list)
    healing: List[HealingInfo] = field(default_factory=list)


class NeedsDecayModel:
    """
    Owns one actor's Needs and drifts them through time. The owner (the
    session) supplies a fresh SurvivalContext for every call.
    """

    def __init__(self, needs: Optional[Needs] = None, bus: Optional[EventBus] = None,
                 owner: str = "player") -> None:
        self.needs = needs if needs is not None else Needs()
        self.bus = bus
        self.owner = owner

    @property
    def stage(self) -> TemperatureStage:
        return temperature_stage(self.needs.body_temperature)

    @property
    def signals(self) -> Set[str]:
        return status_signals(self.needs)

    def advance(self, minutes: float, context: SurvivalContext) -> NeedsReport:
        needs = self.needs
        report = NeedsReport(
            temperature_before=needs.body_temperature,
            temperature_after=needs.body_temperature,
            stage=self.stage,
            signals=self.signals,
            event_multiplier=context.event_multiplier,
        )
        if not is_valid_magnitude(minutes):
            logger.warning("Ignoring needs advance with invalid span %r", minutes)
            return report
        if minutes == 0:
            return report

        report.minutes = minutes
        before_stage = self.stage
        before = Needs(needs.calories, needs.hydration, needs.energy, needs.body_temperature)

        # 1. Burn
        level = context.activity_level
        if not context.is_conscious:
            level = min(level, UNCONSCIOUS_ACTIVITY_LEVEL)

        needs.calories = clamp(needs.calories - CALORIE_BURN_PER_MINUTE * level * minutes, 0.0, MAX_CALORIES)
        needs.hydration = clamp(needs.hydration - HYDRATION_BURN_PER_MINUTE * level * minutes, 0.0, MAX_HYDRATION)

        if context.energy_recovery > 0:
            energy_rate = context.energy_recovery
        elif context.is_conscious:
            energy_rate = -ENERGY_DRAIN_PER_MINUTE
        else:
            energy_rate = 0.0
        needs.energy = clamp(needs.energy + energy_rate * minutes, 0.0, MAX_ENERGY)

        report.calories_burned = before.calories - needs.calories
        report.hydration_burned = before.hydration - needs.hydration
        report.energy_delta = needs.energy - before.energy

        # 2. Heat
        target = effective_temperature(context) + SKIN_OFFSET
        closed = 1.0 - (1.0 - CONVERGENCE_RATE) ** minutes
        needs.body_temperature = clamp(
            needs.body_temperature + (target - needs.body_temperature) * closed,
            MIN_BODY_TEMPERATURE, MAX_BODY_TEMPERATURE,
        )
        report.temperature_after = needs.body_temperature

        # 3. Report
        report.stage = self.stage
        report.signals = self.signals
        if report.stage != before_stage:
            emit_to(self.bus, EVT_TEMPERATURE_STAGE_CHANGED, "needs", self.owner,
                    old_stage=before_stage.value, new_stage=report.stage.value,
                    temperature=needs.body_temperature)
        for name, old, new in (("calories", before.calories, needs.calories),
                               ("hydration", before.hydration, needs.hydration),
                               ("energy", before.energy, needs.energy)):
            if old > 0 and new <= 0:
                logger.debug("%s: %s depleted", self.owner, name)
                emit_to(self.bus, EVT_NEED_DEPLETED, "needs", self.owner, need=name)

        self._consequences(minutes / 60.0, context, report)
        return report

    def _consequences(self, hours: float, context: SurvivalContext, report: NeedsReport) -> None:
        needs = self.needs
        temp = needs.body_temperature

        if needs.calories <= 0:
            report.damage.append(DamageInfo(STARVATION_DAMAGE * hours, DamageType.INTERNAL, source="starvation"))
        if needs.hydration <= 0:
            report.damage.append(DamageInfo(DEHYDRATION_DAMAGE * hours, DamageType.INTERNAL, source="dehydration"))

        if temp < FROSTBITE_THRESHOLD and context.limb_ids:
            severity = 1.0 + clamp01((FROSTBITE_THRESHOLD - temp) / (FROSTBITE_THRESHOLD - MIN_BODY_TEMPERATURE))
            per_limb = HYPOTHERMIA_DAMAGE * hours * severity / len(context.limb_ids)
            for limb in context.limb_ids:
                report.damage.append(DamageInfo(per_limb, DamageType.COLD, target=limb, source="hypothermia"))

        if temp > HEATSTROKE_THRESHOLD:
            report.damage.append(DamageInfo(HEATSTROKE_DAMAGE * hours, DamageType.HEAT, source="heatstroke"))

        well_fed = needs.calories > MAX_CALORIES * REGEN_MIN_CALORIES
        hydrated = needs.hydration > MAX_HYDRATION * REGEN_MIN_HYDRATION
        rested = needs.energy > MAX_ENERGY * REGEN_MIN_ENERGY
        if well_fed and hydrated and rested and context.is_damaged:
            nutrition = needs.calories / MAX_CALORIES
            report.healing.append(HealingInfo(REGEN_RATE * hours * nutrition, source="regeneration"))

    # ------------------------------------------------------------------
    # Raises (eating and drinking live outside the core)
    # ------------------------------------------------------------------

    def add_calories(self, amount: float) -> float:
        if not is_valid_magnitude(amount):
            logger.warning("Ignoring invalid calorie amount %r", amount)
            return 0.0
        before = self.needs.calories
        self.needs.calories = clamp(before + amount, 0.0, MAX_CALORIES)
        return self.needs.calories - before

    def add_hydration(self, amount: float) -> float:
        if not is_valid_magnitude(amount):
            logger.warning("Ignoring invalid hydration amount %r", amount)
            return 0.0
        before = self.needs.hydration
        self.needs.hydration = clamp(before + amount, 0.0, MAX_HYDRATION)
        return self.needs.hydration - before
