"""
Frostbound - survival/loop.py
Simulation Session: owns one player's world and drives every tick.
=================================================================
Version:     0.4
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Integration entry point.

Architecture notes
------------------
- One session exclusively owns one player: registry, bus, seeded rng,
  world clock, body, needs and the locations the player has visited.
  Nothing is global, so two sessions never share state.
- advance() is the only way time moves. It runs in steps of at most
  MAX_STEP_MINUTES so thresholds and burn-outs land close to when they
  happen.
- Not thread-safe. A host serving several players serialises calls per
  session.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import tcod.ecs

from survival.activity import ActivityType, get_activity_config
from survival.body import Body, Capacity, CapacityContainer
from survival.clock import WorldClock
from survival.ecs.components import (
    Clothing,
    CurrentActivity,
    EntityIdentity,
    FoodValue,
    FuelValue,
    Location,
    Needs,
    Quantity,
    Skills,
)
from survival.ecs.systems import (
    capacity_effect_system,
    heat_source_system,
    needs_decay_system,
    survival_context_system,
)
from survival.events import (
    EventBus,
    emit_to,
    EVT_SKILL_CHECK,
    EVT_SKILL_LEVEL_UP,
    EVT_TIME_ADVANCED,
)
from survival.needs import NeedsDecayModel, TemperatureStage
from survival.numeric import is_valid_magnitude
from survival.skill_check import SkillCheckResult, SkillType, resolve_skill_check
from world.forage import ForageSampler, CONTAINS
from world.heat_source import HeatSource
from world.location import add_heat_source, create_location, heat_sources

logger = logging.getLogger(__name__)

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

MAX_STEP_MINUTES = 5
DEFAULT_CLOTHING_INSULATION = 0.4
DEFAULT_TRAVEL_MINUTES = 60

FIRE_START_MINUTES = 10
FIRE_START_DC = 1
FIRE_START_SUCCESS_XP = 3
FIRE_START_FAILURE_XP = 1
KINDLING_FUEL_HOURS = 0.5


@dataclass
class SimulationContext:
    """Seedable randomness plus the world clock, threaded into every tick."""
    rng: random.Random
    clock: WorldClock = field(default_factory=WorldClock)

    @classmethod
    def seeded(cls, seed: Optional[int] = None) -> "SimulationContext":
        return cls(rng=random.Random(seed), clock=WorldClock())


@dataclass
class TickReport:
    minutes: float = 0.0
    calories_burned: float = 0.0
    hydration_burned: float = 0.0
    energy_delta: float = 0.0
    damage_taken: float = 0.0
    healing_done: float = 0.0
    body_temperature: float = 0.0
    stage: TemperatureStage = TemperatureStage.WARM
    signals: Set[str] = field(default_factory=set)
    event_multiplier: float = 0.0
    burned_out: List[str] = field(default_factory=list)


class SimulationSession:
    """
    The tick driver plus the player actions that cost time.
    """

    def __init__(self, seed: Optional[int] = None, start_location: str = "clearing",
                 body_id: str = "human", name: str = "Survivor",
                 clothing_insulation: float = DEFAULT_CLOTHING_INSULATION,
                 bus: Optional[EventBus] = None) -> None:
        self.registry = tcod.ecs.Registry()
        self.bus = bus if bus is not None else EventBus()
        self.context = SimulationContext.seeded(seed)

        self.player = self.registry.new_entity()
        self.player.tags.add("player")
        self.player.components[EntityIdentity] = EntityIdentity(entity_id="player", name=name, is_player=True)
        self.player.components[Body] = Body.from_template(body_id, bus=self.bus, owner=name)
        self.player.components[NeedsDecayModel] = NeedsDecayModel(bus=self.bus, owner=name)
        self.player.components[Needs] = self.player.components[NeedsDecayModel].needs
        self.player.components[Clothing] = Clothing(insulation=clothing_insulation)
        self.player.components[CurrentActivity] = CurrentActivity()
        self.player.components[Skills] = Skills()

        self.locations: Dict[str, tcod.ecs.Entity] = {}
        self.location = self._visit(start_location)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def rng(self) -> random.Random:
        return self.context.rng

    @property
    def clock(self) -> WorldClock:
        return self.context.clock

    @property
    def body(self) -> Body:
        return self.player.components[Body]

    @property
    def needs(self) -> Needs:
        return self.player.components[Needs]

    @property
    def needs_model(self) -> NeedsDecayModel:
        return self.player.components[NeedsDecayModel]

    @property
    def capacities(self) -> CapacityContainer:
        return self.body.capacities

    @property
    def activity(self) -> ActivityType:
        return self.player.components[CurrentActivity].activity

    @property
    def heat_sources(self) -> List[HeatSource]:
        return heat_sources(self.location)

    @property
    def campfire(self) -> Optional[HeatSource]:
        sources = self.heat_sources
        return sources[0] if sources else None

    @property
    def forage_sampler(self) -> ForageSampler:
        return self.location.components[ForageSampler]

    def set_activity(self, activity: ActivityType) -> None:
        get_activity_config(activity)
        self.player.components[CurrentActivity].activity = ActivityType(activity)

    # ------------------------------------------------------------------
    # Tick driver
    # ------------------------------------------------------------------

    def advance(self, minutes: float, activity: Optional[ActivityType] = None) -> TickReport:
        """
        Advances the world by minutes while the player does activity (the
        current activity when None). The previous activity is restored
        afterwards.
        """
        needs = self.needs
        report = TickReport(body_temperature=needs.body_temperature,
                            stage=self.needs_model.stage, signals=self.needs_model.signals)
        if not is_valid_magnitude(minutes):
            logger.warning("Ignoring advance with invalid span %r", minutes)
            return report

        previous = self.activity
        if activity is not None:
            self.set_activity(activity)
        try:
            remaining = minutes
            while remaining > 0:
                step = min(MAX_STEP_MINUTES, remaining)
                context = survival_context_system(self.player, self.location, self.clock)
                needs_report = needs_decay_system(self.player, step, context)
                effects = capacity_effect_system(self.player, needs_report)
                burned_out = heat_source_system(self.location, step)
                self.clock.advance(step)

                report.minutes += step
                report.calories_burned += needs_report.calories_burned
                report.hydration_burned += needs_report.hydration_burned
                report.energy_delta += needs_report.energy_delta
                report.damage_taken += effects.damage_taken
                report.healing_done += effects.healing_done
                report.signals |= needs_report.signals
                report.event_multiplier = context.event_multiplier
                report.burned_out.extend(s.name for s in burned_out)
                remaining -= step
        finally:
            self.player.components[CurrentActivity].activity = previous

        report.body_temperature = needs.body_temperature
        report.stage = self.needs_model.stage
        emit_to(self.bus, EVT_TIME_ADVANCED, "session", minutes=report.minutes, **self.clock.to_dict())
        return report

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def travel_to(self, template_id: str, minutes: int = DEFAULT_TRAVEL_MINUTES) -> TickReport:
        """Walks to a location, creating it on first visit."""
        report = self.advance(minutes, ActivityType.TRAVELING)
        self.location = self._visit(template_id)
        logger.info("Arrived at %s (%s)", self.location.components[Location].name, self.clock)
        return report

    def forage(self, hours: int) -> List[tcod.ecs.Entity]:
        """Searches the current location. Time passes as foraging."""
        return self.forage_sampler.forage(
            hours, self.rng, lambda m: self.advance(m, ActivityType.FORAGING)
        )

    def add_fuel(self, amount: float) -> float:
        fire = self.campfire
        if fire is None:
            logger.warning("No heat source at %s to fuel", self.location.components[Location].name)
            return 0.0
        return fire.add_fuel(amount)

    def burn_item(self, item: tcod.ecs.Entity) -> float:
        """Feeds one unit of a fuel item to the fire."""
        if FuelValue not in item.components or self.campfire is None:
            return 0.0
        accepted = self.add_fuel(item.components[FuelValue].hours)
        if accepted > 0:
            self._use_one(item)
        return accepted

    def start_fire(self, base_chance: float = 0.6) -> SkillCheckResult:
        """
        Ten minutes of work, then a firecraft check. Hands and a clear head
        both matter. Success lays kindling, which lights the fire.
        """
        self.advance(FIRE_START_MINUTES, ActivityType.TENDING_FIRE)
        caps = self.capacities
        chance = base_chance * caps[Capacity.MANIPULATION] * caps[Capacity.CONSCIOUSNESS]
        result = self.skill_check(SkillType.FIRECRAFT, chance, FIRE_START_DC,
                                  FIRE_START_SUCCESS_XP, FIRE_START_FAILURE_XP)
        if result.success:
            fire = self.campfire or add_heat_source(self.registry, self.location, bus=self.bus)
            fire.add_fuel(KINDLING_FUEL_HOURS)
        return result

    def skill_check(self, skill: SkillType, base_chance: float, dc: int,
                    success_xp: int, failure_xp: int = 1) -> SkillCheckResult:
        record = self.player.components[Skills].get(skill)
        result = resolve_skill_check(self.rng, base_chance, record.level, dc, success_xp, failure_xp)
        emit_to(self.bus, EVT_SKILL_CHECK, "session", skill=SkillType(skill).value, **result.to_dict())

        levels = record.gain_experience(result.xp)
        if levels:
            logger.info("%s rose to level %d", SkillType(skill).value, record.level)
            emit_to(self.bus, EVT_SKILL_LEVEL_UP, "session", skill=SkillType(skill).value, level=record.level)
        return result

    def eat(self, calories: float) -> float:
        return self.needs_model.add_calories(calories)

    def drink(self, ml: float) -> float:
        return self.needs_model.add_hydration(ml)

    def consume_item(self, item: tcod.ecs.Entity) -> bool:
        """Eats or drinks one unit of an item carrying FoodValue."""
        if FoodValue not in item.components:
            return False
        food = item.components[FoodValue]
        self.eat(food.calories)
        self.drink(food.water)
        self._use_one(item)
        return True

    def status(self) -> Dict[str, Any]:
        needs = self.needs
        return {
            "time": str(self.clock),
            "location": self.location.components[Location].name,
            "activity": self.activity.value,
            "calories": round(needs.calories, 1),
            "hydration": round(needs.hydration, 1),
            "energy": round(needs.energy, 1),
            "body_temperature": round(needs.body_temperature, 2),
            "stage": self.needs_model.stage.value,
            "signals": sorted(self.needs_model.signals),
            "capacities": self.capacities.to_dict(),
            "alive": self.body.is_alive,
            "fires": [repr(h) for h in self.heat_sources],
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _visit(self, template_id: str) -> tcod.ecs.Entity:
        if template_id not in self.locations:
            self.locations[template_id] = create_location(self.registry, template_id, bus=self.bus)
        return self.locations[template_id]

    def _use_one(self, item: tcod.ecs.Entity) -> None:
        qty = item.components.get(Quantity)
        if qty is not None and qty.amount > 1:
            qty.amount -= 1
            return
        for location in self.locations.values():
            if item in location.relation_tags_many[CONTAINS]:
                location.relation_tags_many[CONTAINS].remove(item)
        item.clear()
