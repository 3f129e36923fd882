"""
Frostbound - survival/ecs/systems.py
ECS Systems: pure functions for one survival tick.
==================================================
Version:     0.3
Stack:       Python 3.11+ | python-tcod-ecs
Status:      Stable.

Architecture notes
------------------
- Systems are pure functions over entities; threshold crossings travel on
  the EventBus owned by the models they drive.
- Dispatch order is authoritative, see SimulationSession.advance:
  context -> needs decay -> capacity effects -> heat sources -> clock.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List

import tcod.ecs

from survival.body import Body
from survival.clock import WorldClock
from survival.ecs.components import Clothing, CurrentActivity, Location, SurvivalContext
from survival.needs import NeedsDecayModel, NeedsReport, gather_survival_context
from world.heat_source import HeatSource
from world.location import heat_sources

# ============================================================
# TICK SYSTEMS
# ============================================================

def survival_context_system(player: tcod.ecs.Entity, location: tcod.ecs.Entity,
                            clock: WorldClock) -> SurvivalContext:
    """Snapshots the player's situation at the current location."""
    activity = player.components[CurrentActivity].activity
    clothing = player.components.get(Clothing)
    return gather_survival_context(
        activity,
        location.components[Location].temperature,
        body=player.components.get(Body),
        active_heat_outputs=[h.heat_output for h in heat_sources(location) if h.is_active],
        is_night=clock.is_night,
        clothing_insulation=clothing.insulation if clothing else 0.0,
    )

def needs_decay_system(player: tcod.ecs.Entity, minutes: float,
                       context: SurvivalContext) -> NeedsReport:
    return player.components[NeedsDecayModel].advance(minutes, context)

@dataclass
class CapacityEffects:
    damage_taken: float = 0.0       # condition lost, summed over parts
    healing_done: float = 0.0

def capacity_effect_system(player: tcod.ecs.Entity, report: NeedsReport) -> CapacityEffects:
    """Applies the damage and healing a needs report asks for."""
    body = player.components[Body]
    effects = CapacityEffects()
    for info in report.damage:
        effects.damage_taken += body.damage(info).total
    for info in report.healing:
        effects.healing_done += body.heal(info).total
    return effects

def heat_source_system(location: tcod.ecs.Entity, minutes: float) -> List[HeatSource]:
    """Burns fuel on every heat source here. Returns those that went out."""
    burned_out = []
    for source in heat_sources(location):
        was_active = source.is_active
        source.update(minutes / 60.0)
        if was_active and not source.is_active:
            burned_out.append(source)
    return burned_out
