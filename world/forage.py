"""
Frostbound - world/forage.py
Forage Sampler: per-location resource discovery with harmonic depletion.
=======================================================================
Version:     0.3
Stack:       Python 3.11+ | python-tcod-ecs | EventBus
Status:      Stable.

For each simulated hour:
    density = base_resource_density / (hours_foraged + 1)
    every registered resource rolls independently at clamp01(density * abundance)
    hours_foraged += 1, found or not
Then the world clock advances hours * 60 minutes through the caller's
callback, so foraging always pays its time in hunger, thirst and cold.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import tcod.ecs

from survival.data_loader import ConfigurationError
from survival.events import EventBus, emit_to, EVT_ITEM_FORAGED
from survival.numeric import clamp01
from survival.skill_check import RandomSource, determine_success

logger = logging.getLogger(__name__)

DISCOVERED_TAG = "discovered"
CONTAINS = "Contains"


ItemFactory = Callable[[], Any]
ClockCallback = Callable[[int], Any]


@dataclass(frozen=True)
class ForageRegistration:
    name: str
    factory: ItemFactory
    abundance: float


class ForageSampler:
    """ECS component on a location entity. Holds registrations and the depletion counter."""

    def __init__(self, base_resource_density: float = 1.0,
                 location: Optional[tcod.ecs.Entity] = None,
                 bus: Optional[EventBus] = None) -> None:
        self.base_resource_density = base_resource_density
        self.location = location
        self.bus = bus
        self.hours_foraged = 0
        self.resources: List[ForageRegistration] = []
        self.known_resources: List[str] = []

    @property
    def resource_density(self) -> float:
        return self.base_resource_density / (self.hours_foraged + 1)

    def add_resource(self, factory: ItemFactory, abundance: float, name: Optional[str] = None) -> None:
        """Register once, at world generation, before the first forage call."""
        if not isinstance(abundance, (int, float)) or not math.isfinite(abundance) or abundance <= 0:
            raise ConfigurationError(f"Forage abundance must be a positive number, got {abundance!r}")
        name = name or getattr(factory, "__name__", "resource")
        self.resources.append(ForageRegistration(name=name, factory=factory, abundance=abundance))

    def forage(self, hours: int, rng: RandomSource,
               advance_clock: Optional[ClockCallback] = None) -> List[Any]:
        """Search for whole hours. Returns every item found, in discovery order."""
        if isinstance(hours, bool) or not isinstance(hours, int) or hours <= 0:
            logger.warning("Ignoring forage with invalid hours %r", hours)
            return []

        found: List[Any] = []
        for _ in range(hours):
            density = self.resource_density
            for resource in self.resources:
                chance = clamp01(density * resource.abundance)
                if determine_success(rng, chance):
                    found.append(self._discover(resource))
            self.hours_foraged += 1

        logger.debug("Foraged %d h, found %d item(s); density now %.3f",
                     hours, len(found), self.resource_density)
        if advance_clock is not None:
            advance_clock(hours * 60)
        return found

    def _discover(self, resource: ForageRegistration) -> Any:
        item = resource.factory()
        if resource.name not in self.known_resources:
            self.known_resources.append(resource.name)
        if isinstance(item, tcod.ecs.Entity):
            item.tags.add(DISCOVERED_TAG)
            if self.location is not None:
                self.location.relation_tags_many[CONTAINS].add(item)
        emit_to(self.bus, EVT_ITEM_FORAGED, "forage", item=resource.name)
        return item
