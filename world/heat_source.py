"""
Frostbound - world/heat_source.py
Heat Source: fuel and activation state machine for a campfire-like feature.
==========================================================================
Version:     0.3
Stack:       Python 3.11+ | EventBus
Status:      Stable.

States
------
    Inactive --add_fuel(>0)--> Active --update() burns out--> Inactive
    set_active(True) needs fuel; set_active(False) always wins.

IsActive implies fuel_remaining > 0 after every public call.
"""

from __future__ import annotations

import logging
from typing import Optional

from survival.events import EventBus, emit_to, EVT_FIRE_LIT, EVT_FIRE_EXTINGUISHED
from survival.numeric import is_valid_magnitude

logger = logging.getLogger(__name__)

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

DEFAULT_HEAT_OUTPUT = 15.0          # °F while active
DEFAULT_FUEL_CAPACITY = 8.0         # hours of burn at rate 1.0
DEFAULT_CONSUMPTION_RATE = 1.0      # fuel per hour


class HeatSource:
    """ECS component owned by a location feature entity."""

    def __init__(self, name: str = "Campfire", heat_output: float = DEFAULT_HEAT_OUTPUT,
                 fuel_capacity: float = DEFAULT_FUEL_CAPACITY,
                 fuel_consumption_rate: float = DEFAULT_CONSUMPTION_RATE,
                 bus: Optional[EventBus] = None) -> None:
        self.name = name
        self.heat_output = heat_output
        self.fuel_capacity = fuel_capacity
        self.fuel_consumption_rate = fuel_consumption_rate
        self.bus = bus
        self.fuel_remaining = 0.0
        self.is_active = False

    @property
    def effective_heat_output(self) -> float:
        return self.heat_output if self.is_active else 0.0

    @property
    def hours_remaining(self) -> float:
        if not self.is_active:
            return 0.0
        if self.fuel_consumption_rate <= 0:
            return float("inf")
        return self.fuel_remaining / self.fuel_consumption_rate

    def add_fuel(self, amount: float) -> float:
        """Adds fuel up to capacity and lights an unlit fire. Returns fuel accepted."""
        if not is_valid_magnitude(amount):
            logger.warning("%s: ignoring invalid fuel amount %r", self.name, amount)
            return 0.0
        if amount == 0:
            return 0.0

        before = self.fuel_remaining
        self.fuel_remaining = min(self.fuel_capacity, self.fuel_remaining + amount)
        logger.debug("%s: fuel %.2f -> %.2f", self.name, before, self.fuel_remaining)
        if not self.is_active and self.fuel_remaining > 0:
            self._transition(True, "fuel_added")
        return self.fuel_remaining - before

    def update(self, elapsed_hours: float) -> None:
        """Burns fuel for elapsed_hours. Goes inactive when it runs dry."""
        if not is_valid_magnitude(elapsed_hours):
            logger.warning("%s: ignoring invalid elapsed time %r", self.name, elapsed_hours)
            return
        if not self.is_active or self.fuel_remaining <= 0 or elapsed_hours == 0:
            return

        self.fuel_remaining = max(0.0, self.fuel_remaining - self.fuel_consumption_rate * elapsed_hours)
        if self.fuel_remaining <= 0:
            logger.debug("%s burned out", self.name)
            self._transition(False, "burned_out")

    def set_active(self, active: bool) -> bool:
        """Forces the state. Lighting without fuel fails. Returns the new state."""
        if active and self.fuel_remaining <= 0:
            return self.is_active
        if active != self.is_active:
            self._transition(active, "forced")
        return self.is_active

    def extinguish(self) -> None:
        """Douses the fire. Whatever fuel was left is lost."""
        self.fuel_remaining = 0.0
        if self.is_active:
            self._transition(False, "extinguished")

    def _transition(self, active: bool, reason: str) -> None:
        self.is_active = active
        key = EVT_FIRE_LIT if active else EVT_FIRE_EXTINGUISHED
        emit_to(self.bus, key, self.name, reason=reason, fuel_remaining=self.fuel_remaining)

    def __repr__(self) -> str:
        state = "Active" if self.is_active else "Inactive"
        return f"HeatSource({self.name!r}, {state}, fuel={self.fuel_remaining:.2f}/{self.fuel_capacity})"
