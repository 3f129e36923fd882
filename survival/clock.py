"""
Frostbound - survival/clock.py
World clock in simulated minutes.
=================================
Version:     0.2
Stack:       Python 3.11+ | dataclasses
Status:      Stable.

Time only moves when a caller advances it. There are no background timers.
Fractional minutes are kept so the clock matches the span the models ran for.
"""

from dataclasses import dataclass
from typing import Any, Dict

# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR
START_HOUR = 9          # a new world starts mid-morning on day 1
NIGHT_START_HOUR = 20
NIGHT_END_HOUR = 6


@dataclass
class WorldClock:
    """
    Simulated calendar. total_minutes counts from 00:00 on day 1.
    """
    total_minutes: float = START_HOUR * MINUTES_PER_HOUR

    @property
    def day(self) -> int:
        return int(self.total_minutes // MINUTES_PER_DAY) + 1

    @property
    def hour(self) -> int:
        return int((self.total_minutes % MINUTES_PER_DAY) // MINUTES_PER_HOUR)

    @property
    def minute(self) -> int:
        return int(self.total_minutes % MINUTES_PER_HOUR)

    @property
    def is_night(self) -> bool:
        return self.hour >= NIGHT_START_HOUR or self.hour < NIGHT_END_HOUR

    def advance(self, minutes: float) -> None:
        """Move the clock forward. Negative spans are ignored."""
        if minutes <= 0:
            return
        self.total_minutes += minutes

    def to_dict(self) -> Dict[str, Any]:
        return {"day": self.day, "hour": self.hour, "minute": self.minute}

    def __str__(self) -> str:
        return f"Day {self.day}, {self.hour:02d}:{self.minute:02d}"
