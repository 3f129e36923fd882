"""
Frostbound - survival/numeric.py
Clamp helpers shared by every numeric model.
"""

import math


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp01(value: float) -> float:
    """Clamp to [0, 1]. NaN collapses to 0.0 rather than leaking through."""
    if math.isnan(value):
        return 0.0
    return clamp(value, 0.0, 1.0)


def is_valid_magnitude(value: float) -> bool:
    """True for finite, non-negative numbers. Mutators guard on this."""
    try:
        return math.isfinite(value) and value >= 0
    except TypeError:
        return False
