"""
Frostbound - survival/body.py
Capacity Model: body-part condition, derived capacities, damage and healing.
===========================================================================
Version:     0.4
Stack:       Python 3.11+ | dataclasses | EventBus
Status:      Core numeric model.

Architecture notes
------------------
- Each BodyPart holds a condition in [0, 1]. Capacities are read-only views
  aggregated from the parts that serve them, then passed through the
  cascade rules (Breathing and BloodPumping feed Consciousness; an
  unconscious body barely moves or manipulates).
- Every aggregation is monotonic: raising any part's condition never lowers
  any capacity.
- Threshold crossings are reported on the bus (band changes, loss and
  recovery of consciousness, destroyed parts). Body never decides what a
  crossing means; is_alive is a query, nothing acts on it here.
- Untargeted damage spreads over parts by coverage. Untargeted healing
  spreads over damaged parts by coverage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from survival.data_loader import BodyDef, ConfigurationError, get_body_def
from survival.events import (
    EventBus,
    emit_to,
    EVT_ON_DAMAGE,
    EVT_ON_HEAL,
    EVT_PART_DESTROYED,
    EVT_CAPACITY_BAND_CHANGED,
    EVT_LOST_CONSCIOUSNESS,
    EVT_REGAINED_CONSCIOUSNESS,
)
from survival.numeric import clamp01, is_valid_magnitude

logger = logging.getLogger(__name__)


class Capacity(str, Enum):
    MOVING = "Moving"
    MANIPULATION = "Manipulation"
    BREATHING = "Breathing"
    BLOOD_PUMPING = "BloodPumping"
    CONSCIOUSNESS = "Consciousness"
    SIGHT = "Sight"
    HEARING = "Hearing"
    DIGESTION = "Digestion"


class DamageType(str, Enum):
    BLUNT = "blunt"
    SHARP = "sharp"
    PIERCE = "pierce"
    INTERNAL = "internal"
    COLD = "cold"
    HEAT = "heat"


# ================================================================================
# DESIGN VARIABLE DEFAULTS
# ================================================================================

DAMAGE_TYPE_MULTIPLIERS: Dict[DamageType, float] = {
    DamageType.BLUNT: 0.8,
    DamageType.SHARP: 1.0,
    DamageType.PIERCE: 1.2,
    DamageType.INTERNAL: 1.0,
    DamageType.COLD: 0.6,
    DamageType.HEAT: 0.6,
}

def _mean(values: List[float]) -> float:
    return sum(values) / len(values)

# How each capacity folds the conditions of its parts.
CAPACITY_AGGREGATORS = {
    Capacity.MOVING: _mean,
    Capacity.MANIPULATION: _mean,
    Capacity.BREATHING: _mean,
    Capacity.BLOOD_PUMPING: min,
    Capacity.CONSCIOUSNESS: min,
    Capacity.SIGHT: max,
    Capacity.HEARING: max,
    Capacity.DIGESTION: min,
}

CASCADE_SUPPLY_THRESHOLD = 0.3     # Breathing / BloodPumping below this dim Consciousness
CONSCIOUSNESS_THRESHOLD = 0.1      # below this the body is unconscious
UNCONSCIOUS_MOTOR_FACTOR = 0.1     # Moving and Manipulation while unconscious
FATAL_SUPPLY_LEVEL = 0.05          # BloodPumping / Breathing at or below this

BAND_FUNCTIONAL = "functional"
BAND_IMPAIRED = "impaired"
BAND_CRITICAL = "critical"
BAND_FAILED = "failed"


def capacity_band(value: float) -> str:
    if value >= 0.75:
        return BAND_FUNCTIONAL
    if value >= 0.25:
        return BAND_IMPAIRED
    if value > 0.0:
        return BAND_CRITICAL
    return BAND_FAILED


# ================================================================================
# VALUE TYPES
# ================================================================================

class CapacityContainer:
    """
    Fixed Capacity -> value mapping. Every capacity is always present and
    always in [0, 1]; missing entries read as fully functional.
    """

    def __init__(self, values: Optional[Dict[Capacity, float]] = None) -> None:
        values = values or {}
        self._values: Dict[Capacity, float] = {
            cap: clamp01(values.get(cap, 1.0)) for cap in Capacity
        }

    def __getitem__(self, capacity: Capacity) -> float:
        return self._values[Capacity(capacity)]

    def __iter__(self) -> Iterator[Capacity]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> Iterator[Tuple[Capacity, float]]:
        return iter(self._values.items())

    def to_dict(self) -> Dict[str, float]:
        return {cap.value: round(val, 4) for cap, val in self._values.items()}

    def __repr__(self) -> str:
        return f"CapacityContainer({self.to_dict()})"


@dataclass(frozen=True)
class DamageInfo:
    amount: float
    damage_type: DamageType = DamageType.BLUNT
    target: Optional[str] = None    # body part id; None spreads by coverage
    source: str = "unknown"


@dataclass(frozen=True)
class HealingInfo:
    amount: float
    quality: float = 1.0
    target: Optional[str] = None
    source: str = "unknown"


@dataclass
class BodyPart:
    id: str
    name: str
    max_health: float
    capacity: Optional[Capacity] = None
    coverage: float = 0.0
    vital: bool = False
    limb: bool = False
    condition: float = 1.0

    @property
    def health(self) -> float:
        return self.condition * self.max_health

    @property
    def is_destroyed(self) -> bool:
        return self.condition <= 0.0

    @property
    def is_damaged(self) -> bool:
        return self.condition < 1.0


@dataclass
class BodyChange:
    """What a damage or heal call actually did. Empty when it was a no-op."""
    total: float = 0.0                                   # condition moved, summed over parts
    parts: Dict[str, float] = field(default_factory=dict)
    destroyed: List[str] = field(default_factory=list)

    @property
    def applied(self) -> bool:
        return self.total > 0.0


# ================================================================================
# BODY
# ================================================================================

class Body:
    """
    A body-part tree reduced to what the survival core needs: parts with
    conditions and the capacities derived from them.
    """

    def __init__(self, name: str, parts: List[BodyPart],
                 bus: Optional[EventBus] = None, owner: str = "player") -> None:
        self.name = name
        self.owner = owner
        self.bus = bus
        self._parts: Dict[str, BodyPart] = {p.id: p for p in parts}

    @classmethod
    def from_template(cls, body_id: str = "human", bus: Optional[EventBus] = None,
                      owner: str = "player") -> "Body":
        return cls.from_def(get_body_def(body_id), bus=bus, owner=owner)

    @classmethod
    def from_def(cls, body_def: BodyDef, bus: Optional[EventBus] = None,
                 owner: str = "player") -> "Body":
        parts = []
        for pdef in body_def.parts:
            capacity = None
            if pdef.capacity is not None:
                try:
                    capacity = Capacity(pdef.capacity)
                except ValueError:
                    raise ConfigurationError(
                        f"Body '{body_def.id}' part '{pdef.id}' names unknown capacity {pdef.capacity!r}"
                    ) from None
            parts.append(BodyPart(
                id=pdef.id,
                name=pdef.name,
                max_health=pdef.max_health,
                capacity=capacity,
                coverage=pdef.coverage,
                vital=pdef.vital,
                limb=pdef.limb,
            ))
        return cls(body_def.name, parts, bus=bus, owner=owner)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def parts(self) -> List[BodyPart]:
        return list(self._parts.values())

    @property
    def limbs(self) -> List[BodyPart]:
        return [p for p in self._parts.values() if p.limb]

    def part(self, part_id: str) -> BodyPart:
        if part_id not in self._parts:
            raise ConfigurationError(f"Body '{self.name}' has no part {part_id!r}")
        return self._parts[part_id]

    @property
    def capacities(self) -> CapacityContainer:
        raw: Dict[Capacity, float] = {}
        for cap, fold in CAPACITY_AGGREGATORS.items():
            conditions = [p.condition for p in self._parts.values() if p.capacity == cap]
            raw[cap] = fold(conditions) if conditions else 1.0

        consciousness = raw[Capacity.CONSCIOUSNESS]
        consciousness *= min(1.0, raw[Capacity.BREATHING] / CASCADE_SUPPLY_THRESHOLD)
        consciousness *= min(1.0, raw[Capacity.BLOOD_PUMPING] / CASCADE_SUPPLY_THRESHOLD)
        raw[Capacity.CONSCIOUSNESS] = consciousness

        if consciousness < CONSCIOUSNESS_THRESHOLD:
            raw[Capacity.MOVING] *= UNCONSCIOUS_MOTOR_FACTOR
            raw[Capacity.MANIPULATION] *= UNCONSCIOUS_MOTOR_FACTOR

        return CapacityContainer(raw)

    def capacity(self, capacity: Capacity) -> float:
        return self.capacities[capacity]

    def band(self, capacity: Capacity) -> str:
        return capacity_band(self.capacities[capacity])

    @property
    def is_conscious(self) -> bool:
        return self.capacities[Capacity.CONSCIOUSNESS] >= CONSCIOUSNESS_THRESHOLD

    @property
    def is_alive(self) -> bool:
        if any(p.vital and p.is_destroyed for p in self._parts.values()):
            return False
        caps = self.capacities
        return (caps[Capacity.BLOOD_PUMPING] > FATAL_SUPPLY_LEVEL
                and caps[Capacity.BREATHING] > FATAL_SUPPLY_LEVEL)

    @property
    def is_damaged(self) -> bool:
        return any(p.is_damaged for p in self._parts.values())

    @property
    def overall_condition(self) -> float:
        """Coverage-weighted mean condition, for display."""
        total = sum(p.coverage for p in self._parts.values())
        if total <= 0:
            return _mean([p.condition for p in self._parts.values()])
        return sum(p.condition * p.coverage for p in self._parts.values()) / total

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def damage(self, info: DamageInfo) -> BodyChange:
        """
        Lowers condition on the target part (or spread by coverage).
        Loss per part = amount * type multiplier / max_health, clamped at 0.
        amount <= 0 is a no-op; negative or non-finite amounts are logged.
        """
        if not self._accepts(info.amount, "damage"):
            return BodyChange()

        multiplier = DAMAGE_TYPE_MULTIPLIERS[DamageType(info.damage_type)]
        shares = self._shares(info.target, lambda p: not p.is_destroyed)
        before = self.capacities
        change = BodyChange()

        for part, weight in shares:
            loss = min(part.condition, info.amount * weight * multiplier / part.max_health)
            if loss <= 0:
                continue
            part.condition = clamp01(part.condition - loss)
            change.parts[part.id] = loss
            change.total += loss
            if part.is_destroyed:
                change.destroyed.append(part.id)

        if change.applied:
            emit_to(self.bus, EVT_ON_DAMAGE, info.source, self.owner,
                    amount=info.amount, damage_type=DamageType(info.damage_type).value,
                    parts=sorted(change.parts))
            for part_id in change.destroyed:
                logger.debug("%s: %s destroyed", self.owner, part_id)
                emit_to(self.bus, EVT_PART_DESTROYED, info.source, self.owner,
                        part=part_id, vital=self._parts[part_id].vital)
            self._report_crossings(before, info.source)
        return change

    def heal(self, info: HealingInfo) -> BodyChange:
        """Raises condition by amount * quality / max_health, clamped at 1."""
        if not self._accepts(info.amount, "healing"):
            return BodyChange()
        if not is_valid_magnitude(info.quality) or info.quality == 0:
            return BodyChange()

        shares = self._shares(info.target, lambda p: p.is_damaged)
        before = self.capacities
        change = BodyChange()

        for part, weight in shares:
            gain = min(1.0 - part.condition, info.amount * weight * info.quality / part.max_health)
            if gain <= 0:
                continue
            part.condition = clamp01(part.condition + gain)
            change.parts[part.id] = gain
            change.total += gain

        if change.applied:
            emit_to(self.bus, EVT_ON_HEAL, info.source, self.owner,
                    amount=info.amount, parts=sorted(change.parts))
            self._report_crossings(before, info.source)
        return change

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _accepts(self, amount: float, kind: str) -> bool:
        if not is_valid_magnitude(amount):
            logger.warning("Ignoring %s with invalid amount %r on %s", kind, amount, self.owner)
            return False
        return amount > 0

    def _shares(self, target: Optional[str], eligible) -> List[Tuple[BodyPart, float]]:
        """(part, fraction of amount) pairs. A named target takes all of it."""
        if target is not None:
            return [(self.part(target), 1.0)]

        candidates = [p for p in self._parts.values() if eligible(p) and p.coverage > 0]
        total = sum(p.coverage for p in candidates)
        if total <= 0:
            return []
        return [(p, p.coverage / total) for p in candidates]

    def _report_crossings(self, before: CapacityContainer, source: str) -> None:
        after = self.capacities
        for cap in Capacity:
            old_band, new_band = capacity_band(before[cap]), capacity_band(after[cap])
            if old_band != new_band:
                emit_to(self.bus, EVT_CAPACITY_BAND_CHANGED, source, self.owner,
                        capacity=cap.value, old_band=old_band, new_band=new_band,
                        value=after[cap])

        was_conscious = before[Capacity.CONSCIOUSNESS] >= CONSCIOUSNESS_THRESHOLD
        now_conscious = after[Capacity.CONSCIOUSNESS] >= CONSCIOUSNESS_THRESHOLD
        if was_conscious and not now_conscious:
            logger.info("%s lost consciousness", self.owner)
            emit_to(self.bus, EVT_LOST_CONSCIOUSNESS, source, self.owner)
        elif now_conscious and not was_conscious:
            logger.info("%s regained consciousness", self.owner)
            emit_to(self.bus, EVT_REGAINED_CONSCIOUSNESS, source, self.owner)
