"""
Frostbound - survival/events.py
Event Bus: typed pub-sub shared by the body, needs, fire and forage layers.
==========================================================================
Version:     0.2
Stack:       Python 3.11+ | Pydantic v2 | bespoke pub-sub
Status:      Stable.

Architecture notes
------------------
- Events are SurvivalEvent (pydantic BaseModel) envelopes.
- The bus is passed at construction. There is no global singleton.
- Models report threshold crossings through the bus; they never decide
  what a crossing means (no game-over logic lives in the core).
- Wildcard key "*" receives every emitted event.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ============================================================
# CANONICAL EVENT KEYS
# Never use raw strings. Add new keys here only.
# ============================================================

EVT_ON_DAMAGE                = "body.on_damage"
EVT_ON_HEAL                  = "body.on_heal"
EVT_PART_DESTROYED           = "body.part_destroyed"
EVT_CAPACITY_BAND_CHANGED    = "body.capacity_band_changed"
EVT_LOST_CONSCIOUSNESS       = "body.lost_consciousness"
EVT_REGAINED_CONSCIOUSNESS   = "body.regained_consciousness"

EVT_TEMPERATURE_STAGE_CHANGED = "survival.temperature_stage_changed"
EVT_NEED_DEPLETED            = "survival.need_depleted"

EVT_FIRE_LIT                 = "fire.lit"
EVT_FIRE_EXTINGUISHED        = "fire.extinguished"

EVT_ITEM_FORAGED             = "forage.item_found"

EVT_SKILL_CHECK              = "skill.check_resolved"
EVT_SKILL_LEVEL_UP           = "skill.level_up"

EVT_TIME_ADVANCED            = "world.time_advanced"

WILDCARD = "*"


# ============================================================
# EVENT MODEL  (Pydantic v2)
# data dict must remain flat + JSON-serializable.
# ============================================================

class SurvivalEvent(BaseModel):
    """Base envelope for every event on the bus."""
    event_key: str
    source: str
    target: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


HandlerFn = Callable[[SurvivalEvent], None]


class EventBus:
    """
    Bespoke pub-sub. Pass instance at construction; no global singleton.

    Per-handler errors are logged and swallowed so emission always
    reaches the remaining subscribers.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[HandlerFn]] = {}

    def subscribe(self, event_key: str, handler: HandlerFn) -> None:
        self._subscribers.setdefault(event_key, []).append(handler)

    def unsubscribe(self, event_key: str, handler: HandlerFn) -> None:
        if event_key in self._subscribers:
            self._subscribers[event_key] = [
                h for h in self._subscribers[event_key] if h != handler
            ]

    def emit(self, event: SurvivalEvent) -> None:
        targets = (
            self._subscribers.get(event.event_key, [])
            + self._subscribers.get(WILDCARD, [])
        )
        for handler in targets:
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Handler error on '%s'", event.event_key)


def emit_to(bus: Optional[EventBus], event_key: str, source: str,
            target: Optional[str] = None, **data: Any) -> None:
    """Emit on an optional bus. Models built without a bus stay silent."""
    if bus is None:
        return
    bus.emit(SurvivalEvent(event_key=event_key, source=source, target=target, data=data))
