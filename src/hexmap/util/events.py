"""Typed event bus: decoupled notification of editor and content changes.

The core emits these events; rendering and inspector collaborators
subscribe to them instead of sharing mutable visual state.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Type

from hexmap.models.hex import AxialCoord

log = logging.getLogger(__name__)

T = TypeVar("T")


# -- Feedback events -----------------------------------------------------

@dataclass(frozen=True)
class HoverChanged:
    """The hovered cell changed (None = pointer left the grid)."""
    coord: Optional[AxialCoord]


@dataclass(frozen=True)
class SelectionChanged:
    """The selected cell changed (None = deselected)."""
    coord: Optional[AxialCoord]


# -- Content events ------------------------------------------------------

@dataclass(frozen=True)
class ContentInstantiated:
    """A cell's representation finished loading and was attached."""
    coord: AxialCoord
    content_id: str


@dataclass(frozen=True)
class ContentLoadFailed:
    """A cell's representation failed to load; the record is kept."""
    coord: AxialCoord
    content_id: str
    reason: str


@dataclass(frozen=True)
class CellCleared:
    """A cell's content was removed."""
    coord: AxialCoord
    content_id: str


# -- Event Bus -----------------------------------------------------------

class EventBus:
    """Synchronous, type-keyed dispatch of editor and content events.

    Handlers run on the emitting thread, in subscription order.  A handler
    that raises is logged and skipped so the remaining subscribers still
    see the event and the emitting lifecycle operation is not interrupted.

    Usage:
        bus = EventBus()
        unsubscribe = bus.on(CellCleared, inspector.refresh)
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> Callable[[], None]:
        """Subscribe ``handler`` to ``event_type``; returns an unsubscribe callable."""
        self._subscribers[event_type].append(handler)
        return lambda: self.off(event_type, handler)

    def off(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        subscribers = self._subscribers.get(event_type)
        if subscribers and handler in subscribers:
            subscribers.remove(handler)

    def subscriber_count(self, event_type: type) -> int:
        return len(self._subscribers.get(event_type, ()))

    def emit(self, event: object) -> None:
        # Snapshot: handlers may unsubscribe while being dispatched.
        for handler in tuple(self._subscribers.get(type(event), ())):
            try:
                handler(event)
            except Exception:
                log.exception("Handler %r failed on %s", handler, type(event).__name__)

    def clear(self) -> None:
        self._subscribers.clear()
