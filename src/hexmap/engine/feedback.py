"""Grid feedback: hover/selection notifications for the rendering layer.

The core never touches shared visual state; it pushes the current hovered
and selected coordinates through :class:`GridFeedbackPort`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from hexmap.models.hex import AxialCoord
from hexmap.util.events import HoverChanged, SelectionChanged

if TYPE_CHECKING:
    from hexmap.util.events import EventBus


class GridFeedbackPort(Protocol):
    """Outbound last-value sink for hover and selection."""

    def set_hovered(self, coord: Optional[AxialCoord]) -> None: ...

    def set_selected(self, coord: Optional[AxialCoord]) -> None: ...


class FeedbackState:
    """Holds the latest hovered/selected coordinate and announces changes.

    Setting a value overwrites the previous one; nothing is queued.  Events
    are only emitted when the value actually changes.

    Args:
        event_bus: Bus that receives HoverChanged / SelectionChanged.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._events = event_bus
        self.hovered: Optional[AxialCoord] = None
        self.selected: Optional[AxialCoord] = None

    def set_hovered(self, coord: Optional[AxialCoord]) -> None:
        if coord == self.hovered:
            return
        self.hovered = coord
        if self._events is not None:
            self._events.emit(HoverChanged(coord=coord))

    def set_selected(self, coord: Optional[AxialCoord]) -> None:
        if coord == self.selected:
            return
        self.selected = coord
        if self._events is not None:
            self._events.emit(SelectionChanged(coord=coord))
