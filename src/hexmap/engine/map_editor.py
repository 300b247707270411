"""Map editor: turns pointer input into hover, selection and placement.

The input collaborator ray-casts against the grid plane and hands over a
world point plus the kind of pointer event.  Everything after that (which
cell, hover vs. click, click-to-deselect, placing content in the selected
cell) is decided here.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from hexmap.models.hex import AxialCoord

if TYPE_CHECKING:
    from hexmap.engine.content_service import ContentService, PendingLoad
    from hexmap.engine.feedback import GridFeedbackPort
    from hexmap.engine.plane_projector import PlaneProjector
    from hexmap.models.cell import CellRecord
    from hexmap.util.hex_math import Point

log = logging.getLogger(__name__)


class PointerKind(Enum):
    MOVE = "move"
    PRIMARY_DOWN = "primary-down"


class MapEditor:
    """Editor-side controller for one hex map.

    Args:
        projector: Converts pointer positions to cells.
        content: Content service that owns the cells.
        feedback: Receives hover/selection state.
    """

    def __init__(
        self,
        projector: PlaneProjector,
        content: ContentService,
        feedback: GridFeedbackPort,
    ) -> None:
        self._projector = projector
        self._content = content
        self._feedback = feedback
        self._selected: Optional[AxialCoord] = None

    @property
    def selected(self) -> Optional[AxialCoord]:
        return self._selected

    # -- Pointer input ---------------------------------------------------

    def handle_pointer(self, kind: PointerKind, point: Point) -> Optional[AxialCoord]:
        """Process one pointer event.

        Returns:
            The cell under the pointer, or None if the point is off the plane.
        """
        if not self._projector.contains(point):
            return None
        coord = self._projector.point_to_hex(point)

        if kind is PointerKind.MOVE:
            self._feedback.set_hovered(coord)
        elif kind is PointerKind.PRIMARY_DOWN:
            self._toggle_selection(coord)
        return coord

    def pointer_left(self) -> None:
        """The pointer left the grid; drop the hover highlight."""
        self._feedback.set_hovered(None)

    def _toggle_selection(self, coord: AxialCoord) -> None:
        if self._selected == coord:
            self._selected = None
        else:
            self._selected = coord
        self._feedback.set_selected(self._selected)
        log.debug("Selection: %r", self._selected)

    # -- Selected-cell actions -------------------------------------------

    def selected_cell(self) -> CellRecord | None:
        if self._selected is None:
            return None
        return self._content.get(self._selected)

    def place(self, content_id: str, label: str, asset_ref: Any) -> PendingLoad | None:
        """Assign content to the selected cell (no-op without a selection)."""
        if self._selected is None:
            return None
        return self._content.assign(self._selected, content_id, label, asset_ref)

    def clear_selected(self) -> bool:
        if self._selected is None:
            return False
        return self._content.clear(self._selected)

    def clear_all(self) -> int:
        return self._content.clear_all()
