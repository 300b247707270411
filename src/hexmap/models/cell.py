"""Cell records: the content assigned to one occupied hex cell."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from hexmap.models.hex import AxialCoord


class CellState(Enum):
    """Lifecycle state of an occupied cell.

    An empty cell has no record at all, so there is no EMPTY member.
    """

    LOADING = "loading"
    INSTANTIATED = "instantiated"
    UNREALIZED = "unrealized"  # content assigned, no live representation


@dataclass
class CellRecord:
    """One occupied grid cell.

    Attributes:
        content_id: Stable key of the assigned content; used to detect
            re-selection of the same content.
        label: Human-readable name shown in editor panels.
        asset_ref: Opaque handle passed to the asset loader, never dereferenced.
        representation: The live instantiated object, if any.
        state: Current lifecycle state.
        show_preview: Whether the rendering layer should draw a preview overlay.
    """

    content_id: str
    label: str
    asset_ref: Any = None
    representation: Optional[Any] = None
    state: CellState = CellState.UNREALIZED
    show_preview: bool = True

    @property
    def has_content(self) -> bool:
        return self.asset_ref is not None

    @property
    def is_instantiated(self) -> bool:
        return self.representation is not None


@dataclass(frozen=True)
class CellSummary:
    """Read-only view of a cell for preview overlays."""

    coord: AxialCoord
    label: str
    has_content: bool
