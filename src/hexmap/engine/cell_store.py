"""Cell store: the single mapping from hex coordinate to cell record.

A pure mapping: it never creates or destroys representations.  Callers that
replace or remove a record receive it back and are responsible for
finalizing whatever it owns (see ``ContentService``).
"""

from __future__ import annotations

from hexmap.models.cell import CellRecord
from hexmap.models.hex import AxialCoord


class CellStore:
    """Mapping of occupied cells.

    Every key maps to a real record; emptying a cell removes its key.
    Iteration order is unspecified, sort externally where it matters.
    """

    def __init__(self) -> None:
        self._cells: dict[AxialCoord, CellRecord] = {}

    # -- Queries ---------------------------------------------------------

    def get(self, coord: AxialCoord) -> CellRecord | None:
        return self._cells.get(coord)

    def items(self) -> list[tuple[AxialCoord, CellRecord]]:
        """Snapshot of all (coord, record) pairs."""
        return list(self._cells.items())

    def coords(self) -> list[AxialCoord]:
        return list(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    # -- Mutation --------------------------------------------------------

    def put(self, coord: AxialCoord, record: CellRecord) -> None:
        """Insert or overwrite the record at ``coord``.

        A previous record's representation is NOT released here.
        """
        if record is None:
            raise ValueError("CellStore does not hold empty records; use remove()")
        self._cells[coord] = record

    def remove(self, coord: AxialCoord) -> CellRecord | None:
        """Delete ``coord`` and return its record for finalization."""
        return self._cells.pop(coord, None)

    def clear(self) -> list[tuple[AxialCoord, CellRecord]]:
        """Empty the store and return every removed record."""
        removed = list(self._cells.items())
        self._cells.clear()
        return removed
