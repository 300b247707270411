"""Content service: owns the lifecycle of every cell's representation.

Guarantees at most one live representation per coordinate, even when new
assignments race with slow asynchronous loads.

Per-coordinate states:
    (empty) → LOADING → INSTANTIATED
    LOADING / INSTANTIATED → (empty)      via clear()
    LOADING / INSTANTIATED → LOADING      via assign() with new content
    LOADING → UNREALIZED                  when the load fails

All mutations run on the event loop thread.  A load is never cancelled
when its cell changes; it is *superseded*: the task runs to completion and
its representation is released on arrival instead of being installed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from hexmap.models.cell import CellRecord, CellState, CellSummary
from hexmap.models.hex import AxialCoord
from hexmap.util.errors import AssetResolutionFailed, InstantiationFailed
from hexmap.util.events import CellCleared, ContentInstantiated, ContentLoadFailed

if TYPE_CHECKING:
    from hexmap.engine.asset_loader import AssetLoader
    from hexmap.engine.cell_store import CellStore
    from hexmap.engine.plane_projector import PlaneProjector
    from hexmap.util.events import EventBus
    from hexmap.util.hex_math import Point

log = logging.getLogger(__name__)


class LoadOutcome(Enum):
    """How a load task ended."""

    INSTANTIATED = "instantiated"
    SUPERSEDED = "superseded"  # result discarded, not an error
    FAILED = "failed"


@dataclass(frozen=True)
class LoadResult:
    """Value returned by every load task and passed to ``on_result``."""

    coord: AxialCoord
    content_id: str
    outcome: LoadOutcome
    error: Optional[InstantiationFailed] = None


@dataclass(eq=False)
class PendingLoad:
    """An outstanding instantiation for one cell.

    Attributes:
        coord: Target cell.
        content_id: Content requested when the load was issued.
        record: The record the representation will be attached to.
        task: The asyncio task running the load.
        superseded: Set once a newer assignment or a clear took over the
            cell; the load's result is then discarded on arrival.
    """

    coord: AxialCoord
    content_id: str
    record: CellRecord
    task: Optional[asyncio.Task] = None
    superseded: bool = False


ResultCallback = Callable[[LoadResult], None]


class ContentService:
    """Assigns, replaces and clears cell content.

    Args:
        store: The cell store this service has exclusive write access to.
        projector: Used to place representations at cell centres.
        loader: Asset loading capability.
        event_bus: Optional bus for content events.
    """

    def __init__(
        self,
        store: CellStore,
        projector: PlaneProjector,
        loader: AssetLoader,
        event_bus: EventBus | None = None,
    ) -> None:
        self._store = store
        self._projector = projector
        self._loader = loader
        self._events = event_bus
        self._pending: dict[AxialCoord, PendingLoad] = {}
        self._tasks: set[asyncio.Task] = set()

    # -- Queries ---------------------------------------------------------

    @property
    def store(self) -> CellStore:
        """Read-only use only; mutate through this service."""
        return self._store

    def get(self, coord: AxialCoord) -> CellRecord | None:
        return self._store.get(coord)

    def pending(self, coord: AxialCoord) -> PendingLoad | None:
        """The non-superseded load outstanding for ``coord``, if any."""
        return self._pending.get(coord)

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def summaries(self) -> list[CellSummary]:
        """(coord, label, has_content) per occupied cell, sorted by (q, r)."""
        return [
            CellSummary(coord=coord, label=record.label, has_content=record.has_content)
            for coord, record in self.snapshot()
        ]

    def snapshot(self) -> list[tuple[AxialCoord, CellRecord]]:
        """All occupied cells sorted by (q, r)."""
        return sorted(self._store.items(), key=lambda item: (item[0].q, item[0].r))

    # -- Assignment ------------------------------------------------------

    def assign(
        self,
        coord: AxialCoord,
        content_id: str,
        label: str,
        asset_ref: Any,
        on_result: ResultCallback | None = None,
        show_preview: bool = True,
    ) -> PendingLoad | None:
        """Place content in a cell, replacing whatever is there.

        Must be called from within the running event loop.  Returns the
        pending load, or None when the same content is already loading or
        instantiated in the cell (re-selection is a no-op).

        Raises:
            AssetResolutionFailed: ``asset_ref`` does not resolve; the cell
                is left untouched.
        """
        if asset_ref is None or not self._loader.is_valid(asset_ref):
            log.warning("Cell %s: cannot resolve asset %r for %r",
                        coord.key(), asset_ref, content_id)
            raise AssetResolutionFailed(asset_ref)

        current = self._store.get(coord)
        if (current is not None
                and current.content_id == content_id
                and current.asset_ref == asset_ref
                and current.state is not CellState.UNREALIZED):
            current.label = label
            log.debug("Cell %s: %r re-selected, nothing to do", coord.key(), content_id)
            return self._pending.get(coord)

        loop = asyncio.get_running_loop()

        # 1. An in-flight load for this cell must never install its result.
        self._supersede(coord)
        # 2. The old representation goes before the new one is requested.
        if current is not None:
            self._release(coord, current)

        # 3. New record, visible immediately as LOADING.
        record = CellRecord(
            content_id=content_id,
            label=label,
            asset_ref=asset_ref,
            state=CellState.LOADING,
            show_preview=show_preview,
        )
        self._store.put(coord, record)

        # 4. Issue the load at the cell centre.
        pending = PendingLoad(coord=coord, content_id=content_id, record=record)
        self._pending[coord] = pending
        position = self._projector.hex_to_point(coord)
        task = loop.create_task(
            self._load(pending, asset_ref, position, on_result),
            name=f"load-{coord.key()}-{content_id}",
        )
        pending.task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        log.info("Cell %s: loading %r (%s)", coord.key(), content_id, label)
        return pending

    # -- Removal ---------------------------------------------------------

    def clear(self, coord: AxialCoord) -> bool:
        """Remove a cell's content.  Returns False if the cell was empty."""
        self._supersede(coord)
        record = self._store.remove(coord)
        if record is None:
            return False
        try:
            self._release(coord, record)
        finally:
            log.info("Cell %s: cleared %r", coord.key(), record.content_id)
            self._emit(CellCleared(coord=coord, content_id=record.content_id))
        return True

    def clear_all(self) -> int:
        """Remove every cell's content.  Returns the number of cells cleared.

        Every removed representation is released even if some releases
        fail; the first failure is re-raised once all cells are cleared.
        """
        removed = self._store.clear()
        for coord in list(self._pending):
            self._supersede(coord)
        errors: list[Exception] = []
        for coord, record in removed:
            try:
                self._release(coord, record)
            except Exception as exc:
                log.exception("Cell %s: releasing %r failed", coord.key(), record.content_id)
                errors.append(exc)
            self._emit(CellCleared(coord=coord, content_id=record.content_id))
        log.info("Cleared all cells (%d removed, %d release failures)",
                 len(removed), len(errors))
        if errors:
            raise errors[0]
        return len(removed)

    # -- Bulk restore ----------------------------------------------------

    def restore(
        self,
        cells: Iterable[tuple[AxialCoord, CellRecord]],
        instantiate: bool = True,
    ) -> int:
        """Replace the whole map with persisted cells.

        With ``instantiate`` the cells are loaded through :meth:`assign`
        (needs a running loop); otherwise, and for references that no
        longer resolve, they are stored as UNREALIZED.

        Returns:
            Number of cells restored.
        """
        self.clear_all()
        count = 0
        for coord, saved in cells:
            if instantiate and saved.asset_ref is not None and self._loader.is_valid(saved.asset_ref):
                self.assign(coord, saved.content_id, saved.label, saved.asset_ref,
                            show_preview=saved.show_preview)
            else:
                if instantiate:
                    log.warning("Cell %s: restored %r without a loadable asset (%r)",
                                coord.key(), saved.content_id, saved.asset_ref)
                self._store.put(coord, CellRecord(
                    content_id=saved.content_id,
                    label=saved.label,
                    asset_ref=saved.asset_ref,
                    state=CellState.UNREALIZED,
                    show_preview=saved.show_preview,
                ))
            count += 1
        log.info("Restored %d cells", count)
        return count

    async def wait_idle(self) -> None:
        """Wait until every load task, superseded ones included, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # -- Load task -------------------------------------------------------

    async def _load(
        self,
        pending: PendingLoad,
        asset_ref: Any,
        position: Point,
        on_result: ResultCallback | None,
    ) -> LoadResult:
        try:
            representation = await self._loader.instantiate(asset_ref, position)
        except asyncio.CancelledError:
            self._drop_pending(pending)
            if not pending.superseded and self._store.get(pending.coord) is pending.record:
                pending.record.state = CellState.UNREALIZED
            raise
        except Exception as exc:
            result = self._on_failure(pending, exc)
        else:
            result = self._on_success(pending, representation)

        if on_result is not None:
            on_result(result)
        return result

    def _on_success(self, pending: PendingLoad, representation: Any) -> LoadResult:
        self._drop_pending(pending)
        if self._is_stale(pending):
            self._loader.release(representation)
            log.debug("Cell %s: discarded superseded load of %r",
                      pending.coord.key(), pending.content_id)
            return LoadResult(pending.coord, pending.content_id, LoadOutcome.SUPERSEDED)

        record = pending.record
        record.representation = representation
        record.state = CellState.INSTANTIATED
        log.info("Cell %s: %r instantiated", pending.coord.key(), pending.content_id)
        self._emit(ContentInstantiated(coord=pending.coord, content_id=pending.content_id))
        return LoadResult(pending.coord, pending.content_id, LoadOutcome.INSTANTIATED)

    def _on_failure(self, pending: PendingLoad, exc: Exception) -> LoadResult:
        self._drop_pending(pending)
        if self._is_stale(pending):
            log.debug("Cell %s: superseded load of %r failed (%s), ignored",
                      pending.coord.key(), pending.content_id, exc)
            return LoadResult(pending.coord, pending.content_id, LoadOutcome.SUPERSEDED)

        pending.record.state = CellState.UNREALIZED
        error = InstantiationFailed(pending.coord, pending.content_id, exc)
        log.warning("Cell %s: %s", pending.coord.key(), error)
        self._emit(ContentLoadFailed(coord=pending.coord, content_id=pending.content_id,
                                     reason=str(exc)))
        return LoadResult(pending.coord, pending.content_id, LoadOutcome.FAILED, error)

    # -- Internal --------------------------------------------------------

    def _is_stale(self, pending: PendingLoad) -> bool:
        """True if the load no longer owns its cell."""
        if pending.superseded:
            return True
        current = self._store.get(pending.coord)
        return current is not pending.record or current.content_id != pending.content_id

    def _supersede(self, coord: AxialCoord) -> None:
        pending = self._pending.pop(coord, None)
        if pending is not None:
            pending.superseded = True
            log.debug("Cell %s: load of %r superseded", coord.key(), pending.content_id)

    def _drop_pending(self, pending: PendingLoad) -> None:
        if self._pending.get(pending.coord) is pending:
            del self._pending[pending.coord]

    def _release(self, coord: AxialCoord, record: CellRecord) -> None:
        """Detach and destroy the record's representation, if it has one."""
        representation = record.representation
        if representation is None:
            return
        record.representation = None
        record.state = CellState.UNREALIZED
        self._loader.release(representation)
        log.debug("Cell %s: released representation of %r", coord.key(), record.content_id)

    def _emit(self, event: object) -> None:
        if self._events is not None:
            self._events.emit(event)
