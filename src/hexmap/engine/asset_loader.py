"""Asset loading capability consumed by the content service.

The core only knows three operations: check that a reference resolves,
instantiate it asynchronously at a position, and release an instance.
Any concrete asset system plugs in behind :class:`AssetLoader`.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from hexmap.util.hex_math import Point

log = logging.getLogger(__name__)


class AssetLoader(Protocol):
    """Capability interface for instantiating placeable content."""

    def is_valid(self, asset_ref: Any) -> bool:
        """True if ``asset_ref`` can be resolved to loadable content."""
        ...

    async def instantiate(self, asset_ref: Any, position: Point) -> Any:
        """Create a representation of ``asset_ref`` at ``position``.

        Raises on failure; the exception is reported by the caller.
        """
        ...

    def release(self, representation: Any) -> None:
        """Destroy a representation created by :meth:`instantiate`."""
        ...


@dataclass(eq=False)
class Placeholder:
    """Stand-in representation produced by :class:`PlaceholderAssetLoader`."""

    instance_id: int
    asset_ref: Any
    position: Point
    released: bool = False


class PlaceholderAssetLoader:
    """Asset loader that creates lightweight placeholder objects.

    Used by the command-line entry point (no engine attached) and by tests.
    Any non-empty string is a valid asset reference.

    Args:
        delay: Seconds each instantiation waits before completing.
        failing: Asset references whose instantiation raises.
    """

    def __init__(self, delay: float = 0.0, failing: set[str] | None = None) -> None:
        self._delay = delay
        self._failing = set(failing or ())
        self._ids = itertools.count(1)
        self.live: dict[int, Placeholder] = {}
        self.created_count: int = 0
        self.released_count: int = 0

    def is_valid(self, asset_ref: Any) -> bool:
        return isinstance(asset_ref, str) and bool(asset_ref)

    async def instantiate(self, asset_ref: Any, position: Point) -> Placeholder:
        if self._delay > 0:
            await asyncio.sleep(self._delay)
        else:
            await asyncio.sleep(0)
        if asset_ref in self._failing:
            raise RuntimeError(f"asset {asset_ref!r} failed to load")
        rep = Placeholder(instance_id=next(self._ids), asset_ref=asset_ref, position=position)
        self.live[rep.instance_id] = rep
        self.created_count += 1
        log.debug("Placeholder %d created for %r at %s", rep.instance_id, asset_ref, position)
        return rep

    def release(self, representation: Placeholder) -> None:
        if self.live.pop(representation.instance_id, None) is None:
            log.warning("Placeholder %d released twice", representation.instance_id)
            return
        representation.released = True
        self.released_count += 1
