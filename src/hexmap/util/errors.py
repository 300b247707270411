"""Exception hierarchy for the hex map core.

Coordinate math and store operations never raise for well-formed input;
these errors cover configuration, asset resolution, asynchronous loads and
persisted map data.
"""

from __future__ import annotations

from typing import Any


class HexMapError(Exception):
    """Base class for all hex map errors."""


class InvalidConfiguration(HexMapError):
    """A grid setting is out of range (e.g. non-positive cell size)."""

    def __init__(self, setting: str, value: Any, reason: str = "must be positive"):
        self.setting = setting
        self.value = value
        super().__init__(f"Invalid configuration: {setting}={value!r} ({reason})")


class AssetResolutionFailed(HexMapError):
    """The asset reference handed to ``assign`` cannot be resolved.

    The cell is left in its prior state.
    """

    def __init__(self, asset_ref: Any):
        self.asset_ref = asset_ref
        super().__init__(f"Asset reference {asset_ref!r} cannot be resolved")


class InstantiationFailed(HexMapError):
    """An asynchronous instantiation was rejected by the asset loader.

    The cell record is kept without a representation.
    """

    def __init__(self, coord: Any, content_id: str, cause: BaseException | None = None):
        self.coord = coord
        self.content_id = content_id
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Instantiation of {content_id!r} at {coord!r} failed{detail}")


class MapDataError(HexMapError):
    """Persisted map data is corrupt (length mismatch, malformed entry)."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Map data {path}: {reason}")
