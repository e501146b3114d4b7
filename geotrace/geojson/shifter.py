"""Coordinate shifters applied by the codec on decode (shift) and encode (unshift).

The codec takes an explicit ``shifter=`` argument. When none is passed it uses
the process-wide shifter registered with :func:`install_shifter`, which
defaults to :class:`IdentityShifter`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Iterator, Optional, Protocol, Tuple, Union

from cachetools import LRUCache
from pyproj import CRS, Transformer

from ..config import PROJECTION_TRANSFORMER_CACHE_SIZE
from .models import Position

LOGGER = logging.getLogger(__name__)

CRSLike = Union[str, int, CRS]


class CoordinateShifter(Protocol):
    """Transform applied to every position crossing the codec boundary."""

    def shift(self, position: Position) -> Position:
        """Map a wire position to its in-memory value."""
        ...

    def unshift(self, position: Position) -> Position:
        """Map an in-memory position back to its wire value."""
        ...


class IdentityShifter:
    """Default shifter; returns positions unchanged."""

    def shift(self, position: Position) -> Position:
        return position

    def unshift(self, position: Position) -> Position:
        return position

    def __repr__(self) -> str:
        return "IdentityShifter()"


@dataclass(frozen=True, slots=True)
class OffsetShifter:
    """Add a constant offset to every coordinate (e.g. for obfuscation)."""

    d_lon: float
    d_lat: float
    d_alt: float = 0.0

    def shift(self, position: Position) -> Position:
        altitude = position.altitude + self.d_alt if position.has_altitude else None
        return Position.from_coordinates(
            position.longitude + self.d_lon, position.latitude + self.d_lat, altitude
        )

    def unshift(self, position: Position) -> Position:
        altitude = position.altitude - self.d_alt if position.has_altitude else None
        return Position.from_coordinates(
            position.longitude - self.d_lon, position.latitude - self.d_lat, altitude
        )


_TRANSFORMER_CACHE: LRUCache[Tuple[str, str], Transformer] = LRUCache(
    maxsize=max(1, PROJECTION_TRANSFORMER_CACHE_SIZE)
)
_TRANSFORMER_LOCK = RLock()


def _get_transformer(source: CRS, target: CRS) -> Transformer:
    """Return a cached always-xy transformer between two CRSs."""

    key = (source.to_string(), target.to_string())
    with _TRANSFORMER_LOCK:
        transformer = _TRANSFORMER_CACHE.get(key)
        if transformer is None:
            LOGGER.debug("Building transformer %s -> %s", key[0], key[1])
            transformer = Transformer.from_crs(source, target, always_xy=True)
            _TRANSFORMER_CACHE[key] = transformer
        return transformer


def clear_transformer_cache() -> None:
    """Empty the transformer cache (primarily for testing)."""

    with _TRANSFORMER_LOCK:
        _TRANSFORMER_CACHE.clear()


class ProjectionShifter:
    """Hold coordinates in a projected CRS in memory while the wire stays WGS84.

    ``shift`` projects wire longitude/latitude into ``crs``; ``unshift``
    projects back. Altitude is passed through the transformer when present.
    """

    def __init__(self, crs: CRSLike, wire_crs: CRSLike = "EPSG:4326") -> None:
        self.crs = CRS.from_user_input(crs)
        self.wire_crs = CRS.from_user_input(wire_crs)
        self._forward = _get_transformer(self.wire_crs, self.crs)
        self._inverse = _get_transformer(self.crs, self.wire_crs)

    def shift(self, position: Position) -> Position:
        return _transform(self._forward, position)

    def unshift(self, position: Position) -> Position:
        return _transform(self._inverse, position)

    def __repr__(self) -> str:
        return f"ProjectionShifter(crs={self.crs.to_string()!r})"


def _transform(transformer: Transformer, position: Position) -> Position:
    if position.has_altitude:
        x, y, z = transformer.transform(
            position.longitude, position.latitude, position.altitude
        )
        return Position(float(x), float(y), float(z))
    x, y = transformer.transform(position.longitude, position.latitude)
    return Position(float(x), float(y))


_DEFAULT_SHIFTER = IdentityShifter()
_installed_shifter: CoordinateShifter = _DEFAULT_SHIFTER


def install_shifter(shifter: Optional[CoordinateShifter]) -> None:
    """Register the process-wide shifter; ``None`` restores the identity shifter.

    The registration is not synchronised. Changing it while another thread is
    decoding or encoding gives undefined results; install once at start-up or
    pass ``shifter=`` explicitly to the codec instead.
    """

    global _installed_shifter
    _installed_shifter = shifter if shifter is not None else _DEFAULT_SHIFTER
    LOGGER.debug("Coordinate shifter set to %r", _installed_shifter)


def get_shifter() -> CoordinateShifter:
    return _installed_shifter


def is_using_default_shifter() -> bool:
    return _installed_shifter is _DEFAULT_SHIFTER


def resolve_shifter(shifter: Optional[CoordinateShifter] = None) -> CoordinateShifter:
    """Return ``shifter`` when given, otherwise the installed one."""

    if shifter is not None:
        return shifter
    return _installed_shifter


@contextmanager
def shifter_scope(shifter: Optional[CoordinateShifter]) -> Iterator[CoordinateShifter]:
    """Install ``shifter`` for the duration of the block, then restore the previous one."""

    previous = _installed_shifter
    install_shifter(shifter)
    try:
        yield get_shifter()
    finally:
        install_shifter(previous)


__all__ = [
    "CoordinateShifter",
    "IdentityShifter",
    "OffsetShifter",
    "ProjectionShifter",
    "install_shifter",
    "get_shifter",
    "is_using_default_shifter",
    "resolve_shifter",
    "shifter_scope",
    "clear_transformer_cache",
]
