"""Polyline simplification (radial distance pre-pass plus Douglas-Peucker)."""

from __future__ import annotations

import logging
from typing import List, Sequence

from shapely.geometry import LineString as ShapelyLineString

from ..errors import TurfError
from ..geojson.models import LineString, Position

LOGGER = logging.getLogger(__name__)


def _simplify_radial(
    positions: Sequence[Position], squared_tolerance: float
) -> List[Position]:
    """Drop vertices closer than the tolerance to the previously kept vertex."""

    previous = positions[0]
    kept = [previous]
    for position in positions[1:]:
        dx = position.longitude - previous.longitude
        dy = position.latitude - previous.latitude
        if dx * dx + dy * dy > squared_tolerance:
            kept.append(position)
            previous = position
    if previous is not positions[-1]:
        kept.append(positions[-1])
    return kept


def _restore_positions(
    simplified: Sequence[Sequence[float]], source: Sequence[Position]
) -> List[Position]:
    """Map simplified xy coordinates back onto the source positions (keeps altitude)."""

    restored: List[Position] = []
    cursor = 0
    for x, y in simplified:
        while cursor < len(source) and (
            source[cursor].longitude != x or source[cursor].latitude != y
        ):
            cursor += 1
        if cursor == len(source):
            # Not a source vertex; keep the simplified coordinate as-is.
            restored.append(Position(x, y))
            continue
        restored.append(source[cursor])
        cursor += 1
    return restored


def simplify_positions(
    positions: Sequence[Position], tolerance: float = 1.0, high_quality: bool = False
) -> List[Position]:
    """Simplify a vertex list; the first and last vertices are always kept.

    ``tolerance`` is in coordinate units (degrees for WGS84 input). Unless
    ``high_quality`` is set, a cheap radial-distance pass runs before
    Douglas-Peucker.
    """

    if tolerance < 0:
        raise TurfError("Simplify tolerance must be non-negative")
    if len(positions) <= 2:
        return list(positions)

    candidates = (
        list(positions)
        if high_quality
        else _simplify_radial(positions, tolerance * tolerance)
    )
    if len(candidates) <= 2:
        return candidates

    line = ShapelyLineString(
        [(position.longitude, position.latitude) for position in candidates]
    )
    simplified = line.simplify(tolerance, preserve_topology=high_quality)
    result = _restore_positions(
        [(float(x), float(y)) for x, y in simplified.coords], candidates
    )
    LOGGER.debug("Simplified %d vertices to %d", len(positions), len(result))
    return result


def simplify(
    line: LineString, tolerance: float = 1.0, high_quality: bool = False
) -> LineString:
    """Return a simplified copy of ``line``."""

    return LineString(
        simplify_positions(line.coordinates, tolerance, high_quality), line.bbox
    )


__all__ = ["simplify", "simplify_positions"]
