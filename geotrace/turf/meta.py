"""Coordinate enumeration over geometries, features and collections."""

from __future__ import annotations

from typing import List, Sequence, Union

from ..errors import TurfError
from ..geojson.models import (
    Feature,
    FeatureCollection,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)

GeoValue = Union[Geometry, Feature, FeatureCollection]


def _ring_positions(ring, exclude_wrap_coord: bool) -> List[Position]:
    if exclude_wrap_coord and ring:
        return list(ring[:-1])
    return list(ring)


def _geometry_positions(geometry: Geometry, exclude_wrap_coord: bool) -> List[Position]:
    if isinstance(geometry, Point):
        return [geometry.coordinates]
    if isinstance(geometry, (MultiPoint, LineString)):
        return list(geometry.coordinates)
    if isinstance(geometry, MultiLineString):
        return [position for line in geometry.coordinates for position in line]
    if isinstance(geometry, Polygon):
        return [
            position
            for ring in geometry.coordinates
            for position in _ring_positions(ring, exclude_wrap_coord)
        ]
    if isinstance(geometry, MultiPolygon):
        return [
            position
            for polygon in geometry.coordinates
            for ring in polygon
            for position in _ring_positions(ring, exclude_wrap_coord)
        ]
    raise TurfError(f"Unsupported geometry {type(geometry).__name__}")


def coord_all(value: GeoValue, exclude_wrap_coord: bool = False) -> List[Position]:
    """Return every position of ``value`` in document order.

    ``exclude_wrap_coord`` drops the closing position of each polygon ring.
    Features without geometry contribute nothing. Nested geometry collections
    are walked with an explicit stack.
    """

    if isinstance(value, FeatureCollection):
        pending: List[Geometry] = [
            feature.geometry for feature in value.features if feature.geometry is not None
        ]
    elif isinstance(value, Feature):
        pending = [] if value.geometry is None else [value.geometry]
    else:
        pending = [value]

    positions: List[Position] = []
    # Reversed so popping from the end keeps document order.
    stack = list(reversed(pending))
    while stack:
        geometry = stack.pop()
        if isinstance(geometry, GeometryCollection):
            stack.extend(reversed(geometry.geometries))
            continue
        positions.extend(_geometry_positions(geometry, exclude_wrap_coord))
    return positions


def get_coord(value: Union[Point, Feature, Position, Sequence[float]]) -> Position:
    """Unwrap a Position from a Point, a Point feature or a ``[lon, lat]`` pair."""

    if isinstance(value, Position):
        return value
    if isinstance(value, (list, tuple)):
        return Position.from_list(value)
    if isinstance(value, Point):
        return value.coordinates
    if isinstance(value, Feature) and isinstance(value.geometry, Point):
        return value.geometry.coordinates
    raise TurfError("A coordinate, Point or Point feature is required")


__all__ = ["coord_all", "get_coord"]
