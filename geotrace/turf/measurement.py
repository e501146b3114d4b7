"""Great-circle measurements on WGS84 longitude/latitude positions.

Distances use the haversine formula on a spherical Earth; see
:mod:`geotrace.turf.constants` for the radius and unit factors.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Union

import numpy as np

from ..errors import TurfError
from ..geojson.models import (
    BoundingBox,
    Feature,
    Geometry,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)
from .constants import UNIT_DEFAULT, UNIT_MILES
from .conversion import length_to_radians, radians_to_length
from .meta import coord_all, get_coord

PointLike = Union[Position, Point, Feature]


def distance(start: PointLike, end: PointLike, units: str = UNIT_DEFAULT) -> float:
    """Return the haversine distance between two points in ``units``."""

    a = get_coord(start)
    b = get_coord(end)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    h = math.sin(d_lat / 2) ** 2 + math.sin(d_lon / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    return radians_to_length(2 * math.atan2(math.sqrt(h), math.sqrt(1 - h)), units)


def bearing(start: PointLike, end: PointLike) -> float:
    """Initial bearing from ``start`` to ``end`` in degrees within [-180, 180]."""

    a = get_coord(start)
    b = get_coord(end)
    lon1 = math.radians(a.longitude)
    lon2 = math.radians(b.longitude)
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    y = math.sin(lon2 - lon1) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        lon2 - lon1
    )
    return math.degrees(math.atan2(y, x))


def destination(
    origin: PointLike, dist: float, heading: float, units: str = UNIT_DEFAULT
) -> Position:
    """Return the position reached travelling ``dist`` along ``heading`` degrees."""

    start = get_coord(origin)
    lon1 = math.radians(start.longitude)
    lat1 = math.radians(start.latitude)
    heading_rad = math.radians(heading)
    radians = length_to_radians(dist, units)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(radians)
        + math.cos(lat1) * math.sin(radians) * math.cos(heading_rad)
    )
    lon2 = lon1 + math.atan2(
        math.sin(heading_rad) * math.sin(radians) * math.cos(lat1),
        math.cos(radians) - math.sin(lat1) * math.sin(lat2),
    )
    return Position(math.degrees(lon2), math.degrees(lat2))


def midpoint(start: PointLike, end: PointLike) -> Position:
    """Return the point halfway along the great circle between two points."""

    half = distance(start, end, UNIT_MILES) / 2
    return destination(start, half, bearing(start, end), UNIT_MILES)


def _line_length(coords: Sequence[Position], units: str) -> float:
    travelled = 0.0
    for previous, current in zip(coords, coords[1:]):
        travelled += distance(previous, current, units)
    return travelled


def along(line: LineString, dist: float, units: str = UNIT_DEFAULT) -> Position:
    """Return the position ``dist`` along ``line``; clamps to the last vertex."""

    coords = line.coordinates
    if not coords:
        raise TurfError("along requires a LineString with at least 1 coordinate")
    travelled = 0.0
    for index, current in enumerate(coords):
        if dist >= travelled and index == len(coords) - 1:
            break
        if travelled >= dist:
            overshot = dist - travelled
            if overshot == 0:
                return current
            direction = bearing(current, coords[index - 1]) - 180
            return destination(current, overshot, direction, units)
        travelled += distance(current, coords[index + 1], units)
    return coords[-1]


def length(geometry: Union[Geometry, Feature], units: str = UNIT_DEFAULT) -> float:
    """Sum the segment lengths of a line or every ring of a polygon."""

    if isinstance(geometry, Feature):
        geometry = geometry.geometry
    if isinstance(geometry, LineString):
        return _line_length(geometry.coordinates, units)
    if isinstance(geometry, (MultiLineString, Polygon)):
        return sum(_line_length(part, units) for part in geometry.coordinates)
    if isinstance(geometry, MultiPolygon):
        return sum(
            _line_length(ring, units)
            for polygon in geometry.coordinates
            for ring in polygon
        )
    raise TurfError(
        "length requires a LineString, MultiLineString, Polygon or MultiPolygon"
    )


def bbox(value: Union[Geometry, Feature]) -> BoundingBox:
    """Return the 2D extent of every coordinate in ``value``."""

    positions: List[Position] = coord_all(value)
    if not positions:
        raise TurfError("Cannot compute the bounding box of an empty geometry")
    coords = np.array(
        [(position.longitude, position.latitude) for position in positions],
        dtype=float,
    )
    west, south = coords.min(axis=0)
    east, north = coords.max(axis=0)
    return BoundingBox.from_coordinates(
        float(west), float(south), float(east), float(north)
    )


__all__ = [
    "distance",
    "bearing",
    "destination",
    "midpoint",
    "along",
    "length",
    "bbox",
]
