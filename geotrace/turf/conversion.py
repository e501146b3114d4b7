"""Unit conversion and geometry reshaping helpers."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Union

from ..errors import TurfError
from ..geojson.models import (
    Feature,
    FeatureCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)
from .constants import FACTORS, UNIT_DEFAULT
from .meta import coord_all


def _factor(units: str) -> float:
    try:
        return FACTORS[units]
    except KeyError:
        raise TurfError(f"Unknown unit {units!r}") from None


def radians_to_length(radians: float, units: str = UNIT_DEFAULT) -> float:
    return radians * _factor(units)


def length_to_radians(distance: float, units: str = UNIT_DEFAULT) -> float:
    return distance / _factor(units)


def length_to_degrees(distance: float, units: str = UNIT_DEFAULT) -> float:
    return radians_to_degrees(length_to_radians(distance, units))


def degrees_to_radians(degrees: float) -> float:
    """Convert degrees to radians after wrapping into ``(-360, 360)``."""

    return math.fmod(degrees, 360.0) * math.pi / 180.0


def radians_to_degrees(radians: float) -> float:
    """Convert radians to degrees after wrapping into ``(-2pi, 2pi)``."""

    return math.fmod(radians, 2 * math.pi) * 180.0 / math.pi


def convert_length(
    distance: float, original_unit: str, final_unit: Optional[str] = None
) -> float:
    """Convert ``distance`` between two length units (kilometres by default)."""

    if distance < 0:
        raise TurfError("Distance must be a non-negative number")
    return radians_to_length(
        length_to_radians(distance, original_unit), final_unit or UNIT_DEFAULT
    )


def explode(value: Union[Feature, FeatureCollection]) -> FeatureCollection:
    """Return one Point feature per vertex, skipping closing ring positions."""

    return FeatureCollection(
        [Feature.from_geometry(Point(position)) for position in coord_all(value, True)]
    )


def _rings_to_line(
    rings, properties: Optional[Dict[str, Any]]
) -> Optional[Feature]:
    if len(rings) > 1:
        return Feature.from_geometry(MultiLineString(rings), properties)
    if len(rings) == 1:
        return Feature.from_geometry(LineString(rings[0]), properties)
    return None


def polygon_to_line(
    value: Union[Feature, Polygon, MultiPolygon],
    properties: Optional[Dict[str, Any]] = None,
) -> Union[Feature, FeatureCollection, None]:
    """Convert polygon rings to a (Multi)LineString feature.

    A MultiPolygon yields a FeatureCollection with one feature per polygon.
    When ``value`` is a Feature its properties are reused unless
    ``properties`` is given.
    """

    geometry: Any = value
    if isinstance(value, Feature):
        geometry = value.geometry
        if properties is None:
            properties = value.properties
    if isinstance(geometry, Polygon):
        return _rings_to_line(geometry.coordinates, properties)
    if isinstance(geometry, MultiPolygon):
        features = [
            feature
            for feature in (
                _rings_to_line(rings, properties) for rings in geometry.coordinates
            )
            if feature is not None
        ]
        return FeatureCollection(features)
    raise TurfError("Geometry must be a Polygon or MultiPolygon")


def combine(collection: FeatureCollection) -> FeatureCollection:
    """Merge features into at most one MultiPoint, MultiLineString and MultiPolygon.

    Features with other geometries are ignored; when nothing can be combined
    the input is returned unchanged.
    """

    if not collection.features:
        raise TurfError("FeatureCollection has no features to combine")
    points: List[Position] = []
    lines: List[Any] = []
    polygons: List[Any] = []
    for feature in collection.features:
        geometry = feature.geometry
        if isinstance(geometry, Point):
            points.append(geometry.coordinates)
        elif isinstance(geometry, MultiPoint):
            points.extend(geometry.coordinates)
        elif isinstance(geometry, LineString):
            lines.append(geometry.coordinates)
        elif isinstance(geometry, MultiLineString):
            lines.extend(geometry.coordinates)
        elif isinstance(geometry, Polygon):
            polygons.append(geometry.coordinates)
        elif isinstance(geometry, MultiPolygon):
            polygons.extend(geometry.coordinates)

    combined: List[Feature] = []
    if points:
        combined.append(Feature.from_geometry(MultiPoint(points)))
    if lines:
        combined.append(Feature.from_geometry(MultiLineString(lines)))
    if polygons:
        combined.append(Feature.from_geometry(MultiPolygon(polygons)))
    return FeatureCollection(combined) if combined else collection


__all__ = [
    "radians_to_length",
    "length_to_radians",
    "length_to_degrees",
    "degrees_to_radians",
    "radians_to_degrees",
    "convert_length",
    "explode",
    "polygon_to_line",
    "combine",
]
