"""Point-in-polygon tests backed by shapely."""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from ..errors import TurfError
from ..geojson.models import Feature, FeatureCollection, MultiPolygon, Point, Polygon, Position
from .meta import get_coord

Rings = Sequence[Sequence[Position]]


def _ring_xy(ring: Sequence[Position]) -> List[Tuple[float, float]]:
    return [(position.longitude, position.latitude) for position in ring]


def _to_shapely(polygon: Union[Polygon, MultiPolygon, Feature]) -> List[ShapelyPolygon]:
    """Return one shapely polygon per member; members without rings are skipped."""

    geometry = polygon.geometry if isinstance(polygon, Feature) else polygon
    if isinstance(geometry, Polygon):
        members: Sequence[Rings] = (geometry.coordinates,)
    elif isinstance(geometry, MultiPolygon):
        members = geometry.coordinates
    else:
        raise TurfError("inside requires a Polygon or MultiPolygon")
    return [
        ShapelyPolygon(_ring_xy(rings[0]), [_ring_xy(hole) for hole in rings[1:]])
        for rings in members
        if rings
    ]


def _covered(target: Position, shapes: Sequence[ShapelyPolygon]) -> bool:
    point = ShapelyPoint(target.longitude, target.latitude)
    return any(shape.covers(point) for shape in shapes)


def inside(
    point: Union[Position, Point, Feature],
    polygon: Union[Polygon, MultiPolygon, Feature],
) -> bool:
    """Return True when ``point`` lies in an outer ring and not strictly within a hole.

    Points on any ring, hole edges included, count as inside.
    """

    return _covered(get_coord(point), _to_shapely(polygon))


def points_within_polygon(
    points: FeatureCollection, polygons: FeatureCollection
) -> FeatureCollection:
    """Return a Point feature for every (polygon, point) pair that matches.

    A point inside several polygons is reported once per polygon.
    """

    for point_feature in points.features:
        if not isinstance(point_feature.geometry, Point):
            raise TurfError("points_within_polygon requires Point features")

    matched = []
    for polygon_feature in polygons.features:
        shapes = _to_shapely(polygon_feature)
        for point_feature in points.features:
            if _covered(point_feature.geometry.coordinates, shapes):
                matched.append(Feature.from_geometry(point_feature.geometry))
    return FeatureCollection(matched)


__all__ = ["inside", "points_within_polygon"]
