"""Tests for the immutable GeoJSON value types."""

from __future__ import annotations

import math

import pytest

from geotrace.errors import InvalidBoundingBoxError, InvalidGeometryError
from geotrace.geojson.models import (
    MISSING_ALTITUDE,
    BoundingBox,
    Feature,
    FeatureCollection,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)


def test_position_without_altitude_uses_sentinel() -> None:
    position = Position(1.0, 2.0)

    assert math.isnan(position.altitude)
    assert not position.has_altitude
    assert position.coordinates() == [1.0, 2.0]


def test_position_equality_treats_missing_altitudes_as_equal() -> None:
    assert Position(1.0, 2.0) == Position.from_coordinates(1.0, 2.0, None)
    assert Position(1.0, 2.0) == Position(1.0, 2.0, MISSING_ALTITUDE)
    assert Position(1.0, 2.0) != Position(1.0, 2.0, 0.0)
    assert hash(Position(1.0, 2.0)) == hash(Position(1.0, 2.0))
    assert len({Position(1.0, 2.0), Position(1.0, 2.0)}) == 1


def test_position_from_list_ignores_extra_values() -> None:
    position = Position.from_list([1, 2, 3, 4])

    assert position == Position(1.0, 2.0, 3.0)
    assert position.coordinates() == [1.0, 2.0, 3.0]
    with pytest.raises(InvalidGeometryError):
        Position.from_list([1])


@pytest.mark.parametrize("length", [0, 1, 2, 3, 5, 7])
def test_bounding_box_rejects_invalid_lengths(length: int) -> None:
    with pytest.raises(InvalidBoundingBoxError) as excinfo:
        BoundingBox.from_coordinates(*([0.0] * length))

    assert excinfo.value.length == length
    assert str(length) in str(excinfo.value)


def test_bounding_box_accessors_for_2d_and_3d() -> None:
    flat = BoundingBox.from_coordinates(-10, -5, 10, 5)
    tall = BoundingBox.from_coordinates(-10, -5, 0, 10, 5, 100)

    assert (flat.west, flat.south, flat.east, flat.north) == (-10, -5, 10, 5)
    assert not flat.has_altitude
    assert math.isnan(flat.min_altitude)
    assert tall.has_altitude
    assert (tall.min_altitude, tall.max_altitude) == (0, 100)
    assert tall.southwest == Position(-10, -5, 0)
    assert tall.northeast == Position(10, 5, 100)
    assert BoundingBox.from_positions(tall.southwest, tall.northeast) == tall
    assert flat.to_list() == [-10.0, -5.0, 10.0, 5.0]


def test_bounding_box_contains_checks_altitude_only_when_both_have_it() -> None:
    flat = BoundingBox.from_coordinates(0, 0, 10, 10)
    tall = BoundingBox.from_coordinates(0, 0, 0, 10, 10, 100)

    assert flat.contains(Position(5, 5))
    assert flat.contains(Position(10, 0))
    assert not flat.contains(Position(11, 5))
    assert flat.contains(Position(5, 5, 5000))
    assert tall.contains(Position(5, 5))
    assert tall.contains(Position(5, 5, 100))
    assert not tall.contains(Position(5, 5, 101))


def test_geometries_convert_lists_to_positions() -> None:
    line = LineString([[0, 0], [1, 1, 5]])

    assert line.coordinates == (Position(0, 0), Position(1, 1, 5))
    assert Point([3, 4]).coordinates == Position(3, 4)
    assert Point.from_lng_lat(3, 4, 5).altitude == 5
    assert LineString.type == "LineString"


def test_multi_geometry_helpers() -> None:
    multi_line = MultiLineString([[[0, 0], [1, 1]], [[2, 2], [3, 3]]])
    ring = [[0, 0], [1, 0], [1, 1], [0, 0]]
    multi_polygon = MultiPolygon([[ring], [ring]])

    assert [line.coordinates[0] for line in multi_line.line_strings()] == [
        Position(0, 0),
        Position(2, 2),
    ]
    assert len(multi_polygon.polygons()) == 2
    assert multi_polygon.polygons()[0].outer() == LineString(ring)


def test_polygon_from_outer_inner_validates_rings() -> None:
    outer = LineString([[0, 0], [4, 0], [4, 4], [0, 4], [0, 0]])
    hole = LineString([[1, 1], [2, 1], [2, 2], [1, 1]])

    polygon = Polygon.from_outer_inner(outer, hole)

    assert polygon.outer() == outer
    assert polygon.inner() == [hole]
    with pytest.raises(InvalidGeometryError):
        Polygon.from_outer_inner(LineString([[0, 0], [1, 0], [0, 0]]))
    with pytest.raises(InvalidGeometryError):
        Polygon.from_outer_inner(LineString([[0, 0], [1, 0], [1, 1], [0, 1]]))


def test_geometry_collection_rejects_non_geometries() -> None:
    collection = GeometryCollection.from_geometry(Point([0, 0]))

    assert collection.geometries == (Point([0, 0]),)
    with pytest.raises(InvalidGeometryError):
        GeometryCollection([Feature()])


def test_feature_property_helpers() -> None:
    feature = Feature.from_geometry(Point([0, 0]), {"name": "start", "empty": None})

    feature.add_property("speed", 3.5)

    assert feature.get_property("speed") == 3.5
    assert feature.has_property("empty")
    assert not feature.has_non_null_value_for_property("empty")
    assert feature.has_non_null_value_for_property("name")
    assert feature.remove_property("name") == "start"
    assert feature.get_property("name", "missing") == "missing"


def test_feature_collection_is_ordered_and_iterable() -> None:
    first = Feature.from_geometry(Point([0, 0]), id=1)
    second = Feature.from_geometry(Point([1, 1]), id="two")

    collection = FeatureCollection.from_features([first, second])

    assert len(collection) == 2
    assert [feature.id for feature in collection] == [1, "two"]
    assert FeatureCollection.from_feature(first).features == [first]
