"""Tests for great-circle measurements and unit conversion."""

from __future__ import annotations

import math

import pytest

from geotrace.errors import TurfError
from geotrace.geojson.models import (
    Feature,
    FeatureCollection,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
)
from geotrace.turf.constants import EARTH_RADIUS_M
from geotrace.turf.conversion import (
    combine,
    convert_length,
    degrees_to_radians,
    explode,
    length_to_degrees,
    polygon_to_line,
    radians_to_degrees,
    radians_to_length,
)
from geotrace.turf.measurement import (
    along,
    bbox,
    bearing,
    destination,
    distance,
    length,
    midpoint,
)

PT1 = Position(-75.343, 39.984)
PT2 = Position(-75.534, 39.123)
SQUARE = [[100, 0], [101, 0], [101, 1], [100, 1], [100, 0]]


def test_distance_in_radians_and_kilometres() -> None:
    radians = distance(PT1, PT2, "radians")

    assert radians == pytest.approx(0.015245501024842149, rel=1e-9)
    assert distance(PT1, PT2) == pytest.approx(radians * EARTH_RADIUS_M / 1000.0)
    assert distance(PT1, PT2, "degrees") == pytest.approx(math.degrees(radians))
    assert distance(Point(PT1), Feature.from_geometry(Point(PT2)), "meters") == (
        pytest.approx(radians * EARTH_RADIUS_M)
    )


def test_bearing_points_south_west() -> None:
    value = bearing(Position(-75.4, 39.4), Position(-75.534, 39.123))

    assert -180.0 < value < -90.0
    assert bearing(Position(0, 0), Position(1, 0)) == pytest.approx(90.0)
    assert bearing(Position(0, 0), Position(0, 1)) == pytest.approx(0.0)


def test_destination_travels_requested_distance() -> None:
    origin = Position(-75.0, 39.0)

    target = destination(origin, 100.0, 180.0, "kilometers")

    assert distance(origin, target) == pytest.approx(100.0)
    assert target.longitude == pytest.approx(-75.0)
    assert target.latitude < 39.0


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (Position(0, 0), Position(10, 0)),
        (Position(0, 0), Position(0, 10)),
        (Position(-1, 10), Position(1, -1)),
        (Position(22.5, 21.94304553343818), Position(92.10937499999999, 46.800059446787316)),
    ],
)
def test_midpoint_is_equidistant(start: Position, end: Position) -> None:
    mid = midpoint(start, end)

    assert distance(start, mid, "miles") == pytest.approx(distance(mid, end, "miles"))


def test_midpoint_on_equator() -> None:
    mid = midpoint(Position(0, 0), Position(10, 0))

    assert mid.longitude == pytest.approx(5.0)
    assert mid.latitude == pytest.approx(0.0, abs=1e-9)


def test_along_walks_the_line() -> None:
    line = LineString([[0, 0], [0, 1], [0, 2]])
    one_degree_km = distance(Position(0, 0), Position(0, 1))

    assert along(line, 0) == Position(0, 0)
    assert along(line, one_degree_km).latitude == pytest.approx(1.0)
    assert along(line, one_degree_km * 1.5).latitude == pytest.approx(1.5)
    assert along(line, 10_000) == Position(0, 2)
    assert along(LineString([[1.0, 1.0]]), 5) == Position(1, 1)


def test_length_of_lines_and_polygons() -> None:
    one_degree_km = distance(Position(0, 0), Position(0, 1))
    line = LineString([[0, 0], [0, 1], [0, 2]])

    assert length(line) == pytest.approx(2 * one_degree_km)
    assert length(LineString([[1, 1]])) == 0.0
    assert length(MultiLineString([[[0, 0], [0, 1]], [[5, 0], [5, 1]]])) == pytest.approx(
        2 * one_degree_km
    )
    assert length(Polygon([SQUARE])) == pytest.approx(length(LineString(SQUARE)))
    assert length(MultiPolygon([[SQUARE], [SQUARE]])) == pytest.approx(
        2 * length(LineString(SQUARE))
    )
    with pytest.raises(TurfError):
        length(Point.from_lng_lat(0, 0))


def test_bbox_of_various_geometries() -> None:
    assert bbox(Point.from_lng_lat(102, 0.5)).to_list() == [102, 0.5, 102, 0.5]
    assert bbox(
        LineString([[102, -10], [103, 1], [104, 0], [130, 4]])
    ).to_list() == [102, -10, 130, 4]
    assert bbox(Polygon([SQUARE])).to_list() == [100, 0, 101, 1]
    multi_polygon = MultiPolygon(
        [[[[102, 2], [103, 2], [103, 3], [102, 3], [102, 2]]], [SQUARE]]
    )
    assert bbox(multi_polygon).to_list() == [100, 0, 103, 3]
    assert bbox(GeometryCollection.from_geometry(multi_polygon)) == bbox(multi_polygon)
    nested = GeometryCollection(
        (
            LineString([[102, -10], [130, 4]]),
            GeometryCollection.from_geometry(Point.from_lng_lat(-1, -1)),
        )
    )
    assert bbox(nested).to_list() == [-1, -10, 130, 4]
    with pytest.raises(TurfError):
        bbox(MultiPoint([]))


def test_unit_conversions() -> None:
    assert convert_length(1, "kilometers", "meters") == pytest.approx(1000.0)
    assert convert_length(1, "miles") == pytest.approx(1.609344)
    assert convert_length(1, "metres", "centimetres") == pytest.approx(100.0)
    assert radians_to_length(1, "meters") == EARTH_RADIUS_M
    assert length_to_degrees(radians_to_length(math.radians(10), "kilometers")) == (
        pytest.approx(10.0)
    )
    assert degrees_to_radians(180) == pytest.approx(math.pi)
    assert degrees_to_radians(540) == pytest.approx(math.pi)
    assert radians_to_degrees(math.pi / 2) == pytest.approx(90.0)
    with pytest.raises(TurfError):
        convert_length(1, "furlongs")
    with pytest.raises(TurfError):
        convert_length(-1, "meters")


def test_explode_skips_closing_ring_positions() -> None:
    feature = Feature.from_geometry(Polygon([SQUARE]))

    exploded = explode(feature)

    assert len(exploded) == 4
    assert all(isinstance(item.geometry, Point) for item in exploded)
    assert exploded.features[0].geometry.coordinates == Position(100, 0)


def test_polygon_to_line_keeps_feature_properties() -> None:
    hole = [[100.2, 0.2], [100.8, 0.2], [100.8, 0.8], [100.2, 0.2]]
    single = polygon_to_line(Feature.from_geometry(Polygon([SQUARE]), {"name": "a"}))
    with_hole = polygon_to_line(Polygon([SQUARE, hole]))
    multi = polygon_to_line(MultiPolygon([[SQUARE], [SQUARE, hole]]))

    assert isinstance(single.geometry, LineString)
    assert single.properties == {"name": "a"}
    assert isinstance(with_hole.geometry, MultiLineString)
    assert isinstance(multi, FeatureCollection)
    assert [type(item.geometry) for item in multi] == [LineString, MultiLineString]
    with pytest.raises(TurfError):
        polygon_to_line(LineString(SQUARE))


def test_combine_groups_geometries_by_kind() -> None:
    collection = FeatureCollection(
        [
            Feature.from_geometry(Point.from_lng_lat(0, 0)),
            Feature.from_geometry(MultiPoint([[1, 1], [2, 2]])),
            Feature.from_geometry(LineString([[0, 0], [1, 1]])),
            Feature.from_geometry(Polygon([SQUARE])),
        ]
    )

    combined = combine(collection)

    kinds = [item.geometry.type for item in combined]
    assert kinds == ["MultiPoint", "MultiLineString", "MultiPolygon"]
    assert len(combined.features[0].geometry.coordinates) == 3
    with pytest.raises(TurfError):
        combine(FeatureCollection())
