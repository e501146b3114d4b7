"""Tests for line intersection, nearest point and slicing helpers."""

from __future__ import annotations

import pytest

from geotrace.errors import TurfError
from geotrace.geojson.models import Feature, LineString, Point, Position
from geotrace.turf.misc import (
    line_intersects,
    line_slice,
    line_slice_along,
    nearest_point_on_line,
)


def test_crossing_segments_intersect_at_midpoint() -> None:
    result = line_intersects(Position(0, 0), Position(2, 2), Position(0, 2), Position(2, 0))

    assert (result.x, result.y) == (1.0, 1.0)
    assert result.on_line1 and result.on_line2
    assert result.intersects
    assert result.point() == Position(1, 1)


def test_parallel_segments_have_no_intersection() -> None:
    result = line_intersects(Position(0, 0), Position(1, 1), Position(0, 1), Position(1, 2))

    assert result.x is None and result.y is None
    assert not result.on_line1 and not result.on_line2
    assert result.point() is None


def test_zero_length_segment_is_treated_as_parallel() -> None:
    result = line_intersects(Position(1, 1), Position(1, 1), Position(0, 2), Position(2, 0))

    assert result.x is None
    assert not result.intersects


def test_touching_endpoints_count_as_on_segment() -> None:
    result = line_intersects(Position(0, 0), Position(1, 1), Position(1, 1), Position(2, 0))

    assert (result.x, result.y) == (1.0, 1.0)
    assert result.on_line1 and result.on_line2


def test_extended_lines_report_point_outside_segments() -> None:
    result = line_intersects(Position(0, 0), Position(1, 0), Position(5, -1), Position(5, 1))

    assert (result.x, result.y) == (5.0, 0.0)
    assert not result.on_line1
    assert result.on_line2
    assert not result.intersects


def test_line_intersects_accepts_points_and_pairs() -> None:
    result = line_intersects(Point.from_lng_lat(0, 0), [2, 2], (0, 2), Position(2, 0))

    assert result.intersects


def test_nearest_point_on_line_projects_onto_segment() -> None:
    coords = LineString([[0, 0], [0, 1], [0, 2]]).coordinates

    nearest = nearest_point_on_line(Position(0.01, 1.5), coords)

    assert isinstance(nearest, Feature)
    assert nearest.properties["index"] == 1
    assert nearest.geometry.longitude == pytest.approx(0.0, abs=1e-9)
    assert nearest.geometry.latitude == pytest.approx(1.5, abs=1e-3)
    assert nearest.properties["dist"] == pytest.approx(0.69, abs=0.01)


def test_nearest_point_on_line_prefers_vertex_when_closest() -> None:
    coords = LineString([[0, 0], [1, 0]]).coordinates

    nearest = nearest_point_on_line(Position(-1, 0), coords)

    assert nearest.geometry.coordinates == Position(0, 0)
    assert nearest.properties["index"] == 0


def test_nearest_point_on_line_requires_two_coordinates() -> None:
    with pytest.raises(TurfError):
        nearest_point_on_line(Position(0, 0), [Position(0, 0)])


def test_line_slice_between_projected_points() -> None:
    line = LineString([[0, 0], [1, 0], [2, 0], [3, 0]])

    sliced = line_slice(Position(2.5, -0.1), Position(0.5, 0.1), line)

    coords = sliced.coordinates
    assert len(coords) == 4
    assert coords[0].longitude == pytest.approx(0.5, abs=1e-3)
    assert coords[0].latitude == pytest.approx(0.0, abs=1e-3)
    assert coords[1:3] == (Position(1, 0), Position(2, 0))
    assert coords[3].longitude == pytest.approx(2.5, abs=1e-3)


def test_line_slice_accepts_line_features() -> None:
    feature = Feature.from_geometry(LineString([[0, 0], [1, 0], [2, 0]]))

    sliced = line_slice(Position(0.5, 0.1), Position(1.5, 0.1), feature)

    assert sliced.coordinates[1] == Position(1, 0)


def test_line_slice_rejects_bad_input() -> None:
    line = LineString([[0, 0], [1, 0]])

    with pytest.raises(TurfError):
        line_slice(Position(0.2, 0), Position(0.2, 0), line)
    with pytest.raises(TurfError):
        line_slice(Position(0, 0), Position(1, 0), LineString([[0, 0]]))
    with pytest.raises(TurfError):
        line_slice(Position(0, 0), Position(1, 0), Point.from_lng_lat(0, 0))


def test_line_slice_along_distances() -> None:
    line = LineString([[0, 0], [0, 1], [0, 2]])
    one_degree_km = 111.19508

    sliced = line_slice_along(line, one_degree_km * 0.5, one_degree_km * 1.5)

    coords = sliced.coordinates
    assert coords[0].latitude == pytest.approx(0.5, abs=1e-3)
    assert coords[1] == Position(0, 1)
    assert coords[-1].latitude == pytest.approx(1.5, abs=1e-3)


def test_line_slice_along_rejects_equal_distances() -> None:
    with pytest.raises(TurfError):
        line_slice_along(LineString([[0, 0], [0, 1]]), 1.0, 1.0)


@pytest.mark.parametrize("start_dist, stop_dist", [(-1.0, 50.0), (10.0, -5.0)])
def test_line_slice_along_rejects_negative_distances(
    start_dist: float, stop_dist: float
) -> None:
    line = LineString([[0, 0], [0, 1], [0, 2]])

    with pytest.raises(TurfError):
        line_slice_along(line, start_dist, stop_dist)
