"""Line intersection, nearest-point and slicing helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..errors import TurfError
from ..geojson.models import Feature, LineString, Point, Position
from .constants import UNIT_MILES
from .measurement import bearing, destination, distance
from .meta import get_coord

INDEX_KEY = "index"
DIST_KEY = "dist"

PointLike = Union[Position, Point, Feature, Sequence[float]]


@dataclass(frozen=True, slots=True)
class LineIntersectsResult:
    """Where two infinite lines cross, and whether each segment contains that point.

    ``x`` and ``y`` are ``None`` when the lines are parallel, coincident or one
    of the segments has zero length.
    """

    x: Optional[float]
    y: Optional[float]
    on_line1: bool = False
    on_line2: bool = False

    @property
    def intersects(self) -> bool:
        """True when the crossing lies on both finite segments."""
        return self.on_line1 and self.on_line2

    def point(self) -> Optional[Position]:
        if self.x is None or self.y is None:
            return None
        return Position(self.x, self.y)


def line_intersects(
    p1: PointLike, p2: PointLike, p3: PointLike, p4: PointLike
) -> LineIntersectsResult:
    """Intersect segment ``p1-p2`` with segment ``p3-p4``.

    The crossing of the two infinite lines is always reported when one
    exists; ``on_line1``/``on_line2`` say whether it falls within each
    segment, endpoints included.
    """

    a, b, c, d = (get_coord(p) for p in (p1, p2, p3, p4))
    x1, y1 = a.longitude, a.latitude
    x2, y2 = b.longitude, b.latitude
    x3, y3 = c.longitude, c.latitude
    x4, y4 = d.longitude, d.latitude

    denom = (x2 - x1) * (y4 - y3) - (y2 - y1) * (x4 - x3)
    if denom == 0:
        return LineIntersectsResult(None, None, False, False)

    ua = ((y1 - y3) * (x4 - x3) - (x1 - x3) * (y4 - y3)) / denom
    ub = ((y1 - y3) * (x2 - x1) - (x1 - x3) * (y2 - y1)) / denom
    return LineIntersectsResult(
        x=x1 + ua * (x2 - x1),
        y=y1 + ua * (y2 - y1),
        on_line1=0.0 <= ua <= 1.0,
        on_line2=0.0 <= ub <= 1.0,
    )


def _candidate(position: Position, dist: float, index: int) -> Feature:
    return Feature.from_geometry(Point(position), {DIST_KEY: dist, INDEX_KEY: index})


def nearest_point_on_line(point: PointLike, coords: Sequence[Position]) -> Feature:
    """Return the closest point on the polyline ``coords`` to ``point``.

    The result is a Point feature whose ``index`` property is the segment the
    point lies on and whose ``dist`` property is the distance in miles.
    """

    if len(coords) < 2:
        raise TurfError("nearest_point_on_line requires at least 2 coordinates")
    target = get_coord(point)
    closest_dist = distance(target, coords[0], UNIT_MILES)
    closest = _candidate(coords[0], closest_dist, 0)

    for index in range(len(coords) - 1):
        start = coords[index]
        stop = coords[index + 1]
        start_dist = distance(target, start, UNIT_MILES)
        stop_dist = distance(target, stop, UNIT_MILES)

        # Perpendicular through the target, long enough to reach the segment.
        height = max(start_dist, stop_dist)
        direction = bearing(start, stop)
        perpendicular1 = destination(target, height, direction + 90, UNIT_MILES)
        perpendicular2 = destination(target, height, direction - 90, UNIT_MILES)
        crossing = line_intersects(perpendicular1, perpendicular2, start, stop)

        candidates = [(start, start_dist), (stop, stop_dist)]
        crossing_point = crossing.point()
        if crossing.intersects and crossing_point is not None:
            candidates.append(
                (crossing_point, distance(target, crossing_point, UNIT_MILES))
            )
        for position, dist in candidates:
            if dist < closest_dist:
                closest = _candidate(position, dist, index)
                closest_dist = dist

    return closest


def _as_line(line: Union[LineString, Feature]) -> LineString:
    geometry = line.geometry if isinstance(line, Feature) else line
    if not isinstance(geometry, LineString):
        raise TurfError("Input must be a LineString feature or geometry")
    return geometry


def line_slice(
    start: PointLike, stop: PointLike, line: Union[LineString, Feature]
) -> LineString:
    """Return the part of ``line`` between the points nearest ``start`` and ``stop``."""

    coords = _as_line(line).coordinates
    if len(coords) < 2:
        raise TurfError("line_slice requires a LineString with at least 2 coordinates")
    if get_coord(start) == get_coord(stop):
        raise TurfError("Start and stop points of line_slice cannot be equal")

    start_vertex = nearest_point_on_line(start, coords)
    stop_vertex = nearest_point_on_line(stop, coords)
    first, last = sorted(
        (start_vertex, stop_vertex), key=lambda vertex: vertex.properties[INDEX_KEY]
    )
    positions: List[Position] = [get_coord(first)]
    positions.extend(
        coords[first.properties[INDEX_KEY] + 1 : last.properties[INDEX_KEY] + 1]
    )
    positions.append(get_coord(last))
    return LineString(positions)


def line_slice_along(
    line: Union[LineString, Feature],
    start_dist: float,
    stop_dist: float,
    units: str = "kilometers",
) -> LineString:
    """Return the part of ``line`` between two distances measured along it."""

    coords = _as_line(line).coordinates
    if len(coords) < 2:
        raise TurfError(
            "line_slice_along requires a LineString with at least 2 coordinates, "
            f"received {len(coords)}"
        )
    if start_dist < 0 or stop_dist < 0:
        raise TurfError(
            "line_slice_along distances must be non-negative, "
            f"received {start_dist!r} and {stop_dist!r}"
        )
    if start_dist == stop_dist:
        raise TurfError("Start and stop distances of line_slice_along cannot be equal")

    sliced: List[Position] = []
    travelled = 0.0
    for index, current in enumerate(coords):
        if start_dist >= travelled and index == len(coords) - 1:
            break
        if travelled > start_dist and not sliced:
            overshot = start_dist - travelled
            if overshot == 0:
                sliced.append(current)
                return LineString(sliced)
            direction = bearing(current, coords[index - 1]) - 180
            sliced.append(destination(current, overshot, direction, units))
        if travelled >= stop_dist:
            overshot = stop_dist - travelled
            if overshot == 0:
                sliced.append(current)
                return LineString(sliced)
            direction = bearing(current, coords[index - 1]) - 180
            sliced.append(destination(current, overshot, direction, units))
            return LineString(sliced)
        if travelled >= start_dist:
            sliced.append(current)
        if index == len(coords) - 1:
            return LineString(sliced)
        travelled += distance(current, coords[index + 1], units)

    if travelled < start_dist:
        raise TurfError("Start position is beyond the end of the line")
    return LineString(sliced)


__all__ = [
    "LineIntersectsResult",
    "line_intersects",
    "nearest_point_on_line",
    "line_slice",
    "line_slice_along",
]
