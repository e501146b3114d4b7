"""Geometry algorithms modelled on the Turf.js API."""

from .constants import EARTH_RADIUS_M, UNIT_DEFAULT
from .conversion import (
    combine,
    convert_length,
    degrees_to_radians,
    explode,
    length_to_degrees,
    length_to_radians,
    polygon_to_line,
    radians_to_degrees,
    radians_to_length,
)
from .joins import inside, points_within_polygon
from .measurement import along, bbox, bearing, destination, distance, length, midpoint
from .meta import coord_all, get_coord
from .misc import (
    LineIntersectsResult,
    line_intersects,
    line_slice,
    line_slice_along,
    nearest_point_on_line,
)
from .simplify import simplify, simplify_positions

__all__ = [
    "EARTH_RADIUS_M",
    "UNIT_DEFAULT",
    "combine",
    "convert_length",
    "degrees_to_radians",
    "explode",
    "length_to_degrees",
    "length_to_radians",
    "polygon_to_line",
    "radians_to_degrees",
    "radians_to_length",
    "inside",
    "points_within_polygon",
    "along",
    "bbox",
    "bearing",
    "destination",
    "distance",
    "length",
    "midpoint",
    "coord_all",
    "get_coord",
    "LineIntersectsResult",
    "line_intersects",
    "line_slice",
    "line_slice_along",
    "nearest_point_on_line",
    "simplify",
    "simplify_positions",
]
