"""Typed GeoJSON model, codec and coordinate shifters."""

from .codec import (
    decode,
    decode_bounding_box,
    decode_feature,
    decode_feature_collection,
    decode_geometry,
    encode,
    to_geojson,
)
from .models import (
    GEOMETRY_TYPES,
    MISSING_ALTITUDE,
    BoundingBox,
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
from .polyline_utils import decode_polyline, encode_polyline
from .shifter import (
    CoordinateShifter,
    IdentityShifter,
    OffsetShifter,
    ProjectionShifter,
    get_shifter,
    install_shifter,
    is_using_default_shifter,
    shifter_scope,
)

__all__ = [
    "decode",
    "decode_bounding_box",
    "decode_feature",
    "decode_feature_collection",
    "decode_geometry",
    "encode",
    "to_geojson",
    "GEOMETRY_TYPES",
    "MISSING_ALTITUDE",
    "BoundingBox",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "GeometryCollection",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "Point",
    "Polygon",
    "Position",
    "decode_polyline",
    "encode_polyline",
    "CoordinateShifter",
    "IdentityShifter",
    "OffsetShifter",
    "ProjectionShifter",
    "get_shifter",
    "install_shifter",
    "is_using_default_shifter",
    "shifter_scope",
]
