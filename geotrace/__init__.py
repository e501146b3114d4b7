"""geotrace: typed GeoJSON model, Turf-style geometry helpers and GPS trace tidying."""

from .errors import (
    EncodeError,
    GeoTraceError,
    InvalidBoundingBoxError,
    InvalidConfigurationError,
    InvalidGeometryError,
    ParseError,
    TurfError,
    UnknownGeometryType,
    UnprocessableFeatureError,
)
from .geojson import (
    MISSING_ALTITUDE,
    BoundingBox,
    CoordinateShifter,
    Feature,
    FeatureCollection,
    Geometry,
    GeometryCollection,
    IdentityShifter,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    OffsetShifter,
    Point,
    Polygon,
    Position,
    ProjectionShifter,
    decode,
    decode_bounding_box,
    decode_feature,
    decode_feature_collection,
    decode_geometry,
    encode,
    get_shifter,
    install_shifter,
    shifter_scope,
    to_geojson,
)
from .tidy import TidyOptions, count_fixes, tidy
from .turf.misc import LineIntersectsResult, line_intersects

__version__ = "0.1.0"

__all__ = [
    "EncodeError",
    "GeoTraceError",
    "InvalidBoundingBoxError",
    "InvalidConfigurationError",
    "InvalidGeometryError",
    "ParseError",
    "TurfError",
    "UnknownGeometryType",
    "UnprocessableFeatureError",
    "MISSING_ALTITUDE",
    "BoundingBox",
    "CoordinateShifter",
    "Feature",
    "FeatureCollection",
    "Geometry",
    "GeometryCollection",
    "IdentityShifter",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "OffsetShifter",
    "Point",
    "Polygon",
    "Position",
    "ProjectionShifter",
    "decode",
    "decode_bounding_box",
    "decode_feature",
    "decode_feature_collection",
    "decode_geometry",
    "encode",
    "get_shifter",
    "install_shifter",
    "shifter_scope",
    "to_geojson",
    "TidyOptions",
    "count_fixes",
    "tidy",
    "LineIntersectsResult",
    "line_intersects",
]
