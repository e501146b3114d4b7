"""Immutable GeoJSON value types.

Geometries are frozen dataclasses holding tuples so they can be hashed and
shared freely. ``Feature`` and ``FeatureCollection`` are mutable containers
because their property bags are edited in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from ..errors import InvalidBoundingBoxError, InvalidGeometryError

# Altitude value meaning "no altitude recorded". Always test with
# ``Position.has_altitude`` rather than comparing against this constant.
MISSING_ALTITUDE = math.nan


def _is_missing(value: float) -> bool:
    return math.isnan(value)


@dataclass(frozen=True, slots=True, eq=False)
class Position:
    """A longitude/latitude pair with an optional altitude."""

    longitude: float
    latitude: float
    altitude: float = MISSING_ALTITUDE

    def __post_init__(self) -> None:
        object.__setattr__(self, "longitude", float(self.longitude))
        object.__setattr__(self, "latitude", float(self.latitude))
        altitude = MISSING_ALTITUDE if self.altitude is None else float(self.altitude)
        object.__setattr__(self, "altitude", altitude)

    @classmethod
    def from_coordinates(
        cls, longitude: float, latitude: float, altitude: Optional[float] = None
    ) -> "Position":
        return cls(longitude, latitude, MISSING_ALTITUDE if altitude is None else altitude)

    @classmethod
    def from_list(cls, values: Sequence[float]) -> "Position":
        """Build a position from ``[lon, lat]`` or ``[lon, lat, alt, ...]``."""

        if len(values) < 2:
            raise InvalidGeometryError(
                f"A position needs at least 2 values, received {len(values)}"
            )
        altitude = values[2] if len(values) >= 3 else MISSING_ALTITUDE
        return cls(values[0], values[1], altitude)

    @property
    def has_altitude(self) -> bool:
        return not _is_missing(self.altitude)

    def coordinates(self) -> List[float]:
        """Return ``[lon, lat]`` or ``[lon, lat, alt]``; never the sentinel."""

        if self.has_altitude:
            return [self.longitude, self.latitude, self.altitude]
        return [self.longitude, self.latitude]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        if self.longitude != other.longitude or self.latitude != other.latitude:
            return False
        if self.has_altitude and other.has_altitude:
            return self.altitude == other.altitude
        return self.has_altitude == other.has_altitude

    def __hash__(self) -> int:
        altitude = self.altitude if self.has_altitude else None
        return hash((self.longitude, self.latitude, altitude))


def _as_position(value: Union[Position, Sequence[float]]) -> Position:
    if isinstance(value, Position):
        return value
    return Position.from_list(value)


def _as_positions(values: Sequence[Any]) -> Tuple[Position, ...]:
    return tuple(_as_position(value) for value in values)


def _as_rings(values: Sequence[Sequence[Any]]) -> Tuple[Tuple[Position, ...], ...]:
    return tuple(_as_positions(ring) for ring in values)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned extent stored as 4 or 6 numbers.

    Layout follows RFC 7946: ``(west, south, east, north)`` or
    ``(west, south, min_alt, east, north, max_alt)``. West may exceed east for
    boxes crossing the antimeridian; no ordering is enforced.
    """

    values: Tuple[float, ...]

    def __post_init__(self) -> None:
        values = tuple(float(value) for value in self.values)
        if len(values) not in (4, 6):
            raise InvalidBoundingBoxError(len(values))
        object.__setattr__(self, "values", values)

    @classmethod
    def from_coordinates(cls, *values: float) -> "BoundingBox":
        """Build from ``west, south, [min_alt], east, north, [max_alt]``."""

        return cls(values)

    @classmethod
    def from_positions(cls, southwest: Position, northeast: Position) -> "BoundingBox":
        if southwest.has_altitude and northeast.has_altitude:
            return cls(
                (
                    southwest.longitude,
                    southwest.latitude,
                    southwest.altitude,
                    northeast.longitude,
                    northeast.latitude,
                    northeast.altitude,
                )
            )
        return cls(
            (
                southwest.longitude,
                southwest.latitude,
                northeast.longitude,
                northeast.latitude,
            )
        )

    @property
    def has_altitude(self) -> bool:
        return len(self.values) == 6

    @property
    def west(self) -> float:
        return self.values[0]

    @property
    def south(self) -> float:
        return self.values[1]

    @property
    def east(self) -> float:
        return self.values[3] if self.has_altitude else self.values[2]

    @property
    def north(self) -> float:
        return self.values[4] if self.has_altitude else self.values[3]

    @property
    def min_altitude(self) -> float:
        return self.values[2] if self.has_altitude else MISSING_ALTITUDE

    @property
    def max_altitude(self) -> float:
        return self.values[5] if self.has_altitude else MISSING_ALTITUDE

    @property
    def southwest(self) -> Position:
        return Position(self.west, self.south, self.min_altitude)

    @property
    def northeast(self) -> Position:
        return Position(self.east, self.north, self.max_altitude)

    def contains(self, position: Position) -> bool:
        """Return True when ``position`` lies inside the box (edges included).

        Each axis is tested independently, so a box crossing the antimeridian
        must be split by the caller. Altitude is only compared when both the
        box and the position carry one.
        """

        if not self.west <= position.longitude <= self.east:
            return False
        if not self.south <= position.latitude <= self.north:
            return False
        if self.has_altitude and position.has_altitude:
            return self.min_altitude <= position.altitude <= self.max_altitude
        return True

    def to_list(self) -> List[float]:
        return list(self.values)


@dataclass(frozen=True, slots=True)
class Point:
    coordinates: Position
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "Point"

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _as_position(self.coordinates))

    @classmethod
    def from_lng_lat(
        cls,
        longitude: float,
        latitude: float,
        altitude: Optional[float] = None,
        bbox: Optional[BoundingBox] = None,
    ) -> "Point":
        return cls(Position.from_coordinates(longitude, latitude, altitude), bbox)

    @property
    def longitude(self) -> float:
        return self.coordinates.longitude

    @property
    def latitude(self) -> float:
        return self.coordinates.latitude

    @property
    def altitude(self) -> float:
        return self.coordinates.altitude

    @property
    def has_altitude(self) -> bool:
        return self.coordinates.has_altitude


@dataclass(frozen=True, slots=True)
class MultiPoint:
    coordinates: Tuple[Position, ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "MultiPoint"

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _as_positions(self.coordinates))


@dataclass(frozen=True, slots=True)
class LineString:
    coordinates: Tuple[Position, ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "LineString"

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _as_positions(self.coordinates))

    @classmethod
    def from_polyline(cls, encoded: str, precision: Optional[int] = None) -> "LineString":
        """Decode an encoded polyline (precision 6 unless configured otherwise)."""

        from .polyline_utils import decode_polyline

        return cls(decode_polyline(encoded, precision))

    def to_polyline(self, precision: Optional[int] = None) -> str:
        from .polyline_utils import encode_polyline

        return encode_polyline(self.coordinates, precision)


@dataclass(frozen=True, slots=True)
class MultiLineString:
    coordinates: Tuple[Tuple[Position, ...], ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "MultiLineString"

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _as_rings(self.coordinates))

    def line_strings(self) -> List[LineString]:
        return [LineString(line) for line in self.coordinates]


def _check_linear_ring(ring: Sequence[Position], label: str) -> None:
    if len(ring) < 4:
        raise InvalidGeometryError(
            f"{label} must contain at least 4 positions, received {len(ring)}"
        )
    if ring[0] != ring[-1]:
        raise InvalidGeometryError(f"{label} must start and end at the same position")


@dataclass(frozen=True, slots=True)
class Polygon:
    """Polygon rings; the first ring is the exterior, the rest are holes."""

    coordinates: Tuple[Tuple[Position, ...], ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "Polygon"

    def __post_init__(self) -> None:
        object.__setattr__(self, "coordinates", _as_rings(self.coordinates))

    @classmethod
    def from_outer_inner(
        cls,
        outer: LineString,
        *inner: LineString,
        bbox: Optional[BoundingBox] = None,
    ) -> "Polygon":
        """Build a polygon from closed rings, validating each one."""

        _check_linear_ring(outer.coordinates, "Outer ring")
        for index, hole in enumerate(inner):
            _check_linear_ring(hole.coordinates, f"Inner ring {index}")
        rings = [outer.coordinates] + [hole.coordinates for hole in inner]
        return cls(tuple(rings), bbox)

    def outer(self) -> Optional[LineString]:
        if not self.coordinates:
            return None
        return LineString(self.coordinates[0])

    def inner(self) -> List[LineString]:
        return [LineString(ring) for ring in self.coordinates[1:]]


@dataclass(frozen=True, slots=True)
class MultiPolygon:
    coordinates: Tuple[Tuple[Tuple[Position, ...], ...], ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "MultiPolygon"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "coordinates",
            tuple(_as_rings(polygon) for polygon in self.coordinates),
        )

    def polygons(self) -> List[Polygon]:
        return [Polygon(rings) for rings in self.coordinates]


@dataclass(frozen=True, slots=True, eq=False)
class GeometryCollection:
    """An ordered group of geometries, possibly nested collections.

    Equality and hashing walk nested collections with an explicit stack.
    """

    geometries: Tuple["Geometry", ...]
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "GeometryCollection"

    def __post_init__(self) -> None:
        geometries = tuple(self.geometries)
        for index, geometry in enumerate(geometries):
            if not isinstance(geometry, GEOMETRY_CLASSES):
                raise InvalidGeometryError(
                    f"GeometryCollection member {index} is not a geometry: "
                    f"{type(geometry).__name__}"
                )
        object.__setattr__(self, "geometries", geometries)

    @classmethod
    def from_geometry(
        cls, geometry: "Geometry", bbox: Optional[BoundingBox] = None
    ) -> "GeometryCollection":
        return cls((geometry,), bbox)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeometryCollection):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left.bbox != right.bbox or len(left.geometries) != len(right.geometries):
                return False
            for mine, theirs in zip(left.geometries, right.geometries):
                if isinstance(mine, GeometryCollection) and isinstance(
                    theirs, GeometryCollection
                ):
                    pending.append((mine, theirs))
                elif mine != theirs:
                    return False
        return True

    def __hash__(self) -> int:
        tokens: List[Any] = []
        pending: List["Geometry"] = [self]
        while pending:
            current = pending.pop()
            if isinstance(current, GeometryCollection):
                tokens.append((current.type, len(current.geometries), current.bbox))
                pending.extend(reversed(current.geometries))
            else:
                tokens.append(hash(current))
        return hash(tuple(tokens))


Geometry = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
]

GEOMETRY_CLASSES = (
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
)

GEOMETRY_TYPES: Dict[str, type] = {cls.type: cls for cls in GEOMETRY_CLASSES}

FeatureId = Union[str, int, float]


@dataclass(slots=True)
class Feature:
    """A geometry (or None for an unlocated feature) plus a property bag."""

    geometry: Optional[Geometry] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[FeatureId] = None
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "Feature"

    def __post_init__(self) -> None:
        if self.properties is None:
            self.properties = {}

    @classmethod
    def from_geometry(
        cls,
        geometry: Optional[Geometry],
        properties: Optional[Dict[str, Any]] = None,
        id: Optional[FeatureId] = None,
        bbox: Optional[BoundingBox] = None,
    ) -> "Feature":
        return cls(geometry, dict(properties or {}), id, bbox)

    def add_property(self, key: str, value: Any) -> None:
        self.properties[key] = value

    def get_property(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def has_property(self, key: str) -> bool:
        return key in self.properties

    def has_non_null_value_for_property(self, key: str) -> bool:
        return self.properties.get(key) is not None

    def remove_property(self, key: str) -> Any:
        return self.properties.pop(key, None)


@dataclass(slots=True)
class FeatureCollection:
    features: List[Feature] = field(default_factory=list)
    bbox: Optional[BoundingBox] = None

    type: ClassVar[str] = "FeatureCollection"

    def __post_init__(self) -> None:
        self.features = list(self.features)

    @classmethod
    def from_features(
        cls, features: Sequence[Feature], bbox: Optional[BoundingBox] = None
    ) -> "FeatureCollection":
        return cls(list(features), bbox)

    @classmethod
    def from_feature(
        cls, feature: Feature, bbox: Optional[BoundingBox] = None
    ) -> "FeatureCollection":
        return cls([feature], bbox)

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)


__all__ = [
    "MISSING_ALTITUDE",
    "Position",
    "BoundingBox",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "Geometry",
    "GEOMETRY_CLASSES",
    "GEOMETRY_TYPES",
    "Feature",
    "FeatureCollection",
]
