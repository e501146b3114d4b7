"""Conversion between GeoJSON text and the typed model.

Decoding dispatches on the ``type`` discriminator against a fixed table of
known names. GeometryCollections are walked with an explicit stack on both
decode and encode, so nesting depth is not tied to the recursion limit.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import EncodeError, InvalidBoundingBoxError, ParseError, UnknownGeometryType
from .models import (
    GEOMETRY_CLASSES,
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
from . import _jsontext
from .shifter import CoordinateShifter, resolve_shifter

LOGGER = logging.getLogger(__name__)

GeoJSONValue = Union[Geometry, Feature, FeatureCollection]
Source = Union[str, bytes, bytearray, Mapping[str, Any]]

# Geometry name -> (class, nesting depth of its coordinates array).
_COORDINATE_GEOMETRIES: Dict[str, Tuple[type, int]] = {
    Point.type: (Point, 0),
    MultiPoint.type: (MultiPoint, 1),
    LineString.type: (LineString, 1),
    MultiLineString.type: (MultiLineString, 2),
    Polygon.type: (Polygon, 2),
    MultiPolygon.type: (MultiPolygon, 3),
}

# Largest magnitude where every integral float is exactly representable.
_MAX_EXACT_INTEGER = 2**53


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def _reject_constant(name: str) -> Any:
    raise ParseError(f"Non-finite number {name} is not valid GeoJSON")


def _load(source: Any) -> Any:
    """Return parsed JSON for text input; mappings pass straight through."""

    if isinstance(source, Mapping):
        return source
    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError("GeoJSON text is not valid UTF-8") from exc
    if not isinstance(source, str):
        raise ParseError(
            f"Expected GeoJSON text or a mapping, received {type(source).__name__}"
        )
    try:
        try:
            return json.loads(source, parse_constant=_reject_constant)
        except RecursionError:
            LOGGER.debug("Document nests past the json module limit; parsing on a stack")
            return _jsontext.loads(source)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"Invalid JSON: {exc.msg} (line {exc.lineno} column {exc.colno})"
        ) from exc
    except _jsontext.NonFiniteConstantError as exc:
        raise ParseError(f"Non-finite number {exc.name} is not valid GeoJSON") from None
    except ParseError:
        raise
    except ValueError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _require_object(raw: Any, path: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ParseError(f"Expected a JSON object, received {_kind(raw)}", path)
    return raw


def _require_array(raw: Any, path: str) -> Sequence[Any]:
    if not isinstance(raw, (list, tuple)):
        raise ParseError(f"Expected an array, received {_kind(raw)}", path)
    return raw


def _read_type(obj: Mapping[str, Any], path: str) -> str:
    type_name = obj.get("type")
    if type_name is None:
        raise ParseError("Missing required 'type' field", path)
    if not isinstance(type_name, str):
        raise ParseError(
            f"Expected 'type' to be a string, received {_kind(type_name)}",
            f"{path}.type",
        )
    return type_name


def _read_number(raw: Any, path: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ParseError(f"Expected a number, received {_kind(raw)}", path)
    return float(raw)


def _read_position(raw: Any, path: str, shifter: CoordinateShifter) -> Position:
    values = _require_array(raw, path)
    if len(values) < 2:
        raise ParseError(
            f"A position needs at least 2 values, received {len(values)}", path
        )
    longitude = _read_number(values[0], f"{path}[0]")
    latitude = _read_number(values[1], f"{path}[1]")
    altitude = (
        _read_number(values[2], f"{path}[2]") if len(values) >= 3 else MISSING_ALTITUDE
    )
    return shifter.shift(Position(longitude, latitude, altitude))


def _read_coordinates(
    raw: Any, depth: int, path: str, shifter: CoordinateShifter
) -> Any:
    if depth == 0:
        return _read_position(raw, path, shifter)
    items = _require_array(raw, path)
    return tuple(
        _read_coordinates(item, depth - 1, f"{path}[{index}]", shifter)
        for index, item in enumerate(items)
    )


def _shift_bbox(box: BoundingBox, shifter: CoordinateShifter) -> BoundingBox:
    return BoundingBox.from_positions(
        shifter.shift(box.southwest), shifter.shift(box.northeast)
    )


def _unshift_bbox(box: BoundingBox, shifter: CoordinateShifter) -> BoundingBox:
    return BoundingBox.from_positions(
        shifter.unshift(box.southwest), shifter.unshift(box.northeast)
    )


def _read_bbox(
    raw: Any, path: str, shifter: Optional[CoordinateShifter]
) -> Optional[BoundingBox]:
    if raw is None:
        return None
    values = _require_array(raw, path)
    if len(values) not in (4, 6):
        raise InvalidBoundingBoxError(len(values))
    box = BoundingBox(
        tuple(_read_number(value, f"{path}[{index}]") for index, value in enumerate(values))
    )
    if shifter is None:
        return box
    return _shift_bbox(box, shifter)


@dataclass(slots=True)
class _CollectionFrame:
    """A GeometryCollection whose members are still being decoded.

    Paths are rebuilt from the parent chain only when an error is raised.
    """

    members_raw: Sequence[Any]
    bbox: Optional[BoundingBox]
    parent: Optional["_CollectionFrame"] = None
    index_in_parent: int = 0
    root_path: str = "$"
    members: List[Geometry] = field(default_factory=list)
    next_index: int = 0

    def path(self) -> str:
        parts: List[str] = []
        frame: Optional[_CollectionFrame] = self
        while frame is not None and frame.parent is not None:
            parts.append(f".geometries[{frame.index_in_parent}]")
            frame = frame.parent
        root = frame.root_path if frame is not None else "$"
        return root + "".join(reversed(parts))


def _begin_geometry(
    raw: Any, locate: Callable[[], str], shifter: CoordinateShifter
) -> Union[Geometry, _CollectionFrame]:
    """Decode a non-collection geometry, or open a frame for a collection."""

    if not isinstance(raw, Mapping):
        _require_object(raw, locate())
    type_name = raw.get("type")
    if not isinstance(type_name, str):
        _read_type(raw, locate())
    if type_name == GeometryCollection.type:
        members_raw = raw.get("geometries")
        if members_raw is None:
            raise ParseError("Missing required 'geometries' field", locate())
        if not isinstance(members_raw, (list, tuple)):
            _require_array(members_raw, f"{locate()}.geometries")
        bbox_raw = raw.get("bbox")
        bbox = None if bbox_raw is None else _read_bbox(bbox_raw, f"{locate()}.bbox", shifter)
        return _CollectionFrame(members_raw=members_raw, bbox=bbox)

    path = locate()
    entry = _COORDINATE_GEOMETRIES.get(type_name)
    if entry is None:
        raise UnknownGeometryType(type_name, f"{path}.type")
    cls, depth = entry
    raw_coordinates = raw.get("coordinates")
    if raw_coordinates is None:
        raise ParseError("Missing required 'coordinates' field", path)
    coordinates = _read_coordinates(
        raw_coordinates, depth, f"{path}.coordinates", shifter
    )
    bbox = _read_bbox(raw.get("bbox"), f"{path}.bbox", shifter)
    return cls(coordinates, bbox)


def _read_geometry(
    raw: Any, path: str, shifter: CoordinateShifter
) -> Optional[Geometry]:
    if raw is None:
        return None
    return _read_geometry_object(raw, path, shifter)


def _read_geometry_object(
    raw: Any, path: str, shifter: CoordinateShifter
) -> Geometry:
    started = _begin_geometry(raw, lambda: path, shifter)
    if not isinstance(started, _CollectionFrame):
        return started
    started.root_path = path

    stack: List[_CollectionFrame] = [started]
    while True:
        frame = stack[-1]
        if frame.next_index < len(frame.members_raw):
            index = frame.next_index
            frame.next_index += 1
            member_raw = frame.members_raw[index]

            def locate(frame: _CollectionFrame = frame, index: int = index) -> str:
                return f"{frame.path()}.geometries[{index}]"

            if member_raw is None:
                raise ParseError("GeometryCollection members cannot be null", locate())
            member = _begin_geometry(member_raw, locate, shifter)
            if isinstance(member, _CollectionFrame):
                member.parent = frame
                member.index_in_parent = index
                stack.append(member)
            else:
                frame.members.append(member)
            continue

        stack.pop()
        finished = GeometryCollection(tuple(frame.members), frame.bbox)
        if not stack:
            return finished
        stack[-1].members.append(finished)


def _read_properties(raw: Any, path: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    return dict(_require_object(raw, path))


def _read_feature_id(raw: Any, path: str) -> Optional[Union[str, int, float]]:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise ParseError(
            f"Feature 'id' must be a string or number, received {_kind(raw)}", path
        )
    return raw


def _read_feature(raw: Any, path: str, shifter: CoordinateShifter) -> Feature:
    obj = _require_object(raw, path)
    type_name = _read_type(obj, path)
    if type_name != Feature.type:
        raise ParseError(f"Expected type 'Feature', received {type_name!r}", f"{path}.type")
    return Feature(
        geometry=_read_geometry(obj.get("geometry"), f"{path}.geometry", shifter),
        properties=_read_properties(obj.get("properties"), f"{path}.properties"),
        id=_read_feature_id(obj.get("id"), f"{path}.id"),
        bbox=_read_bbox(obj.get("bbox"), f"{path}.bbox", shifter),
    )


def _read_feature_collection(
    raw: Any, path: str, shifter: CoordinateShifter
) -> FeatureCollection:
    obj = _require_object(raw, path)
    type_name = _read_type(obj, path)
    if type_name != FeatureCollection.type:
        raise ParseError(
            f"Expected type 'FeatureCollection', received {type_name!r}", f"{path}.type"
        )
    features_raw = obj.get("features")
    if features_raw is None:
        raise ParseError("Missing required 'features' field", path)
    features_raw = _require_array(features_raw, f"{path}.features")
    features = [
        _read_feature(item, f"{path}.features[{index}]", shifter)
        for index, item in enumerate(features_raw)
    ]
    LOGGER.debug("Decoded FeatureCollection with %d features", len(features))
    return FeatureCollection(
        features, _read_bbox(obj.get("bbox"), f"{path}.bbox", shifter)
    )


def decode(
    source: Source, *, shifter: Optional[CoordinateShifter] = None
) -> GeoJSONValue:
    """Decode any GeoJSON object, dispatching on its ``type``.

    Args:
        source: GeoJSON text (``str``/``bytes``) or an already-parsed mapping.
        shifter: Shifter applied to every decoded position. Defaults to the
            process-wide shifter.

    Returns:
        A geometry, :class:`Feature` or :class:`FeatureCollection`.

    Raises:
        ParseError: If the input is malformed or missing required fields.
        UnknownGeometryType: If ``type`` names no known GeoJSON object.
        InvalidBoundingBoxError: If a ``bbox`` holds neither 4 nor 6 values.
    """

    active = resolve_shifter(shifter)
    obj = _require_object(_load(source), "$")
    type_name = _read_type(obj, "$")
    if type_name == Feature.type:
        return _read_feature(obj, "$", active)
    if type_name == FeatureCollection.type:
        return _read_feature_collection(obj, "$", active)
    return _read_geometry_object(obj, "$", active)


def decode_geometry(
    source: Optional[Source], *, shifter: Optional[CoordinateShifter] = None
) -> Optional[Geometry]:
    """Decode a geometry; JSON ``null`` (or ``None``) yields ``None``."""

    if source is None:
        return None
    return _read_geometry(_load(source), "$", resolve_shifter(shifter))


def decode_feature(
    source: Source, *, shifter: Optional[CoordinateShifter] = None
) -> Feature:
    return _read_feature(_load(source), "$", resolve_shifter(shifter))


def decode_feature_collection(
    source: Source, *, shifter: Optional[CoordinateShifter] = None
) -> FeatureCollection:
    return _read_feature_collection(_load(source), "$", resolve_shifter(shifter))


def decode_bounding_box(source: Union[str, bytes, Sequence[float]]) -> BoundingBox:
    """Decode a bare ``bbox`` array. No shifter is applied."""

    raw = source if isinstance(source, (list, tuple)) else _load(source)
    box = _read_bbox(raw, "$", None)
    if box is None:
        raise ParseError("Expected a bounding box array, received null")
    return box


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def _write_number(value: float, label: str) -> Union[int, float]:
    if not math.isfinite(value):
        raise EncodeError(f"Cannot encode non-finite {label} value {value!r}")
    if value == 0.0 and math.copysign(1.0, value) < 0:
        return value
    if value.is_integer() and abs(value) < _MAX_EXACT_INTEGER:
        return int(value)
    return value


def _write_position(position: Position, shifter: CoordinateShifter) -> List[Any]:
    wire = shifter.unshift(position)
    values = [
        _write_number(wire.longitude, "longitude"),
        _write_number(wire.latitude, "latitude"),
    ]
    if wire.has_altitude:
        values.append(_write_number(wire.altitude, "altitude"))
    return values


def _write_coordinates(coordinates: Any, depth: int, shifter: CoordinateShifter) -> Any:
    if depth == 0:
        return _write_position(coordinates, shifter)
    return [_write_coordinates(item, depth - 1, shifter) for item in coordinates]


def _write_bbox(box: BoundingBox, shifter: CoordinateShifter) -> List[Any]:
    wire = _unshift_bbox(box, shifter)
    return [_write_number(value, "bbox") for value in wire.values]


def _geometry_shell(geometry: Geometry, shifter: CoordinateShifter) -> Dict[str, Any]:
    """Return the mapping for one geometry; collection members are filled later."""

    body: Dict[str, Any] = {"type": geometry.type}
    if geometry.bbox is not None:
        body["bbox"] = _write_bbox(geometry.bbox, shifter)
    if isinstance(geometry, GeometryCollection):
        return body
    entry = _COORDINATE_GEOMETRIES.get(geometry.type)
    if entry is None:
        raise EncodeError(f"Unsupported geometry type {type(geometry).__name__}")
    body["coordinates"] = _write_coordinates(geometry.coordinates, entry[1], shifter)
    return body


def _write_geometry(geometry: Geometry, shifter: CoordinateShifter) -> Dict[str, Any]:
    root: List[Any] = [None]
    stack: List[Tuple[Geometry, List[Any], int]] = [(geometry, root, 0)]
    while stack:
        current, target, slot = stack.pop()
        body = _geometry_shell(current, shifter)
        target[slot] = body
        if isinstance(current, GeometryCollection):
            members: List[Any] = [None] * len(current.geometries)
            body["geometries"] = members
            stack.extend(
                (member, members, index)
                for index, member in enumerate(current.geometries)
            )
    return root[0]


def _write_feature(feature: Feature, shifter: CoordinateShifter) -> Dict[str, Any]:
    body: Dict[str, Any] = {"type": Feature.type}
    if feature.bbox is not None:
        body["bbox"] = _write_bbox(feature.bbox, shifter)
    if feature.id is not None:
        body["id"] = feature.id
    body["geometry"] = (
        None if feature.geometry is None else _write_geometry(feature.geometry, shifter)
    )
    body["properties"] = dict(feature.properties or {})
    return body


def _write_feature_collection(
    collection: FeatureCollection, shifter: CoordinateShifter
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"type": FeatureCollection.type}
    if collection.bbox is not None:
        body["bbox"] = _write_bbox(collection.bbox, shifter)
    body["features"] = [_write_feature(item, shifter) for item in collection.features]
    return body


def to_geojson(
    value: Union[GeoJSONValue, BoundingBox],
    *,
    shifter: Optional[CoordinateShifter] = None,
) -> Any:
    """Return the JSON-ready mapping (or list, for a bounding box) of ``value``."""

    active = resolve_shifter(shifter)
    if isinstance(value, FeatureCollection):
        return _write_feature_collection(value, active)
    if isinstance(value, Feature):
        return _write_feature(value, active)
    if isinstance(value, BoundingBox):
        return _write_bbox(value, active)
    if isinstance(value, GEOMETRY_CLASSES):
        return _write_geometry(value, active)
    raise EncodeError(f"Cannot encode {type(value).__name__} as GeoJSON")


def encode(
    value: Union[GeoJSONValue, BoundingBox],
    *,
    shifter: Optional[CoordinateShifter] = None,
    indent: Optional[int] = None,
) -> str:
    """Serialise a model value to GeoJSON text.

    Output is compact unless ``indent`` is given. Floats keep their shortest
    round-trip representation and whole numbers drop the ``.0`` suffix.

    Raises:
        EncodeError: If a number is non-finite, a property value is not JSON
            serialisable, or a property value refers to itself.
    """

    payload = to_geojson(value, shifter=shifter)
    separators = (",", ":") if indent is None else (",", ": ")
    try:
        try:
            return json.dumps(
                payload,
                indent=indent,
                separators=separators,
                allow_nan=False,
                ensure_ascii=False,
            )
        except RecursionError:
            LOGGER.debug("Value nests past the json module limit; writing on a stack")
            return _jsontext.dumps(payload, indent=indent)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Unable to serialise GeoJSON: {exc}") from exc


__all__ = [
    "GeoJSONValue",
    "decode",
    "decode_geometry",
    "decode_feature",
    "decode_feature_collection",
    "decode_bounding_box",
    "to_geojson",
    "encode",
]
