"""Thin out noisy GPS traces.

A trace is a FeatureCollection whose Point, MultiPoint and LineString features
are flattened, in order, into a single sequence of fixes. Timestamps come from
an ISO-8601 property (``coordTimes`` by default) holding either one string or
a list aligned with the coordinates.

Fixes that are both too close to and too soon after the last retained fix are
dropped. The first and last fixes are always retained, and the survivors are
subsampled by an even stride when they exceed the point budget.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .config import (
    TIDY_MAXIMUM_POINTS,
    TIDY_MINIMUM_DISTANCE_M,
    TIDY_MINIMUM_TIME_MS,
    TIDY_TIMESTAMP_KEY,
)
from .errors import InvalidConfigurationError, UnprocessableFeatureError
from .geojson.models import (
    Feature,
    FeatureCollection,
    LineString,
    MultiPoint,
    Point,
    Position,
)
from .turf.constants import UNIT_METERS
from .turf.measurement import distance

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TidyOptions:
    """Thresholds controlling which fixes survive a tidy pass."""

    minimum_distance_m: float = TIDY_MINIMUM_DISTANCE_M
    minimum_time_ms: float = TIDY_MINIMUM_TIME_MS
    maximum_points: int = TIDY_MAXIMUM_POINTS
    timestamp_key: str = TIDY_TIMESTAMP_KEY

    def __post_init__(self) -> None:
        for name in ("minimum_distance_m", "minimum_time_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfigurationError(f"{name} must be a number")
            if math.isnan(value) or value < 0:
                raise InvalidConfigurationError(
                    f"{name} must be non-negative, received {value!r}"
                )
        if isinstance(self.maximum_points, bool) or not isinstance(
            self.maximum_points, int
        ):
            raise InvalidConfigurationError(
                f"maximum_points must be an integer, received {self.maximum_points!r}"
            )
        if not self.timestamp_key:
            raise InvalidConfigurationError("timestamp_key must be a non-empty string")


@dataclass(slots=True)
class _Fix:
    position: Position
    timestamp: Optional[str]
    instant: Optional[datetime]
    # Source feature properties minus the timestamp key; shared per feature.
    properties: Dict[str, Any]


def _parse_timestamp(value: str, index: int) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise UnprocessableFeatureError(
            f"Unparseable timestamp {value!r}", index
        ) from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _feature_positions(feature: Feature, index: int) -> Sequence[Position]:
    geometry = feature.geometry
    if geometry is None:
        raise UnprocessableFeatureError("Feature has no geometry", index)
    if isinstance(geometry, Point):
        return (geometry.coordinates,)
    if isinstance(geometry, (MultiPoint, LineString)):
        return geometry.coordinates
    raise UnprocessableFeatureError(
        f"Unsupported geometry type {geometry.type!r}; expected Point, "
        "MultiPoint or LineString",
        index,
    )


def _feature_timestamps(
    feature: Feature, index: int, key: str, count: int
) -> List[Optional[str]]:
    raw = feature.properties.get(key)
    if raw is None:
        return [None] * count
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise UnprocessableFeatureError(
            f"Property {key!r} must be a string or a list of strings", index
        )
    if len(raw) != count:
        raise UnprocessableFeatureError(
            f"Property {key!r} has {len(raw)} timestamps for {count} coordinates",
            index,
        )
    for value in raw:
        if value is not None and not isinstance(value, str):
            raise UnprocessableFeatureError(
                f"Property {key!r} contains a non-string timestamp {value!r}", index
            )
    return list(raw)


def _flatten(trace: FeatureCollection, key: str) -> List[_Fix]:
    fixes: List[_Fix] = []
    for index, feature in enumerate(trace.features):
        positions = _feature_positions(feature, index)
        timestamps = _feature_timestamps(feature, index, key, len(positions))
        properties = {
            name: value for name, value in feature.properties.items() if name != key
        }
        for position, timestamp in zip(positions, timestamps):
            instant = None if timestamp is None else _parse_timestamp(timestamp, index)
            fixes.append(_Fix(position, timestamp, instant, properties))
    return fixes


def count_fixes(
    trace: FeatureCollection, timestamp_key: str = TIDY_TIMESTAMP_KEY
) -> int:
    """Return how many fixes ``trace`` flattens into."""

    return len(_flatten(trace, timestamp_key))


def _is_redundant(anchor: _Fix, candidate: _Fix, options: TidyOptions) -> bool:
    gap_m = distance(anchor.position, candidate.position, UNIT_METERS)
    if gap_m >= options.minimum_distance_m:
        return False
    if anchor.instant is None or candidate.instant is None:
        return True
    elapsed_ms = (candidate.instant - anchor.instant).total_seconds() * 1000.0
    return elapsed_ms < options.minimum_time_ms


def _decimate_fixes(fixes: List[_Fix], max_points: int) -> List[_Fix]:
    """Down-sample by an even stride while preserving the endpoints."""

    count = len(fixes)
    if count <= max_points:
        return fixes
    indices = np.linspace(0, count - 1, num=max_points, dtype=int)
    return [fixes[int(i)] for i in indices]


def _to_feature(fix: _Fix, key: str) -> Feature:
    properties = dict(fix.properties)
    if fix.timestamp is not None:
        properties[key] = [fix.timestamp]
    return Feature.from_geometry(Point(fix.position), properties)


def tidy(
    trace: FeatureCollection, options: Optional[TidyOptions] = None
) -> FeatureCollection:
    """Return a thinned copy of ``trace`` with one Point feature per retained fix.

    Args:
        trace: Collection of Point, MultiPoint or LineString features.
        options: Thresholds; defaults come from :mod:`geotrace.config`.

    Returns:
        A new FeatureCollection, or ``trace`` itself when it holds no fixes.

    Raises:
        UnprocessableFeatureError: A feature has no usable geometry or its
            timestamps cannot be read.
        InvalidConfigurationError: ``maximum_points`` is below 2 for a trace
            with two or more fixes.
    """

    options = options or TidyOptions()
    key = options.timestamp_key
    fixes = _flatten(trace, key)
    if not fixes:
        LOGGER.debug("Tidy input has no fixes; returning it unchanged")
        return trace
    if len(fixes) < 2:
        return FeatureCollection([_to_feature(fix, key) for fix in fixes])
    if options.maximum_points < 2:
        raise InvalidConfigurationError(
            f"maximum_points must be at least 2, received {options.maximum_points}"
        )

    anchor = fixes[0]
    retained = [anchor]
    for candidate in fixes[1:-1]:
        if _is_redundant(anchor, candidate, options):
            continue
        retained.append(candidate)
        anchor = candidate
    retained.append(fixes[-1])

    filtered_count = len(retained)
    retained = _decimate_fixes(retained, options.maximum_points)
    LOGGER.debug(
        "Tidy kept %d of %d fixes (%d after filtering, subsampled=%s)",
        len(retained),
        len(fixes),
        filtered_count,
        filtered_count != len(retained),
    )
    return FeatureCollection([_to_feature(fix, key) for fix in retained])


__all__ = ["TidyOptions", "tidy", "count_fixes"]
