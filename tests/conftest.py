"""Global pytest fixtures & helpers.

Adds project root to path and provides the synthetic GPS traces shared by the
tidy, codec and tool tests.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from geotrace.geojson.models import Feature, FeatureCollection, LineString, Position
from geotrace.geojson.shifter import install_shifter

# Synthetic walk along the equator: ~1.5 m and 1 s between fixes.
WALK_FIX_COUNT = 423
WALK_START = datetime(2015, 6, 5, 1, 7, 54, tzinfo=timezone.utc)
WALK_START_LON = 36.8
WALK_STEP_DEG = 0.0000135


# --- Factory helpers -------------------------------------------------
def make_timestamps(count: int, start: datetime = WALK_START, cadence_s: int = 1) -> List[str]:
    return [
        (start + timedelta(seconds=idx * cadence_s)).strftime("%Y-%m-%dT%H:%M:%SZ")
        for idx in range(count)
    ]


def make_walk_positions(count: int = WALK_FIX_COUNT) -> List[Position]:
    return [Position(WALK_START_LON + idx * WALK_STEP_DEG, 0.0) for idx in range(count)]


def make_walk_trace(
    count: int = WALK_FIX_COUNT,
    *,
    with_timestamps: bool = True,
    properties: Optional[dict] = None,
) -> FeatureCollection:
    props = dict(properties or {})
    if with_timestamps:
        props["coordTimes"] = make_timestamps(count)
    feature = Feature.from_geometry(LineString(make_walk_positions(count)), props)
    return FeatureCollection.from_feature(feature)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def walk_trace() -> FeatureCollection:
    """423 timestamped fixes, 1 s apart, about 1.5 m apart."""
    return make_walk_trace()


@pytest.fixture(autouse=True)
def reset_shifter() -> Iterator[None]:
    install_shifter(None)
    yield
    install_shifter(None)
