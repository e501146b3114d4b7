"""Central configuration for the geotrace toolkit.

All values are constants imported by the rest of the package. Defaults can be
overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except ImportError:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Tidy defaults
# ---------------------------------------------------------------------------
# Fixes closer than this (metres) to the last kept fix are candidates for removal.
TIDY_MINIMUM_DISTANCE_M = _env_float("GEOTRACE_TIDY_MINIMUM_DISTANCE_M", 10.0)

# Fixes sampled sooner than this (milliseconds) after the last kept fix are
# candidates for removal.
TIDY_MINIMUM_TIME_MS = _env_float("GEOTRACE_TIDY_MINIMUM_TIME_MS", 5000.0)

# Upper bound on the number of fixes in a tidy output.
TIDY_MAXIMUM_POINTS = _env_int("GEOTRACE_TIDY_MAXIMUM_POINTS", 100)

# Feature property holding the ISO-8601 timestamps of a trace.
TIDY_TIMESTAMP_KEY = os.getenv("GEOTRACE_TIDY_TIMESTAMP_KEY", "coordTimes")


# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------
# Decimal precision used for encoded polylines (5 for Google, 6 for OSRM).
POLYLINE_PRECISION = _env_int("GEOTRACE_POLYLINE_PRECISION", 6)

# Number of pyproj transformers kept alive by ProjectionShifter.
PROJECTION_TRANSFORMER_CACHE_SIZE = _env_int(
    "GEOTRACE_PROJECTION_TRANSFORMER_CACHE_SIZE", 16
)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------
# Directory (absolute or relative) where rendered trace maps are written.
TRACE_MAP_OUTPUT_DIR = os.getenv("GEOTRACE_TRACE_MAP_OUTPUT_DIR", "maps")

# Draw individual fix markers on trace maps (can be slow for long traces).
TRACE_MAP_DRAW_MARKERS = _env_bool("GEOTRACE_TRACE_MAP_DRAW_MARKERS", True)

# Root logger level used by the command-line tools.
LOG_LEVEL = os.getenv("GEOTRACE_LOG_LEVEL", "INFO").upper()
