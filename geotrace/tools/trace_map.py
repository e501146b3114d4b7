"""Render a GPS trace and its tidy counterpart on an interactive map."""

from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import folium
import numpy as np

from ..config import TRACE_MAP_DRAW_MARKERS, TRACE_MAP_OUTPUT_DIR
from ..errors import GeoTraceError, UnprocessableFeatureError
from ..geojson.models import FeatureCollection
from ..tidy import tidy
from ..turf.meta import coord_all
from ._cli import load_trace, setup_logging

LatLon = Tuple[float, float]
PathLike = Union[str, Path]

_RAW_COLOR = "#2c7bb6"
_TIDY_COLOR = "#d73027"


def _latlon_points(trace: FeatureCollection) -> List[LatLon]:
    return [(position.latitude, position.longitude) for position in coord_all(trace)]


def build_trace_map(
    raw: FeatureCollection,
    tidied: Optional[FeatureCollection] = None,
    output_html: Optional[PathLike] = None,
    *,
    draw_markers: bool = TRACE_MAP_DRAW_MARKERS,
) -> folium.Map:
    """Create a map showing the raw trace and, optionally, its tidy version.

    Args:
        raw: Trace as read from disk.
        tidied: Result of :func:`geotrace.tidy.tidy` for ``raw``.
        output_html: Optional path where the rendered HTML map is saved.
        draw_markers: Draw a marker for every tidy fix.

    Returns:
        The :class:`folium.Map` holding the overlays.

    Raises:
        UnprocessableFeatureError: If the raw trace has no coordinates.
    """

    raw_points = _latlon_points(raw)
    if not raw_points:
        raise UnprocessableFeatureError("Trace has no coordinates to draw")

    coords = np.asarray(raw_points, dtype=float)
    center = (float(coords[:, 0].mean()), float(coords[:, 1].mean()))
    folium_map = folium.Map(location=center, zoom_start=15, control_scale=True)
    folium.PolyLine(
        raw_points,
        color=_RAW_COLOR,
        weight=4,
        opacity=0.5,
        tooltip=f"Raw trace ({len(raw_points)} fixes)",
    ).add_to(folium_map)

    if tidied is not None:
        tidy_points = _latlon_points(tidied)
        if len(tidy_points) >= 2:
            folium.PolyLine(
                tidy_points,
                color=_TIDY_COLOR,
                weight=3,
                opacity=0.9,
                tooltip=f"Tidy trace ({len(tidy_points)} fixes)",
            ).add_to(folium_map)
        if draw_markers:
            for index, point in enumerate(tidy_points):
                folium.CircleMarker(
                    location=point,
                    radius=3,
                    color=_TIDY_COLOR,
                    fill=True,
                    fill_color=_TIDY_COLOR,
                    tooltip=f"Fix {index}",
                ).add_to(folium_map)

    south, west = coords.min(axis=0)
    north, east = coords.max(axis=0)
    folium_map.fit_bounds([[float(south), float(west)], [float(north), float(east)]])

    if output_html is not None:
        output_path = Path(output_html)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


def _slugify(value: str) -> str:
    """Return a filesystem-friendly slug."""

    normalized = value.strip().lower()
    slug = re.sub(r"[^a-z0-9]+", "-", normalized)
    slug = slug.strip("-")
    return slug or "trace"


def _default_output_path(input_path: Path) -> Path:
    return Path(TRACE_MAP_OUTPUT_DIR) / f"{_slugify(input_path.stem)}.html"


def _build_parser() -> argparse.ArgumentParser:
    """Return the CLI argument parser for the trace map tool."""

    parser = argparse.ArgumentParser(
        description="Render a GeoJSON trace and its tidy version as an HTML map."
    )
    parser.add_argument("input", type=Path, help="GeoJSON trace to draw")
    parser.add_argument(
        "--output",
        type=Path,
        help=f"Output HTML path; defaults to {TRACE_MAP_OUTPUT_DIR}/<input>.html",
    )
    parser.add_argument(
        "--no-tidy",
        action="store_true",
        help="Only draw the raw trace",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point used via ``python -m geotrace.tools.trace_map``."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging()

    output_path = args.output or _default_output_path(args.input)
    try:
        raw = load_trace(args.input)
        tidied = None if args.no_tidy else tidy(raw)
        build_trace_map(raw, tidied, output_path)
    except OSError as exc:
        logging.error("Failed to process '%s': %s", args.input, exc)
        return 1
    except GeoTraceError as exc:
        logging.error("Failed to build trace map for '%s': %s", args.input, exc)
        return 1

    logging.info("Trace map written to %s", output_path)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
