"""Command-line tools for inspecting and tidying GeoJSON traces."""

from .trace_map import build_trace_map

__all__ = ["build_trace_map"]
