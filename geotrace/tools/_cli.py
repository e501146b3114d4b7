"""Helpers shared by the command-line tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from ..config import LOG_LEVEL
from ..geojson.codec import decode
from ..geojson.models import Feature, FeatureCollection

PathLike = Union[str, Path]

LOGGER = logging.getLogger(__name__)


def setup_logging() -> None:
    """Install the tool log format unless the root logger is already configured."""

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def load_trace(path: PathLike) -> FeatureCollection:
    """Read a GeoJSON file and wrap it in a FeatureCollection when needed.

    Raises:
        OSError: If the file cannot be read.
        GeoTraceError: If the content is not valid GeoJSON.
    """

    source = Path(path).read_bytes()
    value = decode(source)
    if isinstance(value, FeatureCollection):
        return value
    if isinstance(value, Feature):
        return FeatureCollection.from_feature(value)
    LOGGER.debug("Wrapping bare %s geometry from %s in a feature", value.type, path)
    return FeatureCollection.from_feature(Feature.from_geometry(value))
