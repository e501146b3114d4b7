"""Encoded polyline helpers for line geometries."""

from __future__ import annotations

from typing import List, Optional, Sequence

from polyline import decode as polyline_decode
from polyline import encode as polyline_encode

from ..config import POLYLINE_PRECISION
from ..errors import InvalidGeometryError
from .models import Position


def decode_polyline(encoded: str, precision: Optional[int] = None) -> List[Position]:
    """Decode an encoded polyline string into a list of positions."""

    if not encoded:
        return []
    precision = POLYLINE_PRECISION if precision is None else precision
    try:
        decoded = polyline_decode(encoded, precision)
    except (ValueError, TypeError, IndexError) as exc:
        raise InvalidGeometryError("Unable to decode polyline") from exc
    # The polyline format stores (lat, lon) pairs.
    return [Position(float(lon), float(lat)) for lat, lon in decoded]


def encode_polyline(
    positions: Sequence[Position], precision: Optional[int] = None
) -> str:
    """Encode positions as a polyline string; altitude is dropped."""

    precision = POLYLINE_PRECISION if precision is None else precision
    return polyline_encode(
        [(position.latitude, position.longitude) for position in positions],
        precision,
    )


__all__ = ["decode_polyline", "encode_polyline"]
