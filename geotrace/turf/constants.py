"""Unit names and Earth-radius based conversion factors."""

from __future__ import annotations

import math
from typing import Dict

# Mean Earth radius in metres.
EARTH_RADIUS_M = 6371008.8

UNIT_METERS = "meters"
UNIT_METRES = "metres"
UNIT_KILOMETERS = "kilometers"
UNIT_KILOMETRES = "kilometres"
UNIT_CENTIMETERS = "centimeters"
UNIT_CENTIMETRES = "centimetres"
UNIT_MILES = "miles"
UNIT_NAUTICAL_MILES = "nauticalmiles"
UNIT_FEET = "feet"
UNIT_YARDS = "yards"
UNIT_INCHES = "inches"
UNIT_DEGREES = "degrees"
UNIT_RADIANS = "radians"

UNIT_DEFAULT = UNIT_KILOMETERS

# Length of one radian of arc in each unit.
FACTORS: Dict[str, float] = {
    UNIT_METERS: EARTH_RADIUS_M,
    UNIT_METRES: EARTH_RADIUS_M,
    UNIT_KILOMETERS: EARTH_RADIUS_M / 1000.0,
    UNIT_KILOMETRES: EARTH_RADIUS_M / 1000.0,
    UNIT_CENTIMETERS: EARTH_RADIUS_M * 100.0,
    UNIT_CENTIMETRES: EARTH_RADIUS_M * 100.0,
    UNIT_MILES: EARTH_RADIUS_M / 1609.344,
    UNIT_NAUTICAL_MILES: EARTH_RADIUS_M / 1852.0,
    UNIT_FEET: EARTH_RADIUS_M / 0.3048,
    UNIT_YARDS: EARTH_RADIUS_M / 0.9144,
    UNIT_INCHES: EARTH_RADIUS_M / 0.0254,
    UNIT_DEGREES: 180.0 / math.pi,
    UNIT_RADIANS: 1.0,
}

__all__ = [
    "EARTH_RADIUS_M",
    "FACTORS",
    "UNIT_DEFAULT",
    "UNIT_METERS",
    "UNIT_METRES",
    "UNIT_KILOMETERS",
    "UNIT_KILOMETRES",
    "UNIT_CENTIMETERS",
    "UNIT_CENTIMETRES",
    "UNIT_MILES",
    "UNIT_NAUTICAL_MILES",
    "UNIT_FEET",
    "UNIT_YARDS",
    "UNIT_INCHES",
    "UNIT_DEGREES",
    "UNIT_RADIANS",
]
