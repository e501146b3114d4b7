"""Central error types used across the toolkit."""

from __future__ import annotations


class GeoTraceError(RuntimeError):
    """Base error for every failure raised by the toolkit."""


class ParseError(GeoTraceError, ValueError):
    """Raised when GeoJSON input is malformed or incomplete.

    ``path`` points at the offending JSON value (``$`` is the document root).
    """

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{message} (at {path})")
        self.path = path


class UnknownGeometryType(ParseError):
    """Raised when a ``type`` discriminator names no known geometry."""

    def __init__(self, type_name: str, path: str = "$") -> None:
        super().__init__(f"Unknown geometry type {type_name!r}", path)
        self.type_name = type_name


class InvalidBoundingBoxError(GeoTraceError, ValueError):
    """Raised when a bounding box does not hold exactly 4 or 6 values."""

    def __init__(self, length: int) -> None:
        super().__init__(
            f"Bounding box must contain 4 or 6 values, received {length}"
        )
        self.length = length


class InvalidGeometryError(GeoTraceError, ValueError):
    """Raised when coordinates cannot form the requested geometry."""


class UnprocessableFeatureError(GeoTraceError):
    """Raised when a tidy input feature cannot be turned into GPS fixes."""

    def __init__(self, message: str, index: int | None = None) -> None:
        if index is not None:
            message = f"Feature {index}: {message}"
        super().__init__(message)
        self.index = index


class InvalidConfigurationError(GeoTraceError, ValueError):
    """Raised when tidy options are out of range."""


class EncodeError(GeoTraceError):
    """Raised when a model value cannot be written as GeoJSON text."""


class TurfError(GeoTraceError):
    """Raised when a turf helper receives unusable input."""


__all__ = [
    "GeoTraceError",
    "ParseError",
    "UnknownGeometryType",
    "InvalidBoundingBoxError",
    "InvalidGeometryError",
    "UnprocessableFeatureError",
    "InvalidConfigurationError",
    "EncodeError",
    "TurfError",
]
