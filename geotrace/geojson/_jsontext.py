"""JSON text reader and writer that keep nesting on an explicit stack.

Used by the codec when a document nests deeper than the C ``json`` module
allows. Strings and numbers are scanned with the ``json`` module's own
helpers, so for any document both paths accept the output agrees.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from json.decoder import JSONDecodeError, scanstring
from json.scanner import NUMBER_RE
from typing import Any, Dict, Iterator, List, Optional, Set, Union

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_LITERALS = (("true", True), ("false", False), ("null", None))
_NON_FINITE = ("NaN", "Infinity", "-Infinity")
_DONE = object()


class NonFiniteConstantError(ValueError):
    """Raised when the text holds ``NaN`` or ``Infinity``."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


def _skip(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def _scan_key(text: str, pos: int) -> tuple[str, int]:
    """Read ``"name" :`` and return the name plus the position of its value."""

    if not text.startswith('"', pos):
        raise JSONDecodeError(
            "Expecting property name enclosed in double quotes", text, pos
        )
    key, pos = scanstring(text, pos + 1)
    pos = _skip(text, pos)
    if not text.startswith(":", pos):
        raise JSONDecodeError("Expecting ':' delimiter", text, pos)
    return key, _skip(text, pos + 1)


def _scan_scalar(text: str, pos: int) -> tuple[Any, int]:
    if text.startswith('"', pos):
        return scanstring(text, pos + 1)
    match = NUMBER_RE.match(text, pos)
    if match is not None:
        integer, fraction, exponent = match.groups()
        if fraction or exponent:
            return float(integer + (fraction or "") + (exponent or "")), match.end()
        return int(integer), match.end()
    for literal, value in _LITERALS:
        if text.startswith(literal, pos):
            return value, pos + len(literal)
    for name in _NON_FINITE:
        if text.startswith(name, pos):
            raise NonFiniteConstantError(name)
    raise JSONDecodeError("Expecting value", text, pos)


@dataclass(slots=True)
class _ReadFrame:
    container: Union[Dict[str, Any], List[Any]]
    key: Optional[str] = None


def loads(text: str) -> Any:
    """Parse JSON text into dicts, lists and scalars, like :func:`json.loads`.

    Raises:
        JSONDecodeError: If the text is not valid JSON.
        NonFiniteConstantError: If the text uses ``NaN`` or ``Infinity``.
    """

    stack: List[_ReadFrame] = []
    pos = _skip(text, 0)
    while True:
        if text.startswith("{", pos):
            pos = _skip(text, pos + 1)
            if not text.startswith("}", pos):
                key, pos = _scan_key(text, pos)
                stack.append(_ReadFrame({}, key))
                continue
            value: Any = {}
            pos += 1
        elif text.startswith("[", pos):
            pos = _skip(text, pos + 1)
            if not text.startswith("]", pos):
                stack.append(_ReadFrame([]))
                continue
            value = []
            pos += 1
        else:
            value, pos = _scan_scalar(text, pos)

        # Attach the finished value, closing every container that ends here.
        while True:
            if not stack:
                pos = _skip(text, pos)
                if pos != len(text):
                    raise JSONDecodeError("Extra data", text, pos)
                return value
            frame = stack[-1]
            is_object = isinstance(frame.container, dict)
            if is_object:
                frame.container[frame.key] = value
            else:
                frame.container.append(value)
            pos = _skip(text, pos)
            if text.startswith(",", pos):
                pos = _skip(text, pos + 1)
                if is_object:
                    frame.key, pos = _scan_key(text, pos)
                break
            if not text.startswith("}" if is_object else "]", pos):
                raise JSONDecodeError("Expecting ',' delimiter", text, pos)
            pos += 1
            value = stack.pop().container


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return _string_text(key)
    if key is True:
        return '"true"'
    if key is False:
        return '"false"'
    if key is None:
        return '"null"'
    if isinstance(key, (int, float)):
        return _string_text(_scalar_text(key))
    raise TypeError(f"keys must be str, int, float, bool or None, not {type(key).__name__}")


def _string_text(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _scalar_text(value: Any) -> str:
    if isinstance(value, str):
        return _string_text(value)
    if value is None or isinstance(value, (bool, int, float)):
        return json.dumps(value, allow_nan=False)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(slots=True)
class _WriteFrame:
    items: Iterator[Any]
    is_object: bool
    closer: str
    ident: int
    first: bool = True


def dumps(value: Any, indent: Optional[int] = None) -> str:
    """Serialise ``value`` the way ``json.dumps`` does for the codec's settings.

    Output matches ``json.dumps(value, indent=indent, separators=...,
    allow_nan=False, ensure_ascii=False)`` with ``(",", ":")`` when compact and
    ``(",", ": ")`` when indented.

    Raises:
        ValueError: For non-finite numbers or circular references.
        TypeError: For values JSON cannot represent.
    """

    key_separator = ":" if indent is None else ": "
    parts: List[str] = []
    stack: List[_WriteFrame] = []
    active: Set[int] = set()

    def newline(level: int) -> str:
        return "" if indent is None else "\n" + " " * (indent * level)

    pending = value
    while True:
        if isinstance(pending, dict) and pending:
            if id(pending) in active:
                raise ValueError("Circular reference detected")
            active.add(id(pending))
            parts.append("{")
            stack.append(_WriteFrame(iter(pending.items()), True, "}", id(pending)))
        elif isinstance(pending, (list, tuple)) and pending:
            if id(pending) in active:
                raise ValueError("Circular reference detected")
            active.add(id(pending))
            parts.append("[")
            stack.append(_WriteFrame(iter(pending), False, "]", id(pending)))
        elif isinstance(pending, dict):
            parts.append("{}")
        elif isinstance(pending, (list, tuple)):
            parts.append("[]")
        else:
            parts.append(_scalar_text(pending))

        while stack:
            frame = stack[-1]
            item = next(frame.items, _DONE)
            if item is _DONE:
                stack.pop()
                active.discard(frame.ident)
                parts.append(newline(len(stack)) + frame.closer)
                continue
            parts.append(("" if frame.first else ",") + newline(len(stack)))
            frame.first = False
            if frame.is_object:
                key, pending = item
                parts.append(_key_text(key) + key_separator)
            else:
                pending = item
            break
        else:
            return "".join(parts)


__all__ = ["loads", "dumps", "NonFiniteConstantError"]
