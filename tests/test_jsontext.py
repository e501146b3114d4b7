"""Tests for the stack-based JSON reader and writer used for deep documents."""

from __future__ import annotations

import json
import math
from json import JSONDecodeError

import pytest

from geotrace.geojson import _jsontext

DOCUMENTS = [
    {},
    [],
    {"type": "Point", "coordinates": [100, 0.5]},
    {
        "name": "Ĉaŭ \"quoted\" \\ tab\t",
        "values": [0.1, -0.0, 1e-300, 5e-324, 12345678901234567890, True, False, None],
        "nested": {"empty": {}, "list": [[], [{}], [1, [2, [3]]]]},
    },
    [1, "two", {"three": [3.0]}],
    "bare string",
    42,
]


@pytest.mark.parametrize("document", DOCUMENTS)
def test_reader_matches_json_module(document) -> None:
    compact = json.dumps(document, ensure_ascii=False)
    pretty = json.dumps(document, indent=3)

    assert _jsontext.loads(compact) == json.loads(compact)
    assert _jsontext.loads(pretty) == json.loads(pretty)
    assert _jsontext.loads(f" \r\n\t{compact}\n ") == document


@pytest.mark.parametrize("document", DOCUMENTS)
@pytest.mark.parametrize("indent", [None, 0, 2])
def test_writer_matches_json_module(document, indent) -> None:
    separators = (",", ":") if indent is None else (",", ": ")
    expected = json.dumps(
        document,
        indent=indent,
        separators=separators,
        allow_nan=False,
        ensure_ascii=False,
    )

    assert _jsontext.dumps(document, indent=indent) == expected


def test_writer_handles_tuples_and_non_string_keys() -> None:
    value = {1: (1, 2), 2.5: None, False: "f", None: []}

    assert _jsontext.dumps(value) == json.dumps(value, separators=(",", ":"))


def test_floats_parse_bit_for_bit() -> None:
    text = "[0.30000000000000004, 1.7976931348623157e308, -2.5E-3, 1e2]"

    parsed = _jsontext.loads(text)

    assert [value.hex() for value in parsed] == [
        value.hex() for value in json.loads(text)
    ]
    assert isinstance(parsed[3], float)


@pytest.mark.parametrize(
    "text",
    ["", "[1,]", '{"a" 1}', "{a:1}", "[1 2]", '{"a":1,}', "[1]]", "01", '"open', "[", "tru"],
)
def test_reader_rejects_malformed_text(text: str) -> None:
    with pytest.raises(JSONDecodeError):
        _jsontext.loads(text)


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_reader_reports_non_finite_constants(constant: str) -> None:
    with pytest.raises(_jsontext.NonFiniteConstantError) as excinfo:
        _jsontext.loads(f"[1, {constant}]")

    assert excinfo.value.name == constant


def test_writer_rejects_non_finite_and_unknown_values() -> None:
    with pytest.raises(ValueError):
        _jsontext.dumps([math.inf])
    with pytest.raises(TypeError):
        _jsontext.dumps({"a": object()})


def test_writer_detects_circular_references() -> None:
    looped: list = []
    looped.append([looped])

    with pytest.raises(ValueError):
        _jsontext.dumps(looped)


def test_deep_nesting_round_trips() -> None:
    depth = 20000
    text = "[" * depth + "{}" + "]" * depth

    value = _jsontext.loads(text)

    assert _jsontext.dumps(value) == text
