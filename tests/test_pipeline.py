"""End-to-end tests: raw text in, Document out."""

import re
from datetime import datetime

import pytest

from typemapper_core import Settings, convert, parse_input
from typemapper_core.errors import DANGER_MESSAGE, EXTRACTION_MESSAGE, INVALID_INPUT_MESSAGE
from typemapper_core.repl import EXAMPLE_INPUTS
from typemapper_core.values import FunctionMarker, Undefined


# ---------------------------------------------------------------------------
# parse_input
# ---------------------------------------------------------------------------

def test_parse_declaration():
    result = parse_input("let x = [1, 2, 3];")
    assert result.ok
    assert result.value == [1, 2, 3]


def test_parse_date_components():
    result = parse_input("{ d: new Date(2023,0,15) }")
    assert result.value == {"d": datetime(2023, 1, 15)}


@pytest.mark.parametrize("text", ["", "   ", None])
def test_parse_invalid_input(text):
    result = parse_input(text)
    assert result.value is None
    assert result.error == INVALID_INPUT_MESSAGE


def test_parse_nothing_to_extract():
    assert parse_input("hello world").error == EXTRACTION_MESSAGE


def test_parse_dangerous_input():
    result = parse_input("const x = { a: eval('1') };")
    assert not result.ok
    assert result.value is None
    assert result.error == DANGER_MESSAGE


def test_parse_syntax_error_is_reported():
    result = parse_input("{ a: 1, b: }")
    assert not result.ok
    assert result.error


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------

def test_convert_strict_json():
    doc = convert('{"a": 1, "b": [1, 2]}')
    assert doc.ok
    assert doc.value == {"a": 1, "b": [1, 2]}
    assert doc.text == "{\n  a: number;\n  b: number[];\n}"


def test_convert_top_level_array():
    assert convert("[1, 'a', true]").text == "[number, string, boolean]"


def test_convert_javascript_object():
    doc = convert("const user = { name: 'Ann', age: 36, tags: ['a', 'b'] };")
    assert doc.text == "{\n  name: string;\n  age: number;\n  tags: string[];\n}"


def test_convert_date():
    doc = convert("const x = { created: new Date(2023, 0, 15) };")
    assert doc.value["created"] == datetime(2023, 1, 15)
    assert doc.text == "{\n  created: Date;\n}"


def test_convert_function():
    doc = convert("{ f: (a, b) => a + b }")
    assert doc.value["f"] == FunctionMarker("(a, b) => a + b")
    assert doc.text == "{\n  f: (a: any, b: any) => any;\n}"


def test_convert_regex():
    doc = convert("const r = { re: /^a+$/i };")
    assert doc.value["re"].flags & re.IGNORECASE
    assert doc.text == "{\n  re: RegExp;\n}"


def test_convert_undefined_goes_through_fallback():
    doc = convert("const x = { a: undefined, b: 1 };")
    assert doc.value == {"a": Undefined, "b": 1}
    assert doc.text == "{\n  a?: undefined;\n  b: number;\n}"


def test_convert_json_parse_call():
    doc = convert("""const data = JSON.parse('{"a": [1, 2]}');""")
    assert doc.text == "{\n  a: number[];\n}"


def test_convert_error_document():
    doc = convert("hello world")
    assert not doc.ok
    assert doc.error == EXTRACTION_MESSAGE
    assert doc.value is None
    assert doc.descriptor is None
    assert doc.text == ""


def test_convert_dangerous_input():
    assert convert("const x = { a: eval('1') };").error == DANGER_MESSAGE


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

def test_convert_respects_max_depth():
    doc = convert('{"a": {"b": 1}}', Settings(max_depth=1))
    assert doc.text == "{\n  a: {\n    b: any;\n  };\n}"


def test_convert_optional_modes():
    text = '{"a": [1, null, 1]}'
    assert convert(text).text == "{\n  a: [number, null, number];\n}"
    assert convert(text, Settings(optional="substring")).text == (
        "{\n  a?: [number, null, number];\n}"
    )


def test_convert_indent_setting():
    assert convert('{"a": 1}', Settings(indent="\t")).text == "{\n\ta: number;\n}"


# ---------------------------------------------------------------------------
# Sample inputs
# ---------------------------------------------------------------------------

def test_simple_example():
    doc = convert(EXAMPLE_INPUTS["simple"])
    assert doc.ok
    assert "  tuple: [number, string, boolean];" in doc.text
    assert "    complement?: null;" in doc.text
    assert "  contacts: object[];" in doc.text
    assert "  description?: null;" in doc.text
    assert "  misc: [number, string, boolean, {" in doc.text


def test_advanced_example():
    doc = convert(EXAMPLE_INPUTS["advanced"])
    assert doc.ok, doc.error
    assert "  createdAt: Date;" in doc.text
    assert "  pattern: RegExp;" in doc.text
    assert "    greet: (name: any) => any;" in doc.text
    assert "    format: (value: any) => any;" in doc.text
    assert "  optional?: undefined;" in doc.text
    assert doc.value["createdAt"] == datetime(2023, 1, 15, 10, 30)


# ---------------------------------------------------------------------------
# Typed array lengths
# ---------------------------------------------------------------------------

def test_convert_huge_typed_array_length():
    doc = convert("const x = { a: undefined, b: new Uint8Array(1e10) };")
    assert doc.ok, doc.error
    assert doc.text == "{\n  a?: undefined;\n  b: Uint8Array;\n}"


def test_convert_invalid_typed_array_length():
    doc = convert("const x = { a: undefined, b: new Uint8Array(-1) };")
    assert doc.value is None
    assert doc.error == "Invalid typed array length: -1"


def test_convert_tuple_with_object_in_union_stays_on_one_line():
    doc = convert("const x = { a: [[1, 'a'], [{x: 1}, 'b']] };")
    assert doc.text == "{\n  a: ([number, string] | object)[];\n}"
