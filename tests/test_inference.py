"""Tests for type inference."""

import array
import re
from datetime import date, datetime

from typemapper_core.inference import (
    GENERIC_SIGNATURE,
    function_signature,
    infer,
    is_tuple,
    js_typeof,
)
from typemapper_core.typedef import ObjectType, TupleType
from typemapper_core.values import (
    BigInt,
    ErrorValue,
    FunctionMarker,
    MapValue,
    SetValue,
    Symbol,
    TypedArray,
    Undefined,
)


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def test_primitives():
    assert infer(None) == "null"
    assert infer(Undefined) == "undefined"
    assert infer("x") == "string"
    assert infer(1) == "number"
    assert infer(1.5) == "number"
    assert infer(Symbol("s")) == "symbol"
    assert infer(BigInt(1)) == "bigint"


def test_bool_is_not_number():
    assert infer(True) == "boolean"
    assert js_typeof(False) == "boolean"


def test_custom_class_uses_its_name():
    class Point:
        pass

    assert infer(Point()) == "Point"


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------

def test_flat_object():
    assert infer({"a": 1, "b": "x", "c": True}) == ObjectType(
        {"a": "number", "b": "string", "c": "boolean"}
    )


def test_field_order_is_key_order():
    assert list(infer({"z": 1, "a": 2}).fields) == ["z", "a"]


def test_nullish_fields_are_optional():
    result = infer({"a": None, "b": Undefined, "c": 1})
    assert result.fields == {"a": "null", "b": "undefined", "c": "number"}
    assert result.optional == {"a", "b"}


def test_empty_object():
    assert infer({}) == ObjectType()


# ---------------------------------------------------------------------------
# Arrays and tuples
# ---------------------------------------------------------------------------

def test_homogeneous_array():
    assert infer([1, 2, 3]) == "number[]"


def test_empty_array():
    assert infer([]) == "any[]"


def test_mixed_kinds_is_tuple():
    assert infer([1, "a", True]) == TupleType(["number", "string", "boolean"])


def test_two_element_mixed_is_tuple():
    assert infer([1, "a"]) == TupleType(["number", "string"])


def test_mixed_array_beyond_tuple_window_is_union():
    assert infer([1, "a"] * 5 + [1]) == "(number | string)[]"


def test_single_element_array():
    assert infer(["a"]) == "string[]"


def test_same_shape_objects_are_object_array():
    assert infer([{"a": 1}, {"a": 2}]) == "object[]"


def test_different_shape_objects_are_tuple():
    assert infer([{"a": 1}, {"b": 2}]) == TupleType(
        [ObjectType({"a": "number"}), ObjectType({"b": "number"})]
    )


def test_nulls_share_a_shape():
    assert infer([None, None]) == "null[]"


def test_array_of_tuples():
    assert infer([[1, "a"], [2, "b"], [3, "c"]]) == "[number, string][]"


def test_tuple_holding_object_is_labelled_object():
    assert infer([[1, "a"], [{"x": 1}, "b"]]) == "([number, string] | object)[]"


def test_is_tuple_bounds():
    assert not is_tuple([1])
    assert is_tuple([1, "a"] * 5)
    assert not is_tuple([1, "a"] * 5 + [1])


# ---------------------------------------------------------------------------
# Depth limit
# ---------------------------------------------------------------------------

def test_depth_limit():
    value = 1
    for _ in range(11):
        value = {"a": value}
    descriptor = infer(value)
    for _ in range(10):
        descriptor = descriptor.fields["a"]
    assert descriptor.fields["a"] == "any"


def test_custom_depth_limit():
    assert infer({"a": 1}, max_depth=0) == ObjectType({"a": "any"})


def test_self_referencing_value_terminates():
    value = {}
    value["self"] = value
    descriptor = infer(value, max_depth=3)
    assert descriptor.fields["self"].fields["self"].fields["self"].fields["self"] == "any"


# ---------------------------------------------------------------------------
# Built-ins
# ---------------------------------------------------------------------------

def test_builtin_kinds():
    assert infer(datetime(2023, 1, 15)) == "Date"
    assert infer(date(2023, 1, 15)) == "Date"
    assert infer(re.compile("x")) == "RegExp"
    assert infer(MapValue()) == "Map<any, any>"
    assert infer(SetValue()) == "Set<any>"
    assert infer({1, 2}) == "Set<any>"
    assert infer(ValueError("x")) == "Error"
    assert infer(ErrorValue()) == "Error"
    assert infer(TypedArray("Int16Array")) == "Int16Array"
    assert infer(array.array("d")) == "Float64Array"
    assert infer(b"") == "Uint8Array"


def test_awaitable_is_promise():
    async def pending():
        return 1

    coro = pending()
    try:
        assert infer(coro) == "Promise<any>"
    finally:
        coro.close()


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

def test_function_marker():
    assert infer(FunctionMarker("x => x")) == "(x: any) => any"


def test_function_signatures():
    assert function_signature("function (a, b) { }") == "(a: any, b: any) => any"
    assert function_signature("async x => x") == "(x: any) => any"
    assert function_signature("(a = 1, ...rest) => a") == "(a: any, ...rest: any[]) => any"
    assert function_signature("() => 1") == "() => any"
    assert function_signature("greet(name) { return name; }") == "(name: any) => any"


def test_function_without_parameter_list():
    assert function_signature("nonsense") == GENERIC_SIGNATURE
