"""Type inference: runtime value -> TypeDescriptor."""

from __future__ import annotations

import array
import inspect
import re
from datetime import date, datetime

from .config import DEFAULT_MAX_DEPTH
from .render import render
from .typedef import ObjectType, TupleType, TypeDescriptor
from .values import (
    ARRAY_TYPECODES,
    BigInt,
    ErrorValue,
    FunctionMarker,
    MapValue,
    SetValue,
    Symbol,
    TypedArray,
    _Undefined,
)

TUPLE_MIN_LENGTH = 2
TUPLE_MAX_LENGTH = 10

GENERIC_SIGNATURE = "(...args: any[]) => any"

_PARAMS_RE = re.compile(r"\(([^)]*)\)")
_BARE_PARAM_RE = re.compile(r"^\s*(?:async\s+)?([A-Za-z_$][\w$]*)\s*=>")
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")


def infer(value, depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH) -> TypeDescriptor:
    """Infer the structural type of *value*.

    Beyond *max_depth* levels every value is ``"any"``; this is what stops
    cyclic or absurdly deep inputs.
    """
    if depth > max_depth:
        return "any"

    if value is None:
        return "null"
    if isinstance(value, _Undefined):
        return "undefined"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, Symbol):
        return "symbol"
    if isinstance(value, BigInt):
        return "bigint"
    if isinstance(value, FunctionMarker):
        return function_signature(value.source)

    if isinstance(value, (list, tuple)):
        return _infer_array(list(value), depth, max_depth)

    builtin = builtin_type_name(value)
    if builtin is not None:
        return builtin

    if isinstance(value, dict):
        return _infer_object(value, depth, max_depth)

    name = type(value).__name__
    if name and name != "object":
        return name
    return "object"


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------

def _infer_array(items: list, depth: int, max_depth: int) -> TypeDescriptor:
    if not items:
        return "any[]"

    if is_tuple(items):
        return TupleType([infer(item, depth + 1, max_depth) for item in items])

    seen: list[str] = []
    for item in items:
        label = _element_label(infer(item, depth + 1, max_depth))
        if label not in seen:
            seen.append(label)

    if len(seen) == 1:
        return f"{seen[0]}[]"
    return f"({' | '.join(seen)})[]"


def _element_label(descriptor: TypeDescriptor) -> str:
    """One-line label for an array element; anything holding an object is ``object``."""
    if _holds_object(descriptor):
        return "object"
    if isinstance(descriptor, TupleType):
        return render(descriptor)
    return descriptor


def _holds_object(descriptor: TypeDescriptor) -> bool:
    if isinstance(descriptor, ObjectType):
        return True
    if isinstance(descriptor, TupleType):
        return any(_holds_object(item) for item in descriptor.items)
    return False


def is_tuple(items: list) -> bool:
    """Fixed-length array whose elements differ in kind or in shape."""
    if not TUPLE_MIN_LENGTH <= len(items) <= TUPLE_MAX_LENGTH:
        return False

    kinds = {js_typeof(item) for item in items}
    if len(kinds) > 1:
        return True

    if kinds == {"object"}:
        return len({_shape_signature(item) for item in items}) > 1
    return False


def js_typeof(value) -> str:
    """What ``typeof`` would say for *value* in JavaScript."""
    if isinstance(value, _Undefined):
        return "undefined"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, Symbol):
        return "symbol"
    if isinstance(value, BigInt):
        return "bigint"
    if isinstance(value, FunctionMarker):
        return "function"
    return "object"


def _shape_signature(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, dict):
        return "|".join(sorted(str(k) for k in value))
    if isinstance(value, (list, tuple)):
        return "|".join(sorted(str(i) for i in range(len(value))))
    return ""


# ---------------------------------------------------------------------------
# Objects and built-ins
# ---------------------------------------------------------------------------

def _infer_object(value: dict, depth: int, max_depth: int) -> ObjectType:
    result = ObjectType()
    for key, field_value in value.items():
        name = str(key)
        result.fields[name] = infer(field_value, depth + 1, max_depth)
        if field_value is None or isinstance(field_value, _Undefined):
            result.optional.add(name)
    return result


def builtin_type_name(value) -> str | None:
    """Fixed type name for recognised container kinds, else None."""
    if isinstance(value, (datetime, date)):
        return "Date"
    if isinstance(value, re.Pattern):
        return "RegExp"
    if isinstance(value, MapValue):
        return "Map<any, any>"
    if isinstance(value, (set, frozenset, SetValue)):
        return "Set<any>"
    if isinstance(value, (BaseException, ErrorValue)):
        return "Error"
    if isinstance(value, TypedArray):
        return value.kind
    if isinstance(value, array.array):
        return ARRAY_TYPECODES.get(value.typecode, "Float64Array")
    if isinstance(value, (bytes, bytearray)):
        return "Uint8Array"
    if inspect.isawaitable(value):
        return "Promise<any>"
    return None


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

def function_signature(source: str) -> str:
    """Best-effort ``(a: any, b: any) => any`` from a function's source."""
    params = _parameters(source)
    if params is None:
        return GENERIC_SIGNATURE
    rendered = []
    for index, param in enumerate(params):
        if param.startswith("..."):
            name = param[3:].strip()
            rendered.append(f"...{name if _IDENT_RE.fullmatch(name) else 'args'}: any[]")
        elif _IDENT_RE.fullmatch(param):
            rendered.append(f"{param}: any")
        else:
            rendered.append(f"param{index}: any")
    return f"({', '.join(rendered)}) => any"


def _parameters(source: str) -> list[str] | None:
    bare = _BARE_PARAM_RE.match(source)
    if bare:
        return [bare.group(1)]
    m = _PARAMS_RE.search(source)
    if m is None:
        return None
    inner = m.group(1).strip()
    if not inner:
        return []
    # drop default values: (a = 1, b) -> a, b
    return [p.split("=", 1)[0].strip() for p in inner.split(",")]
