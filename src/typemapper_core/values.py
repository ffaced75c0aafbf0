"""Value kinds for JavaScript constructs that have no direct Python counterpart.

Plain JSON maps onto Python as usual (``None``, ``bool``, ``int``/``float``,
``str``, ``list``, ``dict``).  Dates become ``datetime.datetime`` and regular
expressions compiled ``re.Pattern`` objects.  Everything else lives here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class _Undefined:
    """Singleton for JavaScript ``undefined``."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Undefined"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return "undefined"


Undefined = _Undefined()


@dataclass(frozen=True)
class FunctionMarker:
    """A function literal, kept as source text only.  Never executable."""

    source: str


@dataclass(frozen=True)
class Symbol:
    description: str | None = None


@dataclass(frozen=True)
class BigInt:
    value: int

    def __str__(self) -> str:
        return f"{self.value}n"


@dataclass
class MapValue:
    """``new Map(...)``: ordered key/value pairs, keys of any kind."""

    entries: list[tuple[Any, Any]] = field(default_factory=list)


@dataclass
class ErrorValue:
    name: str = "Error"
    message: str = ""

    def __str__(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


TYPED_ARRAY_KINDS = (
    "Int8Array",
    "Uint8Array",
    "Uint8ClampedArray",
    "Int16Array",
    "Uint16Array",
    "Int32Array",
    "Uint32Array",
    "Float32Array",
    "Float64Array",
    "BigInt64Array",
    "BigUint64Array",
)

# array.array typecode -> typed array name
ARRAY_TYPECODES = {
    "b": "Int8Array",
    "B": "Uint8Array",
    "h": "Int16Array",
    "H": "Uint16Array",
    "i": "Int32Array",
    "I": "Uint32Array",
    "l": "Int32Array",
    "L": "Uint32Array",
    "q": "BigInt64Array",
    "Q": "BigUint64Array",
    "f": "Float32Array",
    "d": "Float64Array",
}


@dataclass
class TypedArray:
    """A typed array literal.

    ``new Uint8Array(n)`` only records ``length``; its zero fill is never
    materialised, so ``items`` stays empty.
    """

    kind: str  # one of TYPED_ARRAY_KINDS
    items: list[int | float] = field(default_factory=list)
    length: int | None = None

    def __post_init__(self) -> None:
        if self.length is None:
            self.length = len(self.items)


@dataclass
class SetValue:
    """``new Set(...)``: distinct members in insertion order."""

    items: list[Any] = field(default_factory=list)
