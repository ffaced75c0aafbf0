"""Placeholder side tables shared by the sanitizer and the restorer."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class PlaceholderKind(Enum):
    DATE = "DATE"
    REGEX_LITERAL = "REGEX_LITERAL"
    REGEX_CONSTRUCTOR = "REGEX_CONSTRUCTOR"
    FUNCTION = "FUNCTION"


# Restorer checks kinds in this order
RESTORE_ORDER = (
    PlaceholderKind.DATE,
    PlaceholderKind.REGEX_LITERAL,
    PlaceholderKind.REGEX_CONSTRUCTOR,
    PlaceholderKind.FUNCTION,
)

_PLACEHOLDER_RES = {
    kind: re.compile(rf"__{kind.value}_PLACEHOLDER_(\d+)__") for kind in PlaceholderKind
}


@dataclass(frozen=True)
class RegexSpec:
    pattern: str
    flags: str = ""


@dataclass
class PlaceholderTable:
    """Raw source of every construct pulled out of a literal, per kind.

    Indices follow first-occurrence order within each kind.
    """

    dates: list[str] = field(default_factory=list)
    regex_literals: list[RegexSpec] = field(default_factory=list)
    regex_constructors: list[RegexSpec] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)

    def entries(self, kind: PlaceholderKind) -> list:
        if kind == PlaceholderKind.DATE:
            return self.dates
        if kind == PlaceholderKind.REGEX_LITERAL:
            return self.regex_literals
        if kind == PlaceholderKind.REGEX_CONSTRUCTOR:
            return self.regex_constructors
        return self.functions

    def add(self, kind: PlaceholderKind, raw) -> str:
        """Record *raw* and return the JSON string token standing in for it."""
        entries = self.entries(kind)
        entries.append(raw)
        return f'"{placeholder_name(kind, len(entries) - 1)}"'

    def lookup(self, text: str) -> tuple[PlaceholderKind, object] | None:
        """Resolve a placeholder string, trying kinds in restore order."""
        for kind in RESTORE_ORDER:
            m = _PLACEHOLDER_RES[kind].fullmatch(text)
            if m is None:
                continue
            entries = self.entries(kind)
            index = int(m.group(1))
            if index < len(entries):
                return kind, entries[index]
        return None

    def __len__(self) -> int:
        return sum(len(self.entries(kind)) for kind in PlaceholderKind)


def placeholder_name(kind: PlaceholderKind, index: int) -> str:
    return f"__{kind.value}_PLACEHOLDER_{index}__"
