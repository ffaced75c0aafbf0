"""ParseResult and Document: the structured outputs of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .typedef import TypeDescriptor


@dataclass
class ParseResult:
    """Outcome of turning raw text into a runtime value.

    On failure ``value`` is None and ``error`` holds the message.
    """

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Document:
    """Holds everything produced for one input: value, descriptor and text."""

    source: str
    value: Any = None
    descriptor: TypeDescriptor | None = None
    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
