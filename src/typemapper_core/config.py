"""Settings for inference and rendering."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

from .errors import ConfigError

OptionalMode = Literal["nullable", "substring"]

OPTIONAL_MODES: tuple[str, ...] = ("nullable", "substring")
DEFAULT_MAX_DEPTH = 10


@dataclass
class Settings:
    """Knobs shared by the pipeline, the REPL and the CLI.

    ``optional`` selects how a field earns its ``?`` marker:

    - ``"nullable"``: the field's value was ``null`` or ``undefined``
    - ``"substring"``: the rendered field type mentions ``null``/``undefined``
      anywhere, so nullable unions inside arrays count too
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    indent: str = "  "
    optional: OptionalMode = "nullable"

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.optional not in OPTIONAL_MODES:
            raise ConfigError(
                f"optional must be one of {', '.join(OPTIONAL_MODES)}, got {self.optional!r}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from ``TYPEMAPPER_*`` environment variables."""
        return cls(
            max_depth=_env_int("TYPEMAPPER_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            indent=" " * _env_int("TYPEMAPPER_INDENT_WIDTH", 2),
            optional=os.getenv("TYPEMAPPER_OPTIONAL_MODE", "nullable"),  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict:
        return {
            "max_depth": self.max_depth,
            "indent_width": len(self.indent),
            "optional": self.optional,
        }


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
