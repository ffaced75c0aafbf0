"""Exception hierarchy for typemapper-core."""

from __future__ import annotations


DANGER_MESSAGE = "potentially dangerous code detected"
EXTRACTION_MESSAGE = "Couldn't extract a valid object from the input"
INVALID_INPUT_MESSAGE = "Invalid input"


class TypeMapperError(Exception):
    """Base class for every error raised by the pipeline stages."""


class ExtractionError(TypeMapperError):
    """No object/array literal could be located in the input."""

    def __init__(self, message: str = EXTRACTION_MESSAGE) -> None:
        super().__init__(message)


class LiteralParseError(TypeMapperError):
    """The literal could be parsed neither strictly nor by the fallback."""


class DangerousCodeError(LiteralParseError):
    """The input matched the danger denylist; evaluation was not attempted."""

    def __init__(self, token: str | None = None) -> None:
        super().__init__(DANGER_MESSAGE)
        self.token = token


class ConfigError(TypeMapperError):
    """A setting could not be read or has an invalid value."""
