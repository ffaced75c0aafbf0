"""Restorer: swap placeholder strings back for dates, regexes and functions."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from .placeholders import PlaceholderKind, PlaceholderTable, RegexSpec
from .values import FunctionMarker

logger = logging.getLogger(__name__)

MATCH_EVERYTHING = re.compile(".")

_JS_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
_NAMED_GROUP_RE = re.compile(r"\(\?<(?![=!])")  # JS (?<name>...) -> (?P<name>...)
_DATE_ONLY_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def restore(value, placeholders: PlaceholderTable):
    """Return *value* with every placeholder string resolved."""
    if isinstance(value, str):
        found = placeholders.lookup(value)
        if found is None:
            return value
        kind, raw = found
        if kind == PlaceholderKind.DATE:
            return build_date(raw)
        if kind == PlaceholderKind.REGEX_LITERAL:
            return build_regex(raw)
        if kind == PlaceholderKind.REGEX_CONSTRUCTOR:
            return build_regex(RegexSpec(_strip_quotes(raw.pattern), raw.flags))
        return FunctionMarker(raw)

    if isinstance(value, list):
        return [restore(item, placeholders) for item in value]
    if isinstance(value, dict):
        return {key: restore(item, placeholders) for key, item in value.items()}
    return value


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def build_date(args_text: str) -> datetime:
    """Build a local datetime from the text between ``Date(`` and ``)``.

    Follows the JavaScript constructor: no argument is "now", one argument is
    epoch milliseconds or a date string, two or more are year, zero-based
    month, day, hours, minutes, seconds and milliseconds.  Anything that
    cannot be built falls back to the current time.
    """
    args = [_date_arg(a) for a in args_text.split(",")] if args_text.strip() else []
    try:
        if not args:
            return datetime.now()
        if len(args) == 1:
            return _date_from_single(args[0])
        return date_from_components(*(float(a) for a in args[:7]))
    except (ValueError, OverflowError, OSError, TypeError) as exc:
        logger.debug("Date(%s) could not be built (%s); using current time", args_text, exc)
        return datetime.now()


def _date_arg(raw: str) -> float | str:
    text = raw.strip()
    try:
        return float(text)
    except ValueError:
        return text.replace('"', "").replace("'", "")


def _date_from_single(arg: float | str) -> datetime:
    if isinstance(arg, float):
        return datetime.fromtimestamp(arg / 1000)
    text = arg.strip()
    if _DATE_ONLY_RE.fullmatch(text):
        # date-only forms are UTC midnight, date-time forms are local
        return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)
    return datetime.fromisoformat(text.replace("Z", "+00:00"))



def date_from_components(
    year: float,
    month: float = 0,
    day: float = 1,
    hours: float = 0,
    minutes: float = 0,
    seconds: float = 0,
    milliseconds: float = 0,
) -> datetime:
    """``new Date(y, m, d, h, mi, s, ms)`` in local time, with JS overflow rules."""
    y, m = int(year), int(month)
    if 0 <= y <= 99:
        y += 1900
    y += m // 12
    m %= 12
    return datetime(y, m + 1, 1) + timedelta(
        days=day - 1,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=milliseconds,
    )


# ---------------------------------------------------------------------------
# Regular expressions
# ---------------------------------------------------------------------------

def build_regex(spec: RegexSpec) -> re.Pattern:
    """Compile *spec*; falls back to a match-everything pattern."""
    pattern = spec.pattern.replace("\\\\", "\\")
    pattern = _NAMED_GROUP_RE.sub("(?P<", pattern)
    flags = 0
    for flag in spec.flags:
        flags |= _JS_FLAGS.get(flag, 0)
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        logger.debug("Regex /%s/%s did not compile (%s)", spec.pattern, spec.flags, exc)
        return MATCH_EVERYTHING


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text
