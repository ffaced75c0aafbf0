"""Extractor: find the object/array literal inside a larger blob of text."""

from __future__ import annotations

import json
import logging
import re

from .tokenizer import TokenType, decode_string, find_closing, strip_comments, tokenize

logger = logging.getLogger(__name__)


_DECLARATION_RE = re.compile(
    r"\b(?:const|let|var)\s+[A-Za-z_$][\w$]*\s*(?::[^=\n]+)?=\s*(?=[\[{])"
)
_ASSIGNMENT_RE = re.compile(r"[A-Za-z_$][\w$.]*\s*(?<![=!<>])=(?![=>])\s*(?=[\[{])")
_RETURN_RE = re.compile(r"\breturn\s+(?=[\[{])")
_JSON_PARSE_RE = re.compile(r"""JSON\.parse\(\s*(['"])(.*?)\1\s*\)""", re.DOTALL)
_BRACKETED_RE = re.compile(r"[\[{][\s\S]*?[\]}]")
_WIDEST_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract(text: str) -> str | None:
    """Return the most plausible object/array literal in *text*, or None.

    Strategies, first hit wins:

    1. ``const|let|var name = {...}``
    2. ``name = {...}``
    3. the whole text, if it is strict JSON
    4. ``return {...}``
    5. ``JSON.parse("...")`` wrapping valid JSON
    6. the longest lazily matched ``{...}`` (else ``[...]``) substring
    7. the widest ``{...}`` span
    """
    if not text or not isinstance(text, str):
        return None

    cleaned = strip_comments(text)

    for name, finder in _STRATEGIES:
        found = finder(cleaned)
        if found:
            logger.debug("Literal located by %s strategy (%d chars)", name, len(found))
            return found

    logger.debug("No literal found in %d chars of input", len(text))
    return None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def _from_declaration(text: str) -> str | None:
    return _span_after(_DECLARATION_RE, text)


def _from_assignment(text: str) -> str | None:
    return _span_after(_ASSIGNMENT_RE, text)


def _from_strict_json(text: str) -> str | None:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return None
    return text.strip()


def _from_return(text: str) -> str | None:
    return _span_after(_RETURN_RE, text)


def _from_json_parse(text: str) -> str | None:
    m = _JSON_PARSE_RE.search(text)
    if not m:
        return None
    content = decode_string(m.group(1) + m.group(2) + m.group(1))
    try:
        json.loads(content)
    except (ValueError, RecursionError):
        return None
    return content.strip()


def _from_bracketed(text: str) -> str | None:
    candidates = [m.group(0).strip() for m in _BRACKETED_RE.finditer(text)]
    if not candidates:
        return None
    # stable sort keeps first-seen order among equal lengths
    candidates.sort(key=len, reverse=True)
    for candidate in candidates:
        if candidate.startswith("{"):
            return candidate
    return candidates[0]


def _from_widest_object(text: str) -> str | None:
    m = _WIDEST_OBJECT_RE.search(text)
    return m.group(0).strip() if m else None


_STRATEGIES = (
    ("declaration", _from_declaration),
    ("assignment", _from_assignment),
    ("strict-json", _from_strict_json),
    ("return", _from_return),
    ("json-parse", _from_json_parse),
    ("bracketed", _from_bracketed),
    ("widest-object", _from_widest_object),
)


# ---------------------------------------------------------------------------
# Balanced spans
# ---------------------------------------------------------------------------

def _span_after(pattern: re.Pattern, text: str) -> str | None:
    """Balanced literal starting right after each match of *pattern*."""
    for m in pattern.finditer(text):
        span = balanced_span(text, m.end())
        if span:
            return span
    return None


def balanced_span(text: str, start: int) -> str | None:
    """The bracketed literal opening at *start*, honouring string quoting."""
    tokens = tokenize(text[start:])
    if not tokens or tokens[0].type != TokenType.PUNC or tokens[0].text not in "[{":
        return None
    end = find_closing(tokens, 0)
    if end is None:
        return None
    return text[start:start + tokens[end].end].strip()
