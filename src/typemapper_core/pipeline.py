"""Pipeline: raw text -> value -> type descriptor -> type text.

Stages raise; this module is where their errors become structured results.
"""

from __future__ import annotations

import json
import logging

from .config import Settings
from .document import Document, ParseResult
from .errors import (
    INVALID_INPUT_MESSAGE,
    ExtractionError,
    LiteralParseError,
    TypeMapperError,
)
from .evaluator import evaluate
from .extractor import extract
from .inference import infer
from .render import render
from .restorer import restore
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


def parse_input(text: str) -> ParseResult:
    """Turn loose JavaScript literal text into a Python value.

    Never raises for bad input; failures come back as ``ParseResult.error``.
    """
    if not text or not isinstance(text, str) or not text.strip():
        return ParseResult(error=INVALID_INPUT_MESSAGE)
    try:
        return ParseResult(value=_parse(text))
    except TypeMapperError as exc:
        logger.debug("Parse failed: %s", exc)
        return ParseResult(error=str(exc))


def _parse(text: str):
    literal = extract(text)
    if literal is None:
        raise ExtractionError()

    sanitized = sanitize(literal)
    try:
        logger.debug("Attempting strict parse of: %s", sanitized.text)
        parsed = json.loads(sanitized.text)
    except (ValueError, RecursionError) as exc:
        logger.debug("Strict parse failed (%s); trying fallback evaluator", exc)
        parsed = evaluate(sanitized.text, original=text)

    return restore(parsed, sanitized.placeholders)


def convert(text: str, settings: Settings | None = None) -> Document:
    """Run the whole pipeline on *text* and return a Document."""
    settings = settings or Settings()
    doc = Document(source=text)

    try:
        value = json.loads(text)
    except (TypeError, ValueError, RecursionError):
        result = parse_input(text)
        if not result.ok:
            doc.error = result.error
            return doc
        value = result.value

    doc.value = value
    doc.descriptor = infer(value, max_depth=settings.max_depth)
    doc.text = render(doc.descriptor, indent=settings.indent, optional=settings.optional)
    return doc
