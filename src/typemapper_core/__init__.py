"""typemapper-core: infer TypeScript-style types from JSON and JavaScript literals.

Public API::

    from typemapper_core import convert, parse_input, infer, render

    doc = convert("const user = { name: 'Ann', tags: ['a', 'b'] };")
    doc.text        # "{\\n  name: string;\\n  tags: string[];\\n}"
    doc.descriptor.fields  # {'name': 'string', 'tags': 'string[]'}
"""

import logging

from .config import Settings
from .document import Document, ParseResult
from .errors import (
    ConfigError,
    DangerousCodeError,
    ExtractionError,
    LiteralParseError,
    TypeMapperError,
)
from .evaluator import check_dangerous, evaluate
from .extractor import extract
from .inference import function_signature, infer
from .pipeline import convert, parse_input
from .render import render
from .repl import TypeMapperRepl
from .restorer import restore
from .sanitizer import SanitizedLiteral, sanitize
from .typedef import ObjectType, TupleType, TypeDescriptor
from .values import (
    BigInt,
    ErrorValue,
    FunctionMarker,
    MapValue,
    SetValue,
    Symbol,
    TypedArray,
    Undefined,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # pipeline
    "convert",
    "parse_input",
    "extract",
    "sanitize",
    "evaluate",
    "check_dangerous",
    "restore",
    "infer",
    "render",
    "function_signature",
    # results
    "Document",
    "ParseResult",
    "SanitizedLiteral",
    "Settings",
    "TypeMapperRepl",
    # descriptors
    "TypeDescriptor",
    "ObjectType",
    "TupleType",
    # values
    "Undefined",
    "FunctionMarker",
    "Symbol",
    "BigInt",
    "MapValue",
    "SetValue",
    "ErrorValue",
    "TypedArray",
    # errors
    "TypeMapperError",
    "ExtractionError",
    "LiteralParseError",
    "DangerousCodeError",
    "ConfigError",
]
