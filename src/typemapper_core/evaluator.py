"""Fallback evaluator for literals that strict JSON parsing rejects.

Two layers:

1. ``check_dangerous`` scans the untouched input for a denylist of tokens and
   refuses outright on a hit.  It is a heuristic gate, not a sandbox.
2. ``LiteralInterpreter`` walks the sanitized tokens with a small
   recursive-descent grammar.  It can only build values: literals, arrays,
   objects and a handful of data constructors.  Nothing is ever executed.
"""

from __future__ import annotations

import logging
import math
import re

from .errors import DangerousCodeError, LiteralParseError
from .tokenizer import Token, TokenType, decode_string, significant, tokenize
from .values import (
    TYPED_ARRAY_KINDS,
    BigInt,
    ErrorValue,
    MapValue,
    SetValue,
    Symbol,
    TypedArray,
    Undefined,
)

logger = logging.getLogger(__name__)


DANGEROUS_TOKENS = (
    "setTimeout",
    "setInterval",
    "setImmediate",
    "requestAnimationFrame",
    "eval",
    "Function(",
    "import(",
    "require(",
    "__proto__",
    "prototype",
    "globalThis",
    "window",
    "document",
    "localStorage",
    "sessionStorage",
    "fetch",
    "XMLHttpRequest",
)
_DANGER_RE = re.compile("|".join(re.escape(t) for t in DANGEROUS_TOKENS), re.IGNORECASE)

# Resolve to undefined instead of reaching anything real
SHADOWED_GLOBALS = frozenset({
    "window",
    "document",
    "alert",
    "console",
    "localStorage",
    "sessionStorage",
    "fetch",
    "XMLHttpRequest",
})

ERROR_CONSTRUCTORS = frozenset({
    "Error",
    "TypeError",
    "RangeError",
    "SyntaxError",
    "ReferenceError",
    "EvalError",
    "URIError",
})

_CONSTANTS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": Undefined,
    "NaN": math.nan,
    "Infinity": math.inf,
}


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def check_dangerous(text: str) -> None:
    """Raise DangerousCodeError if *text* mentions a denylisted token."""
    m = _DANGER_RE.search(text)
    if m:
        logger.warning("Refusing to evaluate input: found %r", m.group(0))
        raise DangerousCodeError(m.group(0))


def evaluate(sanitized: str, original: str | None = None):
    """Evaluate *sanitized* literal text after vetting *original*.

    Every failure, the veto included, surfaces as LiteralParseError.
    """
    check_dangerous(original if original is not None else sanitized)
    try:
        return LiteralInterpreter(sanitized).parse()
    except RecursionError as exc:
        raise LiteralParseError("literal is nested too deeply") from exc
    except (ValueError, OverflowError) as exc:
        raise LiteralParseError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Interpreter
# ---------------------------------------------------------------------------

class LiteralInterpreter:
    """Recursive-descent evaluator for a literal-only JavaScript subset.

    Grammar::

        expression := additive
        additive   := unary (("+" | "-") unary)*
        unary      := ("-" | "+" | "!") unary | primary
        primary    := STRING | NUMBER | constant | array | object
                    | "(" expression ")" | "new" constructor | call
    """

    def __init__(self, text: str) -> None:
        self.tokens: list[Token] = significant(tokenize(text))
        self.i = 0

    # -- token access ---------------------------------------------------

    def peek(self, offset: int = 0) -> Token | None:
        k = self.i + offset
        return self.tokens[k] if k < len(self.tokens) else None

    def advance(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise LiteralParseError("Unexpected end of input")
        self.i += 1
        return tok

    def expect_punc(self, char: str) -> Token:
        tok = self.advance()
        if not tok.is_punc(char):
            raise LiteralParseError(f"Expected '{char}' but found '{tok.text}' at position {tok.start}")
        return tok

    def at_punc(self, *chars: str) -> bool:
        tok = self.peek()
        return tok is not None and tok.is_punc(*chars)

    # -- grammar --------------------------------------------------------

    def parse(self):
        value = self.expression()
        if self.at_punc(";"):
            self.advance()
        tok = self.peek()
        if tok is not None:
            raise LiteralParseError(f"Unexpected token '{tok.text}' at position {tok.start}")
        return value

    def expression(self):
        value = self.unary()
        while True:
            tok = self.peek()
            if tok is None or tok.type != TokenType.OPERATOR or tok.text not in ("+", "-"):
                return value
            self.advance()
            value = _binary(tok.text, value, self.unary())

    def unary(self):
        tok = self.peek()
        if tok is not None and tok.type == TokenType.OPERATOR and tok.text in ("-", "+", "!"):
            self.advance()
            operand = self.unary()
            if tok.text == "!":
                return not _truthy(operand)
            if isinstance(operand, BigInt) and tok.text == "-":
                return BigInt(-operand.value)
            number = _to_number(operand)
            return -number if tok.text == "-" else number
        return self.primary()

    def primary(self):
        tok = self.advance()

        if tok.type in (TokenType.STRING, TokenType.TEMPLATE):
            return decode_string(tok.text)
        if tok.type == TokenType.NUMBER:
            return parse_number(tok.text)
        if tok.is_punc("["):
            return self.array()
        if tok.is_punc("{"):
            return self.object()
        if tok.is_punc("("):
            value = self.expression()
            self.expect_punc(")")
            return value
        if tok.type == TokenType.IDENT:
            if tok.text in _CONSTANTS:
                return _CONSTANTS[tok.text]
            if tok.text == "new":
                return self.construct(self.advance())
            if tok.text in ("Symbol", "BigInt") and self.at_punc("("):
                return self.call(tok.text)
            if tok.text in SHADOWED_GLOBALS:
                return Undefined
            raise LiteralParseError(f"{tok.text} is not defined")
        raise LiteralParseError(f"Unexpected token '{tok.text}' at position {tok.start}")

    def array(self) -> list:
        items: list = []
        while not self.at_punc("]"):
            if self.at_punc(","):
                # hole: [1, , 2]
                self.advance()
                items.append(Undefined)
                continue
            items.append(self.expression())
            if not self.at_punc("]"):
                self.expect_punc(",")
        self.expect_punc("]")
        return items

    def object(self) -> dict:
        fields: dict = {}
        while not self.at_punc("}"):
            key_tok = self.advance()
            if key_tok.type in (TokenType.STRING, TokenType.TEMPLATE):
                key = decode_string(key_tok.text)
            elif key_tok.type == TokenType.NUMBER:
                key = _number_key(parse_number(key_tok.text))
            elif key_tok.type == TokenType.IDENT:
                key = key_tok.text
            else:
                raise LiteralParseError(
                    f"Unexpected token '{key_tok.text}' at position {key_tok.start}"
                )
            self.expect_punc(":")
            fields[key] = self.expression()
            if not self.at_punc("}"):
                self.expect_punc(",")
        self.expect_punc("}")
        return fields

    def arguments(self) -> list:
        self.expect_punc("(")
        args: list = []
        while not self.at_punc(")"):
            args.append(self.expression())
            if not self.at_punc(")"):
                self.expect_punc(",")
        self.expect_punc(")")
        return args

    def call(self, name: str):
        args = self.arguments()
        if name == "Symbol":
            return Symbol(None if not args or args[0] is Undefined else _to_string(args[0]))
        if not args:
            raise LiteralParseError("BigInt requires an argument")
        return BigInt(_to_bigint(args[0]))

    def construct(self, name_tok: Token):
        name = name_tok.text
        args = self.arguments() if self.at_punc("(") else []

        if name == "Map":
            entries: list[tuple] = []
            for key, value in (_pair(entry) for entry in _iterable(args)):
                for k, (existing, _) in enumerate(entries):
                    if _same_value_zero(existing, key):
                        entries[k] = (existing, value)
                        break
                else:
                    entries.append((key, value))
            return MapValue(entries)
        if name == "Set":
            members: list = []
            for item in _iterable(args):
                if not any(_same_value_zero(item, m) for m in members):
                    members.append(item)
            return SetValue(members)
        if name in ERROR_CONSTRUCTORS:
            message = _to_string(args[0]) if args and args[0] is not Undefined else ""
            return ErrorValue(name=name, message=message)
        if name in TYPED_ARRAY_KINDS:
            if args and _is_number(args[0]):
                return TypedArray(name, length=_typed_array_length(args[0]))
            return TypedArray(name, [_to_number(v) for v in _iterable(args)])
        raise LiteralParseError(f"Constructor '{name}' is not allowed in a literal")


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

_BIGINT_RE = re.compile(r"^(?:0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|\d+)n$")


def parse_number(text: str):
    """Convert a NUMBER token to ``int``, ``float`` or ``BigInt``."""
    raw = text.replace("_", "")
    if _BIGINT_RE.match(raw):
        return BigInt(int(raw[:-1], 0))
    lowered = raw.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        return int(raw, 0)
    if raw.isdigit():
        return int(raw)
    return float(raw)


def _number_key(number) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def _truthy(value) -> bool:
    if value is Undefined or value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (bool, int, float, str)):
        return bool(value)
    return True


def _to_number(value):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        try:
            return parse_number(value.strip()) if value.strip() else 0
        except ValueError:
            return math.nan
    return math.nan


def _to_string(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_bigint(value) -> int:
    if isinstance(value, BigInt):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise LiteralParseError(f"Cannot convert {_to_string(value)} to a BigInt")


def _binary(op: str, left, right):
    if op == "+" and (isinstance(left, str) or isinstance(right, str)):
        return _to_string(left) + _to_string(right)
    a, b = _to_number(left), _to_number(right)
    return a + b if op == "+" else a - b


MAX_TYPED_ARRAY_LENGTH = 2**53 - 1


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _typed_array_length(value) -> int:
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise LiteralParseError(f"Invalid typed array length: {_to_string(value)}")
    length = int(value)
    if not 0 <= length <= MAX_TYPED_ARRAY_LENGTH:
        raise LiteralParseError(f"Invalid typed array length: {length}")
    return length


def _same_value_zero(a, b) -> bool:
    """Key equality used by Map and Set: NaN equals NaN, objects by identity."""
    if _is_number(a) and _is_number(b):
        if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
            return True
        return a == b
    if isinstance(a, (str, bool, BigInt)) or a is None or a is Undefined:
        return type(a) is type(b) and a == b
    return a is b


def _iterable(args: list) -> list:
    if not args or args[0] is None or args[0] is Undefined:
        return []
    source = args[0]
    if isinstance(source, str):
        return list(source)
    if isinstance(source, list):
        return source
    raise LiteralParseError(f"{_to_string(source)} is not iterable")


def _pair(entry) -> tuple:
    if not isinstance(entry, list):
        raise LiteralParseError("Map entries must be [key, value] arrays")
    key = entry[0] if entry else Undefined
    value = entry[1] if len(entry) > 1 else Undefined
    return key, value
