"""Tokenizer for loose JavaScript literal text.

Every character of the input ends up in exactly one token, so joining the
token texts gives back the source.  Tokenizing never fails: anything the
patterns below do not recognise (a stray ``#``, an unterminated quote) comes
out as a one-character ``OTHER`` token and is left for the parser to reject.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    WHITESPACE = auto()
    COMMENT = auto()
    STRING = auto()     # '...' or "..."
    TEMPLATE = auto()   # `...`
    NUMBER = auto()
    IDENT = auto()
    ARROW = auto()      # =>
    PUNC = auto()       # { } [ ] ( ) . , : ; ?
    REGEX = auto()
    OPERATOR = auto()
    OTHER = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    start: int
    end: int

    @property
    def is_trivia(self) -> bool:
        return self.type in (TokenType.WHITESPACE, TokenType.COMMENT)

    def is_punc(self, *chars: str) -> bool:
        return self.type == TokenType.PUNC and self.text in chars

    def is_ident(self, *names: str) -> bool:
        return self.type == TokenType.IDENT and (not names or self.text in names)


_TOKEN_SPEC = [
    ("WHITESPACE", r"\s+"),
    ("COMMENT", r"//[^\n]*|/\*[\s\S]*?\*/"),
    ("TEMPLATE", r"`(?:[^`\\]|\\[\s\S])*`"),
    ("STRING", r'"(?:[^"\\]|\\[\s\S])*"|\'(?:[^\'\\]|\\[\s\S])*\''),
    (
        "NUMBER",
        r"(?:0[xX][0-9a-fA-F_]+|0[oO][0-7_]+|0[bB][01_]+"
        r"|(?:\d[\d_]*(?:\.[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?)n?",
    ),
    ("IDENT", r"(?:[^\W\d]|\$)(?:\w|\$)*"),
    ("ARROW", r"=>"),
    (
        "OPERATOR",
        r"\.\.\.|===|!==|==|!=|<=|>=|&&|\|\||\?\?|\*\*|\+\+|--|[-+*/%=<>!&|^~]",
    ),
    ("PUNC", r"[{}\[\]().,:;?]"),
    ("OTHER", r"[\s\S]"),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))

_REGEX_RE = re.compile(r"/((?:\\.|\[(?:\\.|[^\]\\\n])*\]|[^/\\\n\[])+)/([A-Za-z]*)")

# After these a '/' starts a regex literal rather than a division
_REGEX_AFTER_PUNC = frozenset("({[,;:?")
_REGEX_AFTER_KEYWORDS = frozenset(
    {"return", "typeof", "case", "throw", "else", "new", "delete", "void", "in", "of"}
)

_OPENERS = {"{": "}", "[": "]", "(": ")"}
_CLOSERS = frozenset(_OPENERS.values())


def tokenize(text: str) -> list[Token]:
    """Split *text* into tokens, trivia included."""
    tokens: list[Token] = []
    prev: Token | None = None  # last significant token
    pos = 0
    length = len(text)

    while pos < length:
        if text[pos] == "/" and not text.startswith(("//", "/*"), pos) and _regex_allowed(prev):
            m = _REGEX_RE.match(text, pos)
            if m:
                tok = Token(TokenType.REGEX, m.group(0), pos, m.end())
                tokens.append(tok)
                prev = tok
                pos = m.end()
                continue

        m = _TOKEN_RE.match(text, pos)
        assert m is not None  # OTHER matches any character
        tok = Token(TokenType[m.lastgroup], m.group(0), pos, m.end())
        tokens.append(tok)
        if not tok.is_trivia:
            prev = tok
        pos = m.end()

    return tokens


def _regex_allowed(prev: Token | None) -> bool:
    if prev is None:
        return True
    if prev.type == TokenType.PUNC:
        return prev.text in _REGEX_AFTER_PUNC
    if prev.type in (TokenType.OPERATOR, TokenType.ARROW):
        return True
    if prev.type == TokenType.IDENT:
        return prev.text in _REGEX_AFTER_KEYWORDS
    return False


# ---------------------------------------------------------------------------
# Token-list helpers
# ---------------------------------------------------------------------------

def significant(tokens: list[Token]) -> list[Token]:
    """Drop whitespace and comments."""
    return [t for t in tokens if not t.is_trivia]


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments, leaving string contents alone."""
    return "".join(t.text for t in tokenize(text) if t.type != TokenType.COMMENT)


def find_closing(tokens: list[Token], index: int) -> int | None:
    """Index of the bracket closing the opener at *index*, or None if unbalanced."""
    stack: list[str] = []
    for i in range(index, len(tokens)):
        tok = tokens[i]
        if tok.type != TokenType.PUNC:
            continue
        if tok.text in _OPENERS:
            stack.append(_OPENERS[tok.text])
        elif tok.text in _CLOSERS:
            if not stack or stack.pop() != tok.text:
                return None
            if not stack:
                return i
    return None


def bracket_depth(text: str) -> int:
    """Net count of unclosed ``{ [ (`` in *text* (negative if over-closed)."""
    depth = 0
    for tok in tokenize(text):
        if tok.type == TokenType.PUNC:
            if tok.text in _OPENERS:
                depth += 1
            elif tok.text in _CLOSERS:
                depth -= 1
    return depth


# ---------------------------------------------------------------------------
# String literals
# ---------------------------------------------------------------------------

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_LINE_CONTINUATIONS = frozenset({"\n", "\r", "\r\n", "\u2028", "\u2029"})
_TEMPLATE_EXPR_RE = re.compile(r"\$\{[^}]*\}")

TEMPLATE_EXPR = "TEMPLATE_EXPR"


def _unescape(m: re.Match) -> str:
    esc = m.group(1)
    try:
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        if len(esc) == 5 and esc[0] == "u":
            return chr(int(esc[1:], 16))
        if len(esc) == 3 and esc[0] == "x":
            return chr(int(esc[1:], 16))
    except ValueError:
        return m.group(0)
    if esc in _LINE_CONTINUATIONS:
        return ""
    return _SIMPLE_ESCAPES.get(esc, esc)


def decode_string(text: str) -> str:
    """Decode a quoted JavaScript string or template token into its value.

    Template interpolations ``${...}`` are replaced by ``TEMPLATE_EXPR``.
    """
    body = text[1:-1]
    if text.startswith("`"):
        body = _TEMPLATE_EXPR_RE.sub(TEMPLATE_EXPR, body)
    value = _ESCAPE_RE.sub(_unescape, body)
    try:
        # join \uD83D\uDE00 style surrogate pairs
        return value.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeError:
        return value
