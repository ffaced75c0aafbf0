"""Sanitizer: rewrite a loose JavaScript literal into JSON-parseable text.

The rewrite works on tokens rather than raw text, so a pass can never
re-match text produced by an earlier one.  Constructs JSON cannot express
(dates, regular expressions, functions) are swapped for placeholder strings;
their raw source goes into a ``PlaceholderTable`` for the restorer.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace

from .placeholders import PlaceholderKind, PlaceholderTable, RegexSpec
from .tokenizer import Token, TokenType, decode_string, find_closing, tokenize

logger = logging.getLogger(__name__)


@dataclass
class SanitizedLiteral:
    text: str
    placeholders: PlaceholderTable = field(default_factory=PlaceholderTable)


def sanitize(literal: str) -> SanitizedLiteral:
    """Rewrite *literal* into JSON text plus its placeholder side tables."""
    tokens = tokenize(literal)
    for rewrite in _REWRITES:
        tokens = rewrite(tokens)

    table = PlaceholderTable()
    text = _ConstructScanner(tokens, literal, table).run()
    logger.debug(
        "Sanitized %d chars into %d chars with %d placeholder(s)",
        len(literal), len(text), len(table),
    )
    return SanitizedLiteral(text=text, placeholders=table)


# ---------------------------------------------------------------------------
# Token rewrites (applied in order)
# ---------------------------------------------------------------------------

def _as_json_string(tok: Token) -> Token:
    return replace(tok, type=TokenType.STRING, text=json.dumps(decode_string(tok.text), ensure_ascii=False))


def _convert_templates(tokens: list[Token]) -> list[Token]:
    """`...${x}...` -> "...TEMPLATE_EXPR..." """
    return [_as_json_string(t) if t.type == TokenType.TEMPLATE else t for t in tokens]


def _quote_keys(tokens: list[Token]) -> list[Token]:
    """Bare, numeric and single-quoted keys -> double-quoted keys."""
    out = list(tokens)
    sig = [i for i, t in enumerate(tokens) if not t.is_trivia]
    for n, i in enumerate(sig):
        tok = tokens[i]
        if tok.type not in (TokenType.IDENT, TokenType.NUMBER, TokenType.STRING):
            continue
        if n == 0 or n + 1 >= len(sig):
            continue
        if not tokens[sig[n - 1]].is_punc("{", ",") or not tokens[sig[n + 1]].is_punc(":"):
            continue
        if tok.type == TokenType.STRING:
            if tok.text.startswith("'"):
                out[i] = _as_json_string(tok)
        else:
            out[i] = replace(tok, type=TokenType.STRING, text=json.dumps(tok.text))
    return out


def _convert_single_quoted(tokens: list[Token]) -> list[Token]:
    return [
        _as_json_string(t) if t.type == TokenType.STRING and t.text.startswith("'") else t
        for t in tokens
    ]


def _drop_trailing_commas(tokens: list[Token]) -> list[Token]:
    out = list(tokens)
    sig = [i for i, t in enumerate(tokens) if not t.is_trivia]
    for n, i in enumerate(sig[:-1]):
        if tokens[i].is_punc(",") and tokens[sig[n + 1]].is_punc("}", "]"):
            out[i] = replace(tokens[i], text="")
    return out


def _escape_string_contents(tokens: list[Token]) -> list[Token]:
    """Re-encode double-quoted strings JSON would reject (raw newlines, tabs, JS-only escapes)."""
    out = []
    for tok in tokens:
        if tok.type == TokenType.STRING and tok.text.startswith('"'):
            try:
                json.loads(tok.text)
            except ValueError:
                tok = _as_json_string(tok)
        out.append(tok)
    return out


_REWRITES = (
    _convert_templates,
    _quote_keys,
    _convert_single_quoted,
    _drop_trailing_commas,
    _escape_string_contents,
)


# ---------------------------------------------------------------------------
# Construct extraction
# ---------------------------------------------------------------------------

_NOT_PARAMS = frozenset({"function", "return", "new", "typeof", "true", "false", "null"})


class _ConstructScanner:
    """Replace Date / regex / RegExp / function constructs with placeholders.

    At each token the recognisers are tried in that order; a match consumes
    the whole construct, so nothing inside it is matched again.
    """

    def __init__(self, tokens: list[Token], source: str, table: PlaceholderTable) -> None:
        self.tokens = tokens
        self.source = source
        self.table = table

    def run(self) -> str:
        pieces: list[str] = []
        i = 0
        while i < len(self.tokens):
            tok = self.tokens[i]
            if tok.type == TokenType.COMMENT:
                i += 1
                continue
            if tok.is_trivia:
                pieces.append(tok.text)
                i += 1
                continue

            matched = (
                self._date(i)
                or self._regex_literal(i)
                or self._regex_constructor(i)
                or self._function(i)
            )
            if matched:
                piece, end = matched
                pieces.append(piece)
                i = end + 1
            else:
                pieces.append(tok.text)
                i += 1
        return "".join(pieces)

    # -- navigation -----------------------------------------------------

    def _next(self, i: int) -> int | None:
        """Index of the next significant token after *i*."""
        for j in range(i + 1, len(self.tokens)):
            if not self.tokens[j].is_trivia:
                return j
        return None

    def _prev(self, i: int) -> int | None:
        for j in range(i - 1, -1, -1):
            if not self.tokens[j].is_trivia:
                return j
        return None

    def _tok(self, i: int | None) -> Token | None:
        return self.tokens[i] if i is not None else None

    def _raw(self, start: int, end: int) -> str:
        """Original source text covering tokens start..end inclusive."""
        return self.source[self.tokens[start].start:self.tokens[end].end]

    def _call(self, i: int, name: str) -> tuple[int, int | None] | None:
        """Match ``[new] name(`` at *i*; return (open-paren index, close index)."""
        tok = self.tokens[i]
        j: int | None = i
        if tok.is_ident("new"):
            j = self._next(i)
            if j is None or not self.tokens[j].is_ident(name):
                return None
        elif tok.is_ident(name):
            prev = self._tok(self._prev(i))
            if prev is not None and (prev.is_punc(".") or prev.is_ident("new")):
                return None
        else:
            return None
        paren = self._next(j)
        if paren is None or not self.tokens[paren].is_punc("("):
            # `new Date` without an argument list
            if tok.is_ident("new"):
                return j, None
            return None
        return paren, find_closing(self.tokens, paren)

    def _split_args(self, open_: int, close: int) -> list[tuple[int, int]]:
        """Top-level argument token ranges between the parens."""
        args: list[tuple[int, int]] = []
        depth = 0
        start = None
        for k in range(open_ + 1, close):
            tok = self.tokens[k]
            if tok.is_trivia:
                continue
            if tok.is_punc("(", "[", "{"):
                depth += 1
            elif tok.is_punc(")", "]", "}"):
                depth -= 1
            elif depth == 0 and tok.is_punc(","):
                if start is not None:
                    args.append((start, self._prev(k)))
                start = None
                continue
            if start is None:
                start = k
        if start is not None:
            args.append((start, self._prev(close)))
        return args

    # -- recognisers ----------------------------------------------------

    def _date(self, i: int) -> tuple[str, int] | None:
        call = self._call(i, "Date")
        if call is None:
            return None
        paren, close = call
        if close is None:
            if not self.tokens[paren].is_punc("("):
                return self.table.add(PlaceholderKind.DATE, ""), paren
            return None
        args = self.source[self.tokens[paren].end:self.tokens[close].start].strip()
        return self.table.add(PlaceholderKind.DATE, args), close

    def _regex_literal(self, i: int) -> tuple[str, int] | None:
        tok = self.tokens[i]
        if tok.type != TokenType.REGEX:
            return None
        slash = tok.text.rindex("/")
        spec = RegexSpec(pattern=tok.text[1:slash], flags=tok.text[slash + 1:])
        return self.table.add(PlaceholderKind.REGEX_LITERAL, spec), i

    def _regex_constructor(self, i: int) -> tuple[str, int] | None:
        call = self._call(i, "RegExp")
        if call is None:
            return None
        paren, close = call
        if close is None:
            return None
        args = self._split_args(paren, close)
        pattern = self._raw(*args[0]).strip() if args else ""
        flags = ""
        if len(args) > 1:
            flag_tok = self.tokens[args[1][0]]
            if flag_tok.type == TokenType.STRING and args[1][0] == args[1][1]:
                flags = decode_string(flag_tok.text)
            else:
                flags = self._raw(*args[1]).strip().strip("'\"`")
        spec = RegexSpec(pattern=pattern, flags=flags)
        return self.table.add(PlaceholderKind.REGEX_CONSTRUCTOR, spec), close

    def _function(self, i: int) -> tuple[str, int] | None:
        tok = self.tokens[i]
        start = i
        if tok.is_ident("async"):
            nxt = self._next(i)
            if nxt is None:
                return None
            i = nxt
            tok = self.tokens[i]

        method = self._method_shorthand(start, i)
        if method is not None:
            return method

        end = self._function_end(i)
        if end is None:
            return None
        return self.table.add(PlaceholderKind.FUNCTION, self._raw(start, end)), end

    def _function_end(self, i: int) -> int | None:
        tok = self.tokens[i]

        if tok.is_ident("function"):
            j = self._next(i)
            if j is not None and self.tokens[j].type == TokenType.OPERATOR and self.tokens[j].text == "*":
                j = self._next(j)
            if j is not None and self.tokens[j].type == TokenType.IDENT:
                j = self._next(j)
            if j is None or not self.tokens[j].is_punc("("):
                return None
            close = find_closing(self.tokens, j)
            body = self._next(close) if close is not None else None
            if body is None or not self.tokens[body].is_punc("{"):
                return None
            return find_closing(self.tokens, body)

        if tok.is_punc("("):
            close = find_closing(self.tokens, i)
            arrow = self._next(close) if close is not None else None
            if arrow is None or self.tokens[arrow].type != TokenType.ARROW:
                return None
            return self._arrow_body_end(arrow)

        if tok.type == TokenType.IDENT and tok.text not in _NOT_PARAMS:
            arrow = self._next(i)
            if arrow is None or self.tokens[arrow].type != TokenType.ARROW:
                return None
            return self._arrow_body_end(arrow)

        return None

    def _arrow_body_end(self, arrow: int) -> int | None:
        body = self._next(arrow)
        if body is None:
            return None
        if self.tokens[body].is_punc("{"):
            return find_closing(self.tokens, body)

        # expression body: runs until , ; or a closer at depth zero
        depth = 0
        last = None
        k = body
        while k is not None:
            tok = self.tokens[k]
            if tok.is_punc("(", "[", "{"):
                depth += 1
            elif tok.is_punc(")", "]", "}"):
                if depth == 0:
                    break
                depth -= 1
            elif depth == 0 and tok.is_punc(",", ";"):
                break
            last = k
            k = self._next(k)
        return last

    def _method_shorthand(self, start: int, i: int) -> tuple[str, int] | None:
        """``name(args) { ... }`` in key position -> ``"name": <placeholder>``."""
        tok = self.tokens[i]
        if tok.type not in (TokenType.IDENT, TokenType.STRING) or tok.is_ident("function"):
            return None
        prev = self._tok(self._prev(start))
        if prev is None or not prev.is_punc("{", ","):
            return None
        paren = self._next(i)
        if paren is None or not self.tokens[paren].is_punc("("):
            return None
        close = find_closing(self.tokens, paren)
        body = self._next(close) if close is not None else None
        if body is None or not self.tokens[body].is_punc("{"):
            return None
        end = find_closing(self.tokens, body)
        if end is None:
            return None
        name = decode_string(tok.text) if tok.type == TokenType.STRING else tok.text
        placeholder = self.table.add(PlaceholderKind.FUNCTION, self._raw(start, end))
        return f"{json.dumps(name, ensure_ascii=False)}: {placeholder}", end
