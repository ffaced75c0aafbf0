"""Tests for the tokenizer and its token-list helpers."""

import pytest

from typemapper_core.tokenizer import (
    TEMPLATE_EXPR,
    TokenType,
    bracket_depth,
    decode_string,
    find_closing,
    significant,
    strip_comments,
    tokenize,
)


def types(text):
    return [t.type for t in significant(tokenize(text))]


# ---------------------------------------------------------------------------
# tokenize
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", [
    "{a: 1, 'b': \"c\"}",
    "const x = [1, /re/g, `t${x}`]; // done",
    "#?! unterminated 'quote",
    "",
])
def test_tokens_cover_the_source(text):
    assert "".join(t.text for t in tokenize(text)) == text


def test_simple_object():
    assert types("{a: 1}") == [
        TokenType.PUNC, TokenType.IDENT, TokenType.PUNC, TokenType.NUMBER, TokenType.PUNC,
    ]


def test_token_offsets():
    tok = significant(tokenize("  foo"))[0]
    assert (tok.start, tok.end) == (2, 5)


def test_regex_after_colon():
    regexes = [t for t in tokenize("{re: /ab+c/gi}") if t.type == TokenType.REGEX]
    assert [t.text for t in regexes] == ["/ab+c/gi"]


def test_regex_with_slash_in_class():
    regexes = [t for t in tokenize("[/[/]+/]") if t.type == TokenType.REGEX]
    assert [t.text for t in regexes] == ["/[/]+/"]


def test_division_is_not_regex():
    assert TokenType.REGEX not in types("a / b / c")


def test_arrow_and_bigint():
    toks = significant(tokenize("x => 123n"))
    assert toks[1].type == TokenType.ARROW
    assert toks[2].type == TokenType.NUMBER
    assert toks[2].text == "123n"


def test_unknown_character_is_other():
    assert types("#") == [TokenType.OTHER]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

def test_strip_line_comment_keeps_urls_in_strings():
    assert strip_comments('{"url": "http://x"} // note') == '{"url": "http://x"} '


def test_strip_block_comment():
    assert strip_comments("{/* c */a: 1}") == "{a: 1}"


# ---------------------------------------------------------------------------
# Brackets
# ---------------------------------------------------------------------------

def test_find_closing_nested():
    toks = tokenize("{[()]}")
    assert find_closing(toks, 0) == 5


def test_find_closing_ignores_brackets_in_strings():
    toks = tokenize('{"}": 1}')
    assert toks[find_closing(toks, 0)].start == 7


def test_find_closing_mismatch():
    assert find_closing(tokenize("{[}"), 0) is None


def test_find_closing_unbalanced():
    assert find_closing(tokenize("{{}"), 0) is None


def test_bracket_depth():
    assert bracket_depth("{ [") == 2
    assert bracket_depth('{"a": "}"') == 1
    assert bracket_depth("{}") == 0
    assert bracket_depth("}") == -1


# ---------------------------------------------------------------------------
# decode_string
# ---------------------------------------------------------------------------

def test_decode_single_quoted():
    assert decode_string("'it\\'s'") == "it's"


def test_decode_escapes():
    assert decode_string('"\\u0041\\x42\\n"') == "AB\n"


def test_decode_code_point_escape():
    assert decode_string('"\\u{1F600}"') == "\U0001F600"


def test_decode_surrogate_pair():
    assert decode_string('"\\uD83D\\uDE00"') == "\U0001F600"


def test_decode_unknown_escape_keeps_char():
    assert decode_string('"\\q"') == "q"


def test_decode_template_interpolation():
    assert decode_string("`a${x}b`") == f"a{TEMPLATE_EXPR}b"
