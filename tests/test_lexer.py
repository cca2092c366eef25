import pytest

from mathscan.parser.errors import TexError
from mathscan.parser.lexer import is_macro, tokenize


def types(text):
    return [(token.type, token.value) for token in tokenize(text)]


def test_token_types():
    assert types("\\alpha + 12.5 {x}") == [
        ("CONTROL_WORD", "\\alpha"),
        ("OTHER", "+"),
        ("NUMBER", "12.5"),
        ("LBRACE", "{"),
        ("LETTER", "x"),
        ("RBRACE", "}"),
    ]


def test_control_symbols_and_params():
    assert types("\\, \\| #1") == [
        ("CONTROL_SYMBOL", "\\,"),
        ("CONTROL_SYMBOL", "\\|"),
        ("PARAM", "#1"),
    ]


def test_letters_are_single_tokens():
    assert [value for _, value in types("ab")] == ["a", "b"]


def test_positions():
    tokens = tokenize("a  + b")
    assert [token.start_pos for token in tokens] == [0, 3, 5]


def test_is_macro():
    tokens = tokenize("\\x \\{ y")
    assert [is_macro(token) for token in tokens] == [True, True, False]


def test_trailing_backslash_is_a_lex_error():
    with pytest.raises(TexError) as info:
        tokenize("x\\")
    assert info.value.id == "LexError"
    assert info.value.offset == 1
