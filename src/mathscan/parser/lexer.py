from typing import List

from lark import Lark, Token
from lark.exceptions import LarkError, UnexpectedCharacters

from mathscan.parser.errors import TexError

tex_grammar = r"""
    start: _token*

    _token: CONTROL_WORD
          | CONTROL_SYMBOL
          | PARAM
          | LETTER
          | NUMBER
          | LBRACE
          | RBRACE
          | OTHER

    CONTROL_WORD: /\\[a-zA-Z]+/
    CONTROL_SYMBOL: /\\[^a-zA-Z]/
    PARAM: /#[1-9]/
    LETTER: /[a-zA-Z]/
    NUMBER: /[0-9]+(\.[0-9]+)?|\.[0-9]+/
    LBRACE: "{"
    RBRACE: "}"
    OTHER: /[^\\{}a-zA-Z0-9\s]/

    %import common.WS
    %ignore WS
"""

# Only the lexer is used; the LALR rule just lists the terminals
lexer_instance = Lark(tex_grammar, parser="lalr", lexer="basic")


def tokenize(text: str) -> List[Token]:
    try:
        return list(lexer_instance.lex(text))
    except UnexpectedCharacters as e:
        raise TexError("LexError", f"Unexpected character {text[e.pos_in_stream]!r}",
                       e.pos_in_stream) from e
    except LarkError as e:
        raise TexError("LexError", str(e)) from e


def is_macro(token: Token) -> bool:
    return token.type in ("CONTROL_WORD", "CONTROL_SYMBOL")
