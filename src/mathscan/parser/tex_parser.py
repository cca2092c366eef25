import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from lark import Token

from mathscan.mml.nodes import MmlNode
from mathscan.parser.braket import configure_braket
from mathscan.parser.errors import TexError
from mathscan.parser.handlers import (
    CHARACTER,
    DELIMITERS,
    MACRO,
    HandlerRegistry,
    default_registry,
    illegal_param,
    number,
    other,
    variable,
)
from mathscan.parser.items import register_base_items
from mathscan.parser.lexer import is_macro, tokenize
from mathscan.parser.stack import Stack, StackItem, StackItemFactory

logger = logging.getLogger(__name__)

PACKAGES: Dict[str, Callable[[HandlerRegistry, StackItemFactory], None]] = {
    "braket": configure_braket,
}

DEFAULT_HANDLERS = {
    "LETTER": (variable, ()),
    "NUMBER": (number, ()),
    "PARAM": (illegal_param, ()),
}


def build_configuration(packages: Iterable[str] = ("braket",)) -> Tuple[HandlerRegistry, StackItemFactory]:
    registry = default_registry()
    factory = register_base_items(StackItemFactory())
    for name in packages:
        if name not in PACKAGES:
            raise ValueError(f"Unknown TeX package: {name}")
        PACKAGES[name](registry, factory)
    return registry, factory


class TexParser:
    """
    Parses one TeX string into an MmlNode tree.

    Tokens are dispatched to the handlers in the registry; the handlers
    build the tree through the item stack.
    """

    def __init__(self, text: str, registry: Optional[HandlerRegistry] = None,
                 item_factory: Optional[StackItemFactory] = None, max_macro: int = 10000):
        if registry is None or item_factory is None:
            registry, item_factory = build_configuration()
        self.text = text
        self.registry = registry
        self.item_factory = item_factory
        self.max_macro = max_macro
        self.macro_count = 0
        self.tokens: List[Token] = tokenize(text)
        self.i = 0
        self.current: Optional[Token] = None
        self.stack = Stack(item_factory)

    def parse(self) -> MmlNode:
        try:
            while self.i < len(self.tokens):
                self.current = self.tokens[self.i]
                self.i += 1
                self.dispatch(self.current)
            self.current = None
            self.push(self.item_factory.create("stop"))
        except TexError as e:
            if e.offset is None:
                e.offset = self.offset()
            raise
        return self.stack.top().first

    def offset(self) -> int:
        if self.current is None:
            return len(self.text)
        return self.current.start_pos

    def dispatch(self, token: Token):
        if is_macro(token):
            handler = self.registry.lookup(MACRO, token.value[1:])
            if handler is None:
                raise TexError("UndefinedControlSequence", f"Undefined control sequence {token.value}")
        else:
            handler = self.registry.lookup(CHARACTER, token.value)
            if handler is None:
                handler = DEFAULT_HANDLERS.get(token.type, (other, ()))
        method, args = handler
        method(self, token.value, *args)

    def push(self, *items):
        for item in items:
            if isinstance(item, StackItem) and item.offset is None:
                item.offset = self.offset()
        self.stack.push(*items)

    def next_token(self) -> Optional[Token]:
        if self.i < len(self.tokens):
            return self.tokens[self.i]
        return None

    def get_next(self) -> str:
        """Text of the next token, or '' at the end of the input."""
        token = self.next_token()
        return token.value if token is not None else ""

    def get_argument(self, name: str) -> List[Token]:
        """Consume a macro argument: a braced group (without its braces) or one token."""
        token = self.next_token()
        if token is None:
            raise TexError("MissingArgFor", f"Missing argument for {name}")
        if token.type == "RBRACE":
            raise TexError("ExtraCloseMissingOpen", "Extra close brace or missing open brace")
        if token.type != "LBRACE":
            self.i += 1
            return [token]
        depth = 0
        for j in range(self.i, len(self.tokens)):
            kind = self.tokens[j].type
            if kind == "LBRACE":
                depth += 1
            elif kind == "RBRACE":
                depth -= 1
                if depth == 0:
                    argument = self.tokens[self.i + 1:j]
                    self.i = j + 1
                    return argument
        raise TexError("MissingCloseBrace", "Missing close brace")

    def get_argument_text(self, name: str) -> str:
        return "".join(token.value for token in self.get_argument(name))

    def get_delimiter(self, name: str) -> str:
        token = self.next_token()
        if token is not None and token.value in DELIMITERS:
            self.i += 1
            return DELIMITERS[token.value]
        raise TexError("MissingOrUnrecognizedDelim", f"Missing or unrecognized delimiter for {name}")

    def expand(self, template: str, args: List[List[Token]]):
        """Put the expansion of template in front of the remaining input."""
        self.macro_count += 1
        if self.macro_count > self.max_macro:
            raise TexError(
                "MaxMacroSub",
                "Maximum macro substitution count exceeded; is there a recursive macro call?",
            )
        expansion: List[Token] = []
        for token in tokenize(template):
            if token.type == "PARAM":
                index = int(token.value[1:]) - 1
                if index >= len(args):
                    raise TexError("IllegalMacroParam", "Illegal macro parameter reference")
                expansion.extend(args[index])
            else:
                expansion.append(Token.new_borrow_pos(token.type, token.value, self.current))
        logger.debug("Expanded %s into %d tokens", self.current, len(expansion))
        self.tokens[self.i:self.i] = expansion


def parse_tex(text: str, packages: Iterable[str] = ("braket",)) -> MmlNode:
    registry, factory = build_configuration(packages)
    return TexParser(text, registry, factory).parse()
