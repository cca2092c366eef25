"""
Token handlers for the TeX parser.

A handler is registered in a HandlerMap under a trigger: a macro name
(without the backslash) or a single character. It is called as
handler(parser, name, *args), where name is the text of the triggering token
and args come from the map entry. Handlers push nodes or stack items onto
parser.stack and may consume further tokens.
"""
from typing import Callable, Dict, List, Optional, Tuple

from mathscan.mml.nodes import TexClass, token
from mathscan.parser.errors import TexError

Handler = Tuple[Callable, tuple]

MACRO = "macro"
CHARACTER = "character"


class HandlerMap:
    def __init__(self, name: str, category: str, entries: Dict[str, object]):
        self.name = name
        self.category = category
        self._entries: Dict[str, Handler] = {}
        for trigger, entry in entries.items():
            self.add(trigger, entry)

    def add(self, trigger: str, entry):
        # an entry is a function or a tuple (function, *args)
        if isinstance(entry, tuple):
            self._entries[trigger] = (entry[0], tuple(entry[1:]))
        else:
            self._entries[trigger] = (entry, ())

    def lookup(self, trigger: str) -> Optional[Handler]:
        return self._entries.get(trigger)

    def __contains__(self, trigger: str):
        return trigger in self._entries


class HandlerRegistry:
    """Ordered collection of handler maps; maps added later take priority."""

    def __init__(self):
        self.maps: List[HandlerMap] = []

    def add_map(self, handler_map: HandlerMap) -> "HandlerRegistry":
        self.maps.insert(0, handler_map)
        return self

    def lookup(self, category: str, trigger: str) -> Optional[Handler]:
        for handler_map in self.maps:
            if handler_map.category == category:
                handler = handler_map.lookup(trigger)
                if handler is not None:
                    return handler
        return None


OPERATOR_CLASSES = {
    "+": TexClass.BIN, "-": TexClass.BIN, "*": TexClass.BIN, "/": TexClass.BIN,
    "=": TexClass.REL, "<": TexClass.REL, ">": TexClass.REL, ":": TexClass.REL,
    "(": TexClass.OPEN, "[": TexClass.OPEN,
    ")": TexClass.CLOSE, "]": TexClass.CLOSE,
    ",": TexClass.PUNCT, ";": TexClass.PUNCT,
}

# Delimiters accepted after \left and \right
DELIMITERS = {
    "(": "(", ")": ")", "[": "[", "]": "]", "<": "⟨", ">": "⟩",
    "/": "/", "|": "|", ".": "",
    "\\{": "{", "\\}": "}", "\\|": "‖",
    "\\langle": "⟨", "\\rangle": "⟩",
    "\\lbrace": "{", "\\rbrace": "}",
    "\\vert": "|", "\\Vert": "‖",
    "\\lvert": "|", "\\rvert": "|",
}


def variable(parser, c):
    parser.push(token("mi", c))


def number(parser, n):
    parser.push(token("mn", n))


def other(parser, c):
    tex_class = OPERATOR_CLASSES.get(c, TexClass.ORD)
    attributes = {"stretchy": False} if tex_class in (TexClass.OPEN, TexClass.CLOSE) else {}
    parser.push(token("mo", c, attributes, tex_class))


def open_group(parser, name):
    parser.push(parser.item_factory.create("open"))


def close_group(parser, name):
    parser.push(parser.item_factory.create("close", name=name))


def math_char(parser, name, char, kind="mi"):
    parser.push(token(kind, char))


def math_op(parser, name, char, tex_class=TexClass.ORD, stretchy=None):
    attributes = {} if stretchy is None else {"stretchy": stretchy}
    parser.push(token("mo", char, attributes, tex_class))


def left(parser, name):
    parser.push(parser.item_factory.create("left", delim=parser.get_delimiter(name)))


def right(parser, name):
    parser.push(parser.item_factory.create("right", delim=parser.get_delimiter(name), name=name))


def begin(parser, name):
    env = parser.get_argument_text(name)
    parser.push(parser.item_factory.create("begin", env=env))


def end(parser, name):
    env = parser.get_argument_text(name)
    parser.push(parser.item_factory.create("end", env=env, name=f"\\end{{{env}}}"))


def space(parser, name, width):
    parser.push(token("mspace", "", {"width": width}))


def linebreak(parser, name):
    parser.push(token("mspace", "", {"linebreak": "newline"}))


def macro(parser, name, template, argc=0):
    """Expand a template macro: #1..#9 in template are replaced by the arguments."""
    args = [parser.get_argument(name) for _ in range(argc)]
    parser.expand(template, args)


def illegal_param(parser, name):
    raise TexError("IllegalMacroParam", "Illegal macro parameter reference")


GREEK = {
    "alpha": "α", "beta": "β", "gamma": "γ", "delta": "δ",
    "epsilon": "ϵ", "theta": "θ", "lambda": "λ", "mu": "μ",
    "pi": "π", "rho": "ρ", "sigma": "σ", "tau": "τ",
    "phi": "ϕ", "psi": "ψ", "omega": "ω",
    "Gamma": "Γ", "Delta": "Δ", "Theta": "Θ", "Lambda": "Λ",
    "Pi": "Π", "Sigma": "Σ", "Phi": "Φ", "Psi": "Ψ", "Omega": "Ω",
}


def base_maps() -> List[HandlerMap]:
    macros = HandlerMap("base-macros", MACRO, {
        "left": left,
        "right": right,
        "begin": begin,
        "end": end,
        "\\": linebreak,
        "{": (math_op, "{", TexClass.OPEN, False),
        "}": (math_op, "}", TexClass.CLOSE, False),
        "|": (math_op, "‖", TexClass.ORD, False),
        ",": (space, "0.167em"),
        ";": (space, "0.278em"),
        " ": (space, "0.25em"),
        "langle": (math_op, "⟨", TexClass.OPEN, False),
        "rangle": (math_op, "⟩", TexClass.CLOSE, False),
        "lbrace": (math_op, "{", TexClass.OPEN, False),
        "rbrace": (math_op, "}", TexClass.CLOSE, False),
        "vert": (math_op, "|", TexClass.ORD, False),
        "Vert": (math_op, "‖", TexClass.ORD, False),
        "mid": (math_op, "∣", TexClass.REL),
        "in": (math_op, "∈", TexClass.REL),
        "le": (math_op, "≤", TexClass.REL),
        "ge": (math_op, "≥", TexClass.REL),
        "ne": (math_op, "≠", TexClass.REL),
        "cdot": (math_op, "⋅", TexClass.BIN),
        "times": (math_op, "×", TexClass.BIN),
    })
    for name, char in GREEK.items():
        macros.add(name, (math_char, char))
    characters = HandlerMap("base-characters", CHARACTER, {
        "{": open_group,
        "}": close_group,
        "#": illegal_param,
    })
    return [macros, characters]


def default_registry() -> HandlerRegistry:
    registry = HandlerRegistry()
    for handler_map in base_maps():
        registry.add_map(handler_map)
    return registry
