from dataclasses import dataclass, field
from enum import IntEnum
from html import escape
from typing import Any, Dict, Iterable, List, Optional


class TexClass(IntEnum):
    NONE = -1
    ORD = 0
    OP = 1
    BIN = 2
    REL = 3
    OPEN = 4
    CLOSE = 5
    PUNCT = 6
    INNER = 7
    VCENTER = 8


TOKEN_KINDS = {"mi", "mn", "mo", "mtext", "ms", "mspace"}


def attribute_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(eq=False)
class MmlNode:
    kind: str
    children: List["MmlNode"] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)
    text: str = ""
    tex_class: Optional[TexClass] = None
    # inferred rows group children without producing an element of their own
    inferred: bool = False

    @property
    def is_token(self) -> bool:
        return self.kind in TOKEN_KINDS

    def append(self, *children: "MmlNode") -> "MmlNode":
        for child in children:
            if child.kind == "mrow" and child.inferred:
                self.children.extend(child.children)
            else:
                self.children.append(child)
        return self

    def get(self, name: str, default=None):
        return self.attributes.get(name, default)

    def to_mathml(self) -> str:
        inner = escape(self.text, quote=False) if self.is_token else "".join(
            child.to_mathml() for child in self.children
        )
        if self.inferred:
            return inner
        kind = self.kind
        attributes = dict(self.attributes)
        if kind == "TeXAtom":
            kind = "mrow"
            attributes["data-texclass"] = self.tex_class.name if self.tex_class is not None else "ORD"
        attrs = "".join(
            f' {name}="{escape(attribute_text(value))}"' for name, value in attributes.items()
        )
        return f"<{kind}{attrs}>{inner}</{kind}>"

    def __str__(self):
        return self.to_mathml()


def token(kind: str, text: str, attributes: Optional[Dict[str, Any]] = None,
          tex_class: Optional[TexClass] = None) -> MmlNode:
    return MmlNode(kind, [], dict(attributes or {}), text, tex_class)


def node(kind: str, children: Iterable[MmlNode] = (), attributes: Optional[Dict[str, Any]] = None,
         tex_class: Optional[TexClass] = None) -> MmlNode:
    result = MmlNode(kind, [], dict(attributes or {}), "", tex_class)
    result.append(*children)
    return result


def inferred_row(children: Iterable[MmlNode]) -> MmlNode:
    row = MmlNode("mrow", inferred=True)
    row.append(*children)
    return row


def fenced(open_delim: str, inner: MmlNode, close_delim: str) -> MmlNode:
    """A row of stretchy open and close fences around inner."""
    fence = {"fence": True, "stretchy": True, "symmetric": True}
    row = node("mrow", attributes={"open": open_delim, "close": close_delim},
               tex_class=TexClass.INNER)
    row.append(token("mo", open_delim, fence, TexClass.OPEN))
    row.append(inner)
    row.append(token("mo", close_delim, fence, TexClass.CLOSE))
    return row
