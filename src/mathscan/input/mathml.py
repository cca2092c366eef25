from typing import List

from mathscan.document.math_item import Location, ProtoItem
from mathscan.dom.strings import TYPESET_ATTRIBUTE
from mathscan.input.base import InputJax
from mathscan.mml.nodes import TOKEN_KINDS, MmlNode, node, token

MATHML_ATTRIBUTES = (
    "display", "mathvariant", "stretchy", "fence", "separator", "symmetric",
    "form", "open", "close", "linebreak", "width", "lspace", "rspace",
)


class MathMLInput(InputJax):
    """Picks up <math> elements already in the document."""

    name = "MathML"
    process_strings = False

    def find_math(self, container) -> List[ProtoItem]:
        found = []
        for math in self.adaptor.tags(container, "math"):
            if self.adaptor.get_attribute(math, TYPESET_ATTRIBUTE) is not None:
                continue
            if self._inside_math(math, container):
                continue
            display = self.adaptor.get_attribute(math, "display") == "block"
            found.append(ProtoItem(
                math=math, open="", close="", n=0,
                start=Location(math, 0, ""), end=Location(math, 0, ""), display=display,
            ))
        return found

    def _inside_math(self, math, container) -> bool:
        parent = self.adaptor.parent(math)
        while parent is not None and parent is not container:
            if self.adaptor.kind(parent) == "math":
                return True
            parent = self.adaptor.parent(parent)
        return False

    def compile(self, math) -> MmlNode:
        mml = self.execute_filters(self.pre_filters, math, math.math)
        root = self._convert(mml)
        return self.execute_filters(self.post_filters, math, root)

    def _convert(self, element) -> MmlNode:
        kind = self.adaptor.kind(element)
        attributes = {}
        for name in MATHML_ATTRIBUTES:
            value = self.adaptor.get_attribute(element, name)
            if value is not None:
                attributes[name] = value
        if kind in TOKEN_KINDS:
            return token(kind, self.adaptor.text_content(element).strip(), attributes)
        children = [
            self._convert(child)
            for child in self.adaptor.children(element)
            if not self.adaptor.kind(child).startswith("#")
        ]
        return node(kind, children, attributes)
