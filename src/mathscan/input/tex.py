import logging
from typing import Iterable, Sequence

from mathscan.input.base import InputJax
from mathscan.mml.nodes import MmlNode, node
from mathscan.parser.find_tex import DISPLAY_MATH, INLINE_MATH, FindTeX
from mathscan.parser.tex_parser import TexParser, build_configuration

logger = logging.getLogger(__name__)


class TexInput(InputJax):
    name = "TeX"
    process_strings = True

    def __init__(
        self,
        inline_math: Sequence[Sequence[str]] = INLINE_MATH,
        display_math: Sequence[Sequence[str]] = DISPLAY_MATH,
        process_escapes: bool = True,
        process_environments: bool = True,
        packages: Iterable[str] = ("braket",),
        max_macro: int = 10000,
    ):
        super().__init__()
        self.find_tex = FindTeX(inline_math, display_math, process_escapes, process_environments)
        self.registry, self.item_factory = build_configuration(packages)
        self.max_macro = max_macro

    def find_math(self, strings):
        return self.find_tex.find_math(strings)

    def compile(self, math) -> MmlNode:
        text = self.execute_filters(self.pre_filters, math, math.math)
        logger.debug("Compiling %r", text)
        parser = TexParser(text, self.registry, self.item_factory, self.max_macro)
        root = parser.parse()
        attributes = {"display": "block"} if math.display else {}
        mml = node("math", [root], attributes)
        return self.execute_filters(self.post_filters, math, mml)
