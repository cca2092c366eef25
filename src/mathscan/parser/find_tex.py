import re
from typing import Dict, List, Optional, Sequence, Tuple

from mathscan.document.math_item import Location, ProtoItem, proto_item

INLINE_MATH = (("$", "$"), ("\\(", "\\)"))
DISPLAY_MATH = (("$$", "$$"), ("\\[", "\\]"))


def end_pattern(close_pattern: str) -> re.Pattern:
    # escaped characters and braces are matched too so they can be skipped or counted
    return re.compile(close_pattern + r"|\\.|[{}]")


class FindTeX:
    """
    Locates TeX math in a list of strings.

    A closing delimiter only counts outside of braces, so $\\text{$x$}$
    is one piece of math. \\begin{env}...\\end{env} is display math whose
    delimiters are part of the math itself.
    """

    def __init__(
        self,
        inline_math: Sequence[Sequence[str]] = INLINE_MATH,
        display_math: Sequence[Sequence[str]] = DISPLAY_MATH,
        process_escapes: bool = True,
        process_environments: bool = True,
    ):
        self.process_escapes = process_escapes
        self.process_environments = process_environments
        self.end: Dict[str, Tuple[str, bool, re.Pattern]] = {}
        starts: List[str] = []
        for delims, display in [(inline_math, False), (display_math, True)]:
            for open_delim, close_delim in delims:
                starts.append(open_delim)
                self.end[open_delim] = (close_delim, display, end_pattern(re.escape(close_delim)))

        parts = []
        if starts:
            # longest first, so $$ wins over $
            starts.sort(key=len, reverse=True)
            parts.append("|".join(re.escape(s) for s in starts))
        if process_environments:
            parts.append(r"\\begin\s*\{(?P<env>[^}]*)\}")
        if process_escapes:
            parts.append(r"(?P<escape>\\[\\$])")
        self.start: Optional[re.Pattern] = re.compile("|".join(parts)) if parts else None

    def find_math(self, strings: Sequence[str]) -> List[ProtoItem]:
        math: List[ProtoItem] = []
        if self.start is None:
            return math
        for n, text in enumerate(strings):
            self.find_math_in_string(math, n, text)
        return math

    def find_math_in_string(self, math: List[ProtoItem], n: int, text: str):
        pos = 0
        while True:
            start = self.start.search(text, pos)
            if start is None:
                return
            pos = start.end()
            groups = start.groupdict()
            if groups.get("escape") is not None:
                continue
            if groups.get("env") is not None:
                env = groups["env"]
                close = "{" + env + "}"
                pattern = end_pattern(r"\\end\s*(\{" + re.escape(env) + r"\})")
                item = self.find_end(text, n, start, (close, True, pattern))
                if item is not None:
                    item = ProtoItem(
                        math=item.open + item.math + item.close,
                        open="",
                        close="",
                        n=n,
                        start=Location(None, item.start.n, ""),
                        end=Location(None, item.end.n, ""),
                        display=True,
                    )
            else:
                item = self.find_end(text, n, start, self.end[start.group(0)])
            if item is not None:
                math.append(item)
                pos = item.end.n

    def find_end(self, text: str, n: int, start: re.Match, end) -> Optional[ProtoItem]:
        close, display, pattern = end
        i = pos = start.end()
        braces = 0
        while True:
            match = pattern.search(text, pos)
            if match is None:
                return None
            found = match.group(1) if pattern.groups and match.group(1) is not None else match.group(0)
            if found == close and braces == 0:
                return proto_item(
                    start.group(0), text[i:match.start()], match.group(0),
                    n, start.start(), match.end(), display,
                )
            if match.group(0) == "{":
                braces += 1
            elif match.group(0) == "}" and braces:
                braces -= 1
            pos = match.end()
