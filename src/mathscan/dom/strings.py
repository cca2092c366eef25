import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mathscan.dom.adaptor import DOMAdaptor

SKIP_TAGS = (
    "script", "noscript", "style", "textarea", "pre", "code",
    "annotation", "annotation-xml",
)

INCLUDE_TAGS = {"br": "\n", "wbr": "", "#comment": ""}

# Set on typeset roots so a later pass does not search inside them
TYPESET_ATTRIBUTE = "data-mathscan"


@dataclass
class TextRun:
    node: Any
    length: int


@dataclass
class ContainerStrings:
    strings: List[str] = field(default_factory=list)
    runs: List[List[TextRun]] = field(default_factory=list)

    def __len__(self):
        return len(self.strings)

    def __iter__(self):
        return iter(self.strings)

    def __getitem__(self, i):
        return self.strings[i]


def _class_pattern(names: Iterable[str]) -> Optional[re.Pattern]:
    names = [name for name in names if name]
    if not names:
        return None
    return re.compile(r"(?:^| )(?:" + "|".join(map(re.escape, names)) + r")(?: |$)")


class DomStrings:
    """
    Breaks a container into the strings that get searched for math.

    Adjacent text nodes (and the tags in include_tags) are joined into one
    string; every other element starts a new one. For each string the list
    of (node, length) runs is kept so offsets can be mapped back.
    """

    def __init__(
        self,
        adaptor: Optional[DOMAdaptor] = None,
        skip_tags: Iterable[str] = SKIP_TAGS,
        include_tags: Optional[Dict[str, str]] = None,
        ignore_class: Iterable[str] = ("mathscan-ignore",),
        process_class: Iterable[str] = ("mathscan-process",),
    ):
        self.adaptor = adaptor
        self.skip_tags = set(skip_tags)
        self.include_tags = dict(INCLUDE_TAGS if include_tags is None else include_tags)
        self.ignore_class = _class_pattern(ignore_class)
        self.process_class = _class_pattern(process_class)

    def find(self, container) -> ContainerStrings:
        result = ContainerStrings()
        string: List[str] = []
        runs: List[TextRun] = []

        def push_string():
            text = "".join(string)
            if text.strip():
                result.strings.append(text)
                result.runs.append(list(runs))
            string.clear()
            runs.clear()

        # (next sibling to resume at, ignore flag to restore) for each open element
        stack: List[Tuple[Any, bool]] = []
        node = self.adaptor.first_child(container)
        ignore = False
        while node is not None or stack:
            if node is None:
                push_string()
                node, ignore = stack.pop()
                continue
            kind = self.adaptor.kind(node)
            if kind == "#text":
                if not ignore:
                    text = self.adaptor.value(node)
                    string.append(text)
                    runs.append(TextRun(node, len(text)))
                node = self.adaptor.next(node)
            elif kind in self.include_tags:
                if not ignore:
                    text = self.include_tags[kind]
                    string.append(text)
                    runs.append(TextRun(node, len(text)))
                node = self.adaptor.next(node)
            else:
                push_string()
                node, ignore = self._handle_container(node, ignore, stack)
        push_string()
        return result

    def _handle_container(self, node, ignore, stack):
        cname = self.adaptor.get_attribute(node, "class") or ""
        process = bool(self.process_class and self.process_class.search(cname))
        first = self.adaptor.first_child(node)
        if (
            first is not None
            and self.adaptor.get_attribute(node, TYPESET_ATTRIBUTE) is None
            and (process or self.adaptor.kind(node) not in self.skip_tags)
        ):
            stack.append((self.adaptor.next(node), ignore))
            ignored = bool(self.ignore_class and self.ignore_class.search(cname))
            return first, (ignore or ignored) and not process
        return self.adaptor.next(node), ignore
