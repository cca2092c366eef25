from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from mathscan.mml.nodes import MmlNode, inferred_row
from mathscan.parser.errors import TexError, UnexpectedCloseContext, UnterminatedFrame

# (items to push in place of the current frame, whether to keep the incoming item)
CheckResult = Tuple[Optional[List["StackItem"]], bool]


@dataclass
class FrameKind:
    """
    What a kind of stack item does.

    check(frame, item) may return a CheckResult to handle an incoming item,
    or None to leave it to the default rules. finalize(frame) builds the
    frame's subtree when it closes.
    """

    name: str
    is_open: bool = False
    is_close: bool = False
    is_final: bool = False
    check: Optional[Callable[["StackItem", "StackItem"], Optional[CheckResult]]] = None
    finalize: Optional[Callable[["StackItem"], MmlNode]] = None
    # messages for closing items of the given kinds that this frame rejects
    errors: Dict[str, str] = field(default_factory=dict)


class StackItem:
    def __init__(self, factory: "StackItemFactory", spec: FrameKind, properties: Dict[str, Any]):
        self.factory = factory
        self.spec = spec
        self.properties = dict(properties)
        self.opened_with = dict(properties)
        self.nodes: List[MmlNode] = []
        self.offset: Optional[int] = None

    def __repr__(self):
        return f"StackItem({self.kind!r}, {self.properties!r}, nodes={len(self.nodes)})"

    @property
    def kind(self) -> str:
        return self.spec.name

    @property
    def is_open(self) -> bool:
        return self.spec.is_open

    @property
    def is_close(self) -> bool:
        return self.spec.is_close

    @property
    def is_final(self) -> bool:
        return self.spec.is_final

    def is_kind(self, kind: str) -> bool:
        return self.spec.name == kind

    def get(self, name: str, default=None):
        return self.properties.get(name, default)

    def set(self, name: str, value) -> "StackItem":
        self.properties[name] = value
        return self

    def push(self, *nodes: MmlNode) -> "StackItem":
        self.nodes.extend(nodes)
        return self

    @property
    def first(self) -> Optional[MmlNode]:
        return self.nodes[0] if self.nodes else None

    def base_mml(self) -> MmlNode:
        if len(self.nodes) == 1:
            return self.nodes[0]
        return inferred_row(self.nodes)

    def to_mml(self) -> MmlNode:
        if self.spec.finalize is not None:
            return self.spec.finalize(self)
        return self.base_mml()

    def finish(self) -> CheckResult:
        """Close this frame, handing its subtree to the frame below."""
        return [self.factory.create("mml").push(self.to_mml())], True

    def check_item(self, item: "StackItem") -> CheckResult:
        if self.spec.check is not None:
            result = self.spec.check(self, item)
            if result is not None:
                return result
        return self.base_check(item)

    def base_check(self, item: "StackItem") -> CheckResult:
        if item.is_close:
            if item.kind == "stop":
                raise UnterminatedFrame(self.kind, self.opened_with, self.offset)
            raise UnexpectedCloseContext(
                self.kind, item.get("name", item.kind), self.spec.errors.get(item.kind)
            )
        if item.is_final:
            self.push(item.first)
            return None, False
        return None, True


class StackItemFactory:
    """Registry of frame kinds; creates stack items by kind name."""

    def __init__(self):
        self._kinds: Dict[str, FrameKind] = {}

    def register(self, name: str, check=None, finalize=None, is_open=False, is_close=False,
                 is_final=False, errors=None) -> FrameKind:
        spec = FrameKind(name, is_open, is_close, is_final, check, finalize, dict(errors or {}))
        self._kinds[name] = spec
        return spec

    def __contains__(self, name: str) -> bool:
        return name in self._kinds

    def kind(self, name: str) -> FrameKind:
        return self._kinds[name]

    def create(self, kind: str, **properties) -> StackItem:
        if kind not in self._kinds:
            raise TexError("UnknownStackItem", f"Unknown stack item kind '{kind}'")
        return StackItem(self, self._kinds[kind], properties)


class Stack:
    """The parse stack; the bottom item is a 'start' frame."""

    def __init__(self, factory: StackItemFactory):
        self.factory = factory
        self.items: List[StackItem] = [factory.create("start")]

    def __len__(self):
        return len(self.items)

    def top(self, n: int = 1) -> Optional[StackItem]:
        if len(self.items) < n:
            return None
        return self.items[-n]

    def pop(self) -> StackItem:
        return self.items.pop()

    def push(self, *items):
        for item in items:
            if item is None:
                continue
            if isinstance(item, MmlNode):
                item = self.factory.create("mml").push(item)
            if self.items:
                replacement, keep = self.top().check_item(item)
            else:
                replacement, keep = None, True
            if not keep:
                continue
            if replacement is not None:
                self.pop()
                self.push(*replacement)
                continue
            self.items.append(item)
