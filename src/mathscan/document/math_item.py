from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Tuple


class State(IntEnum):
    UNPROCESSED = 0
    COMPILED = 1
    TYPESET = 2
    INSERTED = 3


@dataclass
class Location:
    # node is None when the offset could not be resolved to a node
    node: Any = None
    n: int = 0
    delim: str = ""


@dataclass(frozen=True)
class ProtoItem:
    math: Any
    open: str
    close: str
    n: int
    start: Location
    end: Location
    display: bool = False


def proto_item(open_delim, math, close_delim, n, start, end, display=False) -> ProtoItem:
    """Proto item for a match found at [start, end) of string n."""
    return ProtoItem(
        math=math,
        open=open_delim,
        close=close_delim,
        n=n,
        start=Location(None, start, open_delim),
        end=Location(None, end, close_delim),
        display=display,
    )


@dataclass(eq=False)
class MathItem:
    math: Any
    input_jax: Any
    display: bool = False
    start: Location = field(default_factory=Location)
    end: Location = field(default_factory=Location)
    # document order: (container index, node order, offset)
    key: Tuple = ()
    root: Any = None
    typeset_root: Any = None
    adaptor: Any = None
    _state: State = State.UNPROCESSED

    @property
    def state(self) -> State:
        return self._state

    @property
    def resolved(self) -> bool:
        return self.start.node is not None and self.end.node is not None

    def compile(self):
        if self._state < State.COMPILED:
            self.root = self.input_jax.compile(self)
            self._state = State.COMPILED

    def typeset(self, renderer):
        if self._state < State.TYPESET:
            self.typeset_root = renderer(self)
            self._state = State.TYPESET

    def update_document(self) -> List[Tuple[Any, Any]]:
        """
        Replace the source of this item in the tree by its typeset root.

        Returns (old, new) pairs for text nodes that were split: `new` holds
        the text of `old` up to the split point, so locations before the
        split can be moved over to it.
        """
        replaced: List[Tuple[Any, Any]] = []
        if self._state >= State.INSERTED or not self.resolved:
            return replaced
        adaptor = self.adaptor

        def split(node, n):
            head, tail = adaptor.split(node, n)
            replaced.append((node, head))
            return head, tail

        if self.input_jax.process_strings:
            node, start = self.start.node, self.start.n
            # a start at the end of a run (text, <br>, comment, <wbr>) belongs to what follows
            while node is not self.end.node and (
                not adaptor.is_text(node) or start >= len(adaptor.value(node))
            ):
                node, start = adaptor.next(node), 0
            if node is self.end.node:
                if self.end.n < len(adaptor.value(node)):
                    node, _ = split(node, self.end.n)
                if start:
                    _, node = split(node, start)
            else:
                if start:
                    _, node = split(node, start)
                while node is not self.end.node:
                    following = adaptor.next(node)
                    adaptor.remove(node)
                    node = following
                if self.end.n < len(adaptor.value(node)):
                    node, _ = split(node, self.end.n)
            adaptor.replace(self.typeset_root, node)
        else:
            adaptor.replace(self.typeset_root, self.start.node)
        self.start = Location(self.typeset_root, 0, self.start.delim)
        self.end = Location(self.typeset_root, 0, self.end.delim)
        self._state = State.INSERTED
        return replaced

    def remove_from_document(self, restore: bool = False):
        if self._state < State.INSERTED:
            return
        adaptor = self.adaptor
        node = self.start.node
        if restore:
            if self.input_jax.process_strings:
                source = adaptor.create_text(self.start.delim + self.math + self.end.delim)
                end = len(adaptor.value(source))
            else:
                source, end = self.math, 0
            adaptor.insert(source, node)
            self.start = Location(source, 0, self.start.delim)
            self.end = Location(source, end, self.end.delim)
        else:
            self.start = Location(None, 0, self.start.delim)
            self.end = Location(None, 0, self.end.delim)
        adaptor.remove(node)

    def set_state(self, state: State, restore: bool = False):
        """Roll the item back to an earlier state, undoing the later stages."""
        if self._state >= State.INSERTED and state < State.INSERTED:
            self.remove_from_document(restore)
        if self._state >= State.TYPESET and state < State.TYPESET:
            self.typeset_root = None
        if self._state >= State.COMPILED and state < State.COMPILED:
            self.root = None
        self._state = min(self._state, state)
