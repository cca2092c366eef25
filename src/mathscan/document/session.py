import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from mathscan.dom.adaptor import DOMAdaptor
from mathscan.dom.strings import DomStrings
from mathscan.document.discovery import discover
from mathscan.document.math_item import Location, MathItem, State
from mathscan.document.math_list import MathList
from mathscan.mml.output import MathMLRenderer
from mathscan.parser.errors import TexError

logger = logging.getLogger(__name__)


class DocumentState(Enum):
    UNINITIALIZED = "uninitialized"
    DISCOVERED = "discovered"
    COMPILED = "compiled"
    TYPESET = "typeset"
    RENDERED = "rendered"
    REMOVED = "removed"


class Reporter:
    """Abstract base class for reporting the progress of a DocumentSession."""

    def log(self, message):
        pass

    def error(self, message):
        pass

    def math_compiled(self, math, success, error=None):
        pass


class LoggingReporter(Reporter):
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("mathscan")

    def log(self, message):
        self.logger.info(message)

    def error(self, message):
        self.logger.error(message)

    def math_compiled(self, math, success, error=None):
        if success:
            self.logger.debug("Compiled %r with %s", math.math, math.input_jax.name)
        else:
            self.logger.warning("Could not compile %r: %s", math.math, error)


class DocumentSession:
    """
    Discovery state and render lifecycle of one document.

    Every stage runs at most once until reset() (or, for update_document,
    remove_from_document()) clears its flag.
    """

    def __init__(
        self,
        document,
        adaptor: DOMAdaptor,
        input_jax,
        containers: Optional[Iterable[Any]] = None,
        renderer=None,
        dom_strings: Optional[DomStrings] = None,
        reporter: Optional[Reporter] = None,
    ):
        self.document = document
        self.adaptor = adaptor
        if adaptor.document is None:
            adaptor.document = document
        if isinstance(input_jax, (list, tuple)):
            self.input_jax = list(input_jax)
        else:
            self.input_jax = [input_jax]
        for jax in self.input_jax:
            jax.set_adaptor(adaptor)
        self.containers = list(containers) if containers is not None else None
        self.renderer = renderer or MathMLRenderer(adaptor)
        self.dom_strings = dom_strings or DomStrings(adaptor)
        if self.dom_strings.adaptor is None:
            self.dom_strings.adaptor = adaptor
        self.reporter = reporter or LoggingReporter()
        self.math = MathList()
        self.errors: List[Tuple[MathItem, TexError]] = []
        self.processed = set()
        self.state = DocumentState.UNINITIALIZED

    def discover(self, containers: Optional[Iterable[Any]] = None) -> "DocumentSession":
        if "discover" in self.processed:
            return self
        if containers is None:
            containers = self.containers
        if containers is None:
            containers = [self.adaptor.body(self.document)]
        discover(list(containers), self.input_jax, self.adaptor, self.dom_strings, self.math)
        self.processed.add("discover")
        self.state = DocumentState.DISCOVERED
        self.reporter.log(f"Found {len(self.math)} math items")
        return self

    def compile(self) -> "DocumentSession":
        if "compile" in self.processed:
            return self
        for item in list(self.math):
            try:
                item.compile()
            except TexError as e:
                self.math.remove(item)
                self.errors.append((item, e))
                self.reporter.math_compiled(item, False, e)
                continue
            self.reporter.math_compiled(item, True)
        self.processed.add("compile")
        self.state = DocumentState.COMPILED
        return self

    def typeset(self) -> "DocumentSession":
        if "typeset" in self.processed:
            return self
        for item in self.math:
            item.typeset(self.renderer)
        self.processed.add("typeset")
        self.state = DocumentState.TYPESET
        return self

    def update_document(self) -> "DocumentSession":
        if "update_document" in self.processed:
            return self
        # split text nodes, keyed by id; the old node is kept to guard against id reuse
        replaced: Dict[int, Tuple[Any, Any]] = {}

        def current(node):
            entry = replaced.get(id(node))
            while entry is not None and entry[0] is node:
                node = entry[1]
                entry = replaced.get(id(node))
            return node

        # last item first, so splitting never moves an offset that is still pending
        for item in self.math.reversed():
            if item.state < State.TYPESET:
                continue
            if not item.resolved:
                self.reporter.log(f"Skipping {item.math!r}: position not in the document")
                continue
            item.start = Location(current(item.start.node), item.start.n, item.start.delim)
            item.end = Location(current(item.end.node), item.end.n, item.end.delim)
            for old, new in item.update_document():
                replaced[id(old)] = (old, new)
        logger.debug("Split %d text nodes while inserting math", len(replaced))
        self.processed.add("update_document")
        self.state = DocumentState.RENDERED
        return self

    def render(self) -> "DocumentSession":
        return self.discover().compile().typeset().update_document()

    def remove_from_document(self, restore: bool = False) -> "DocumentSession":
        if "update_document" not in self.processed:
            return self
        for item in self.math:
            if item.state >= State.INSERTED:
                item.set_state(State.TYPESET, restore)
        self.processed.discard("update_document")
        self.state = DocumentState.REMOVED
        return self

    def reset(self) -> "DocumentSession":
        self.math.clear()
        self.errors = []
        self.processed.clear()
        self.state = DocumentState.UNINITIALIZED
        return self
