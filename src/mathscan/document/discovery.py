import logging
from typing import Any, Dict, Iterable, List, Optional

from mathscan.dom.adaptor import DOMAdaptor
from mathscan.dom.strings import ContainerStrings, DomStrings
from mathscan.document.math_item import Location, MathItem, ProtoItem
from mathscan.document.math_list import MathList

logger = logging.getLogger(__name__)


def find_position(n: int, index: int, delim: str, nodes: ContainerStrings) -> Location:
    """
    Map offset `index` in string n back to the node holding it.

    An offset at the boundary between two runs belongs to the earlier run.
    Returns a Location with node None if the offset is past the last run.
    """
    for run in nodes.runs[n]:
        if index <= run.length:
            return Location(run.node, index, delim)
        index -= run.length
    return Location(None, 0, delim)


class DocumentOrder:
    """Pre-order numbering of the nodes of one container, built on first use."""

    def __init__(self, adaptor: DOMAdaptor, container):
        self.adaptor = adaptor
        self.container = container
        self._order: Optional[Dict[int, int]] = None

    def __call__(self, node) -> int:
        if self._order is None:
            self._order = {id(n): i for i, n in enumerate(self.adaptor.walk(self.container))}
        return self._order.get(id(node), len(self._order))


def math_item(item: ProtoItem, jax, nodes: ContainerStrings) -> MathItem:
    start = find_position(item.n, item.start.n, item.open, nodes)
    end = find_position(item.n, item.end.n, item.close, nodes)
    return MathItem(item.math, jax, item.display, start, end)


def _string_key(index: int, order: DocumentOrder, item: MathItem, proto: ProtoItem,
                nodes: ContainerStrings) -> tuple:
    if item.start.node is not None:
        return (index, order(item.start.node), item.start.n)
    # unresolved starts sort after the last run of their string
    runs = nodes.runs[proto.n]
    last = order(runs[-1].node) if runs else -1
    return (index, last, proto.start.n)


def discover(
    containers: Iterable[Any],
    sources: List[Any],
    adaptor: DOMAdaptor,
    dom_strings: Optional[DomStrings] = None,
    math_list: Optional[MathList] = None,
) -> MathList:
    """
    Find the math in each container with each source and merge it, in
    document order, into math_list (a new MathList if none is given).
    """
    if dom_strings is None:
        dom_strings = DomStrings(adaptor)
    math_list = math_list if math_list is not None else MathList()

    for index, container in enumerate(containers):
        order = DocumentOrder(adaptor, container)
        nodes: Optional[ContainerStrings] = None
        for jax in sources:
            items: List[MathItem] = []
            if jax.process_strings:
                if nodes is None:
                    nodes = dom_strings.find(container)
                    logger.debug("Container %d: %d strings", index, len(nodes))
                for proto in jax.find_math(nodes.strings):
                    item = math_item(proto, jax, nodes)
                    if not item.resolved:
                        logger.debug("Unresolved position for %r in string %d", proto.math, proto.n)
                    item.key = _string_key(index, order, item, proto, nodes)
                    items.append(item)
            else:
                for proto in jax.find_math(container):
                    item = MathItem(proto.math, jax, proto.display, proto.start, proto.end)
                    item.key = (index, order(proto.start.node), proto.start.n)
                    items.append(item)
            for item in items:
                item.adaptor = adaptor
            logger.debug("Container %d: %s found %d items", index, jax.name, len(items))
            math_list.merge(items)
    return math_list
