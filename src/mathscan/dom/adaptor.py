from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional


class DOMAdaptor(ABC):
    """
    The capability set the core needs from a structural tree.

    Nodes are opaque handles: the core only ever passes them back to the
    adaptor that produced them.
    """

    document: Any = None

    @abstractmethod
    def body(self, document) -> Any:
        pass

    @abstractmethod
    def kind(self, node) -> str:
        """'#text' for text nodes, '#comment' for comments, else the tag name."""
        pass

    @abstractmethod
    def children(self, node) -> List[Any]:
        pass

    @abstractmethod
    def first_child(self, node) -> Optional[Any]:
        pass

    @abstractmethod
    def next(self, node) -> Optional[Any]:
        pass

    @abstractmethod
    def parent(self, node) -> Optional[Any]:
        pass

    @abstractmethod
    def value(self, node) -> str:
        """The text of a text node."""
        pass

    @abstractmethod
    def get_attribute(self, node, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_attribute(self, node, name: str, value: str) -> None:
        pass

    @abstractmethod
    def create_node(self, kind: str, attributes: Optional[Dict[str, str]] = None,
                    children: Iterable[Any] = ()) -> Any:
        pass

    @abstractmethod
    def create_text(self, text: str) -> Any:
        pass

    @abstractmethod
    def append(self, parent, child) -> Any:
        pass

    @abstractmethod
    def insert(self, node, before) -> Any:
        """Insert node immediately before the node `before`."""
        pass

    @abstractmethod
    def replace(self, new, old) -> Any:
        pass

    @abstractmethod
    def remove(self, node) -> Any:
        pass

    @abstractmethod
    def split(self, node, n: int):
        """
        Split a text node at offset n.
        Returns (head, tail): the nodes now holding text[:n] and text[n:].
        """
        pass

    def is_text(self, node) -> bool:
        return self.kind(node) == "#text"

    def text_content(self, node) -> str:
        if self.is_text(node):
            return self.value(node)
        return "".join(self.text_content(child) for child in self.children(node))

    def tags(self, node, name: str) -> List[Any]:
        """All descendant elements of node with the given tag name, in document order."""
        found = []
        for child in self.children(node):
            if self.kind(child) == name:
                found.append(child)
            if not self.is_text(child):
                found.extend(self.tags(child, name))
        return found

    def walk(self, node) -> Iterable[Any]:
        """Pre-order traversal of node and its descendants."""
        yield node
        for child in self.children(node):
            yield from self.walk(child)
