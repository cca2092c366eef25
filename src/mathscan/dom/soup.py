from typing import Dict, Iterable, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

from mathscan.dom.adaptor import DOMAdaptor


class SoupAdaptor(DOMAdaptor):
    """DOMAdaptor over a BeautifulSoup tree (html.parser backend)."""

    def __init__(self, document: Optional[BeautifulSoup] = None):
        self.document = document

    def parse(self, html: str) -> BeautifulSoup:
        self.document = BeautifulSoup(html, "html.parser")
        return self.document

    def _soup(self) -> BeautifulSoup:
        if self.document is None:
            self.document = BeautifulSoup("", "html.parser")
        return self.document

    def body(self, document):
        if document.body is not None:
            return document.body
        return document

    def kind(self, node) -> str:
        if isinstance(node, Comment):
            return "#comment"
        if isinstance(node, NavigableString):
            # Doctypes, CDATA and the like are strings in bs4 but not text
            return "#text" if type(node) is NavigableString else "#" + type(node).__name__.lower()
        return node.name

    def children(self, node):
        if isinstance(node, Tag):
            return list(node.contents)
        return []

    def first_child(self, node):
        if isinstance(node, Tag) and node.contents:
            return node.contents[0]
        return None

    def next(self, node):
        return node.next_sibling

    def parent(self, node):
        return node.parent

    def value(self, node) -> str:
        return str(node)

    def get_attribute(self, node, name: str) -> Optional[str]:
        if not isinstance(node, Tag):
            return None
        value = node.get(name)
        # multi-valued attributes such as class come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def set_attribute(self, node, name: str, value: str) -> None:
        node[name] = value

    def create_node(self, kind: str, attributes: Optional[Dict[str, str]] = None,
                    children: Iterable = ()):
        attrs = {key: str(value) for key, value in (attributes or {}).items()}
        tag = self._soup().new_tag(kind, attrs=attrs)
        for child in children:
            tag.append(child)
        return tag

    def create_text(self, text: str):
        return NavigableString(text)

    def append(self, parent, child):
        parent.append(child)
        return child

    def insert(self, node, before):
        before.insert_before(node)
        return node

    def replace(self, new, old):
        old.replace_with(new)
        return old

    def remove(self, node):
        node.extract()
        return node

    def split(self, node, n: int):
        # NavigableString is immutable, so both halves are new nodes
        text = str(node)
        head = NavigableString(text[:n])
        tail = NavigableString(text[n:])
        node.replace_with(head)
        head.insert_after(tail)
        return head, tail

    def tags(self, node, name: str):
        if not isinstance(node, Tag):
            return []
        return node.find_all(name)
