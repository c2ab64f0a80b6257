"""Minimal typed node tree used by the sanitizing passes.

Nodes are tagged by ``name``: ``"#text"``, ``"#comment"``,
``"#document-fragment"`` or an element tag name. Ownership is strictly
tree-shaped: a node has at most one parent and attaching it elsewhere
detaches it first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class Node:
    __slots__ = ("_children", "name", "parent")

    name: str
    parent: Node | None

    def __init__(self, name: str) -> None:
        self.name = name
        self.parent = None
        self._children: list[Node] = []

    @property
    def children(self) -> list[Node]:
        return self._children

    @children.setter
    def children(self, value: list[Node]) -> None:
        for child in self._children:
            child.parent = None
        self._children = []
        for child in value:
            self.append_child(child)

    def append_child(self, node: Node) -> None:
        self._check_can_adopt(node)
        if node.parent is not None:
            node.parent.remove_child(node)
        node.parent = self
        self._children.append(node)

    def insert_before(self, node: Node, reference: Node | None) -> None:
        """Insert ``node`` immediately before ``reference``.

        A ``None`` reference appends, mirroring the DOM method.
        """
        if reference is None:
            self.append_child(node)
            return
        if reference.parent is not self:
            raise ValueError("Reference node is not a child of this node")
        if node is reference:
            return
        self._check_can_adopt(node)
        if node.parent is not None:
            node.parent.remove_child(node)
        node.parent = self
        self._children.insert(self._index_of(reference), node)

    def remove_child(self, node: Node) -> None:
        if node.parent is not self:
            raise ValueError("Node is not a child of this node")
        self._children.pop(self._index_of(node))
        node.parent = None

    def _index_of(self, node: Node) -> int:
        # Identity lookup: list.index() would compare with __eq__.
        for i, child in enumerate(self._children):
            if child is node:
                return i
        raise ValueError("Node is not a child of this node")  # pragma: no cover

    def _check_can_adopt(self, node: Node) -> None:
        cur: Node | None = self
        while cur is not None:
            if cur is node:
                raise ValueError("Cannot insert a node into its own subtree")
            cur = cur.parent

    def walk(self) -> Iterator[Node]:
        """Yield this node and its descendants, depth-first pre-order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            children = node.children
            if children:
                stack.extend(reversed(children))

    def iter_text(self) -> Iterator[Text]:
        for node in self.walk():
            if type(node) is Text:
                yield node

    def to_text(self) -> str:
        return "".join(t.data for t in self.iter_text())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Text(Node):
    __slots__ = ("data",)

    data: str

    def __init__(self, data: str) -> None:
        super().__init__("#text")
        self.data = data

    @property
    def children(self) -> list[Node]:
        return []

    @children.setter
    def children(self, value: list[Node]) -> None:
        if value:
            raise ValueError("Text nodes cannot have children")

    def append_child(self, node: Node) -> None:
        raise ValueError("Text nodes cannot have children")

    def __repr__(self) -> str:
        return f"<Text {self.data!r}>"


class Comment(Node):
    __slots__ = ("data",)

    data: str

    def __init__(self, data: str) -> None:
        super().__init__("#comment")
        self.data = data

    @property
    def children(self) -> list[Node]:
        return []

    @children.setter
    def children(self, value: list[Node]) -> None:
        if value:
            raise ValueError("Comment nodes cannot have children")

    def append_child(self, node: Node) -> None:
        raise ValueError("Comment nodes cannot have children")


class Element(Node):
    __slots__ = ("attrs",)

    attrs: dict[str, str]

    def __init__(self, name: str, attrs: dict[str, str] | None = None) -> None:
        super().__init__(name)
        self.attrs = dict(attrs) if attrs else {}

    @property
    def href(self) -> str:
        return self.attrs.get("href", "")

    @href.setter
    def href(self, value: str) -> None:
        self.attrs["href"] = value

    def __repr__(self) -> str:
        return f"<Element {self.name} {self.attrs!r}>"


class DocumentFragment(Node):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__("#document-fragment")


def link(href: str, text: str) -> Element:
    """Build an ``<a>`` element with a single text child."""
    a = Element("a", {"href": href})
    a.append_child(Text(text))
    return a
