"""Conversion between ElementTree content and `quietmd.node` trees.

ElementTree keeps text in ``.text``/``.tail`` strings rather than in nodes.
`from_etree()` turns every such string into a `Text` node so the passes can
splice text; `to_etree()` folds the nodes back into strings.
"""

from __future__ import annotations

from xml.etree import ElementTree as etree

from .node import Comment, DocumentFragment, Element, Node, Text


def from_etree(element: etree.Element) -> DocumentFragment:
    """Build a fragment holding the content (not the tag) of ``element``."""
    root = DocumentFragment()
    _append_content(root, element)
    return root


def _append_content(parent: Node, element: etree.Element) -> None:
    if element.text:
        parent.append_child(Text(element.text))
    for child in element:
        parent.append_child(_convert(child))
        if child.tail:
            parent.append_child(Text(child.tail))


def _convert(element: etree.Element) -> Node:
    if element.tag is etree.Comment:
        return Comment(element.text or "")
    if not isinstance(element.tag, str):
        raise TypeError(f"Unsupported ElementTree node: {element.tag!r}")
    node = Element(element.tag, dict(element.attrib))
    _append_content(node, element)
    return node


def to_etree(root: Node, element: etree.Element) -> None:
    """Replace the content of ``element`` with the children of ``root``.

    The tag and attributes of ``element`` are kept.
    """
    for child in list(element):
        element.remove(child)
    element.text = None
    _fill(element, root)


def _join(existing: str | None, data: str) -> str:
    # Keep the original string object (e.g. markdown's AtomicString) when
    # there is nothing to concatenate.
    if existing is None:
        return data
    return existing + data


def _fill(element: etree.Element, node: Node) -> None:
    last: etree.Element | None = None
    for child in node.children:
        if type(child) is Text:
            if last is None:
                element.text = _join(element.text, child.data)
            else:
                last.tail = _join(last.tail, child.data)
            continue

        if type(child) is Comment:
            sub = etree.Comment(child.data)
            element.append(sub)
        elif type(child) is Element:
            sub = etree.SubElement(element, child.name, child.attrs)
            _fill(sub, child)
        else:
            raise TypeError(f"Cannot serialize node: {child!r}")
        last = sub
