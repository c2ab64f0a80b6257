"""Tree transforms that neutralize GitHub mentions and issue links.

Transforms are declared with the dataclasses in `quietmd.transforms_spec`,
compiled once with `compile_transforms()` and applied to a node tree with
`apply_compiled_transforms()`. A compiled sanitizer can be reused across many
documents.

Every pass first collects the nodes it will rewrite with a read-only walk and
only then mutates the tree, so inserted and detached nodes never disturb the
traversal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, cast

from .constants import (
    ESCAPED_CHAR_RE,
    GITHUB_HOST,
    GITHUB_PROFILE_URL,
    GITHUB_REF_RE,
    MENTION_EXCLUDED_PREFIXES,
    MENTION_RE,
    URL_RE,
)
from .linkify import find_links
from .node import Element, Node, Text, link
from .transforms_spec import Autolink, SanitizeLinks, SanitizeMentions

if TYPE_CHECKING:
    import re

    from .transforms_spec import NodeCallback, ReportCallback

__all__ = [
    "Autolink",
    "CompiledTransform",
    "SanitizeLinks",
    "SanitizeMentions",
    "Transform",
    "apply_compiled_transforms",
    "compile_transforms",
]


Transform = Autolink | SanitizeMentions | SanitizeLinks

_TRANSFORM_CLASSES: tuple[type[object], ...] = (
    Autolink,
    SanitizeMentions,
    SanitizeLinks,
)


# -----------------
# Compilation
# -----------------


@dataclass(frozen=True, slots=True)
class _CompiledAutolinkTransform:
    kind: Literal["autolink"]
    skip_tags: frozenset[str]
    callback: NodeCallback | None
    report: ReportCallback | None


@dataclass(frozen=True, slots=True)
class _CompiledMentionsTransform:
    kind: Literal["mentions"]
    skip_tags: frozenset[str]
    callback: NodeCallback | None
    report: ReportCallback | None


@dataclass(frozen=True, slots=True)
class _CompiledLinksTransform:
    kind: Literal["links"]
    host: str
    callback: NodeCallback | None
    report: ReportCallback | None


CompiledTransform = _CompiledAutolinkTransform | _CompiledMentionsTransform | _CompiledLinksTransform


def compile_transforms(transforms: list[Transform] | tuple[Transform, ...]) -> list[CompiledTransform]:
    if not transforms:
        return []

    compiled: list[CompiledTransform] = []
    for t in transforms:
        if not isinstance(t, _TRANSFORM_CLASSES):
            raise TypeError(f"Unsupported transform: {type(t).__name__}")
        if not t.enabled:
            continue

        if isinstance(t, Autolink):
            compiled.append(
                _CompiledAutolinkTransform(
                    kind="autolink",
                    skip_tags=t.skip_tags,
                    callback=t.callback,
                    report=t.report,
                )
            )
            continue

        if isinstance(t, SanitizeMentions):
            compiled.append(
                _CompiledMentionsTransform(
                    kind="mentions",
                    skip_tags=t.skip_tags,
                    callback=t.callback,
                    report=t.report,
                )
            )
            continue

        if isinstance(t, SanitizeLinks):
            compiled.append(
                _CompiledLinksTransform(
                    kind="links",
                    # No redirect host: replacing github.com with itself is a no-op.
                    host=t.redirect_host or GITHUB_HOST,
                    callback=t.callback,
                    report=t.report,
                )
            )
            continue

        raise TypeError(f"Unsupported transform: {type(t).__name__}")  # pragma: no cover

    return compiled


# -----------------
# Application
# -----------------


def _collect_text_nodes(root: Node, skip_tags: frozenset[str], pattern: re.Pattern[str]) -> list[Text]:
    """Return attached text nodes matching ``pattern``, in document order.

    Text below an element named in ``skip_tags`` is not collected.
    """

    found: list[Text] = []
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, skipped = stack.pop()
        if type(node) is Text:
            if not skipped and node.parent is not None and pattern.search(node.data):
                found.append(node)
            continue

        children = node.children
        if not children:
            continue
        if type(node) is Element and node.name.lower() in skip_tags:
            skipped = True
        stack.extend((child, skipped) for child in reversed(children))
    return found


def _replace_with(node: Node, replacements: list[Node]) -> None:
    parent = cast("Node", node.parent)
    for new in replacements:
        parent.insert_before(new, node)
    parent.remove_child(node)


def _escaped_prefix_excludes(data: str, start: int) -> bool:
    """True when ``data[start]`` follows an escaped character that rules out a mention."""

    m = ESCAPED_CHAR_RE.search(data, max(0, start - 16), start)
    if m is None:
        return False
    return chr(int(m.group(1))) in MENTION_EXCLUDED_PREFIXES


def _split_mentions(data: str) -> tuple[list[Node], int]:
    """Split ``data`` into text and profile-link nodes.

    Plain runs (including skipped ``@org/`` mentions and mentions right after
    an escaped backtick or tilde) are merged into single text nodes; empty
    runs are omitted.
    """

    out: list[Node] = []
    pending = ""
    cursor = 0
    linked = 0
    for m in MENTION_RE.finditer(data):
        mention = m.group(0)
        pending += data[cursor : m.start()]
        cursor = m.end()
        if mention.endswith("/") or _escaped_prefix_excludes(data, m.start()):
            pending += mention
            continue

        if pending:
            out.append(Text(pending))
            pending = ""
        out.append(link(GITHUB_PROFILE_URL + mention.replace("@", ""), mention))
        linked += 1

    pending += data[cursor:]
    if pending:
        out.append(Text(pending))
    return out, linked


def _apply_autolink(root: Node, t: _CompiledAutolinkTransform) -> None:
    for node in _collect_text_nodes(root, t.skip_tags, URL_RE):
        data = node.data
        matches = find_links(data)
        if not matches:
            continue

        if t.callback is not None:
            t.callback(node)
        if t.report is not None:
            t.report(f"Linkified {len(matches)} link(s) in text node", node=node)

        out: list[Node] = []
        cursor = 0
        for m in matches:
            if m.start > cursor:
                out.append(Text(data[cursor : m.start]))
            out.append(link(m.href, m.text))
            cursor = m.end
        if cursor < len(data):
            out.append(Text(data[cursor:]))
        _replace_with(node, out)


def _apply_mentions(root: Node, t: _CompiledMentionsTransform) -> None:
    for node in _collect_text_nodes(root, t.skip_tags, MENTION_RE):
        out, linked = _split_mentions(node.data)
        if not linked:
            # Only skipped matches ("@org/", escaped prefixes): keep the node as is.
            continue

        if t.callback is not None:
            t.callback(node)
        if t.report is not None:
            t.report(f"Linked {linked} mention(s) in text node", node=node)
        _replace_with(node, out)


def _apply_links(root: Node, t: _CompiledLinksTransform) -> None:
    links = [
        node
        for node in root.walk()
        if type(node) is Element and node.name.lower() == "a" and GITHUB_REF_RE.search(node.href)
    ]

    for a in links:
        if t.callback is not None:
            t.callback(a)

        for text in a.iter_text():
            m = GITHUB_REF_RE.search(text.data)
            if m is None:
                continue
            text.data = f"{m.group('repo')}#{m.group('number')}"
            if t.report is not None:
                t.report("Shortened GitHub reference link", node=a)

        a.href = a.href.replace(GITHUB_HOST, t.host)


def apply_compiled_transforms(root: Node, compiled: list[CompiledTransform]) -> None:
    """Run compiled transforms over ``root`` in order, mutating it in place."""

    for t in compiled:
        # Dispatch on 'kind' rather than isinstance checks.
        k: str = t.kind
        if k == "autolink":
            _apply_autolink(root, cast("_CompiledAutolinkTransform", t))
            continue
        if k == "mentions":
            _apply_mentions(root, cast("_CompiledMentionsTransform", t))
            continue
        if k == "links":
            _apply_links(root, cast("_CompiledLinksTransform", t))
            continue
        raise TypeError(f"Unsupported compiled transform: {type(t).__name__}")
