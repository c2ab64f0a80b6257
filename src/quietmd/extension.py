"""Python-Markdown integration for the sanitizing transforms."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from .transforms import apply_compiled_transforms, compile_transforms
from .treebuilder import from_etree, to_etree

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from .transforms import CompiledTransform, Transform

# After inline patterns (20) have produced links and code spans, before
# prettify (10) and unescape (0).
TREEPROCESSOR_PRIORITY = 15


class SanitizeTreeprocessor(Treeprocessor):
    """Run compiled transforms over the parsed document."""

    def __init__(self, md: Markdown, compiled: list[CompiledTransform]) -> None:
        super().__init__(md)
        self.compiled = compiled

    def run(self, root: Element) -> None:
        tree = from_etree(root)
        apply_compiled_transforms(tree, self.compiled)
        to_etree(tree, root)


class SanitizeExtension(Extension):
    """Register the sanitizing treeprocessor on a ``markdown.Markdown``.

    Transforms are compiled once, so one extension instance can be passed to
    any number of ``Markdown`` instances.
    """

    def __init__(self, transforms: list[Transform] | tuple[Transform, ...], **kwargs: Any) -> None:
        self.compiled = compile_transforms(transforms)
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        md.treeprocessors.register(
            SanitizeTreeprocessor(md, self.compiled),
            "quietmd_sanitize",
            TREEPROCESSOR_PRIORITY,
        )
