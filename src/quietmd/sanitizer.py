"""Markdown-in, HTML-out entry point."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import markdown

from .extension import SanitizeExtension
from .transforms import apply_compiled_transforms
from .transforms_spec import Autolink, SanitizeLinks, SanitizeMentions

if TYPE_CHECKING:
    from .node import Node
    from .transforms import Transform
    from .transforms_spec import ReportCallback

# GitHub-flavoured tables and fenced code; fenced blocks are stashed by
# Python-Markdown before tree processing, so their content is never rewritten.
DEFAULT_EXTENSIONS: tuple[str, ...] = ("tables", "fenced_code")


@dataclass(frozen=True, slots=True)
class LinkAndMentionSanitizer:
    """Neutralize GitHub notifications in generated markdown.

    ``@user`` mentions become links to the user's profile and links to
    GitHub issues/pull requests are shortened to ``owner/repo#123``. When
    ``github_redirection_service`` is given, it replaces ``github.com`` in
    those links' targets.

    The sanitizer holds no per-call state and can be shared.
    """

    github_redirection_service: str | None
    extensions: tuple[str, ...]
    transforms: tuple[Transform, ...]
    _extension: SanitizeExtension = field(repr=False, compare=False)

    def __init__(
        self,
        github_redirection_service: str | None = None,
        *,
        extensions: list[str] | tuple[str, ...] = DEFAULT_EXTENSIONS,
        autolink: bool = True,
        report: ReportCallback | None = None,
    ) -> None:
        transforms: tuple[Transform, ...] = (
            Autolink(enabled=autolink, report=report),
            SanitizeMentions(report=report),
            SanitizeLinks(github_redirection_service, report=report),
        )
        object.__setattr__(self, "github_redirection_service", github_redirection_service)
        object.__setattr__(self, "extensions", tuple(extensions))
        object.__setattr__(self, "transforms", transforms)
        object.__setattr__(self, "_extension", SanitizeExtension(transforms))

    def sanitize_tree(self, root: Node) -> None:
        """Run the passes over an already parsed tree, in place."""
        apply_compiled_transforms(root, self._extension.compiled)

    def sanitize_links_and_mentions(self, text: str) -> str:
        # Markdown instances carry parser state; use a fresh one per call.
        md = markdown.Markdown(extensions=[*self.extensions, self._extension])
        return md.convert(text)


def sanitize_links_and_mentions(text: str, *, github_redirection_service: str | None = None) -> str:
    return LinkAndMentionSanitizer(github_redirection_service).sanitize_links_and_mentions(text)
