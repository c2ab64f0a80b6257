from .extension import SanitizeExtension
from .node import Comment, DocumentFragment, Element, Node, Text
from .sanitizer import DEFAULT_EXTENSIONS, LinkAndMentionSanitizer, sanitize_links_and_mentions
from .transforms import (
    Autolink,
    SanitizeLinks,
    SanitizeMentions,
    apply_compiled_transforms,
    compile_transforms,
)

__all__ = [
    "DEFAULT_EXTENSIONS",
    "Autolink",
    "Comment",
    "DocumentFragment",
    "Element",
    "LinkAndMentionSanitizer",
    "Node",
    "SanitizeExtension",
    "SanitizeLinks",
    "SanitizeMentions",
    "Text",
    "apply_compiled_transforms",
    "compile_transforms",
    "sanitize_links_and_mentions",
]
