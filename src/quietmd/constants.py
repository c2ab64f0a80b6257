"""Patterns and fixed values shared by the sanitizing passes."""

from __future__ import annotations

import re
import string

GITHUB_HOST = "github.com"
GITHUB_PROFILE_URL = "https://github.com/"

# GitHub usernames: alphanumeric segments joined by single hyphens.
GITHUB_USERNAME = r"(?i:[a-z0-9]+(?:-[a-z0-9]+)*)"

# Not preceded by an identifier character, a backtick or a tilde. A trailing
# "/" means only the org part of an "@org/team" mention was captured.
MENTION_RE = re.compile(rf"(?<![A-Za-z0-9`~])@{GITHUB_USERNAME}/?")
MENTION_EXCLUDED_PREFIXES = frozenset(string.ascii_letters + string.digits + "`~")

# Python-Markdown keeps a backslash-escaped character as STX + ord + ETX until
# its final unescape step, so the lookbehind above cannot see it.
ESCAPED_CHAR_RE = re.compile(r"\x02(\d+)\x03\Z")

GITHUB_REF_RE = re.compile(
    rf"""
    (?:https?://)?
    github\.com/(?P<repo>{GITHUB_USERNAME}/[^/\s]+)/
    (?:issue|pull)s?/(?P<number>\d+)
    """,
    re.VERBOSE,
)

# Bare URLs as recognised by the GFM autolink extension. A URL also ends at
# the STX/ETX delimiters of Python-Markdown placeholders (stashed inline HTML,
# entities, escapes). Trailing punctuation is trimmed separately, see
# linkify.py.
URL_RE = re.compile(r"(?<![A-Za-z0-9])(?:https?://|www\.)[^\s<\x02\x03]+", re.IGNORECASE)
URL_TRAILING_PUNCTUATION = "?!.,:*_~'\""

# Text below these elements is never rewritten by text passes: links must not
# nest and code spans are not prose.
DEFAULT_SKIP_TAGS = ("a", "code", "pre")
