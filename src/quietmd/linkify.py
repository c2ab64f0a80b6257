"""Bare URL detection for the Autolink pass."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import URL_RE, URL_TRAILING_PUNCTUATION


@dataclass(frozen=True, slots=True)
class LinkMatch:
    start: int
    end: int
    text: str
    href: str


def _trim_url(url: str) -> str:
    """Drop trailing punctuation the way GFM extended autolinks do.

    A closing parenthesis is only dropped while the URL has more ``)`` than
    ``(``, so ``https://x/a_(b)`` keeps its final parenthesis.
    """

    while url:
        last = url[-1]
        if last in URL_TRAILING_PUNCTUATION:
            url = url[:-1]
            continue
        if last == ")" and url.count(")") > url.count("("):
            url = url[:-1]
            continue
        break
    return url


def _has_host(url: str) -> bool:
    lower = url.lower()
    if lower.startswith("www."):
        rest = url[4:]
    elif "://" in url:
        rest = url.split("://", 1)[1]
    else:
        return False
    host = rest.split("/", 1)[0]
    return bool(host) and not host.startswith(".")


def find_links(text: str) -> list[LinkMatch]:
    """Return bare URLs in ``text``, left to right and non-overlapping."""

    out: list[LinkMatch] = []
    for m in URL_RE.finditer(text):
        url = _trim_url(m.group(0))
        if not _has_host(url):
            continue
        href = url
        if url.lower().startswith("www."):
            href = f"http://{url}"
        start = m.start()
        out.append(LinkMatch(start=start, end=start + len(url), text=url, href=href))
    return out
