from __future__ import annotations

import unittest

from quietmd.node import DocumentFragment, Element, Text, link
from quietmd.transforms import (
    SanitizeLinks,
    SanitizeMentions,
    apply_compiled_transforms,
    compile_transforms,
)

PR_URL = "https://github.com/foo/bar/pull/42"


def _doc(*children) -> DocumentFragment:
    root = DocumentFragment()
    p = Element("p")
    root.append_child(p)
    for child in children:
        p.append_child(child)
    return root


class TestSanitizeLinks(unittest.TestCase):
    def test_link_text_is_shortened(self) -> None:
        a = link(PR_URL, PR_URL)
        root = _doc(a)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks()]))

        assert a.href == PR_URL
        self.assertEqual(a.to_text(), "foo/bar#42")

    def test_redirect_host_is_applied(self) -> None:
        a = link(PR_URL, PR_URL)
        root = _doc(a)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks("redirect.example.com")]))

        self.assertEqual(a.href, "https://redirect.example.com/foo/bar/pull/42")
        self.assertEqual(a.to_text(), "foo/bar#42")

    def test_custom_link_text_is_kept_but_target_redirected(self) -> None:
        a = link(PR_URL, "the fix")
        root = _doc(a)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks("redirect.example.com")]))

        self.assertEqual(a.to_text(), "the fix")
        self.assertEqual(a.href, "https://redirect.example.com/foo/bar/pull/42")

    def test_each_text_uses_its_own_reference(self) -> None:
        a = Element("a", {"href": PR_URL})
        a.append_child(Text("https://github.com/foo/bar/pull/42"))
        strong = Element("strong")
        strong.append_child(Text("see github.com/other/repo/issues/7"))
        a.append_child(strong)
        a.append_child(Text(" and more"))
        root = _doc(a)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks()]))

        self.assertEqual([t.data for t in a.iter_text()], ["foo/bar#42", "other/repo#7", " and more"])

    def test_non_reference_links_are_untouched(self) -> None:
        for href in [
            "https://github.com/foo/bar",
            "https://github.com/foo/bar/releases/tag/v1.0.0",
            "https://example.com/foo/bar/pull/42",
        ]:
            a = link(href, PR_URL)
            root = _doc(a)
            apply_compiled_transforms(root, compile_transforms([SanitizeLinks("redirect.example.com")]))

            self.assertEqual(a.href, href)
            self.assertEqual(a.to_text(), PR_URL)

    def test_reference_text_outside_links_is_untouched(self) -> None:
        t = Text(PR_URL)
        root = _doc(t)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks("redirect.example.com")]))

        self.assertEqual(t.data, PR_URL)

    def test_every_github_host_occurrence_is_replaced(self) -> None:
        href = "https://github.com/foo/bar/issues/1?from=github.com"
        a = link(href, "x")
        root = _doc(a)
        apply_compiled_transforms(root, compile_transforms([SanitizeLinks("r.example")]))

        self.assertEqual(a.href, "https://r.example/foo/bar/issues/1?from=r.example")

    def test_mention_links_are_not_rewritten(self) -> None:
        root = _doc(Text("cc @bob"))
        compiled = compile_transforms([SanitizeMentions(), SanitizeLinks("redirect.example.com")])
        apply_compiled_transforms(root, compiled)

        links = [n for n in root.walk() if isinstance(n, Element) and n.name == "a"]
        assert len(links) == 1
        self.assertEqual(links[0].href, "https://github.com/bob")
        self.assertEqual(links[0].to_text(), "@bob")

    def test_invalid_redirect_hosts_are_rejected(self) -> None:
        for host in ["", "redirect example.com", "https://redirect.example.com"]:
            with self.assertRaises(ValueError):
                SanitizeLinks(host)

    def test_report_is_called_per_shortened_text(self) -> None:
        seen: list[tuple[str, object]] = []
        a = link(PR_URL, PR_URL)
        root = _doc(a)

        def report(msg: str, *, node=None):
            seen.append((msg, node))

        apply_compiled_transforms(root, compile_transforms([SanitizeLinks(report=report)]))
        assert seen == [("Shortened GitHub reference link", a)]
