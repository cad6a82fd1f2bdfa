"""Tests for webspecs.services.structure."""

import pytest

from webspecs.services.html_parser import parse_html
from webspecs.services.structure import (
    analyze_structure,
    classify_link,
    extract_headings,
    extract_landmarks,
    extract_links,
    extract_skip_links,
)
from webspecs.services.structure_compare import flatten_headings


def _page(body: str, head: str = "<title>Page</title>", lang: str = "en") -> str:
    return f'<!DOCTYPE html><html lang="{lang}"><head>{head}</head><body>{body}</body></html>'


def _skeleton(analysis) -> dict:
    return {item.role: item.count for item in analysis.skeleton}


# ---------------------------------------------------------------------------
# Title / language
# ---------------------------------------------------------------------------

class TestMetadata:
    def test_title_and_language(self):
        result = analyze_structure(parse_html(_page("<p>x</p>", head="<title>  Hello  </title>")))
        assert result.title == "Hello"
        assert result.language == "en"

    def test_missing_title_and_language_are_none(self):
        result = analyze_structure(parse_html("<html><body><p>x</p></body></html>"))
        assert result.title is None
        assert result.language is None

    def test_blank_language_is_none(self):
        result = analyze_structure(parse_html(_page("<p>x</p>", lang="  ")))
        assert result.language is None

    def test_warnings_are_empty(self):
        assert analyze_structure(parse_html(_page("<p>x</p>"))).warnings == []


# ---------------------------------------------------------------------------
# Skip links
# ---------------------------------------------------------------------------

class TestSkipLinks:
    def test_fragment_links_before_first_landmark(self):
        html = _page(
            '<a href="#main">Skip to content</a>'
            '<a href="#">Top</a>'
            '<a href="/home">Home</a>'
            '<nav><a href="#later">Later</a></nav>'
        )
        links = extract_skip_links(parse_html(html))
        assert [(link.text, link.target) for link in links] == [("Skip to content", "#main")]

    def test_heading_ends_the_search(self):
        html = _page('<h1>Title</h1><a href="#content">Skip</a>')
        assert extract_skip_links(parse_html(html)) == []

    def test_role_landmark_ends_the_search(self):
        html = _page('<div role="navigation"></div><a href="#content">Skip</a>')
        assert extract_skip_links(parse_html(html)) == []


# ---------------------------------------------------------------------------
# Landmarks
# ---------------------------------------------------------------------------

class TestLandmarks:
    def test_skeleton_lists_every_role_in_display_order(self):
        analysis = extract_landmarks(parse_html(_page("<main></main>")))
        assert [item.role for item in analysis.skeleton] == [
            "banner",
            "navigation",
            "main",
            "complementary",
            "contentinfo",
            "search",
            "form",
            "region",
            "article",
        ]
        assert _skeleton(analysis)["main"] == 1

    def test_scoped_header_and_footer_are_not_banner_or_contentinfo(self):
        html = _page(
            "<header></header>"
            "<main><article><header></header><footer></footer></article></main>"
            "<footer></footer>"
        )
        counts = _skeleton(extract_landmarks(parse_html(html)))
        assert counts["banner"] == 1
        assert counts["contentinfo"] == 1
        assert counts["article"] == 1

    def test_explicit_roles_count_once(self):
        html = _page(
            '<nav role="navigation"></nav>'
            '<div role="navigation"></div>'
            '<div role="search"></div>'
        )
        analysis = extract_landmarks(parse_html(html))
        counts = _skeleton(analysis)
        assert counts["navigation"] == 2
        assert counts["search"] == 1

        elements = {item.element: item.count for item in analysis.elements}
        assert elements["<nav>"] == 1
        assert elements['<div role="navigation">'] == 1
        assert '<nav role="navigation">' not in elements

    def test_elements_sorted_by_count(self):
        html = _page("<section></section><section></section><main></main>")
        elements = extract_landmarks(parse_html(html)).elements
        assert elements[0].element == "<section>"
        assert elements[0].count == 2

    def test_outline_skips_non_landmark_wrappers(self):
        html = _page('<div><main><div><section role="region"></section></div></main></div>')
        outline = extract_landmarks(parse_html(html)).outline
        assert len(outline) == 1
        assert outline[0].tag == "main"
        assert outline[0].role is None
        assert outline[0].children[0].tag == "section"
        assert outline[0].children[0].role == "region"


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

class TestHeadings:
    _HTML = _page(
        "<h1>Title</h1>"
        "<h2>First</h2><p>one two three</p><ul><li>four five</li></ul>"
        "<h3>Sub</h3><p>six</p>"
        "<h2>Second</h2><p>seven</p>"
        "<h2>   </h2>"
    )

    def test_outline_nesting(self):
        analysis = extract_headings(parse_html(self._HTML))
        assert len(analysis.outline) == 1
        root = analysis.outline[0]
        assert (root.level, root.text) == (1, "Title")
        assert [child.text for child in root.children] == ["First", "Second"]
        assert [child.text for child in root.children[0].children] == ["Sub"]

    def test_counts_skip_empty_headings(self):
        analysis = extract_headings(parse_html(self._HTML))
        assert analysis.counts == {"h1": 1, "h2": 2, "h3": 1}
        assert analysis.total == 4

    def test_section_content_runs_to_next_heading_of_same_level(self):
        first = extract_headings(parse_html(self._HTML)).outline[0].children[0]
        assert first.content.paragraphs == 2
        assert first.content.lists == 1
        # Text of the nested h3 is excluded, its content is not
        assert first.content.word_count == 6

    def test_section_content_of_last_heading(self):
        second = extract_headings(parse_html(self._HTML)).outline[0].children[1]
        assert second.content.word_count == 1
        assert second.content.paragraphs == 1
        assert second.content.lists == 0

    def test_scripts_do_not_count_as_words(self):
        html = _page("<h2>A</h2><script>var a = 1; var b = 2;</script><p>word</p>")
        heading = extract_headings(parse_html(html)).outline[0]
        assert heading.content.word_count == 1

    def test_children_are_deeper_and_flattening_keeps_document_order(self):
        html = _page("".join(f"<h{level}>H{index}</h{level}>" for index, level in enumerate([2, 3, 1, 4, 4, 2, 6, 3])))
        analysis = extract_headings(parse_html(html))

        def check(nodes):
            for node in nodes:
                for child in node.children:
                    assert child.level > node.level
                check(node.children)

        check(analysis.outline)
        assert flatten_headings(analysis.outline) == [
            (level, f"H{index}") for index, level in enumerate([2, 3, 1, 4, 4, 2, 6, 3])
        ]


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

class TestLinks:
    _BASE = "https://example.com/page"

    def test_classify_link(self):
        assert classify_link("/about", self._BASE) == "internal"
        assert classify_link("https://example.com/x", self._BASE) == "internal"
        assert classify_link("https://other.org/x", self._BASE) == "external"
        assert classify_link("https://example.com/x", None) == "external"
        for href in ("mailto:a@b.c", "tel:123", "javascript:void(0)", "#top"):
            assert classify_link(href, self._BASE) == "other"

    def test_grouping(self):
        html = _page(
            '<a href="/about">About</a>'
            '<a href="https://example.com/about?x=1">About again</a>'
            '<a href="/contact#form">Contact</a>'
            '<a href="https://other.org/x" target="_blank" rel="noopener noreferrer">Other</a>'
            '<a href="mailto:a@b.c">Mail</a>'
            '<a href="#top">Top</a>'
            '<a href="">Empty</a>'
        )
        links = extract_links(parse_html(html), self._BASE)

        assert links.internal.count == 3
        assert links.internal.groups[0].destination == "/about"
        assert links.internal.groups[0].count == 2
        assert {group.destination for group in links.internal.groups} == {"/about", "/contact"}

        assert links.external.count == 1
        external = links.external.groups[0]
        assert external.destination == "other.org"
        detail = external.links[0]
        assert detail.target_blank is True
        assert detail.noopener is True
        assert detail.noreferrer is True

    def test_relative_link_without_base_url(self):
        links = extract_links(parse_html(_page('<a href="/docs?page=2">Docs</a>')))
        assert links.internal.groups[0].destination == "/docs"

    def test_long_link_text_is_truncated(self):
        text = "x" * 60
        links = extract_links(parse_html(_page(f'<a href="/a">{text}</a>')), self._BASE)
        assert links.internal.groups[0].links[0].text == "x" * 50 + "..."


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------

class TestInvalidDocument:
    def test_none_document_raises_type_error(self):
        with pytest.raises(TypeError):
            analyze_structure(None)

    def test_string_document_raises_type_error(self):
        with pytest.raises(TypeError):
            analyze_structure("<html></html>")

    def test_parse_none_raises_type_error(self):
        with pytest.raises(TypeError):
            parse_html(None)

    def test_empty_document_degrades(self):
        result = analyze_structure(parse_html(""))
        assert result.title is None
        assert result.headings.total == 0
        assert result.links.internal.count == 0
        assert result.skip_links == []
