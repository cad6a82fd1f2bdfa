"""Tests for webspecs.services.extractor (readability-lxml + markdownify)."""

from webspecs.services.extractor import extract_readability, is_probably_readerable
from webspecs.services.html_parser import parse_html

_PARAGRAPH = (
    "Accessible pages expose their structure through landmarks and headings, "
    "which lets assistive technology users skim a document the same way sighted "
    "readers scan it visually before deciding where to start reading in depth."
)

ARTICLE_HTML = f"""
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Structuring Pages</title>
  <meta name="description" content="Why landmarks matter.">
  <meta name="author" content="Jane Doe">
  <meta property="og:site_name" content="Example Blog">
  <meta property="article:published_time" content="2024-05-01T10:00:00Z">
</head>
<body>
  <nav><a href="/">Home</a> <a href="/blog">Blog</a></nav>
  <article>
    <h1>Structuring Pages</h1>
    <p>{_PARAGRAPH}</p>
    <h2>Landmarks</h2>
    <p>{_PARAGRAPH}</p>
    <p>{_PARAGRAPH} See the <a href="/guide">complete landmark guide</a>.</p>
    <h2>Headings</h2>
    <p>{_PARAGRAPH}</p>
  </article>
  <footer><p>Copyright</p></footer>
</body>
</html>
"""


class TestExtractReadability:
    def test_article_extraction(self):
        result = extract_readability(ARTICLE_HTML)

        assert result.extraction is not None
        assert result.extraction.title == "Structuring Pages"
        assert "assistive technology" in result.extraction.text_content
        assert result.metrics.word_count > 100
        assert result.metrics.paragraph_count >= 4
        assert result.metrics.is_readerable is True
        assert 0 < result.metrics.link_density < 0.1

    def test_metadata_from_meta_tags(self):
        extraction = extract_readability(ARTICLE_HTML).extraction
        assert extraction.byline == "Jane Doe"
        assert extraction.site_name == "Example Blog"
        assert extraction.published_time == "2024-05-01T10:00:00Z"
        assert extraction.excerpt == "Why landmarks matter."

    def test_markdown_uses_atx_headings(self):
        markdown = extract_readability(ARTICLE_HTML).markdown
        assert "## Landmarks" in markdown
        assert "\n\n\n" not in markdown

    def test_empty_document(self):
        for html in ("", "   ", None):
            result = extract_readability(html)
            assert result.extraction is None
            assert result.metrics.word_count == 0
            assert result.metrics.is_readerable is False
            assert result.markdown == ""


class TestIsProbablyReaderable:
    def test_long_paragraphs(self):
        html = "<html><body>" + f"<p>{_PARAGRAPH}</p>" * 3 + "</body></html>"
        assert is_probably_readerable(parse_html(html)) is True

    def test_short_paragraphs(self):
        html = "<html><body>" + "<p>Short text.</p>" * 50 + "</body></html>"
        assert is_probably_readerable(parse_html(html)) is False

    def test_single_long_paragraph_is_not_enough(self):
        html = f"<html><body><p>{_PARAGRAPH}</p></body></html>"
        assert is_probably_readerable(parse_html(html)) is False
