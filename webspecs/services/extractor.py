"""Main-content extraction and reader-view metrics.

Wraps ``readability-lxml`` to pull the article body out of a page, converts it
to markdown with ``markdownify`` and measures it.  Metadata the readability
algorithm does not expose (byline, site name, publish date, excerpt) is read
from the page's ``<meta>`` tags.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup
from lxml.etree import ParserError
from markdownify import markdownify
from readability import Document
from readability.readability import Unparseable

from webspecs.models.readability import ReadabilityExtraction, ReadabilityMetrics, ReadabilityResult
from webspecs.services.html_parser import parse_html
from webspecs.services.words import count_words

logger = logging.getLogger(__name__)

# readability-lxml's placeholder when a page has no <title>
_NO_TITLE = "[no-title]"

# A page is worth a reader view when it has at least one substantial paragraph
# and enough paragraph text overall
_READERABLE_MIN_PARAGRAPH = 140
_READERABLE_MIN_TOTAL = 500

_BLANK_LINES_RE = re.compile(r"\n{3,}")

_BYLINE_META = (
    {"name": "author"},
    {"property": "article:author"},
    {"name": "byl"},
    {"name": "dc.creator"},
)
_SITE_NAME_META = ({"property": "og:site_name"}, {"name": "application-name"})
_PUBLISHED_META = (
    {"property": "article:published_time"},
    {"name": "date"},
    {"name": "pubdate"},
    {"itemprop": "datePublished"},
)
_EXCERPT_META = ({"name": "description"}, {"property": "og:description"})


def _meta_content(soup: BeautifulSoup, candidates) -> Optional[str]:
    for attrs in candidates:
        meta = soup.find("meta", attrs=attrs)
        if meta and meta.get("content"):
            content = str(meta["content"]).strip()
            if content:
                return content
    return None


def _normalized_text(soup: BeautifulSoup) -> str:
    return " ".join(soup.get_text(" ").split())


def is_probably_readerable(soup: BeautifulSoup) -> bool:
    """Return True when the page has enough paragraph text for a reader view."""
    lengths = [len(_normalized_text(p)) for p in soup.find_all(["p", "pre"])]
    return (
        any(length >= _READERABLE_MIN_PARAGRAPH for length in lengths)
        and sum(lengths) >= _READERABLE_MIN_TOTAL
    )


def _link_density(soup: BeautifulSoup, text: str) -> float:
    if not text:
        return 0.0
    link_length = sum(len(_normalized_text(a)) for a in soup.find_all("a"))
    return round(link_length / len(text), 2)


def _to_markdown(html: str) -> str:
    markdown = markdownify(html, heading_style="ATX").strip()
    return _BLANK_LINES_RE.sub("\n\n", markdown)


def extract_readability(html: Optional[str]) -> ReadabilityResult:
    """Extract the main content of *html* and measure it.

    Returns an empty result (``extraction=None``, zero metrics) when the
    document is empty or readability cannot find any content.
    """
    if not html or not html.strip():
        return ReadabilityResult(metrics=ReadabilityMetrics())

    try:
        document = Document(html)
        content_html = document.summary(html_partial=True)
        title = document.title()
    except (Unparseable, ParserError) as exc:
        logger.warning("Readability extraction failed", extra={"error": str(exc)})
        return ReadabilityResult(metrics=ReadabilityMetrics())

    page = parse_html(html)
    content = parse_html(content_html)
    text_content = _normalized_text(content)
    if not text_content:
        return ReadabilityResult(metrics=ReadabilityMetrics(is_readerable=is_probably_readerable(page)))

    extraction = ReadabilityExtraction(
        title=title if title and title != _NO_TITLE else None,
        byline=_meta_content(page, _BYLINE_META),
        excerpt=_meta_content(page, _EXCERPT_META),
        site_name=_meta_content(page, _SITE_NAME_META),
        published_time=_meta_content(page, _PUBLISHED_META),
        html=content_html,
        text_content=text_content,
    )
    metrics = ReadabilityMetrics(
        word_count=count_words(text_content),
        character_count=len(text_content),
        paragraph_count=len(content.find_all("p")),
        link_density=_link_density(content, text_content),
        is_readerable=is_probably_readerable(page),
    )
    return ReadabilityResult(extraction=extraction, metrics=metrics, markdown=_to_markdown(content_html))
