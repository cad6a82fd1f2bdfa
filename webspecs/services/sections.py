"""Section-level comparison of static vs rendered extracted content."""

import re
from typing import List, Optional

from webspecs.models.readability import ReadabilityComparison, SectionInfo
from webspecs.services.words import percentage

# <h2 class="x">Title <em>here</em></h2>
_HTML_HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
# ## Title  (ATX markdown, as produced by markdownify)
_ATX_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)
_TAG_RE = re.compile(r"<[^>]+>")


def _clean(text: str) -> str:
    return " ".join(_TAG_RE.sub("", text).split())


def extract_sections(markup: Optional[str]) -> List[SectionInfo]:
    """Return ``(heading, level)`` pairs found in HTML or markdown, in order."""
    if not markup:
        return []

    found = []
    for match in _HTML_HEADING_RE.finditer(markup):
        found.append((match.start(), int(match.group(1)), _clean(match.group(2))))
    for match in _ATX_HEADING_RE.finditer(markup):
        found.append((match.start(), len(match.group(1)), _clean(match.group(2))))

    found.sort(key=lambda item: item[0])
    return [SectionInfo(heading=text, level=level) for _, level, text in found if text]


def find_sections_only_in_rendered(
    static_sections: List[SectionInfo],
    rendered_sections: List[SectionInfo],
) -> List[SectionInfo]:
    static_headings = {section.heading.lower() for section in static_sections}
    return [
        section for section in rendered_sections if section.heading.lower() not in static_headings
    ]


def compare_readability(
    static_markup: Optional[str],
    rendered_markup: Optional[str],
    static_word_count: int,
    rendered_word_count: int,
) -> ReadabilityComparison:
    """Compare the content extracted before and after JavaScript execution.

    Args:
        static_markup: Extracted HTML or markdown of the served page.
        rendered_markup: Extracted HTML or markdown of the rendered page.
        static_word_count: Word count of the served page's content.
        rendered_word_count: Word count of the rendered page's content.
    """
    static_words = max(0, static_word_count or 0)
    rendered_words = max(0, rendered_word_count or 0)
    js_dependent = max(0, rendered_words - static_words)

    return ReadabilityComparison(
        static_word_count=static_words,
        rendered_word_count=rendered_words,
        js_dependent_word_count=js_dependent,
        js_dependent_percentage=percentage(js_dependent, rendered_words),
        sections_only_in_rendered=find_sections_only_in_rendered(
            extract_sections(static_markup),
            extract_sections(rendered_markup),
        ),
    )
