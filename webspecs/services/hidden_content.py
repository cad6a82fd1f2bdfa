"""Hidden-content classification.

Content that only exists after client-side rendering (streamed Suspense
boundaries, client-fetched article bodies …) is invisible to crawlers and
assistive tools that never execute JavaScript.  This module measures how much
of a page falls into that category and turns the share into a severity:

==========  =============================
severity    hidden percentage
==========  =============================
``none``    0
``low``     more than 0, at most 10
``high``    more than 10
==========  =============================
"""

from typing import Optional

from webspecs.models.hidden_content import HiddenContentAnalysis, Severity
from webspecs.services.detector import detect_framework, hidden_content_selector
from webspecs.services.html_parser import parse_html
from webspecs.services.words import count_words, percentage

_LOW_SEVERITY_MAX = 10

# Generic [hidden] elements below this size are UI chrome (menus, dialogs), not content
_GENERIC_HIDDEN_MIN_WORDS = 50


def calculate_severity(hidden_percentage: int) -> Severity:
    if hidden_percentage <= 0:
        return "none"
    if hidden_percentage <= _LOW_SEVERITY_MAX:
        return "low"
    return "high"


def _non_negative(value: Optional[int]) -> int:
    return max(0, value or 0)


def classify_hidden_content(
    static_word_count: Optional[int],
    rendered_word_count: Optional[int],
    html: Optional[str],
) -> HiddenContentAnalysis:
    """Classify the content that only appears after rendering.

    Args:
        static_word_count: Words extracted from the HTML as served.
        rendered_word_count: Words extracted from the rendered DOM.
        html: Rendered markup, scanned for framework fingerprints.

    Never raises: missing or negative counts are treated as zero.
    """
    static_words = _non_negative(static_word_count)
    rendered_words = _non_negative(rendered_word_count)

    hidden_word_count = max(0, rendered_words - static_words)
    hidden_percentage = min(100, percentage(hidden_word_count, rendered_words))

    return HiddenContentAnalysis(
        severity=calculate_severity(hidden_percentage),
        has_streaming_content=hidden_word_count > 0,
        hidden_word_count=hidden_word_count,
        visible_word_count=static_words,
        hidden_percentage=hidden_percentage,
        framework=detect_framework(html or ""),
    )


def analyze_hidden_markup(html: Optional[str], visible_word_count: Optional[int]) -> HiddenContentAnalysis:
    """Measure hidden content using the served HTML alone.

    Used when no rendered DOM is available.  For a detected framework with a
    known streaming container, the words inside those containers are hidden.
    Otherwise any ``[hidden]`` element with more than
    ``_GENERIC_HIDDEN_MIN_WORDS`` words counts.
    """
    visible_words = _non_negative(visible_word_count)
    framework = detect_framework(html or "")
    soup = parse_html(html or "")

    selector = hidden_content_selector(framework)
    hidden_word_count = 0
    if selector:
        for element in soup.select(selector):
            hidden_word_count += count_words(element.get_text(" "))
    else:
        for element in soup.select("[hidden]"):
            words = count_words(element.get_text(" "))
            if words > _GENERIC_HIDDEN_MIN_WORDS:
                hidden_word_count += words

    hidden_percentage = percentage(hidden_word_count, visible_words + hidden_word_count)

    return HiddenContentAnalysis(
        severity=calculate_severity(hidden_percentage),
        has_streaming_content=hidden_word_count > 0,
        hidden_word_count=hidden_word_count,
        visible_word_count=visible_words,
        hidden_percentage=hidden_percentage,
        framework=framework,
    )
