"""Rendering-framework detection from raw page markup.

:func:`detect_framework` scans HTML for framework fingerprints and reports the
framework together with a confidence tier.

Confidence tiers
----------------
``"detected"``
    A runtime marker that the framework emits on every page, whatever the
    render mode: Next.js flight data (``self.__next_f``) or ``__NEXT_DATA__``,
    ``/_next/static/`` assets, streaming boundary containers
    (``<div hidden id="S:0">``), ``window.__NUXT__``, ``window.__remixContext``,
    Gatsby's ``___gatsby`` root, SvelteKit's ``data-sveltekit-*`` attributes,
    Angular's ``ng-version``.

``"suspected"``
    Only a generic hint matched: a conventional mount point (``#__next``,
    ``#root``, ``#app`` …), ``data-reactroot``, scoped-style hashes, or React's
    ``$RC`` streaming helper, which other frameworks reuse.

No match at all yields ``None``.
"""

import re
from typing import List, Optional, Tuple

from webspecs.models.hidden_content import FrameworkDetection

# ---------------------------------------------------------------------------
# Unambiguous, version-stable fingerprints
# ---------------------------------------------------------------------------
_DETECTED_SIGNATURES: List[Tuple[str, re.Pattern]] = [
    (
        "Next.js",
        re.compile(
            # App Router flight data, present on static, streaming and mixed pages
            r"self\.__next_f"
            # Pages Router inline data script
            r"|__NEXT_DATA__"
            # Build output served by the Next.js server
            r"|/_next/static/"
            # Streaming Suspense boundary containers
            r'|<div\s[^>]*\bhidden\b[^>]*\bid=["\']S:'
            r'|<div\s[^>]*\bid=["\']S:[^>]*\bhidden\b',
            re.IGNORECASE,
        ),
    ),
    ("Nuxt", re.compile(r"window\.__NUXT__|/_nuxt/", re.IGNORECASE)),
    ("Remix", re.compile(r"window\.__remixContext")),
    ("Gatsby", re.compile(r'\bid=["\']___gatsby["\']')),
    ("SvelteKit", re.compile(r"__sveltekit_|data-sveltekit-")),
    ("Angular", re.compile(r"\bng-version=")),
]

# ---------------------------------------------------------------------------
# Weak heuristics: mount points and helpers shared by several stacks
# ---------------------------------------------------------------------------
_SUSPECTED_SIGNATURES: List[Tuple[str, re.Pattern]] = [
    ("Next.js", re.compile(r'<div\s[^>]*\bid=["\']__next["\']', re.IGNORECASE)),
    ("Nuxt", re.compile(r'<div\s[^>]*\bid=["\']__nuxt["\']', re.IGNORECASE)),
    (
        "React",
        re.compile(
            r"\bdata-reactroot"
            r"|\$RC\("
            r'|<div\s[^>]*\bid=["\']root["\']',
            re.IGNORECASE,
        ),
    ),
    (
        "Vue",
        re.compile(
            r'<div\s[^>]*\bid=["\']app["\']'
            r"|\bdata-v-[0-9a-f]{8}\b",
            re.IGNORECASE,
        ),
    ),
    ("Svelte", re.compile(r"<svelte:|\bsvelte-[a-z0-9]{5,}\b")),
]

# Elements in which a framework parks streamed content until hydration swaps it in
_HIDDEN_CONTENT_SELECTORS = {
    "Next.js": 'div[hidden][id^="S:"]',
}


def detect_framework(html: str) -> Optional[FrameworkDetection]:
    """Identify the rendering framework that produced *html*.

    Args:
        html: Raw HTML, either as served or as rendered by a browser.

    Returns:
        A :class:`FrameworkDetection`, or ``None`` when no fingerprint matches.
    """
    if not html:
        return None

    for name, pattern in _DETECTED_SIGNATURES:
        if pattern.search(html):
            return FrameworkDetection(name=name, confidence="detected")

    for name, pattern in _SUSPECTED_SIGNATURES:
        if pattern.search(html):
            return FrameworkDetection(name=name, confidence="suspected")

    return None


def hidden_content_selector(framework: Optional[FrameworkDetection]) -> Optional[str]:
    """CSS selector for the framework's parked streaming content, if it has one."""
    if framework is None or framework.confidence != "detected":
        return None
    return _HIDDEN_CONTENT_SELECTORS.get(framework.name)
