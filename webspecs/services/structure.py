"""Semantic structure extraction from a parsed document.

:func:`analyze_structure` walks a BeautifulSoup tree and produces a
:class:`~webspecs.models.structure.StructureAnalysis`: page title and language,
skip links, landmarks, the heading outline with per-section content stats, and
internal/external links grouped by destination.

Works on any tree produced by :func:`webspecs.services.html_parser.parse_html`,
whether the HTML came from a plain HTTP fetch or from a rendered browser DOM.
Missing elements never raise; they degrade to ``None`` or empty collections.
"""

import re
from collections import Counter
from typing import Dict, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from webspecs.models.structure import (
    ElementCount,
    HeadingAnalysis,
    HeadingContentStats,
    HeadingInfo,
    LandmarkAnalysis,
    LandmarkNode,
    LandmarkSkeleton,
    LinkAnalysis,
    LinkBucket,
    LinkDetail,
    LinkGroup,
    SkipLinkInfo,
    StructureAnalysis,
)
from webspecs.services.html_parser import require_document
from webspecs.services.words import count_words

# ---------------------------------------------------------------------------
# Landmark vocabulary
# ---------------------------------------------------------------------------
_LANDMARK_ELEMENTS = ("header", "nav", "main", "article", "section", "aside", "footer")

# Display order of the skeleton; also the set of roles that make any element a landmark
_LANDMARK_ROLES = (
    "banner",
    "navigation",
    "main",
    "complementary",
    "contentinfo",
    "search",
    "form",
    "region",
    "article",
)

# Implicit role of each landmark element (header/footer only when not scoped)
_IMPLICIT_ROLES = {
    "header": "banner",
    "footer": "contentinfo",
    "nav": "navigation",
    "main": "main",
    "aside": "complementary",
    "section": "region",
    "article": "article",
}

# header/footer inside these lose their banner/contentinfo role
_SECTIONING_ELEMENTS = {"article", "aside", "main", "nav", "section"}

_HEADING_RE = re.compile(r"^h([1-6])$")

# Text inside these never counts towards section word counts
_NON_CONTENT_TAGS = {"script", "style", "noscript", "template"}

_NON_NAVIGABLE_PREFIXES = ("mailto:", "tel:", "javascript:", "#")

_LINK_TEXT_LIMIT = 50


def _text(node: Tag) -> str:
    """Return the text content of *node* with whitespace runs collapsed."""
    return " ".join(node.get_text().split())


def _root(document: BeautifulSoup) -> Tag:
    return document.body or document.find("html") or document


def _heading_level(tag: Tag) -> Optional[int]:
    match = _HEADING_RE.match(tag.name or "")
    return int(match.group(1)) if match else None


def _is_landmark(tag: Tag) -> bool:
    if tag.name in _LANDMARK_ELEMENTS:
        return True
    return tag.get("role") in _LANDMARK_ROLES


# ---------------------------------------------------------------------------
# Title / language
# ---------------------------------------------------------------------------

def extract_title(document: BeautifulSoup) -> Optional[str]:
    title_tag = require_document(document).find("title")
    if title_tag is None:
        return None
    return title_tag.get_text().strip() or None


def extract_language(document: BeautifulSoup) -> Optional[str]:
    html = require_document(document).find("html")
    if html is None:
        return None
    lang = str(html.get("lang") or "").strip()
    return lang or None


# ---------------------------------------------------------------------------
# Skip links
# ---------------------------------------------------------------------------

def extract_skip_links(document: BeautifulSoup) -> List[SkipLinkInfo]:
    """Return in-page anchors that precede the first landmark or heading."""
    skip_links: List[SkipLinkInfo] = []
    for tag in _root(require_document(document)).find_all(True):
        if _is_landmark(tag) or _heading_level(tag):
            break
        if tag.name != "a":
            continue
        href = str(tag.get("href", "")).strip()
        if href.startswith("#") and len(href) > 1:
            skip_links.append(SkipLinkInfo(text=_text(tag), target=href))
    return skip_links


# ---------------------------------------------------------------------------
# Landmarks
# ---------------------------------------------------------------------------

def _build_landmark_outline(element: Tag) -> List[LandmarkNode]:
    nodes: List[LandmarkNode] = []
    for child in element.children:
        if not isinstance(child, Tag):
            continue
        if _is_landmark(child):
            role = child.get("role")
            nodes.append(
                LandmarkNode(
                    tag=child.name,
                    role=str(role) if role else None,
                    children=_build_landmark_outline(child),
                )
            )
        else:
            # Non-landmark wrappers are transparent
            nodes.extend(_build_landmark_outline(child))
    return nodes


def _inside_sectioning_content(tag: Tag) -> bool:
    for parent in tag.parents:
        if parent.name in _SECTIONING_ELEMENTS:
            return True
        if parent.name == "body":
            break
    return False


def _build_landmark_skeleton(body: Tag) -> List[LandmarkSkeleton]:
    counts: Counter = Counter({role: 0 for role in _LANDMARK_ROLES})

    for tag in body.find_all(list(_LANDMARK_ELEMENTS)):
        if tag.name in ("header", "footer") and _inside_sectioning_content(tag):
            continue
        counts[_IMPLICIT_ROLES[tag.name]] += 1

    for tag in body.find_all(attrs={"role": True}):
        role = tag.get("role")
        if role not in _LANDMARK_ROLES:
            continue
        # Already counted through the element itself
        if _IMPLICIT_ROLES.get(tag.name) == role:
            continue
        counts[role] += 1

    return [LandmarkSkeleton(role=role, count=counts[role]) for role in _LANDMARK_ROLES]


def _count_elements(body: Tag) -> List[ElementCount]:
    elements: List[ElementCount] = []
    for name in ("header", "footer", "nav", "main", "article", "section", "aside"):
        count = len(body.find_all(name))
        if count:
            elements.append(ElementCount(element=f"<{name}>", count=count))

    role_counts: Dict[str, int] = {}
    for tag in body.find_all(attrs={"role": True}):
        role = str(tag.get("role", "")).strip()
        if not role or _IMPLICIT_ROLES.get(tag.name) == role:
            continue
        key = f'<{tag.name} role="{role}">'
        role_counts[key] = role_counts.get(key, 0) + 1

    elements.extend(ElementCount(element=key, count=count) for key, count in role_counts.items())
    return sorted(elements, key=lambda item: item.count, reverse=True)


def extract_landmarks(document: BeautifulSoup) -> LandmarkAnalysis:
    body = _root(require_document(document))
    return LandmarkAnalysis(
        skeleton=_build_landmark_skeleton(body),
        elements=_count_elements(body),
        outline=_build_landmark_outline(body),
    )


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

def _last_descendant(tag: Tag):
    node = tag
    while isinstance(node, Tag) and node.contents:
        node = node.contents[-1]
    return node


def _in_excluded_subtree(node: NavigableString) -> bool:
    for parent in node.parents:
        if parent.name in _NON_CONTENT_TAGS or _heading_level(parent):
            return True
    return False


def _section_content(heading: Tag, level: int) -> HeadingContentStats:
    """Collect stats for everything after *heading* up to the next heading of
    equal or lesser level.

    Text of deeper headings is excluded; the content underneath them is not.
    """
    chunks: List[str] = []
    paragraphs = 0
    lists = 0

    for node in _last_descendant(heading).next_elements:
        if isinstance(node, Tag):
            node_level = _heading_level(node)
            if node_level is not None and node_level <= level:
                break
            if node.name == "p":
                paragraphs += 1
            elif node.name in ("ul", "ol"):
                lists += 1
        elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            if not _in_excluded_subtree(node):
                chunks.append(str(node))

    return HeadingContentStats(
        word_count=count_words(" ".join(chunks)),
        paragraphs=paragraphs,
        lists=lists,
    )


def build_heading_outline(headings: List[HeadingInfo]) -> List[HeadingInfo]:
    """Nest a flat, document-ordered heading list into an outline forest.

    A heading becomes the child of the closest preceding heading with a
    strictly lower level; headings without such a predecessor are roots.
    """
    roots: List[int] = []
    children: List[List[int]] = [[] for _ in headings]
    stack: List[int] = []  # indexes of the open headings

    for index, heading in enumerate(headings):
        while stack and headings[stack[-1]].level >= heading.level:
            stack.pop()
        if stack:
            children[stack[-1]].append(index)
        else:
            roots.append(index)
        stack.append(index)

    def freeze(index: int) -> HeadingInfo:
        return headings[index].model_copy(
            update={"children": [freeze(child) for child in children[index]]}
        )

    return [freeze(index) for index in roots]


def extract_headings(document: BeautifulSoup) -> HeadingAnalysis:
    body = _root(require_document(document))
    flat: List[HeadingInfo] = []
    counts: Dict[str, int] = {}

    for tag in body.find_all(_HEADING_RE):
        level = _heading_level(tag)
        text = _text(tag)
        if not text:
            continue
        flat.append(HeadingInfo(level=level, text=text, content=_section_content(tag, level)))
        counts[tag.name] = counts.get(tag.name, 0) + 1

    return HeadingAnalysis(outline=build_heading_outline(flat), counts=counts, total=len(flat))


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

def classify_link(href: str, base_url: Optional[str]) -> str:
    """Return ``"internal"``, ``"external"`` or ``"other"`` for *href*."""
    if href.lower().startswith(_NON_NAVIGABLE_PREFIXES):
        return "other"

    parsed = urlparse(href)
    if parsed.scheme and parsed.scheme.lower() not in ("http", "https"):
        return "other"
    if not parsed.netloc:
        return "internal"
    if not base_url:
        return "external"

    base_host = urlparse(base_url).hostname
    return "internal" if parsed.hostname and parsed.hostname == base_host else "external"


def _internal_destination(href: str, base_url: Optional[str]) -> str:
    parsed = urlparse(href)
    if parsed.netloc:
        return parsed.path or "/"
    if base_url:
        return urlparse(urljoin(base_url, href)).path or "/"
    return href.split("?")[0].split("#")[0] or "/"


def _link_detail(tag: Tag, href: str) -> LinkDetail:
    text = _text(tag)
    if len(text) > _LINK_TEXT_LIMIT:
        text = text[:_LINK_TEXT_LIMIT] + "..."

    rel = tag.get("rel") or ""
    # bs4 exposes rel as a list of tokens
    if isinstance(rel, list):
        rel = " ".join(rel)
    rel = rel.lower()

    return LinkDetail(
        href=href,
        text=text,
        target_blank=tag.get("target") == "_blank",
        noopener="noopener" in rel,
        noreferrer="noreferrer" in rel,
    )


def _to_bucket(groups: Dict[str, List[LinkDetail]]) -> LinkBucket:
    link_groups = sorted(
        (LinkGroup(destination=dest, count=len(links), links=links) for dest, links in groups.items()),
        key=lambda group: group.count,
        reverse=True,
    )
    return LinkBucket(count=sum(group.count for group in link_groups), groups=link_groups)


def extract_links(document: BeautifulSoup, base_url: Optional[str] = None) -> LinkAnalysis:
    internal: Dict[str, List[LinkDetail]] = {}
    external: Dict[str, List[LinkDetail]] = {}

    for tag in require_document(document).find_all("a", href=True):
        href = str(tag["href"]).strip()
        if not href:
            continue

        kind = classify_link(href, base_url)
        if kind == "internal":
            internal.setdefault(_internal_destination(href, base_url), []).append(
                _link_detail(tag, href)
            )
        elif kind == "external":
            domain = urlparse(href).hostname
            if domain:
                external.setdefault(domain, []).append(_link_detail(tag, href))

    return LinkAnalysis(internal=_to_bucket(internal), external=_to_bucket(external))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_structure(document: BeautifulSoup, base_url: Optional[str] = None) -> StructureAnalysis:
    """Extract the complete semantic structure of *document*.

    Args:
        document: Tree returned by :func:`~webspecs.services.html_parser.parse_html`.
        base_url: Page URL, used to tell internal links from external ones.

    Raises:
        TypeError: if *document* is not a parsed document.
    """
    require_document(document)
    return StructureAnalysis(
        title=extract_title(document),
        language=extract_language(document),
        skip_links=extract_skip_links(document),
        landmarks=extract_landmarks(document),
        headings=extract_headings(document),
        links=extract_links(document, base_url),
        warnings=[],
    )
