"""What a screen reader user gets from a page's accessibility tree.

Works on the forest produced by
:func:`webspecs.services.aria_snapshot.parse_aria_snapshot` and reports the
navigation aids assistive technology exposes: landmarks, the heading list,
form controls and skip links.
"""

import re
from typing import Dict, List, Optional, Tuple

from webspecs.models.aria import (
    AriaNode,
    ScreenReaderHeading,
    ScreenReaderLandmark,
    ScreenReaderSummary,
)

_LANDMARK_ROLES = (
    "banner",
    "navigation",
    "main",
    "contentinfo",
    "complementary",
    "region",
    "search",
    "form",
)

_FORM_CONTROL_ROLES = (
    "textbox",
    "checkbox",
    "radio",
    "combobox",
    "listbox",
    "slider",
    "spinbutton",
    "switch",
    "searchbox",
)

_SKIP_LINK_PATTERNS = (
    re.compile(r"skip\s*(to)?\s*(main|content|navigation)", re.IGNORECASE),
    re.compile(r"jump\s*(to)?\s*(main|content|navigation)", re.IGNORECASE),
)

# Skip links only help when they come first
_SKIP_LINK_MAX_DEPTH = 10


def _heading_level(node: AriaNode) -> Optional[int]:
    try:
        return int(node.attributes.get("level"))
    except (TypeError, ValueError):
        return None


def _walk(nodes: List[AriaNode]):
    for node in nodes:
        yield node
        yield from _walk(node.children)


def _count_role(node: AriaNode, role: str) -> int:
    return sum(1 for item in _walk([node]) if item.role == role)


def extract_page_title(nodes: List[AriaNode]) -> Optional[str]:
    """Name of a top-level ``document`` node, else the first level-1 heading."""
    for node in nodes:
        if node.role == "document" and node.name:
            return node.name

    for node in _walk(nodes):
        if node.role == "heading" and node.name and _heading_level(node) == 1:
            return node.name
    return None


def extract_headings(nodes: List[AriaNode]) -> List[ScreenReaderHeading]:
    return [
        ScreenReaderHeading(level=_heading_level(node) or 1, text=node.name)
        for node in _walk(nodes)
        if node.role == "heading" and node.name
    ]


def extract_landmarks(nodes: List[AriaNode]) -> List[ScreenReaderLandmark]:
    return [
        ScreenReaderLandmark(
            role=node.role,
            name=node.name,
            heading_count=_count_role(node, "heading"),
            link_count=_count_role(node, "link"),
        )
        for node in _walk(nodes)
        if node.role in _LANDMARK_ROLES
    ]


def has_skip_link(nodes: List[AriaNode]) -> bool:
    def check(node: AriaNode, depth: int) -> bool:
        if depth > _SKIP_LINK_MAX_DEPTH:
            return False
        if node.role == "link" and node.name:
            if any(pattern.search(node.name) for pattern in _SKIP_LINK_PATTERNS):
                return True
        return any(check(child, depth + 1) for child in node.children)

    return any(check(node, 0) for node in nodes)


def build_summary(nodes: List[AriaNode], counts: Dict[str, int]) -> ScreenReaderSummary:
    return ScreenReaderSummary(
        page_title=extract_page_title(nodes),
        landmark_count=sum(counts.get(role, 0) for role in _LANDMARK_ROLES),
        heading_count=counts.get("heading", 0),
        link_count=counts.get("link", 0),
        form_control_count=sum(counts.get(role, 0) for role in _FORM_CONTROL_ROLES),
        image_count=counts.get("img", 0),
        has_main_landmark=counts.get("main", 0) > 0,
        has_navigation=counts.get("navigation", 0) > 0,
        has_skip_link=has_skip_link(nodes),
    )


def analyze_screen_reader(
    nodes: List[AriaNode],
    counts: Dict[str, int],
) -> Tuple[ScreenReaderSummary, List[ScreenReaderLandmark], List[ScreenReaderHeading]]:
    """Summarize a parsed accessibility tree from a screen reader's point of view.

    Args:
        nodes: Parsed snapshot forest.
        counts: Role tally of the same forest.

    Returns:
        ``(summary, landmarks, headings)``, landmarks and headings in document order.
    """
    return build_summary(nodes, counts), extract_landmarks(nodes), extract_headings(nodes)
