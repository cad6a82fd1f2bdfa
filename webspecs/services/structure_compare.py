"""Diff two :class:`StructureAnalysis` snapshots of the same page.

The *static* snapshot comes from the raw HTTP response, the *hydrated* one from
the DOM after JavaScript has run.  Roles, headings and link destinations are
compared by identity, never by position.
"""

from typing import Dict, List, Optional, Tuple

from webspecs.models.structure import (
    HeadingDiff,
    HeadingInfo,
    LandmarkDiff,
    LinkBucket,
    LinkDiff,
    MetadataDiff,
    StructureAnalysis,
    StructureComparison,
    StructureComparisonSummary,
    ValueChange,
)


def flatten_headings(outline: List[HeadingInfo]) -> List[Tuple[int, str]]:
    """Return ``(level, text)`` pairs of an outline in document order."""
    flat: List[Tuple[int, str]] = []
    for heading in outline:
        flat.append((heading.level, heading.text))
        flat.extend(flatten_headings(heading.children))
    return flat


def _heading_key(level: int, text: str) -> Tuple[int, str]:
    return level, text.strip().lower()


def _compare_landmarks(static: StructureAnalysis, hydrated: StructureAnalysis) -> List[LandmarkDiff]:
    static_counts: Dict[str, int] = {item.role: item.count for item in static.landmarks.skeleton}
    hydrated_counts: Dict[str, int] = {item.role: item.count for item in hydrated.landmarks.skeleton}

    roles = list(static_counts)
    roles.extend(role for role in hydrated_counts if role not in static_counts)

    diffs: List[LandmarkDiff] = []
    for role in roles:
        static_count = static_counts.get(role, 0)
        hydrated_count = hydrated_counts.get(role, 0)
        if static_count != hydrated_count:
            diffs.append(
                LandmarkDiff(
                    role=role,
                    static_count=static_count,
                    hydrated_count=hydrated_count,
                    change=hydrated_count - static_count,
                )
            )
    return diffs


def _compare_headings(static: StructureAnalysis, hydrated: StructureAnalysis) -> List[HeadingDiff]:
    static_list = flatten_headings(static.headings.outline)
    hydrated_list = flatten_headings(hydrated.headings.outline)
    static_keys = {_heading_key(level, text) for level, text in static_list}
    hydrated_keys = {_heading_key(level, text) for level, text in hydrated_list}

    diffs = [
        HeadingDiff(level=level, text=text, status="added")
        for level, text in hydrated_list
        if _heading_key(level, text) not in static_keys
    ]
    diffs.extend(
        HeadingDiff(level=level, text=text, status="removed")
        for level, text in static_list
        if _heading_key(level, text) not in hydrated_keys
    )
    return diffs


def _destinations(bucket: LinkBucket) -> List[str]:
    return [group.destination for group in bucket.groups]


def _difference(left: List[str], right: List[str]) -> List[str]:
    """Items of *left* missing from *right*, in *left* order."""
    right_set = set(right)
    return [item for item in left if item not in right_set]


def _compare_links(static: StructureAnalysis, hydrated: StructureAnalysis) -> LinkDiff:
    static_internal = _destinations(static.links.internal)
    hydrated_internal = _destinations(hydrated.links.internal)
    static_external = _destinations(static.links.external)
    hydrated_external = _destinations(hydrated.links.external)

    new_internal = _difference(hydrated_internal, static_internal)
    new_external = _difference(hydrated_external, static_external)

    return LinkDiff(
        internal_added=len(new_internal),
        internal_removed=len(_difference(static_internal, hydrated_internal)),
        external_added=len(new_external),
        external_removed=len(_difference(static_external, hydrated_external)),
        new_internal_destinations=new_internal,
        new_external_domains=new_external,
    )


def _value_change(static: Optional[str], hydrated: Optional[str]) -> Optional[ValueChange]:
    if static == hydrated:
        return None
    return ValueChange(static=static, hydrated=hydrated)


def _link_total(analysis: StructureAnalysis) -> int:
    return analysis.links.internal.count + analysis.links.external.count


def _summarize(static: StructureAnalysis, hydrated: StructureAnalysis) -> StructureComparisonSummary:
    return StructureComparisonSummary(
        static_landmarks=sum(item.count for item in static.landmarks.skeleton),
        hydrated_landmarks=sum(item.count for item in hydrated.landmarks.skeleton),
        static_headings=static.headings.total,
        hydrated_headings=hydrated.headings.total,
        static_links=_link_total(static),
        hydrated_links=_link_total(hydrated),
    )


def links_changed(links: LinkDiff) -> bool:
    return bool(
        links.internal_added
        or links.internal_removed
        or links.external_added
        or links.external_removed
        or links.new_internal_destinations
        or links.new_external_domains
    )


def _any_difference(landmarks, headings, links: LinkDiff, metadata: MetadataDiff) -> bool:
    return bool(
        landmarks
        or headings
        or links_changed(links)
        or metadata.title is not None
        or metadata.language is not None
    )


def has_structure_differences(comparison: StructureComparison) -> bool:
    """Return True when any landmark, heading, link or metadata diff is non-empty."""
    return _any_difference(
        comparison.landmarks, comparison.headings, comparison.links, comparison.metadata
    )


def compare_structures(static: StructureAnalysis, hydrated: StructureAnalysis) -> StructureComparison:
    """Compare a static and a hydrated analysis of the same page."""
    metadata = MetadataDiff(
        title=_value_change(static.title, hydrated.title),
        language=_value_change(static.language, hydrated.language),
    )
    landmarks = _compare_landmarks(static, hydrated)
    headings = _compare_headings(static, hydrated)
    links = _compare_links(static, hydrated)

    return StructureComparison(
        summary=_summarize(static, hydrated),
        has_differences=_any_difference(landmarks, headings, links, metadata),
        metadata=metadata,
        landmarks=landmarks,
        headings=headings,
        links=links,
    )
