"""Records produced by the structure extractor and the structure differ."""

from typing import Dict, List, Literal, Optional

from webspecs.models.base import FrozenModel


class SkipLinkInfo(FrozenModel):
    text: str
    target: str  # e.g. "#main-content"


class LandmarkSkeleton(FrozenModel):
    role: str
    count: int


class ElementCount(FrozenModel):
    element: str  # "<header>" or '<div role="navigation">'
    count: int


class LandmarkNode(FrozenModel):
    tag: str
    role: Optional[str] = None
    """Only set when the role attribute is explicit in the markup."""
    children: List["LandmarkNode"] = []


class LandmarkAnalysis(FrozenModel):
    skeleton: List[LandmarkSkeleton]
    elements: List[ElementCount]
    outline: List[LandmarkNode]


class HeadingContentStats(FrozenModel):
    word_count: int = 0
    paragraphs: int = 0
    lists: int = 0


class HeadingInfo(FrozenModel):
    level: int
    text: str
    children: List["HeadingInfo"] = []
    content: HeadingContentStats = HeadingContentStats()


class HeadingAnalysis(FrozenModel):
    outline: List[HeadingInfo]
    counts: Dict[str, int]
    total: int


class LinkDetail(FrozenModel):
    href: str
    text: str
    target_blank: bool
    noopener: bool
    noreferrer: bool


class LinkGroup(FrozenModel):
    destination: str
    """Path for internal links, hostname for external links."""
    count: int
    links: List[LinkDetail]


class LinkBucket(FrozenModel):
    count: int = 0
    groups: List[LinkGroup] = []


class LinkAnalysis(FrozenModel):
    internal: LinkBucket = LinkBucket()
    external: LinkBucket = LinkBucket()


class StructureWarning(FrozenModel):
    id: str
    severity: Literal["error", "warning"]
    message: str
    details: Optional[str] = None


class StructureAnalysis(FrozenModel):
    title: Optional[str]
    language: Optional[str]
    skip_links: List[SkipLinkInfo]
    landmarks: LandmarkAnalysis
    headings: HeadingAnalysis
    links: LinkAnalysis
    warnings: List[StructureWarning] = []
    """Left empty by the extractor; filled in by an external rule engine."""


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class LandmarkDiff(FrozenModel):
    role: str
    static_count: int
    hydrated_count: int
    change: int


class HeadingDiff(FrozenModel):
    level: int
    text: str
    status: Literal["added", "removed"]


class LinkDiff(FrozenModel):
    internal_added: int = 0
    internal_removed: int = 0
    external_added: int = 0
    external_removed: int = 0
    new_internal_destinations: List[str] = []
    new_external_domains: List[str] = []


class ValueChange(FrozenModel):
    static: Optional[str]
    hydrated: Optional[str]


class MetadataDiff(FrozenModel):
    title: Optional[ValueChange] = None
    language: Optional[ValueChange] = None


class StructureComparisonSummary(FrozenModel):
    static_landmarks: int
    hydrated_landmarks: int
    static_headings: int
    hydrated_headings: int
    static_links: int
    hydrated_links: int


class StructureComparison(FrozenModel):
    summary: StructureComparisonSummary
    has_differences: bool
    metadata: MetadataDiff
    landmarks: List[LandmarkDiff]
    headings: List[HeadingDiff]
    links: LinkDiff
