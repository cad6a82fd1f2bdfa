"""Per-command result records returned inside the response envelope."""

from typing import Dict, List, Optional

from pydantic import BaseModel

from webspecs.models.aria import (
    AriaNode,
    ScreenReaderHeading,
    ScreenReaderLandmark,
    ScreenReaderSummary,
    SnapshotDiff,
)
from webspecs.models.hidden_content import HiddenContentAnalysis
from webspecs.models.readability import ReadabilityComparison, ReadabilityResult
from webspecs.models.structure import StructureAnalysis, StructureComparison


class StructureResult(BaseModel):
    url: str
    analysis: StructureAnalysis


class StructureJsResult(StructureResult):
    timed_out: bool


class StructureCompareResult(BaseModel):
    url: str
    static: StructureAnalysis
    hydrated: StructureAnalysis
    comparison: StructureComparison
    timed_out: bool


class AiResult(BaseModel):
    """What a crawler that never executes JavaScript gets out of the page."""

    url: str
    title: Optional[str]
    byline: Optional[str]
    excerpt: Optional[str]
    site_name: Optional[str]
    word_count: int
    is_readerable: bool
    markdown: str
    hidden_content_analysis: HiddenContentAnalysis


class HiddenContentResult(BaseModel):
    url: str
    static_word_count: int
    rendered_word_count: int
    analysis: HiddenContentAnalysis
    timed_out: bool


class ReadabilityCompareResult(BaseModel):
    url: str
    static: ReadabilityResult
    rendered: ReadabilityResult
    comparison: ReadabilityComparison
    timed_out: bool


class A11yTreeResult(BaseModel):
    url: str
    javascript_enabled: bool
    snapshot: str
    nodes: List[AriaNode]
    counts: Dict[str, int]
    timed_out: bool


class A11yCompareResult(BaseModel):
    url: str
    static_snapshot: str
    hydrated_snapshot: str
    diff: SnapshotDiff
    has_differences: bool
    timed_out: bool


class ScreenReaderResult(BaseModel):
    url: str
    summary: ScreenReaderSummary
    landmarks: List[ScreenReaderLandmark]
    headings: List[ScreenReaderHeading]
    counts: Dict[str, int]
    timed_out: bool
