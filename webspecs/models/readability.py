from typing import List, Optional

from webspecs.models.base import FrozenModel


class ReadabilityExtraction(FrozenModel):
    """Raw output of the content extractor, before any comparison."""

    title: Optional[str] = None
    byline: Optional[str] = None
    excerpt: Optional[str] = None
    site_name: Optional[str] = None
    published_time: Optional[str] = None
    html: str
    text_content: str


class ReadabilityMetrics(FrozenModel):
    word_count: int = 0
    character_count: int = 0
    paragraph_count: int = 0
    link_density: float = 0.0  # link text length / total text length
    is_readerable: bool = False


class ReadabilityResult(FrozenModel):
    extraction: Optional[ReadabilityExtraction] = None
    metrics: ReadabilityMetrics
    markdown: str = ""


class SectionInfo(FrozenModel):
    heading: str
    level: int


class ReadabilityComparison(FrozenModel):
    static_word_count: int
    rendered_word_count: int
    js_dependent_word_count: int
    js_dependent_percentage: int
    sections_only_in_rendered: List[SectionInfo]
