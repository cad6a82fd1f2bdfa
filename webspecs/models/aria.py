from typing import Dict, List, Optional, Union

from webspecs.models.base import FrozenModel


class AriaNode(FrozenModel):
    role: str
    name: Optional[str] = None
    attributes: Dict[str, Union[bool, str]] = {}
    children: List["AriaNode"] = []


class AriaSnapshotAnalysis(FrozenModel):
    nodes: List[AriaNode]
    counts: Dict[str, int]


class RoleCountChange(FrozenModel):
    role: str
    static: int
    hydrated: int


class SnapshotDiff(FrozenModel):
    added: List[str] = []
    removed: List[str] = []
    count_changes: List[RoleCountChange] = []


class ScreenReaderHeading(FrozenModel):
    level: int
    text: str


class ScreenReaderLandmark(FrozenModel):
    role: str
    name: Optional[str] = None
    heading_count: int
    link_count: int


class ScreenReaderSummary(FrozenModel):
    page_title: Optional[str]
    landmark_count: int
    heading_count: int
    link_count: int
    form_control_count: int
    image_count: int
    has_main_landmark: bool
    has_navigation: bool
    has_skip_link: bool
