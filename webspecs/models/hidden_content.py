from typing import Literal, Optional

from webspecs.models.base import FrozenModel

Severity = Literal["none", "low", "high"]
Confidence = Literal["detected", "suspected"]


class FrameworkDetection(FrozenModel):
    name: str
    """Display name, e.g. ``"Next.js"``."""
    confidence: Confidence


class HiddenContentAnalysis(FrozenModel):
    severity: Severity
    has_streaming_content: bool
    hidden_word_count: int
    visible_word_count: int
    hidden_percentage: int
    """Share of the content (0–100) a non-executing consumer never sees."""
    framework: Optional[FrameworkDetection] = None
