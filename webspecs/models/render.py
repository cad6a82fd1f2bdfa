from webspecs.models.base import FrozenModel


class RenderedPage(FrozenModel):
    """DOM serialized after the page settled, or when the wait ran out."""

    html: str
    timed_out: bool = False


class AccessibilitySnapshot(FrozenModel):
    snapshot: str
    timed_out: bool = False
