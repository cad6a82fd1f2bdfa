from pydantic import BaseModel, Field, HttpUrl

from webspecs.config import get_settings


class AnalyzeRequest(BaseModel):
    """Body for commands that only look at the static HTML."""

    url: HttpUrl


class RenderRequest(AnalyzeRequest):
    """Body for commands that render the page in a headless browser."""

    timeout_ms: int = Field(
        default_factory=lambda: get_settings().render_timeout_ms,
        ge=500,
        le=60_000,
        description=(
            "Milliseconds to wait for the network to go idle.  When the limit "
            "is reached the partially rendered page is analysed and "
            "``timed_out`` is set in the result."
        ),
    )


class A11yTreeRequest(RenderRequest):
    javascript_enabled: bool = True
    """Capture the accessibility tree with JavaScript on (hydrated) or off (static)."""
