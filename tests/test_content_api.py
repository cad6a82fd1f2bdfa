"""Tests for /ai, /hidden-content and /readability/compare."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from webspecs.main import app
from webspecs.models.render import RenderedPage

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield


_PARAGRAPH = (
    "Server rendering sends complete markup to every client, so search engines, "
    "language model crawlers and screen readers can all read the article without "
    "having to execute any of the JavaScript bundles that the page ships with."
)

_ARTICLE = f"""
<article>
  <h1>Rendering Strategies</h1>
  <p>{_PARAGRAPH}</p>
  <p>{_PARAGRAPH}</p>
  <h2>Trade-offs</h2>
  <p>{_PARAGRAPH}</p>
</article>
"""

_EXTRA_SECTION = f"""
<h2>Further Reading</h2>
<p>{_PARAGRAPH}</p>
<p>{_PARAGRAPH}</p>
"""

_SPA_SHELL_HTML = """
<!DOCTYPE html>
<html>
<head><title>React App</title></head>
<body>
  <div id="root"></div>
  <script src="/static/js/main.js"></script>
</body>
</html>
"""

_SPA_RENDERED_HTML = f"""
<!DOCTYPE html>
<html>
<head><title>React App</title></head>
<body><div id="root"><main>{_ARTICLE}</main></div></body>
</html>
"""

_STATIC_ARTICLE_HTML = f"""
<!DOCTYPE html>
<html lang="en">
<head>
  <title>Rendering Strategies</title>
  <meta name="description" content="Static versus client rendering.">
  <meta name="author" content="Sam Lee">
</head>
<body><main>{_ARTICLE}</main></body>
</html>
"""

_RENDERED_ARTICLE_HTML = _STATIC_ARTICLE_HTML.replace("</article>", f"{_EXTRA_SECTION}</article>")


def _post(path: str, url: str = "https://example.com", **kwargs):
    return client.post(path, json={"url": url, **kwargs})


class TestAiView:
    def test_static_article(self):
        with patch("webspecs.routers.content.fetch_html", new=AsyncMock(return_value=_STATIC_ARTICLE_HTML)):
            resp = _post("/ai")

        assert resp.status_code == 200
        result = resp.json()["result"]
        assert result["title"] == "Rendering Strategies"
        assert result["byline"] == "Sam Lee"
        assert result["excerpt"] == "Static versus client rendering."
        assert result["word_count"] > 50
        assert result["is_readerable"] is True
        assert "Trade-offs" in result["markdown"]
        assert result["hidden_content_analysis"]["severity"] == "none"

    def test_spa_shell(self):
        with patch("webspecs.routers.content.fetch_html", new=AsyncMock(return_value=_SPA_SHELL_HTML)):
            resp = _post("/ai")

        assert resp.status_code == 200
        result = resp.json()["result"]
        assert result["word_count"] == 0
        assert result["is_readerable"] is False
        assert result["hidden_content_analysis"]["framework"] == {
            "name": "React",
            "confidence": "suspected",
        }

    def test_fetch_failure_returns_502(self):
        with patch(
            "webspecs.routers.content.fetch_html",
            new=AsyncMock(side_effect=RuntimeError("Response body exceeds the maximum allowed size.")),
        ):
            resp = _post("/ai")

        assert resp.status_code == 502
        assert resp.json()["detail"]["error"]["kind"] == "fetch_failed"


class TestHiddenContent:
    def test_client_rendered_page_is_high_severity(self):
        with (
            patch("webspecs.routers.content.fetch_html", new=AsyncMock(return_value=_SPA_SHELL_HTML)),
            patch(
                "webspecs.routers.content.fetch_rendered_html",
                new=AsyncMock(return_value=RenderedPage(html=_SPA_RENDERED_HTML)),
            ),
        ):
            resp = _post("/hidden-content")

        assert resp.status_code == 200
        result = resp.json()["result"]
        assert result["static_word_count"] == 0
        assert result["rendered_word_count"] > 0
        analysis = result["analysis"]
        assert analysis["severity"] == "high"
        assert analysis["hidden_percentage"] == 100
        assert analysis["has_streaming_content"] is True
        assert analysis["framework"]["name"] == "React"

    def test_server_rendered_page_has_nothing_hidden(self):
        with (
            patch("webspecs.routers.content.fetch_html", new=AsyncMock(return_value=_STATIC_ARTICLE_HTML)),
            patch(
                "webspecs.routers.content.fetch_rendered_html",
                new=AsyncMock(return_value=RenderedPage(html=_STATIC_ARTICLE_HTML, timed_out=True)),
            ),
        ):
            resp = _post("/hidden-content")

        result = resp.json()["result"]
        assert result["analysis"]["severity"] == "none"
        assert result["analysis"]["hidden_word_count"] == 0
        assert result["timed_out"] is True


class TestReadabilityCompare:
    def test_section_only_in_rendered(self):
        with (
            patch("webspecs.routers.content.fetch_html", new=AsyncMock(return_value=_STATIC_ARTICLE_HTML)),
            patch(
                "webspecs.routers.content.fetch_rendered_html",
                new=AsyncMock(return_value=RenderedPage(html=_RENDERED_ARTICLE_HTML)),
            ),
        ):
            resp = _post("/readability/compare")

        assert resp.status_code == 200
        comparison = resp.json()["result"]["comparison"]
        assert {"heading": "Further Reading", "level": 2} in comparison["sections_only_in_rendered"]
        assert comparison["js_dependent_word_count"] > 0
        assert comparison["rendered_word_count"] > comparison["static_word_count"]
