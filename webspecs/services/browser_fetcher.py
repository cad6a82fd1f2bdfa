"""Playwright-based rendering for JavaScript-dependent views of a page."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webspecs.config import get_settings
from webspecs.models.render import AccessibilitySnapshot, RenderedPage
from webspecs.services.url_guard import validate_url

logger = logging.getLogger(__name__)

_CHROMIUM_ARGS = [
    # --no-sandbox is required when running as root inside a container
    # (Docker drops the user namespace needed by Chromium's sandbox).
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


@asynccontextmanager
async def _open_page(javascript_enabled: bool = True) -> AsyncIterator[Page]:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=True, args=_CHROMIUM_ARGS)
        context = await browser.new_context(java_script_enabled=javascript_enabled)
        try:
            yield await context.new_page()
        finally:
            await context.close()
            await browser.close()


async def _navigate(page: Page, url: str, timeout_ms: int) -> bool:
    """Load *url* and wait for network idle; return True if the wait timed out.

    A timeout is not an error: the page keeps whatever DOM it built so far.
    """
    try:
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.warning("Render timed out, using partial DOM", extra={"url": url, "timeout_ms": timeout_ms})
        return True
    return False


async def fetch_rendered_html(url: str, timeout_ms: int) -> RenderedPage:
    """Render *url* in headless Chromium and return the resulting DOM.

    Raises:
        ValueError: if the URL fails SSRF / scheme validation.
        RuntimeError: if the rendered HTML exceeds ``max_content_size``.
        playwright.async_api.Error: on browser or network errors.
    """
    validate_url(url)

    async with _open_page() as page:
        timed_out = await _navigate(page, url, timeout_ms)
        html = await page.content()

    if len(html.encode()) > get_settings().max_content_size:
        raise RuntimeError("Rendered HTML exceeds the maximum allowed size.")

    return RenderedPage(html=html, timed_out=timed_out)


async def fetch_accessibility_snapshot(
    url: str,
    timeout_ms: int,
    javascript_enabled: bool = True,
) -> AccessibilitySnapshot:
    """Capture the accessibility tree of ``<body>`` as snapshot text.

    With *javascript_enabled* False the tree reflects the HTML as served.
    """
    validate_url(url)

    async with _open_page(javascript_enabled) as page:
        timed_out = await _navigate(page, url, timeout_ms)
        snapshot = await page.locator("body").aria_snapshot()

    return AccessibilitySnapshot(snapshot=snapshot, timed_out=timed_out)
