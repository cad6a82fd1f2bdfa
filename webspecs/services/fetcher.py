"""Plain HTTP fetch of a page as its server sends it, before any JavaScript runs."""

import logging
from urllib.parse import urljoin

import httpx

from webspecs.config import get_settings
from webspecs.services.url_guard import validate_url

logger = logging.getLogger(__name__)

USER_AGENT = "webspecs/1.0 (+structure analysis)"


async def fetch_html(url: str) -> str:
    """Fetch *url* and return the response body as text.

    Redirects are followed by hand so every hop passes the SSRF check
    before it is requested.

    Raises:
        ValueError: if the URL or a redirect target is not a public http(s) URL.
        httpx.HTTPError: on network errors or a non-2xx final response.
        RuntimeError: on a body larger than ``max_content_size`` or a redirect loop.
    """
    settings = get_settings()
    validate_url(url)

    current_url = url
    async with httpx.AsyncClient(
        follow_redirects=False,
        timeout=settings.fetch_timeout,
        headers={"User-Agent": USER_AGENT},
    ) as client:
        for _ in range(settings.max_redirects + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    next_url = urljoin(current_url, response.headers.get("location", ""))
                    validate_url(next_url)
                    logger.info("Following redirect", extra={"from": current_url, "to": next_url})
                    current_url = next_url
                    continue

                response.raise_for_status()

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > settings.max_content_size:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > settings.max_content_size:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                encoding = response.encoding or "utf-8"
                return b"".join(chunks).decode(encoding, errors="replace")

    raise RuntimeError("Too many redirects.")
