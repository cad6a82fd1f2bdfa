"""Content endpoints: what non-JavaScript consumers can read, and what they miss."""

import asyncio
import logging

from fastapi import APIRouter, Request

from webspecs.config import get_settings
from webspecs.limiter import limiter
from webspecs.models.envelope import Success
from webspecs.models.request import AnalyzeRequest, RenderRequest
from webspecs.models.response import AiResult, HiddenContentResult, ReadabilityCompareResult
from webspecs.routers.common import resolve
from webspecs.services.browser_fetcher import fetch_rendered_html
from webspecs.services.extractor import extract_readability
from webspecs.services.fetcher import fetch_html
from webspecs.services.hidden_content import analyze_hidden_markup, classify_hidden_content
from webspecs.services.runner import run_command
from webspecs.services.sections import compare_readability

logger = logging.getLogger(__name__)

settings = get_settings()
router = APIRouter()


@router.post(
    "/ai",
    response_model=Success[AiResult],
    summary="Show what an AI crawler extracts from the served HTML",
)
@limiter.limit(settings.static_rate_limit)
async def ai_view(request: Request, body: AnalyzeRequest) -> Success[AiResult]:
    """Reader-view extraction of the raw HTML plus an estimate of streamed-in content."""
    url = str(body.url)
    logger.info("AI view request received", extra={"url": url})

    async def pipeline() -> AiResult:
        html = await fetch_html(url)
        readability = extract_readability(html)
        extraction = readability.extraction
        return AiResult(
            url=url,
            title=extraction.title if extraction else None,
            byline=extraction.byline if extraction else None,
            excerpt=extraction.excerpt if extraction else None,
            site_name=extraction.site_name if extraction else None,
            word_count=readability.metrics.word_count,
            is_readerable=readability.metrics.is_readerable,
            markdown=readability.markdown,
            hidden_content_analysis=analyze_hidden_markup(html, readability.metrics.word_count),
        )

    return resolve(await run_command("ai", url, pipeline()))


@router.post(
    "/hidden-content",
    response_model=Success[HiddenContentResult],
    summary="Measure content that only appears after JavaScript runs",
)
@limiter.limit(settings.render_rate_limit)
async def hidden_content(request: Request, body: RenderRequest) -> Success[HiddenContentResult]:
    url = str(body.url)
    logger.info("Hidden content request received", extra={"url": url, "timeout_ms": body.timeout_ms})

    async def pipeline() -> HiddenContentResult:
        html, page = await asyncio.gather(fetch_html(url), fetch_rendered_html(url, body.timeout_ms))
        static_words = extract_readability(html).metrics.word_count
        rendered_words = extract_readability(page.html).metrics.word_count
        analysis = classify_hidden_content(static_words, rendered_words, page.html)
        if analysis.severity == "high":
            logger.info(
                "High share of JavaScript-only content",
                extra={"url": url, "hidden_percentage": analysis.hidden_percentage},
            )
        return HiddenContentResult(
            url=url,
            static_word_count=static_words,
            rendered_word_count=rendered_words,
            analysis=analysis,
            timed_out=page.timed_out,
        )

    return resolve(await run_command("hidden-content", url, pipeline()))


@router.post(
    "/readability/compare",
    response_model=Success[ReadabilityCompareResult],
    summary="Compare reader-view extraction of the served and rendered page",
)
@limiter.limit(settings.render_rate_limit)
async def readability_compare(request: Request, body: RenderRequest) -> Success[ReadabilityCompareResult]:
    url = str(body.url)
    logger.info("Readability comparison request received", extra={"url": url, "timeout_ms": body.timeout_ms})

    async def pipeline() -> ReadabilityCompareResult:
        html, page = await asyncio.gather(fetch_html(url), fetch_rendered_html(url, body.timeout_ms))
        static = extract_readability(html)
        rendered = extract_readability(page.html)
        comparison = compare_readability(
            static.extraction.html if static.extraction else None,
            rendered.extraction.html if rendered.extraction else None,
            static.metrics.word_count,
            rendered.metrics.word_count,
        )
        return ReadabilityCompareResult(
            url=url,
            static=static,
            rendered=rendered,
            comparison=comparison,
            timed_out=page.timed_out,
        )

    return resolve(await run_command("readability-compare", url, pipeline()))
