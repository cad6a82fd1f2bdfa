"""Document-structure endpoints: static, rendered and static-vs-rendered."""

import asyncio
import logging

from fastapi import APIRouter, Request

from webspecs.config import get_settings
from webspecs.limiter import limiter
from webspecs.models.envelope import Success
from webspecs.models.request import AnalyzeRequest, RenderRequest
from webspecs.models.response import StructureCompareResult, StructureJsResult, StructureResult
from webspecs.routers.common import resolve
from webspecs.services.browser_fetcher import fetch_rendered_html
from webspecs.services.fetcher import fetch_html
from webspecs.services.html_parser import parse_html
from webspecs.services.runner import run_command
from webspecs.services.structure import analyze_structure
from webspecs.services.structure_compare import compare_structures

logger = logging.getLogger(__name__)

settings = get_settings()
router = APIRouter()


@router.post(
    "/structure",
    response_model=Success[StructureResult],
    summary="Analyze the structure of the HTML as served",
)
@limiter.limit(settings.static_rate_limit)
async def structure(request: Request, body: AnalyzeRequest) -> Success[StructureResult]:
    """Landmarks, heading outline, links and skip links of the raw HTML."""
    url = str(body.url)
    logger.info("Structure request received", extra={"url": url})

    async def pipeline() -> StructureResult:
        html = await fetch_html(url)
        return StructureResult(url=url, analysis=analyze_structure(parse_html(html), url))

    return resolve(await run_command("structure", url, pipeline()))


@router.post(
    "/structure/js",
    response_model=Success[StructureJsResult],
    summary="Analyze the structure of the rendered DOM",
)
@limiter.limit(settings.render_rate_limit)
async def structure_js(request: Request, body: RenderRequest) -> Success[StructureJsResult]:
    url = str(body.url)
    logger.info("Rendered structure request received", extra={"url": url, "timeout_ms": body.timeout_ms})

    async def pipeline() -> StructureJsResult:
        page = await fetch_rendered_html(url, body.timeout_ms)
        return StructureJsResult(
            url=url,
            analysis=analyze_structure(parse_html(page.html), url),
            timed_out=page.timed_out,
        )

    return resolve(await run_command("structure-js", url, pipeline()))


@router.post(
    "/structure/compare",
    response_model=Success[StructureCompareResult],
    summary="Compare the served HTML with the rendered DOM",
    description=(
        "Fetches the page over plain HTTP and renders it in a headless browser "
        "concurrently, analyzes both and reports the landmarks, headings, links "
        "and metadata that JavaScript added or removed."
    ),
)
@limiter.limit(settings.render_rate_limit)
async def structure_compare(request: Request, body: RenderRequest) -> Success[StructureCompareResult]:
    url = str(body.url)
    logger.info("Structure comparison request received", extra={"url": url, "timeout_ms": body.timeout_ms})

    async def pipeline() -> StructureCompareResult:
        html, page = await asyncio.gather(fetch_html(url), fetch_rendered_html(url, body.timeout_ms))
        static = analyze_structure(parse_html(html), url)
        hydrated = analyze_structure(parse_html(page.html), url)
        return StructureCompareResult(
            url=url,
            static=static,
            hydrated=hydrated,
            comparison=compare_structures(static, hydrated),
            timed_out=page.timed_out,
        )

    return resolve(await run_command("structure-compare", url, pipeline()))
