"""Accessibility-tree endpoints backed by Playwright ARIA snapshots."""

import asyncio
import logging

from fastapi import APIRouter, Request

from webspecs.config import get_settings
from webspecs.limiter import limiter
from webspecs.models.envelope import Success
from webspecs.models.request import A11yTreeRequest, RenderRequest
from webspecs.models.response import A11yCompareResult, A11yTreeResult, ScreenReaderResult
from webspecs.routers.common import resolve
from webspecs.services.aria_snapshot import analyze_aria_snapshot, compare_snapshots, snapshot_has_differences
from webspecs.services.browser_fetcher import fetch_accessibility_snapshot
from webspecs.services.runner import run_command
from webspecs.services.screen_reader import analyze_screen_reader

logger = logging.getLogger(__name__)

settings = get_settings()
router = APIRouter()


@router.post(
    "/a11y-tree",
    response_model=Success[A11yTreeResult],
    summary="Capture and parse the accessibility tree",
)
@limiter.limit(settings.render_rate_limit)
async def a11y_tree(request: Request, body: A11yTreeRequest) -> Success[A11yTreeResult]:
    url = str(body.url)
    logger.info(
        "Accessibility tree request received",
        extra={"url": url, "javascript_enabled": body.javascript_enabled},
    )

    async def pipeline() -> A11yTreeResult:
        captured = await fetch_accessibility_snapshot(url, body.timeout_ms, body.javascript_enabled)
        analysis = analyze_aria_snapshot(captured.snapshot)
        return A11yTreeResult(
            url=url,
            javascript_enabled=body.javascript_enabled,
            snapshot=captured.snapshot,
            nodes=analysis.nodes,
            counts=analysis.counts,
            timed_out=captured.timed_out,
        )

    return resolve(await run_command("a11y-tree", url, pipeline()))


@router.post(
    "/a11y-tree/compare",
    response_model=Success[A11yCompareResult],
    summary="Diff the accessibility tree with JavaScript off and on",
)
@limiter.limit(settings.render_rate_limit)
async def a11y_tree_compare(request: Request, body: RenderRequest) -> Success[A11yCompareResult]:
    url = str(body.url)
    logger.info("Accessibility tree comparison request received", extra={"url": url})

    async def pipeline() -> A11yCompareResult:
        static, hydrated = await asyncio.gather(
            fetch_accessibility_snapshot(url, body.timeout_ms, javascript_enabled=False),
            fetch_accessibility_snapshot(url, body.timeout_ms, javascript_enabled=True),
        )
        diff = compare_snapshots(static.snapshot, hydrated.snapshot)
        return A11yCompareResult(
            url=url,
            static_snapshot=static.snapshot,
            hydrated_snapshot=hydrated.snapshot,
            diff=diff,
            has_differences=snapshot_has_differences(diff),
            timed_out=static.timed_out or hydrated.timed_out,
        )

    return resolve(await run_command("a11y-tree-compare", url, pipeline()))


@router.post(
    "/screen-reader",
    response_model=Success[ScreenReaderResult],
    summary="Summarize the page as a screen reader presents it",
)
@limiter.limit(settings.render_rate_limit)
async def screen_reader(request: Request, body: RenderRequest) -> Success[ScreenReaderResult]:
    """Landmarks, headings and navigation aids of the rendered accessibility tree.

    Always renders with JavaScript on, since assistive technology reads the live DOM.
    """
    url = str(body.url)
    logger.info("Screen reader request received", extra={"url": url})

    async def pipeline() -> ScreenReaderResult:
        captured = await fetch_accessibility_snapshot(url, body.timeout_ms, javascript_enabled=True)
        analysis = analyze_aria_snapshot(captured.snapshot)
        summary, landmarks, headings = analyze_screen_reader(analysis.nodes, analysis.counts)
        if not summary.has_main_landmark:
            logger.info("No main landmark exposed", extra={"url": url})
        return ScreenReaderResult(
            url=url,
            summary=summary,
            landmarks=landmarks,
            headings=headings,
            counts=analysis.counts,
            timed_out=captured.timed_out,
        )

    return resolve(await run_command("screen-reader", url, pipeline()))
