"""Run a command pipeline and wrap its outcome in the response envelope."""

import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Union

import httpx
from playwright.async_api import Error as PlaywrightError

from webspecs.config import APP_VERSION
from webspecs.models.envelope import CommandInfo, ErrorDetail, ErrorKind, Failure, Success

logger = logging.getLogger(__name__)


def _classify(exc: Exception) -> tuple[ErrorKind, int]:
    """Map a fetch-layer exception to an error kind and HTTP status."""
    if isinstance(exc, ValueError):
        return "invalid_url", 400
    if isinstance(exc, httpx.TimeoutException):
        return "timeout", 504
    if isinstance(exc, httpx.HTTPStatusError):
        return "upstream_status", 502
    if isinstance(exc, PlaywrightError):
        return "browser_failed", 502
    return "fetch_failed", 502


async def run_command(name: str, target: str, pipeline: Awaitable) -> Union[Success, Failure]:
    """Await *pipeline* and return a ``Success`` or ``Failure`` envelope.

    Only fetch-layer errors are converted. Anything else propagates to the
    app-level handler.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    started = time.perf_counter()

    def command_info() -> CommandInfo:
        return CommandInfo(
            name=name,
            target=target,
            timestamp=timestamp,
            duration_ms=int((time.perf_counter() - started) * 1000),
            version=APP_VERSION,
        )

    try:
        result = await pipeline
    except (ValueError, httpx.HTTPError, RuntimeError, PlaywrightError) as exc:
        kind, status_code = _classify(exc)
        if status_code == 400:
            logger.warning("Invalid or blocked URL: %s – %s", target, exc)
        else:
            logger.error("Command %s failed for %s: %s", name, target, exc)
        return Failure(
            command=command_info(),
            error=ErrorDetail(kind=kind, message=str(exc) or type(exc).__name__, status_code=status_code),
        )

    return Success(command=command_info(), result=result)
