"""Tests for the command runner and its response envelope."""

import asyncio

import httpx
import pytest
from fastapi import HTTPException
from playwright.async_api import Error as PlaywrightError

from webspecs.config import APP_VERSION
from webspecs.models.envelope import Failure, Success
from webspecs.routers.common import resolve
from webspecs.services.runner import run_command


async def _returns(value):
    return value


async def _raises(exc: Exception):
    raise exc


def _run(pipeline) -> object:
    return asyncio.run(run_command("structure", "https://example.com/", pipeline))


class TestRunCommand:
    def test_success(self):
        outcome = _run(_returns({"answer": 42}))

        assert isinstance(outcome, Success)
        assert outcome.status == "ok"
        assert outcome.result == {"answer": 42}
        assert outcome.command.name == "structure"
        assert outcome.command.target == "https://example.com/"
        assert outcome.command.version == APP_VERSION
        assert outcome.command.duration_ms >= 0
        assert outcome.command.timestamp.endswith("+00:00")

    @pytest.mark.parametrize(
        "exc, kind, status_code",
        [
            (ValueError("Requests to private/internal addresses are not allowed."), "invalid_url", 400),
            (httpx.ReadTimeout("timed out"), "timeout", 504),
            (
                httpx.HTTPStatusError(
                    "Server error",
                    request=httpx.Request("GET", "https://example.com/"),
                    response=httpx.Response(503),
                ),
                "upstream_status",
                502,
            ),
            (httpx.ConnectError("connection refused"), "fetch_failed", 502),
            (RuntimeError("Response body exceeds the maximum allowed size."), "fetch_failed", 502),
            (PlaywrightError("Browser closed"), "browser_failed", 502),
        ],
    )
    def test_fetch_errors_become_failures(self, exc, kind, status_code):
        outcome = _run(_raises(exc))

        assert isinstance(outcome, Failure)
        assert outcome.status == "error"
        assert outcome.error.kind == kind
        assert outcome.error.status_code == status_code
        assert outcome.command.name == "structure"

    def test_other_errors_propagate(self):
        with pytest.raises(KeyError):
            _run(_raises(KeyError("bug")))


class TestResolve:
    def test_success_is_returned(self):
        outcome = _run(_returns("done"))
        assert resolve(outcome) is outcome

    def test_failure_raises_http_exception(self):
        outcome = _run(_raises(ValueError("bad url")))
        with pytest.raises(HTTPException) as excinfo:
            resolve(outcome)
        assert excinfo.value.status_code == 400
        assert excinfo.value.detail["error"]["kind"] == "invalid_url"
        assert excinfo.value.detail["error"]["message"] == "bad url"
