"""Tagged command outcome: every command resolves to ``Success`` or ``Failure``."""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

ResultT = TypeVar("ResultT")

ErrorKind = Literal[
    "invalid_url",
    "timeout",
    "upstream_status",
    "fetch_failed",
    "browser_failed",
]


class CommandInfo(BaseModel):
    name: str
    target: str
    timestamp: str  # ISO 8601, UTC
    duration_ms: int
    version: str


class ErrorDetail(BaseModel):
    kind: ErrorKind
    message: str
    status_code: int


class Success(BaseModel, Generic[ResultT]):
    status: Literal["ok"] = "ok"
    command: CommandInfo
    result: ResultT


class Failure(BaseModel):
    status: Literal["error"] = "error"
    command: CommandInfo
    error: ErrorDetail
