"""Helpers shared by the command routers."""

from typing import Union

from fastapi import HTTPException

from webspecs.models.envelope import Failure, Success


def resolve(outcome: Union[Success, Failure]) -> Success:
    """Return a ``Success`` unchanged; raise a ``Failure`` as an HTTP error.

    The error body keeps the full envelope under ``detail``.
    """
    match outcome:
        case Success():
            return outcome
        case Failure(error=error):
            raise HTTPException(status_code=error.status_code, detail=outcome.model_dump())
    raise TypeError(f"Unexpected command outcome: {type(outcome).__name__}")
