"""Translate exceptions into caller-facing error responses."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .submissions.exceptions import (
    SubmissionDataError,
    SubmissionFormatError,
    UnsupportedSubmissionFileError,
)


logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected application error has occurred."


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    message: str

    def as_dict(self) -> dict:
        return {"status": self.status_code, "message": self.message}


def to_error_response(exc: BaseException) -> ErrorResponse:
    """Map *exc* to a status code and a message that is safe to show.

    Bad input keeps its own message. Every other error, including claims API
    failures, is logged and reported with a fixed message.
    """

    if isinstance(exc, UnsupportedSubmissionFileError):
        return ErrorResponse(status_code=415, message=str(exc))
    if isinstance(exc, (SubmissionFormatError, SubmissionDataError)):
        return ErrorResponse(status_code=400, message=str(exc))
    logger.error("Unexpected error: %s", exc, exc_info=exc)
    return ErrorResponse(status_code=500, message=UNEXPECTED_ERROR_MESSAGE)
