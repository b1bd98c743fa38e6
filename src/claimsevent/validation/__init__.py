"""Validation message catalogue and result accumulation."""

from .area_of_law import AreaOfLaw
from .context import ClaimValidationReport, SubmissionValidationContext
from .errors import SubmissionValidationError
from .messages import (
    ClaimValidationSource,
    ValidationErrorMessage,
    ValidationMessagePatch,
    ValidationMessageType,
)

__all__ = [
    "AreaOfLaw",
    "ClaimValidationReport",
    "ClaimValidationSource",
    "SubmissionValidationContext",
    "SubmissionValidationError",
    "ValidationErrorMessage",
    "ValidationMessagePatch",
    "ValidationMessageType",
]
