"""High-level validation and publishing workflows."""

from .publish import PublishResult, publish_result
from .reports import write_error_table, write_report
from .validate import SubmissionValidationResult, validate_submission

__all__ = [
    "PublishResult",
    "SubmissionValidationResult",
    "publish_result",
    "validate_submission",
    "write_error_table",
    "write_report",
]
