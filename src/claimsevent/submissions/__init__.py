"""Submission loading utilities."""

from .exceptions import (
    SubmissionDataError,
    SubmissionError,
    SubmissionFormatError,
    UnsupportedSubmissionFileError,
)
from .loader import load_submission, load_submission_csv, load_submission_json
from .mapping import claim_from_dict, claim_to_dict, submission_from_dict, submission_to_dict
from .models import Claim, ClaimStatus, Submission, SubmissionStatus

__all__ = [
    "SubmissionError",
    "SubmissionFormatError",
    "SubmissionDataError",
    "UnsupportedSubmissionFileError",
    "Claim",
    "ClaimStatus",
    "Submission",
    "SubmissionStatus",
    "claim_from_dict",
    "claim_to_dict",
    "submission_from_dict",
    "submission_to_dict",
    "load_submission",
    "load_submission_csv",
    "load_submission_json",
]
