"""Accumulator for validation results across one submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from .messages import ValidationMessagePatch


@dataclass
class ClaimValidationReport:
    """Errors recorded against a single claim."""

    claim_id: str
    errors: List[ValidationMessagePatch] = field(default_factory=list)

    def add_error(self, error: ValidationMessagePatch) -> None:
        self.errors.append(error)

    def add_errors(self, errors: Iterable[ValidationMessagePatch]) -> None:
        self.errors.extend(errors)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def messages(self) -> List[str]:
        return [error.display_message for error in self.errors]

    def as_dict(self) -> dict:
        return {
            "claim_id": self.claim_id,
            "errors": [error.as_dict() for error in self.errors],
        }


class SubmissionValidationContext:
    """Collects validation messages while a submission is being validated.

    Submission-level messages and per-claim reports are both kept in insertion
    order. Nothing is deduplicated: two rules reporting the same problem give
    two entries.
    """

    def __init__(self) -> None:
        self._errors: List[ValidationMessagePatch] = []
        self._claim_reports: Dict[str, ClaimValidationReport] = {}
        self._retry_claims: Set[str] = set()

    # Submission level

    def add_error(self, error: ValidationMessagePatch) -> None:
        self._errors.append(error)

    def add_errors(self, errors: Iterable[ValidationMessagePatch]) -> None:
        self._errors.extend(errors)

    def get_submission_validation_errors(self) -> List[ValidationMessagePatch]:
        return list(self._errors)

    def has_errors(self) -> bool:
        if self._errors:
            return True
        return any(report.has_errors() for report in self._claim_reports.values())

    # Claim level

    def add_claim_error(self, claim_id: str, error: ValidationMessagePatch) -> None:
        self._report_for(claim_id).add_error(error)

    def add_claim_errors(self, claim_id: str, errors: Iterable[ValidationMessagePatch]) -> None:
        self._report_for(claim_id).add_errors(errors)

    def add_claim_reports(self, reports: Iterable[ClaimValidationReport]) -> None:
        for report in reports:
            self._report_for(report.claim_id).add_errors(report.errors)

    def add_to_all_claim_reports(self, error: ValidationMessagePatch) -> None:
        for report in self._claim_reports.values():
            report.add_error(error)

    def get_claim_report(self, claim_id: str) -> Optional[ClaimValidationReport]:
        return self._claim_reports.get(claim_id)

    def get_claim_reports(self) -> List[ClaimValidationReport]:
        return list(self._claim_reports.values())

    def has_claim_errors(self, claim_id: Optional[str]) -> bool:
        if claim_id is None:
            return False
        report = self._claim_reports.get(claim_id)
        return report is not None and report.has_errors()

    def claim_ids(self) -> List[str]:
        return list(self._claim_reports)

    def flag_for_retry(self, claim_id: str) -> None:
        self._retry_claims.add(claim_id)

    def is_flagged_for_retry(self, claim_id: str) -> bool:
        return claim_id in self._retry_claims

    def retry_claim_ids(self) -> List[str]:
        return sorted(self._retry_claims)

    def as_dict(self) -> dict:
        return {
            "submission_errors": [error.as_dict() for error in self._errors],
            "claims": [report.as_dict() for report in self._claim_reports.values()],
            "retry_claims": self.retry_claim_ids(),
        }

    def _report_for(self, claim_id: str) -> ClaimValidationReport:
        report = self._claim_reports.get(claim_id)
        if report is None:
            report = ClaimValidationReport(claim_id=claim_id)
            self._claim_reports[claim_id] = report
        return report
