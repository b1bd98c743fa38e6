"""Payloads sent to the claims data API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..submissions import ClaimStatus, SubmissionStatus
from ..validation import ClaimValidationReport, ValidationMessagePatch


UPDATE_CLAIM_STATUSES = (ClaimStatus.VALID, ClaimStatus.INVALID, ClaimStatus.NOT_VALIDATED)


@dataclass
class UpdateClaimRequest:
    claim_status: ClaimStatus
    errors: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.claim_status = ClaimStatus(self.claim_status)
        if self.claim_status not in UPDATE_CLAIM_STATUSES:
            raise ValueError(f"claim status {self.claim_status.value} cannot be sent in an update")

    @classmethod
    def from_report(cls, report: Optional[ClaimValidationReport]) -> "UpdateClaimRequest":
        """INVALID with the report's messages in order, or VALID when there are none."""

        if report is None or not report.has_errors():
            return cls(claim_status=ClaimStatus.VALID, errors=[])
        return cls(claim_status=ClaimStatus.INVALID, errors=report.messages())

    def as_dict(self) -> dict:
        return {"claim_status": self.claim_status.value, "errors": list(self.errors)}


@dataclass
class UpdateSubmissionRequest:
    status: SubmissionStatus
    validation_messages: List[ValidationMessagePatch] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "status": self.status.value,
            "validation_messages": [message.as_dict() for message in self.validation_messages],
        }
