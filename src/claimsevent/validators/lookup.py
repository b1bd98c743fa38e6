"""Read access to previously stored submissions and claims."""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..submissions import Claim, ClaimStatus, Submission, SubmissionStatus


PREVIOUS_SUBMISSION_STATUSES = (
    SubmissionStatus.CREATED,
    SubmissionStatus.VALIDATION_IN_PROGRESS,
    SubmissionStatus.READY_FOR_VALIDATION,
    SubmissionStatus.VALIDATION_SUCCEEDED,
)

ACTIVE_CLAIM_STATUSES = (ClaimStatus.READY_TO_PROCESS, ClaimStatus.VALID)


class ClaimsLookup(Protocol):
    def find_claims(
        self,
        office_code: str,
        *,
        fee_code: Optional[str] = None,
        unique_file_number: Optional[str] = None,
        unique_client_number: Optional[str] = None,
        unique_case_id: Optional[str] = None,
    ) -> List[Claim]:
        """Return active claims in live submissions for *office_code* matching the filters."""

    def find_submissions(
        self,
        office_code: str,
        *,
        area_of_law: str,
        submission_period: str,
    ) -> List[Submission]:
        """Return submissions (without claims) for the office, area of law and period."""
