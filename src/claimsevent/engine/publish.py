"""Send validation results to the claims data API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..client import ClaimsApiClient, UpdateSubmissionRequest
from .validate import SubmissionValidationResult


logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    submission_id: str
    updated_claims: List[str] = field(default_factory=list)
    submission_status: str = ""
    submission_updated: bool = False

    def as_dict(self) -> dict:
        return {
            "submission_id": self.submission_id,
            "updated_claims": list(self.updated_claims),
            "submission_status": self.submission_status,
            "submission_updated": self.submission_updated,
        }


def publish_result(result: SubmissionValidationResult, client: ClaimsApiClient) -> PublishResult:
    """PATCH each claim update, then the submission status.

    Client errors propagate; claims already updated stay updated. While any
    claim is flagged for retry the submission is left in progress and not
    PATCHed.
    """

    submission_id = result.submission.submission_id
    published = PublishResult(submission_id=submission_id)
    for claim_id, update in result.claim_updates.items():
        client.update_claim(submission_id, claim_id, update)
        published.updated_claims.append(claim_id)

    status = result.submission_status
    published.submission_status = status.value
    if result.has_pending_retries:
        logger.warning(
            "Submission %s has %d claim(s) awaiting retry; leaving it %s",
            submission_id,
            len(result.context.retry_claim_ids()),
            status.value,
        )
        return published

    client.update_submission(
        submission_id,
        UpdateSubmissionRequest(
            status=status,
            validation_messages=result.context.get_submission_validation_errors(),
        ),
    )
    published.submission_updated = True
    logger.debug(
        "Published %d claim update(s) for submission %s with status %s",
        len(published.updated_claims),
        submission_id,
        status.value,
    )
    return published
