"""Validation pipeline for a single submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from ..client.dto import UpdateClaimRequest
from ..client.exceptions import ClaimsApiServerErrorException
from ..config import ValidationConfig
from ..submissions import Claim, ClaimStatus, Submission, SubmissionStatus
from ..validation import AreaOfLaw, ClaimValidationReport, SubmissionValidationContext
from ..validators import (
    ClaimRule,
    ClaimsLookup,
    DuplicateClaimValidator,
    RuleSettings,
    SubmissionRule,
    SubmissionRuleSettings,
    default_duplicate_validator,
    validate_claim,
    validate_submission_rules,
)


logger = logging.getLogger(__name__)


@dataclass
class SubmissionValidationResult:
    """Outcome of validating one submission."""

    submission: Submission
    area_of_law: AreaOfLaw
    context: SubmissionValidationContext
    claim_updates: Dict[str, UpdateClaimRequest] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return self.context.has_errors()

    @property
    def has_pending_retries(self) -> bool:
        return bool(self.context.retry_claim_ids())

    @property
    def submission_status(self) -> SubmissionStatus:
        """Final status, or ``VALIDATION_IN_PROGRESS`` while claims await a retry."""

        if self.has_pending_retries:
            return SubmissionStatus.VALIDATION_IN_PROGRESS
        if self.has_errors:
            return SubmissionStatus.VALIDATION_FAILED
        return SubmissionStatus.VALIDATION_SUCCEEDED

    @property
    def invalid_claim_count(self) -> int:
        return sum(1 for claim_id in self.claim_updates if self.context.has_claim_errors(claim_id))

    def error_rows(self) -> List[dict]:
        """Flatten submission and claim messages into one row per message."""

        rows: List[dict] = []
        for error in self.context.get_submission_validation_errors():
            rows.append(_error_row(None, error))
        for report in self.context.get_claim_reports():
            for error in report.errors:
                rows.append(_error_row(report.claim_id, error))
        return rows

    def as_dict(self) -> dict:
        return {
            "submission_id": self.submission.submission_id,
            "office_account_number": self.submission.office_account_number,
            "area_of_law": self.area_of_law.value,
            "submission_period": self.submission.submission_period,
            "status": self.submission_status.value,
            "submission_errors": [
                error.as_dict() for error in self.context.get_submission_validation_errors()
            ],
            "claims": {
                claim_id: update.as_dict() for claim_id, update in self.claim_updates.items()
            },
            "summary": {
                "claims": len(self.submission.claims),
                "validated_claims": len(self.claim_updates),
                "retry_claims": len(self.context.retry_claim_ids()),
                "invalid_claims": self.invalid_claim_count,
                "submission_errors": len(self.context.get_submission_validation_errors()),
            },
        }


def validate_submission(
    submission: Submission,
    config: ValidationConfig,
    *,
    lookup: Optional[ClaimsLookup] = None,
    today: Optional[date] = None,
    duplicate_validator: Optional[DuplicateClaimValidator] = None,
    claim_rules: Optional[List[ClaimRule]] = None,
    submission_rules: Optional[List[SubmissionRule]] = None,
) -> SubmissionValidationResult:
    """Run every submission and claim rule and build the claim updates.

    Only claims in ``READY_TO_PROCESS`` are validated and updated; claims that
    already carry a result are still used as duplicate candidates.

    The area of law is resolved first, so an unknown value raises
    :class:`~claimsevent.exceptions.UnknownAreaOfLawError` before any rule
    runs. Exceptions raised by rules are not caught here, except a server
    error from the claims lookup, which flags the claim for retry and leaves
    it out of the updates.
    """

    area = AreaOfLaw.from_value(submission.area_of_law)
    today = today or date.today()
    duplicates = duplicate_validator or default_duplicate_validator(lookup)
    context = SubmissionValidationContext()
    ready = ready_to_process_claims(submission)
    context.add_claim_reports(ClaimValidationReport(claim_id=claim.id) for claim in ready)

    validate_submission_rules(
        submission,
        context,
        SubmissionRuleSettings(today=today, lookup=lookup),
        submission_rules,
    )

    settings = RuleSettings(config=config, today=today)
    for claim in ready:
        validate_claim(claim, context, area, settings, claim_rules)
        try:
            duplicates.validate(
                claim,
                submission.claims,
                area,
                submission.office_account_number,
                context,
            )
        except ClaimsApiServerErrorException as exc:
            logger.warning("Duplicate lookup failed for claim %s, flagging for retry: %s", claim.id, exc)
            context.flag_for_retry(claim.id)

    result = SubmissionValidationResult(submission=submission, area_of_law=area, context=context)
    for claim_id in context.claim_ids():
        if context.is_flagged_for_retry(claim_id):
            logger.debug("Claim %s flagged for retry; not updating", claim_id)
            continue
        result.claim_updates[claim_id] = UpdateClaimRequest.from_report(context.get_claim_report(claim_id))

    logger.debug(
        "Validated submission %s: %d of %d claim(s), errors=%s",
        submission.submission_id,
        len(ready),
        len(submission.claims),
        result.has_errors,
    )
    return result


def ready_to_process_claims(submission: Submission) -> List[Claim]:
    return [claim for claim in submission.claims if claim.status is ClaimStatus.READY_TO_PROCESS]


def _error_row(claim_id: Optional[str], error) -> dict:
    return {
        "claim_id": claim_id,
        "code": error.code,
        "field": error.field,
        "source": error.source,
        "type": error.type,
        "message": error.display_message,
    }
