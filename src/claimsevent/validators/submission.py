"""Rules applied to the submission as a whole."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional

from ..submissions import Submission, SubmissionStatus
from ..validation import SubmissionValidationContext, SubmissionValidationError
from .lookup import ClaimsLookup
from .periods import format_month_name, parse_submission_period


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionRuleSettings:
    today: date
    lookup: Optional[ClaimsLookup] = None


SubmissionCheck = Callable[[Submission, SubmissionValidationContext, SubmissionRuleSettings], None]


@dataclass(frozen=True)
class SubmissionRule:
    name: str
    priority: int
    check: SubmissionCheck


def validate_submission_status(
    submission: Submission, context: SubmissionValidationContext, settings: SubmissionRuleSettings
) -> None:
    """Move a ready submission into progress; reject any other state."""

    status = submission.status
    if status is SubmissionStatus.READY_FOR_VALIDATION:
        logger.debug(
            "Submission %s ready for validation. Updating status to VALIDATION_IN_PROGRESS.",
            submission.submission_id,
        )
        submission.status = SubmissionStatus.VALIDATION_IN_PROGRESS
    elif status is SubmissionStatus.VALIDATION_IN_PROGRESS:
        logger.debug(
            "Submission %s already under validation. Attempting to complete validation.",
            submission.submission_id,
        )
    elif status is None:
        context.add_error(SubmissionValidationError.SUBMISSION_STATE_MISSING.to_patch(field="status"))
    else:
        logger.debug(
            "Submission %s cannot be validated in its current state: %s",
            submission.submission_id,
            status.value,
        )
        context.add_error(
            SubmissionValidationError.SUBMISSION_STATE_INVALID.to_patch(status.value, field="status")
        )


def validate_nil_submission(
    submission: Submission, context: SubmissionValidationContext, settings: SubmissionRuleSettings
) -> None:
    if submission.is_nil_submission and submission.claims:
        context.add_error(
            SubmissionValidationError.NIL_SUBMISSION_CONTAINS_CLAIMS.to_patch(field="is_nil_submission")
        )
    elif not submission.is_nil_submission and not submission.claims:
        context.add_error(
            SubmissionValidationError.NON_NIL_SUBMISSION_CONTAINS_NO_CLAIMS.to_patch(field="is_nil_submission")
        )


def validate_submission_period(
    submission: Submission, context: SubmissionValidationContext, settings: SubmissionRuleSettings
) -> None:
    if not submission.submission_period:
        context.add_error(
            SubmissionValidationError.SUBMISSION_PERIOD_MISSING.to_patch(field="submission_period")
        )
        return

    period = parse_submission_period(submission.submission_period)
    if period is None:
        context.add_error(
            SubmissionValidationError.SUBMISSION_PERIOD_INVALID_FORMAT.to_patch(field="submission_period")
        )
        return

    current = (settings.today.year, settings.today.month)
    if period == current:
        context.add_error(
            SubmissionValidationError.SUBMISSION_PERIOD_SAME_MONTH.to_patch(
                format_month_name(current), field="submission_period"
            )
        )
    elif period > current:
        context.add_error(
            SubmissionValidationError.SUBMISSION_PERIOD_FUTURE_MONTH.to_patch(
                format_month_name(current), field="submission_period"
            )
        )


def validate_duplicate_submission(
    submission: Submission, context: SubmissionValidationContext, settings: SubmissionRuleSettings
) -> None:
    """Reject a submission when one for the same office, area and period already succeeded."""

    if settings.lookup is None or not submission.submission_period:
        return
    existing = [
        other
        for other in settings.lookup.find_submissions(
            submission.office_account_number,
            area_of_law=submission.area_of_law,
            submission_period=submission.submission_period,
        )
        if other.status is SubmissionStatus.VALIDATION_SUCCEEDED
        and other.submission_id != submission.submission_id
    ]
    logger.debug("Found %d duplicates for submission %s", len(existing), submission.submission_id)
    if existing:
        context.add_error(
            SubmissionValidationError.SUBMISSION_ALREADY_EXISTS.to_patch(
                submission.office_account_number,
                submission.area_of_law,
                submission.submission_period,
            )
        )


SUBMISSION_RULES: List[SubmissionRule] = [
    SubmissionRule("status", 1, validate_submission_status),
    SubmissionRule("nil_submission", 10, validate_nil_submission),
    SubmissionRule("submission_period", 10, validate_submission_period),
    SubmissionRule("duplicate_submission", 100, validate_duplicate_submission),
]


def validate_submission_rules(
    submission: Submission,
    context: SubmissionValidationContext,
    settings: SubmissionRuleSettings,
    rules: Optional[List[SubmissionRule]] = None,
) -> None:
    for rule in sorted(rules if rules is not None else SUBMISSION_RULES, key=lambda rule: rule.priority):
        logger.debug("Running %s on submission %s", rule.name, submission.submission_id)
        rule.check(submission, context, settings)
