"""Field-level validation rules applied to each claim."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..config import ValidationConfig
from ..submissions import Claim
from ..validation import AreaOfLaw, SubmissionValidationContext, SubmissionValidationError
from .periods import (
    add_months_to_date,
    format_display_date,
    parse_iso_date,
    parse_submission_period,
    twentieth_of_following_month,
)


logger = logging.getLogger(__name__)

MIN_BIRTH_DATE = date(1900, 1, 1)
OLDEST_DATE_ALLOWED = date(1995, 1, 1)
MIN_REP_ORDER_DATE = date(2016, 4, 1)

DISBURSEMENT_FEE_TYPE = "DISB_ONLY"
DISBURSEMENT_MINIMUM_MONTHS = 3

UNIQUE_FILE_NUMBER_RE = re.compile(r"^(\d{6})/\d{3}$")

STAGE_REACHED_PATTERNS: Dict[AreaOfLaw, str] = {
    AreaOfLaw.LEGAL_HELP: r"^[a-zA-Z0-9]{2}$",
    AreaOfLaw.CRIME_LOWER: r"^(INV[A-M]|PRI[A-E]|PRO[C-FH-LP-TUVW]|APP[ABC]|AS(MS|PL|AS)|YOU[EFKLXY]|VOID)$",
}

MATTER_TYPE_PATTERNS: Dict[AreaOfLaw, str] = {
    AreaOfLaw.LEGAL_HELP: r"^[a-zA-Z0-9]{1,4}[-:][a-zA-Z0-9]{1,4}$",
    AreaOfLaw.MEDIATION: r"^[A-Z]{4}[-:][A-Z]{4}$",
}

OUTCOME_CODE_PATTERNS: Dict[AreaOfLaw, str] = {
    AreaOfLaw.LEGAL_HELP: r"^[A-Za-z0-9-]{2}$",
    AreaOfLaw.CRIME_LOWER: r"(?i)^(CP(0[1-9]|1[0-9]|2[0-8])|CN(0[1-9]|1[0-3])|PL(0[1-9]|1[0-4]))?$",
    AreaOfLaw.MEDIATION: r"(?i)^(A|B|S|C|P)?$",
}

SCHEDULE_REFERENCE_PATTERNS: Dict[AreaOfLaw, str] = {
    AreaOfLaw.LEGAL_HELP: r"^[a-zA-Z0-9/.\-]{1,20}$",
}


@dataclass(frozen=True)
class RuleSettings:
    config: ValidationConfig
    today: date


ClaimCheck = Callable[[Claim, SubmissionValidationContext, AreaOfLaw, RuleSettings], None]


@dataclass(frozen=True)
class ClaimRule:
    name: str
    priority: int
    check: ClaimCheck


def validate_mandatory_fields(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    for name in settings.config.mandatory_fields_for(area):
        value = claim.value_of(name)
        if value is None or (isinstance(value, str) and value.strip() == ""):
            context.add_claim_error(
                claim.id,
                SubmissionValidationError.MANDATORY_FIELD_MISSING.to_patch(name, area.value, field=name),
            )


def validate_unique_file_number(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    value = claim.unique_file_number
    if value is None:
        return
    match = UNIQUE_FILE_NUMBER_RE.match(value)
    file_date: Optional[date] = None
    if match:
        try:
            file_date = datetime.strptime(match.group(1), "%d%m%y").date()
        except ValueError:
            file_date = None
    if file_date is None or file_date >= settings.today:
        context.add_claim_error(
            claim.id,
            SubmissionValidationError.INVALID_DATE_IN_UNIQUE_FILE_NUMBER.to_patch(
                field="unique_file_number"
            ),
        )


def validate_client_dates_of_birth(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_date_in_past(claim, context, "client_date_of_birth", "Client Date of Birth", MIN_BIRTH_DATE, settings.today)
    _check_date_in_past(claim, context, "client2_date_of_birth", "Client2 Date of Birth", MIN_BIRTH_DATE, settings.today)


def validate_case_dates(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_date_in_past(claim, context, "case_start_date", "Case Start Date", OLDEST_DATE_ALLOWED, settings.today)

    oldest_concluded = MIN_REP_ORDER_DATE if area is AreaOfLaw.CRIME_LOWER else OLDEST_DATE_ALLOWED
    period = parse_submission_period(claim.submission_period)
    if period is not None:
        _check_date(
            claim,
            context,
            "case_concluded_date",
            "Case Concluded Date",
            oldest_concluded,
            twentieth_of_following_month(period),
            SubmissionValidationError.CASE_CONCLUDED_AFTER_SUBMISSION_DEADLINE,
        )

    _check_date_in_past(claim, context, "transfer_date", "Transfer Date", OLDEST_DATE_ALLOWED, settings.today)
    _check_date_in_past(
        claim,
        context,
        "representation_order_date",
        "Representation Order Date",
        MIN_REP_ORDER_DATE,
        settings.today,
    )


def validate_stage_reached(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_pattern(claim, context, area, settings, "stage_reached_code", STAGE_REACHED_PATTERNS.get(area))


def validate_matter_type(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_pattern(claim, context, area, settings, "matter_type_code", MATTER_TYPE_PATTERNS.get(area))


def validate_outcome_code(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_pattern(claim, context, area, settings, "outcome_code", OUTCOME_CODE_PATTERNS.get(area))


def validate_schedule_reference(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    _check_pattern(claim, context, area, settings, "schedule_reference", SCHEDULE_REFERENCE_PATTERNS.get(area))


def validate_disbursements_vat(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    amount = claim.disbursements_vat_amount
    if amount is None:
        return
    # NaN does not compare
    if not amount.is_finite() or amount > settings.config.vat_maximum_for(area):
        context.add_claim_error(
            claim.id,
            SubmissionValidationError.DISBURSEMENTS_VAT_TOO_HIGH.to_patch(field="disbursements_vat_amount"),
        )


def validate_disbursement_start_date(
    claim: Claim, context: SubmissionValidationContext, area: AreaOfLaw, settings: RuleSettings
) -> None:
    """Disbursement-only claims must wait three months after the case started."""

    if claim.fee_type != DISBURSEMENT_FEE_TYPE:
        logger.debug("Claim %s is not a disbursement claim", claim.id)
        return
    period = parse_submission_period(claim.submission_period)
    start = parse_iso_date(claim.case_start_date)
    if period is None or start is None:
        return
    deadline = twentieth_of_following_month(period)
    if start > deadline or add_months_to_date(start, DISBURSEMENT_MINIMUM_MONTHS) > deadline:
        context.add_claim_error(
            claim.id,
            SubmissionValidationError.DISBURSEMENT_TOO_EARLY.to_patch(
                DISBURSEMENT_MINIMUM_MONTHS, format_display_date(start), field="case_start_date"
            ),
        )


CLAIM_RULES: List[ClaimRule] = [
    ClaimRule("mandatory_fields", 10, validate_mandatory_fields),
    ClaimRule("unique_file_number", 10, validate_unique_file_number),
    ClaimRule("client_dates_of_birth", 10, validate_client_dates_of_birth),
    ClaimRule("case_dates", 10, validate_case_dates),
    ClaimRule("disbursement_start_date", 10, validate_disbursement_start_date),
    ClaimRule("stage_reached", 100, validate_stage_reached),
    ClaimRule("matter_type", 100, validate_matter_type),
    ClaimRule("outcome_code", 100, validate_outcome_code),
    ClaimRule("schedule_reference", 100, validate_schedule_reference),
    ClaimRule("disbursements_vat", 100, validate_disbursements_vat),
]


def ordered_claim_rules(rules: Optional[List[ClaimRule]] = None) -> List[ClaimRule]:
    """Return *rules* sorted by priority; equal priorities keep their order."""

    return sorted(rules if rules is not None else CLAIM_RULES, key=lambda rule: rule.priority)


def validate_claim(
    claim: Claim,
    context: SubmissionValidationContext,
    area: AreaOfLaw,
    settings: RuleSettings,
    rules: Optional[List[ClaimRule]] = None,
) -> None:
    for rule in ordered_claim_rules(rules):
        logger.debug("Running %s on claim %s", rule.name, claim.id)
        rule.check(claim, context, area, settings)


def _check_date_in_past(
    claim: Claim,
    context: SubmissionValidationContext,
    field: str,
    label: str,
    oldest: date,
    today: date,
) -> None:
    _check_date(claim, context, field, label, oldest, today, SubmissionValidationError.DATE_OUT_OF_RANGE)


def _check_date(
    claim: Claim,
    context: SubmissionValidationContext,
    field: str,
    label: str,
    oldest: date,
    latest: date,
    error: SubmissionValidationError,
) -> None:
    raw = claim.value_of(field)
    if raw is None or str(raw).strip() == "":
        return
    value = parse_iso_date(str(raw))
    if value is None:
        context.add_claim_error(
            claim.id, SubmissionValidationError.INVALID_DATE_VALUE.to_patch(label, field=field)
        )
        return
    if value < oldest or value > latest:
        context.add_claim_error(claim.id, error.to_patch(label, format_display_date(oldest), field=field))


def _check_pattern(
    claim: Claim,
    context: SubmissionValidationContext,
    area: AreaOfLaw,
    settings: RuleSettings,
    field: str,
    pattern: Optional[str],
) -> None:
    value = claim.value_of(field)
    if pattern is None or value is None:
        return
    if re.fullmatch(pattern, str(value)):
        return
    patch = SubmissionValidationError.FIELD_PATTERN_MISMATCH.to_patch(
        field, area.value, pattern, value, field=field
    )
    display = settings.config.display_message_for(field, area, patch.display_message)
    context.add_claim_error(
        claim.id,
        replace(patch, display_message=display, technical_message=patch.display_message),
    )
