"""Duplicate claim detection, selected by area of law."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Mapping, Optional

from ..exceptions import StrategyConfigurationError
from ..submissions import Claim
from ..validation import AreaOfLaw, SubmissionValidationContext, SubmissionValidationError
from .lookup import ACTIVE_CLAIM_STATUSES, ClaimsLookup
from .periods import add_months, parse_iso_date, parse_submission_period, twentieth_of_following_month


logger = logging.getLogger(__name__)

DISBURSEMENT_FEE_TYPE = "DISB_ONLY"
RULE_B_MONTHS = 3

DuplicateMatch = Callable[[Claim], bool]


class DuplicateClaimStrategy:
    """Base class for per-area duplicate checks.

    Subclasses implement :meth:`validate`, recording errors on the context for
    the claim under test. ``lookup`` gives access to earlier submissions for
    the same office; without one only the current submission is checked.
    """

    area_of_law: AreaOfLaw

    def __init__(self, lookup: Optional[ClaimsLookup] = None) -> None:
        self.lookup = lookup

    def validate(
        self,
        claim: Claim,
        submission_claims: List[Claim],
        office_code: str,
        context: SubmissionValidationContext,
    ) -> None:
        raise NotImplementedError

    def current_duplicates(
        self, claim: Claim, submission_claims: List[Claim], matches: DuplicateMatch
    ) -> List[Claim]:
        return [
            other
            for other in submission_claims
            if other.id != claim.id and other.status in ACTIVE_CLAIM_STATUSES and matches(other)
        ]

    def previous_duplicates(
        self,
        office_code: str,
        submission_claims: List[Claim],
        *,
        fee_code: Optional[str],
        unique_file_number: Optional[str] = None,
        unique_client_number: Optional[str] = None,
        unique_case_id: Optional[str] = None,
    ) -> List[Claim]:
        if self.lookup is None:
            return []
        current_ids = {claim.id for claim in submission_claims}
        found = self.lookup.find_claims(
            office_code,
            fee_code=fee_code,
            unique_file_number=unique_file_number,
            unique_client_number=unique_client_number,
            unique_case_id=unique_case_id,
        )
        return [previous for previous in found if previous.id not in current_ids]


class CrimeLowerDuplicateStrategy(DuplicateClaimStrategy):
    area_of_law = AreaOfLaw.CRIME_LOWER

    def validate(self, claim, submission_claims, office_code, context) -> None:
        if claim.fee_code is None or claim.unique_file_number is None:
            return
        current = self.current_duplicates(
            claim,
            submission_claims,
            lambda other: other.fee_code == claim.fee_code
            and other.unique_file_number == claim.unique_file_number,
        )
        previous = self.previous_duplicates(
            office_code,
            submission_claims,
            fee_code=claim.fee_code,
            unique_file_number=claim.unique_file_number,
        )
        _report(claim, context, current, previous)


class LegalHelpDuplicateStrategy(DuplicateClaimStrategy):
    """Legal help claims match on fee code, file number and client number.

    Disbursement-only claims are compared with earlier submissions using the
    case concluded date window in :func:`is_disbursement_duplicate` instead of
    a plain key match.
    """

    area_of_law = AreaOfLaw.LEGAL_HELP

    def validate(self, claim, submission_claims, office_code, context) -> None:
        if claim.fee_code is None or claim.unique_file_number is None:
            return
        current = self.current_duplicates(
            claim,
            submission_claims,
            lambda other: other.fee_code == claim.fee_code
            and other.unique_file_number == claim.unique_file_number
            and other.unique_client_number == claim.unique_client_number,
        )
        previous = self.previous_duplicates(
            office_code,
            submission_claims,
            fee_code=claim.fee_code,
            unique_file_number=claim.unique_file_number,
            unique_client_number=claim.unique_client_number,
        )
        if claim.fee_type == DISBURSEMENT_FEE_TYPE:
            previous = self._disbursement_duplicates(claim, previous)
        _report(claim, context, current, previous)

    def _disbursement_duplicates(self, claim: Claim, candidates: List[Claim]) -> List[Claim]:
        incoming = parse_iso_date(claim.case_concluded_date)
        if incoming is None:
            return []
        eligible = [other for other in candidates if parse_iso_date(other.case_concluded_date) is not None]
        if not eligible:
            return []
        anchor = select_anchor_claim(eligible, incoming)
        if is_disbursement_duplicate(claim, anchor):
            return [anchor]
        return []


class MediationDuplicateStrategy(DuplicateClaimStrategy):
    area_of_law = AreaOfLaw.MEDIATION

    def validate(self, claim, submission_claims, office_code, context) -> None:
        if claim.fee_code is None or claim.unique_case_id is None:
            return
        current = self.current_duplicates(
            claim,
            submission_claims,
            lambda other: other.fee_code == claim.fee_code
            and other.unique_case_id == claim.unique_case_id,
        )
        previous = self.previous_duplicates(
            office_code,
            submission_claims,
            fee_code=claim.fee_code,
            unique_case_id=claim.unique_case_id,
        )
        _report(claim, context, current, previous)


class DuplicateClaimValidator:
    """Dispatch duplicate checks to the strategy registered for an area of law.

    The strategy table must cover every :class:`AreaOfLaw`; an incomplete
    table is rejected when the validator is built.
    """

    def __init__(self, strategies: Mapping[AreaOfLaw, DuplicateClaimStrategy]) -> None:
        missing = [area.value for area in AreaOfLaw if area not in strategies]
        if missing:
            raise StrategyConfigurationError(
                f"no duplicate strategy registered for: {', '.join(missing)}"
            )
        self._strategies: Dict[AreaOfLaw, DuplicateClaimStrategy] = dict(strategies)

    def strategy_for(self, area: AreaOfLaw) -> DuplicateClaimStrategy:
        return self._strategies[area]

    def validate(
        self,
        claim: Claim,
        submission_claims: List[Claim],
        area: AreaOfLaw,
        office_code: str,
        context: SubmissionValidationContext,
    ) -> None:
        if context.is_flagged_for_retry(claim.id):
            logger.debug("Skipping duplicate validation for claim %s flagged for retry", claim.id)
            return
        logger.debug("Validating duplicates for claim %s", claim.id)
        self.strategy_for(area).validate(claim, submission_claims, office_code, context)
        logger.debug("Duplicate validation completed for claim %s", claim.id)


def default_duplicate_validator(lookup: Optional[ClaimsLookup] = None) -> DuplicateClaimValidator:
    return DuplicateClaimValidator(
        {
            AreaOfLaw.CRIME_LOWER: CrimeLowerDuplicateStrategy(lookup),
            AreaOfLaw.LEGAL_HELP: LegalHelpDuplicateStrategy(lookup),
            AreaOfLaw.MEDIATION: MediationDuplicateStrategy(lookup),
        }
    )


def select_anchor_claim(candidates: List[Claim], incoming: date) -> Claim:
    """Pick the candidate whose case concluded date is closest to *incoming*.

    Ties go to the candidate from the later submission period. Candidates
    without a usable date or period sort last.
    """

    def sort_key(candidate: Claim):
        concluded = parse_iso_date(candidate.case_concluded_date)
        distance = abs((concluded - incoming).days) if concluded is not None else float("inf")
        period = parse_submission_period(candidate.submission_period)
        # later periods first; missing periods last
        period_key = (0, -period[0], -period[1]) if period is not None else (1, 0, 0)
        return (distance, period_key)

    return min(candidates, key=sort_key)


def is_disbursement_duplicate(incoming: Claim, anchor: Claim) -> bool:
    """Apply the case concluded date window between *incoming* and *anchor*.

    The anchor period is the later of the two submission periods. The cutoff
    is the 20th of the month after (anchor period - 3 months); the claim is a
    duplicate when the earlier concluded date falls strictly after the cutoff.
    """

    incoming_period = parse_submission_period(incoming.submission_period)
    anchor_period = parse_submission_period(anchor.submission_period)
    incoming_date = parse_iso_date(incoming.case_concluded_date)
    anchor_date = parse_iso_date(anchor.case_concluded_date)
    if None in (incoming_period, anchor_period, incoming_date, anchor_date):
        return False
    later_period = max(incoming_period, anchor_period)
    cutoff = twentieth_of_following_month(add_months(later_period, -RULE_B_MONTHS))
    return min(incoming_date, anchor_date) > cutoff


def _report(
    claim: Claim,
    context: SubmissionValidationContext,
    current: List[Claim],
    previous: List[Claim],
) -> None:
    errors = []
    if current:
        _log_duplicates(claim, current)
        errors.append(SubmissionValidationError.INVALID_CLAIM_HAS_DUPLICATE_IN_EXISTING_SUBMISSION.to_patch())
    if previous:
        _log_duplicates(claim, previous)
        errors.append(SubmissionValidationError.INVALID_CLAIM_HAS_DUPLICATE_IN_ANOTHER_SUBMISSION.to_patch())
    if errors:
        context.add_claim_errors(claim.id, errors)


def _log_duplicates(claim: Claim, duplicates: List[Claim]) -> None:
    logger.debug(
        "%d duplicate claims found matching claim %s. Duplicates: %s",
        len(duplicates),
        claim.id,
        ", ".join(duplicate.id for duplicate in duplicates),
    )
