"""Tests for duplicate claim detection."""

from __future__ import annotations

from datetime import date

import pytest

from claimsevent.exceptions import StrategyConfigurationError
from claimsevent.submissions import Claim, ClaimStatus
from claimsevent.validation import AreaOfLaw, SubmissionValidationContext
from claimsevent.validators import (
    CrimeLowerDuplicateStrategy,
    DuplicateClaimValidator,
    LegalHelpDuplicateStrategy,
    default_duplicate_validator,
)
from claimsevent.validators.duplicates import is_disbursement_duplicate, select_anchor_claim

EXISTING = "INVALID_CLAIM_HAS_DUPLICATE_IN_EXISTING_SUBMISSION"
ANOTHER = "INVALID_CLAIM_HAS_DUPLICATE_IN_ANOTHER_SUBMISSION"


class FakeLookup:
    def __init__(self, claims=None):
        self.claims = claims or []
        self.calls = []

    def find_claims(self, office_code, **filters):
        self.calls.append((office_code, filters))
        return list(self.claims)

    def find_submissions(self, office_code, *, area_of_law, submission_period):
        return []


def _codes(context: SubmissionValidationContext, claim_id: str):
    report = context.get_claim_report(claim_id)
    return [error.code for error in report.errors] if report else []


def _check_all(validator, claims, area, context=None):
    context = context or SubmissionValidationContext()
    for claim in claims:
        validator.validate(claim, claims, area, "0P322F", context)
    return context


def test_crime_lower_duplicates_in_current_submission() -> None:
    claims = [
        Claim(id="c1", fee_code="INVC", unique_file_number="010125/001"),
        Claim(id="c2", fee_code="INVC", unique_file_number="010125/001"),
        Claim(id="c3", fee_code="INVC", unique_file_number="020125/001"),
    ]
    context = _check_all(default_duplicate_validator(), claims, AreaOfLaw.CRIME_LOWER)
    assert _codes(context, "c1") == [EXISTING]
    assert _codes(context, "c2") == [EXISTING]
    assert _codes(context, "c3") == []


def test_inactive_claims_are_not_duplicates() -> None:
    claims = [
        Claim(id="c1", fee_code="INVC", unique_file_number="010125/001"),
        Claim(id="c2", fee_code="INVC", unique_file_number="010125/001", status=ClaimStatus.INVALID),
    ]
    context = SubmissionValidationContext()
    default_duplicate_validator().validate(claims[0], claims, AreaOfLaw.CRIME_LOWER, "0P322F", context)
    assert _codes(context, "c1") == []


def test_claims_missing_key_fields_are_skipped() -> None:
    claims = [Claim(id="c1", fee_code="INVC"), Claim(id="c2", fee_code="INVC")]
    context = _check_all(default_duplicate_validator(), claims, AreaOfLaw.CRIME_LOWER)
    assert context.get_claim_reports() == []


def test_previous_submission_duplicate_and_current_duplicate_both_reported() -> None:
    lookup = FakeLookup(
        [
            Claim(id="old", fee_code="INVC", unique_file_number="010125/001"),
            Claim(id="c2", fee_code="INVC", unique_file_number="010125/001"),
        ]
    )
    claims = [
        Claim(id="c1", fee_code="INVC", unique_file_number="010125/001"),
        Claim(id="c2", fee_code="INVC", unique_file_number="010125/001"),
    ]
    validator = default_duplicate_validator(lookup)
    context = SubmissionValidationContext()
    validator.validate(claims[0], claims, AreaOfLaw.CRIME_LOWER, "0P322F", context)

    assert _codes(context, "c1") == [EXISTING, ANOTHER]
    office, filters = lookup.calls[0]
    assert office == "0P322F"
    assert filters["fee_code"] == "INVC"
    assert filters["unique_file_number"] == "010125/001"


def test_lookup_results_from_current_submission_are_ignored() -> None:
    claims = [Claim(id="c1", fee_code="INVC", unique_file_number="010125/001")]
    lookup = FakeLookup([Claim(id="c1", fee_code="INVC", unique_file_number="010125/001")])
    context = _check_all(default_duplicate_validator(lookup), claims, AreaOfLaw.CRIME_LOWER)
    assert _codes(context, "c1") == []


def test_legal_help_key_includes_client_number() -> None:
    claims = [
        Claim(id="c1", fee_code="FC1", unique_file_number="010125/001", unique_client_number="A"),
        Claim(id="c2", fee_code="FC1", unique_file_number="010125/001", unique_client_number="B"),
        Claim(id="c3", fee_code="FC1", unique_file_number="010125/001", unique_client_number="A"),
    ]
    context = _check_all(default_duplicate_validator(), claims, AreaOfLaw.LEGAL_HELP)
    assert _codes(context, "c1") == [EXISTING]
    assert _codes(context, "c2") == []
    assert _codes(context, "c3") == [EXISTING]


def test_mediation_matches_on_case_id() -> None:
    claims = [
        Claim(id="c1", fee_code="MED1", unique_case_id="CASE-1", unique_file_number="010125/001"),
        Claim(id="c2", fee_code="MED1", unique_case_id="CASE-1", unique_file_number="020125/001"),
    ]
    context = _check_all(default_duplicate_validator(), claims, AreaOfLaw.MEDIATION)
    assert _codes(context, "c1") == [EXISTING]


def test_claims_flagged_for_retry_are_skipped() -> None:
    claims = [
        Claim(id="c1", fee_code="INVC", unique_file_number="010125/001"),
        Claim(id="c2", fee_code="INVC", unique_file_number="010125/001"),
    ]
    context = SubmissionValidationContext()
    context.flag_for_retry("c1")
    _check_all(default_duplicate_validator(), claims, AreaOfLaw.CRIME_LOWER, context)
    assert _codes(context, "c1") == []
    assert _codes(context, "c2") == [EXISTING]


def test_strategy_table_must_cover_every_area() -> None:
    with pytest.raises(StrategyConfigurationError) as excinfo:
        DuplicateClaimValidator(
            {
                AreaOfLaw.CRIME_LOWER: CrimeLowerDuplicateStrategy(),
                AreaOfLaw.LEGAL_HELP: LegalHelpDuplicateStrategy(),
            }
        )
    assert "MEDIATION" in str(excinfo.value)


def test_strategy_for_returns_registered_strategy() -> None:
    validator = default_duplicate_validator()
    assert isinstance(validator.strategy_for(AreaOfLaw.CRIME_LOWER), CrimeLowerDuplicateStrategy)


def _disbursement(claim_id: str, concluded: str, period: str = "APR-2025") -> Claim:
    return Claim(
        id=claim_id,
        fee_code="FC1",
        fee_type="DISB_ONLY",
        unique_file_number="010125/001",
        unique_client_number="A",
        case_concluded_date=concluded,
        submission_period=period,
    )


def test_disbursement_duplicate_inside_window() -> None:
    incoming = _disbursement("c1", "2025-03-15")
    lookup = FakeLookup([_disbursement("old", "2025-03-10", "MAR-2025")])
    context = _check_all(default_duplicate_validator(lookup), [incoming], AreaOfLaw.LEGAL_HELP)
    assert _codes(context, "c1") == [ANOTHER]


def test_disbursement_outside_window_is_not_duplicate() -> None:
    incoming = _disbursement("c1", "2025-03-15")
    lookup = FakeLookup([_disbursement("old", "2025-01-10", "JAN-2025")])
    context = _check_all(default_duplicate_validator(lookup), [incoming], AreaOfLaw.LEGAL_HELP)
    assert _codes(context, "c1") == []


def test_disbursement_without_concluded_date_is_not_duplicate() -> None:
    incoming = _disbursement("c1", None)
    lookup = FakeLookup([_disbursement("old", "2025-03-10", "MAR-2025")])
    context = _check_all(default_duplicate_validator(lookup), [incoming], AreaOfLaw.LEGAL_HELP)
    assert _codes(context, "c1") == []


def test_anchor_is_closest_date_then_latest_period() -> None:
    candidates = [
        _disbursement("far", "2025-01-01", "FEB-2025"),
        _disbursement("near-old", "2025-03-12", "MAR-2025"),
        _disbursement("near-new", "2025-03-18", "APR-2025"),
    ]
    assert select_anchor_claim(candidates, date(2025, 3, 15)).id == "near-new"


def test_disbursement_cutoff_boundary() -> None:
    # APR-2025 minus three months is JAN-2025, so the cutoff is 2025-02-20
    anchor = _disbursement("old", "2025-02-20", "MAR-2025")
    assert not is_disbursement_duplicate(_disbursement("c1", "2025-03-15"), anchor)
    anchor = _disbursement("old", "2025-02-21", "MAR-2025")
    assert is_disbursement_duplicate(_disbursement("c1", "2025-03-15"), anchor)
