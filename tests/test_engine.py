"""Tests for the submission validation pipeline."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from claimsevent.client import ClaimsApiServerErrorException, UpdateClaimRequest
from claimsevent.config import ValidationConfig
from claimsevent.engine import publish_result, validate_submission, write_error_table, write_report
from claimsevent.exceptions import UnknownAreaOfLawError
from claimsevent.submissions import Claim, ClaimStatus, Submission, SubmissionStatus
from claimsevent.validation import ClaimValidationReport, SubmissionValidationError

TODAY = date(2025, 6, 15)

CONFIG = ValidationConfig.model_validate(
    {
        "mandatory_fields": {
            "LEGAL HELP": ["case_start_date"],
            "CRIME LOWER": ["stage_reached_code", "net_profit_costs_amount"],
            "MEDIATION": ["unique_case_id"],
        }
    }
)


def _claim(claim_id: str, **overrides) -> Claim:
    values = {
        "id": claim_id,
        "submission_period": "APR-2025",
        "fee_code": "INVC",
        "unique_file_number": "010125/001",
        "stage_reached_code": "INVC",
        "case_concluded_date": "2025-04-10",
        "net_profit_costs_amount": Decimal("100.00"),
    }
    values.update(overrides)
    return Claim(**values)


def _submission(claims, **overrides) -> Submission:
    values = {
        "submission_id": "sub-1",
        "office_account_number": "0P322F",
        "area_of_law": "CRIME LOWER",
        "submission_period": "APR-2025",
        "status": SubmissionStatus.READY_FOR_VALIDATION,
        "claims": claims,
    }
    values.update(overrides)
    return Submission(**values)


class FakeClient:
    def __init__(self, *, fail_claims=(), fail_lookup=False):
        self.fail_claims = set(fail_claims)
        self.fail_lookup = fail_lookup
        self.claim_updates = []
        self.submission_updates = []

    def find_claims(self, office_code, **filters):
        if self.fail_lookup:
            raise ClaimsApiServerErrorException("down", "GET", "/api/v0/claims", 503)
        return []

    def find_submissions(self, office_code, *, area_of_law, submission_period):
        return []

    def update_claim(self, submission_id, claim_id, request):
        if claim_id in self.fail_claims:
            raise ClaimsApiServerErrorException("down", "PATCH", f"/claims/{claim_id}", 500)
        self.claim_updates.append((submission_id, claim_id, request.as_dict()))

    def update_submission(self, submission_id, request):
        self.submission_updates.append((submission_id, request.as_dict()))


def test_valid_submission_succeeds() -> None:
    submission = _submission([_claim("c1")])
    result = validate_submission(submission, CONFIG, today=TODAY)

    assert not result.has_errors
    assert result.submission_status is SubmissionStatus.VALIDATION_SUCCEEDED
    assert submission.status is SubmissionStatus.VALIDATION_IN_PROGRESS
    assert result.claim_updates["c1"].as_dict() == {"claim_status": "VALID", "errors": []}
    payload = result.as_dict()
    assert payload["status"] == "VALIDATION_SUCCEEDED"
    assert payload["summary"] == {
        "claims": 1,
        "validated_claims": 1,
        "retry_claims": 0,
        "invalid_claims": 0,
        "submission_errors": 0,
    }


def test_claim_errors_fail_the_submission() -> None:
    claims = [
        _claim("c1", stage_reached_code=None),
        _claim("c2", unique_file_number="020125/001"),
    ]
    result = validate_submission(_submission(claims), CONFIG, today=TODAY)

    assert result.submission_status is SubmissionStatus.VALIDATION_FAILED
    assert result.claim_updates["c1"].claim_status is ClaimStatus.INVALID
    assert result.claim_updates["c1"].errors == [
        "stage_reached_code is required for area of law: CRIME LOWER"
    ]
    assert result.claim_updates["c2"].claim_status is ClaimStatus.VALID
    assert result.invalid_claim_count == 1


def test_duplicate_claims_reported_on_both_claims() -> None:
    result = validate_submission(_submission([_claim("c1"), _claim("c2")]), CONFIG, today=TODAY)
    expected = ["A duplicate of this claim was found in the current submission"]
    assert result.claim_updates["c1"].errors == expected
    assert result.claim_updates["c2"].errors == expected


def test_submission_errors_fail_without_claim_errors() -> None:
    result = validate_submission(
        _submission([_claim("c1")], submission_period="JUN-2025", status=SubmissionStatus.CREATED),
        CONFIG,
        today=TODAY,
    )
    codes = [error.code for error in result.context.get_submission_validation_errors()]
    assert codes == ["SUBMISSION_STATE_INVALID", "SUBMISSION_PERIOD_SAME_MONTH"]
    assert result.claim_updates["c1"].claim_status is ClaimStatus.VALID
    assert result.submission_status is SubmissionStatus.VALIDATION_FAILED


def test_only_ready_claims_are_validated_and_updated() -> None:
    claims = [
        _claim("c1", unique_file_number="020125/001"),
        _claim("c2", stage_reached_code=None, status=ClaimStatus.INVALID),
        _claim("c3", unique_file_number="030125/001", status=ClaimStatus.VALID),
    ]
    result = validate_submission(_submission(claims), CONFIG, today=TODAY)

    assert list(result.claim_updates) == ["c1"]
    assert result.context.claim_ids() == ["c1"]
    assert result.submission_status is SubmissionStatus.VALIDATION_SUCCEEDED
    assert result.as_dict()["summary"]["claims"] == 3
    assert result.as_dict()["summary"]["validated_claims"] == 1


def test_claims_without_errors_still_get_a_report() -> None:
    claims = [
        _claim("c1", unique_file_number="020125/001"),
        _claim("c2", stage_reached_code=None),
        _claim("c3", unique_file_number="030125/001"),
    ]
    result = validate_submission(_submission(claims), CONFIG, today=TODAY)

    assert result.context.claim_ids() == ["c1", "c2", "c3"]
    assert result.context.get_claim_report("c1").errors == []
    assert list(result.claim_updates) == ["c1", "c2", "c3"]
    assert [update.claim_status for update in result.claim_updates.values()] == [
        ClaimStatus.VALID,
        ClaimStatus.INVALID,
        ClaimStatus.VALID,
    ]


def test_already_valid_claim_is_a_duplicate_candidate() -> None:
    claims = [_claim("c1"), _claim("c2", status=ClaimStatus.VALID)]
    result = validate_submission(_submission(claims), CONFIG, today=TODAY)

    assert list(result.claim_updates) == ["c1"]
    assert result.claim_updates["c1"].errors == [
        "A duplicate of this claim was found in the current submission"
    ]


def test_unknown_area_of_law_raises_before_rules() -> None:
    submission = _submission([_claim("c1")], area_of_law="FAMILY")
    with pytest.raises(UnknownAreaOfLawError):
        validate_submission(submission, CONFIG, today=TODAY)
    assert submission.status is SubmissionStatus.READY_FOR_VALIDATION


def test_lookup_server_error_flags_claim_for_retry() -> None:
    result = validate_submission(
        _submission([_claim("c1")]),
        CONFIG,
        lookup=FakeClient(fail_lookup=True),
        today=TODAY,
    )
    assert result.context.is_flagged_for_retry("c1")
    assert result.claim_updates == {}
    assert result.has_pending_retries
    assert result.submission_status is SubmissionStatus.VALIDATION_IN_PROGRESS
    assert result.as_dict()["summary"]["retry_claims"] == 1


def test_publish_leaves_submission_in_progress_while_claims_await_retry() -> None:
    claims = [_claim("c1"), _claim("c2", unique_file_number="020125/001")]
    client = FakeClient(fail_lookup=True)
    result = validate_submission(_submission(claims), CONFIG, lookup=client, today=TODAY)

    published = publish_result(result, client)

    assert client.claim_updates == []
    assert client.submission_updates == []
    assert published.submission_status is SubmissionStatus.VALIDATION_IN_PROGRESS
    assert published.submission_updated is False


def test_retry_outranks_errors_on_other_claims() -> None:
    claims = [_claim("c1", stage_reached_code=None), _claim("c2", unique_file_number="020125/001")]
    result = validate_submission(
        _submission(claims), CONFIG, lookup=FakeClient(fail_lookup=True), today=TODAY
    )
    assert result.has_errors
    assert result.submission_status is SubmissionStatus.VALIDATION_IN_PROGRESS


def test_error_rows_and_csv_table(tmp_path: Path) -> None:
    claims = [_claim("c1", stage_reached_code=None)]
    result = validate_submission(_submission(claims, submission_period=None), CONFIG, today=TODAY)

    out = tmp_path / "reports" / "errors.csv"
    count = write_error_table(result, out)
    frame = pd.read_csv(out)

    assert count == len(frame) == 2
    assert list(frame.columns) == ["claim_id", "code", "field", "source", "type", "message"]
    assert frame.loc[0, "code"] == "SUBMISSION_PERIOD_MISSING"
    assert pd.isna(frame.loc[0, "claim_id"])
    assert frame.loc[1, "claim_id"] == "c1"
    assert frame.loc[1, "field"] == "stage_reached_code"


def test_write_report(tmp_path: Path) -> None:
    result = validate_submission(_submission([_claim("c1")]), CONFIG, today=TODAY)
    out = tmp_path / "report.json"
    write_report(result, out)
    assert '"status": "VALIDATION_SUCCEEDED"' in out.read_text(encoding="utf-8")


def test_publish_sends_claims_then_submission() -> None:
    claims = [_claim("c1", stage_reached_code=None), _claim("c2", unique_file_number="020125/001")]
    result = validate_submission(_submission(claims), CONFIG, today=TODAY)
    client = FakeClient()

    published = publish_result(result, client)

    assert [update[1] for update in client.claim_updates] == ["c1", "c2"]
    assert client.claim_updates[0][2]["claim_status"] == "INVALID"
    submission_id, body = client.submission_updates[0]
    assert submission_id == "sub-1"
    assert body["status"] == "VALIDATION_FAILED"
    assert published.as_dict() == {
        "submission_id": "sub-1",
        "updated_claims": ["c1", "c2"],
        "submission_status": "VALIDATION_FAILED",
        "submission_updated": True,
    }


def test_publish_propagates_client_errors() -> None:
    result = validate_submission(
        _submission([_claim("c1"), _claim("c2", unique_file_number="020125/001")]),
        CONFIG,
        today=TODAY,
    )
    client = FakeClient(fail_claims={"c2"})
    with pytest.raises(ClaimsApiServerErrorException):
        publish_result(result, client)
    assert [update[1] for update in client.claim_updates] == ["c1"]
    assert client.submission_updates == []


def test_update_claim_request_from_report() -> None:
    assert UpdateClaimRequest.from_report(None).as_dict() == {"claim_status": "VALID", "errors": []}
    report = ClaimValidationReport(claim_id="c1")
    assert UpdateClaimRequest.from_report(report).claim_status is ClaimStatus.VALID

    report.add_error(SubmissionValidationError.DISBURSEMENTS_VAT_TOO_HIGH.to_patch())
    report.add_error(SubmissionValidationError.INVALID_DATE_IN_UNIQUE_FILE_NUMBER.to_patch())
    request = UpdateClaimRequest.from_report(report)
    assert request.claim_status is ClaimStatus.INVALID
    assert request.errors == [
        "Disbursements VAT Amount has exceeded the maximum accepted value",
        "Unique File Number must contain a date in the past, in the format DDMMYY/NNN",
    ]


def test_update_claim_request_rejects_ready_status() -> None:
    with pytest.raises(ValueError):
        UpdateClaimRequest(claim_status=ClaimStatus.READY_TO_PROCESS)
    assert UpdateClaimRequest(claim_status="NOT_VALIDATED").claim_status is ClaimStatus.NOT_VALIDATED
