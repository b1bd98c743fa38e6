"""Conversions between API/file records and submission models."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set

from .exceptions import SubmissionDataError
from .models import Claim, ClaimStatus, Submission, SubmissionStatus


CLAIM_RECORD_KEYS = frozenset(
    {
        "id",
        "status",
        "submission_id",
        "submission_period",
        "line_number",
        "fee_code",
        "fee_type",
        "unique_file_number",
        "unique_client_number",
        "unique_case_id",
        "case_start_date",
        "case_concluded_date",
        "transfer_date",
        "representation_order_date",
        "client_forename",
        "client_surname",
        "client_date_of_birth",
        "client2_date_of_birth",
        "outcome_code",
        "stage_reached_code",
        "matter_type_code",
        "schedule_reference",
        "net_profit_costs_amount",
        "disbursements_vat_amount",
    }
)


def claim_from_dict(record: Mapping[str, Any], *, path: Path, row: int) -> Claim:
    """Build a :class:`Claim` from a JSON object or CSV row."""

    def text(name: str) -> Optional[str]:
        value = record.get(name)
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def amount(name: str) -> Optional[Decimal]:
        value = text(name)
        if value is None:
            return None
        try:
            result = Decimal(value)
        except InvalidOperation as exc:
            raise SubmissionDataError(
                path=path, row=row, column=name, message=f"invalid amount '{value}'"
            ) from exc
        if not result.is_finite():
            raise SubmissionDataError(
                path=path, row=row, column=name, message=f"invalid amount '{value}'"
            )
        return result

    claim_id = text("id")
    if claim_id is None:
        raise SubmissionDataError(path=path, row=row, column="id", message="value required")

    status_value = text("status")
    if status_value is None:
        status = ClaimStatus.READY_TO_PROCESS
    else:
        try:
            status = ClaimStatus(status_value.upper())
        except ValueError as exc:
            raise SubmissionDataError(
                path=path, row=row, column="status", message=f"invalid claim status '{status_value}'"
            ) from exc

    line_value = text("line_number")
    if line_value is None:
        line_number = None
    else:
        try:
            line_number = int(line_value)
        except ValueError as exc:
            raise SubmissionDataError(
                path=path, row=row, column="line_number", message=f"invalid line number '{line_value}'"
            ) from exc

    extra = {
        str(key): str(value).strip()
        for key, value in record.items()
        if key not in CLAIM_RECORD_KEYS and value is not None and str(value).strip() != ""
    }

    return Claim(
        id=claim_id,
        status=status,
        submission_id=text("submission_id"),
        submission_period=text("submission_period"),
        line_number=line_number,
        fee_code=text("fee_code"),
        fee_type=text("fee_type"),
        unique_file_number=text("unique_file_number"),
        unique_client_number=text("unique_client_number"),
        unique_case_id=text("unique_case_id"),
        case_start_date=text("case_start_date"),
        case_concluded_date=text("case_concluded_date"),
        transfer_date=text("transfer_date"),
        representation_order_date=text("representation_order_date"),
        client_forename=text("client_forename"),
        client_surname=text("client_surname"),
        client_date_of_birth=text("client_date_of_birth"),
        client2_date_of_birth=text("client2_date_of_birth"),
        outcome_code=text("outcome_code"),
        stage_reached_code=text("stage_reached_code"),
        matter_type_code=text("matter_type_code"),
        schedule_reference=text("schedule_reference"),
        net_profit_costs_amount=amount("net_profit_costs_amount"),
        disbursements_vat_amount=amount("disbursements_vat_amount"),
        extra=extra,
    )


def claim_to_dict(claim: Claim) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": claim.id,
        "status": claim.status.value,
        "submission_id": claim.submission_id,
        "submission_period": claim.submission_period,
        "line_number": claim.line_number,
        "fee_code": claim.fee_code,
        "fee_type": claim.fee_type,
        "unique_file_number": claim.unique_file_number,
        "unique_client_number": claim.unique_client_number,
        "unique_case_id": claim.unique_case_id,
        "case_start_date": claim.case_start_date,
        "case_concluded_date": claim.case_concluded_date,
        "transfer_date": claim.transfer_date,
        "representation_order_date": claim.representation_order_date,
        "client_forename": claim.client_forename,
        "client_surname": claim.client_surname,
        "client_date_of_birth": claim.client_date_of_birth,
        "client2_date_of_birth": claim.client2_date_of_birth,
        "outcome_code": claim.outcome_code,
        "stage_reached_code": claim.stage_reached_code,
        "matter_type_code": claim.matter_type_code,
        "schedule_reference": claim.schedule_reference,
        "net_profit_costs_amount": _format_amount(claim.net_profit_costs_amount),
        "disbursements_vat_amount": _format_amount(claim.disbursements_vat_amount),
    }
    record.update(claim.extra)
    return record


def submission_from_dict(record: Mapping[str, Any], *, path: Path) -> Submission:
    """Build a :class:`Submission` from a JSON document.

    Claims may be embedded under ``claims``; each is converted with
    :func:`claim_from_dict` using its 1-based position as the row number.
    """

    def require(name: str) -> str:
        value = record.get(name)
        if value is None or str(value).strip() == "":
            raise SubmissionDataError(path=path, row=0, column=name, message="value required")
        return str(value).strip()

    submission_id = require("submission_id")
    office = require("office_account_number")
    area_of_law = require("area_of_law")

    raw_period = record.get("submission_period")
    period = str(raw_period).strip() if raw_period is not None else ""
    period = period or None

    status = parse_submission_status(record.get("status"), path=path)
    is_nil = parse_bool(record.get("is_nil_submission"), path=path, column="is_nil_submission")

    raw_claims = record.get("claims") or []
    if not isinstance(raw_claims, list):
        raise SubmissionDataError(path=path, row=0, column="claims", message="claims must be a list")

    claims: List[Claim] = []
    seen_ids: Set[str] = set()
    for index, raw in enumerate(raw_claims, start=1):
        if not isinstance(raw, Mapping):
            raise SubmissionDataError(path=path, row=index, column="claims", message="claim must be an object")
        claim = claim_from_dict(raw, path=path, row=index)
        if claim.id in seen_ids:
            raise SubmissionDataError(
                path=path, row=index, column="id", message=f"duplicate claim id '{claim.id}'"
            )
        seen_ids.add(claim.id)
        if claim.submission_id is None:
            claim.submission_id = submission_id
        if claim.submission_period is None:
            claim.submission_period = period
        claims.append(claim)

    return Submission(
        submission_id=submission_id,
        office_account_number=office,
        area_of_law=area_of_law,
        submission_period=period,
        status=status,
        is_nil_submission=is_nil,
        claims=claims,
    )


def submission_to_dict(submission: Submission) -> Dict[str, Any]:
    return {
        "submission_id": submission.submission_id,
        "office_account_number": submission.office_account_number,
        "area_of_law": submission.area_of_law,
        "submission_period": submission.submission_period,
        "status": submission.status.value if submission.status else None,
        "is_nil_submission": submission.is_nil_submission,
        "claims": [claim_to_dict(claim) for claim in submission.claims],
    }


def parse_submission_status(value: Any, *, path: Path) -> Optional[SubmissionStatus]:
    if value is None or str(value).strip() == "":
        return None
    text = str(value).strip().upper()
    try:
        return SubmissionStatus(text)
    except ValueError as exc:
        raise SubmissionDataError(
            path=path, row=0, column="status", message=f"invalid submission status '{value}'"
        ) from exc


def parse_bool(value: Any, *, path: Path, column: str, row: int = 0) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"", "false", "f", "0", "no", "n"}:
        return False
    if text in {"true", "t", "1", "yes", "y"}:
        return True
    raise SubmissionDataError(path=path, row=row, column=column, message=f"invalid boolean '{value}'")


def _format_amount(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)
