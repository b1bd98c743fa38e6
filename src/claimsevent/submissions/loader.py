"""Load submission files into structured data."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .exceptions import SubmissionDataError, SubmissionFormatError, UnsupportedSubmissionFileError
from .mapping import claim_from_dict, parse_bool, parse_submission_status, submission_from_dict
from .models import Claim, Submission


REQUIRED_COLUMNS = [
    "submission_id",
    "office_account_number",
    "area_of_law",
    "submission_period",
    "claim_id",
]

SUBMISSION_COLUMNS = [
    "submission_id",
    "office_account_number",
    "area_of_law",
    "submission_period",
    "submission_status",
    "is_nil_submission",
]


def load_submission(path: Path) -> Submission:
    """Load a submission from a ``.json`` or ``.csv`` file."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".json", ".csv"}:
        raise UnsupportedSubmissionFileError(path=path, suffix=path.suffix or "<none>")
    if not path.is_file():
        raise SubmissionFormatError(path=path, message="submission file not found")
    if suffix == ".json":
        return load_submission_json(path)
    return load_submission_csv(path)


def load_submission_json(path: Path) -> Submission:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise SubmissionFormatError(path=path, message=f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise SubmissionFormatError(path=path, message="submission must be a JSON object")
    return submission_from_dict(data, path=path)


def load_submission_csv(path: Path) -> Submission:
    """Load a submission from CSV, one claim per row.

    Submission columns are repeated on every row and must agree. A nil
    submission is written as a single row with an empty ``claim_id``.
    """

    path = Path(path)
    header: Optional[Dict[str, str]] = None
    claims: List[Claim] = []
    seen_ids: Set[str] = set()
    with path.open("r", newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        if reader.fieldnames is None:
            raise SubmissionFormatError(path=path, message="missing header row")
        _validate_required_columns(path, reader.fieldnames)
        for index, raw in enumerate(reader, start=2):  # row numbers include header
            row_header = {column: (raw.get(column) or "").strip() for column in SUBMISSION_COLUMNS}
            if header is None:
                header = row_header
            else:
                _ensure_consistent(path, index, header, row_header)

            claim_id = (raw.get("claim_id") or "").strip()
            if claim_id == "":
                continue
            if claim_id in seen_ids:
                raise SubmissionDataError(
                    path=path, row=index, column="claim_id", message=f"duplicate claim id '{claim_id}'"
                )
            seen_ids.add(claim_id)
            record = {
                key: value
                for key, value in raw.items()
                if key is not None and key not in SUBMISSION_COLUMNS and key not in {"claim_id", "claim_status"}
            }
            record["id"] = claim_id
            record["status"] = raw.get("claim_status")
            record["submission_id"] = row_header["submission_id"]
            record["submission_period"] = row_header["submission_period"] or None
            record.setdefault("line_number", str(index - 1))
            claims.append(claim_from_dict(record, path=path, row=index))

    if header is None:
        raise SubmissionFormatError(path=path, message="no submission rows found")

    for column in ("submission_id", "office_account_number", "area_of_law"):
        if header[column] == "":
            raise SubmissionDataError(path=path, row=2, column=column, message="value required")

    return Submission(
        submission_id=header["submission_id"],
        office_account_number=header["office_account_number"],
        area_of_law=header["area_of_law"],
        submission_period=header["submission_period"] or None,
        status=parse_submission_status(header["submission_status"], path=path),
        is_nil_submission=parse_bool(header["is_nil_submission"], path=path, column="is_nil_submission", row=2),
        claims=claims,
    )


def _validate_required_columns(path: Path, columns: Iterable[str]) -> None:
    columns = list(columns)
    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    if missing:
        raise SubmissionFormatError(
            path=path,
            message=f"missing required columns: {', '.join(missing)}",
        )


def _ensure_consistent(path: Path, row: int, expected: Dict[str, str], actual: Dict[str, str]) -> None:
    for column in SUBMISSION_COLUMNS:
        if expected[column] != actual[column]:
            raise SubmissionDataError(
                path=path,
                row=row,
                column=column,
                message=f"value '{actual[column]}' differs from first row '{expected[column]}'",
            )
