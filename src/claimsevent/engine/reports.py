"""Write validation reports to disk."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from .validate import SubmissionValidationResult


ERROR_TABLE_COLUMNS = ["claim_id", "code", "field", "source", "type", "message"]


def write_report(result: SubmissionValidationResult, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(result.as_dict(), indent=2) + "\n", encoding="utf-8")


def write_error_table(result: SubmissionValidationResult, path: Path) -> int:
    """Write one CSV row per validation message and return the row count."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    rows = result.error_rows()
    pd.DataFrame(rows, columns=ERROR_TABLE_COLUMNS).to_csv(path, index=False)
    return len(rows)
