"""Submission loading errors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..exceptions import ClaimsEventError


class SubmissionError(ClaimsEventError):
    """Base class for submission input issues."""


@dataclass
class SubmissionFormatError(SubmissionError):
    path: Path
    message: str

    def __post_init__(self) -> None:
        super().__init__(f"{self.message} ({self.path})")


@dataclass
class SubmissionDataError(SubmissionError):
    """Raised when a claim record cannot be converted."""

    path: Path
    row: int
    column: str
    message: str

    def __post_init__(self) -> None:
        location = f"{self.path.name}:row {self.row},col {self.column}"
        super().__init__(f"{location}: {self.message}")


@dataclass
class UnsupportedSubmissionFileError(SubmissionError):
    path: Path
    suffix: str

    def __post_init__(self) -> None:
        super().__init__(f"unsupported submission file type '{self.suffix}' ({self.path})")
