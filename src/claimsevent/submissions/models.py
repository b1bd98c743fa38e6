"""Data models for submissions and their claims."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class ClaimStatus(str, Enum):
    READY_TO_PROCESS = "READY_TO_PROCESS"
    VALID = "VALID"
    INVALID = "INVALID"
    NOT_VALIDATED = "NOT_VALIDATED"


class SubmissionStatus(str, Enum):
    CREATED = "CREATED"
    READY_FOR_VALIDATION = "READY_FOR_VALIDATION"
    VALIDATION_IN_PROGRESS = "VALIDATION_IN_PROGRESS"
    VALIDATION_SUCCEEDED = "VALIDATION_SUCCEEDED"
    VALIDATION_FAILED = "VALIDATION_FAILED"


@dataclass
class Claim:
    """A single claim line within a submission.

    Dates are kept as the ISO strings that were supplied so that validators
    can report unparseable values rather than failing at load time.
    """

    id: str
    status: ClaimStatus = ClaimStatus.READY_TO_PROCESS
    submission_id: Optional[str] = None
    submission_period: Optional[str] = None
    line_number: Optional[int] = None
    fee_code: Optional[str] = None
    fee_type: Optional[str] = None
    unique_file_number: Optional[str] = None
    unique_client_number: Optional[str] = None
    unique_case_id: Optional[str] = None
    case_start_date: Optional[str] = None
    case_concluded_date: Optional[str] = None
    transfer_date: Optional[str] = None
    representation_order_date: Optional[str] = None
    client_forename: Optional[str] = None
    client_surname: Optional[str] = None
    client_date_of_birth: Optional[str] = None
    client2_date_of_birth: Optional[str] = None
    outcome_code: Optional[str] = None
    stage_reached_code: Optional[str] = None
    matter_type_code: Optional[str] = None
    schedule_reference: Optional[str] = None
    net_profit_costs_amount: Optional[Decimal] = None
    disbursements_vat_amount: Optional[Decimal] = None
    extra: Dict[str, str] = field(default_factory=dict)

    def value_of(self, name: str) -> Optional[object]:
        """Return the value of a named field, falling back to :attr:`extra`."""

        if name in CLAIM_FIELD_NAMES:
            return getattr(self, name)
        return self.extra.get(name)


CLAIM_FIELD_NAMES = frozenset(
    item.name for item in fields(Claim) if item.name not in {"extra"}
)


@dataclass
class Submission:
    submission_id: str
    office_account_number: str
    area_of_law: str
    submission_period: Optional[str] = None
    status: Optional[SubmissionStatus] = None
    is_nil_submission: bool = False
    claims: List[Claim] = field(default_factory=list)

    def claim_ids(self) -> List[str]:
        return [claim.id for claim in self.claims]
