"""Catalogue of every validation failure the service can report."""

from __future__ import annotations

from enum import Enum
from string import Formatter
from typing import Optional

from ..exceptions import TemplateArgumentError
from .messages import ClaimValidationSource, ValidationMessagePatch, ValidationMessageType


EVENT_SERVICE = ClaimValidationSource.EVENT_SERVICE
FEE_SCHEME_PLATFORM = ClaimValidationSource.FEE_SCHEME_PLATFORM


class SubmissionValidationError(Enum):
    """Message templates keyed by rule.

    Each member holds ``(display template, technical message, source, type)``.
    Templates take positional ``{}`` fields which are bound by :meth:`to_patch`.
    """

    # Submission level
    SUBMISSION_PERIOD_MISSING = (
        "Submission period is required. Please provide a submission period in the format MMM-YYYY",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_PERIOD_INVALID_FORMAT = (
        "Submission period wrong format, should be in the format MMM-YYYY",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_PERIOD_SAME_MONTH = (
        "Submissions for the current month ({}) are not accepted. Please submit for a previous month.",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_PERIOD_FUTURE_MONTH = (
        "Submissions for after the current month ({}) are not accepted. Please submit for a previous month.",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_ALREADY_EXISTS = (
        "A submission already exists for office {}, area of law {} and submission period {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_STATE_MISSING = (
        "Submission state is null",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    SUBMISSION_STATE_INVALID = (
        "Submission cannot be validated in state {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    NIL_SUBMISSION_CONTAINS_CLAIMS = (
        "Submission is marked as nil submission, but contains claims",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    NON_NIL_SUBMISSION_CONTAINS_NO_CLAIMS = (
        "Submission is not marked as nil submission, but does not contain any claims",
        None,
        EVENT_SERVICE,
        "ERROR",
    )

    # Claim level
    INVALID_DATE_IN_UNIQUE_FILE_NUMBER = (
        "Unique File Number must contain a date in the past, in the format DDMMYY/NNN",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_CLAIM_HAS_DUPLICATE_IN_EXISTING_SUBMISSION = (
        "A duplicate of this claim was found in the current submission",
        "Duplicate claim found in current submission",
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_CLAIM_HAS_DUPLICATE_IN_ANOTHER_SUBMISSION = (
        "A duplicate of this claim was found in a previous submission",
        "Duplicate claim found in previous submission",
        EVENT_SERVICE,
        "ERROR",
    )
    MANDATORY_FIELD_MISSING = (
        "{} is required for area of law: {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_DATE_VALUE = (
        "Invalid date value provided for {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    DATE_OUT_OF_RANGE = (
        "{} must be between {} and today",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    CASE_CONCLUDED_AFTER_SUBMISSION_DEADLINE = (
        "{} cannot be later than the 20th of the month following the submission period or before {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    FIELD_PATTERN_MISMATCH = (
        "{} ({}): does not match the regex pattern {} (provided value: {})",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    DISBURSEMENTS_VAT_TOO_HIGH = (
        "Disbursements VAT Amount has exceeded the maximum accepted value",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    DISBURSEMENT_TOO_EARLY = (
        "Disbursement claims can only be submitted at least {} calendar months after the Case Start Date {}",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_AREA_OF_LAW_FOR_PROVIDER = (
        "A contract schedule with the provided area of law could not be found for this provider",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_CATEGORY_OF_LAW_AND_FEE_CODE = (
        "A category of law could not be found for the provided fee code",
        None,
        FEE_SCHEME_PLATFORM,
        "ERROR",
    )
    INVALID_CATEGORY_OF_LAW_NOT_AUTHORISED_FOR_PROVIDER = (
        "The provider is not contracted for the category of law associated with the fee code",
        None,
        EVENT_SERVICE,
        "ERROR",
    )
    INVALID_FEE_CALCULATION_VALIDATION_FAILED = (
        "A validation error occurred when attempting to calculate the fee for this claim",
        None,
        FEE_SCHEME_PLATFORM,
        "ERROR",
    )

    def __init__(
        self,
        display_template: str,
        technical_message: Optional[str],
        source: str,
        message_type: ValidationMessageType,
    ) -> None:
        self.display_template = display_template
        self.technical_message = technical_message
        self.source = source
        self.message_type = message_type

    @property
    def placeholder_count(self) -> int:
        return sum(
            1
            for _, field_name, _, _ in Formatter().parse(self.display_template)
            if field_name is not None
        )

    def to_patch(self, *args: object, field: Optional[str] = None) -> ValidationMessagePatch:
        """Bind *args* into the display template.

        Raises :class:`TemplateArgumentError` when the number of arguments does
        not match the number of placeholders in the template.
        """

        expected = self.placeholder_count
        if len(args) != expected:
            raise TemplateArgumentError(
                f"{self.name} expects {expected} argument(s), got {len(args)}"
            )
        return ValidationMessagePatch(
            code=self.name,
            display_message=self.display_template.format(*args),
            technical_message=self.technical_message,
            source=self.source,
            type=self.message_type,
            field=field,
        )
