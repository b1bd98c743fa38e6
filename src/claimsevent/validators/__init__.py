"""Validation rules for submissions and claims."""

from .claims import CLAIM_RULES, ClaimRule, RuleSettings, ordered_claim_rules, validate_claim
from .duplicates import (
    CrimeLowerDuplicateStrategy,
    DuplicateClaimStrategy,
    DuplicateClaimValidator,
    LegalHelpDuplicateStrategy,
    MediationDuplicateStrategy,
    default_duplicate_validator,
)
from .lookup import ClaimsLookup
from .submission import (
    SUBMISSION_RULES,
    SubmissionRule,
    SubmissionRuleSettings,
    validate_submission_rules,
)

__all__ = [
    "CLAIM_RULES",
    "ClaimRule",
    "RuleSettings",
    "ordered_claim_rules",
    "validate_claim",
    "ClaimsLookup",
    "DuplicateClaimStrategy",
    "DuplicateClaimValidator",
    "CrimeLowerDuplicateStrategy",
    "LegalHelpDuplicateStrategy",
    "MediationDuplicateStrategy",
    "default_duplicate_validator",
    "SUBMISSION_RULES",
    "SubmissionRule",
    "SubmissionRuleSettings",
    "validate_submission_rules",
]
