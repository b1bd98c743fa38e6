"""Value types produced by validation rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


ValidationMessageType = Literal["ERROR", "WARNING"]


class ClaimValidationSource:
    """Identifiers for the component that raised a validation message."""

    EVENT_SERVICE = "Data-Claims-Event-Service"
    FEE_SCHEME_PLATFORM = "Fee-Scheme-Platform"


@dataclass(frozen=True)
class ValidationErrorMessage:
    key: str
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("key must be a non-empty string")
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("value must be a non-empty string")


@dataclass(frozen=True)
class ValidationMessagePatch:
    """A bound validation message, ready to be stored or sent to the claims API."""

    code: str
    display_message: str
    technical_message: Optional[str]
    source: str
    type: ValidationMessageType = "ERROR"
    field: Optional[str] = None

    def is_error(self) -> bool:
        return self.type == "ERROR"

    def as_error_message(self) -> ValidationErrorMessage:
        return ValidationErrorMessage(key=self.field or self.code, value=self.display_message)

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "display_message": self.display_message,
            "technical_message": self.technical_message,
            "source": self.source,
            "type": self.type,
            "field": self.field,
        }
