"""Pydantic models describing configuration files."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, Field, model_validator

from ..exceptions import UnknownAreaOfLawError
from ..validation.area_of_law import AreaOfLaw
from ..validation.messages import ValidationErrorMessage


ALL_AREAS = "ALL"

DEFAULT_VAT_MAXIMUM = {
    AreaOfLaw.LEGAL_HELP.value: Decimal("99999.99"),
    AreaOfLaw.CRIME_LOWER.value: Decimal("999999.99"),
    AreaOfLaw.MEDIATION.value: Decimal("999999999.99"),
}


class ClaimsApiConfig(BaseModel):
    base_url: str
    timeout_seconds: float = Field(default=20.0, gt=0)
    retries: int = Field(default=3, ge=0)
    backoff_factor: float = Field(default=0.6, ge=0)

    @model_validator(mode="after")
    def validate_base_url(self) -> "ClaimsApiConfig":
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        self.base_url = self.base_url.rstrip("/")
        return self


class FieldMessage(BaseModel):
    key: str
    value: str

    @model_validator(mode="after")
    def normalize_key(self) -> "FieldMessage":
        if not self.value.strip():
            raise ValueError("value must not be empty")
        if self.key.upper() == ALL_AREAS:
            self.key = ALL_AREAS
            return self
        try:
            self.key = AreaOfLaw.from_value(self.key).value
        except UnknownAreaOfLawError as exc:
            raise ValueError(str(exc)) from exc
        return self


class ValidationConfig(BaseModel):
    mandatory_fields: Dict[str, List[str]]
    disbursements_vat_maximum: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_VAT_MAXIMUM)
    )
    field_messages: Dict[str, List[FieldMessage]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def normalize_areas(self) -> "ValidationConfig":
        self.mandatory_fields = _normalize_area_keys(self.mandatory_fields, "mandatory_fields")
        self.disbursements_vat_maximum = _normalize_area_keys(
            self.disbursements_vat_maximum, "disbursements_vat_maximum"
        )
        for area, names in self.mandatory_fields.items():
            if len(set(names)) != len(names):
                raise ValueError(f"mandatory_fields for {area} must be unique")
        for area, maximum in self.disbursements_vat_maximum.items():
            if maximum <= 0:
                raise ValueError(f"disbursements_vat_maximum for {area} must be positive")
        return self

    def mandatory_fields_for(self, area: AreaOfLaw) -> List[str]:
        return list(self.mandatory_fields[area.value])

    def vat_maximum_for(self, area: AreaOfLaw) -> Decimal:
        return self.disbursements_vat_maximum[area.value]

    def field_messages_for(self, field: str) -> List[ValidationErrorMessage]:
        return [
            ValidationErrorMessage(key=entry.key, value=entry.value)
            for entry in self.field_messages.get(field, [])
        ]

    def display_message_for(self, field: str, area: AreaOfLaw, default: str) -> str:
        """Return the configured display message for *field*, or *default*.

        An entry keyed by the area of law wins over one keyed ``ALL``.
        """

        messages = self.field_messages_for(field)
        for key in (area.value, ALL_AREAS):
            for message in messages:
                if message.key == key:
                    return message.value
        return default


class ConfigBundle(BaseModel):
    claims_api: ClaimsApiConfig
    validation: ValidationConfig


def _normalize_area_keys(table: Dict[str, object], name: str) -> Dict[str, object]:
    normalized: Dict[str, object] = {}
    for key, value in table.items():
        try:
            area = AreaOfLaw.from_value(key)
        except UnknownAreaOfLawError as exc:
            raise ValueError(f"{name}: {exc}") from exc
        if area.value in normalized:
            raise ValueError(f"{name}: duplicate entry for {area.value}")
        normalized[area.value] = value
    missing = [area.value for area in AreaOfLaw if area.value not in normalized]
    if missing:
        raise ValueError(f"{name}: missing entries for {', '.join(missing)}")
    return normalized
