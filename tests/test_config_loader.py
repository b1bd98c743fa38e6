"""Tests for configuration loading."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from claimsevent.config import load_config_bundle, load_validation_config
from claimsevent.exceptions import ConfigError
from claimsevent.validation import AreaOfLaw, ValidationErrorMessage

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

VALIDATION_TOML = """
[mandatory_fields]
"LEGAL HELP" = ["case_start_date"]
"CRIME LOWER" = ["stage_reached_code"]
"MEDIATION" = ["unique_case_id"]
"""


def test_load_sample_config_bundle() -> None:
    bundle = load_config_bundle(CONFIG_DIR)
    assert bundle.claims_api.base_url == "http://localhost:8080"
    assert bundle.claims_api.retries == 3
    validation = bundle.validation
    assert "stage_reached_code" in validation.mandatory_fields_for(AreaOfLaw.CRIME_LOWER)
    assert validation.vat_maximum_for(AreaOfLaw.LEGAL_HELP) == Decimal("99999.99")


def test_field_messages_prefer_area_over_all() -> None:
    validation = load_validation_config(CONFIG_DIR)
    crime = validation.display_message_for("stage_reached_code", AreaOfLaw.CRIME_LOWER, "default")
    civil = validation.display_message_for("stage_reached_code", AreaOfLaw.LEGAL_HELP, "default")
    assert crime.startswith("Stage Reached Code must be a valid crime lower")
    assert civil == "Stage Reached Code must be two letters or digits"
    assert validation.display_message_for("outcome_code", AreaOfLaw.MEDIATION, "default") == "default"
    assert ValidationErrorMessage("ALL", civil) in validation.field_messages_for("stage_reached_code")


def test_area_keys_are_normalised(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(
        """
[mandatory_fields]
legal_help = ["case_start_date"]
crime = ["stage_reached_code"]
Mediation = []
""",
        encoding="utf-8",
    )
    validation = load_validation_config(tmp_path)
    assert validation.mandatory_fields_for(AreaOfLaw.LEGAL_HELP) == ["case_start_date"]
    assert validation.mandatory_fields_for(AreaOfLaw.MEDIATION) == []
    assert validation.vat_maximum_for(AreaOfLaw.MEDIATION) == Decimal("999999999.99")


def test_missing_area_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(
        """
[mandatory_fields]
"LEGAL HELP" = []
"CRIME LOWER" = []
""",
        encoding="utf-8",
    )
    with pytest.raises(ConfigError) as excinfo:
        load_validation_config(tmp_path)
    assert "MEDIATION" in str(excinfo.value)
    assert str(excinfo.value).startswith("validation.toml:")


def test_unknown_area_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(
        VALIDATION_TOML + '"FAMILY" = []\n',
        encoding="utf-8",
    )
    with pytest.raises(ConfigError) as excinfo:
        load_validation_config(tmp_path)
    assert "FAMILY" in str(excinfo.value)


def test_duplicate_mandatory_fields_rejected(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(
        VALIDATION_TOML.replace('["unique_case_id"]', '["unique_case_id", "unique_case_id"]'),
        encoding="utf-8",
    )
    with pytest.raises(ConfigError):
        load_validation_config(tmp_path)


def test_claims_api_url_must_be_http(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(VALIDATION_TOML, encoding="utf-8")
    (tmp_path / "claims_api.toml").write_text('base_url = "ftp://example"\n', encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_config_bundle(tmp_path)
    assert "claims_api.toml" in str(excinfo.value)


def test_claims_api_trailing_slash_stripped(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(VALIDATION_TOML, encoding="utf-8")
    (tmp_path / "claims_api.toml").write_text('base_url = "https://claims.example/"\n', encoding="utf-8")
    bundle = load_config_bundle(tmp_path)
    assert bundle.claims_api.base_url == "https://claims.example"
    assert bundle.claims_api.timeout_seconds == 20


def test_missing_file_reported(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as excinfo:
        load_validation_config(tmp_path)
    assert "file not found" in str(excinfo.value)


def test_invalid_toml_reported(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text("[mandatory_fields\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        load_validation_config(tmp_path)
    assert "failed to read TOML" in str(excinfo.value)


def test_error_location_names_area_and_entry(tmp_path: Path) -> None:
    (tmp_path / "validation.toml").write_text(
        VALIDATION_TOML
        + """
[disbursements_vat_maximum]
"LEGAL HELP" = "abc"

[[field_messages.stage_reached_code]]
key = "ALL"
value = " "
""",
        encoding="utf-8",
    )
    with pytest.raises(ConfigError) as excinfo:
        load_validation_config(tmp_path)
    message = str(excinfo.value)
    assert 'disbursements_vat_maximum["LEGAL HELP"]: ' in message
    assert "field_messages.stage_reached_code[0]: " in message
