"""Functions for reading and validating configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Tuple, Type

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigError
from .models import ClaimsApiConfig, ConfigBundle, ValidationConfig


class ConfigFiles:
    """Canonical configuration filenames."""

    CLAIMS_API = "claims_api.toml"
    VALIDATION = "validation.toml"


def load_config_bundle(root: Path) -> ConfigBundle:
    """Load all configuration files from *root* directory."""

    root = Path(root)
    claims_api = _load_toml(root / ConfigFiles.CLAIMS_API, ClaimsApiConfig)
    validation = _load_toml(root / ConfigFiles.VALIDATION, ValidationConfig)
    return ConfigBundle(claims_api=claims_api, validation=validation)


def load_validation_config(root: Path) -> ValidationConfig:
    """Load only ``validation.toml``; offline validation needs nothing else."""

    return _load_toml(Path(root) / ConfigFiles.VALIDATION, ValidationConfig)


def _load_toml(path: Path, model: Type[BaseModel]) -> Any:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(path, "file not found") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(path, f"failed to read TOML: {exc}") from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, _format_validation_errors(exc)) from exc


def _format_validation_errors(error: ValidationError) -> str:
    """Join pydantic errors as ``location: message`` pairs.

    Table keys that are not plain identifiers, such as area of law names,
    render as ``mandatory_fields["LEGAL HELP"]``; list positions as ``[n]``.
    """

    messages = []
    for err in error.errors(include_context=False):
        loc = _format_location(err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages)


def _format_location(loc: Tuple[Any, ...]) -> str:
    text = ""
    for entry in loc:
        if isinstance(entry, int):
            text += f"[{entry}]"
        elif str(entry).isidentifier():
            text += f".{entry}" if text else str(entry)
        else:
            text += f'["{entry}"]'
    return text
