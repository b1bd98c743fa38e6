"""Custom exception hierarchy for claimsevent."""

from __future__ import annotations

from pathlib import Path


class ClaimsEventError(Exception):
    """Base error for the claimsevent package."""


class ConfigError(ClaimsEventError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path.name}: {self.message}")


class UnknownAreaOfLawError(ClaimsEventError):
    """Raised when an area of law discriminator is not recognised."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"unknown area of law {value!r}")


class StrategyConfigurationError(ClaimsEventError):
    """Raised when a dispatch table does not cover every area of law."""


class TemplateArgumentError(ClaimsEventError):
    """Raised when a message template is bound with the wrong number of arguments."""
