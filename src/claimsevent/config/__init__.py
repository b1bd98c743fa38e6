"""Public configuration API."""

from .loader import ConfigFiles, load_config_bundle, load_validation_config
from .models import ClaimsApiConfig, ConfigBundle, ValidationConfig

__all__ = [
    "ClaimsApiConfig",
    "ConfigFiles",
    "ConfigBundle",
    "ValidationConfig",
    "load_config_bundle",
    "load_validation_config",
]
