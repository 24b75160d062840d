"""Configuration management for the legal semantic diff engine."""

from .config_manager import ConfigurationManager
from .models import ConfigurationError, DiffConfig, ValidationResult

__all__ = [
    "ConfigurationManager",
    "ConfigurationError",
    "DiffConfig",
    "ValidationResult",
]
