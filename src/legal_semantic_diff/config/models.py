"""Data models for configuration management."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class DiffConfig:
    """
    Tunable limits and constants of the semantic diff engine.

    The confidence constants are part of the output contract: downstream
    consumers may threshold on them.
    """
    # Section parsing
    max_sections: int = 100

    # Change excerpts and deduplication
    excerpt_length: int = 500
    duplicate_prefix_length: int = 100

    # Significance classification
    minor_wording_threshold: float = 0.8

    # Confidence per detection strategy
    lexical_confidence: float = 0.85
    section_confidence: float = 0.9
    degraded_confidence: float = 0.6

    # Semantic similarity scorer
    scorer_excerpt_length: int = 500
    scorer_max_tokens: int = 100
    scorer_temperature: float = 0.0
    scorer_timeout_seconds: float = 10.0

    # Version content cache
    cache_ttl_seconds: int = 3600
    cache_max_size: int = 100

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result
