"""Exceptions raised by the semantic diff engine."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(eq=False)
class SemanticDiffError(Exception):
    """
    Base exception for semantic diff failures.

    Attributes:
        message: Human-readable error description.
        side: Which input failed ("old" or "new"), when known.
        details: Additional error details.
    """
    message: str
    side: Optional[str] = None
    details: Optional[dict] = field(default_factory=dict)

    def __post_init__(self):
        if self.details is None:
            self.details = {}
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [self.message]
        if self.side:
            parts.append(f"Input: {self.side}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "side": self.side,
            "details": self.details,
        }


@dataclass(eq=False)
class UnsupportedLanguageError(SemanticDiffError, ValueError):
    """
    Raised when a language tag has no pattern tables.

    This is a caller contract violation; there is no fallback language.
    """

    def get_supported_languages(self) -> list[str]:
        """Return the language tags that are accepted."""
        return self.details.get("supported_languages", [])


@dataclass(eq=False)
class ContentFetchError(SemanticDiffError):
    """
    Raised when the content of a document version cannot be obtained.

    Not recoverable: a diff needs both texts.
    """

    @property
    def version_id(self) -> Optional[str]:
        return self.details.get("version_id")


@dataclass(eq=False)
class DiffInputError(SemanticDiffError):
    """Raised when one of the inputs cannot be processed as plain text."""
