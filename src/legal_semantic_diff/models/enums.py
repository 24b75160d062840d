"""Enumerations for the legal semantic diff engine."""

from enum import Enum
from typing import Union

from ..exceptions import UnsupportedLanguageError


class Language(Enum):
    """Document languages with a complete set of significance patterns."""
    RO = "ro"
    EN = "en"

    @classmethod
    def from_tag(cls, tag: Union["Language", str]) -> "Language":
        """
        Resolve a language tag.

        Args:
            tag: A Language member or a tag such as "ro" or "EN".

        Returns:
            The matching Language member.

        Raises:
            UnsupportedLanguageError: If the tag is not a supported language.
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            normalized = tag.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise UnsupportedLanguageError(
            message=f"Unsupported language: {tag!r}",
            details={"supported_languages": [m.value for m in cls]},
        )


class ChangeType(Enum):
    """Kinds of detected changes."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    MOVED = "moved"  # only passed through from the similarity scorer


class ChangeSignificance(Enum):
    """Significance tiers, ordered from least to most important."""
    FORMATTING = "formatting"
    MINOR_WORDING = "minor_wording"
    SUBSTANTIVE = "substantive"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SIGNIFICANCE_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, ChangeSignificance):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ChangeSignificance):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ChangeSignificance):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ChangeSignificance):
            return NotImplemented
        return self.rank >= other.rank


_SIGNIFICANCE_ORDER = [
    ChangeSignificance.FORMATTING,
    ChangeSignificance.MINOR_WORDING,
    ChangeSignificance.SUBSTANTIVE,
    ChangeSignificance.CRITICAL,
]


class ClassifierModel(Enum):
    """Model tiers offered by the classification provider."""
    FAST = "fast"
    STANDARD = "standard"
    ADVANCED = "advanced"


class OperationType(Enum):
    """Operation types reported to the usage tracker."""
    CLASSIFICATION = "classification"
