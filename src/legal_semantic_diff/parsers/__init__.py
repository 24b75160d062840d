"""Text normalization and section parsing for the legal semantic diff engine."""

from .normalizer import is_formatting_equal, normalize_document, normalize_for_comparison
from .section_parser import DEFAULT_MAX_SECTIONS, SectionParser

__all__ = [
    "is_formatting_equal",
    "normalize_document",
    "normalize_for_comparison",
    "DEFAULT_MAX_SECTIONS",
    "SectionParser",
]
