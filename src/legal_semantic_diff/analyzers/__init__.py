"""Significance analysis for detected document changes."""

from .significance_classifier import (
    ClassificationOutcome,
    SignificanceClassifier,
    SignificanceRule,
)
from .significance_patterns import SIGNIFICANCE_PATTERNS, LanguagePatterns
from .similarity import levenshtein_distance, text_similarity

__all__ = [
    "ClassificationOutcome",
    "SignificanceClassifier",
    "SignificanceRule",
    "SIGNIFICANCE_PATTERNS",
    "LanguagePatterns",
    "levenshtein_distance",
    "text_similarity",
]
