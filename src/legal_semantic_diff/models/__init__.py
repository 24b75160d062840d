"""Data models and enums for the legal semantic diff engine."""

from .enums import (
    ChangeSignificance,
    ChangeType,
    ClassifierModel,
    Language,
    OperationType,
)
from .document import DocumentContext, DocumentSection
from .diff import ChangeBreakdown, SemanticChange, SemanticDiffResult

__all__ = [
    # Enums
    "ChangeSignificance",
    "ChangeType",
    "ClassifierModel",
    "Language",
    "OperationType",
    # Document models
    "DocumentContext",
    "DocumentSection",
    # Diff models
    "ChangeBreakdown",
    "SemanticChange",
    "SemanticDiffResult",
]
