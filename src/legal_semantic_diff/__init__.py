"""
Legal Semantic Diff

Semantic comparison of legal document versions: detects obligation, date,
amount and liability changes while ignoring formatting noise.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import (
    ChangeSignificance,
    ChangeType,
    ClassifierModel,
    Language,
    OperationType,
)
from .models.document import DocumentContext, DocumentSection
from .models.diff import ChangeBreakdown, SemanticChange, SemanticDiffResult
from .parsers import SectionParser, normalize_document, normalize_for_comparison
from .analyzers import SignificanceClassifier, text_similarity
from .diffing import DiffAggregator, LexicalDiffEngine, SectionComparator, SemanticSimilarityScorer
from .interfaces import (
    ClassificationRequest,
    ClassificationResponse,
    IClassificationProvider,
    IContentFetcher,
    IUsageTracker,
    UsageRecord,
)
from .content import CachedContentFetcher, LocalFileContentFetcher, VersionContentCache
from .usage import DatabaseManager, DatabaseUsageTracker, InMemoryUsageTracker
from .config import ConfigurationError, ConfigurationManager, DiffConfig, ValidationResult
from .exceptions import (
    ContentFetchError,
    DiffInputError,
    SemanticDiffError,
    UnsupportedLanguageError,
)
from .pipeline import DiffStats, SemanticDiffService
from .serialization import DiffResultSerializer

__all__ = [
    "ChangeSignificance",
    "ChangeType",
    "ClassifierModel",
    "Language",
    "OperationType",
    "DocumentContext",
    "DocumentSection",
    "ChangeBreakdown",
    "SemanticChange",
    "SemanticDiffResult",
    "SectionParser",
    "normalize_document",
    "normalize_for_comparison",
    "SignificanceClassifier",
    "text_similarity",
    "DiffAggregator",
    "LexicalDiffEngine",
    "SectionComparator",
    "SemanticSimilarityScorer",
    "ClassificationRequest",
    "ClassificationResponse",
    "IClassificationProvider",
    "IContentFetcher",
    "IUsageTracker",
    "UsageRecord",
    "CachedContentFetcher",
    "LocalFileContentFetcher",
    "VersionContentCache",
    "DatabaseManager",
    "DatabaseUsageTracker",
    "InMemoryUsageTracker",
    "ConfigurationError",
    "ConfigurationManager",
    "DiffConfig",
    "ValidationResult",
    "ContentFetchError",
    "DiffInputError",
    "SemanticDiffError",
    "UnsupportedLanguageError",
    "DiffStats",
    "SemanticDiffService",
    "DiffResultSerializer",
]
