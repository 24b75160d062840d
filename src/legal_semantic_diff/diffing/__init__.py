"""Change detection and aggregation for the legal semantic diff engine."""

from .aggregator import DiffAggregator
from .lexical_diff import DiffSpan, LexicalDiffEngine, diff_words
from .section_comparator import SectionComparator
from .semantic_scorer import SemanticSimilarityScorer, SimilarityScore, map_change_type

__all__ = [
    "DiffAggregator",
    "DiffSpan",
    "LexicalDiffEngine",
    "diff_words",
    "SectionComparator",
    "SemanticSimilarityScorer",
    "SimilarityScore",
    "map_change_type",
]
