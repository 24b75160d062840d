"""Section-level comparison of two parsed document versions.

Sections are aligned by position only: section i of the old version is
compared with section i of the new version. Inserting or removing a
section in the middle of a document shifts every later pair; detecting
such insertions is not attempted here.
"""

import logging
from typing import List, Optional, Sequence, Union

from ..analyzers.significance_classifier import SignificanceClassifier
from ..models.diff import SemanticChange
from ..models.document import DocumentContext, DocumentSection
from ..models.enums import ChangeSignificance, ChangeType, Language
from .semantic_scorer import SemanticSimilarityScorer

logger = logging.getLogger(__name__)

SECTION_CONFIDENCE = 0.9
DEGRADED_CONFIDENCE = 0.6
DEFAULT_DUPLICATE_PREFIX_LENGTH = 100


class SectionComparator:
    """
    Detects modified sections that the lexical diff may have missed or
    merged, skipping sections already covered by lexical changes.
    """

    def __init__(
        self,
        classifier: SignificanceClassifier,
        excerpt_length: int = 500,
        duplicate_prefix_length: int = DEFAULT_DUPLICATE_PREFIX_LENGTH,
        confidence: float = SECTION_CONFIDENCE,
        degraded_confidence: float = DEGRADED_CONFIDENCE
    ):
        """
        Initialize the comparator.

        Args:
            classifier: Significance classifier for section pairs.
            excerpt_length: Maximum length of before/after excerpts.
            duplicate_prefix_length: Length of the section prefix looked up
                in lexical changes to detect duplicates.
            confidence: Confidence of section-level changes.
            degraded_confidence: Confidence used when the semantic scorer
                had to fall back to the local heuristic.
        """
        self._classifier = classifier
        self._excerpt_length = excerpt_length
        self._duplicate_prefix_length = duplicate_prefix_length
        self._confidence = confidence
        self._degraded_confidence = degraded_confidence

    def compare(
        self,
        old_sections: Sequence[DocumentSection],
        new_sections: Sequence[DocumentSection],
        lexical_changes: Sequence[SemanticChange],
        language: Union[Language, str],
        context: Optional[DocumentContext] = None,
        scorer: Optional[SemanticSimilarityScorer] = None,
        deadline: Optional[float] = None
    ) -> List[SemanticChange]:
        """
        Compare aligned section pairs.

        Args:
            old_sections: Sections of the old version.
            new_sections: Sections of the new version.
            lexical_changes: Changes already emitted by the lexical diff.
            language: Document language.
            context: Document context, required when a scorer is given.
            scorer: Optional semantic scorer for heuristic-only pairs.
            deadline: Optional ``time.monotonic()`` bound for scorer calls.

        Returns:
            MODIFIED changes without identifiers, in section order.
        """
        changes: List[SemanticChange] = []
        use_scorer = scorer is not None and context is not None

        for old_section, new_section in zip(old_sections, new_sections):
            if old_section.normalized_text == new_section.normalized_text:
                continue

            outcome = self._classifier.evaluate(old_section.text, new_section.text, language)
            if outcome.significance == ChangeSignificance.FORMATTING:
                continue

            if self.is_duplicate(old_section, new_section, lexical_changes):
                logger.debug(f"Section {old_section.path} already covered by a lexical change")
                continue

            change_type = ChangeType.MODIFIED
            confidence = self._confidence
            if use_scorer and outcome.is_heuristic:
                score = scorer.score(
                    old_section.text,
                    new_section.text,
                    context,
                    deadline=deadline,
                    local_similarity=outcome.similarity,
                )
                if score.degraded:
                    confidence = self._degraded_confidence
                else:
                    change_type = score.change_type

            changes.append(
                SemanticChange(
                    id="",
                    change_type=change_type,
                    significance=outcome.significance,
                    before_text=old_section.text[:self._excerpt_length],
                    after_text=new_section.text[:self._excerpt_length],
                    section_path=old_section.path,
                    confidence=confidence,
                )
            )

        return changes

    def is_duplicate(
        self,
        old_section: DocumentSection,
        new_section: DocumentSection,
        lexical_changes: Sequence[SemanticChange]
    ) -> bool:
        """
        Check whether a section pair is already covered by a lexical change.

        A pair is a duplicate when a lexical change's before-text contains
        the start of the old section, or its after-text contains the start
        of the new section.
        """
        old_prefix = old_section.text[:self._duplicate_prefix_length]
        new_prefix = new_section.text[:self._duplicate_prefix_length]
        return any(
            old_prefix in change.before_text or new_prefix in change.after_text
            for change in lexical_changes
        )
