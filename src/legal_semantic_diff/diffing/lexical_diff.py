"""Word-level lexical diff between two normalized texts."""

import difflib
import re
from dataclasses import dataclass
from typing import List, Union

from ..analyzers.significance_classifier import SignificanceClassifier
from ..models.diff import SemanticChange
from ..models.enums import ChangeSignificance, ChangeType, Language

DEFAULT_EXCERPT_LENGTH = 500
LEXICAL_CONFIDENCE = 0.85

# Words, whitespace runs and single punctuation marks.
_TOKEN = re.compile(r"\w+|\s+|[^\w\s]")


@dataclass(frozen=True)
class DiffSpan:
    """A run of text that is unchanged, added or removed."""
    text: str
    added: bool = False
    removed: bool = False

    @property
    def is_change(self) -> bool:
        return self.added or self.removed


def tokenize_words(text: str) -> List[str]:
    """Split text into word, whitespace and punctuation tokens."""
    return _TOKEN.findall(text)


def diff_words(before: str, after: str) -> List[DiffSpan]:
    """
    Compute a word-granularity diff.

    Matching is done on token lists with difflib's longest-matching-block
    algorithm. A replaced run is reported as a removed span followed by an
    added span. Inputs are not normalized here.

    Args:
        before: Old text.
        after: New text.

    Returns:
        Spans covering both texts in order.
    """
    old_tokens = tokenize_words(before)
    new_tokens = tokenize_words(after)
    matcher = difflib.SequenceMatcher(None, old_tokens, new_tokens, autojunk=False)

    spans: List[DiffSpan] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            spans.append(DiffSpan(text="".join(old_tokens[i1:i2])))
        elif tag == "delete":
            spans.append(DiffSpan(text="".join(old_tokens[i1:i2]), removed=True))
        elif tag == "insert":
            spans.append(DiffSpan(text="".join(new_tokens[j1:j2]), added=True))
        elif tag == "replace":
            spans.append(DiffSpan(text="".join(old_tokens[i1:i2]), removed=True))
            spans.append(DiffSpan(text="".join(new_tokens[j1:j2]), added=True))
    return spans


class LexicalDiffEngine:
    """
    Turns word-level diff spans into classified changes.

    Each added or removed span is classified against an empty other side;
    formatting-only spans are dropped.
    """

    def __init__(
        self,
        classifier: SignificanceClassifier,
        excerpt_length: int = DEFAULT_EXCERPT_LENGTH,
        confidence: float = LEXICAL_CONFIDENCE
    ):
        self._classifier = classifier
        self._excerpt_length = excerpt_length
        self._confidence = confidence

    def detect(
        self,
        old_normalized: str,
        new_normalized: str,
        language: Union[Language, str]
    ) -> List[SemanticChange]:
        """
        Detect lexical changes between two normalized full texts.

        Args:
            old_normalized: Normalized text of the old version.
            new_normalized: Normalized text of the new version.
            language: Document language.

        Returns:
            Changes without identifiers, in diff order.
        """
        changes: List[SemanticChange] = []

        for span in diff_words(old_normalized, new_normalized):
            if not span.is_change or not span.text.strip():
                continue

            before_text = span.text if span.removed else ""
            after_text = span.text if span.added else ""
            significance = self._classifier.classify(before_text, after_text, language)
            if significance == ChangeSignificance.FORMATTING:
                continue

            changes.append(
                SemanticChange(
                    id="",
                    change_type=ChangeType.ADDED if span.added else ChangeType.REMOVED,
                    significance=significance,
                    before_text=before_text[:self._excerpt_length],
                    after_text=after_text[:self._excerpt_length],
                    confidence=self._confidence,
                )
            )

        return changes
