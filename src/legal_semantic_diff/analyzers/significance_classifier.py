"""Significance classifier for detected changes.

Assigns one of four significance tiers to a before/after text pair using
an ordered rule list: formatting equality, critical legal terms,
substantive patterns, then edit-distance similarity. The first rule whose
predicate holds decides the tier, so the precedence order is the order of
the list.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Dict, List, Optional, Union

from ..models.enums import ChangeSignificance, Language
from ..parsers.normalizer import normalize_document, normalize_for_comparison
from ..config.models import ConfigurationError
from .significance_patterns import (
    SIGNIFICANCE_PATTERNS,
    LanguagePatterns,
    match_signature,
    validate_pattern_tables,
)
from .similarity import text_similarity

DEFAULT_MINOR_WORDING_THRESHOLD = 0.8

RULE_FORMATTING = "formatting"
RULE_CRITICAL_TERMS = "critical_terms"
RULE_SUBSTANTIVE_TERMS = "substantive_terms"
RULE_CLOSE_WORDING = "close_wording"
RULE_DEFAULT = "default"

# Rules decided by similarity alone; a semantic scorer may refine these.
HEURISTIC_RULES = frozenset({RULE_CLOSE_WORDING, RULE_DEFAULT})


@dataclass(frozen=True)
class ClassificationInput:
    """A text pair prepared for the rule predicates."""
    before: str
    after: str
    patterns: LanguagePatterns

    @cached_property
    def similarity(self) -> float:
        """Edit-distance similarity of the normalized texts, computed once."""
        return text_similarity(normalize_document(self.before), normalize_document(self.after))


@dataclass(frozen=True)
class SignificanceRule:
    """One predicate -> significance step of the classification chain."""
    name: str
    significance: ChangeSignificance
    predicate: Callable[[ClassificationInput], bool]


@dataclass(frozen=True)
class ClassificationOutcome:
    """Significance of a change and the rule that decided it."""
    significance: ChangeSignificance
    rule: str
    # Set for heuristic outcomes, which are decided by similarity.
    similarity: Optional[float] = None

    @property
    def is_heuristic(self) -> bool:
        return self.rule in HEURISTIC_RULES


class SignificanceClassifier:
    """
    Rule-based significance classifier.

    Pure and deterministic: the same inputs always give the same tier, and
    the instance holds no per-call state, so it can be shared freely.
    """

    def __init__(
        self,
        minor_wording_threshold: float = DEFAULT_MINOR_WORDING_THRESHOLD,
        pattern_tables: Optional[Dict[Language, LanguagePatterns]] = None
    ):
        """
        Initialize the classifier.

        Args:
            minor_wording_threshold: Similarity above which (strictly) an
                otherwise unmatched change counts as minor wording.
            pattern_tables: Per-language patterns; defaults to the built-in
                tables.

        Raises:
            ValueError: If the threshold is not between 0.0 and 1.0.
            ConfigurationError: If custom pattern tables are incomplete.
        """
        if not 0.0 <= minor_wording_threshold <= 1.0:
            raise ValueError("Threshold must be between 0.0 and 1.0")
        self._minor_wording_threshold = minor_wording_threshold
        if pattern_tables is not None:
            validation = validate_pattern_tables(pattern_tables)
            if not validation.is_valid:
                raise ConfigurationError(
                    "Incomplete significance pattern tables",
                    validation_result=validation
                )
        self._pattern_tables = pattern_tables or SIGNIFICANCE_PATTERNS
        self._rules = self._build_rules()

    @property
    def rules(self) -> List[SignificanceRule]:
        """The classification chain, in evaluation order."""
        return list(self._rules)

    def _build_rules(self) -> List[SignificanceRule]:
        return [
            SignificanceRule(RULE_FORMATTING, ChangeSignificance.FORMATTING, self._is_formatting_only),
            SignificanceRule(RULE_CRITICAL_TERMS, ChangeSignificance.CRITICAL, self._critical_terms_changed),
            SignificanceRule(
                RULE_SUBSTANTIVE_TERMS, ChangeSignificance.SUBSTANTIVE, self._substantive_terms_changed
            ),
            SignificanceRule(RULE_CLOSE_WORDING, ChangeSignificance.MINOR_WORDING, self._is_close_wording),
            SignificanceRule(RULE_DEFAULT, ChangeSignificance.SUBSTANTIVE, lambda _: True),
        ]

    def classify(
        self,
        before_text: str,
        after_text: str,
        language: Union[Language, str]
    ) -> ChangeSignificance:
        """
        Classify the significance of a change.

        Args:
            before_text: Text before the change ("" for additions).
            after_text: Text after the change ("" for removals).
            language: Document language.

        Returns:
            The significance tier.

        Raises:
            UnsupportedLanguageError: If the language has no patterns.
        """
        return self.evaluate(before_text, after_text, language).significance

    def evaluate(
        self,
        before_text: str,
        after_text: str,
        language: Union[Language, str]
    ) -> ClassificationOutcome:
        """
        Run the rule chain and report which rule decided.

        Args:
            before_text: Text before the change.
            after_text: Text after the change.
            language: Document language.

        Returns:
            ClassificationOutcome with the tier and the deciding rule name.

        Raises:
            UnsupportedLanguageError: If the language has no patterns.
        """
        patterns = self._patterns_for(language)
        candidate = ClassificationInput(before=before_text, after=after_text, patterns=patterns)

        for rule in self._rules:
            if rule.predicate(candidate):
                similarity = candidate.similarity if rule.name in HEURISTIC_RULES else None
                return ClassificationOutcome(
                    significance=rule.significance, rule=rule.name, similarity=similarity
                )

        # The default rule always matches.
        raise AssertionError("classification chain has no default rule")

    def _patterns_for(self, language: Union[Language, str]) -> LanguagePatterns:
        resolved = Language.from_tag(language)
        return self._pattern_tables[resolved]

    # -------------------------------------------------------------------------
    # Rule predicates
    # -------------------------------------------------------------------------

    @staticmethod
    def _is_formatting_only(candidate: ClassificationInput) -> bool:
        return normalize_for_comparison(candidate.before) == normalize_for_comparison(candidate.after)

    @staticmethod
    def _critical_terms_changed(candidate: ClassificationInput) -> bool:
        """A critical term appears on one side only, or with different wording."""
        for pattern in candidate.patterns.critical:
            before = match_signature(pattern, candidate.before)
            after = match_signature(pattern, candidate.after)
            if (before is None) != (after is None):
                return True
            if before is not None and before != after:
                return True
        return False

    @staticmethod
    def _substantive_terms_changed(candidate: ClassificationInput) -> bool:
        for pattern in candidate.patterns.substantive:
            if match_signature(pattern, candidate.before) != match_signature(pattern, candidate.after):
                return True
        return False

    def _is_close_wording(self, candidate: ClassificationInput) -> bool:
        return candidate.similarity > self._minor_wording_threshold
