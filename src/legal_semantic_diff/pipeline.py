"""End-to-end semantic diff orchestration.

This module wires the normalizer, section parser, lexical diff engine,
significance classifier, section comparator and aggregator together into
the service that compares two versions of a legal document.
"""

import logging
import threading
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from .analyzers.significance_classifier import SignificanceClassifier
from .config.config_manager import ConfigurationManager
from .config.models import DiffConfig
from .diffing.aggregator import DiffAggregator
from .diffing.lexical_diff import LexicalDiffEngine
from .diffing.section_comparator import SectionComparator
from .diffing.semantic_scorer import SemanticSimilarityScorer
from .exceptions import ContentFetchError, DiffInputError
from .interfaces.fetcher import IContentFetcher
from .models.diff import SemanticDiffResult
from .models.document import DocumentContext
from .parsers.normalizer import normalize_document, normalize_for_comparison
from .parsers.section_parser import SectionParser


logger = logging.getLogger(__name__)


@dataclass
class DiffStats:
    """Statistics about diff executions."""

    total_diffs: int = 0
    failed_diffs: int = 0
    total_changes: int = 0
    total_processing_time: float = 0.0
    average_processing_time: float = 0.0


class SemanticDiffService:
    """
    Computes semantic diffs between versions of a legal document.

    The normalizer, parser, diff engine and classifier hold no per-request
    state, so one service instance can serve concurrent requests. The
    optional scorer and content fetcher are injected collaborators.
    """

    def __init__(
        self,
        config: Optional[DiffConfig] = None,
        content_fetcher: Optional[IContentFetcher] = None,
        scorer: Optional[SemanticSimilarityScorer] = None,
        classifier: Optional[SignificanceClassifier] = None,
        section_parser: Optional[SectionParser] = None,
        config_manager: Optional[ConfigurationManager] = None,
    ):
        """
        Initialize the diff service.

        Args:
            config: Diff configuration. When omitted, the configuration of a
                loaded ``config_manager`` is used, else the defaults.
            content_fetcher: Fetcher used by ``compare_versions``.
            scorer: Optional semantic scorer for ambiguous section pairs.
            classifier: Optional significance classifier (created if not provided).
            section_parser: Optional section parser (created if not provided).
            config_manager: Optional configuration manager.
        """
        if config is None and config_manager is not None and config_manager.is_loaded:
            config = config_manager.configuration
        self.config = config or DiffConfig()
        self.stats = DiffStats()
        self._stats_lock = threading.Lock()

        self._content_fetcher = content_fetcher
        self._scorer = scorer
        self._classifier = classifier or SignificanceClassifier(
            minor_wording_threshold=self.config.minor_wording_threshold
        )
        self._section_parser = section_parser or SectionParser(
            max_sections=self.config.max_sections
        )
        self._lexical_engine = LexicalDiffEngine(
            self._classifier,
            excerpt_length=self.config.excerpt_length,
            confidence=self.config.lexical_confidence,
        )
        self._section_comparator = SectionComparator(
            self._classifier,
            excerpt_length=self.config.excerpt_length,
            duplicate_prefix_length=self.config.duplicate_prefix_length,
            confidence=self.config.section_confidence,
            degraded_confidence=self.config.degraded_confidence,
        )
        self._aggregator = DiffAggregator()

        logger.info("Semantic diff service initialized")

    @classmethod
    def from_config_file(
        cls,
        config_path: Union[str, Path],
        content_fetcher: Optional[IContentFetcher] = None,
        scorer: Optional[SemanticSimilarityScorer] = None,
    ) -> "SemanticDiffService":
        """
        Create a service from a JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        manager = ConfigurationManager(config_path)
        logger.info(f"Loaded diff configuration from {config_path}")
        return cls(
            content_fetcher=content_fetcher,
            scorer=scorer,
            config_manager=manager,
        )

    def set_content_fetcher(self, content_fetcher: Optional[IContentFetcher]) -> None:
        """Replace the fetcher used by ``compare_versions``."""
        self._content_fetcher = content_fetcher

    def compute_semantic_diff(
        self,
        old_content: str,
        new_content: str,
        context: DocumentContext,
        deadline: Optional[float] = None,
    ) -> SemanticDiffResult:
        """
        Compute the semantic diff between two texts.

        Args:
            old_content: Raw text of the old version.
            new_content: Raw text of the new version.
            context: Document context (id, language, firm).
            deadline: Optional ``time.monotonic()`` value bounding scorer
                usage. Once it passes, remaining pairs are scored locally
                and the diff still completes.

        Returns:
            SemanticDiffResult with empty version identifiers.

        Raises:
            DiffInputError: If either content is not a string.
        """
        start_time = time.time()
        try:
            self._check_input("old", old_content)
            self._check_input("new", new_content)

            if normalize_for_comparison(old_content) == normalize_for_comparison(new_content):
                logger.debug(f"Versions of {context.document_id} differ only in formatting")
                result = self._aggregator.aggregate(context.document_id, [], [])
            else:
                result = self._diff(old_content, new_content, context, deadline)
        except Exception:
            self._update_stats(time.time() - start_time, None)
            raise

        processing_time = time.time() - start_time
        self._update_stats(processing_time, result)
        breakdown = result.change_breakdown
        logger.info(
            f"Semantic diff for {context.document_id} completed in {processing_time:.3f}s: "
            f"{result.total_changes} changes ({breakdown.critical} critical, "
            f"{breakdown.substantive} substantive, {breakdown.minor_wording} minor wording)"
        )
        return result

    def compare_versions(
        self,
        document_id: str,
        from_version_id: str,
        to_version_id: str,
        context: DocumentContext,
        deadline: Optional[float] = None,
    ) -> SemanticDiffResult:
        """
        Fetch two stored versions and diff them.

        Args:
            document_id: Identifier of the document.
            from_version_id: Version treated as the old side.
            to_version_id: Version treated as the new side.
            context: Document context (id, language, firm).
            deadline: Optional ``time.monotonic()`` bound for scorer usage.

        Returns:
            SemanticDiffResult with the version identifiers filled in.

        Raises:
            ContentFetchError: If either version cannot be fetched.
        """
        old_content = self._fetch("old", from_version_id, document_id)
        new_content = self._fetch("new", to_version_id, document_id)
        result = self.compute_semantic_diff(old_content, new_content, context, deadline=deadline)
        return result.with_versions(from_version_id, to_version_id)

    def _diff(
        self,
        old_content: str,
        new_content: str,
        context: DocumentContext,
        deadline: Optional[float],
    ) -> SemanticDiffResult:
        """Run the detection steps on texts known to differ."""
        old_normalized = normalize_document(old_content)
        new_normalized = normalize_document(new_content)

        old_sections = self._section_parser.parse(old_content)
        new_sections = self._section_parser.parse(new_content)
        if len(old_sections) != len(new_sections):
            logger.debug(
                f"Section counts differ for {context.document_id} "
                f"({len(old_sections)} vs {len(new_sections)}), unpaired sections are ignored"
            )

        lexical_changes = self._lexical_engine.detect(
            old_normalized, new_normalized, context.language
        )
        section_changes = self._section_comparator.compare(
            old_sections,
            new_sections,
            lexical_changes,
            context.language,
            context=context,
            scorer=self._scorer,
            deadline=deadline,
        )
        return self._aggregator.aggregate(context.document_id, lexical_changes, section_changes)

    def _fetch(self, side: str, version_id: str, document_id: str) -> str:
        """Fetch one side of a comparison, tagging failures with the side."""
        if self._content_fetcher is None:
            raise ContentFetchError(
                message="No content fetcher configured",
                side=side,
                details={"version_id": version_id, "document_id": document_id},
            )

        try:
            return self._content_fetcher.fetch_version_content(version_id, document_id)
        except ContentFetchError as e:
            logger.error(f"Failed to fetch {side} version {version_id} of {document_id}: {e.message}")
            raise ContentFetchError(
                message=e.message,
                side=side,
                details={**e.details, "version_id": version_id, "document_id": document_id},
            ) from e
        except Exception as e:
            logger.error(f"Failed to fetch {side} version {version_id} of {document_id}: {e}")
            raise ContentFetchError(
                message=f"Failed to fetch version content: {e}",
                side=side,
                details={
                    "version_id": version_id,
                    "document_id": document_id,
                    "original_error": str(e),
                },
            ) from e

    @staticmethod
    def _check_input(side: str, content: object) -> None:
        if not isinstance(content, str):
            raise DiffInputError(
                message=f"Content must be text, got {type(content).__name__}",
                side=side,
            )

    def _update_stats(self, processing_time: float, result: Optional[SemanticDiffResult]) -> None:
        """Update diff statistics."""
        with self._stats_lock:
            self.stats.total_diffs += 1
            if result is None:
                self.stats.failed_diffs += 1
            else:
                self.stats.total_changes += result.total_changes

            self.stats.total_processing_time += processing_time
            self.stats.average_processing_time = (
                self.stats.total_processing_time / self.stats.total_diffs
            )

    def get_stats(self) -> DiffStats:
        """Get a snapshot of the diff execution statistics."""
        with self._stats_lock:
            return replace(self.stats)

    def close(self) -> None:
        """Release the scorer's worker threads."""
        if self._scorer is not None:
            self._scorer.close()
        logger.info("Semantic diff service closed")
