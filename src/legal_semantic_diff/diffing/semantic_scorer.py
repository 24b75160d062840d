"""Semantic similarity scoring backed by an external classification provider.

Short section pairs whose significance was decided by heuristics alone can
be sent to a text-classification provider (typically an LLM) for a
similarity score and a change-type label. Provider calls are bounded by a
timeout; any failure degrades to the local edit-distance similarity for
that one pair.
"""

import json
import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Optional, Tuple

from ..analyzers.similarity import text_similarity
from ..config.models import DiffConfig
from ..interfaces.classifier import (
    ClassificationRequest,
    ClassificationResponse,
    IClassificationProvider,
)
from ..interfaces.usage import IUsageTracker, UsageRecord
from ..models.document import DocumentContext
from ..models.enums import ChangeType, ClassifierModel, OperationType
from ..parsers.normalizer import normalize_document

logger = logging.getLogger(__name__)

_CHANGE_TYPE_LABELS = {
    # The scorer only sees text already known to differ.
    "unchanged": ChangeType.MODIFIED,
    "modified": ChangeType.MODIFIED,
    "added": ChangeType.ADDED,
    "removed": ChangeType.REMOVED,
    "moved": ChangeType.MOVED,
}

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")

PROMPT_TEMPLATE = """Compare these two text sections and determine:
1. Semantic similarity (0.0 to 1.0)
2. Change type: "unchanged", "modified", "added", "removed" or "moved"

Section 1:
\"\"\"
{section_a}
\"\"\"

Section 2:
\"\"\"
{section_b}
\"\"\"

Respond in JSON format only:
{{"similarity": 0.X, "changeType": "..."}}"""


@dataclass(frozen=True)
class SimilarityScore:
    """
    Similarity of a section pair.

    ``degraded`` is True when the provider could not be used and the score
    comes from the local edit-distance fallback.
    """
    similarity: float
    change_type: ChangeType
    degraded: bool = False


def map_change_type(label: Optional[str]) -> ChangeType:
    """Map a provider change-type label to a ChangeType (default MODIFIED)."""
    if not isinstance(label, str):
        return ChangeType.MODIFIED
    return _CHANGE_TYPE_LABELS.get(label.strip().lower(), ChangeType.MODIFIED)


def parse_score_response(content: str) -> Tuple[float, ChangeType]:
    """
    Parse the provider's JSON answer.

    Args:
        content: Raw completion text, optionally wrapped in a code fence.

    Returns:
        Tuple of (similarity, change type).

    Raises:
        ValueError: If the content is not a JSON object with a numeric
            similarity in [0, 1].
    """
    text = _CODE_FENCE.sub("", content.strip())
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON from classifier: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Classifier response is not a JSON object")

    similarity = data.get("similarity")
    if isinstance(similarity, bool) or not isinstance(similarity, (int, float)):
        raise ValueError("Classifier response has no numeric 'similarity'")
    if not 0.0 <= similarity <= 1.0:
        raise ValueError(f"Classifier similarity out of range: {similarity}")

    return float(similarity), map_change_type(data.get("changeType"))


class SemanticSimilarityScorer:
    """
    Scores section pairs through an external classification provider.

    Provider calls run on a worker thread so that a slow call can be
    abandoned once its timeout (or the caller's deadline) expires.
    """

    def __init__(
        self,
        provider: IClassificationProvider,
        usage_tracker: Optional[IUsageTracker] = None,
        model: ClassifierModel = ClassifierModel.FAST,
        excerpt_length: int = 500,
        max_tokens: int = 100,
        temperature: float = 0.0,
        timeout_seconds: float = 10.0,
        max_workers: int = 4
    ):
        """
        Initialize the scorer.

        Args:
            provider: Classification provider to delegate to.
            usage_tracker: Optional tracker receiving token usage of every
                successful provider call.
            model: Model tier requested from the provider.
            excerpt_length: Characters of each section included in the prompt.
            max_tokens: Completion budget per call.
            temperature: Sampling temperature.
            timeout_seconds: Upper bound for a single provider call.
            max_workers: Worker threads for provider calls.
        """
        self._provider = provider
        self._usage_tracker = usage_tracker
        self._model = model
        self._excerpt_length = excerpt_length
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="semantic-scorer"
        )

    @classmethod
    def from_config(
        cls,
        provider: IClassificationProvider,
        config: DiffConfig,
        usage_tracker: Optional[IUsageTracker] = None,
        model: ClassifierModel = ClassifierModel.FAST
    ) -> "SemanticSimilarityScorer":
        """Create a scorer using the scorer settings of a DiffConfig."""
        return cls(
            provider,
            usage_tracker=usage_tracker,
            model=model,
            excerpt_length=config.scorer_excerpt_length,
            max_tokens=config.scorer_max_tokens,
            temperature=config.scorer_temperature,
            timeout_seconds=config.scorer_timeout_seconds,
        )

    def build_prompt(self, section_a: str, section_b: str) -> str:
        """Build the bounded comparison prompt for a section pair."""
        return PROMPT_TEMPLATE.format(
            section_a=section_a[:self._excerpt_length],
            section_b=section_b[:self._excerpt_length],
        )

    def score(
        self,
        section_a: str,
        section_b: str,
        context: DocumentContext,
        deadline: Optional[float] = None,
        local_similarity: Optional[float] = None
    ) -> SimilarityScore:
        """
        Score the similarity of two sections.

        Args:
            section_a: Old section text.
            section_b: New section text.
            context: Document context; its firm id is used for usage records.
            deadline: Optional ``time.monotonic()`` value after which the
                provider is no longer consulted.
            local_similarity: Similarity already computed for the pair; used by
                the fallback instead of recomputing the edit distance.

        Returns:
            SimilarityScore; degraded when the local fallback was used.
        """
        timeout = self._timeout_seconds
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Deadline passed, scoring section pair locally")
                return self.local_score(section_a, section_b, local_similarity)
            timeout = min(timeout, remaining)

        request = ClassificationRequest(
            prompt=self.build_prompt(section_a, section_b),
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        future = self._executor.submit(self._provider.execute, request)
        try:
            response = future.result(timeout=timeout)
        except FuturesTimeoutError:
            # Abandon the call; a running worker cannot be interrupted.
            future.cancel()
            logger.warning(f"Semantic similarity timed out after {timeout:.2f}s, using local fallback")
            return self.local_score(section_a, section_b, local_similarity)
        except Exception as e:
            logger.warning(f"Semantic similarity computation failed, using local fallback: {e}")
            return self.local_score(section_a, section_b, local_similarity)

        self._record_usage(response, context)

        try:
            similarity, change_type = parse_score_response(response.content)
        except ValueError as e:
            logger.warning(f"Could not parse classifier response, using local fallback: {e}")
            return self.local_score(section_a, section_b, local_similarity)

        return SimilarityScore(similarity=similarity, change_type=change_type)

    def local_score(
        self,
        section_a: str,
        section_b: str,
        similarity: Optional[float] = None
    ) -> SimilarityScore:
        """Edit-distance similarity; the change type is always MODIFIED."""
        if similarity is None:
            similarity = text_similarity(normalize_document(section_a), normalize_document(section_b))
        return SimilarityScore(similarity=similarity, change_type=ChangeType.MODIFIED, degraded=True)

    def _record_usage(self, response: ClassificationResponse, context: DocumentContext) -> None:
        """Report token usage; failures are logged and never raised."""
        if self._usage_tracker is None:
            return
        record = UsageRecord(
            firm_id=context.firm_id,
            operation_type=OperationType.CLASSIFICATION,
            model_used=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            latency_ms=response.latency_ms,
        )
        try:
            self._usage_tracker.record_usage(record)
        except Exception as e:
            logger.warning(f"Failed to record classifier usage for firm {context.firm_id}: {e}")

    def close(self) -> None:
        """Release worker threads without waiting for abandoned calls."""
        self._executor.shutdown(wait=False)

    def __enter__(self) -> "SemanticSimilarityScorer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
