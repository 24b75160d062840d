"""Unit tests for the semantic similarity scorer."""

import time
from unittest.mock import Mock

import pytest

from legal_semantic_diff.analyzers import text_similarity
from legal_semantic_diff.config import DiffConfig
from legal_semantic_diff.diffing import SemanticSimilarityScorer, map_change_type
from legal_semantic_diff.diffing.semantic_scorer import parse_score_response
from legal_semantic_diff.interfaces import (
    ClassificationResponse,
    IClassificationProvider,
    IUsageTracker,
)
from legal_semantic_diff.models import ChangeType, ClassifierModel, DocumentContext, OperationType
from legal_semantic_diff.usage import InMemoryUsageTracker


def _response(content: str) -> ClassificationResponse:
    return ClassificationResponse(
        content=content,
        model="fast-model",
        input_tokens=120,
        output_tokens=15,
        latency_ms=40,
    )


@pytest.fixture
def context():
    return DocumentContext(document_id="doc-1", language="en", firm_id="firm-1")


@pytest.fixture
def provider():
    provider = Mock(spec=IClassificationProvider)
    provider.execute.return_value = _response('{"similarity": 0.95, "changeType": "moved"}')
    return provider


class TestResponseParsing:
    """Tests for parsing provider answers."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("unchanged", ChangeType.MODIFIED),
            ("modified", ChangeType.MODIFIED),
            ("added", ChangeType.ADDED),
            ("Removed", ChangeType.REMOVED),
            ("moved", ChangeType.MOVED),
            ("rewritten", ChangeType.MODIFIED),
            (None, ChangeType.MODIFIED),
        ],
    )
    def test_map_change_type(self, label, expected):
        assert map_change_type(label) == expected

    def test_parse_plain_json(self):
        assert parse_score_response('{"similarity": 0.4, "changeType": "added"}') == (
            0.4,
            ChangeType.ADDED,
        )

    def test_parse_fenced_json(self):
        content = '```json\n{"similarity": 0.7, "changeType": "Moved"}\n```'
        assert parse_score_response(content) == (0.7, ChangeType.MOVED)

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            "[0.5]",
            '{"changeType": "modified"}',
            '{"similarity": "high"}',
            '{"similarity": true}',
            '{"similarity": 1.5}',
        ],
    )
    def test_invalid_responses(self, content):
        with pytest.raises(ValueError):
            parse_score_response(content)


class TestScoring:
    """Tests for provider-backed scoring and its fallbacks."""

    def test_successful_score(self, provider, context):
        with SemanticSimilarityScorer(provider) as scorer:
            score = scorer.score("old clause", "new clause", context)

        assert score.similarity == 0.95
        assert score.change_type == ChangeType.MOVED
        assert not score.degraded

        request = provider.execute.call_args[0][0]
        assert request.model == ClassifierModel.FAST
        assert request.max_tokens == 100
        assert request.temperature == 0.0
        assert "old clause" in request.prompt and "new clause" in request.prompt

    def test_usage_is_recorded(self, provider, context):
        tracker = InMemoryUsageTracker()
        with SemanticSimilarityScorer(provider, usage_tracker=tracker) as scorer:
            scorer.score("old clause", "new clause", context)

        records = tracker.get_usage("firm-1")
        assert len(records) == 1
        assert records[0].operation_type == OperationType.CLASSIFICATION
        assert records[0].model_used == "fast-model"
        assert records[0].total_tokens == 135
        assert tracker.total_tokens("firm-1") == 135

    def test_usage_tracker_failure_is_not_raised(self, provider, context):
        tracker = Mock(spec=IUsageTracker)
        tracker.record_usage.side_effect = RuntimeError("database down")

        with SemanticSimilarityScorer(provider, usage_tracker=tracker) as scorer:
            score = scorer.score("old clause", "new clause", context)

        assert not score.degraded
        tracker.record_usage.assert_called_once()

    def test_provider_error_falls_back(self, provider, context):
        provider.execute.side_effect = RuntimeError("rate limited")

        with SemanticSimilarityScorer(provider) as scorer:
            score = scorer.score("abcdefghij", "abcdefghiX", context)

        assert score.degraded
        assert score.change_type == ChangeType.MODIFIED
        assert score.similarity == text_similarity("abcdefghij", "abcdefghiX")

    def test_fallback_reuses_known_similarity(self, provider, context):
        provider.execute.side_effect = RuntimeError("rate limited")

        with SemanticSimilarityScorer(provider) as scorer:
            score = scorer.score("abcdefghij", "abcdefghiX", context, local_similarity=0.42)

        assert score.degraded
        assert score.similarity == 0.42

    def test_malformed_json_falls_back_but_records_usage(self, provider, context):
        provider.execute.return_value = _response("I think they are similar")
        tracker = InMemoryUsageTracker()

        with SemanticSimilarityScorer(provider, usage_tracker=tracker) as scorer:
            score = scorer.score("old clause", "new clause", context)

        assert score.degraded
        assert len(tracker.records) == 1

    def test_timeout_falls_back(self, provider, context):
        def slow_execute(request):
            time.sleep(0.5)
            return _response('{"similarity": 0.9, "changeType": "modified"}')

        provider.execute.side_effect = slow_execute
        tracker = InMemoryUsageTracker()

        with SemanticSimilarityScorer(provider, usage_tracker=tracker, timeout_seconds=0.05) as scorer:
            started = time.monotonic()
            score = scorer.score("old clause", "new clause", context)
            elapsed = time.monotonic() - started

        assert score.degraded
        assert elapsed < 0.4
        assert tracker.records == []

    def test_expired_deadline_skips_provider(self, provider, context):
        with SemanticSimilarityScorer(provider) as scorer:
            score = scorer.score(
                "old clause", "new clause", context, deadline=time.monotonic() - 1
            )

        assert score.degraded
        provider.execute.assert_not_called()


class TestPrompt:
    """Tests for prompt construction."""

    def test_prompt_is_bounded(self, provider):
        with SemanticSimilarityScorer(provider, excerpt_length=5) as scorer:
            prompt = scorer.build_prompt("abcdefgh", "zyxwvuts")

        assert "abcde" in prompt and "abcdef" not in prompt
        assert "zyxwv" in prompt and "zyxwvu" not in prompt

    def test_from_config(self, provider, context):
        config = DiffConfig(scorer_excerpt_length=3, scorer_max_tokens=50, scorer_temperature=0.2)
        with SemanticSimilarityScorer.from_config(provider, config) as scorer:
            scorer.score("abcdefgh", "zyxwvuts", context)

        request = provider.execute.call_args[0][0]
        assert "abc" in request.prompt and "abcd" not in request.prompt
        assert request.max_tokens == 50
        assert request.temperature == 0.2
