"""Unit tests for usage tracking."""

import threading
from datetime import datetime, timezone

import pytest

from legal_semantic_diff.interfaces import UsageRecord
from legal_semantic_diff.models import OperationType
from legal_semantic_diff.usage import (
    DatabaseManager,
    DatabaseUsageTracker,
    InMemoryUsageTracker,
    get_database_url,
)


def _record(firm_id: str, input_tokens: int = 100, output_tokens: int = 20) -> UsageRecord:
    return UsageRecord(
        firm_id=firm_id,
        operation_type=OperationType.CLASSIFICATION,
        model_used="fast-model",
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        latency_ms=35,
    )


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(database_url=f"sqlite:///{tmp_path / 'usage.db'}")
    yield manager
    manager.close()


@pytest.fixture
def tracker(db_manager):
    return DatabaseUsageTracker(db_manager=db_manager)


class TestDatabaseUsageTracker:
    """Tests for the SQLAlchemy-backed tracker."""

    def test_record_and_query(self, tracker):
        tracker.record_usage(_record("firm-1"))

        records = tracker.get_usage("firm-1")

        assert len(records) == 1
        record = records[0]
        assert record.firm_id == "firm-1"
        assert record.operation_type == OperationType.CLASSIFICATION
        assert record.model_used == "fast-model"
        assert (record.input_tokens, record.output_tokens, record.latency_ms) == (100, 20, 35)
        assert record.recorded_at.tzinfo is not None

    def test_records_are_scoped_by_firm(self, tracker):
        tracker.record_usage(_record("firm-1"))
        tracker.record_usage(_record("firm-2"))
        tracker.record_usage(_record("firm-1", input_tokens=10, output_tokens=5))

        assert len(tracker.get_usage("firm-1")) == 2
        assert len(tracker.get_usage("firm-2")) == 1
        assert tracker.get_usage("firm-3") == []

    def test_total_tokens(self, tracker):
        tracker.record_usage(_record("firm-1"))
        tracker.record_usage(_record("firm-1", input_tokens=10, output_tokens=5))

        assert tracker.total_tokens("firm-1") == 135
        assert tracker.total_tokens("firm-unknown") == 0

    def test_records_persist_across_trackers(self, db_manager):
        DatabaseUsageTracker(db_manager=db_manager).record_usage(_record("firm-1"))
        assert len(DatabaseUsageTracker(db_manager=db_manager).get_usage("firm-1")) == 1

    def test_owned_database_manager(self, tmp_path):
        tracker = DatabaseUsageTracker(database_url=f"sqlite:///{tmp_path / 'owned.db'}")
        tracker.record_usage(_record("firm-1"))
        assert tracker.total_tokens("firm-1") == 120
        tracker.close()

    def test_negative_tokens_are_rejected(self, tracker):
        with pytest.raises(Exception):
            tracker.record_usage(_record("firm-1", input_tokens=-1))
        assert tracker.get_usage("firm-1") == []


class TestDatabaseManager:
    """Tests for connection management."""

    def test_health_check(self, db_manager):
        assert db_manager.health_check()

    def test_drop_and_recreate_tables(self, tracker, db_manager):
        tracker.record_usage(_record("firm-a"))

        db_manager.drop_all_tables()
        db_manager.init_database()

        assert tracker.total_tokens("firm-a") == 0

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("USAGE_DATABASE_URL", "sqlite:///from-env.db")
        assert get_database_url() == "sqlite:///from-env.db"

    def test_default_database_url_is_sqlite(self, monkeypatch):
        monkeypatch.delenv("USAGE_DATABASE_URL", raising=False)
        assert get_database_url() == "sqlite:///legal_semantic_diff_usage.db"
        assert DatabaseManager().is_sqlite

    def test_explicit_path_wins_over_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("USAGE_DATABASE_URL", "sqlite:///from-env.db")
        path = tmp_path / "usage.db"
        assert get_database_url(path) == f"sqlite:///{path}"

    def test_in_memory_database_keeps_tables_across_sessions(self):
        tracker = DatabaseUsageTracker(database_url="sqlite://")

        tracker.record_usage(_record("firm-1"))
        tracker.record_usage(_record("firm-1"))

        assert tracker.total_tokens("firm-1") == 240
        tracker.close()

    def test_records_from_another_thread(self, tracker):
        worker = threading.Thread(target=tracker.record_usage, args=(_record("firm-1"),))
        worker.start()
        worker.join()

        assert len(tracker.get_usage("firm-1")) == 1


class TestInMemoryUsageTracker:
    """Tests for the in-memory tracker."""

    def test_record_and_totals(self):
        tracker = InMemoryUsageTracker()
        tracker.record_usage(_record("firm-1"))
        tracker.record_usage(_record("firm-2", input_tokens=1, output_tokens=1))

        assert len(tracker.records) == 2
        assert tracker.total_tokens("firm-1") == 120
        assert [r.firm_id for r in tracker.get_usage("firm-2")] == ["firm-2"]

        tracker.clear()
        assert tracker.records == []

    def test_record_total_tokens(self):
        record = _record("firm-1", input_tokens=7, output_tokens=3)
        assert record.total_tokens == 10
        assert record.recorded_at <= datetime.now(timezone.utc)
