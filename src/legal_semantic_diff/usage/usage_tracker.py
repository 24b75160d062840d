"""Usage tracker implementations."""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, func, select

from ..interfaces.usage import IUsageTracker, UsageRecord
from ..models.enums import OperationType
from .database import DatabaseManager
from .models import UsageRecordModel

logger = logging.getLogger(__name__)


class DatabaseUsageTracker(IUsageTracker):
    """
    Usage tracker persisting records through SQLAlchemy.

    Every classification call is stored as a row of ``ai_usage_records`` and
    can be queried per firm for billing and quota checks.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
        create_tables: bool = True,
    ):
        """
        Initialize the usage tracker.

        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
            create_tables: Create the usage table if it does not exist.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True

        if create_tables:
            self._db_manager.init_database()

    def _to_model(self, record: UsageRecord) -> UsageRecordModel:
        """Convert UsageRecord dataclass to SQLAlchemy model."""
        return UsageRecordModel(
            firm_id=record.firm_id,
            operation_type=record.operation_type.value,
            model_used=record.model_used,
            input_tokens=record.input_tokens,
            output_tokens=record.output_tokens,
            latency_ms=record.latency_ms,
            recorded_at=record.recorded_at,
        )

    def _from_model(self, model: UsageRecordModel) -> UsageRecord:
        """Convert SQLAlchemy model to UsageRecord dataclass."""
        recorded_at = model.recorded_at
        # SQLite returns naive datetimes
        if recorded_at.tzinfo is None:
            recorded_at = recorded_at.replace(tzinfo=timezone.utc)
        return UsageRecord(
            firm_id=model.firm_id,
            operation_type=OperationType(model.operation_type),
            model_used=model.model_used,
            input_tokens=model.input_tokens,
            output_tokens=model.output_tokens,
            latency_ms=model.latency_ms,
            recorded_at=recorded_at,
        )

    def record_usage(self, record: UsageRecord) -> None:
        """
        Store a usage record.

        Args:
            record: The usage to record.
        """
        with self._db_manager.get_session() as session:
            session.add(self._to_model(record))
        logger.debug(
            f"Recorded {record.total_tokens} tokens of {record.model_used} for firm {record.firm_id}"
        )

    def get_usage(
        self,
        firm_id: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[UsageRecord]:
        """
        Query the usage records of a firm.

        Args:
            firm_id: Firm to query.
            start_time: Only records at or after this time.
            end_time: Only records at or before this time.

        Returns:
            Matching records, oldest first.
        """
        with self._db_manager.get_session() as session:
            conditions = [UsageRecordModel.firm_id == firm_id]
            if start_time:
                conditions.append(UsageRecordModel.recorded_at >= start_time)
            if end_time:
                conditions.append(UsageRecordModel.recorded_at <= end_time)

            query = (
                select(UsageRecordModel)
                .where(and_(*conditions))
                .order_by(UsageRecordModel.recorded_at.asc())
            )
            models = session.execute(query).scalars().all()
            return [self._from_model(m) for m in models]

    def total_tokens(self, firm_id: str) -> int:
        """Sum of input and output tokens recorded for a firm."""
        with self._db_manager.get_session() as session:
            query = select(
                func.coalesce(
                    func.sum(UsageRecordModel.input_tokens + UsageRecordModel.output_tokens), 0
                )
            ).where(UsageRecordModel.firm_id == firm_id)
            return int(session.execute(query).scalar_one())

    def close(self) -> None:
        """Close the database connection if owned by this tracker."""
        if self._owns_db_manager:
            self._db_manager.close()


class InMemoryUsageTracker(IUsageTracker):
    """Thread-safe usage tracker keeping records in memory."""

    def __init__(self):
        self._records: List[UsageRecord] = []
        self._lock = threading.Lock()

    @property
    def records(self) -> List[UsageRecord]:
        with self._lock:
            return list(self._records)

    def record_usage(self, record: UsageRecord) -> None:
        with self._lock:
            self._records.append(record)

    def get_usage(self, firm_id: str) -> List[UsageRecord]:
        with self._lock:
            return [r for r in self._records if r.firm_id == firm_id]

    def total_tokens(self, firm_id: str) -> int:
        return sum(r.total_tokens for r in self.get_usage(firm_id))

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
