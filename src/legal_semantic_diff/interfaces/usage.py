"""Usage tracker interface for the semantic diff engine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..models.enums import OperationType


@dataclass(frozen=True)
class UsageRecord:
    """
    Resource usage of one classification provider call.

    Attributed to the firm (tenant) that requested the diff.
    """
    firm_id: str
    operation_type: OperationType
    model_used: str
    input_tokens: int
    output_tokens: int
    latency_ms: int
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class IUsageTracker(ABC):
    """
    Abstract interface for recording provider usage.

    Recording is fire-and-forget from the diff engine's point of view:
    failures are logged by the caller and never block a diff.
    """

    @abstractmethod
    def record_usage(self, record: UsageRecord) -> None:
        """
        Record the usage of one provider call.

        Args:
            record: The usage to record.
        """
        pass
