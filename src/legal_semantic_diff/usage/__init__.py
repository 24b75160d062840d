"""Usage tracking for classification provider calls."""

from .database import DatabaseManager, get_database_url
from .models import Base, UsageRecordModel
from .usage_tracker import DatabaseUsageTracker, InMemoryUsageTracker

__all__ = [
    "DatabaseManager",
    "get_database_url",
    "Base",
    "UsageRecordModel",
    "DatabaseUsageTracker",
    "InMemoryUsageTracker",
]
