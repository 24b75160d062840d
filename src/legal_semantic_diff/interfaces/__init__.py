"""Collaborator interfaces for the legal semantic diff engine."""

from .classifier import ClassificationRequest, ClassificationResponse, IClassificationProvider
from .fetcher import IContentFetcher
from .usage import IUsageTracker, UsageRecord

__all__ = [
    "ClassificationRequest",
    "ClassificationResponse",
    "IClassificationProvider",
    "IContentFetcher",
    "IUsageTracker",
    "UsageRecord",
]
