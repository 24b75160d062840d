"""Diff result data models for the semantic diff engine."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from .enums import ChangeSignificance, ChangeType


@dataclass(frozen=True)
class SemanticChange:
    """
    One detected difference between two document versions.

    Identifiers are assigned by the aggregator in emission order; detectors
    produce changes with an empty id.
    """
    id: str
    change_type: ChangeType
    significance: ChangeSignificance
    before_text: str
    after_text: str
    section_path: Optional[str] = None
    plain_summary: str = ""
    confidence: float = 0.0

    def with_id(self, change_id: str) -> "SemanticChange":
        """Return a copy of this change carrying the given identifier."""
        return replace(self, id=change_id)


@dataclass(frozen=True)
class ChangeBreakdown:
    """
    Tally of changes per significance tier.

    ``formatting`` is always 0: formatting changes are filtered out before
    a result is assembled.
    """
    formatting: int = 0
    minor_wording: int = 0
    substantive: int = 0
    critical: int = 0

    @property
    def total(self) -> int:
        return self.minor_wording + self.substantive + self.critical


@dataclass(frozen=True)
class SemanticDiffResult:
    """
    Result of comparing two document versions.

    Version identifiers are left empty by the diff computation and filled
    in by the caller through ``with_versions``.
    """
    document_id: str
    changes: Tuple[SemanticChange, ...] = ()
    total_changes: int = 0
    change_breakdown: ChangeBreakdown = field(default_factory=ChangeBreakdown)
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    from_version_id: str = ""
    to_version_id: str = ""

    def with_versions(self, from_version_id: str, to_version_id: str) -> "SemanticDiffResult":
        """Return a copy of this result tagged with version identifiers."""
        return replace(self, from_version_id=from_version_id, to_version_id=to_version_id)

    def changes_at_least(self, significance: ChangeSignificance) -> Tuple[SemanticChange, ...]:
        """Return the changes whose significance is at or above the given tier."""
        return tuple(c for c in self.changes if c.significance >= significance)
