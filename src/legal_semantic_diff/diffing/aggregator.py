"""Assembly of detected changes into a single diff result."""

from datetime import datetime, timezone
from typing import List, Sequence

from ..models.diff import ChangeBreakdown, SemanticChange, SemanticDiffResult
from ..models.enums import ChangeSignificance


class DiffAggregator:
    """
    Merges lexical and section-level changes into a SemanticDiffResult.

    Lexical changes come first, then section changes, each in the order
    they were detected. Identifiers ``change-0, change-1, ...`` follow that
    order.
    """

    def aggregate(
        self,
        document_id: str,
        lexical_changes: Sequence[SemanticChange],
        section_changes: Sequence[SemanticChange]
    ) -> SemanticDiffResult:
        """
        Build the diff result.

        Args:
            document_id: Identifier of the compared document.
            lexical_changes: Changes from the lexical diff engine.
            section_changes: Changes from the section comparator.

        Returns:
            SemanticDiffResult with empty version identifiers.
        """
        changes: List[SemanticChange] = [
            change.with_id(f"change-{index}")
            for index, change in enumerate(list(lexical_changes) + list(section_changes))
        ]

        return SemanticDiffResult(
            document_id=document_id,
            changes=tuple(changes),
            total_changes=len(changes),
            change_breakdown=self.compute_breakdown(changes),
            computed_at=datetime.now(timezone.utc),
        )

    @staticmethod
    def compute_breakdown(changes: Sequence[SemanticChange]) -> ChangeBreakdown:
        """Count changes per significance tier (formatting is always 0)."""
        return ChangeBreakdown(
            formatting=0,
            minor_wording=sum(1 for c in changes if c.significance == ChangeSignificance.MINOR_WORDING),
            substantive=sum(1 for c in changes if c.significance == ChangeSignificance.SUBSTANTIVE),
            critical=sum(1 for c in changes if c.significance == ChangeSignificance.CRITICAL),
        )
