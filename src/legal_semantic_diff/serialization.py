"""Serialization and deserialization of semantic diff results."""

import json
from datetime import datetime
from typing import Any

from .models.diff import ChangeBreakdown, SemanticChange, SemanticDiffResult
from .models.enums import ChangeSignificance, ChangeType


class DiffResultSerializer:
    """
    Converts SemanticDiffResult structures to and from JSON.

    Enums are written as their values and timestamps as ISO 8601 strings.
    """

    @staticmethod
    def serialize(result: SemanticDiffResult, indent: int = 2) -> str:
        """
        Serialize a SemanticDiffResult to a JSON string.

        Args:
            result: The result to serialize.
            indent: JSON indentation.

        Returns:
            JSON string representation of the result.
        """
        return json.dumps(
            DiffResultSerializer.to_dict(result),
            ensure_ascii=False,
            indent=indent
        )

    @staticmethod
    def deserialize(json_str: str) -> SemanticDiffResult:
        """
        Deserialize a JSON string to a SemanticDiffResult.

        Raises:
            ValueError: If the JSON is invalid or malformed.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {str(e)}")

        return DiffResultSerializer.from_dict(data)

    @staticmethod
    def to_dict(result: SemanticDiffResult) -> dict[str, Any]:
        """Convert SemanticDiffResult to dictionary."""
        breakdown = result.change_breakdown
        return {
            "document_id": result.document_id,
            "from_version_id": result.from_version_id,
            "to_version_id": result.to_version_id,
            "changes": [DiffResultSerializer._change_to_dict(c) for c in result.changes],
            "total_changes": result.total_changes,
            "change_breakdown": {
                "formatting": breakdown.formatting,
                "minor_wording": breakdown.minor_wording,
                "substantive": breakdown.substantive,
                "critical": breakdown.critical,
            },
            "computed_at": result.computed_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> SemanticDiffResult:
        """Convert dictionary to SemanticDiffResult."""
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for SemanticDiffResult")

        required_fields = ["document_id", "changes", "computed_at"]
        for field in required_fields:
            if field not in data:
                raise ValueError(f"Missing required field: {field}")

        changes = tuple(DiffResultSerializer._dict_to_change(c) for c in data["changes"])
        breakdown = data.get("change_breakdown", {})
        return SemanticDiffResult(
            document_id=data["document_id"],
            from_version_id=data.get("from_version_id", ""),
            to_version_id=data.get("to_version_id", ""),
            changes=changes,
            total_changes=data.get("total_changes", len(changes)),
            change_breakdown=ChangeBreakdown(
                formatting=breakdown.get("formatting", 0),
                minor_wording=breakdown.get("minor_wording", 0),
                substantive=breakdown.get("substantive", 0),
                critical=breakdown.get("critical", 0),
            ),
            computed_at=datetime.fromisoformat(data["computed_at"]),
        )

    @staticmethod
    def _change_to_dict(change: SemanticChange) -> dict[str, Any]:
        return {
            "id": change.id,
            "change_type": change.change_type.value,
            "significance": change.significance.value,
            "before_text": change.before_text,
            "after_text": change.after_text,
            "section_path": change.section_path,
            "plain_summary": change.plain_summary,
            "confidence": change.confidence,
        }

    @staticmethod
    def _dict_to_change(data: dict[str, Any]) -> SemanticChange:
        if not isinstance(data, dict):
            raise ValueError("Expected dictionary for SemanticChange")

        required_fields = ["id", "change_type", "significance"]
        for field in required_fields:
            if field not in data:
                raise ValueError(f"Missing required field '{field}' in SemanticChange")

        return SemanticChange(
            id=data["id"],
            change_type=ChangeType(data["change_type"]),
            significance=ChangeSignificance(data["significance"]),
            before_text=data.get("before_text", ""),
            after_text=data.get("after_text", ""),
            section_path=data.get("section_path"),
            plain_summary=data.get("plain_summary", ""),
            confidence=data.get("confidence", 0.0),
        )


def serialize_result(result: SemanticDiffResult) -> str:
    """Convenience function to serialize a SemanticDiffResult."""
    return DiffResultSerializer.serialize(result)


def deserialize_result(json_str: str) -> SemanticDiffResult:
    """Convenience function to deserialize a SemanticDiffResult."""
    return DiffResultSerializer.deserialize(json_str)
