"""Unit tests for data models, enums and exceptions."""

from dataclasses import FrozenInstanceError

import pytest

from legal_semantic_diff.exceptions import ContentFetchError, DiffInputError, UnsupportedLanguageError
from legal_semantic_diff.models import (
    ChangeSignificance,
    DocumentContext,
    Language,
    SemanticDiffResult,
)


class TestLanguage:
    """Tests for language tag resolution."""

    @pytest.mark.parametrize("tag", ["ro", "RO", " ro ", Language.RO])
    def test_from_tag(self, tag):
        assert Language.from_tag(tag) is Language.RO

    @pytest.mark.parametrize("tag", ["fr", "", None, 3])
    def test_unsupported_tags(self, tag):
        with pytest.raises(UnsupportedLanguageError):
            Language.from_tag(tag)


class TestChangeSignificance:
    """Tests for significance ordering."""

    def test_ordering(self):
        assert ChangeSignificance.FORMATTING < ChangeSignificance.MINOR_WORDING
        assert ChangeSignificance.MINOR_WORDING < ChangeSignificance.SUBSTANTIVE
        assert ChangeSignificance.SUBSTANTIVE < ChangeSignificance.CRITICAL
        assert ChangeSignificance.CRITICAL >= ChangeSignificance.CRITICAL
        assert max(ChangeSignificance) == ChangeSignificance.CRITICAL

    def test_rank(self):
        assert [s.rank for s in ChangeSignificance] == [0, 1, 2, 3]


class TestDocumentContext:
    """Tests for the request context."""

    def test_language_is_resolved(self):
        context = DocumentContext(document_id="doc-1", language="EN")
        assert context.language is Language.EN
        assert context.firm_id == ""

    def test_is_immutable(self):
        context = DocumentContext(document_id="doc-1", language="en")
        with pytest.raises(FrozenInstanceError):
            context.document_id = "doc-2"


class TestSemanticDiffResult:
    """Tests for result helpers."""

    def test_with_versions(self):
        result = SemanticDiffResult(document_id="doc-1")
        tagged = result.with_versions("v1", "v2")

        assert (tagged.from_version_id, tagged.to_version_id) == ("v1", "v2")
        assert result.from_version_id == ""
        assert tagged.computed_at == result.computed_at


class TestExceptions:
    """Tests for exception formatting."""

    def test_str_includes_side(self):
        error = DiffInputError("Content must be text", side="old")
        assert str(error) == "Content must be text | Input: old"

    def test_to_dict(self):
        error = ContentFetchError("Not found", side="new", details={"version_id": "v2"})
        assert error.to_dict() == {
            "error_type": "ContentFetchError",
            "message": "Not found",
            "side": "new",
            "details": {"version_id": "v2"},
        }
        assert error.version_id == "v2"

    def test_unsupported_language_is_value_error(self):
        assert issubclass(UnsupportedLanguageError, ValueError)
