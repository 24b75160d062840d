"""Unit tests for version content fetching and caching."""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from docx import Document

from legal_semantic_diff.content import (
    CachedContentFetcher,
    LocalFileContentFetcher,
    VersionContentCache,
    cache_key,
)
from legal_semantic_diff.content import cache as cache_module
from legal_semantic_diff.exceptions import ContentFetchError
from legal_semantic_diff.interfaces import IContentFetcher


class TestVersionContentCache:
    """Tests for the in-memory content cache."""

    def test_get_missing(self):
        assert VersionContentCache().get("version_content:v1") is None

    def test_set_and_get(self):
        cache = VersionContentCache()
        assert cache.set("k", "text")
        assert cache.get("k") == "text"
        assert cache.size() == 1

    def test_live_entries_are_write_once(self):
        cache = VersionContentCache()
        cache.set("k", "first")

        assert not cache.set("k", "second")
        assert cache.get("k") == "first"

    def test_expired_entries_are_dropped(self, monkeypatch):
        cache = VersionContentCache(ttl=10)
        clock = [1000.0]
        monkeypatch.setattr(cache_module, "time", SimpleNamespace(monotonic=lambda: clock[0]))

        cache.set("k", "old")
        clock[0] += 11

        assert cache.get("k") is None
        assert cache.set("k", "new")
        assert cache.get("k") == "new"

    def test_oldest_entry_is_evicted(self, monkeypatch):
        cache = VersionContentCache(max_size=2)
        clock = [1000.0]
        monkeypatch.setattr(cache_module, "time", SimpleNamespace(monotonic=lambda: clock[0]))

        for key in ("a", "b", "c"):
            cache.set(key, key.upper())
            clock[0] += 1

        assert cache.size() == 2
        assert cache.get("a") is None
        assert cache.get("c") == "C"

    def test_invalidate_and_clear(self):
        cache = VersionContentCache()
        cache.set("a", "A")
        cache.set("b", "B")

        cache.invalidate("a")
        assert cache.get("a") is None

        cache.clear()
        assert cache.size() == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            VersionContentCache(max_size=0)


class TestCachedContentFetcher:
    """Tests for the caching fetcher."""

    def test_second_fetch_hits_cache(self):
        inner = Mock(spec=IContentFetcher)
        inner.fetch_version_content.return_value = "Version one text"
        fetcher = CachedContentFetcher(inner)

        assert fetcher.fetch_version_content("v1", "doc-1") == "Version one text"
        assert fetcher.fetch_version_content("v1", "doc-1") == "Version one text"

        inner.fetch_version_content.assert_called_once_with("v1", "doc-1")
        assert fetcher.cache.get(cache_key("v1")) == "Version one text"

    def test_empty_content_is_not_cached(self):
        inner = Mock(spec=IContentFetcher)
        inner.fetch_version_content.return_value = ""
        fetcher = CachedContentFetcher(inner)

        fetcher.fetch_version_content("v1", "doc-1")
        fetcher.fetch_version_content("v1", "doc-1")

        assert inner.fetch_version_content.call_count == 2

    def test_errors_propagate(self):
        inner = Mock(spec=IContentFetcher)
        inner.fetch_version_content.side_effect = ContentFetchError("gone")

        with pytest.raises(ContentFetchError):
            CachedContentFetcher(inner).fetch_version_content("v1", "doc-1")

    def test_cache_key(self):
        assert cache_key("v42") == "version_content:v42"


class TestLocalFileContentFetcher:
    """Tests for reading versions from disk."""

    def test_reads_text_file(self, tmp_path):
        (tmp_path / "doc-1").mkdir()
        (tmp_path / "doc-1" / "v1.txt").write_text("Art. 1 Părțile convin.", encoding="utf-8")

        content = LocalFileContentFetcher(tmp_path).fetch_version_content("v1", "doc-1")

        assert content == "Art. 1 Părțile convin."

    def test_reads_docx_paragraphs(self, tmp_path):
        (tmp_path / "doc-1").mkdir()
        doc = Document()
        doc.add_paragraph("Art. 1 Scope")
        doc.add_paragraph("")
        doc.add_paragraph("Art. 2 Fees")
        doc.save(str(tmp_path / "doc-1" / "v2.docx"))

        content = LocalFileContentFetcher(tmp_path).fetch_version_content("v2", "doc-1")

        assert content == "Art. 1 Scope\n\nArt. 2 Fees"

    def test_text_file_takes_precedence(self, tmp_path):
        (tmp_path / "doc-1").mkdir()
        (tmp_path / "doc-1" / "v1.txt").write_text("plain", encoding="utf-8")
        (tmp_path / "doc-1" / "v1.pdf").write_bytes(b"not a pdf")

        fetcher = LocalFileContentFetcher(tmp_path)

        assert fetcher.resolve_path("v1", "doc-1").suffix == ".txt"

    def test_missing_version(self, tmp_path):
        with pytest.raises(ContentFetchError) as exc_info:
            LocalFileContentFetcher(tmp_path).fetch_version_content("v9", "doc-1")

        assert exc_info.value.version_id == "v9"

    @pytest.mark.parametrize(
        "version_id,document_id",
        [("../../secret", "doc-1"), ("secret", "../.."), ("../secret", "doc-1")],
    )
    def test_paths_outside_base_dir_are_rejected(self, tmp_path, version_id, document_id):
        base_dir = tmp_path / "versions"
        (base_dir / "doc-1").mkdir(parents=True)
        (tmp_path / "secret.txt").write_text("TOP SECRET", encoding="utf-8")
        (base_dir / "secret.txt").write_text("TOP SECRET", encoding="utf-8")

        with pytest.raises(ContentFetchError) as exc_info:
            LocalFileContentFetcher(base_dir).fetch_version_content(version_id, document_id)

        assert exc_info.value.version_id == version_id

    def test_absolute_version_id_is_rejected(self, tmp_path):
        base_dir = tmp_path / "versions"
        (base_dir / "doc-1").mkdir(parents=True)
        secret = tmp_path / "secret.txt"
        secret.write_text("TOP SECRET", encoding="utf-8")

        with pytest.raises(ContentFetchError):
            LocalFileContentFetcher(base_dir).fetch_version_content(
                str(secret.with_suffix("")), "doc-1"
            )

    def test_corrupted_docx(self, tmp_path):
        (tmp_path / "doc-1").mkdir()
        (tmp_path / "doc-1" / "v1.docx").write_bytes(b"this is not a zip archive")

        with pytest.raises(ContentFetchError):
            LocalFileContentFetcher(tmp_path).fetch_version_content("v1", "doc-1")

    def test_corrupted_pdf(self, tmp_path):
        (tmp_path / "doc-1").mkdir()
        (tmp_path / "doc-1" / "v1.pdf").write_bytes(b"this is not a pdf")

        with pytest.raises(ContentFetchError):
            LocalFileContentFetcher(tmp_path).fetch_version_content("v1", "doc-1")
