"""Minimal FastAPI application for the legal semantic diff engine.

This module exposes a thin HTTP API around SemanticDiffService.

Usage (from project root, after installing fastapi and uvicorn):

    uvicorn legal_semantic_diff.api.app:app --reload

Environment:
    LEGAL_DIFF_CONFIG: optional JSON configuration file.
    LEGAL_DIFF_CONTENT_DIR: directory of stored versions, laid out as
        ``<dir>/<document_id>/<version_id>.{txt,docx,pdf}``
        (default ``data/versions``).
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..content.cache import VersionContentCache
from ..content.fetcher import CachedContentFetcher
from ..content.file_fetcher import LocalFileContentFetcher
from ..exceptions import ContentFetchError, DiffInputError, UnsupportedLanguageError
from ..models.document import DocumentContext
from ..pipeline import SemanticDiffService
from ..serialization import DiffResultSerializer


logger = logging.getLogger(__name__)

app = FastAPI(title="Legal Semantic Diff API", version="0.1.0")

DEFAULT_CONTENT_DIR = "data/versions"


class DiffRequest(BaseModel):
    """Body of a text-to-text diff request."""
    old_content: str
    new_content: str
    document_id: str = Field(..., min_length=1)
    language: str
    firm_id: str = ""


@lru_cache(maxsize=1)
def get_service() -> SemanticDiffService:
    """Build the shared diff service from the environment."""
    content_dir = os.getenv("LEGAL_DIFF_CONTENT_DIR", DEFAULT_CONTENT_DIR)
    config_path = os.getenv("LEGAL_DIFF_CONFIG")

    if config_path:
        service = SemanticDiffService.from_config_file(config_path)
    else:
        service = SemanticDiffService()

    cache = VersionContentCache(
        max_size=service.config.cache_max_size,
        ttl=service.config.cache_ttl_seconds,
    )
    service.set_content_fetcher(
        CachedContentFetcher(LocalFileContentFetcher(content_dir), cache)
    )
    logger.info(f"Serving stored document versions from {content_dir}")
    return service


def _build_context(document_id: str, language: str, firm_id: str) -> DocumentContext:
    try:
        return DocumentContext(document_id=document_id, language=language, firm_id=firm_id)
    except UnsupportedLanguageError as exc:
        raise HTTPException(status_code=400, detail=exc.to_dict()) from exc


@app.get("/api/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/api/diff")
def compute_diff(
    request: DiffRequest,
    service: SemanticDiffService = Depends(get_service),
) -> JSONResponse:
    """Diff two texts supplied in the request body."""
    context = _build_context(request.document_id, request.language, request.firm_id)
    try:
        result = service.compute_semantic_diff(request.old_content, request.new_content, context)
    except DiffInputError as exc:
        raise HTTPException(status_code=400, detail=exc.to_dict()) from exc

    return JSONResponse(status_code=200, content=DiffResultSerializer.to_dict(result))


@app.get("/api/documents/{document_id}/diff")
def compare_versions(
    document_id: str,
    from_version: str,
    to_version: str,
    language: str,
    firm_id: str = "",
    service: SemanticDiffService = Depends(get_service),
) -> JSONResponse:
    """Diff two stored versions of a document."""
    context = _build_context(document_id, language, firm_id)
    try:
        result = service.compare_versions(document_id, from_version, to_version, context)
    except ContentFetchError as exc:
        raise HTTPException(status_code=404, detail=exc.to_dict()) from exc

    return JSONResponse(status_code=200, content=DiffResultSerializer.to_dict(result))
