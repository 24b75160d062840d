"""Version content fetcher backed by files on the local filesystem."""

import logging
from pathlib import Path
from typing import List, Union
from zipfile import BadZipFile

import pdfplumber
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..exceptions import ContentFetchError
from ..interfaces.fetcher import IContentFetcher

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".docx", ".pdf")


class LocalFileContentFetcher(IContentFetcher):
    """
    Reads version texts from ``<base_dir>/<document_id>/<version_id>.<ext>``.

    Plain text files are read as UTF-8. Word documents are flattened to
    their non-empty paragraphs, PDFs to the text of their pages; in both
    cases blocks are separated by a blank line so that the section parser
    sees them as separate sections.
    """

    def __init__(self, base_dir: Union[str, Path]):
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def fetch_version_content(self, version_id: str, document_id: str) -> str:
        """
        Read the text of a version.

        Raises:
            ContentFetchError: If no file exists for the version or the file
                cannot be read.
        """
        path = self.resolve_path(version_id, document_id)
        suffix = path.suffix.lower()
        logger.debug(f"Reading version {version_id} of {document_id} from {path}")

        if suffix == ".txt":
            return self._read_text(path, version_id)
        if suffix == ".docx":
            return self._read_docx(path, version_id)
        return self._read_pdf(path, version_id)

    def resolve_path(self, version_id: str, document_id: str) -> Path:
        """
        Find the file holding a version.

        Raises:
            ContentFetchError: If no supported file exists or the identifiers
                point outside the base directory.
        """
        document_dir = self._base_dir / document_id
        # Each identifier must name exactly one level below base_dir.
        if document_dir.resolve().parent != self._base_dir.resolve():
            self._reject(version_id, document_id)

        for extension in SUPPORTED_EXTENSIONS:
            candidate = document_dir / f"{version_id}{extension}"
            if candidate.resolve().parent != document_dir.resolve():
                self._reject(version_id, document_id)
            if candidate.is_file():
                return candidate

        raise ContentFetchError(
            message=f"No content found for version {version_id}",
            details={
                "version_id": version_id,
                "document_id": document_id,
                "supported_formats": list(SUPPORTED_EXTENSIONS),
            },
        )

    def _reject(self, version_id: str, document_id: str) -> None:
        logger.warning(
            f"Rejected version {version_id!r} of {document_id!r}: outside {self._base_dir}"
        )
        raise ContentFetchError(
            message=f"Invalid location for version {version_id}",
            details={"version_id": version_id, "document_id": document_id},
        )

    @staticmethod
    def _read_text(path: Path, version_id: str) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentFetchError(
                message=f"Failed to read text file: {e}",
                details={"version_id": version_id, "file_path": str(path)},
            ) from e

    @staticmethod
    def _read_docx(path: Path, version_id: str) -> str:
        try:
            doc = Document(str(path))
        except (BadZipFile, PackageNotFoundError) as e:
            raise ContentFetchError(
                message="Document is corrupted or not a valid Word file",
                details={"version_id": version_id, "file_path": str(path), "original_error": str(e)},
            ) from e

        paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]
        return "\n\n".join(paragraphs)

    @staticmethod
    def _read_pdf(path: Path, version_id: str) -> str:
        # Validate with PyPDF2 first, then extract with pdfplumber
        try:
            PdfReader(str(path))
        except PdfReadError as e:
            raise ContentFetchError(
                message="PDF file is corrupted or encrypted",
                details={"version_id": version_id, "file_path": str(path), "original_error": str(e)},
            ) from e
        except Exception as e:
            raise ContentFetchError(
                message=f"Failed to open PDF: {e}",
                details={"version_id": version_id, "file_path": str(path), "original_error": str(e)},
            ) from e

        try:
            with pdfplumber.open(str(path)) as pdf:
                text_parts: List[str] = []
                for page in pdf.pages:
                    page_text = page.extract_text()
                    if page_text:
                        text_parts.append(page_text)
        except Exception as e:
            raise ContentFetchError(
                message=f"Failed to extract PDF content: {e}",
                details={"version_id": version_id, "file_path": str(path), "original_error": str(e)},
            ) from e

        return "\n\n".join(text_parts)
