"""Section parser for plain-text legal documents.

Splits a document into addressable sections (numbered articles, headings
or plain paragraphs), each with a stable path label such as "Art. 5.2" or
"§3".
"""

import logging
import re
from typing import List

from ..models.document import DocumentSection
from .normalizer import normalize_document

logger = logging.getLogger(__name__)

DEFAULT_MAX_SECTIONS = 100

# Blank-line paragraph break, or a line break right before "12. " / "3) "
_SECTION_BOUNDARY = re.compile(r"\n\s*\n|\n(?=\d+[.)]\s)")

_SECTION_MARKER = re.compile(
    r"^(?:Art\.|Articolul|Articol|Section|§|Cap\.|Capitolul)\s*\d+(?:\.\d+)*",
    re.IGNORECASE,
)

# Width assumed for the separator between two sections.
_SEPARATOR_WIDTH = 2


class SectionParser:
    """
    Parser that splits raw document text into sections.

    Sections beyond ``max_sections`` are dropped, not merged into the last
    section. Callers that need every section of a very long document must
    split it into chunks first.

    Offsets are cumulative positions in the raw text that advance by the
    section length plus an assumed two-character separator. They are an
    approximation: exact offsets are not guaranteed when the separators in
    the source vary in width.
    """

    def __init__(self, max_sections: int = DEFAULT_MAX_SECTIONS):
        """
        Initialize the section parser.

        Args:
            max_sections: Maximum number of sections returned per document.

        Raises:
            ValueError: If max_sections is not positive.
        """
        if max_sections <= 0:
            raise ValueError("max_sections must be positive")
        self._max_sections = max_sections

    @property
    def max_sections(self) -> int:
        return self._max_sections

    def parse(self, text: str) -> List[DocumentSection]:
        """
        Parse raw text into an ordered list of sections.

        Args:
            text: Raw (not normalized) document text.

        Returns:
            Sections in document order, at most ``max_sections`` of them.
        """
        sections: List[DocumentSection] = []
        if not text:
            return sections

        offset = 0
        dropped = 0
        for fragment in _SECTION_BOUNDARY.split(text):
            section_text = fragment.strip()
            if not section_text:
                continue
            if len(sections) >= self._max_sections:
                dropped += 1
                continue

            index = len(sections)
            sections.append(
                DocumentSection(
                    id=f"section-{index}",
                    path=self.extract_path(section_text, index + 1),
                    text=section_text,
                    normalized_text=normalize_document(section_text),
                    start_offset=offset,
                    end_offset=offset + len(section_text),
                )
            )
            offset += len(section_text) + _SEPARATOR_WIDTH

        if dropped:
            logger.debug(
                f"Section limit of {self._max_sections} reached, dropped {dropped} sections"
            )
        return sections

    @staticmethod
    def extract_path(section_text: str, position: int) -> str:
        """
        Build the path label of a section.

        Args:
            section_text: Trimmed raw text of the section.
            position: 1-based position among emitted sections.

        Returns:
            The leading legal marker (e.g. "Art. 5.2") or "§<position>".
        """
        match = _SECTION_MARKER.match(section_text)
        if match:
            return match.group(0)
        return f"§{position}"
