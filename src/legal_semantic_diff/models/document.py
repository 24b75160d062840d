"""Document-related data models for the semantic diff engine."""

from dataclasses import dataclass
from typing import Union

from .enums import Language


@dataclass(frozen=True)
class DocumentContext:
    """
    Request-scoped descriptor of the document being compared.

    Passed through every stage unchanged. The language is resolved on
    construction, so an unsupported tag fails before any work is done.
    """
    document_id: str
    language: Union[Language, str]
    firm_id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "language", Language.from_tag(self.language))


@dataclass(frozen=True)
class DocumentSection:
    """
    A contiguous span of one document version.

    Offsets refer to the raw (not normalized) text and are approximate:
    the parser assumes a two-character separator between sections.
    """
    id: str
    path: str  # "Art. 5.2", "§3"
    text: str
    normalized_text: str
    start_offset: int
    end_offset: int

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset
