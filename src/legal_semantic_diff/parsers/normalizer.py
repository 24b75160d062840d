"""Text normalization tuned to legal prose.

Formatting-only edits (whitespace, typographic quotes and dashes, page
headers, citation spacing, dotted dates) collapse to identical strings so
that the diff stages only see wording changes.
"""

import re

_WHITESPACE = re.compile(r"\s+")

_DOUBLE_QUOTES = re.compile(r"[“”„‟″]")
_SINGLE_QUOTES = re.compile(r"[‘’‚‛′]")
_DASHES = re.compile(r"[‒–—―−]")

# "Page 3 of 12", "pagina 3 din 12"
_PAGE_ARTIFACT = re.compile(r"\b(?:page|pagina)\s*\d+\s*(?:of|din)\s*\d+\b", re.IGNORECASE)

_CITATION_ABBREVIATION = re.compile(r"\b(Art|Nr)\.\s*", re.IGNORECASE)

_DOTTED_DATE = re.compile(r"(?<![0-9])([0-9]{1,2})\.([0-9]{1,2})\.([0-9]{4})(?![0-9])")


def normalize_document(text: str) -> str:
    """
    Canonicalize legal text for comparison.

    Case is preserved. The function is total and idempotent:
    ``normalize_document(normalize_document(x)) == normalize_document(x)``.

    Args:
        text: Raw text of a document or a fragment of one.

    Returns:
        The normalized text.
    """
    if not text:
        return ""

    result = _WHITESPACE.sub(" ", text)
    result = _DOUBLE_QUOTES.sub('"', result)
    result = _SINGLE_QUOTES.sub("'", result)
    result = _DASHES.sub("-", result)
    result = _strip_page_artifacts(result)
    result = _CITATION_ABBREVIATION.sub(lambda m: f"{m.group(1)}. ", result)
    result = _DOTTED_DATE.sub(r"\1-\2-\3", result)
    # Removals and citation spacing can leave double or trailing spaces.
    result = _WHITESPACE.sub(" ", result)
    return result.strip()


def normalize_for_comparison(text: str) -> str:
    """Stricter normalization used only for the formatting-equality test."""
    return normalize_document(text).lower()


def is_formatting_equal(before: str, after: str) -> bool:
    """Check whether two texts differ only in formatting."""
    return normalize_for_comparison(before) == normalize_for_comparison(after)


def _strip_page_artifacts(text: str) -> str:
    """Remove page-number artifacts until none are left."""
    while True:
        stripped = _WHITESPACE.sub(" ", _PAGE_ARTIFACT.sub(" ", text))
        if stripped == text:
            return stripped
        text = stripped
