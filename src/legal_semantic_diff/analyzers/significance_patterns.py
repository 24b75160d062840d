"""Legal-term pattern tables for change significance classification.

Each supported language has two pattern lists: critical terms (liability,
termination, indemnities...) and substantive terms (amounts, dates,
durations, party roles). The tables are checked for completeness when the
module is imported; a language without patterns is a configuration error,
never a silent fallback to another language.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from ..config.models import ConfigurationError, ValidationResult
from ..models.enums import Language

MatchSignature = Optional[Tuple[Optional[str], ...]]


@dataclass(frozen=True)
class LanguagePatterns:
    """Compiled significance patterns for one language."""
    language: Language
    critical: Tuple[Pattern[str], ...]
    substantive: Tuple[Pattern[str], ...]


def match_signature(pattern: Pattern[str], text: str) -> MatchSignature:
    """
    Return the first match of a pattern as a comparable tuple.

    The tuple holds the whole match followed by every group, or is None
    when the pattern does not occur in the text.
    """
    match = pattern.search(text)
    if match is None:
        return None
    return (match.group(0),) + match.groups()


def _compile(patterns: List[str], flags: int = re.IGNORECASE) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, flags) for p in patterns)


def _build_pattern_tables() -> Dict[Language, LanguagePatterns]:
    """Build the per-language pattern tables."""
    return {
        Language.RO: LanguagePatterns(
            language=Language.RO,
            critical=_compile([
                r"\b(r[ăa]spunderea?|daunele|daune|penalit[ăa][țţt]ile|penalit[ăa][țţt]i"
                r"|rezilierea?|[îi]ncetarea?)\b",
                r"\b(garan[țţt]ie|garan[țţt]ia|compensa[țţt]ie|desp[ăa]gubirea?)\b",
                r"\b(clauza de for[țţt][ăa] major[ăa]|for[țţt][ăa] major[ăa])\b",
                r"\b(limit[ăa] de r[ăa]spundere|excluderea? r[ăa]spunderii)\b",
            ]),
            substantive=_compile([
                r"\b(\d[\d.,]*\s*(lei|euro|ron|usd|eur))\b",
                r"\b(\d{1,2}[./-]\d{1,2}[./-]\d{2,4})\b",
                r"\b(\d+\s*(?:de\s+)?(zile|zi|s[ăa]pt[ăa]m[âa]ni|luni|lun[ăa]|ani|an))\b",
                r"\b(termenul|termen|perioad[ăa]|durat[ăa]|scaden[țţt][ăa])\b",
                r"\b(p[ăa]r[țţt]ile|p[ăa]r[țţt]i|contractant|beneficiar|prestator)\b",
            ]),
        ),
        Language.EN: LanguagePatterns(
            language=Language.EN,
            critical=_compile([
                r"\b(liability|liabilities|damages|penalties|penalty|termination|breach)\b",
                r"\b(warranty|warranties|indemnification|indemnity|compensation)\b",
                r"\b(force majeure|act of god)\b",
                r"\b(limitation of liability|exclusion)\b",
            ]),
            substantive=_compile([
                r"(\$\s?\d[\d.,]*|\b\d[\d.,]*\s*(dollars?|euros?|usd|eur|gbp)\b)",
                r"\b(\d{1,2}[./-]\d{1,2}[./-]\d{2,4})\b",
                r"\b(\d+\s*(?:business\s+|calendar\s+|working\s+)?(days?|weeks?|months?|years?))\b",
                r"\b(term|period|duration|deadline|expir\w*)\b",
                r"\b(party|parties|contractor|client|vendor)\b",
            ]),
        ),
    }


def validate_pattern_tables(tables: Dict[Language, LanguagePatterns]) -> ValidationResult:
    """
    Check that every supported language has a complete pattern set.

    Args:
        tables: Pattern tables keyed by language.

    Returns:
        ValidationResult listing every missing or empty table.
    """
    result = ValidationResult(is_valid=True)
    for language in Language:
        patterns = tables.get(language)
        if patterns is None:
            result.add_error(f"No significance patterns for language '{language.value}'")
            continue
        if patterns.language is not language:
            result.add_error(
                f"Pattern table for '{language.value}' is labelled '{patterns.language.value}'"
            )
        if not patterns.critical:
            result.add_error(f"Critical pattern list for '{language.value}' is empty")
        if not patterns.substantive:
            result.add_error(f"Substantive pattern list for '{language.value}' is empty")
    return result


SIGNIFICANCE_PATTERNS = _build_pattern_tables()

_validation = validate_pattern_tables(SIGNIFICANCE_PATTERNS)
if not _validation.is_valid:
    raise ConfigurationError("Incomplete significance pattern tables", validation_result=_validation)
