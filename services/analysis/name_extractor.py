"""Best-effort medicine name extraction from free-form analysis text."""

from __future__ import annotations

import re
from typing import Optional, Pattern, Sequence

from models.language import Language
from services.analysis.prompts import UNKNOWN_MEDICINE

MAX_NAME_LENGTH = 50

# Labels emitted by the initial-analysis prompt in either language.
STRUCTURED_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"MEDICINE NAME:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"औषधिको नाम:\s*([^\n]+)", re.IGNORECASE),
)

# Looser phrasings found in analyses written before the structured prompt.
NARRATIVE_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"(?:Medicine name|Name|Medicine):\s*([^\n.]+)", re.IGNORECASE),
    re.compile(r"^(?:Medicine name|Name|Medicine):\s*([^\n.]+)", re.IGNORECASE | re.MULTILINE),
    re.compile(r'The medicine "([^"]+)"', re.IGNORECASE),
    re.compile(r'medicine called "([^"]+)"', re.IGNORECASE),
    re.compile(r"medicine (?:is|named|called) ([^\n.]+)", re.IGNORECASE),
)

_NAME_FILLER = re.compile(r"^(the|medicine|name|called|is)\s+", re.IGNORECASE)
_LEADING_FILLER = re.compile(r"^(?:based on|looking at|analyzing|for|the|medicine|package)\s+", re.IGNORECASE)
_TRAILING_FILLER = re.compile(r"(?:you provided|provided|image|package|here|is)\s*$", re.IGNORECASE)


def _first_match(patterns: Sequence[Pattern[str]], text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def _from_first_line(text: str) -> Optional[str]:
    first_line = text.split("\n", 1)[0]
    cleaned = _LEADING_FILLER.sub("", first_line)
    cleaned = _TRAILING_FILLER.sub("", cleaned).strip()

    if len(cleaned) > MAX_NAME_LENGTH:
        candidate = re.split(r"[,.]", cleaned, maxsplit=1)[0].strip()
        return candidate if candidate and len(candidate) <= MAX_NAME_LENGTH else None
    return cleaned or None


def extract_medicine_name(analysis_text: Optional[str], language: Language = Language.EN) -> str:
    """Return the medicine name mentioned in an analysis.

    Structured labels are tried first, then narrative phrasings, then the
    first line of the text with filler words removed. The first pattern that
    matches decides the name; a blank value gives the localized "Unknown
    Medicine" placeholder, as does no match at all. Never raises.
    """
    placeholder = UNKNOWN_MEDICINE[language]
    if not isinstance(analysis_text, str) or not analysis_text.strip():
        return placeholder

    name = _first_match(STRUCTURED_PATTERNS, analysis_text)
    if name is not None:
        return name or placeholder

    name = _first_match(NARRATIVE_PATTERNS, analysis_text)
    if name is not None:
        return _NAME_FILLER.sub("", name) or placeholder

    return _from_first_line(analysis_text) or placeholder
