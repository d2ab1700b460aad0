"""
Legal Description Utilities

Isolates the subdivision name from a clerk legal description and tokenizes
registry legal text for keyword scoring.

Clerk legal descriptions seen on Lis Pendens filings:
- Lot: 7 RIDGEMOORE PHASE ONE
- Lot: 9 Block: D PRIMROSE TERRACE
- Lot: 105 TEMPLE GROVE ESTATES PHASE 2
- TS: VISTANA LAKES CONDOMINIUM
- Lot: 3C REPLAT OF FAIRWAY TOWNHOMES AT MEADOW WOODS
- Lot: 10 VISTA LAKES VILLAGE N 2 AMHURST

Registry legal text (S_LEGAL) is free-form, e.g.
"PRIMROSE TERRACE 12/34 LOT 9 BLK D".
"""

import re
from typing import AbstractSet, Iterable

from config.resolution import MIN_KEYWORD_LENGTH, SUBDIVISION_STOP_WORDS
from lis_pendens.models.resolution import SubdivisionKey

# Applied in order, each at most once, each anchored at the current start
_LEADING_MARKERS = (
    re.compile(r"^Lot:\s*\S+\s*", re.IGNORECASE),
    re.compile(r"^Block:\s*\S+\s*", re.IGNORECASE),
    re.compile(r"^TS:\s*", re.IGNORECASE),
    re.compile(r"^REPLAT OF\s*", re.IGNORECASE),
)

_TIMESHARE_RE = re.compile(r"^TS:", re.IGNORECASE)

# Registry legal text uses punctuation as separators ("12/34", "PH-2", "(AMD)")
_LEGAL_SPLIT_RE = re.compile(r"[\s\-/,.()+]+")


def strip_leading_markers(legal_description: str) -> str:
    """Remove Lot/Block/TS/REPLAT OF prefixes to leave the subdivision name."""
    text = (legal_description or "").strip()
    for pattern in _LEADING_MARKERS:
        text = pattern.sub("", text, count=1)
    return text.strip()


def significant_tokens(tokens: Iterable[str], min_length: int = MIN_KEYWORD_LENGTH) -> list[str]:
    """Uppercase tokens of at least ``min_length`` chars that are not pure numbers."""
    kept: list[str] = []
    for token in tokens:
        upper = token.upper()
        if len(upper) >= min_length and not upper.isdigit():
            kept.append(upper)
    return kept


def extract_subdivision(
    legal_description: str,
    stop_words: AbstractSet[str] = SUBDIVISION_STOP_WORDS,
) -> SubdivisionKey:
    """Isolate the subdivision name and split its keywords into unique/common."""
    raw = legal_description or ""
    cleaned = strip_leading_markers(raw)
    keywords = set(significant_tokens(cleaned.split()))
    return SubdivisionKey(
        raw=raw,
        cleaned=cleaned,
        unique=frozenset(k for k in keywords if k not in stop_words),
        common=frozenset(k for k in keywords if k in stop_words),
    )


def tokenize_legal_text(text: str) -> set[str]:
    """Token set used for exact keyword comparison against a parcel legal."""
    return set(significant_tokens(t for t in _LEGAL_SPLIT_RE.split(text or "") if t))


def verification_keywords(legal_description: str) -> list[str]:
    """Subdivision keywords (no stop-word split) for the single-match sanity check."""
    return significant_tokens(strip_leading_markers(legal_description).split())


def is_timeshare(legal_description: str) -> bool:
    return bool(_TIMESHARE_RE.match((legal_description or "").strip()))
