"""
Candidate parcel scoring.

Picks the registry parcel whose legal text best matches the filing's
subdivision keywords. Used by both search tiers; only the owner filter and
the match-method labels differ.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from loguru import logger

from config.resolution import KEYWORD_COVERAGE_RATIO, MIN_KEYWORD_HITS
from lis_pendens.models.filing import CandidateParcel
from lis_pendens.models.resolution import (
    MatchMethod,
    MatchOutcome,
    Matched,
    NoLegalMatch,
    NormalizedParty,
    NotFound,
    SubdivisionKey,
    Tier,
)
from lis_pendens.utils.legal_description import tokenize_legal_text
from lis_pendens.utils.name_normalizer import extract_surname, name_tokens

TAG = "[SCORE]"

_SINGLE_METHOD = {Tier.EXACT: MatchMethod.EXACT_NAME, Tier.FUZZY: MatchMethod.LIKE_SINGLE}
_LEGAL_METHOD = {
    Tier.EXACT: MatchMethod.LEGAL_DESCRIPTION,
    Tier.FUZZY: MatchMethod.LIKE_LEGAL_DESCRIPTION,
}


def min_required_hits(total_keywords: int) -> int:
    """Keyword hits needed to accept a winner; scales with the key but capped low."""
    scaled = max(MIN_KEYWORD_HITS, math.ceil(total_keywords * KEYWORD_COVERAGE_RATIO))
    return min(scaled, MIN_KEYWORD_HITS)


def filter_by_owner(
    candidates: Sequence[CandidateParcel],
    party: NormalizedParty,
) -> list[CandidateParcel]:
    """Keep parcels whose owner shares a name token (or the surname) with the filing."""
    wanted = name_tokens(party.primary_name)
    surname = extract_surname(party.primary_name)
    if surname:
        wanted.add(surname.upper())
    return [c for c in candidates if name_tokens(c.owner_name) & wanted]


def keyword_scores(candidate: CandidateParcel, key: SubdivisionKey) -> tuple[int, int]:
    """(unique_hits, common_hits) by exact token equality."""
    tokens = tokenize_legal_text(candidate.legal_description_text)
    return len(key.unique & tokens), len(key.common & tokens)


def _matched(
    candidate: CandidateParcel,
    method: MatchMethod,
    score: Optional[int],
    candidate_count: int,
) -> Matched:
    return Matched(
        parcel_number=candidate.parcel_number,
        address_line=candidate.address_line.strip(),
        city=candidate.city.strip(),
        zip=candidate.zip.strip(),
        match_method=method,
        score=score,
        candidate_count=candidate_count,
        owner_name=candidate.owner_name,
        legal_description_text=candidate.legal_description_text,
    )


def score(
    candidates: Sequence[CandidateParcel],
    key: SubdivisionKey,
    owner_filter: Optional[NormalizedParty] = None,
    tier: Tier = Tier.EXACT,
    log: Any = None,
) -> MatchOutcome:
    """Score candidates against the subdivision key and pick a winner, if confident.

    ``log`` is a bound loguru logger (per filing); defaults to the module logger.
    """
    log = log or logger
    if not candidates:
        return NotFound()

    prefilter_count = len(candidates)
    if owner_filter is not None:
        candidates = filter_by_owner(candidates, owner_filter)
        log.debug(
            f"{TAG}   owner filter: {len(candidates)}/{prefilter_count} candidates kept"
        )
        if not candidates:
            return NotFound(prefilter_count=prefilter_count)

    if len(candidates) == 1:
        only = candidates[0]
        log.info(
            f'{TAG}   single candidate accepted: parcel={only.parcel_number}, owner="{only.owner_name}"'
        )
        return _matched(only, _SINGLE_METHOD[tier], None, 1)

    best: Optional[CandidateParcel] = None
    best_total = -1
    best_unique = -1
    for cand in candidates:
        unique_hits, common_hits = keyword_scores(cand, key)
        total = unique_hits + common_hits
        if total > best_total or (total == best_total and unique_hits > best_unique):
            best, best_total, best_unique = cand, total, unique_hits

    required = min_required_hits(key.total_keywords)
    log.info(
        f"{TAG}   {len(candidates)} candidates, keywords={sorted(key.keywords)}: "
        f"best total={best_total} unique={best_unique} (need unique>=1, total>={required})"
    )

    if best is not None and best_unique >= 1 and best_total >= required:
        return _matched(best, _LEGAL_METHOD[tier], best_total, len(candidates))
    return NoLegalMatch(candidate_count=len(candidates))
