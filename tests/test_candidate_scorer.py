from __future__ import annotations

from lis_pendens.models.filing import CandidateParcel
from lis_pendens.models.resolution import (
    MatchMethod,
    Matched,
    NoLegalMatch,
    NormalizedParty,
    NotFound,
    SubdivisionKey,
    Tier,
)
from lis_pendens.services import candidate_scorer
from lis_pendens.utils.legal_description import extract_subdivision

PRIMROSE = extract_subdivision("Lot: 9 Block: D PRIMROSE TERRACE")


def _parcel(parcel_number: str, legal: str, owner: str = "MAHURIN ESSIE B", address: str = "") -> CandidateParcel:
    return CandidateParcel(
        parcel_number=parcel_number,
        owner_name=owner,
        legal_description_text=legal,
        address_line=address or f"{parcel_number} MAIN ST",
        city="ORLANDO",
        zip="32801",
    )


def test_min_required_hits() -> None:
    assert candidate_scorer.min_required_hits(0) == 2
    assert candidate_scorer.min_required_hits(2) == 2
    assert candidate_scorer.min_required_hits(10) == 2


def test_empty_candidates_not_found() -> None:
    assert candidate_scorer.score([], PRIMROSE) == NotFound()


def test_single_candidate_accepted_unscored() -> None:
    only = _parcel("1", "SOMETHING ELSE ENTIRELY", address="  5038 TUSCAN OAK DR ")

    outcome = candidate_scorer.score([only], PRIMROSE)

    assert isinstance(outcome, Matched)
    assert outcome.match_method is MatchMethod.EXACT_NAME
    assert outcome.score is None
    assert outcome.candidate_count == 1
    assert outcome.address_line == "5038 TUSCAN OAK DR"


def test_single_fuzzy_candidate_uses_like_single() -> None:
    outcome = candidate_scorer.score([_parcel("1", "X")], PRIMROSE, tier=Tier.FUZZY)

    assert isinstance(outcome, Matched)
    assert outcome.match_method is MatchMethod.LIKE_SINGLE


def test_legal_description_picks_best_candidate() -> None:
    candidates = [
        _parcel("1", "LAKE SHORE ESTATES LOT 4"),
        _parcel("2", "PRIMROSE TERRACE 12/34 LOT 9 BLK D"),
        _parcel("3", "WINDERMERE DOWNS"),
    ]

    outcome = candidate_scorer.score(candidates, PRIMROSE)

    assert isinstance(outcome, Matched)
    assert outcome.parcel_number == "2"
    assert outcome.match_method is MatchMethod.LEGAL_DESCRIPTION
    assert outcome.score == 2
    assert outcome.candidate_count == 3


def test_common_only_hits_are_not_enough() -> None:
    key = extract_subdivision("Lot: 1 PRIMROSE TERRACE LAKES")
    candidates = [
        _parcel("1", "TERRACE LAKES UNIT 2"),
        _parcel("2", "OTHER PLACE"),
    ]

    outcome = candidate_scorer.score(candidates, key)

    assert outcome == NoLegalMatch(candidate_count=2)


def test_single_unique_hit_below_threshold() -> None:
    candidates = [
        _parcel("1", "PRIMROSE GARDENS"),
        _parcel("2", "OTHER PLACE"),
    ]

    outcome = candidate_scorer.score(candidates, PRIMROSE)

    assert isinstance(outcome, NoLegalMatch)


def test_no_keywords_never_matches_multiple_candidates() -> None:
    key = SubdivisionKey(raw="", cleaned="")
    candidates = [_parcel("1", "PRIMROSE TERRACE"), _parcel("2", "PRIMROSE TERRACE")]

    assert candidate_scorer.score(candidates, key) == NoLegalMatch(candidate_count=2)


def test_tie_goes_to_first_candidate() -> None:
    candidates = [
        _parcel("1", "PRIMROSE TERRACE"),
        _parcel("2", "PRIMROSE TERRACE"),
    ]

    outcome = candidate_scorer.score(candidates, PRIMROSE)

    assert isinstance(outcome, Matched)
    assert outcome.parcel_number == "1"


def test_equal_total_prefers_more_unique_hits() -> None:
    key = SubdivisionKey(
        raw="",
        cleaned="",
        unique=frozenset({"PRIMROSE", "AMHURST"}),
        common=frozenset({"TERRACE", "VILLAGE"}),
    )
    candidates = [
        _parcel("1", "PRIMROSE TERRACE VILLAGE"),
        _parcel("2", "PRIMROSE AMHURST TERRACE"),
    ]

    outcome = candidate_scorer.score(candidates, key)

    assert isinstance(outcome, Matched)
    assert outcome.parcel_number == "2"


def test_owner_filter_drops_unrelated_owners() -> None:
    party = NormalizedParty(all_names=("DE OLIVEIRA ANDREA C",), primary_name="DE OLIVEIRA ANDREA C")
    candidates = [
        _parcel("1", "PRIMROSE TERRACE", owner="OLIVEIRAS FARM"),
        _parcel("2", "WINDERMERE", owner="OLIVEIRA ANDREA"),
    ]

    outcome = candidate_scorer.score(candidates, PRIMROSE, owner_filter=party, tier=Tier.FUZZY)

    assert isinstance(outcome, Matched)
    assert outcome.parcel_number == "2"
    assert outcome.match_method is MatchMethod.LIKE_SINGLE


def test_owner_filter_can_empty_the_list() -> None:
    party = NormalizedParty(all_names=("SMITH JOHN",), primary_name="SMITH JOHN")
    candidates = [_parcel("1", "PRIMROSE TERRACE", owner="SMITHFIELD CO")]

    outcome = candidate_scorer.score(candidates, PRIMROSE, owner_filter=party, tier=Tier.FUZZY)

    assert outcome == NotFound(prefilter_count=1)


def test_fuzzy_legal_match_method() -> None:
    party = NormalizedParty(all_names=("SMITH JOHN",), primary_name="SMITH JOHN")
    candidates = [
        _parcel("1", "WINDERMERE", owner="SMITH JOHN A"),
        _parcel("2", "PRIMROSE TERRACE LOT 9", owner="SMITH MARY"),
    ]

    outcome = candidate_scorer.score(candidates, PRIMROSE, owner_filter=party, tier=Tier.FUZZY)

    assert isinstance(outcome, Matched)
    assert outcome.parcel_number == "2"
    assert outcome.match_method is MatchMethod.LIKE_LEGAL_DESCRIPTION
    assert outcome.score == 2
