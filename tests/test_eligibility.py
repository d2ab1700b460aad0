from __future__ import annotations

import pytest

from config.resolution import ADDRESS_UNVERIFIED_WARNING
from lis_pendens.models.resolution import MatchMethod, Matched, NoLegalMatch, NotFound
from lis_pendens.services.eligibility import (
    REASON_CORPORATE,
    REASON_EMPTY_NAME,
    REASON_NO_ADDRESS,
    REASON_SINGLE_TOKEN,
    REASON_TIMESHARE,
    filter_eligibility,
    is_corporate_name,
    party_rejection_reason,
    unverified_address_warning,
)

LEGAL = "Lot: 9 Block: D PRIMROSE TERRACE"


def _matched(
    parcel_legal: str = "PRIMROSE TERRACE 12/34 LOT 9 BLK D",
    method: MatchMethod = MatchMethod.EXACT_NAME,
    candidate_count: int = 1,
) -> Matched:
    return Matched(
        parcel_number="292233123400090",
        address_line="5038 TUSCAN OAK DR",
        city="ORLANDO",
        zip="32839",
        match_method=method,
        candidate_count=candidate_count,
        legal_description_text=parcel_legal,
    )


def test_individual_with_address_is_eligible() -> None:
    decision = filter_eligibility("MAHURIN ESSIE B", LEGAL, _matched())

    assert decision.is_eligible is True
    assert decision.reason is None
    assert decision.warning is None


def test_corporate_name_is_ineligible() -> None:
    decision = filter_eligibility("D J GLOBAL HOLDING LLC", LEGAL, _matched())

    assert decision.is_eligible is False
    assert decision.reason == REASON_CORPORATE


def test_corporate_name_without_address_is_ineligible() -> None:
    decision = filter_eligibility("D J GLOBAL HOLDING LLC", LEGAL, NotFound())

    assert decision.is_eligible is False
    assert decision.reason == REASON_NO_ADDRESS


@pytest.mark.parametrize("outcome", [NotFound(), NoLegalMatch(candidate_count=3)])
def test_unmatched_outcome_is_ineligible(outcome) -> None:
    decision = filter_eligibility("MAHURIN ESSIE B", LEGAL, outcome)

    assert decision.is_eligible is False
    assert decision.reason == REASON_NO_ADDRESS


def test_timeshare_is_always_ineligible() -> None:
    decision = filter_eligibility(
        "MAHURIN ESSIE B",
        "TS: VISTANA LAKES CONDOMINIUM",
        _matched(parcel_legal="VISTANA LAKES CONDOMINIUM", method=MatchMethod.LEGAL_DESCRIPTION),
    )

    assert decision.is_eligible is False
    assert decision.reason == REASON_TIMESHARE


def test_single_token_and_empty_names() -> None:
    assert party_rejection_reason("MADONNA") == REASON_SINGLE_TOKEN
    assert party_rejection_reason("") == REASON_EMPTY_NAME
    assert party_rejection_reason("X") == REASON_EMPTY_NAME
    assert party_rejection_reason("MAHURIN ESSIE B") is None


def test_corporate_match_is_substring() -> None:
    assert is_corporate_name("secretary of housing and urban development")
    assert is_corporate_name("VINCENT JOHN")  # contains INC
    assert not is_corporate_name("MAHURIN ESSIE B")


def test_injected_keywords() -> None:
    assert party_rejection_reason("ACME WIDGETS", keywords=("WIDGETS",)) == REASON_CORPORATE
    assert party_rejection_reason("SMITH LLC JOHN", keywords=("WIDGETS",)) is None


def test_unverified_single_exact_match_is_flagged() -> None:
    outcome = _matched(parcel_legal="WINDERMERE DOWNS LOT 4")

    decision = filter_eligibility("MAHURIN ESSIE B", LEGAL, outcome)

    assert decision.is_eligible is True
    assert decision.warning == ADDRESS_UNVERIFIED_WARNING


def test_unverified_check_uses_substring_of_parcel_legal() -> None:
    outcome = _matched(parcel_legal="PRIMROSETERRACE PB 12")

    assert unverified_address_warning(LEGAL, outcome) is None


def test_unverified_check_only_for_single_exact_name() -> None:
    scored = _matched(parcel_legal="WINDERMERE", method=MatchMethod.LEGAL_DESCRIPTION, candidate_count=3)
    fuzzy = _matched(parcel_legal="WINDERMERE", method=MatchMethod.LIKE_SINGLE)

    assert unverified_address_warning(LEGAL, scored) is None
    assert unverified_address_warning(LEGAL, fuzzy) is None


def test_unverified_check_skipped_without_keywords() -> None:
    assert unverified_address_warning("Lot: 9", _matched(parcel_legal="WINDERMERE")) is None


def test_warning_kept_on_ineligible_party() -> None:
    decision = filter_eligibility("ACME HOLDING LLC", LEGAL, _matched(parcel_legal="WINDERMERE"))

    assert decision.is_eligible is False
    assert decision.warning == ADDRESS_UNVERIFIED_WARNING
