"""
Lead eligibility for resolved filings.

Only individual homeowners with a usable property address are leads. Timeshare
interests, companies and agencies are dropped here before any contact lookup.
"""

from __future__ import annotations

from typing import Iterable, Optional

from config.resolution import ADDRESS_UNVERIFIED_WARNING, CORPORATE_KEYWORDS
from lis_pendens.models.resolution import EligibilityDecision, MatchMethod, MatchOutcome, Matched
from lis_pendens.utils.legal_description import is_timeshare, verification_keywords

REASON_NO_ADDRESS = "no_address"
REASON_TIMESHARE = "timeshare"
REASON_CORPORATE = "corporate_entity"
REASON_EMPTY_NAME = "empty_name"
REASON_SINGLE_TOKEN = "single_token_name"


def is_corporate_name(name: str, keywords: Iterable[str] = CORPORATE_KEYWORDS) -> bool:
    """
    Check if a party name belongs to a company, lender or agency.

    Plain substring match on the uppercased name, so "LLC" also catches
    "SMITH HOLDINGS LLC" and "BANK" catches "FIRST BANK OF WHEREVER".
    """
    name_upper = (name or "").upper().strip()
    return any(keyword in name_upper for keyword in keywords)


def party_rejection_reason(
    name: str,
    keywords: Iterable[str] = CORPORATE_KEYWORDS,
) -> Optional[str]:
    """Why a single party name is not a person lead, or None if it is."""
    name_upper = (name or "").upper().strip()
    if is_corporate_name(name_upper, keywords):
        return REASON_CORPORATE
    if len(name_upper) < 2:
        return REASON_EMPTY_NAME
    if len(name_upper.split()) == 1:
        # Single words are abbreviations or institutions ("USAA", "HUD")
        return REASON_SINGLE_TOKEN
    return None


def unverified_address_warning(legal_description: str, outcome: Matched) -> Optional[str]:
    """
    Sanity check for an auto-accepted single exact-name match.

    The owner may hold a different property than the one in the filing; flag it
    when none of the filing's subdivision keywords appear in the parcel legal.
    """
    if outcome.match_method is not MatchMethod.EXACT_NAME or outcome.candidate_count != 1:
        return None
    keywords = verification_keywords(legal_description)
    if not keywords:
        return None
    parcel_legal = (outcome.legal_description_text or "").upper()
    if any(kw in parcel_legal for kw in keywords):
        return None
    return ADDRESS_UNVERIFIED_WARNING


def filter_eligibility(
    name: str,
    legal_description: str,
    outcome: MatchOutcome,
    keywords: Iterable[str] = CORPORATE_KEYWORDS,
) -> EligibilityDecision:
    """Decide whether a party on a filing is a usable lead."""
    if not isinstance(outcome, Matched):
        return EligibilityDecision(is_eligible=False, reason=REASON_NO_ADDRESS)

    warning = unverified_address_warning(legal_description, outcome)

    if is_timeshare(legal_description):
        return EligibilityDecision(is_eligible=False, reason=REASON_TIMESHARE, warning=warning)

    reason = party_rejection_reason(name, keywords)
    if reason:
        return EligibilityDecision(is_eligible=False, reason=reason, warning=warning)

    return EligibilityDecision(is_eligible=True, warning=warning)
