"""Value objects passed between the address resolution stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Union


class Tier(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"


class MatchMethod(str, Enum):
    EXACT_NAME = "exact_name"
    LEGAL_DESCRIPTION = "legal_description"
    LIKE_SINGLE = "like_single"
    LIKE_LEGAL_DESCRIPTION = "like_legal_description"


@dataclass(frozen=True)
class NormalizedParty:
    all_names: tuple[str, ...] = ()
    primary_name: str = ""


@dataclass(frozen=True)
class SubdivisionKey:
    """Subdivision name isolated from a legal description, plus its keywords."""

    raw: str
    cleaned: str
    unique: frozenset[str] = frozenset()
    common: frozenset[str] = frozenset()

    @property
    def keywords(self) -> frozenset[str]:
        return self.unique | self.common

    @property
    def total_keywords(self) -> int:
        return len(self.unique) + len(self.common)


@dataclass(frozen=True)
class Matched:
    parcel_number: str
    address_line: str
    city: str
    zip: str
    match_method: MatchMethod
    score: Optional[int] = None  # None when a single candidate was accepted unscored
    candidate_count: int = 1
    owner_name: str = ""
    legal_description_text: str = ""


@dataclass(frozen=True)
class NoLegalMatch:
    candidate_count: int


@dataclass(frozen=True)
class NotFound:
    prefilter_count: int = 0  # candidates dropped by the owner filter, if any


@dataclass(frozen=True)
class Cancelled:
    """Resolution stopped before the search was exhausted."""

    candidate_count: int = 0


MatchOutcome = Union[Matched, NoLegalMatch, NotFound, Cancelled]


@dataclass(frozen=True)
class EligibilityDecision:
    is_eligible: bool
    reason: Optional[str] = None
    warning: Optional[str] = None


@dataclass(frozen=True)
class ResolutionDiagnostics:
    candidate_counts_by_tier: Mapping[str, int] = field(default_factory=dict)
    keywords_used: tuple[str, ...] = ()
    surname: Optional[str] = None
    cancelled: bool = False
    lookup_status: str = "pending"


@dataclass(frozen=True)
class ResolutionResult:
    outcome: MatchOutcome
    eligibility: EligibilityDecision
    diagnostics: ResolutionDiagnostics = field(default_factory=ResolutionDiagnostics)

    @property
    def is_matched(self) -> bool:
        return isinstance(self.outcome, Matched)

    @property
    def needs_manual_review(self) -> bool:
        """Unmatched filings go to the manual review queue instead of being dropped."""
        return not self.is_matched

    def to_dict(self) -> dict:
        outcome = self.outcome
        payload: dict = {
            "lookup_status": self.diagnostics.lookup_status,
            "outcome": type(outcome).__name__,
            "is_eligible": self.eligibility.is_eligible,
            "ineligible_reason": self.eligibility.reason,
            "match_warning": self.eligibility.warning,
            "candidate_counts_by_tier": dict(self.diagnostics.candidate_counts_by_tier),
            "keywords_used": list(self.diagnostics.keywords_used),
            "surname": self.diagnostics.surname,
            "cancelled": self.diagnostics.cancelled,
            "needs_manual_review": self.needs_manual_review,
        }
        if isinstance(outcome, Matched):
            payload.update({
                "parcel_number": outcome.parcel_number,
                "property_address": outcome.address_line,
                "property_city": outcome.city,
                "property_zip": outcome.zip,
                "owner_name_on_parcel": outcome.owner_name,
                "parcel_legal": outcome.legal_description_text,
                "match_method": outcome.match_method.value,
                "match_score": outcome.score,
            })
        else:
            payload["property_address"] = None
            payload["match_method"] = "failed"
        return payload
