"""Filing, parcel and resolution models."""

from lis_pendens.models.filing import CandidateParcel, RawFiling
from lis_pendens.models.resolution import (
    Cancelled,
    EligibilityDecision,
    MatchMethod,
    MatchOutcome,
    Matched,
    NoLegalMatch,
    NormalizedParty,
    NotFound,
    ResolutionDiagnostics,
    ResolutionResult,
    SubdivisionKey,
    Tier,
)

__all__ = [
    "CandidateParcel",
    "Cancelled",
    "EligibilityDecision",
    "MatchMethod",
    "MatchOutcome",
    "Matched",
    "NoLegalMatch",
    "NormalizedParty",
    "NotFound",
    "RawFiling",
    "ResolutionDiagnostics",
    "ResolutionResult",
    "SubdivisionKey",
    "Tier",
]
