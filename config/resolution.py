"""
Address Resolution Configuration - Parcel registry lookup for Lis Pendens filings.

This configuration controls the two-tier owner search against the Florida
statewide cadastral layer and the keyword tables used to score and filter
candidate parcels.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv

# ArcGIS FeatureServer for the Florida Statewide Cadastral (DOR NAL) layer
PARCEL_REGISTRY_URL = (
    "https://services9.arcgis.com/Gh9awoU677aKree0/arcgis/rest/services/"
    "Florida_Statewide_Cadastral/FeatureServer/0"
)

# Registry field names
FIELD_COUNTY_NUMBER = "CO_NO"
FIELD_OWNER_NAME = "OWN_NAME"
PARCEL_OUT_FIELDS = ("PARCELNO", "OWN_NAME", "PHY_ADDR1", "PHY_CITY", "PHY_ZIPCD", "S_LEGAL")

# Result limits by tier (None = registry default)
EXACT_RESULT_LIMIT: int | None = None
FUZZY_RESULT_LIMIT = 500

# Request settings
REGISTRY_TIMEOUT_SECONDS = 30
REGISTRY_MAX_RETRIES = 3
REGISTRY_RETRY_BACKOFF_SECONDS = 1.5

# Batch resolution
DEFAULT_CONCURRENCY = 4

# County name -> DOR county number. Add counties here as they're onboarded,
# or via PARCEL_JURISDICTION_CODES="osceola=59,seminole=69".
JURISDICTION_CODES: Mapping[str, int] = MappingProxyType({
    "orange": 58,
})

DEFAULT_JURISDICTION = "orange"

# Leading particles that are not the surname in "LAST FIRST" registry order
NAME_PREFIXES = frozenset({"DE", "DEL", "DELA", "DI", "VAN", "VON", "LA", "LE", "MC", "ST"})

# Generic subdivision terms: a hit on one of these is weak evidence on its own
SUBDIVISION_STOP_WORDS = frozenset({
    "PHASE", "UNIT", "UNITS", "SECTION", "TRACT", "PARCEL",
    "ESTATES", "ESTATE", "VILLAGE", "VILLAGES", "VILLAS", "VILLA",
    "NORTH", "SOUTH", "EAST", "WEST",
    "ONE", "TWO", "THREE", "FOUR", "FIVE", "FIRST", "SECOND", "THIRD",
    "TERRACE", "LAKE", "LAKES", "PARK", "HILLS", "WOODS", "OAKS", "GROVE",
    "GARDENS", "HEIGHTS", "ACRES", "MANOR", "PLACE", "POINT", "POINTE",
    "RESERVE", "RIDGE", "CREEK", "SHORES", "TOWNHOMES", "TOWNHOUSES", "HOMES",
    "CONDOMINIUM", "CONDO", "ADDITION", "SUBDIVISION", "REPLAT", "AMENDED",
    "PLAT", "ANNEX",
})

# Party names containing any of these are companies or agencies, not homeowners
CORPORATE_KEYWORDS = (
    "LLC", "INC", "CORP", "CORPORATION", "ASSOCIATION", "BANK", "TRUST",
    "SECRETARY OF", "DEPARTMENT OF", "HOUSING AUTHORITY", "FINANCE",
    "MORTGAGE", "LENDING", "SERVICES", "HOLDING", "HOLDINGS", "PROPERTIES",
    "VENTURES", "ENTERPRISES", "GROUP", "PARTNERS", "FUND",
    "COUNTY", "STATE OF", "CITY OF", "HOMEOWNERS", "HOA",
    "PURCHASING", "INVESTMENTS", "NATIONAL", "FEDERAL",
    "COMPANY", "SAVINGS", "PLAN",
)

# Matching thresholds
MIN_KEYWORD_LENGTH = 4
KEYWORD_COVERAGE_RATIO = 0.4
MIN_KEYWORD_HITS = 2

ADDRESS_UNVERIFIED_WARNING = "ADDRESS UNVERIFIED - parcel legal desc does not match filing"

PROPERTY_STATE = "FL"


@dataclass(frozen=True)
class ResolverSettings:
    """Runtime settings (env overrides applied on top of the constants above)."""

    registry_url: str = PARCEL_REGISTRY_URL
    timeout_seconds: float = REGISTRY_TIMEOUT_SECONDS
    max_retries: int = REGISTRY_MAX_RETRIES
    concurrency: int = DEFAULT_CONCURRENCY
    fuzzy_result_limit: int = FUZZY_RESULT_LIMIT
    jurisdiction_codes: Mapping[str, int] = field(default_factory=lambda: JURISDICTION_CODES)


def parse_jurisdiction_codes(raw: str | None) -> dict[str, int]:
    """Parse ``"osceola=59,seminole=69"`` into a county -> code mapping."""
    codes: dict[str, int] = {}
    if not raw:
        return codes
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, code = pair.partition("=")
        if not sep or not name.strip() or not code.strip().isdigit():
            raise ValueError(f"Invalid jurisdiction code entry: {pair!r}")
        codes[name.strip().lower()] = int(code.strip())
    return codes


def load_settings() -> ResolverSettings:
    """Build settings from environment (``.env`` honoured)."""
    load_dotenv()
    codes = dict(JURISDICTION_CODES)
    codes.update(parse_jurisdiction_codes(os.getenv("PARCEL_JURISDICTION_CODES")))
    return ResolverSettings(
        registry_url=os.getenv("PARCEL_REGISTRY_URL", PARCEL_REGISTRY_URL),
        timeout_seconds=float(os.getenv("PARCEL_REGISTRY_TIMEOUT", REGISTRY_TIMEOUT_SECONDS)),
        max_retries=int(os.getenv("PARCEL_REGISTRY_MAX_RETRIES", REGISTRY_MAX_RETRIES)),
        concurrency=int(os.getenv("RESOLVER_CONCURRENCY", DEFAULT_CONCURRENCY)),
        fuzzy_result_limit=int(os.getenv("FUZZY_RESULT_LIMIT", FUZZY_RESULT_LIMIT)),
        jurisdiction_codes=MappingProxyType(codes),
    )
