"""
Owner-name queries against the statewide cadastral layer.

Two tiers:
- exact:  CO_NO=58 AND OWN_NAME='MAHURIN ESSIE B'
- fuzzy:  CO_NO=58 AND OWN_NAME LIKE '%OLIVEIRA%' AND (OWN_NAME LIKE '%ANDREA%')

The resolver treats a built query as opaque and hands it to the registry
client unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from config.resolution import (
    EXACT_RESULT_LIMIT,
    FIELD_COUNTY_NUMBER,
    FIELD_OWNER_NAME,
    FUZZY_RESULT_LIMIT,
    JURISDICTION_CODES,
    PARCEL_OUT_FIELDS,
)
from lis_pendens.exceptions import UnknownJurisdiction
from lis_pendens.models.resolution import Tier


@dataclass(frozen=True)
class RegistryQuery:
    where: str
    tier: Tier
    out_fields: tuple[str, ...] = PARCEL_OUT_FIELDS
    result_limit: Optional[int] = None

    def to_params(self) -> dict[str, Any]:
        """ArcGIS ``/query`` parameters."""
        params: dict[str, Any] = {
            "where": self.where,
            "outFields": ",".join(self.out_fields),
            "returnGeometry": "false",
            "f": "json",
        }
        if self.result_limit is not None:
            params["resultRecordCount"] = self.result_limit
        return params


@dataclass(frozen=True)
class FuzzyQueryPlan:
    """``tight`` is what the resolver issues; ``broad`` is kept for manual follow-up."""

    tight: RegistryQuery
    broad: RegistryQuery


def resolve_county_code(
    jurisdiction: str,
    codes: Mapping[str, int] = JURISDICTION_CODES,
) -> int:
    key = (jurisdiction or "").strip().lower()
    code = codes.get(key)
    if code is None:
        raise UnknownJurisdiction(key)
    return code


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _contains(value: str) -> str:
    escaped = value.replace("'", "''")
    return f"{FIELD_OWNER_NAME} LIKE '%{escaped}%'"


def build_exact_query(
    primary_name: str,
    jurisdiction: str,
    codes: Mapping[str, int] = JURISDICTION_CODES,
) -> RegistryQuery:
    """Owner equality query. The name is used verbatim, case included."""
    county = resolve_county_code(jurisdiction, codes)
    where = f"{FIELD_COUNTY_NUMBER}={county} AND {FIELD_OWNER_NAME}={_quote(primary_name)}"
    return RegistryQuery(where=where, tier=Tier.EXACT, result_limit=EXACT_RESULT_LIMIT)


def build_fuzzy_query(
    surname: str,
    other_tokens: Sequence[str],
    jurisdiction: str,
    codes: Mapping[str, int] = JURISDICTION_CODES,
    result_limit: int = FUZZY_RESULT_LIMIT,
) -> FuzzyQueryPlan:
    """Surname-contains query, tightened with an OR-group of the other name tokens."""
    county = resolve_county_code(jurisdiction, codes)
    base = f"{FIELD_COUNTY_NUMBER}={county} AND {_contains(surname)}"
    broad = RegistryQuery(where=base, tier=Tier.FUZZY, result_limit=result_limit)
    if not other_tokens:
        return FuzzyQueryPlan(tight=broad, broad=broad)
    group = " OR ".join(_contains(token) for token in other_tokens)
    tight = RegistryQuery(
        where=f"{base} AND ({group})",
        tier=Tier.FUZZY,
        result_limit=result_limit,
    )
    return FuzzyQueryPlan(tight=tight, broad=broad)
