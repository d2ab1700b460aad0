"""
Turn a resolved filing into per-person lead contacts.

Each grantee on the filing that is a person (not a lender, company or agency)
becomes one contact at the resolved property address. Unmatched filings yield
nothing here; they go to manual review instead.
"""

from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel

from config.resolution import CORPORATE_KEYWORDS, PROPERTY_STATE
from lis_pendens.models.filing import RawFiling
from lis_pendens.models.resolution import Matched, ResolutionResult
from lis_pendens.services.eligibility import REASON_TIMESHARE, party_rejection_reason
from lis_pendens.utils.name_normalizer import normalize, split_first_last


class LeadContact(BaseModel):
    document_number: str
    document_type: str = ""
    recording_date: str = ""
    grantor_name: str = ""
    legal_description: str = ""
    full_name: str
    first_name: str = ""
    last_name: str = ""
    property_address: str
    property_city: str = ""
    property_state: str = PROPERTY_STATE
    property_zip: str = ""
    parcel_number: str = ""
    match_method: str
    match_warning: Optional[str] = None

    @property
    def match_key(self) -> str:
        """Dedup key across filings: same person at the same address."""
        return f"{self.property_address}|{self.first_name}|{self.last_name}".upper()

    @property
    def full_address(self) -> str:
        parts = (self.property_address, self.property_city, self.property_state, self.property_zip)
        return ", ".join(p.strip() for p in parts if p and p.strip())

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["match_key"] = self.match_key
        data["full_address"] = self.full_address
        return data


def prepare_contacts(
    filing: RawFiling,
    result: ResolutionResult,
    keywords: Iterable[str] = CORPORATE_KEYWORDS,
) -> list[LeadContact]:
    """Build one contact per person grantee for a matched, non-timeshare filing."""
    outcome = result.outcome
    if not isinstance(outcome, Matched):
        return []
    if result.eligibility.reason == REASON_TIMESHARE:
        return []

    keywords = tuple(keywords)
    warning = f"[{result.eligibility.warning}]" if result.eligibility.warning else None
    contacts: list[LeadContact] = []
    for name in normalize(filing.grantee_name_block).all_names:
        if party_rejection_reason(name, keywords) is not None:
            continue
        first, last = split_first_last(name)
        contacts.append(
            LeadContact(
                document_number=filing.document_number,
                document_type=filing.document_type,
                recording_date=filing.recording_date,
                grantor_name=filing.grantor_name,
                legal_description=filing.legal_description,
                full_name=name.upper(),
                first_name=first,
                last_name=last,
                property_address=outcome.address_line,
                property_city=outcome.city,
                property_zip=outcome.zip,
                parcel_number=outcome.parcel_number,
                match_method=outcome.match_method.value,
                match_warning=warning,
            )
        )
    return contacts
