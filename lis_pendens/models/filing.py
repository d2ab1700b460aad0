from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.resolution import DEFAULT_JURISDICTION


class RawFiling(BaseModel):
    """A Lis Pendens filing as scraped from the clerk's portal."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_number: str
    document_type: str = ""
    recording_date: str = ""
    grantor_name: str = ""
    grantee_name_block: str = Field(default="", alias="grantee_name")  # newline-delimited
    legal_description: str = ""
    jurisdiction: str = Field(default=DEFAULT_JURISDICTION, alias="county")

    @field_validator(
        "document_type", "recording_date", "grantor_name",
        "grantee_name_block", "legal_description", mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def _default_jurisdiction(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_JURISDICTION
        return value


class CandidateParcel(BaseModel):
    """A parcel record returned by the registry for an owner search."""

    model_config = ConfigDict(frozen=True)

    parcel_number: str = ""
    owner_name: str = ""
    legal_description_text: str = ""
    address_line: str = ""
    city: str = ""
    zip: str = ""

    @classmethod
    def from_arcgis_feature(cls, feature: Any) -> "CandidateParcel":
        """Build from one ArcGIS feature; raises ValueError when it is not shaped like one."""
        if not isinstance(feature, dict):
            raise ValueError(f"feature is {type(feature).__name__}, expected an object")
        attrs = feature.get("attributes") or {}
        if not isinstance(attrs, dict):
            raise ValueError(f"feature attributes are {type(attrs).__name__}, expected an object")
        return cls(
            parcel_number=_clean_text(attrs.get("PARCELNO")),
            owner_name=_clean_text(attrs.get("OWN_NAME")),
            legal_description_text=_clean_text(attrs.get("S_LEGAL")),
            address_line=_clean_text(attrs.get("PHY_ADDR1")),
            city=_clean_text(attrs.get("PHY_CITY")),
            zip=_clean_text(attrs.get("PHY_ZIPCD")),
        )


def _clean_text(value: Optional[Any]) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()
