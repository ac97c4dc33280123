"""Pydantic schemas for the ipwatch package.

Records are frozen: a refresh never edits a record, it replaces it. Field
validators do the normalization so upstream quirks (blank strings, numbers
sent as strings, missing keys) never leak past construction.
"""

import math
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROVIDER_SOURCE = "ip2location"


def _clean_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def _number_or_none(value: Any) -> Optional[float]:
    # Only real JSON numbers are coordinates; "51.5" from a quirky provider is not.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


class AddressRecord(BaseModel):
    """External address as reported by the discovery endpoint.

    An empty ip means discovery failed.
    """

    model_config = ConfigDict(frozen=True)

    ip: str = ""

    @field_validator("ip", mode="before")
    @classmethod
    def strip_ip(cls, v: Any) -> str:
        return _clean_text(v) or ""


class GeoRecord(BaseModel):
    """Geolocation of the external address."""

    model_config = ConfigDict(frozen=True)

    ip_address: str = Field(..., description="Address the record describes")
    country_code: Optional[str] = Field(None, description="ISO country code")
    country_name: Optional[str] = Field(None, description="Country name")
    city_name: Optional[str] = Field(None, description="City name")
    region_name: Optional[str] = Field(None, description="Region/state name")
    latitude: Optional[float] = Field(None, description="Latitude")
    longitude: Optional[float] = Field(None, description="Longitude")
    isp: Optional[str] = Field(None, description="Internet service provider")
    provider_source: str = Field(
        DEFAULT_PROVIDER_SOURCE, description="Provider that produced the record"
    )

    @field_validator("ip_address", mode="before")
    @classmethod
    def strip_ip_address(cls, v: Any) -> str:
        return _clean_text(v) or ""

    @field_validator(
        "country_code", "country_name", "city_name", "region_name", "isp", mode="before"
    )
    @classmethod
    def clean_optional_text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def numeric_coordinates(cls, v: Any) -> Optional[float]:
        return _number_or_none(v)

    @field_validator("provider_source", mode="before")
    @classmethod
    def clean_provider_source(cls, v: Any) -> str:
        return _clean_text(v) or DEFAULT_PROVIDER_SOURCE

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_provider(
        cls,
        payload: Dict[str, Any],
        queried_ip: str,
        default_source: str = DEFAULT_PROVIDER_SOURCE,
    ) -> Optional["GeoRecord"]:
        """Build a record from a `{source, res: {...}}` geolocation payload.

        Args:
            payload: Decoded JSON body
            queried_ip: Address sent with the request; used when the
                provider omits ipAddress
            default_source: Source tag used when the payload has none

        Returns:
            GeoRecord, or None when the payload has no `res` object
        """
        res = payload.get("res")
        if not isinstance(res, dict):
            return None
        return cls(
            ip_address=res.get("ipAddress") or queried_ip,
            country_code=res.get("countryCode"),
            country_name=res.get("countryName"),
            city_name=res.get("cityName"),
            region_name=res.get("regionName"),
            latitude=res.get("latitude"),
            longitude=res.get("longitude"),
            isp=res.get("isp"),
            provider_source=payload.get("source") or default_source,
        )


class AsnRecord(BaseModel):
    """Hostname/organization/timezone enrichment for the external address."""

    model_config = ConfigDict(frozen=True)

    hostname: Optional[str] = None
    org: Optional[str] = None
    timezone: Optional[str] = None

    @field_validator("hostname", "org", "timezone", mode="before")
    @classmethod
    def clean_optional_text(cls, v: Any) -> Optional[str]:
        return _clean_text(v)

    @classmethod
    def from_provider(cls, payload: Dict[str, Any]) -> "AsnRecord":
        return cls(
            hostname=payload.get("hostname"),
            org=payload.get("org"),
            timezone=payload.get("timezone"),
        )


class LookupResult(BaseModel):
    """Everything one refresh cycle fetched."""

    model_config = ConfigDict(frozen=True)

    ip: str = ""
    geo: Optional[GeoRecord] = None
    asn: Optional[AsnRecord] = None

    @property
    def is_conclusive(self) -> bool:
        """True when both an address and a geolocation were obtained."""
        return bool(self.ip) and self.geo is not None


class CurrentState(BaseModel):
    """Last applied lookup. Empty until the first successful refresh."""

    model_config = ConfigDict(frozen=True)

    current_ip: Optional[str] = None
    location: Optional[GeoRecord] = None
    last_lookup: Optional[LookupResult] = None
    last_check_at: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.current_ip is None
