"""Upstream lookup service settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import IntegrationSettings


class UpstreamSettings(IntegrationSettings):
    """Endpoints of the address, geolocation, ASN, flag and map services.

    Environment Variables:
        IPWATCH_ADDRESS_URL: Plain-text address discovery endpoint
        IPWATCH_GEO_URL: Geolocation endpoint (form POST)
        IPWATCH_ASN_URL: ASN/organization endpoint (JSON)
        IPWATCH_FLAG_URL: Flag image template, <countrycode> is substituted
        IPWATCH_MAP_URL: Static map endpoint
        IPWATCH_GEO_SOURCE: Provider name sent to the geolocation endpoint
        IPWATCH_IP_VERSION: IP version hint sent to the geolocation endpoint (4 or 6)
        IPWATCH_USER_AGENT: User-Agent header for every upstream call
    """

    address_url: str = Field(
        default="https://ipv4.icanhazip.com", alias="IPWATCH_ADDRESS_URL"
    )
    geo_url: str = Field(
        default="https://www.iplocation.net/get-ipdata", alias="IPWATCH_GEO_URL"
    )
    asn_url: str = Field(default="https://thisipcan.cyou/", alias="IPWATCH_ASN_URL")
    flag_url: str = Field(
        default="https://thisipcan.cyou/flag-<countrycode>", alias="IPWATCH_FLAG_URL"
    )
    map_url: str = Field(
        default="https://staticmap.thisipcan.cyou/", alias="IPWATCH_MAP_URL"
    )
    source: str = Field(default="ip2location", alias="IPWATCH_GEO_SOURCE")
    ip_version: int = Field(default=4, alias="IPWATCH_IP_VERSION")
    user_agent: str = Field(default="ipwatch/1.0", alias="IPWATCH_USER_AGENT")

    @field_validator("ip_version")
    @classmethod
    def validate_ip_version(cls, v: int) -> int:
        if v not in (4, 6):
            raise ValueError(f"ip_version must be 4 or 6, got {v}")
        return v
