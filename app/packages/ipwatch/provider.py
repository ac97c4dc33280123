"""
Upstream lookups for the external address, its geolocation and its ASN.

Three independent calls share one timeout. Whatever an individual call
returns (timeout, HTTP error, HTML error page, malformed JSON) is normalized
into a null-safe record or None; nothing here raises.
"""

import asyncio
import ipaddress
import json
from typing import Any, Dict, Optional

import structlog

from infrastructure.clients.http import HttpClient
from infrastructure.configuration import UpstreamSettings
from packages.ipwatch.schemas import AddressRecord, AsnRecord, GeoRecord, LookupResult

logger = structlog.get_logger()


def _decode_json(body: Optional[bytes]) -> Optional[Dict[str, Any]]:
    if not body:
        return None
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


class IpLookupProvider:
    """Normalizes the address, geolocation and ASN services.

    Args:
        http_client: HTTP facade used for every call
        upstream: Endpoint URLs, provider source tag and IP-version hint
    """

    def __init__(self, http_client: HttpClient, upstream: UpstreamSettings) -> None:
        self._http = http_client
        self._upstream = upstream
        self._logger = logger.bind(component="ip_lookup_provider")

    def get_external_ip(self, timeout: float) -> AddressRecord:
        """Discover the external address (plain-text body)."""
        result = self._http.get(self._upstream.address_url, timeout=timeout)
        if not result.is_success:
            self._logger.warning(
                "address_discovery_failed",
                error_code=result.error_code,
                transient=result.is_transient,
                error=result.message,
            )
            return AddressRecord()
        address = AddressRecord(
            ip=result.data.decode("utf-8", "replace") if result.data else ""
        )
        try:
            ipaddress.ip_address(address.ip)
        except ValueError:
            self._logger.warning("address_discovery_invalid", body=address.ip[:64])
            return AddressRecord()
        return address

    def get_geo(self, ip: str, timeout: float) -> Optional[GeoRecord]:
        """Geolocate ip with a form POST.

        An empty ip is still sent; the provider then geolocates the caller.
        """
        form = {
            "ip": ip or "",
            "source": self._upstream.source,
            "ipv": str(self._upstream.ip_version),
        }
        log = self._logger.bind(ip_address=ip)
        result = self._http.post_form(self._upstream.geo_url, form, timeout=timeout)
        if not result.is_success:
            log.warning(
                "geolocation_failed",
                error_code=result.error_code,
                transient=result.is_transient,
                error=result.message,
            )
            return None

        payload = _decode_json(result.data)
        if payload is None:
            log.warning("geolocation_unparseable")
            return None

        geo = GeoRecord.from_provider(payload, ip, self._upstream.source)
        if geo is None:
            log.warning("geolocation_missing_result")
            return None

        log.debug(
            "geolocation_success",
            country=geo.country_code,
            city=geo.city_name,
            source=geo.provider_source,
        )
        return geo

    def get_asn(self, timeout: float) -> Optional[AsnRecord]:
        """Fetch hostname/org/timezone for the caller's address."""
        result = self._http.get(self._upstream.asn_url, timeout=timeout)
        if not result.is_success:
            self._logger.warning(
                "asn_lookup_failed",
                error_code=result.error_code,
                transient=result.is_transient,
                error=result.message,
            )
            return None

        payload = _decode_json(result.data)
        if payload is None:
            self._logger.warning("asn_unparseable")
            return None
        return AsnRecord.from_provider(payload)

    def fetch_all(self, timeout: float) -> LookupResult:
        """Run address discovery, geolocation and ASN lookup in sequence.

        Args:
            timeout: Timeout applied to each of the three calls

        Returns:
            LookupResult; ip is empty when discovery failed, geo/asn are
            None when their call failed
        """
        address = self.get_external_ip(timeout)
        geo = self.get_geo(address.ip, timeout)
        asn = self.get_asn(timeout)
        return LookupResult(ip=address.ip, geo=geo, asn=asn)

    async def fetch_all_async(self, timeout: float) -> LookupResult:
        """fetch_all() on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.fetch_all, timeout)
