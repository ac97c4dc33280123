"""Data for the on-demand detail view.

Rendering is up to the host; this module only decides which rows to show:
address, ISP, ASN enrichment (fetched fresh, or a failure row), country with
flag, and a map tile or the raw coordinates.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from infrastructure.logging import get_module_logger
from packages.ipwatch.asset_cache import AssetCache, normalize_coord
from packages.ipwatch.provider import IpLookupProvider
from packages.ipwatch.schemas import CurrentState

logger = get_module_logger()

ASN_FAILED_TEXT = "Failed to load network info"
MAPS_URL = "https://maps.google.com/maps?q={lat},{lon}"


@dataclass(frozen=True)
class DetailRow:
    kind: str
    text: str
    icon: Optional[str] = None
    copyable: bool = True


@dataclass(frozen=True)
class DetailView:
    rows: List[DetailRow] = field(default_factory=list)
    map_path: Optional[str] = None
    maps_url: Optional[str] = None

    def texts(self) -> List[str]:
        return [row.text for row in self.rows]


async def build_detail(
    state: CurrentState,
    provider: IpLookupProvider,
    asset_cache: AssetCache,
    timeout: float,
    precision: int = 5,
) -> DetailView:
    """Assemble the detail view for the current state.

    The ASN record and the map tile are fetched on worker threads; a failed
    ASN fetch becomes a single "Failed to load network info" row and a
    missing map becomes a "Coordinates: lat, lon" row.

    Args:
        state: Snapshot from RefreshOrchestrator.state
        provider: Used to re-fetch the ASN record
        asset_cache: Flag and map lookups
        timeout: Timeout for the ASN fetch
        precision: Decimal places for displayed coordinates

    Returns:
        DetailView; empty when nothing has been looked up yet
    """
    location = state.location
    if location is None:
        return DetailView()

    rows = [DetailRow("address", location.ip_address)]
    if location.isp:
        rows.append(DetailRow("isp", location.isp))

    asn = await asyncio.to_thread(provider.get_asn, timeout)
    if asn is None:
        rows.append(DetailRow("status", ASN_FAILED_TEXT, copyable=False))
    else:
        for kind in ("hostname", "org", "timezone"):
            value = getattr(asn, kind)
            if value:
                rows.append(DetailRow(kind, value))

    country_name = location.country_name or "Unknown"
    code = f" ({location.country_code})" if location.country_code else ""
    city = f", {location.city_name}" if location.city_name else ""
    rows.append(
        DetailRow(
            "country",
            country_name + code + city,
            icon=asset_cache.get_flag_path(location.country_code),
        )
    )

    if not location.has_coordinates:
        return DetailView(rows=rows)

    lat_key = normalize_coord(location.latitude, precision)
    lon_key = normalize_coord(location.longitude, precision)
    maps_url = MAPS_URL.format(lat=lat_key, lon=lon_key)
    map_path = await asyncio.to_thread(
        asset_cache.get_map_path, location.latitude, location.longitude
    )
    if map_path:
        rows.append(DetailRow("map", maps_url, icon=map_path, copyable=False))
    else:
        logger.debug("detail_map_unavailable", lat=lat_key, lon=lon_key)
        rows.append(DetailRow("map", f"Coordinates: {lat_key}, {lon_key}"))

    return DetailView(rows=rows, map_path=map_path, maps_url=maps_url)
