"""ipwatch package - external address monitor.

Keeps track of the host's external address and its geolocation, refreshing
on a heartbeat and after network reconnects, and caches flag/map assets.
"""

from packages.ipwatch.asset_cache import AssetCache, normalize_coord
from packages.ipwatch.debouncer import (
    NetworkEventDebouncer,
    PresenceStatus,
    plan_network_event,
)
from packages.ipwatch.detail import DetailRow, DetailView, build_detail
from packages.ipwatch.orchestrator import (
    RefreshOrchestrator,
    RefreshOutcome,
    RefreshPhase,
)
from packages.ipwatch.provider import IpLookupProvider
from packages.ipwatch.scheduler import PeriodicScheduler
from packages.ipwatch.schemas import (
    AddressRecord,
    AsnRecord,
    CurrentState,
    GeoRecord,
    LookupResult,
)
from packages.ipwatch.service import IpWatchService

__all__ = [
    "AddressRecord",
    "AssetCache",
    "AsnRecord",
    "CurrentState",
    "DetailRow",
    "DetailView",
    "GeoRecord",
    "IpLookupProvider",
    "IpWatchService",
    "LookupResult",
    "NetworkEventDebouncer",
    "PeriodicScheduler",
    "PresenceStatus",
    "RefreshOrchestrator",
    "RefreshOutcome",
    "RefreshPhase",
    "build_detail",
    "normalize_coord",
    "plan_network_event",
]
