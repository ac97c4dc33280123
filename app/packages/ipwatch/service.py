"""
Lifecycle of the external address monitor.

IpWatchService wires the HTTP facade, provider, asset cache, orchestrator,
scheduler and debouncer together, connects them to the host's presence and
network signals, and tears everything down again on disable().
"""

from typing import Any, List, Optional

from infrastructure.clients.http import HttpClient
from infrastructure.configuration import Settings
from infrastructure.events import Signal, Subscription
from infrastructure.logging import get_module_logger
from infrastructure.scheduling import LoopTimer, Timer
from packages.ipwatch.asset_cache import AssetCache
from packages.ipwatch.debouncer import NetworkEventDebouncer
from packages.ipwatch.detail import DetailView, build_detail
from packages.ipwatch.orchestrator import (
    DisplayCallback,
    NotifyCallback,
    RefreshOrchestrator,
)
from packages.ipwatch.provider import IpLookupProvider
from packages.ipwatch.scheduler import PeriodicScheduler
from packages.ipwatch.schemas import CurrentState

logger = get_module_logger()


class IpWatchService:
    """Owns every monitor component between enable() and disable().

    Args:
        settings: Application settings (ipwatch and upstream sections)
        display_updated: Host callback (ip, country_code, isp)
        notify_user: Host callback (title, message)
        presence_signal: Emits the session presence status
        network_signal: Emits network availability (bool)
        timer: Timer facility; defaults to the running asyncio loop
        http_client: HTTP facade; built from settings when omitted
        provider: Lookup provider; built from settings when omitted
    """

    def __init__(
        self,
        settings: Settings,
        display_updated: Optional[DisplayCallback] = None,
        notify_user: Optional[NotifyCallback] = None,
        presence_signal: Optional[Signal] = None,
        network_signal: Optional[Signal] = None,
        timer: Optional[Timer] = None,
        http_client: Optional[HttpClient] = None,
        provider: Optional[IpLookupProvider] = None,
    ) -> None:
        self._settings = settings
        self._host_display = display_updated
        self._notify_user = notify_user
        self._presence_signal = presence_signal
        self._network_signal = network_signal
        self._timer = timer or LoopTimer()
        self._http = http_client
        self._provider = provider
        self._owns_http = http_client is None

        self._asset_cache: Optional[AssetCache] = None
        self._orchestrator: Optional[RefreshOrchestrator] = None
        self._scheduler: Optional[PeriodicScheduler] = None
        self._debouncer: Optional[NetworkEventDebouncer] = None
        self._subscriptions: List[Subscription] = []
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def state(self) -> CurrentState:
        if self._orchestrator is None:
            return CurrentState()
        return self._orchestrator.state

    @property
    def orchestrator(self) -> Optional[RefreshOrchestrator]:
        return self._orchestrator

    @property
    def scheduler(self) -> Optional[PeriodicScheduler]:
        return self._scheduler

    @property
    def debouncer(self) -> Optional[NetworkEventDebouncer]:
        return self._debouncer

    @property
    def asset_cache(self) -> Optional[AssetCache]:
        return self._asset_cache

    def enable(self) -> None:
        """Build the components, subscribe to signals, refresh and start the heartbeat."""
        if self._enabled:
            return
        cfg = self._settings.ipwatch
        upstream = self._settings.upstream

        if self._http is None:
            self._http = HttpClient(
                timeout=cfg.fetch_timeout_seconds, user_agent=upstream.user_agent
            )
            self._owns_http = True
        if self._provider is None:
            self._provider = IpLookupProvider(self._http, upstream)

        self._asset_cache = AssetCache(
            self._http,
            upstream,
            cfg.cache_dir,
            precision=cfg.coord_precision,
            flag_timeout=cfg.fetch_timeout_seconds,
            map_timeout=cfg.map_timeout_seconds,
            on_asset_updated=self._on_asset_updated,
        )
        self._orchestrator = RefreshOrchestrator(
            self._provider,
            self._timer,
            cfg,
            display_updated=self._display,
            notify_user=self._notify_user,
        )
        self._scheduler = PeriodicScheduler(
            self._timer,
            cfg.refresh_interval_seconds,
            self._orchestrator.trigger,
            should_run=self._should_run,
        )
        self._debouncer = NetworkEventDebouncer(
            self._orchestrator, self._scheduler, self._timer, cfg
        )

        if self._presence_signal is not None:
            self._subscriptions.append(
                self._presence_signal.subscribe(self._debouncer.on_presence_changed)
            )
        if self._network_signal is not None:
            self._subscriptions.append(
                self._network_signal.subscribe(self._debouncer.on_network_changed)
            )

        self._enabled = True
        logger.info("monitor_enabled", cache_dir=str(cfg.cache_dir))

        self._orchestrator.trigger()
        self._scheduler.start()

    def disable(self) -> None:
        """Cancel timers, unsubscribe, drop state. Safe to call twice."""
        if not self._enabled:
            return
        self._enabled = False

        self._orchestrator.disable()
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        self._debouncer.close()
        self._scheduler.stop()
        self._asset_cache.close()
        self._orchestrator.clear()

        if self._owns_http and self._http is not None:
            self._http.close()
            self._http = None
            self._provider = None
        logger.info("monitor_disabled")

    def refresh_now(self) -> Any:
        """User-initiated refresh; bypasses the throttle."""
        if not self._enabled:
            return None
        return self._orchestrator.trigger(force=True)

    def flag_path(self, country_code: Optional[str]) -> Optional[str]:
        if self._asset_cache is None:
            return None
        return self._asset_cache.get_flag_path(country_code)

    async def detail(self) -> DetailView:
        if not self._enabled:
            return DetailView()
        cfg = self._settings.ipwatch
        return await build_detail(
            self._orchestrator.state,
            self._provider,
            self._asset_cache,
            timeout=cfg.fetch_timeout_seconds,
            precision=cfg.coord_precision,
        )

    def _should_run(self) -> bool:
        idle = self._debouncer.is_idle if self._debouncer else False
        return self._enabled and not idle

    def _display(self, ip: str, country_code: Optional[str], isp: Optional[str]) -> None:
        # Warm the flag cache so the host finds the flag on its next lookup.
        if country_code:
            self._asset_cache.get_flag_path(country_code)
        if self._host_display is not None:
            self._host_display(ip, country_code, isp)

    def _on_asset_updated(self, kind: str, key: str, path: str) -> None:
        logger.debug("asset_updated", kind=kind, key=key)
        if kind == "flag" and self._orchestrator is not None:
            self._orchestrator.redisplay()


