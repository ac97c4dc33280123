"""Refresh orchestration for the external address monitor.

The orchestrator is the single owner of CurrentState, the refresh generation
and the notification suppression window. Every trigger (periodic timer,
debounced network event, user request) funnels into refresh(), which:

1. refuses to start when disabled, throttled or already in flight;
2. bumps the generation and fetches a LookupResult off the event loop;
3. discards the result if the generation moved on or the monitor was
   disabled while the fetch was running;
4. applies a conclusive result atomically, decides whether the address
   change deserves a notification and pushes the new values to the display.

Nothing raised by the provider or by the display/notification callbacks
escapes refresh(); timers and signal handlers calling into it cannot be
broken by a bad cycle.
"""

import asyncio
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Set

from infrastructure.configuration import IpWatchSettings
from infrastructure.logging import bind_log_context, get_module_logger
from infrastructure.scheduling import Timer
from packages.ipwatch.schemas import CurrentState, LookupResult

logger = get_module_logger()

NOTIFY_TITLE = "External IP Address"

DisplayCallback = Callable[[str, Optional[str], Optional[str]], Any]
NotifyCallback = Callable[[str, str], Any]


class LookupProvider(Protocol):
    async def fetch_all_async(self, timeout: float) -> LookupResult: ...


class RefreshPhase(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class RefreshOutcome(Enum):
    """How a call to refresh() ended."""

    DISABLED = "disabled"
    THROTTLED = "throttled"
    BUSY = "busy"
    APPLIED = "applied"
    SUPERSEDED = "superseded"
    FAILED = "failed"


class RefreshOrchestrator:
    """Decides when to look up the external address and applies the results.

    Args:
        provider: Source of LookupResult (see IpLookupProvider)
        timer: Clock used for throttling and the suppression window
        settings: Minimum check interval, fetch timeout, notify flag
        display_updated: Called as (ip, country_code, isp) after each apply
        notify_user: Called as (title, message) for unsuppressed changes
    """

    def __init__(
        self,
        provider: LookupProvider,
        timer: Timer,
        settings: IpWatchSettings,
        display_updated: Optional[DisplayCallback] = None,
        notify_user: Optional[NotifyCallback] = None,
    ) -> None:
        self._provider = provider
        self._timer = timer
        self._min_interval = settings.min_check_interval_seconds
        self._fetch_timeout = settings.fetch_timeout_seconds
        self._notify_on_change = settings.notify_on_change
        self._display_updated = display_updated
        self._notify_user = notify_user

        self._enabled = True
        self._phase = RefreshPhase.IDLE
        self._generation = 0
        self._last_check_at: Optional[float] = None
        self._suppress_until = 0.0
        self._state = CurrentState()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> CurrentState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def phase(self) -> RefreshPhase:
        return self._phase

    @property
    def in_flight(self) -> bool:
        return self._phase is RefreshPhase.IN_FLIGHT

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_check_at(self) -> Optional[float]:
        return self._last_check_at

    @property
    def suppress_until(self) -> float:
        return self._suppress_until

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        """Stop applying results; a refresh still in flight is discarded."""
        self._enabled = False
        self.invalidate()

    def invalidate(self) -> None:
        """Make the result of any in-flight refresh stale."""
        self._generation += 1

    def clear(self) -> None:
        self._state = CurrentState()

    def suppress_notifications_until(self, until: float) -> float:
        """Swallow address-change notifications until timer time `until`."""
        self._suppress_until = until
        logger.debug("notifications_suppressed", until=until)
        return until

    def trigger(self, force: bool = False) -> Optional[asyncio.Task]:
        """Schedule refresh() on the running loop.

        Synchronous entry point for timer and signal callbacks.

        Returns:
            The scheduled task, or None when no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("refresh_trigger_without_loop")
            return None
        task = loop.create_task(self.refresh(force=force))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def refresh(self, force: bool = False) -> RefreshOutcome:
        """Run one refresh cycle if eligible.

        Args:
            force: Skip the minimum-interval throttle (user-initiated refresh).
                Disabled and in-flight checks still apply.

        Returns:
            RefreshOutcome describing what happened. Never raises.
        """
        if not self._enabled:
            logger.debug("refresh_skipped_disabled")
            return RefreshOutcome.DISABLED

        now = self._timer.now()
        # last_check_at is taken when a cycle starts, not when it ends.
        if (
            not force
            and self._last_check_at is not None
            and now - self._last_check_at < self._min_interval
        ):
            logger.debug(
                "refresh_throttled",
                elapsed=round(now - self._last_check_at, 3),
                min_interval=self._min_interval,
            )
            return RefreshOutcome.THROTTLED

        if self._phase is RefreshPhase.IN_FLIGHT:
            logger.debug("refresh_skipped_in_flight", generation=self._generation)
            return RefreshOutcome.BUSY

        self._phase = RefreshPhase.IN_FLIGHT
        self._generation += 1
        generation = self._generation
        self._last_check_at = now

        try:
            with bind_log_context(refresh_generation=generation):
                return await self._run_cycle(generation, now)
        except Exception as e:
            logger.error("refresh_failed", generation=generation, error=str(e))
            return RefreshOutcome.FAILED
        finally:
            self._phase = RefreshPhase.IDLE

    async def _run_cycle(self, generation: int, started_at: float) -> RefreshOutcome:
        logger.debug("refresh_started")
        lookup = await self._provider.fetch_all_async(self._fetch_timeout)

        if not self._enabled or generation != self._generation:
            logger.debug("refresh_superseded", live_generation=self._generation)
            return RefreshOutcome.SUPERSEDED

        if not lookup.is_conclusive:
            logger.info(
                "refresh_inconclusive",
                has_ip=bool(lookup.ip),
                has_geo=lookup.geo is not None,
            )
            return RefreshOutcome.FAILED

        self._apply(lookup, started_at)
        return RefreshOutcome.APPLIED

    def _apply(self, lookup: LookupResult, checked_at: float) -> None:
        previous_ip = self._state.current_ip
        ip = lookup.ip
        location = lookup.geo.model_copy(update={"ip_address": ip})

        self._state = CurrentState(
            current_ip=ip,
            location=location,
            last_lookup=lookup,
            last_check_at=checked_at,
        )
        logger.info(
            "refresh_applied",
            ip=ip,
            country_code=location.country_code,
            isp=location.isp,
        )

        if previous_ip and previous_ip != ip:
            self._announce_change(previous_ip, ip)

        self._push_display()

    def _announce_change(self, previous_ip: str, ip: str) -> None:
        now = self._timer.now()
        if now < self._suppress_until:
            logger.info(
                "ip_change_notification_suppressed",
                previous_ip=previous_ip,
                ip=ip,
                remaining_ms=int((self._suppress_until - now) * 1000),
            )
            return

        if not self._notify_on_change or self._notify_user is None:
            logger.info("ip_changed", previous_ip=previous_ip, ip=ip)
            return

        try:
            self._notify_user(NOTIFY_TITLE, f"Has been changed to {ip}")
            logger.info("ip_change_notified", previous_ip=previous_ip, ip=ip)
        except Exception as e:
            logger.warning("notify_failed", error=str(e))

    def redisplay(self) -> None:
        """Push the current state to the display again (e.g. after a flag download)."""
        if self._enabled and not self._state.is_empty:
            self._push_display()

    def _push_display(self) -> None:
        if self._display_updated is None:
            return
        location = self._state.location
        try:
            self._display_updated(
                self._state.current_ip,
                location.country_code if location else None,
                location.isp if location else None,
            )
        except Exception as e:
            logger.warning("display_update_failed", error=str(e))
