"""Network and presence event handling.

Network stacks emit a burst of "changed" events for one physical reconnect.
The debouncer collapses a burst into a single refresh scheduled a short delay
after the last event, and opens a notification-suppression window so the
address change caused by the reconnect does not pop up a notification.

Presence handling: while the session is idle, network events are ignored and
any pending debounce is cancelled. Coming back from idle restarts the
periodic scheduler from zero with an immediate refresh.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from infrastructure.configuration import IpWatchSettings
from infrastructure.logging import get_module_logger
from infrastructure.scheduling import Timer
from packages.ipwatch.orchestrator import RefreshOrchestrator
from packages.ipwatch.scheduler import PeriodicScheduler

logger = get_module_logger()


class PresenceStatus(str, Enum):
    AVAILABLE = "available"
    INVISIBLE = "invisible"
    BUSY = "busy"
    IDLE = "idle"


def is_idle_status(status: Any) -> bool:
    value = getattr(status, "value", status)
    return str(value).strip().lower() == PresenceStatus.IDLE.value


@dataclass(frozen=True)
class DebouncePlan:
    """What to do about one network-changed event."""

    cancel_pending: bool
    schedule_refresh: bool
    suppress_until: Optional[float] = None


def plan_network_event(
    available: bool, idle: bool, now: float, suppress_ms: int
) -> DebouncePlan:
    """Decide how to react to a network-changed event.

    Args:
        available: Whether the network is reachable after the change
        idle: Whether the session is idle
        now: Current timer time in seconds
        suppress_ms: Length of the notification-suppression window

    Returns:
        DebouncePlan. An unavailable network only cancels the pending
        refresh; an available one replaces it and opens the window.
    """
    if idle:
        return DebouncePlan(cancel_pending=False, schedule_refresh=False)
    if not available:
        return DebouncePlan(cancel_pending=True, schedule_refresh=False)
    return DebouncePlan(
        cancel_pending=True,
        schedule_refresh=True,
        suppress_until=now + suppress_ms / 1000.0,
    )


class NetworkEventDebouncer:
    """Turns presence and network signals into scheduled refreshes.

    Args:
        orchestrator: Receives the debounced refresh and the suppression window
        scheduler: Restarted when the session wakes up
        timer: Timer used for the debounce delay
        settings: Debounce delay and suppression duration
    """

    def __init__(
        self,
        orchestrator: RefreshOrchestrator,
        scheduler: PeriodicScheduler,
        timer: Timer,
        settings: IpWatchSettings,
    ) -> None:
        self._orchestrator = orchestrator
        self._scheduler = scheduler
        self._timer = timer
        self._delay = settings.network_debounce_seconds
        self._suppress_ms = settings.notify_suppress_ms
        self._idle = False
        self._pending: Optional[Any] = None

    @property
    def is_idle(self) -> bool:
        return self._idle

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def on_presence_changed(self, status: Any) -> None:
        try:
            if is_idle_status(status):
                self._idle = True
                self._cancel_pending()
                logger.info("presence_idle")
                return

            woke_up = self._idle
            self._idle = False
            if woke_up:
                logger.info("presence_resumed")
                self._scheduler.restart(immediate=True)
        except Exception as e:
            logger.error("presence_handler_failed", error=str(e))

    def on_network_changed(self, available: Any) -> None:
        try:
            available = bool(available)
            plan = plan_network_event(
                available, self._idle, self._timer.now(), self._suppress_ms
            )
            logger.debug("network_changed", available=available, idle=self._idle)

            if plan.cancel_pending:
                self._cancel_pending()
            if plan.suppress_until is not None:
                self._orchestrator.suppress_notifications_until(plan.suppress_until)
            if plan.schedule_refresh:
                self._pending = self._timer.after(self._delay, self._fire)
        except Exception as e:
            logger.error("network_handler_failed", error=str(e))

    def close(self) -> None:
        self._cancel_pending()

    def _fire(self) -> None:
        self._pending = None
        logger.debug("debounced_refresh")
        self._orchestrator.trigger()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._timer.cancel(self._pending)
            self._pending = None
