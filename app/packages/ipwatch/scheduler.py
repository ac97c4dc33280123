"""Periodic refresh heartbeat."""

from typing import Any, Callable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.scheduling import Timer

logger = get_module_logger()


class PeriodicScheduler:
    """Self-rescheduling timer that triggers a refresh every interval seconds.

    The next firing is armed whether the trigger succeeded, failed or raised.
    While should_run() is false (idle session, disabled monitor) a firing does
    nothing and the timer is not re-armed; restart() resumes it.

    Args:
        timer: Timer facility
        interval: Seconds between firings
        trigger: Called on every firing (normally RefreshOrchestrator.trigger)
        should_run: Predicate checked before arming and before each firing
    """

    def __init__(
        self,
        timer: Timer,
        interval: float,
        trigger: Callable[[], Any],
        should_run: Callable[[], bool] = lambda: True,
    ) -> None:
        self._timer = timer
        self._interval = interval
        self._trigger = trigger
        self._should_run = should_run
        self._handle: Optional[Any] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        if not self._should_run():
            logger.debug("scheduler_not_started")
            return
        self._arm()
        logger.info("scheduler_started", interval=self._interval)

    def stop(self) -> None:
        if self._handle is None:
            return
        self._timer.cancel(self._handle)
        self._handle = None
        logger.info("scheduler_stopped")

    def restart(self, immediate: bool = False) -> None:
        """Cancel the pending firing and re-arm from zero.

        Args:
            immediate: Also trigger one refresh right away.
        """
        self.stop()
        if immediate and self._should_run():
            self._invoke()
        self.start()

    def _arm(self) -> None:
        self._handle = self._timer.after(self._interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._should_run():
            logger.info("scheduler_paused")
            return
        try:
            self._invoke()
        finally:
            self._arm()

    def _invoke(self) -> None:
        try:
            self._trigger()
        except Exception as e:
            logger.error("scheduled_refresh_failed", error=str(e))
