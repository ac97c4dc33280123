"""One-shot timers on the asyncio event loop.

The monitor never sleeps or spawns threads to wait; it asks a Timer to call
back later and keeps the handle so the callback can be cancelled. Callbacks
run on the loop thread, one at a time.
"""

import asyncio
import time
from typing import Any, Callable, Optional, Protocol

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class Timer(Protocol):
    """Clock and one-shot timer facility."""

    def after(self, seconds: float, callback: Callable[[], Any]) -> Any:
        """Call callback once after seconds; return a cancellable handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a handle returned by after(). None is ignored."""
        ...

    def now(self) -> float:
        """Monotonic time in seconds."""
        ...


class LoopTimer:
    """Timer backed by loop.call_later and time.monotonic.

    Args:
        loop: Event loop to schedule on; defaults to the running loop at the
            time after() is first called.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def after(self, seconds: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(seconds, self._run, callback)

    def cancel(self, handle: Optional[asyncio.TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def now(self) -> float:
        return time.monotonic()

    @staticmethod
    def _run(callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception as e:
            logger.error(
                "timer_callback_failed",
                callback=getattr(callback, "__name__", "unknown"),
                error=str(e),
            )
