"""In-process signals with cancellable subscriptions.

A Signal is a named observer list. Host integrations (presence monitor,
network monitor) emit on it; the monitor subscribes handlers and keeps the
returned Subscription so it can disconnect on shutdown.

Handlers are called synchronously in subscription order. A handler that
raises is logged and skipped; emit() never fails.
"""

from typing import Any, Callable, List

from infrastructure.logging import get_module_logger

logger = get_module_logger()


class Subscription:
    """Cancellation token returned by Signal.subscribe()."""

    def __init__(self, signal: "Signal", handler: Callable[..., Any]) -> None:
        self._signal = signal
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Disconnect the handler. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._signal._remove(self._handler)


class Signal:
    """Named observer list.

    Args:
        name: Signal name used in log entries (e.g. 'network-changed')
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: List[Callable[..., Any]] = []

    def subscribe(self, handler: Callable[..., Any]) -> Subscription:
        """Register a handler.

        Args:
            handler: Callable invoked with the arguments passed to emit()

        Returns:
            Subscription whose cancel() disconnects the handler
        """
        self._handlers.append(handler)
        logger.debug(
            "signal_subscribed",
            signal=self.name,
            handler=getattr(handler, "__name__", "unknown"),
            total_handlers=len(self._handlers),
        )
        return Subscription(self, handler)

    def emit(self, *args: Any) -> List[Any]:
        """Call every handler with args.

        Returns:
            Return values of the handlers that did not raise.
        """
        results = []
        for handler in list(self._handlers):
            try:
                results.append(handler(*args))
            except Exception as e:
                logger.error(
                    "signal_handler_failed",
                    signal=self.name,
                    handler=getattr(handler, "__name__", "unknown"),
                    error=str(e),
                )
        return results

    def _remove(self, handler: Callable[..., Any]) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            return
        logger.debug("signal_unsubscribed", signal=self.name)
