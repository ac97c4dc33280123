"""Infrastructure event system - in-process signals.

Usage:

    from infrastructure.events import Signal

    network_changed = Signal("network-changed")
    subscription = network_changed.subscribe(on_network_changed)

    network_changed.emit(True)

    subscription.cancel()
"""

from infrastructure.events.signals import Signal, Subscription

__all__ = ["Signal", "Subscription"]
