"""Feature settings __init__ - exports all feature settings."""

from infrastructure.configuration.features.ipwatch import IpWatchSettings

__all__ = [
    "IpWatchSettings",
]
