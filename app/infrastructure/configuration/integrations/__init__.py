"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.upstream import UpstreamSettings

__all__ = [
    "UpstreamSettings",
]
