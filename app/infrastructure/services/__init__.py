"""
Application-scoped service providers.
"""

from infrastructure.services.providers import get_http_client, get_settings

__all__ = [
    "get_http_client",
    "get_settings",
]
