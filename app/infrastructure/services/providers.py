"""
Factory functions for application-scoped singletons.
"""

from functools import lru_cache

from infrastructure.clients.http import HttpClient
from infrastructure.configuration import Settings


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.
    Tests override it with get_settings.cache_clear() after patching the
    environment.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_http_client() -> HttpClient:
    """
    Get the shared HTTP client.

    Returns:
        HttpClient: Pooled client configured with the upstream User-Agent and
        the refresh fetch timeout.
    """
    settings = get_settings()
    return HttpClient(
        timeout=settings.ipwatch.fetch_timeout_seconds,
        user_agent=settings.upstream.user_agent,
    )
