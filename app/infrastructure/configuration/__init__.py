"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    IpWatchSettings: Monitor feature settings class
    UpstreamSettings: Upstream endpoint settings class

Example:
    ```python
    from infrastructure.configuration import settings
    timeout = settings.ipwatch.fetch_timeout_seconds
    ```
"""

from infrastructure.configuration.settings import Settings, settings
from infrastructure.configuration.features import IpWatchSettings
from infrastructure.configuration.integrations import UpstreamSettings

__all__ = ["Settings", "settings", "IpWatchSettings", "UpstreamSettings"]
