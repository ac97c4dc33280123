"""ipwatch configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.configuration.features import IpWatchSettings
from infrastructure.configuration.integrations import UpstreamSettings


class Settings(BaseSettings):
    """ipwatch configuration settings - main aggregator.

    Aggregates the domain settings into a single configuration object:

    - **ipwatch**: refresh cadence, debounce, suppression, cache location
    - **upstream**: endpoints of the lookup and asset services

    Environment Variables:
        PREFIX: Environment prefix; non-empty means a development run
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        ```python
        from infrastructure.configuration import settings

        interval = settings.ipwatch.refresh_interval_seconds
        geo_url = settings.upstream.geo_url

        if settings.is_production:
            # JSON logs...
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    ipwatch: IpWatchSettings
    upstream: UpstreamSettings

    @property
    def is_production(self) -> bool:
        """True if PREFIX is empty (production), False otherwise."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "ipwatch": IpWatchSettings,
            "upstream": UpstreamSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the singleton settings instance
settings = Settings()
