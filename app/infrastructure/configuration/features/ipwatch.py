"""Address monitor feature settings."""

from pathlib import Path

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class IpWatchSettings(FeatureSettings):
    """Refresh, debounce and cache configuration for the address monitor.

    Environment Variables:
        IPWATCH_REFRESH_INTERVAL_SECONDS: Periodic refresh interval (default: 600)
        IPWATCH_MIN_CHECK_INTERVAL_SECONDS: Minimum time between two checks (default: 4)
        IPWATCH_NETWORK_DEBOUNCE_SECONDS: Delay after a network event (default: 4)
        IPWATCH_NOTIFY_SUPPRESS_MS: Notification quiet window after reconnect (default: 15000)
        IPWATCH_FETCH_TIMEOUT_SECONDS: Timeout shared by the lookup calls (default: 6)
        IPWATCH_MAP_TIMEOUT_SECONDS: Timeout for the blocking map fetch (default: 4)
        IPWATCH_COORD_PRECISION: Decimal places kept in map cache keys (default: 5)
        IPWATCH_CACHE_DIR: Directory holding the flags/ and maps/ caches
        IPWATCH_NOTIFY_ON_CHANGE: Show a notification when the address changes

    Example:
        ```python
        from infrastructure.configuration import settings

        interval = settings.ipwatch.refresh_interval_seconds
        ```
    """

    refresh_interval_seconds: float = Field(
        default=600,
        alias="IPWATCH_REFRESH_INTERVAL_SECONDS",
        description="Periodic refresh interval; be friendly to the upstream services",
    )
    min_check_interval_seconds: float = Field(
        default=4,
        alias="IPWATCH_MIN_CHECK_INTERVAL_SECONDS",
        description="Refreshes closer together than this are skipped",
    )
    network_debounce_seconds: float = Field(
        default=4,
        alias="IPWATCH_NETWORK_DEBOUNCE_SECONDS",
        description="Delay between the last network event and the refresh",
    )
    notify_suppress_ms: int = Field(
        default=15000,
        alias="IPWATCH_NOTIFY_SUPPRESS_MS",
        description="Address-change notifications are swallowed this long after a reconnect",
    )
    fetch_timeout_seconds: float = Field(
        default=6,
        alias="IPWATCH_FETCH_TIMEOUT_SECONDS",
        description="Timeout applied to each lookup call of a refresh",
    )
    map_timeout_seconds: float = Field(
        default=4,
        alias="IPWATCH_MAP_TIMEOUT_SECONDS",
        description="Timeout for the on-demand static map download",
    )
    coord_precision: int = Field(
        default=5,
        alias="IPWATCH_COORD_PRECISION",
        description="Decimal places used when normalizing coordinates",
    )
    cache_dir: Path = Field(
        default=Path("~/.cache/ipwatch"),
        alias="IPWATCH_CACHE_DIR",
        validate_default=True,
        description="Root of the flag and map caches",
    )
    notify_on_change: bool = Field(
        default=True,
        alias="IPWATCH_NOTIFY_ON_CHANGE",
        description="Notify the user when the external address changes",
    )

    @field_validator(
        "refresh_interval_seconds",
        "min_check_interval_seconds",
        "network_debounce_seconds",
        "fetch_timeout_seconds",
        "map_timeout_seconds",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Intervals and timeouts must be positive."""
        if v <= 0:
            raise ValueError(f"must be positive, got {v}")
        return v

    @field_validator("notify_suppress_ms")
    @classmethod
    def validate_suppress_ms(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"must not be negative, got {v}")
        return v

    @field_validator("coord_precision")
    @classmethod
    def validate_precision(cls, v: int) -> int:
        if not 0 <= v <= 10:
            raise ValueError(f"coord precision must be between 0 and 10, got {v}")
        return v

    @field_validator("cache_dir")
    @classmethod
    def expand_cache_dir(cls, v: Path) -> Path:
        return v.expanduser()
