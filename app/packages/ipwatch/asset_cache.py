"""Write-once disk cache for country flags and static map tiles.

Flags are keyed by lowercase country code, maps by the coordinate pair
normalized to a fixed number of decimals. A file that exists is never fetched
again; there is no eviction.

A flag miss never blocks: the placeholder path is returned at once and the
download runs in the background, after which the "asset updated" callback
fires on the event loop. A map miss is fetched synchronously because maps
are only requested from the on-demand detail view.
"""

import asyncio
import math
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import structlog

from infrastructure.clients.http import HttpClient
from infrastructure.configuration import UpstreamSettings

logger = structlog.get_logger()

PLACEHOLDER_ICON = Path(__file__).resolve().parent / "static" / "ip.svg"

AssetUpdatedCallback = Callable[[str, str, str], Any]


def normalize_coord(value: Any, decimals: int = 5) -> Optional[str]:
    """Format a coordinate with a fixed number of decimals.

    Near-duplicate coordinates collapse to the same string, which makes the
    result usable as a cache key.

    Args:
        value: Number (or numeric string) to format
        decimals: Decimal places to keep

    Returns:
        Fixed-decimal string such as "59.91275", or None when value is not a
        finite number
    """
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    text = f"{number:.{decimals}f}"
    # -0.00000 and 0.00000 are the same key
    if text.startswith("-") and float(text) == 0:
        text = text[1:]
    return text


class AssetCache:
    """Flag and map cache rooted at cache_dir.

    Args:
        http_client: HTTP facade for downloads
        upstream: Flag URL template and map endpoint
        cache_dir: Root directory; flags/ and maps/ are created beneath it
        precision: Decimal places used for map keys
        flag_timeout: Timeout for the background flag download
        map_timeout: Timeout for the blocking map download
        placeholder: Path returned while a flag is not cached
        on_asset_updated: Called as (kind, key, path) after a background
            download lands on disk
    """

    def __init__(
        self,
        http_client: HttpClient,
        upstream: UpstreamSettings,
        cache_dir: Path,
        precision: int = 5,
        flag_timeout: float = 6,
        map_timeout: float = 4,
        placeholder: Path = PLACEHOLDER_ICON,
        on_asset_updated: Optional[AssetUpdatedCallback] = None,
    ) -> None:
        self._http = http_client
        self._upstream = upstream
        self.flags_dir = Path(cache_dir) / "flags"
        self.maps_dir = Path(cache_dir) / "maps"
        self._precision = precision
        self._flag_timeout = flag_timeout
        self._map_timeout = map_timeout
        self.placeholder = str(placeholder)
        self._on_asset_updated = on_asset_updated
        self._pending: Dict[str, asyncio.Task] = {}
        self._closed = False
        self._logger = logger.bind(component="asset_cache")

    def flag_url(self, country_code: str) -> str:
        return self._upstream.flag_url.replace("<countrycode>", country_code.lower())

    def map_params(self, lat_key: str, lon_key: str) -> Dict[str, Any]:
        return {"lat": lat_key, "lon": lon_key, "f": "SVG", "marker": 12, "w": 250, "h": 150}

    def flag_file(self, country_code: str) -> Path:
        return self.flags_dir / f"{country_code.lower()}.svg"

    def map_file(self, lat_key: str, lon_key: str) -> Path:
        return self.maps_dir / f"{lat_key}_{lon_key}.svg"

    def get_flag_path(self, country_code: Optional[str]) -> str:
        """Return the cached flag for country_code, or the placeholder.

        On a miss a background download is started (at most one per code)
        and the placeholder is returned immediately.
        """
        if not isinstance(country_code, str) or not country_code.strip():
            return self.placeholder
        code = country_code.strip().lower()

        path = self.flag_file(code)
        if path.exists():
            return str(path)

        if self._closed or code in self._pending:
            return self.placeholder

        if not self._ensure_dir(self.flags_dir):
            return self.placeholder

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._logger.debug("flag_download_deferred", country_code=code)
            return self.placeholder

        task = loop.create_task(self._download_flag(code, path))
        self._pending[code] = task
        task.add_done_callback(lambda _t, key=code: self._pending.pop(key, None))
        return self.placeholder

    def get_map_path(self, latitude: Any, longitude: Any) -> Optional[str]:
        """Return the cached map tile for a coordinate pair, fetching it if needed.

        Blocks on the download. Returns None when the coordinates are not
        numbers or the tile could not be fetched or stored; callers then show
        the raw coordinates instead.
        """
        lat_key = normalize_coord(latitude, self._precision)
        lon_key = normalize_coord(longitude, self._precision)
        if lat_key is None or lon_key is None:
            return None

        path = self.map_file(lat_key, lon_key)
        if path.exists():
            return str(path)

        if not self._ensure_dir(self.maps_dir):
            return None

        log = self._logger.bind(lat=lat_key, lon=lon_key)
        result = self._http.get(
            self._upstream.map_url,
            params=self.map_params(lat_key, lon_key),
            timeout=self._map_timeout,
        )
        if not result.is_success or not result.data:
            log.warning(
                "map_download_failed",
                error_code=result.error_code,
                transient=result.is_transient,
            )
            return None

        if not self._write_atomic(path, result.data):
            return None
        log.info("map_cached", path=str(path))
        return str(path)

    def close(self) -> None:
        """Stop accepting downloads and cancel the ones in progress."""
        self._closed = True
        for task in list(self._pending.values()):
            task.cancel()
        self._pending.clear()

    async def _download_flag(self, code: str, path: Path) -> None:
        log = self._logger.bind(country_code=code)
        try:
            result = await asyncio.to_thread(
                self._http.get, self.flag_url(code), timeout=self._flag_timeout
            )
            if self._closed:
                return
            if not result.is_success or not result.data:
                log.warning(
                    "flag_download_failed",
                    error_code=result.error_code,
                    transient=result.is_transient,
                )
                return
            if not self._write_atomic(path, result.data):
                return
            log.info("flag_cached", path=str(path))
            self._notify_updated("flag", code, str(path))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.error("flag_download_error", error=str(e))

    def _notify_updated(self, kind: str, key: str, path: str) -> None:
        if self._on_asset_updated is None:
            return
        try:
            self._on_asset_updated(kind, key, path)
        except Exception as e:
            self._logger.error("asset_updated_callback_failed", kind=kind, error=str(e))

    def _ensure_dir(self, directory: Path) -> bool:
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            self._logger.warning(
                "cache_dir_unavailable", directory=str(directory), error=str(e)
            )
            return False

    def _write_atomic(self, path: Path, data: bytes) -> bool:
        """Write data next to path and rename it into place."""
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            return True
        except OSError as e:
            self._logger.error("cache_write_failed", path=str(path), error=str(e))
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            return False
