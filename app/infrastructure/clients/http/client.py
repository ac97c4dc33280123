"""HTTP fetch facade for upstream lookup and asset services.

Thin wrapper over a pooled `requests.Session`. Every call carries an explicit
timeout and returns an OperationResult whose data is the raw response body;
transport failures and non-200 responses never raise.

Usage:
    from infrastructure.clients.http import HttpClient

    client = HttpClient(user_agent="ipwatch/1.0")
    result = client.get("https://ipv4.icanhazip.com", timeout=6)

    if result.is_success:
        text = result.data.decode("utf-8", "replace").strip()
"""

from typing import Any, Dict, Optional

import requests
import structlog

from infrastructure.operations import (
    OperationResult,
    classify_requests_error,
    classify_status_code,
)

logger = structlog.get_logger(__name__)


class HttpClient:
    """Blocking HTTP client with connection pooling and bounded timeouts.

    Attributes:
        timeout: Default timeout in seconds
        session: Requests session with connection pooling
    """

    def __init__(
        self,
        timeout: float = 6,
        user_agent: str = "ipwatch/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "application/json, text/plain, */*",
            }
        )
        self._logger = logger.bind(component="http_client")

    def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> OperationResult:
        """Send a GET request.

        Args:
            url: Absolute URL
            params: Query parameters
            timeout: Request timeout (overrides default)

        Returns:
            OperationResult with the response bytes or an error
        """
        return self.fetch(url, "GET", params=params, timeout=timeout)

    def post_form(
        self,
        url: str,
        form: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> OperationResult:
        """Send a form-encoded POST request.

        Args:
            url: Absolute URL
            form: Fields sent as application/x-www-form-urlencoded
            timeout: Request timeout (overrides default)

        Returns:
            OperationResult with the response bytes or an error
        """
        return self.fetch(url, "POST", data=form, timeout=timeout)

    def fetch(
        self,
        url: str,
        method: str = "GET",
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> OperationResult:
        """Send an HTTP request and return the raw body.

        Only a 200 response counts as success; the body may be empty.

        Args:
            url: Absolute URL
            method: HTTP method
            data: Form body (requests encodes dicts as x-www-form-urlencoded)
            params: Query parameters
            timeout: Request timeout in seconds

        Returns:
            OperationResult with bytes data on success
        """
        timeout = timeout or self.timeout
        log = self._logger.bind(method=method, url=url)
        log.debug("http_request")

        try:
            response = self._session.request(
                method=method,
                url=url,
                data=data,
                params=params,
                timeout=timeout,
            )
        except Exception as e:
            result = classify_requests_error(e, timeout=timeout)
            log.warning(
                "http_request_failed",
                error_code=result.error_code,
                error=str(e),
            )
            return result

        log = log.bind(status_code=response.status_code)

        if response.status_code == 200:
            log.debug("http_success", size=len(response.content))
            return OperationResult.success(
                data=response.content, message=f"{method} {url} succeeded"
            )

        message = f"{method} {url} returned {response.status_code}"
        if response.status_code >= 400:
            log.warning("http_error_status")
            return classify_status_code(
                response.status_code,
                message,
                retry_after_header=response.headers.get("Retry-After"),
            )

        log.warning("http_unexpected_status")
        return OperationResult.transient_error(
            message, error_code=f"HTTP_{response.status_code}"
        )

    def close(self) -> None:
        """Close HTTP session and release connections."""
        self._session.close()
        self._logger.debug("http_client_closed")


__all__ = ["HttpClient"]
