"""HTTP client for the booking calendar API, used by the bot.

Pattern: one requests.Session with connection pooling and a fixed timeout.
There are no retries: every failure is reported back to the operator, who
decides whether to try again.
"""
import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter

from calendar_admin.logging_config import get_logger

logger = get_logger(__name__)


class BackendError(Exception):
    """Base class for calendar API failures."""
    pass


class BackendUnavailableError(BackendError):
    """Raised on network-level failures (timeout, DNS, connection refused)."""
    pass


class BackendRejectedError(BackendError):
    """Raised when the API answers with an error status."""
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def create_http_session(pool_size: int = 10) -> requests.Session:
    """
    Create HTTP session with connection pooling and no retry policy.

    Returns:
        Configured requests.Session
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=0, pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class CalendarAPIClient:
    """Typed wrapper over the Read/Admin HTTP contract."""

    def __init__(
        self,
        base_url: str,
        api_secret: str,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or create_http_session()

    def _request(self, method: str, path: str, admin: bool = False, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if admin:
            headers["X-API-Secret"] = self.api_secret

        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.warning("calendar_api_unreachable", method=method, path=path, error=str(e))
            raise BackendUnavailableError(str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.warning("calendar_api_request_failed", method=method, path=path, error=str(e))
            raise BackendUnavailableError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            logger.log(
                logging.WARNING if response.status_code < 500 else logging.ERROR,
                "calendar_api_error",
                method=method,
                path=path,
                status=response.status_code,
            )
            raise BackendRejectedError(response.status_code, message or f"HTTP {response.status_code}")

        return data

    def list_dates(self) -> List[str]:
        """GET /api/booked-dates → ordered list of DD-MM-YYYY strings."""
        data = self._request("GET", "/api/booked-dates")
        return list(data.get("dates", []))

    def block_date(self, value: str) -> List[str]:
        """POST /api/admin/block-date → updated list."""
        data = self._request("POST", "/api/admin/block-date", admin=True, json={"date": value})
        return list(data.get("dates", []))

    def unblock_date(self, value: str) -> List[str]:
        """DELETE /api/admin/unblock-date → updated list."""
        data = self._request("DELETE", "/api/admin/unblock-date", admin=True, json={"date": value})
        return list(data.get("dates", []))
