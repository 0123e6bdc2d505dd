"""
CSRF-aware HTTP client for browser-like callers (builder UI, scripts, tests).

Mirrors the CSRF cookie into the CSRF header on state-changing requests and
can provoke cookie issuance by visiting a protected page.
"""

import logging
import httpx
from typing import Mapping, MutableMapping, Optional

from app.config.security_config import CSRF_CONFIG, STATE_CHANGING_METHODS

logger = logging.getLogger(__name__)


def get_csrf_token(cookies: httpx.Cookies) -> Optional[str]:
    """Read the CSRF cookie, or None when it has not been issued yet."""
    for cookie in cookies.jar:
        if cookie.name == CSRF_CONFIG["cookie_name"]:
            return cookie.value
    return None


def add_csrf_to_headers(
    headers: Optional[Mapping[str, str]],
    cookies: httpx.Cookies,
) -> MutableMapping[str, str]:
    """Return a copy of headers with the CSRF header added when a token is available."""
    merged = dict(headers or {})
    token = get_csrf_token(cookies)
    if token:
        merged[CSRF_CONFIG["header_name"]] = token
    return merged


class SecureClient:
    """Thin wrapper over an httpx.Client that attaches the CSRF header."""

    def __init__(self, base_url: str = "", client: Optional[httpx.Client] = None, **client_kwargs):
        self._client = client or httpx.Client(base_url=base_url, **client_kwargs)

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def has_csrf_token(self) -> bool:
        return get_csrf_token(self._client.cookies) is not None

    def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if method.upper() in STATE_CHANGING_METHODS:
            kwargs["headers"] = add_csrf_to_headers(kwargs.get("headers"), self._client.cookies)
        return self._client.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs) -> httpx.Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)

    def refresh_csrf_token(self) -> bool:
        """GET a protected page so the server issues a CSRF cookie."""
        try:
            response = self._client.get(CSRF_CONFIG["refresh_path"])
        except httpx.HTTPError as e:
            logger.error(f"Failed to refresh CSRF token: {e}")
            return False
        return response.is_success

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
