"""Async client for the podcast catalog Web API.

Speaks the Spotify Web API dialect: client-credentials OAuth, then
bearer-authenticated GETs for shows, show episodes and search.
"""

import logging
import os
import time
from typing import Any

import httpx

from podnav.config.schema import CatalogConfig
from podnav.utils.errors import (
    AuthenticationError,
    CatalogAPIError,
    NetworkConnectionError,
    NetworkTimeoutError,
)
from podnav.utils.retry import RetryConfig, UnauthorizedError, classify_http_error, with_retry

logger = logging.getLogger(__name__)

# Largest page the API returns for list endpoints
MAX_PAGE_LIMIT = 50

# Refresh tokens this long before they expire
TOKEN_EXPIRY_MARGIN_SECONDS = 300

CLIENT_ID_ENV = "PODNAV_CLIENT_ID"
CLIENT_SECRET_ENV = "PODNAV_CLIENT_SECRET"


class CatalogClient:
    """Thin async wrapper over the catalog's HTTP endpoints.

    Returns decoded JSON payloads; mapping into models happens in
    ShowService. Every failure surfaces as a TransportError subclass.

    Example:
        >>> async with CatalogClient(client_id, client_secret) as client:
        ...     show = await client.get_show("4rOoJ6Egrf8K2IrywzwOMk")
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        api_base_url: str = "https://api.spotify.com/v1",
        token_url: str = "https://accounts.spotify.com/api/token",
        market: str = "US",
        timeout: float = 10.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """Initialize client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            api_base_url: Base URL of the Web API
            token_url: OAuth token endpoint
            market: Market (country code) sent with episode and search requests
            timeout: Per-request timeout in seconds
            retry_config: Retry behavior for transient failures
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_base_url = api_base_url.rstrip("/")
        self.token_url = token_url
        self.market = market

        self._http = httpx.AsyncClient(timeout=timeout)
        self._access_token: str | None = None
        self._token_expires_at = 0.0

        # Retry wraps a single GET, so each attempt re-reads the token
        self._get_json = with_retry(retry_config)(self._get_json_once)

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "CatalogClient":
        """Build a client from config, falling back to env vars for credentials."""
        return cls(
            client_id=config.client_id or os.environ.get(CLIENT_ID_ENV),
            client_secret=config.client_secret or os.environ.get(CLIENT_SECRET_ENV),
            api_base_url=config.api_base_url,
            token_url=config.token_url,
            market=config.market,
            timeout=config.timeout_seconds,
            retry_config=RetryConfig(max_attempts=config.max_retries),
        )

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_show(self, show_id: str) -> dict[str, Any]:
        """Fetch show details."""
        return await self._get_json(f"/shows/{show_id}", {"market": self.market})

    async def get_show_episodes(
        self, show_id: str, limit: int = MAX_PAGE_LIMIT, offset: int = 0
    ) -> dict[str, Any]:
        """Fetch one page of a show's episodes.

        Args:
            show_id: Show ID
            limit: Episodes per request, clamped to 1-50
            offset: Index of the first episode to return

        Returns:
            Paging object with "items" and "total"
        """
        params = {
            "limit": min(max(1, limit), MAX_PAGE_LIMIT),
            "offset": max(0, offset),
            "market": self.market,
        }
        return await self._get_json(f"/shows/{show_id}/episodes", params)

    async def search_shows(self, query: str, limit: int = 10) -> dict[str, Any]:
        """Search the catalog for shows."""
        params = {
            "q": query.strip(),
            "type": "show",
            "limit": min(max(1, limit), MAX_PAGE_LIMIT),
            "market": self.market,
        }
        return await self._get_json("/search", params)

    async def _get_json_once(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        token = await self._get_access_token()
        url = f"{self.api_base_url}{path}"
        logger.debug("GET %s %s", url, params)

        response = await self._send(
            self._http.get(url, params=params, headers={"Authorization": f"Bearer {token}"})
        )
        if response.status_code in (401, 403):
            # Token revoked or expired early; fetch a new one next time
            self._access_token = None
        self._raise_for_status(response)
        return _decode_json(response)

    async def _get_access_token(self) -> str:
        """Return a cached client-credentials token, requesting one when stale."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        if not self.client_id or not self.client_secret:
            raise AuthenticationError(
                "Catalog credentials are not configured.\n"
                f"Set {CLIENT_ID_ENV} and {CLIENT_SECRET_ENV}, or run "
                "'podnav config set catalog.client_id ...'"
            )

        logger.debug("Requesting catalog access token")
        response = await self._send(
            self._http.post(
                self.token_url,
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self.client_secret),
            )
        )
        if response.status_code in (400, 401, 403):
            raise UnauthorizedError(
                f"Catalog rejected client credentials (HTTP {response.status_code})",
                response.status_code,
            )
        self._raise_for_status(response)

        payload = _decode_json(response)
        token = payload.get("access_token")
        try:
            expires_in = float(payload.get("expires_in", 3600))
        except (TypeError, ValueError) as e:
            raise CatalogAPIError(
                f"Token response has an invalid expires_in: {payload.get('expires_in')!r}",
                response.status_code,
            ) from e
        if not isinstance(token, str) or not token:
            raise CatalogAPIError(
                "Token response did not contain an access token", response.status_code
            )

        self._access_token = token
        margin = min(TOKEN_EXPIRY_MARGIN_SECONDS, expires_in / 2)
        self._token_expires_at = time.monotonic() + expires_in - margin
        return self._access_token

    async def _send(self, request: Any) -> httpx.Response:
        """Await an httpx call, mapping transport failures to podnav errors."""
        try:
            return await request
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            raise NetworkConnectionError(f"Request failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise classify_http_error(e.response.status_code, _error_message(e.response)) from e


def _error_message(response: httpx.Response) -> str:
    """Pull the API's error message out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]

    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        return str(error.get("message", ""))
    if isinstance(error, str):
        return str(payload.get("error_description", error))
    return response.text[:200]


def _decode_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a successful response body, which must be a JSON object."""
    try:
        payload = response.json()
    except ValueError as e:
        raise CatalogAPIError(
            f"Catalog returned a non-JSON response from {response.request.url.path}",
            response.status_code,
        ) from e
    if not isinstance(payload, dict):
        raise CatalogAPIError(
            f"Catalog returned unexpected JSON from {response.request.url.path}",
            response.status_code,
        )
    return payload
