"""Base async HTTP client with connection pooling and uniform error mapping.

All remote API clients inherit from this base to get consistent behavior:
- Async/await for non-blocking I/O
- One pooled connection set shared by every request
- Every transport or HTTP failure surfaced as APIProviderError
- Optional retries with exponential backoff, for GET requests only

Usage:
    class MyAPIClient(BaseAsyncClient):
        def __init__(self, api_key: str):
            super().__init__(
                base_url="https://api.example.com",
                headers={"Authorization": f"Bearer {api_key}"},
            )

        async def get_item(self, item_id: str) -> dict:
            return await self.get(f"/items/{item_id}")
"""

import asyncio
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
_BASE_BACKOFF = 1.0  # seconds


class APIProviderError(Exception):
    """Base exception for API provider errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class BaseAsyncClient:
    """Base async HTTP client with connection pooling.

    Args:
        base_url: Base URL for all API requests
        headers: Default headers for all requests
        timeout: Request timeout in seconds (default: 30)
        max_retries: Retries for GET requests on transient failures (default: 0).
            POST requests create remote state and are never retried.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        max_retries: int = 0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout
        self.max_retries = max_retries
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an HTTP request with error handling.

        GET requests are retried on transient failures (429, 502, 503, 504,
        timeouts, network errors) up to max_retries times with exponential
        backoff. Everything else raises on the first failure.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path (relative to base_url)
            params: Query parameters
            json_data: JSON body for POST/PUT requests

        Returns:
            Parsed JSON response as dictionary

        Raises:
            APIProviderError: If the request fails
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        retries = self.max_retries if method.upper() == "GET" else 0
        last_error: APIProviderError | None = None

        for attempt in range(retries + 1):
            logger.debug(
                "%s %s%s params=%s (attempt %d/%d)",
                method, self.base_url, endpoint, params, attempt + 1, retries + 1,
            )

            try:
                response = await self._client.request(
                    method=method,
                    url=endpoint,
                    params=params,
                    json=json_data,
                )

                logger.debug("Response: %d for %s", response.status_code, endpoint)

                if response.status_code >= 400:
                    error_body = response.text[:500]
                    last_error = APIProviderError(
                        message=f"API request failed: {response.status_code}",
                        status_code=response.status_code,
                        response_body=error_body,
                    )

                    if response.status_code in _RETRYABLE_STATUS_CODES and attempt < retries:
                        backoff = _BASE_BACKOFF * (2 ** attempt)
                        logger.warning(
                            "Retryable %d for %s, retrying in %.1fs (attempt %d/%d)",
                            response.status_code, endpoint, backoff,
                            attempt + 1, retries + 1,
                        )
                        await asyncio.sleep(backoff)
                        continue

                    logger.error(
                        "API error: %d %s - %s",
                        response.status_code, endpoint, error_body,
                    )
                    raise last_error

                try:
                    return response.json()
                except ValueError as e:
                    logger.error("Failed to parse JSON response: %s", e)
                    raise APIProviderError(
                        message=f"Invalid JSON response: {e}",
                        status_code=response.status_code,
                        response_body=response.text[:500],
                    ) from e

            except (httpx.TimeoutException, httpx.NetworkError) as e:
                kind = "Request timeout" if isinstance(e, httpx.TimeoutException) else "Network error"
                last_error = APIProviderError(f"{kind}: {e}")
                if attempt < retries:
                    backoff = _BASE_BACKOFF * (2 ** attempt)
                    logger.warning(
                        "%s for %s, retrying in %.1fs (attempt %d/%d)",
                        kind, endpoint, backoff, attempt + 1, retries + 1,
                    )
                    await asyncio.sleep(backoff)
                    continue
                logger.error("%s for %s: %s", kind, endpoint, e)
                raise last_error from e

            except APIProviderError:
                raise

            except httpx.HTTPError as e:
                logger.error("Unexpected HTTP error for %s: %s", endpoint, e)
                raise APIProviderError(f"Unexpected error: {e}") from e

        raise last_error or APIProviderError("Request failed after retries")

    async def get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Convenience method for GET requests."""
        return await self._request("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Convenience method for POST requests."""
        return await self._request("POST", endpoint, params=params, json_data=json_data)
