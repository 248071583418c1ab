"""HTTP client for the BLT REST API.

All outbound traffic goes through ``BLTClient.request``, which attaches the
JSON and bearer headers, enforces a hard wall-clock timeout and classifies
every failure as exactly one of ``RequestTimeoutError``, ``NetworkError`` or
``HttpError``. There are no retries and no caching.
"""

import asyncio
import logging
from typing import Any

import httpx

from blt_mcp.config import ServerConfig
from blt_mcp.errors import HttpError, NetworkError, ProtocolError, RequestTimeoutError

logger = logging.getLogger(__name__)

ALLOWED_METHODS = frozenset({"GET", "POST", "PATCH"})


class BLTClient:
    """Async HTTP client for the BLT API."""

    def __init__(
        self,
        config: ServerConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize BLT client.

        Args:
            config: Server configuration (base URL, key, timeout)
            transport: Optional httpx transport, used by tests to stub the API
        """
        self.config = config
        self.timeout_seconds = config.timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.api_base,
                headers=self._build_headers(),
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            )
        return self._client

    def _scrub(self, text: str) -> str:
        return text.replace(self.config.api_base, "<api>")

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request to the BLT API.

        Args:
            endpoint: API path appended to the base URL (e.g. '/issues/123')
            method: HTTP method (GET, POST, PATCH)
            body: JSON body, sent only for non-GET requests

        Returns:
            Parsed JSON response (object or array)

        Raises:
            RequestTimeoutError: If the call exceeds the configured bound
            NetworkError: If the API cannot be reached
            HttpError: If the API answers with a non-success status
            ProtocolError: If a success response is not valid JSON
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            msg = f"Unsupported HTTP method: {method}"
            raise ValueError(msg)

        kwargs: dict[str, Any] = {}
        if body is not None and method != "GET":
            kwargs["json"] = body

        client = self._get_client()
        logger.debug(
            "API request: %s %s",
            method,
            endpoint,
            extra={"method": method, "endpoint": endpoint},
        )

        try:
            response = await asyncio.wait_for(
                client.request(method, endpoint, **kwargs),
                timeout=self.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException):
            msg = f"API request timed out after {self.timeout_seconds:g}s"
            raise RequestTimeoutError(msg, timeout_seconds=self.timeout_seconds) from None
        except (httpx.HTTPError, OSError) as e:
            msg = f"Could not reach the BLT API ({type(e).__name__}: {self._scrub(str(e))})"
            raise NetworkError(msg, cause=e) from e

        if not response.is_success:
            logger.debug(
                "API error response: %s %s -> %s",
                method,
                endpoint,
                response.status_code,
                extra={"method": method, "endpoint": endpoint, "status_code": response.status_code},
            )
            raise HttpError(response.status_code, response.reason_phrase)

        try:
            return response.json()
        except ValueError:
            msg = "API returned a response that is not valid JSON"
            raise ProtocolError(msg, {"status_code": response.status_code}) from None

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BLTClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


__all__ = ["ALLOWED_METHODS", "BLTClient"]
