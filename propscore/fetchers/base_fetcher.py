"""
Base Fetcher for PropScore
==========================
Async base class for all upstream HTTP clients (odds events, player stats,
hosted model, token endpoint).

Features:
- Shared aiohttp session (injected, or created lazily and owned)
- One explicit timeout per call
- No retries: a failed call surfaces immediately as the client's error type
- JSON decoding with uniform error wrapping and logging
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from propscore.core.exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)


class BaseFetcher:
    """Base class for async JSON-over-HTTP clients."""

    def __init__(
        self,
        source_name: str,
        base_url: str = "",
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize base fetcher.

        Args:
            source_name: Name of the upstream (used in logs and errors)
            base_url: Prefix for relative paths
            session: Shared aiohttp session (not closed by this client)
            timeout: Default per-call timeout in seconds
        """
        self.source_name = source_name
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _get_headers(self) -> Dict[str, str]:
        """Default headers sent with every request."""
        return {"Accept": "application/json"}

    def _error(self, message: str, status_code: Optional[int] = None) -> Exception:
        """Exception raised for any failed call. Subclasses narrow the type."""
        return UpstreamFetchError(self.source_name, message, status_code=status_code)

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _request_json(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json_body: Any = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make one HTTP request and decode the JSON body.

        Args:
            path: Path relative to base_url, or an absolute URL
            method: HTTP method
            params: Query parameters
            headers: Additional headers (merged over the defaults)
            json_body: JSON payload for POST requests
            timeout: Override of the default timeout (seconds)

        Returns:
            Decoded JSON body

        Raises:
            Exception from `_error()`: On timeout, transport error, non-2xx status or invalid JSON
        """
        url = self._url(path)
        request_headers = self._get_headers()
        if headers:
            request_headers.update(headers)
        total = timeout if timeout is not None else self.timeout

        logger.debug(f"[{self.source_name}] Request: {method} {url}")

        try:
            session = self._get_session()
            async with session.request(
                method,
                url,
                params=params,
                headers=request_headers,
                json=json_body,
                timeout=aiohttp.ClientTimeout(total=total),
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise self._error(body[:200] or response.reason or "error", response.status)
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise self._error(f"invalid JSON body: {e}") from e
        except asyncio.TimeoutError as e:
            logger.warning(f"[{self.source_name}] Timed out after {total}s: {method} {url}")
            raise self._error(f"timed out after {total}s") from e
        except aiohttp.ClientError as e:
            logger.warning(f"[{self.source_name}] Transport error: {e}")
            raise self._error(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()
