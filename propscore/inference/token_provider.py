"""
Model Endpoint Access Tokens
============================
Bearer-token sources for the hosted prediction endpoint and a caching
provider in front of them.

The cached token is stored with TTL = lifetime - refresh margin, so it is
refetched once it is within the margin of expiry.

Usage:
    provider = CachedTokenProvider(GoogleAuthTokenSource(), MemoryCache())
    token = await provider.get_token()
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

import google.auth
import google.auth.exceptions
import google.auth.transport.requests

from propscore.config.constants import GOOGLE_AUTH_SCOPES
from propscore.config.thresholds import CACHE_TTL_CONFIG, TIMEOUT_CONFIG
from propscore.core.cache import CacheStore
from propscore.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_CACHE_KEY = "inference_access_token"


class TokenSource:
    """Fetches a fresh token. Returns (token, lifetime_seconds)."""

    name = "token"

    async def fetch_token(self) -> Tuple[str, float]:
        raise NotImplementedError


class StaticTokenSource(TokenSource):
    """A pre-issued token from configuration (INFERENCE_ACCESS_TOKEN)."""

    name = "static"

    def __init__(self, token: Optional[str], lifetime: float = CACHE_TTL_CONFIG.token_lifetime):
        self.token = token
        self.lifetime = lifetime

    async def fetch_token(self) -> Tuple[str, float]:
        if not self.token:
            raise AuthenticationError("no access token configured", source=self.name)
        return self.token, self.lifetime


class GoogleAuthTokenSource(TokenSource):
    """
    Application default credentials through google-auth.

    Covers a service-account key file (GOOGLE_APPLICATION_CREDENTIALS),
    gcloud user credentials and the GCE / Cloud Run metadata server. The
    blocking refresh runs in a worker thread.
    """

    name = "google-auth"

    def __init__(
        self,
        scopes: Sequence[str] = GOOGLE_AUTH_SCOPES,
        timeout: float = TIMEOUT_CONFIG.token,
    ):
        self.scopes = list(scopes)
        self.timeout = timeout
        self._credentials = None

    def _refresh(self) -> Tuple[Optional[str], Optional[datetime]]:
        if self._credentials is None:
            self._credentials, _ = google.auth.default(scopes=self.scopes)
        self._credentials.refresh(google.auth.transport.requests.Request())
        return self._credentials.token, self._credentials.expiry

    @staticmethod
    def lifetime_from_expiry(expiry: Optional[datetime], now: Optional[datetime] = None) -> float:
        """Seconds until `expiry` (naive UTC, as google-auth reports it)."""
        if expiry is None:
            return float(CACHE_TTL_CONFIG.token_lifetime)
        if now is None:
            now = datetime.now(timezone.utc).replace(tzinfo=None)
        return max((expiry - now).total_seconds(), 0.0)

    async def fetch_token(self) -> Tuple[str, float]:
        try:
            token, expiry = await asyncio.wait_for(asyncio.to_thread(self._refresh), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AuthenticationError(f"token refresh timed out after {self.timeout}s", source=self.name) from e
        except google.auth.exceptions.GoogleAuthError as e:
            raise AuthenticationError(str(e), source=self.name) from e

        if not token:
            raise AuthenticationError("credentials returned no token", source=self.name)
        return token, self.lifetime_from_expiry(expiry)


class CachedTokenProvider:
    """
    Token provider backed by an injected cache.

    Concurrent callers that miss the cache share one fetch. A failed fetch
    raises AuthenticationError and leaves the cache empty.
    """

    def __init__(
        self,
        source: TokenSource,
        cache: CacheStore,
        refresh_margin: float = CACHE_TTL_CONFIG.token_refresh_margin,
    ):
        self.source = source
        self.cache = cache
        self.refresh_margin = refresh_margin
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        token = self.cache.get(TOKEN_CACHE_KEY)
        if token is not None:
            return token

        async with self._lock:
            token = self.cache.get(TOKEN_CACHE_KEY)
            if token is not None:
                return token

            token, lifetime = await self.source.fetch_token()
            self.cache.set(TOKEN_CACHE_KEY, token, lifetime - self.refresh_margin)
            logger.info(
                "Obtained model endpoint token",
                extra={"source": self.source.name, "expires_in": lifetime},
            )
            return token

    def invalidate(self) -> None:
        """Drop the cached token (e.g. after the endpoint rejects it)."""
        self.cache.invalidate(TOKEN_CACHE_KEY)
