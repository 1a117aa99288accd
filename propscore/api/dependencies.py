"""
API Dependencies
================
Dependency injection for FastAPI endpoints.

Provides:
- ServiceContainer: per-application clients, caches and the orchestrator,
  built lazily so health endpoints work without provider credentials
- Depends() helpers that read the container from app.state
"""

import logging
from typing import Optional

import aiohttp
from fastapi import Depends, Request

from propscore.config.settings import Settings
from propscore.core.cache import CacheStore, MemoryCache
from propscore.features.feature_engine import FeatureEngine
from propscore.fetchers.game_logs import GameLogStore, StatsProviderClient
from propscore.fetchers.odds_events import OddsEventsClient
from propscore.inference.client import InferenceClient
from propscore.inference.token_provider import (
    CachedTokenProvider,
    GoogleAuthTokenSource,
    StaticTokenSource,
    TokenSource,
)
from propscore.pipeline.orchestrator import PropsOrchestrator
from propscore.pipeline.roster import StarRoster

logger = logging.getLogger(__name__)


# ==============================================================================
# Service Container
# ==============================================================================


class ServiceContainer:
    """
    Owns the shared HTTP session, the two caches and every pipeline client.

    Components are created on first use. Missing credentials surface as
    MissingConfigError from the component that needs them.

    Attributes:
        settings: Process settings
        session: Shared aiohttp session (opened by start())
        game_log_cache: Cache owned by the GameLogStore
        token_cache: Cache owned by the token provider
    """

    def __init__(
        self,
        settings: Settings,
        game_log_cache: Optional[CacheStore] = None,
        token_cache: Optional[CacheStore] = None,
    ):
        self.settings = settings
        self.session: Optional[aiohttp.ClientSession] = None
        self.game_log_cache = game_log_cache or MemoryCache()
        self.token_cache = token_cache or MemoryCache()

        self._roster: Optional[StarRoster] = None
        self._game_log_store: Optional[GameLogStore] = None
        self._inference_client: Optional[InferenceClient] = None
        self._orchestrator: Optional[PropsOrchestrator] = None

    async def start(self) -> None:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            logger.info("HTTP session opened")

    async def close(self) -> None:
        if self.session is not None and not self.session.closed:
            await self.session.close()
            logger.info("HTTP session closed")

    @property
    def roster(self) -> StarRoster:
        if self._roster is None:
            self._roster = StarRoster.load(self.settings.roster_path)
        return self._roster

    def get_game_log_store(self) -> GameLogStore:
        if self._game_log_store is None:
            provider = StatsProviderClient(self.settings.require("api_sports_key"), session=self.session)
            self._game_log_store = GameLogStore(provider, self.game_log_cache)
        return self._game_log_store

    def _token_source(self) -> TokenSource:
        if self.settings.inference_access_token:
            return StaticTokenSource(self.settings.inference_access_token)
        return GoogleAuthTokenSource()

    def get_inference_client(self) -> InferenceClient:
        if self._inference_client is None:
            provider = CachedTokenProvider(self._token_source(), self.token_cache)
            self._inference_client = InferenceClient(
                self.settings.inference_url, provider, session=self.session
            )
        return self._inference_client

    def get_orchestrator(self) -> PropsOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = PropsOrchestrator(
                odds_client=OddsEventsClient(self.settings.require("sgo_api_key"), session=self.session),
                game_log_store=self.get_game_log_store(),
                inference_client=self.get_inference_client(),
                roster=self.roster,
                feature_engine=FeatureEngine(),
            )
            logger.info("Props orchestrator initialized")
        return self._orchestrator


# ==============================================================================
# Dependency Injection Functions
# ==============================================================================


def get_services(request: Request) -> ServiceContainer:
    """The application's ServiceContainer (created in the lifespan)."""
    return request.app.state.services


def get_orchestrator(services: ServiceContainer = Depends(get_services)) -> PropsOrchestrator:
    """
    Dependency for the props orchestrator.

    Usage:
        @router.post("/ml")
        async def props(orchestrator: PropsOrchestrator = Depends(get_orchestrator)):
            ...
    """
    return services.get_orchestrator()


def get_inference_client(services: ServiceContainer = Depends(get_services)) -> InferenceClient:
    return services.get_inference_client()


def get_game_log_store(services: ServiceContainer = Depends(get_services)) -> GameLogStore:
    return services.get_game_log_store()
