"""
Player Game Logs
================
Stats-provider client (API-Sports NBA v2) and the cached GameLogStore.

GameLogStore never raises for provider trouble: failures are logged and
reported as "no games", and empty results are not cached so the next request
tries again.

Usage:
    store = GameLogStore(StatsProviderClient(api_key), MemoryCache())
    logs = await store.get_recent_games(265, season=2025, limit=15)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from propscore.config.constants import API_SPORTS_BASE_URL, API_SPORTS_KEY_HEADER
from propscore.config.thresholds import CACHE_TTL_CONFIG, TIMEOUT_CONFIG, WINDOW_CONFIG
from propscore.core.cache import CacheStore
from propscore.core.exceptions import UpstreamFetchError
from propscore.core.schemas import GameLogEntry
from propscore.fetchers.base_fetcher import BaseFetcher
from propscore.utils.name_normalizer import last_name, normalize_player_name
from propscore.utils.season_helpers import current_season

logger = logging.getLogger(__name__)


def parse_game_log(row: Any) -> Optional[GameLogEntry]:
    """
    Convert one API-Sports `players/statistics` row into a GameLogEntry.

    Returns None when the row is not an object or has no usable game date.
    """
    if not isinstance(row, dict):
        return None
    game = row.get("game")
    if not isinstance(game, dict):
        return None
    game_date = game.get("date")
    if isinstance(game_date, dict):
        game_date = game_date.get("start")
    if not game_date:
        return None

    try:
        return GameLogEntry(
            game_date=game_date,
            minutes=row.get("min"),
            points=row.get("points"),
            rebounds=row.get("totReb"),
            assists=row.get("assists"),
            steals=row.get("steals"),
            blocks=row.get("blocks"),
            turnovers=row.get("turnovers"),
            fgm=row.get("fgm"),
            fga=row.get("fga"),
            fg3m=row.get("tpm"),
            fg3a=row.get("tpa"),
            ftm=row.get("ftm"),
            fta=row.get("fta"),
        )
    except (PydanticValidationError, TypeError, ValueError) as e:
        logger.debug(f"Skipping unparseable game log row: {e}")
        return None


def sort_newest_first(entries: Sequence[GameLogEntry]) -> List[GameLogEntry]:
    return sorted(entries, key=lambda entry: entry.game_date, reverse=True)


class StatsProviderClient(BaseFetcher):
    """API-Sports NBA v2 client for per-player game statistics and player search."""

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = API_SPORTS_BASE_URL,
        timeout: float = TIMEOUT_CONFIG.game_logs,
    ):
        super().__init__("api-sports", base_url=base_url, session=session, timeout=timeout)
        self.api_key = api_key

    def _get_headers(self) -> Dict[str, str]:
        headers = super()._get_headers()
        headers[API_SPORTS_KEY_HEADER] = self.api_key
        return headers

    def _unwrap(self, payload: Any) -> List[Dict[str, Any]]:
        """Return the `response` list, raising if the provider reported errors."""
        if not isinstance(payload, dict):
            raise self._error("unexpected response shape")
        errors = payload.get("errors")
        if errors:
            raise self._error(f"provider errors: {errors}")
        response = payload.get("response") or []
        if not isinstance(response, list):
            raise self._error("unexpected response shape")
        return response

    async def fetch_player_statistics(self, player_id: int, season: int) -> List[Dict[str, Any]]:
        """Raw per-game statistic rows for a player and season."""
        payload = await self._request_json(
            "players/statistics", params={"season": str(season), "id": str(player_id)}
        )
        return self._unwrap(payload)

    async def search_players(self, query: str) -> List[Dict[str, Any]]:
        """Players whose name matches `query` (the provider searches last names)."""
        payload = await self._request_json("players", params={"search": query})
        return self._unwrap(payload)


class GameLogStore:
    """
    Fetches and caches a player's most recent games.

    Attributes:
        provider: Stats provider client
        cache: TTL cache shared with nothing else
        ttl: Game-log cache lifetime in seconds
    """

    def __init__(
        self,
        provider: StatsProviderClient,
        cache: CacheStore,
        ttl: float = CACHE_TTL_CONFIG.game_logs,
        player_id_ttl: float = CACHE_TTL_CONFIG.player_ids,
    ):
        self.provider = provider
        self.cache = cache
        self.ttl = ttl
        self.player_id_ttl = player_id_ttl

    @staticmethod
    def cache_key(player_id: int, season: int) -> str:
        return f"player_gamelogs_{player_id}_{season}"

    async def get_recent_games(
        self,
        player_id: int,
        season: Optional[int] = None,
        limit: int = WINDOW_CONFIG.default_log_limit,
    ) -> List[GameLogEntry]:
        """
        Most recent games for a player, newest first, at most `limit` long.

        Args:
            player_id: Stats provider player id
            season: Season start year (default: current season by the October rule)
            limit: Maximum games returned

        Returns:
            List of GameLogEntry (empty when the provider has nothing or failed)
        """
        if season is None:
            season = current_season()
        key = self.cache_key(player_id, season)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Game log cache hit", extra={"player_id": player_id, "season": season})
            return list(cached[:limit])

        try:
            rows = await self.provider.fetch_player_statistics(player_id, season)
        except UpstreamFetchError as e:
            logger.warning(
                f"Game log fetch failed for player {player_id}: {e}",
                extra={"player_id": player_id, "season": season},
            )
            return []

        try:
            entries = sort_newest_first(
                entry for entry in (parse_game_log(row) for row in rows) if entry is not None
            )
        except Exception as e:
            logger.error(
                f"Unreadable game logs for player {player_id}: {e}",
                extra={"player_id": player_id, "season": season},
                exc_info=True,
            )
            return []
        if not entries:
            logger.info(
                "No game logs returned", extra={"player_id": player_id, "season": season}
            )
            return []

        # Full sorted history is cached; callers with different limits share it
        self.cache.set(key, tuple(entries), self.ttl)
        logger.debug(
            "Fetched game logs",
            extra={"player_id": player_id, "season": season, "games": len(entries)},
        )
        return entries[:limit]

    async def search_player(self, name: str) -> Optional[int]:
        """
        Resolve a stats-provider player id by name.

        Matches the normalized full name first. If no full-name match exists
        and the last-name search returned exactly one player, that player is
        used. Resolved ids are cached; misses are not.
        """
        normalized = normalize_player_name(name)
        if not normalized:
            return None
        key = f"player_id_{normalized.replace(' ', '_')}"

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            results = await self.provider.search_players(last_name(name))
        except UpstreamFetchError as e:
            logger.warning(f"Player search failed for {name}: {e}")
            return None

        players = [player for player in results if isinstance(player, dict)]
        player_id = None
        for player in players:
            full_name = f"{player.get('firstname', '')} {player.get('lastname', '')}"
            if normalize_player_name(full_name) == normalized:
                player_id = player.get("id")
                break
        if player_id is None and len(players) == 1:
            player_id = players[0].get("id")

        if player_id is None:
            logger.info(f"No stats-provider id found for {name}")
            return None

        try:
            player_id = int(player_id)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric stats-provider id {player_id!r} for {name}")
            return None
        self.cache.set(key, player_id, self.player_id_ttl)
        return player_id
