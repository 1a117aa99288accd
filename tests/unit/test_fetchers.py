"""
Unit Tests for Upstream Fetchers
================================
Tests for the shared HTTP base class, the stats provider client and the
cached game log store. No network calls; sessions and providers are mocked.
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest


def mock_session(status=200, json_body=None, text_body="", json_error=None):
    """aiohttp-like session whose request() yields a single canned response."""
    response = MagicMock()
    response.status = status
    response.reason = "Reason"
    response.text = AsyncMock(return_value=text_body)
    if json_error is not None:
        response.json = AsyncMock(side_effect=json_error)
    else:
        response.json = AsyncMock(return_value=json_body)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.request = MagicMock(return_value=context)
    return session


class TestBaseFetcher:
    """Tests for BaseFetcher request handling."""

    @pytest.mark.asyncio
    async def test_decodes_json(self):
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session(json_body={"ok": True})
        fetcher = BaseFetcher("test", base_url="https://api.example.com/", session=session)

        assert await fetcher._request_json("things", params={"a": "1"}) == {"ok": True}

        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.example.com/things")
        assert kwargs["params"] == {"a": "1"}
        assert kwargs["headers"]["Accept"] == "application/json"
        assert kwargs["timeout"].total == 10.0

    @pytest.mark.asyncio
    async def test_absolute_url_and_timeout_override(self):
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session(json_body=[])
        fetcher = BaseFetcher("test", base_url="https://api.example.com", session=session)

        await fetcher._request_json("https://other.example.com/x", method="POST", timeout=60)

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://other.example.com/x")
        assert kwargs["timeout"].total == 60

    @pytest.mark.asyncio
    async def test_error_status_raises_upstream_error(self):
        from propscore.core.exceptions import UpstreamFetchError
        from propscore.fetchers.base_fetcher import BaseFetcher

        fetcher = BaseFetcher("test", session=mock_session(status=503, text_body="unavailable"))

        with pytest.raises(UpstreamFetchError) as exc_info:
            await fetcher._request_json("x")

        assert exc_info.value.status_code == 503
        assert exc_info.value.provider == "test"
        assert "unavailable" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        from propscore.core.exceptions import UpstreamFetchError
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session(json_error=ValueError("Expecting value"))
        fetcher = BaseFetcher("test", session=session)

        with pytest.raises(UpstreamFetchError, match="invalid JSON"):
            await fetcher._request_json("x")

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        from propscore.core.exceptions import UpstreamFetchError
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session()
        session.request.side_effect = asyncio.TimeoutError()
        fetcher = BaseFetcher("test", session=session, timeout=5)

        with pytest.raises(UpstreamFetchError, match="timed out after 5s"):
            await fetcher._request_json("x")

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        from propscore.core.exceptions import UpstreamFetchError
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session()
        session.request.side_effect = aiohttp.ClientConnectionError("connection refused")
        fetcher = BaseFetcher("test", session=session)

        with pytest.raises(UpstreamFetchError, match="connection refused"):
            await fetcher._request_json("x")

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self):
        from propscore.fetchers.base_fetcher import BaseFetcher

        session = mock_session()
        async with BaseFetcher("test", session=session):
            pass

        session.close.assert_not_called()


class TestParseGameLog:
    """Tests for converting provider rows."""

    def test_maps_provider_fields(self, stats_row_factory):
        from propscore.fetchers.game_logs import parse_game_log

        entry = parse_game_log(stats_row_factory("2025-11-18T00:30:00.000Z", tpm=4, tpa=9))

        assert entry.game_date == date(2025, 11, 18)
        assert entry.minutes == 34.5
        assert entry.rebounds == 7
        assert entry.fg3m == 4
        assert entry.fg3a == 9

    def test_missing_date_is_skipped(self, stats_row_factory):
        from propscore.fetchers.game_logs import parse_game_log

        row = stats_row_factory("2025-11-18")
        row["game"] = {"id": 1}
        assert parse_game_log(row) is None

    def test_garbage_date_is_skipped(self, stats_row_factory):
        from propscore.fetchers.game_logs import parse_game_log

        assert parse_game_log(stats_row_factory("not-a-date")) is None

    @pytest.mark.parametrize("row", [None, "2025-11-18", 42, {"game": "2025-11-18"}, {"game": None}])
    def test_malformed_row_is_skipped(self, row):
        from propscore.fetchers.game_logs import parse_game_log

        assert parse_game_log(row) is None


class TestStatsProviderClient:
    """Tests for the API-Sports client."""

    @pytest.mark.asyncio
    async def test_fetch_player_statistics(self, api_sports_rows):
        from propscore.fetchers.game_logs import StatsProviderClient

        session = mock_session(json_body={"errors": [], "response": api_sports_rows})
        client = StatsProviderClient("key-123", session=session)

        rows = await client.fetch_player_statistics(265, 2025)

        assert len(rows) == 3
        args, kwargs = session.request.call_args
        assert args[1].endswith("/players/statistics")
        assert kwargs["params"] == {"season": "2025", "id": "265"}
        assert kwargs["headers"]["x-apisports-key"] == "key-123"

    @pytest.mark.asyncio
    async def test_provider_errors_raise(self):
        from propscore.core.exceptions import UpstreamFetchError
        from propscore.fetchers.game_logs import StatsProviderClient

        session = mock_session(json_body={"errors": {"token": "invalid key"}, "response": []})
        client = StatsProviderClient("bad", session=session)

        with pytest.raises(UpstreamFetchError, match="provider errors"):
            await client.fetch_player_statistics(265, 2025)


class TestGameLogStore:
    """Tests for GameLogStore caching and ordering."""

    def _store(self, provider, fake_clock):
        from propscore.core.cache import MemoryCache
        from propscore.fetchers.game_logs import GameLogStore

        return GameLogStore(provider, MemoryCache(clock=fake_clock))

    @pytest.mark.asyncio
    async def test_sorted_newest_first(self, mock_stats_provider, api_sports_rows, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        logs = await store.get_recent_games(265, season=2025)

        assert [log.game_date.day for log in logs] == [18, 16, 14]
        assert [log.points for log in logs] == [30, 25, 20]

    @pytest.mark.asyncio
    async def test_limit_truncates(self, mock_stats_provider, api_sports_rows, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        logs = await store.get_recent_games(265, season=2025, limit=2)

        assert [log.game_date.day for log in logs] == [18, 16]

    @pytest.mark.asyncio
    async def test_cache_hit_skips_provider(self, mock_stats_provider, api_sports_rows, fake_clock):
        """Test a second read within the TTL is served from cache with its own limit."""
        mock_stats_provider.fetch_player_statistics.return_value = api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        await store.get_recent_games(265, season=2025, limit=1)
        fake_clock.advance(3599)
        logs = await store.get_recent_games(265, season=2025, limit=15)

        assert len(logs) == 3
        assert mock_stats_provider.fetch_player_statistics.await_count == 1

    @pytest.mark.asyncio
    async def test_expired_cache_refetches(self, mock_stats_provider, api_sports_rows, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        await store.get_recent_games(265, season=2025)
        fake_clock.advance(3600)
        await store.get_recent_games(265, season=2025)

        assert mock_stats_provider.fetch_player_statistics.await_count == 2

    @pytest.mark.asyncio
    async def test_empty_result_not_cached(self, mock_stats_provider, fake_clock):
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.get_recent_games(265, season=2025) == []
        assert await store.get_recent_games(265, season=2025) == []
        assert mock_stats_provider.fetch_player_statistics.await_count == 2

    @pytest.mark.asyncio
    async def test_provider_failure_returns_empty(self, mock_stats_provider, fake_clock):
        from propscore.core.exceptions import UpstreamFetchError

        mock_stats_provider.fetch_player_statistics.side_effect = UpstreamFetchError(
            "api-sports", "timed out"
        )
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.get_recent_games(265, season=2025) == []

    @pytest.mark.asyncio
    async def test_seasons_cached_separately(self, mock_stats_provider, api_sports_rows, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        await store.get_recent_games(265, season=2025)
        await store.get_recent_games(265, season=2024)

        seasons = [call.args[1] for call in mock_stats_provider.fetch_player_statistics.await_args_list]
        assert seasons == [2025, 2024]

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self, mock_stats_provider, api_sports_rows, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = [None, {"game": "2025-11-18"}] + api_sports_rows
        store = self._store(mock_stats_provider, fake_clock)

        logs = await store.get_recent_games(265, season=2025)

        assert [log.game_date.day for log in logs] == [18, 16, 14]

    @pytest.mark.asyncio
    async def test_only_malformed_rows_returns_empty(self, mock_stats_provider, fake_clock):
        mock_stats_provider.fetch_player_statistics.return_value = [None, "oops", {"game": "2025-11-18"}]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.get_recent_games(265, season=2025) == []

    @pytest.mark.asyncio
    async def test_unreadable_rows_return_empty(self, mock_stats_provider, fake_clock):
        """Test an unexpected error while reading rows is reported as no games."""
        mock_stats_provider.fetch_player_statistics.return_value = 12
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.get_recent_games(265, season=2025) == []


class TestSearchPlayer:
    """Tests for player id resolution."""

    def _store(self, provider, fake_clock):
        from propscore.core.cache import MemoryCache
        from propscore.fetchers.game_logs import GameLogStore

        return GameLogStore(provider, MemoryCache(clock=fake_clock))

    @pytest.mark.asyncio
    async def test_full_name_match(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [
            {"id": 1, "firstname": "Jaylen", "lastname": "Brown"},
            {"id": 2, "firstname": "Bruce", "lastname": "Brown"},
        ]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("Bruce Brown") == 2
        mock_stats_provider.search_players.assert_awaited_once_with("brown")

    @pytest.mark.asyncio
    async def test_accented_name_match(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [
            {"id": 963, "firstname": "Luka", "lastname": "Doncic"},
            {"id": 5, "firstname": "Other", "lastname": "Doncic"},
        ]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("Luka Dončić") == 963

    @pytest.mark.asyncio
    async def test_single_result_fallback(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [
            {"id": 77, "firstname": "Nicolas", "lastname": "Claxton"}
        ]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("Nic Claxton") == 77

    @pytest.mark.asyncio
    async def test_resolved_id_is_cached(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [
            {"id": 77, "firstname": "Nic", "lastname": "Claxton"}
        ]
        store = self._store(mock_stats_provider, fake_clock)

        await store.search_player("Nic Claxton")
        await store.search_player("Nic Claxton")

        assert mock_stats_provider.search_players.await_count == 1

    @pytest.mark.asyncio
    async def test_ambiguous_miss_returns_none(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [
            {"id": 1, "firstname": "Jaylen", "lastname": "Brown"},
            {"id": 2, "firstname": "Bruce", "lastname": "Brown"},
        ]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("Moses Brown") is None

    @pytest.mark.asyncio
    async def test_malformed_results_are_ignored(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [None, "LeBron", {"id": 265, "firstname": "LeBron", "lastname": "James"}]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("LeBron James") == 265

    @pytest.mark.asyncio
    async def test_non_numeric_id_returns_none(self, mock_stats_provider, fake_clock):
        mock_stats_provider.search_players.return_value = [{"id": "abc", "firstname": "LeBron", "lastname": "James"}]
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("LeBron James") is None

    @pytest.mark.asyncio
    async def test_provider_failure_returns_none(self, mock_stats_provider, fake_clock):
        from propscore.core.exceptions import UpstreamFetchError

        mock_stats_provider.search_players.side_effect = UpstreamFetchError("api-sports", "down")
        store = self._store(mock_stats_provider, fake_clock)

        assert await store.search_player("LeBron James") is None
