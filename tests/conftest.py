"""
Pytest Configuration and Fixtures
=================================
Provides sample game logs, odds events, model responses, a controllable
clock for cache tests, and mock upstream clients.

Note: Project paths are configured via pyproject.toml [tool.pytest.ini_options] pythonpath.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from propscore.core.schemas import GameLogEntry

# =============================================================================
# CLOCK
# =============================================================================


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


# =============================================================================
# GAME LOG FIXTURES
# =============================================================================


def make_game_log(game_date: date, **stats) -> GameLogEntry:
    """Build a GameLogEntry with sensible defaults for unspecified stats."""
    values = {
        "minutes": 34.0,
        "points": 25.0,
        "rebounds": 7.0,
        "assists": 8.0,
        "steals": 1.0,
        "blocks": 1.0,
        "turnovers": 3.0,
        "fgm": 10.0,
        "fga": 20.0,
        "fg3m": 2.0,
        "fg3a": 6.0,
        "ftm": 3.0,
        "fta": 4.0,
    }
    values.update(stats)
    return GameLogEntry(game_date=game_date, **values)


def make_game_logs(
    count: int,
    last_game: date = date(2025, 11, 18),
    spacing_days: int = 2,
    **stats,
) -> List[GameLogEntry]:
    """`count` identical games, newest first, `spacing_days` apart."""
    return [
        make_game_log(last_game - timedelta(days=i * spacing_days), **stats) for i in range(count)
    ]


@pytest.fixture
def sample_game_logs():
    """15 games, newest first, every game 25 pts / 7 reb / 8 ast."""
    return make_game_logs(15)


@pytest.fixture
def game_log_factory():
    return make_game_logs


def api_sports_row(game_date: str, **stats) -> Dict[str, Any]:
    """A raw API-Sports players/statistics row."""
    row = {
        "player": {"id": 265, "firstname": "LeBron", "lastname": "James"},
        "game": {"id": 1, "date": {"start": game_date}},
        "points": 25,
        "min": "34:30",
        "fgm": 10,
        "fga": 20,
        "ftm": 3,
        "fta": 4,
        "tpm": 2,
        "tpa": 6,
        "totReb": 7,
        "assists": 8,
        "steals": 1,
        "blocks": 1,
        "turnovers": 3,
    }
    row.update(stats)
    return row


@pytest.fixture
def api_sports_rows():
    """Three raw rows deliberately out of date order."""
    return [
        api_sports_row("2025-11-14T00:30:00.000Z", points=20),
        api_sports_row("2025-11-18T00:30:00.000Z", points=30),
        api_sports_row("2025-11-16T00:30:00.000Z", points=25),
    ]


# =============================================================================
# ODDS EVENT FIXTURES
# =============================================================================


def ou_side(
    player_id: str,
    stat_id: str,
    side: str,
    books: Dict[str, Dict[str, Any]],
) -> Dict[str, Any]:
    return {
        "oddID": f"{stat_id}-{player_id}-game-ou-{side}",
        "playerID": player_id,
        "statID": stat_id,
        "betTypeID": "ou",
        "sideID": side,
        "byBookmaker": books,
    }


def add_prop(
    event: Dict[str, Any],
    player_id: str,
    stat_id: str,
    line: float,
    over_odds: Dict[str, str],
    under_odds: Dict[str, str],
) -> None:
    """Add an over/under pair priced at the given bookmakers."""
    over_books = {
        book: {"odds": odds, "overUnder": str(line), "available": True}
        for book, odds in over_odds.items()
    }
    under_books = {
        book: {"odds": odds, "overUnder": str(line), "available": True}
        for book, odds in under_odds.items()
    }
    event["odds"][f"{stat_id}-{player_id}-game-ou-over"] = ou_side(player_id, stat_id, "over", over_books)
    event["odds"][f"{stat_id}-{player_id}-game-ou-under"] = ou_side(player_id, stat_id, "under", under_books)


def make_event(event_id: str = "evt_lal_bos") -> Dict[str, Any]:
    """
    Lakers (home) vs Celtics (away) with three players:
    LeBron James and Jaylen Brown (tracked) and Role Player (not tracked).
    """
    event = {
        "eventID": event_id,
        "status": {"startsAt": "2025-11-20T03:30:00.000Z"},
        "teams": {
            "home": {"teamID": "LOS_ANGELES_LAKERS_NBA", "names": {"long": "Los Angeles Lakers"}},
            "away": {"teamID": "BOSTON_CELTICS_NBA", "names": {"long": "Boston Celtics"}},
        },
        "players": {
            "LEBRON_JAMES_1_NBA": {"name": "LeBron James", "teamID": "LOS_ANGELES_LAKERS_NBA"},
            "JAYLEN_BROWN_1_NBA": {
                "firstName": "Jaylen",
                "lastName": "Brown",
                "teamID": "BOSTON_CELTICS_NBA",
            },
            "ROLE_PLAYER_1_NBA": {"name": "Role Player", "teamID": "BOSTON_CELTICS_NBA"},
        },
        "odds": {},
    }
    add_prop(event, "LEBRON_JAMES_1_NBA", "points", 28.5, {"draftkings": "-110"}, {"draftkings": "-110"})
    add_prop(event, "JAYLEN_BROWN_1_NBA", "points", 24.5, {"fanduel": "-115"}, {"fanduel": "-105"})
    add_prop(event, "ROLE_PLAYER_1_NBA", "points", 8.5, {"draftkings": "+100"}, {"draftkings": "-120"})
    return event


@pytest.fixture
def sample_event():
    return make_event()


@pytest.fixture
def other_event():
    return {
        "eventID": "evt_gsw_den",
        "status": {"startsAt": "2025-11-20T03:00:00.000Z"},
        "teams": {
            "home": {"teamID": "GSW", "names": {"long": "Golden State Warriors"}},
            "away": {"teamID": "DEN", "names": {"long": "Denver Nuggets"}},
        },
        "players": {},
        "odds": {},
    }


# =============================================================================
# MODEL RESPONSE FIXTURES
# =============================================================================


def model_record(
    probability_over: float = 0.45,
    confidence: float = 0.12,
    prediction: Optional[str] = None,
    **extra,
) -> Dict[str, Any]:
    record = {
        "prediction": prediction or ("over" if probability_over >= 0.5 else "under"),
        "probability_over": probability_over,
        "probability_under": round(1 - probability_over, 6),
        "confidence": confidence,
    }
    record.update(extra)
    return record


@pytest.fixture
def model_response():
    return {
        "predictions": [model_record()],
        "deployedModelId": "1234",
        "modelDisplayName": "nba-props-xgb",
        "modelVersionId": "3",
    }


# =============================================================================
# MOCK CLIENTS
# =============================================================================


@pytest.fixture
def mock_token_provider():
    provider = MagicMock()
    provider.get_token = AsyncMock(return_value="test-token")
    provider.invalidate = MagicMock()
    return provider


@pytest.fixture
def mock_stats_provider():
    provider = MagicMock()
    provider.fetch_player_statistics = AsyncMock(return_value=[])
    provider.search_players = AsyncMock(return_value=[])
    return provider


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def prop_adder():
    return add_prop


@pytest.fixture
def record_factory():
    return model_record


@pytest.fixture
def stats_row_factory():
    return api_sports_row
