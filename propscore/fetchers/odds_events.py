"""
Odds Events
===========
SportsGameOdds client plus the pure helpers that turn an event payload into
prop candidates.

Event payload (relevant parts):
    {
        "eventID": "...",
        "status": {"startsAt": "2025-11-21T00:30:00.000Z"},
        "teams": {"home": {"teamID": "...", "names": {"long": "Los Angeles Lakers"}},
                  "away": {...}},
        "players": {"LEBRON_JAMES_1_NBA": {"name": "LeBron James", "teamID": "..."}},
        "odds": {"points-LEBRON_JAMES_1_NBA-game-ou-over": {
                    "playerID": "...", "statID": "points", "betTypeID": "ou",
                    "sideID": "over",
                    "byBookmaker": {"draftkings": {"odds": "-110", "overUnder": "28.5",
                                                   "available": true}}}}
    }
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

import aiohttp

from propscore.config.constants import (
    BOOKMAKER_DISPLAY_NAMES,
    SGO_BASE_URL,
    SGO_EVENTS_LIMIT,
    SGO_LEAGUE_ID,
)
from propscore.config.thresholds import TIMEOUT_CONFIG
from propscore.core.schemas import PropCandidate
from propscore.fetchers.base_fetcher import BaseFetcher
from propscore.utils.name_normalizer import normalize_team_name

logger = logging.getLogger(__name__)


def bookmaker_display_name(key: Optional[str]) -> Optional[str]:
    """'draftkings' -> 'DraftKings'; unknown keys are title-cased."""
    if not key:
        return None
    return BOOKMAKER_DISPLAY_NAMES.get(key.lower(), key.replace("_", " ").title())


def team_long_name(event: Dict[str, Any], side: str) -> str:
    return ((event.get("teams") or {}).get(side) or {}).get("names", {}).get("long", "")


def _names_overlap(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def find_event(events: List[Dict[str, Any]], team1: str, team2: str) -> Optional[Dict[str, Any]]:
    """
    First event whose home and away teams both match one of the requested names.

    Names are compared lowercased and alphanumeric-only, by substring in either
    direction, so "Lakers" matches "Los Angeles Lakers" and request order
    does not matter.
    """
    wanted = [normalize_team_name(team1), normalize_team_name(team2)]

    for event in events:
        home = normalize_team_name(team_long_name(event, "home"))
        away = normalize_team_name(team_long_name(event, "away"))
        home_matches = any(_names_overlap(home, team) for team in wanted)
        away_matches = any(_names_overlap(away, team) for team in wanted)
        if home_matches and away_matches:
            return event
    return None


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _player_name(player: Dict[str, Any]) -> str:
    name = player.get("name") or ""
    if not name and player.get("firstName") and player.get("lastName"):
        name = f"{player['firstName']} {player['lastName']}"
    return name.strip()


def extract_candidates(event: Dict[str, Any]) -> List[PropCandidate]:
    """
    Group an event's player over/under odds into prop candidates.

    A bookmaker contributes when it has the over side available with a line
    and the under side available, both priced. The consensus line is the mean
    of contributing bookmakers' lines (1 decimal); best over and best under
    prices are chosen independently.

    Returns:
        Candidates in first-seen order of (player, stat)
    """
    odds = event.get("odds") or {}
    players = event.get("players") or {}
    if not odds or not players:
        logger.info("Event has no odds or players", extra={"event_id": event.get("eventID")})
        return []

    sides: Dict[tuple, Dict[str, Dict[str, Any]]] = defaultdict(dict)
    for odd in odds.values():
        if not odd.get("playerID") or odd.get("betTypeID") != "ou":
            continue
        side = odd.get("sideID")
        if side in ("over", "under"):
            sides[(odd["playerID"], odd.get("statID"))][side] = odd

    home_team_id = ((event.get("teams") or {}).get("home") or {}).get("teamID")
    candidates: List[PropCandidate] = []

    for (player_id, stat_id), pair in sides.items():
        over, under = pair.get("over"), pair.get("under")
        if not over or not under or not stat_id:
            continue
        player = players.get(player_id)
        if not player:
            continue
        name = _player_name(player)
        if not name:
            continue

        lines: List[float] = []
        best_over = best_under = None
        best_over_book = best_under_book = None
        under_books = under.get("byBookmaker") or {}

        for book, over_book in (over.get("byBookmaker") or {}).items():
            under_book = under_books.get(book) or {}
            if not over_book.get("available") or not under_book.get("available"):
                continue
            line = _to_number(over_book.get("overUnder"))
            over_price = _to_number(over_book.get("odds"))
            under_price = _to_number(under_book.get("odds"))
            if line is None or over_price is None or under_price is None:
                continue

            lines.append(line)
            if best_over is None or over_price > best_over:
                best_over, best_over_book = over_price, book
            if best_under is None or under_price > best_under:
                best_under, best_under_book = under_price, book

        if not lines:
            continue

        is_home = bool(home_team_id) and player.get("teamID") == home_team_id
        candidates.append(
            PropCandidate(
                player_id=player_id,
                player_name=name,
                team=team_long_name(event, "home" if is_home else "away"),
                is_home=is_home,
                stat_type=stat_id,
                line=round(sum(lines) / len(lines), 1),
                odds_over=best_over,
                odds_under=best_under,
                bookmaker_over=bookmaker_display_name(best_over_book),
                bookmaker_under=bookmaker_display_name(best_under_book),
                bookmaker_count=len(lines),
            )
        )

    logger.info(
        "Extracted prop candidates",
        extra={"event_id": event.get("eventID"), "candidates": len(candidates)},
    )
    return candidates


class OddsEventsClient(BaseFetcher):
    """SportsGameOdds v2 events client."""

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = SGO_BASE_URL,
        timeout: float = TIMEOUT_CONFIG.events,
    ):
        super().__init__("sportsgameodds", base_url=base_url, session=session, timeout=timeout)
        self.api_key = api_key

    async def fetch_events(self, league_id: str = SGO_LEAGUE_ID) -> List[Dict[str, Any]]:
        """
        Upcoming events with odds for a league.

        Raises:
            UpstreamFetchError: On any transport or provider failure
        """
        payload = await self._request_json(
            "events/",
            params={
                "apiKey": self.api_key,
                "leagueID": league_id,
                "oddsAvailable": "true",
                "limit": str(SGO_EVENTS_LIMIT),
            },
        )
        if not isinstance(payload, dict):
            raise self._error("unexpected response shape")
        events = payload.get("data") or []
        logger.debug(f"[{self.source_name}] {len(events)} events for {league_id}")
        return events
