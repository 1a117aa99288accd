"""
PropScore Fetchers
==================
Async clients for upstream data providers:
- OddsEventsClient: upcoming events and player prop odds (SportsGameOdds)
- StatsProviderClient / GameLogStore: player game logs (API-Sports), cached
"""

from propscore.fetchers.base_fetcher import BaseFetcher
from propscore.fetchers.game_logs import GameLogStore, StatsProviderClient, parse_game_log
from propscore.fetchers.odds_events import OddsEventsClient, extract_candidates, find_event

__all__ = [
    "BaseFetcher",
    "GameLogStore",
    "StatsProviderClient",
    "parse_game_log",
    "OddsEventsClient",
    "extract_candidates",
    "find_event",
]
