"""
Shared Constants for PropScore
==============================
Centralized constants for provider endpoints, stat types, bookmakers and teams.

This module contains:
- Provider base URLs (odds events, player stats, hosted model)
- STAT_TYPE_ALIASES: Maps provider stat IDs to the core stat used for market features
- BOOKMAKER_DISPLAY_NAMES: Normalizes bookmaker keys to display names
- TEAM_CODE_MAP: Full team name to 3-letter code

Usage:
    from propscore.config.constants import STAT_TYPE_ALIASES, SUPPORTED_SPORT

Example:
    >>> from propscore.config.constants import BOOKMAKER_DISPLAY_NAMES
    >>> BOOKMAKER_DISPLAY_NAMES["draftkings"]
    'DraftKings'
"""

from typing import Dict

# =============================================================================
# PROVIDERS
# =============================================================================

SGO_BASE_URL = "https://api.sportsgameodds.com/v2"
SGO_LEAGUE_ID = "NBA"
SGO_EVENTS_LIMIT = 50

API_SPORTS_BASE_URL = "https://v2.nba.api-sports.io"
API_SPORTS_KEY_HEADER = "x-apisports-key"

INFERENCE_URL_TEMPLATE = (
    "https://{location}-aiplatform.googleapis.com/v1/projects/{project}"
    "/locations/{location}/endpoints/{endpoint_id}:predict"
)
GOOGLE_AUTH_SCOPES = ("https://www.googleapis.com/auth/cloud-platform",)

# =============================================================================
# REQUEST SURFACE
# =============================================================================

SUPPORTED_SPORT = "nba"
SPORT_LABEL = "NBA"

# =============================================================================
# STAT TYPE MAPPINGS
# =============================================================================

# Provider stat IDs / shorthand -> core stat (anything unmapped falls back to points)
STAT_TYPE_ALIASES: Dict[str, str] = {
    "points": "points",
    "pts": "points",
    "player_points": "points",
    "rebounds": "rebounds",
    "reb": "rebounds",
    "rebs": "rebounds",
    "player_rebounds": "rebounds",
    "assists": "assists",
    "ast": "assists",
    "player_assists": "assists",
}

DEFAULT_STAT_TYPE = "points"

# =============================================================================
# SPORTSBOOK MAPPINGS
# =============================================================================

BOOKMAKER_DISPLAY_NAMES: Dict[str, str] = {
    "draftkings": "DraftKings",
    "fanduel": "FanDuel",
    "betmgm": "BetMGM",
    "caesars": "Caesars",
    "bovada": "Bovada",
    "pointsbet": "PointsBet",
    "bet365": "Bet365",
    "betrivers": "BetRivers",
    "unibet": "Unibet",
    "wynnbet": "WynnBet",
    "hardrockbet": "Hard Rock",
    "espnbet": "ESPN BET",
    "fanatics": "Fanatics",
}

DEFAULT_BOOKMAKER = "DraftKings"

# =============================================================================
# TEAM MAPPINGS
# =============================================================================

TEAM_CODE_MAP: Dict[str, str] = {
    "atlanta hawks": "ATL",
    "boston celtics": "BOS",
    "brooklyn nets": "BKN",
    "charlotte hornets": "CHA",
    "chicago bulls": "CHI",
    "cleveland cavaliers": "CLE",
    "dallas mavericks": "DAL",
    "denver nuggets": "DEN",
    "detroit pistons": "DET",
    "golden state warriors": "GSW",
    "houston rockets": "HOU",
    "indiana pacers": "IND",
    "los angeles clippers": "LAC",
    "la clippers": "LAC",
    "los angeles lakers": "LAL",
    "memphis grizzlies": "MEM",
    "miami heat": "MIA",
    "milwaukee bucks": "MIL",
    "minnesota timberwolves": "MIN",
    "new orleans pelicans": "NOP",
    "new york knicks": "NYK",
    "oklahoma city thunder": "OKC",
    "orlando magic": "ORL",
    "philadelphia 76ers": "PHI",
    "phoenix suns": "PHX",
    "portland trail blazers": "POR",
    "sacramento kings": "SAC",
    "san antonio spurs": "SAS",
    "toronto raptors": "TOR",
    "utah jazz": "UTA",
    "washington wizards": "WAS",
}
