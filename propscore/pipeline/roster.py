"""
Star Player Roster
==================
The curated list of tracked players per team. Only props for these players
are scored.

File format (propscore/data/star_players.json):
    {
        "teams": {
            "Los Angeles Lakers": {
                "code": "LAL",
                "players": [{"name": "LeBron James", "api_sports_id": 265}, ...]
            }
        }
    }

`api_sports_id` is optional; players without one are resolved by name
through the stats provider.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from propscore.core.exceptions import InvalidConfigError
from propscore.core.schemas import PropCandidate
from propscore.utils.name_normalizer import normalize_player_name, normalize_team_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterPlayer:
    name: str
    team: str
    api_sports_id: Optional[int] = None

    @property
    def key(self) -> str:
        return normalize_player_name(self.name)


class StarRoster:
    """
    Tracked players keyed by normalized team name, then normalized player name.

    Usage:
        roster = StarRoster.load(settings.roster_path)
        player = roster.match(candidate)
    """

    def __init__(self, teams: Dict[str, Tuple[RosterPlayer, ...]], team_codes: Optional[Dict[str, str]] = None):
        self._teams: Dict[str, Dict[str, RosterPlayer]] = {
            normalize_team_name(team): {player.key: player for player in players}
            for team, players in teams.items()
        }
        self.team_codes: Dict[str, str] = dict(team_codes or {})

    @classmethod
    def from_dict(cls, data: dict) -> "StarRoster":
        teams: Dict[str, Tuple[RosterPlayer, ...]] = {}
        codes: Dict[str, str] = {}
        for team_name, team_data in (data.get("teams") or {}).items():
            players = []
            for entry in team_data.get("players") or []:
                if not entry.get("name"):
                    continue
                api_sports_id = entry.get("api_sports_id")
                players.append(
                    RosterPlayer(
                        name=entry["name"],
                        team=team_name,
                        api_sports_id=int(api_sports_id) if api_sports_id is not None else None,
                    )
                )
            teams[team_name] = tuple(players)
            if team_data.get("code"):
                codes[team_name] = team_data["code"]
        return cls(teams, team_codes=codes)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "StarRoster":
        """
        Load the roster file.

        Raises:
            InvalidConfigError: If the file is missing or not valid JSON
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidConfigError("ROSTER_PATH", str(path), str(e)) from e

        roster = cls.from_dict(data)
        logger.info(f"Loaded star roster: {len(roster)} players across {len(roster._teams)} teams")
        return roster

    def players_for_team(self, team_name: str) -> List[RosterPlayer]:
        return list(self._teams.get(normalize_team_name(team_name), {}).values())

    def match(self, candidate: PropCandidate) -> Optional[RosterPlayer]:
        """Roster entry for the candidate's own team whose normalized name equals the candidate's."""
        team_players = self._teams.get(normalize_team_name(candidate.team))
        if not team_players:
            return None
        return team_players.get(normalize_player_name(candidate.player_name))

    def __len__(self) -> int:
        return sum(len(players) for players in self._teams.values())
