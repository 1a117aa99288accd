"""Utility helpers: seasons, names, teams."""

from propscore.utils.name_normalizer import normalize_player_name, normalize_team_name
from propscore.utils.season_helpers import (
    current_season,
    date_to_season,
    season_label,
    season_label_for_date,
)
from propscore.utils.team_utils import team_code

__all__ = [
    "normalize_player_name",
    "normalize_team_name",
    "current_season",
    "date_to_season",
    "season_label",
    "season_label_for_date",
    "team_code",
]
