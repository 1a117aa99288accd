"""
Team Code Utilities
===================
Resolves full team names (as the odds provider sends them) to 3-letter codes
for the categorical home_team / away_team features.

Usage:
    from propscore.utils.team_utils import team_code

    team_code("Los Angeles Lakers")   # 'LAL'
    team_code("Seattle Supersonics")  # 'SUP' (fallback: last word, first 3 letters)
"""

from typing import Mapping, Optional

from propscore.config.constants import TEAM_CODE_MAP


def team_code(team_name: Optional[str], overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    Map a team name to its code.

    Lookup order: roster-provided overrides (keyed by full name), the static
    code map, then the first three letters of the last word, uppercased.

    Args:
        team_name: Full team name
        overrides: Optional name -> code mapping (e.g. from the star roster)

    Returns:
        Team code, or '' for an empty name
    """
    if not team_name:
        return ""
    if overrides and team_name in overrides:
        return overrides[team_name]

    normalized = " ".join(team_name.lower().split())
    if normalized in TEAM_CODE_MAP:
        return TEAM_CODE_MAP[normalized]

    words = normalized.split(" ")
    return words[-1][:3].upper()
