"""
Player and Team Name Normalization
==================================
One source of truth for the name keys used to match odds-provider players
against the star roster and to match requested team names against events.

Usage:
    from propscore.utils.name_normalizer import normalize_player_name, normalize_team_name

    normalize_player_name("Nikola Jokić")          # 'nikola jokic'
    normalize_player_name("LEBRON_JAMES_1_NBA")    # 'lebron james'
    normalize_team_name("Los Angeles Lakers")      # 'losangeleslakers'
"""

import re
import unicodedata
from typing import Optional

# Odds provider player keys look like FIRST_LAST_1_NBA
_PROVIDER_SUFFIX = re.compile(r"_\d+_nba$", re.IGNORECASE)
_NON_LETTERS = re.compile(r"[^a-z\s]")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")


def strip_accents(name: str) -> str:
    """Remove diacritics (Jokić -> Jokic, Dončić -> Doncic)."""
    nfd = unicodedata.normalize("NFD", name)
    return "".join(char for char in nfd if unicodedata.category(char) != "Mn")


def normalize_player_name(name: Optional[str]) -> str:
    """
    Normalize a player name for exact-match comparisons.

    Transformations:
    1. Remove accents
    2. Lowercase
    3. Drop the provider key suffix (_1_NBA)
    4. Underscores to spaces
    5. Keep letters and spaces only (periods, apostrophes and hyphens drop)
    6. Collapse whitespace

    Examples:
        >>> normalize_player_name("Shai Gilgeous-Alexander")
        'shai gilgeousalexander'
        >>> normalize_player_name("  P.J.  Washington ")
        'pj washington'
    """
    if not name:
        return ""
    text = strip_accents(name).lower().strip()
    text = _PROVIDER_SUFFIX.sub("", text)
    text = text.replace("_", " ")
    text = _NON_LETTERS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_team_name(name: Optional[str]) -> str:
    """Lowercase and keep [a-z0-9] only ('Philadelphia 76ers' -> 'philadelphia76ers')."""
    if not name:
        return ""
    return _NON_ALNUM.sub("", strip_accents(name).lower())


def last_name(name: str) -> str:
    """Last token of a normalized name, used for provider search queries."""
    parts = normalize_player_name(name).split(" ")
    return parts[-1] if parts else ""
