"""
Season helper utilities for NBA date/season conversions.

Seasons here use the START year convention of the stats provider:
- 2025-26 season = 2025
- 2024-25 season = 2024

Season typically runs October to June. October is the cutover month.
"""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[str, date, datetime]

SEASON_START_MONTH = 10


def to_date(value: DateLike) -> date:
    """
    Coerce a string (YYYY-MM-DD or ISO datetime), date or datetime to a date.

    Raises:
        ValueError: If a string cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def date_to_season(game_date: DateLike) -> int:
    """
    Convert a game date to its season identifier (START year convention).

    Examples:
        date_to_season('2024-11-15') -> 2024  (Nov 2024 = 2024-25 season)
        date_to_season('2025-03-10') -> 2024  (Mar 2025 = 2024-25 season)
        date_to_season('2025-10-22') -> 2025  (Oct 2025 = 2025-26 season)
    """
    game_date = to_date(game_date)
    if game_date.month >= SEASON_START_MONTH:
        return game_date.year
    return game_date.year - 1


def current_season(today: Optional[date] = None) -> int:
    """Season in progress (or about to start) on `today` (default: local date)."""
    return date_to_season(today or date.today())


def season_label(season: int) -> str:
    """
    Format a season as 'YYYY-YY'.

    Examples:
        season_label(2025) -> '2025-26'
        season_label(2099) -> '2099-00'
    """
    return f"{season}-{(season + 1) % 100:02d}"


def season_label_for_date(game_date: DateLike) -> str:
    """Season label for a game date ('2025-11-20' -> '2025-26')."""
    return season_label(date_to_season(game_date))


def previous_season(season: int) -> int:
    return season - 1
