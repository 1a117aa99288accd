"""
Rolling Window Features
=======================
Short (L3) and long (L10) trailing-window aggregates over a player's most
recent games.

Averages are per-game means. Shooting percentages are computed from summed
makes over summed attempts across the window (0-100 scale), not as a mean of
per-game percentages.
The long window adds population standard deviations of per-game points,
rebounds and assists.
"""

from typing import Dict, Optional, Sequence

import numpy as np

from propscore.config.thresholds import WINDOW_CONFIG
from propscore.core.schemas import GameLogEntry
from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue

# Suffix -> GameLogEntry attribute, for per-game means
MEAN_STATS = (
    ("PTS", "points"),
    ("REB", "rebounds"),
    ("AST", "assists"),
    ("MIN", "minutes"),
    ("FG3M", "fg3m"),
    ("STL", "steals"),
    ("BLK", "blocks"),
    ("TOV", "turnovers"),
    ("FGM", "fgm"),
    ("FGA", "fga"),
)

WINDOW_SUFFIXES = (
    "PTS",
    "REB",
    "AST",
    "MIN",
    "FG_PCT",
    "FG3M",
    "FG3_PCT",
    "STL",
    "BLK",
    "TOV",
    "FGM",
    "FGA",
)

STD_STATS = (("PTS_STD", "points"), ("REB_STD", "rebounds"), ("AST_STD", "assists"))


def shooting_pct(makes: float, attempts: float) -> float:
    """Window shooting percentage on a 0-100 scale; 0 when there were no attempts."""
    if attempts <= 0:
        return 0.0
    return makes / attempts * 100.0


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0); 0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


class WindowStatsExtractor(BaseFeatureExtractor):
    """
    Aggregates the first WINDOW games of the (newest-first) log list.

    Subclasses set PREFIX, WINDOW and INCLUDE_STD.
    """

    PREFIX: str = ""
    WINDOW: int = 0
    INCLUDE_STD: bool = False

    def window(self, game_logs: Sequence[GameLogEntry]) -> Sequence[GameLogEntry]:
        return list(game_logs)[: self.WINDOW]

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        games = self.window(context.game_logs)
        if not games:
            return self.get_defaults()

        prefix = self.PREFIX
        features: Dict[str, FeatureValue] = {}

        for suffix, attr in MEAN_STATS:
            values = np.asarray([getattr(g, attr) for g in games], dtype=float)
            features[f"{prefix}_{suffix}"] = float(values.mean())

        fgm = sum(g.fgm for g in games)
        fga = sum(g.fga for g in games)
        fg3m = sum(g.fg3m for g in games)
        fg3a = sum(g.fg3a for g in games)
        features[f"{prefix}_FG_PCT"] = shooting_pct(fgm, fga)
        features[f"{prefix}_FG3_PCT"] = shooting_pct(fg3m, fg3a)

        if self.INCLUDE_STD:
            for suffix, attr in STD_STATS:
                features[f"{prefix}_{suffix}"] = population_std([getattr(g, attr) for g in games])

        return self.validate_features(features)


class ShortWindowExtractor(WindowStatsExtractor):
    """Last-3-games averages (12 features)."""

    PREFIX = "L3"
    WINDOW = WINDOW_CONFIG.short_window
    FEATURE_NAMES = tuple(f"L3_{suffix}" for suffix in WINDOW_SUFFIXES)


class LongWindowExtractor(WindowStatsExtractor):
    """Last-10-games averages plus volatility (15 features)."""

    PREFIX = "L10"
    WINDOW = WINDOW_CONFIG.long_window
    INCLUDE_STD = True
    FEATURE_NAMES = tuple(f"L10_{suffix}" for suffix in WINDOW_SUFFIXES) + tuple(
        f"L10_{suffix}" for suffix, _ in STD_STATS
    )
