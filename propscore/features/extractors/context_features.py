"""
Game Context Features
=====================
Schedule and role context for the target game.

Features (5):
- HOME_AWAY: 1 when the player's team is at home
- DAYS_REST: Days since the most recent logged game (ceiling of the day gap)
- BACK_TO_BACK: 1 when DAYS_REST == 1
- GAMES_IN_LAST_7: Logged games within 7 days of the target date
- MINUTES_TREND: L3_MIN - L10_MIN (positive means a growing role)

Requires the window features in `computed`.
"""

import math
from datetime import date, datetime
from typing import Dict, Optional, Union

from propscore.config.thresholds import CONTEXT_DEFAULTS, WINDOW_CONFIG
from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue


def days_between(start: Union[date, datetime], end: Union[date, datetime]) -> int:
    """Absolute day gap between two dates, rounded up."""
    if not isinstance(start, datetime):
        start = datetime(start.year, start.month, start.day)
    if not isinstance(end, datetime):
        end = datetime(end.year, end.month, end.day)
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / 86400)


class GameContextExtractor(BaseFeatureExtractor):
    """Extracts rest, schedule density and minutes trend."""

    FEATURE_NAMES = (
        "HOME_AWAY",
        "DAYS_REST",
        "BACK_TO_BACK",
        "GAMES_IN_LAST_7",
        "MINUTES_TREND",
    )

    @classmethod
    def get_defaults(cls) -> Dict[str, FeatureValue]:
        return {
            "HOME_AWAY": 0.0,
            "DAYS_REST": CONTEXT_DEFAULTS.days_rest,
            "BACK_TO_BACK": CONTEXT_DEFAULTS.back_to_back,
            "GAMES_IN_LAST_7": CONTEXT_DEFAULTS.games_in_last_7,
            "MINUTES_TREND": CONTEXT_DEFAULTS.minutes_trend,
        }

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        computed = computed or {}
        home_away = 1.0 if context.is_home else 0.0

        if not context.game_logs:
            features = self.get_defaults()
            features["HOME_AWAY"] = home_away
            return features

        last_game = context.game_logs[0]
        days_rest = days_between(last_game.game_date, context.game_date)

        games_in_window = sum(
            1
            for log in context.game_logs
            if days_between(log.game_date, context.game_date) <= WINDOW_CONFIG.recent_days
        )

        minutes_trend = self._safe_float(computed.get("L3_MIN")) - self._safe_float(
            computed.get("L10_MIN")
        )

        features = {
            "HOME_AWAY": home_away,
            "DAYS_REST": float(days_rest),
            "BACK_TO_BACK": 1.0 if days_rest == 1 else 0.0,
            "GAMES_IN_LAST_7": float(games_in_window),
            "MINUTES_TREND": minutes_trend,
        }
        return self.validate_features(features)
