"""
Categorical and Temporal Features
=================================
Identifier fields (stat type, team codes, bookmaker, season label) and
calendar fields of the target game date.

Features (8):
- prop_type, home_team, away_team, bookmaker, SEASON (strings)
- year, month, day_of_week (0 = Sunday ... 6 = Saturday)
"""

from typing import Dict, Optional

from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue
from propscore.utils.season_helpers import season_label_for_date

CATEGORICAL_FEATURES = ("prop_type", "home_team", "away_team", "bookmaker", "SEASON")
TEMPORAL_FEATURES = ("year", "month", "day_of_week")


class CategoricalExtractor(BaseFeatureExtractor):
    """Extracts identifier and calendar features."""

    FEATURE_NAMES = CATEGORICAL_FEATURES + TEMPORAL_FEATURES

    @classmethod
    def get_defaults(cls) -> Dict[str, FeatureValue]:
        defaults: Dict[str, FeatureValue] = {name: "" for name in CATEGORICAL_FEATURES}
        defaults.update({name: 0.0 for name in TEMPORAL_FEATURES})
        return defaults

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        game_date = context.game_date

        features: Dict[str, FeatureValue] = {
            "prop_type": context.prop_type,
            "home_team": context.home_team,
            "away_team": context.away_team,
            "bookmaker": context.bookmaker,
            # Season of the game itself, so output does not depend on the wall clock
            "SEASON": season_label_for_date(game_date),
            "year": float(game_date.year),
            "month": float(game_date.month),
            # date.weekday() is Monday=0; shift to Sunday=0
            "day_of_week": float((game_date.weekday() + 1) % 7),
        }
        return self.validate_features(features)
