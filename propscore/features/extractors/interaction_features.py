"""
Interaction, Composite and Ratio Features
=========================================
Cross-features that capture combined effects a linear model would miss.

Features (16):
- Interactions (6): L3 stats crossed with home, back-to-back, rest, and
  usage x efficiency
- Composites (8): load, shooting volume, rebound intensity, playmaking,
  three-point threat, defensive impact, points volatility, minutes stability
- Ratios (2): L3 vs L10 points and rebounds (1.0 when L10 is empty)
"""

from typing import Dict, Optional

from propscore.config.thresholds import CONTEXT_DEFAULTS, WINDOW_CONFIG
from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue

INTERACTION_FEATURES = (
    "L3_PTS_x_HOME",
    "L3_REB_x_HOME",
    "L3_AST_x_HOME",
    "L3_MIN_x_B2B",
    "L3_PTS_x_REST",
    "USAGE_x_EFFICIENCY",
)

COMPOSITE_FEATURES = (
    "LOAD_INTENSITY",
    "SHOOTING_VOLUME",
    "REBOUND_INTENSITY",
    "PLAYMAKING_EFFICIENCY",
    "THREE_POINT_THREAT",
    "DEFENSIVE_IMPACT",
    "PTS_VOLATILITY",
    "MINUTES_STABILITY",
)

RATIO_FEATURES = ("L3_vs_L10_PTS_RATIO", "L3_vs_L10_REB_RATIO")


class InteractionExtractor(BaseFeatureExtractor):
    """Extracts interaction, composite and ratio features."""

    FEATURE_NAMES = INTERACTION_FEATURES + COMPOSITE_FEATURES + RATIO_FEATURES

    @classmethod
    def get_defaults(cls) -> Dict[str, FeatureValue]:
        defaults = {name: 0.0 for name in cls.FEATURE_NAMES}
        defaults["DEFENSIVE_IMPACT"] = CONTEXT_DEFAULTS.defensive_impact_base
        defaults["MINUTES_STABILITY"] = 1.0
        defaults["L3_vs_L10_PTS_RATIO"] = 1.0
        defaults["L3_vs_L10_REB_RATIO"] = 1.0
        return defaults

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        f = self._numeric(computed)

        features = {
            # Interactions
            "L3_PTS_x_HOME": f["L3_PTS"] * f["HOME_AWAY"],
            "L3_REB_x_HOME": f["L3_REB"] * f["HOME_AWAY"],
            "L3_AST_x_HOME": f["L3_AST"] * f["HOME_AWAY"],
            "L3_MIN_x_B2B": f["L3_MIN"] * f["BACK_TO_BACK"],
            "L3_PTS_x_REST": f["L3_PTS"] * f["DAYS_REST"],
            "USAGE_x_EFFICIENCY": f["USAGE_RATE"] * f["SCORING_EFFICIENCY"],
            # Composites
            "LOAD_INTENSITY": f["GAMES_IN_LAST_7"] * (f["L10_MIN"] / WINDOW_CONFIG.recent_days),
            "SHOOTING_VOLUME": f["L3_FGA"],
            "REBOUND_INTENSITY": f["L3_REB"] * f["REBOUND_RATE"],
            "PLAYMAKING_EFFICIENCY": f["L3_AST"] * f["ASSIST_TO_RATIO"],
            "THREE_POINT_THREAT": f["L3_FG3M"] * (f["L3_FG3_PCT"] / 100.0),
            "DEFENSIVE_IMPACT": f["L3_STL"] + f["L3_BLK"] + CONTEXT_DEFAULTS.defensive_impact_base,
            "PTS_VOLATILITY": self._safe_div(f["L10_PTS_STD"], f["L10_PTS"]),
            "MINUTES_STABILITY": self._safe_div(f["L3_MIN"], f["L10_MIN"], default=1.0),
            # Ratios
            "L3_vs_L10_PTS_RATIO": self._safe_div(f["L3_PTS"], f["L10_PTS"], default=1.0),
            "L3_vs_L10_REB_RATIO": self._safe_div(f["L3_REB"], f["L10_REB"], default=1.0),
        }
        return self.validate_features(features)
