"""
Advanced Performance Metrics
============================
Efficiency, per-minute rates, short-vs-long trends, consistency and
acceleration, derived from the window and context features.

Features (12):
- SCORING_EFFICIENCY, ASSIST_TO_RATIO, REBOUND_RATE, USAGE_RATE
- TREND_PTS, TREND_REB, TREND_AST
- CONSISTENCY_PTS, CONSISTENCY_REB, CONSISTENCY_AST (std / mean, lower = steadier)
- ACCELERATION_PTS, EFFICIENCY_STABLE
"""

from typing import Dict, Optional

from propscore.config.thresholds import CONTEXT_DEFAULTS
from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue


class AdvancedMetricsExtractor(BaseFeatureExtractor):
    """Extracts ratios and trends from L3/L10 aggregates."""

    FEATURE_NAMES = (
        "SCORING_EFFICIENCY",
        "ASSIST_TO_RATIO",
        "REBOUND_RATE",
        "USAGE_RATE",
        "TREND_PTS",
        "TREND_REB",
        "TREND_AST",
        "CONSISTENCY_PTS",
        "CONSISTENCY_REB",
        "CONSISTENCY_AST",
        "ACCELERATION_PTS",
        "EFFICIENCY_STABLE",
    )

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        f = self._numeric(computed)

        l3_ast = f["L3_AST"]
        l3_min = f["L3_MIN"]
        trend_pts = f["L3_PTS"] - f["L10_PTS"]
        days_rest = f["DAYS_REST"] if "DAYS_REST" in f else CONTEXT_DEFAULTS.days_rest

        features = {
            "SCORING_EFFICIENCY": self._safe_div(f["L3_PTS"], f["L3_FGA"]),
            # No turnovers: ratio is just the assists
            "ASSIST_TO_RATIO": self._safe_div(l3_ast, f["L3_TOV"], default=l3_ast),
            "REBOUND_RATE": self._safe_div(f["L3_REB"], l3_min),
            "USAGE_RATE": self._safe_div(f["L3_FGA"], l3_min),
            "TREND_PTS": trend_pts,
            "TREND_REB": f["L3_REB"] - f["L10_REB"],
            "TREND_AST": l3_ast - f["L10_AST"],
            "CONSISTENCY_PTS": self._safe_div(f["L10_PTS_STD"], f["L10_PTS"]),
            "CONSISTENCY_REB": self._safe_div(f["L10_REB_STD"], f["L10_REB"]),
            "CONSISTENCY_AST": self._safe_div(f["L10_AST_STD"], f["L10_AST"]),
            "ACCELERATION_PTS": self._safe_div(trend_pts, days_rest, default=trend_pts),
            "EFFICIENCY_STABLE": (
                1.0
                if abs(f["L3_FG_PCT"] - f["L10_FG_PCT"]) < CONTEXT_DEFAULTS.efficiency_stable_margin
                else 0.0
            ),
        }
        return self.validate_features(features)
