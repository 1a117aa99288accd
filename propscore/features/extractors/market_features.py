"""
Betting Market Features
=======================
Features derived from the posted line and both sides' American odds,
measured against the player's recent production.

Features (20): line, odds_over, odds_under, implied_prob_over,
implied_prob_under, LINE_VALUE, ODDS_EDGE, odds_spread, market_confidence,
L3_{PTS,REB,AST}_vs_LINE, LINE_DIFFICULTY_{PTS,REB,AST}, IMPLIED_PROB_OVER,
LINE_vs_AVG_{PTS,REB}, L3_vs_market, L10_vs_market.

LINE_VALUE uses the L3 average of the prop's own stat. Stat types without a
dedicated average (threes, steals, combos) fall back to points.
"""

from typing import Dict, Optional

from propscore.config.constants import DEFAULT_STAT_TYPE, STAT_TYPE_ALIASES
from propscore.features.extractors.base import BaseFeatureExtractor, FeatureContext, FeatureValue

STAT_SUFFIX = {"points": "PTS", "rebounds": "REB", "assists": "AST"}


def american_to_implied_probability(odds: float) -> float:
    """
    Implied probability (vig included) of American odds.

    Negative odds: |odds| / (|odds| + 100). Positive or even: 100 / (odds + 100).

    Examples:
        american_to_implied_probability(-110) -> 0.5238
        american_to_implied_probability(120)  -> 0.4545
    """
    if odds < 0:
        return abs(odds) / (abs(odds) + 100.0)
    return 100.0 / (odds + 100.0)


def core_stat_type(prop_type: Optional[str]) -> str:
    """Map a provider stat ID to 'points', 'rebounds' or 'assists' (default points)."""
    if not prop_type:
        return DEFAULT_STAT_TYPE
    return STAT_TYPE_ALIASES.get(prop_type.strip().lower(), DEFAULT_STAT_TYPE)


class MarketFeatureExtractor(BaseFeatureExtractor):
    """Extracts line/odds features relative to L3 and L10 averages."""

    FEATURE_NAMES = (
        "line",
        "odds_over",
        "odds_under",
        "implied_prob_over",
        "implied_prob_under",
        "LINE_VALUE",
        "ODDS_EDGE",
        "odds_spread",
        "market_confidence",
        "L3_PTS_vs_LINE",
        "L3_REB_vs_LINE",
        "L3_AST_vs_LINE",
        "LINE_DIFFICULTY_PTS",
        "LINE_DIFFICULTY_REB",
        "LINE_DIFFICULTY_AST",
        "IMPLIED_PROB_OVER",
        "LINE_vs_AVG_PTS",
        "LINE_vs_AVG_REB",
        "L3_vs_market",
        "L10_vs_market",
    )

    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        f = self._numeric(computed)
        line = self._safe_float(context.line)
        odds_over = self._safe_float(context.odds_over, -110.0)
        odds_under = self._safe_float(context.odds_under, -110.0)

        ip_over = american_to_implied_probability(odds_over)
        ip_under = american_to_implied_probability(odds_under)

        stat_suffix = STAT_SUFFIX[core_stat_type(context.prop_type)]
        l3_stat = f[f"L3_{stat_suffix}"]

        features = {
            "line": line,
            "odds_over": odds_over,
            "odds_under": odds_under,
            "implied_prob_over": ip_over,
            "implied_prob_under": ip_under,
            "LINE_VALUE": self._safe_div(l3_stat - line, line),
            "ODDS_EDGE": ip_over - ip_under,
            "odds_spread": odds_over - odds_under,
            "market_confidence": abs(ip_over - 0.5),
            "L3_PTS_vs_LINE": f["L3_PTS"] - line,
            "L3_REB_vs_LINE": f["L3_REB"] - line,
            "L3_AST_vs_LINE": f["L3_AST"] - line,
            "LINE_DIFFICULTY_PTS": self._safe_div(line, f["L10_PTS"], default=1.0),
            "LINE_DIFFICULTY_REB": self._safe_div(line, f["L10_REB"], default=1.0),
            "LINE_DIFFICULTY_AST": self._safe_div(line, f["L10_AST"], default=1.0),
            "IMPLIED_PROB_OVER": ip_over,
            "LINE_vs_AVG_PTS": line - f["L10_PTS"],
            "LINE_vs_AVG_REB": line - f["L10_REB"],
            "L3_vs_market": (f["L3_PTS"] - line) * ip_over,
            "L10_vs_market": (f["L10_PTS"] - line) * ip_over,
        }
        return self.validate_features(features)
