"""
Feature Engine
==============
Builds the fixed 88-feature vector expected by the hosted prop classifier.

The engine runs the extractors in dependency order (windows, then context,
then derived metrics, then market features), merges their slices and checks
the result against FEATURE_NAMES. Same inputs always give the same output.

Usage:
    from propscore.features.feature_engine import FeatureEngine

    engine = FeatureEngine()
    features = engine.compute_features(
        game_logs=logs,
        prop_type="points",
        home_team="LAL",
        away_team="BOS",
        is_home=True,
        game_date=date(2025, 11, 20),
        line=28.5,
        odds_over=-110,
        odds_under=-110,
        bookmaker="DraftKings",
    )
"""

import logging
from typing import Dict, Sequence, Tuple

from propscore.core.exceptions import FeatureSchemaError
from propscore.core.schemas import GameLogEntry, PlayerStatsSummary
from propscore.features.extractors import (
    AdvancedMetricsExtractor,
    BaseFeatureExtractor,
    CategoricalExtractor,
    FeatureContext,
    GameContextExtractor,
    InteractionExtractor,
    LongWindowExtractor,
    MarketFeatureExtractor,
    ShortWindowExtractor,
)
from propscore.features.extractors.categorical_features import CATEGORICAL_FEATURES
from propscore.utils.season_helpers import DateLike, to_date

logger = logging.getLogger(__name__)

# Extraction order matters: later stages read earlier stages' output
EXTRACTOR_PIPELINE: Tuple[type, ...] = (
    CategoricalExtractor,
    ShortWindowExtractor,
    LongWindowExtractor,
    GameContextExtractor,
    AdvancedMetricsExtractor,
    InteractionExtractor,
    MarketFeatureExtractor,
)

FEATURE_NAMES: Tuple[str, ...] = tuple(
    name for extractor in EXTRACTOR_PIPELINE for name in extractor.FEATURE_NAMES
)
FEATURE_COUNT = 88
CATEGORICAL_FEATURE_NAMES = frozenset(CATEGORICAL_FEATURES)

if len(FEATURE_NAMES) != FEATURE_COUNT or len(set(FEATURE_NAMES)) != FEATURE_COUNT:
    raise RuntimeError(f"Feature schema must define {FEATURE_COUNT} unique names")


def validate_feature_vector(features: Dict[str, object]) -> None:
    """
    Check a feature vector against the model schema.

    Raises:
        FeatureSchemaError: If keys are missing or unexpected, or a value has the wrong type
    """
    keys = set(features)
    expected = set(FEATURE_NAMES)
    if keys != expected:
        raise FeatureSchemaError(missing=expected - keys, unexpected=keys - expected)

    for name, value in features.items():
        if name in CATEGORICAL_FEATURE_NAMES:
            if not isinstance(value, str):
                raise FeatureSchemaError(unexpected=[f"{name}:{type(value).__name__}"])
        elif isinstance(value, str) or value != value:  # NaN
            raise FeatureSchemaError(unexpected=[f"{name}:{value!r}"])


class FeatureEngine:
    """
    Computes feature vectors from game logs, game context and market odds.

    The engine holds no mutable state, so one instance can be shared across
    concurrent requests.
    """

    def __init__(self) -> None:
        self.extractors: Tuple[BaseFeatureExtractor, ...] = tuple(
            extractor() for extractor in EXTRACTOR_PIPELINE
        )

    def compute_features(
        self,
        game_logs: Sequence[GameLogEntry],
        prop_type: str,
        home_team: str,
        away_team: str,
        is_home: bool,
        game_date: DateLike,
        line: float,
        odds_over: float,
        odds_under: float,
        bookmaker: str,
    ) -> Dict[str, object]:
        """
        Build the 88-feature vector for one prop.

        Args:
            game_logs: Player game logs, newest first (may be empty)
            prop_type: Provider stat ID of the prop
            home_team: Home team code
            away_team: Away team code
            is_home: Whether the player's team is at home
            game_date: Date of the upcoming game (date, datetime or ISO string)
            line: Posted line
            odds_over: Over price, American odds
            odds_under: Under price, American odds
            bookmaker: Bookmaker display name

        Returns:
            Dict with exactly FEATURE_NAMES as keys

        Raises:
            FeatureSchemaError: If an extractor produced an inconsistent vector
        """
        context = FeatureContext(
            game_logs=tuple(game_logs),
            prop_type=prop_type or "",
            home_team=home_team or "",
            away_team=away_team or "",
            is_home=bool(is_home),
            game_date=to_date(game_date),
            line=line,
            odds_over=odds_over,
            odds_under=odds_under,
            bookmaker=bookmaker or "",
        )

        features: Dict[str, object] = {}
        for extractor in self.extractors:
            features.update(extractor.extract(context, features))

        validate_feature_vector(features)

        logger.debug(
            "Computed feature vector",
            extra={"prop_type": context.prop_type, "games": len(context.game_logs)},
        )
        return {name: features[name] for name in FEATURE_NAMES}

    @staticmethod
    def summarize(features: Dict[str, object]) -> PlayerStatsSummary:
        """Long-window per-game averages for display."""
        return PlayerStatsSummary(
            avg_points=round(float(features["L10_PTS"]), 1),
            avg_rebounds=round(float(features["L10_REB"]), 1),
            avg_assists=round(float(features["L10_AST"]), 1),
            avg_minutes=round(float(features["L10_MIN"]), 1),
        )


def compute_features(game_logs: Sequence[GameLogEntry], **kwargs) -> Dict[str, object]:
    """Module-level convenience wrapper around FeatureEngine.compute_features."""
    return FeatureEngine().compute_features(game_logs, **kwargs)
