"""
Base Feature Extractor
======================
Abstract base class for all feature extractors.

Extractors are pure: they read a FeatureContext (game logs, game context and
market odds) plus the features computed by earlier stages, and return their
own slice of the feature vector. No I/O happens here.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, DefaultDict, Dict, Optional, Sequence, Union

from propscore.core.schemas import GameLogEntry

logger = logging.getLogger(__name__)

FeatureValue = Union[float, str]


@dataclass(frozen=True)
class FeatureContext:
    """
    Inputs for one feature vector.

    Attributes:
        game_logs: Player game logs, newest first
        prop_type: Provider stat ID of the prop ('points', 'rebounds', ...)
        home_team: Home team code
        away_team: Away team code
        is_home: Whether the player's team is at home
        game_date: Date of the upcoming game
        line: Posted (consensus) line
        odds_over: Over price, American odds
        odds_under: Under price, American odds
        bookmaker: Bookmaker display name
    """

    game_logs: Sequence[GameLogEntry] = field(default_factory=tuple)
    prop_type: str = "points"
    home_team: str = ""
    away_team: str = ""
    is_home: bool = False
    game_date: date = field(default_factory=date.today)
    line: float = 0.0
    odds_over: float = -110.0
    odds_under: float = -110.0
    bookmaker: str = ""


class BaseFeatureExtractor(ABC):
    """
    Abstract base class for feature extractors.

    All feature extractors should inherit from this class and implement:
    - extract(): Main extraction method
    - get_defaults(): Returns default values for all features
    - FEATURE_NAMES: Class attribute listing all feature names

    Attributes:
        name: Extractor name for logging
    """

    # Subclasses must define this
    FEATURE_NAMES: tuple = ()

    def __init__(self, name: str = None):
        self.name = name or self.__class__.__name__

    @abstractmethod
    def extract(
        self,
        context: FeatureContext,
        computed: Optional[Dict[str, FeatureValue]] = None,
    ) -> Dict[str, FeatureValue]:
        """
        Extract this extractor's features.

        Args:
            context: Inputs for the feature vector
            computed: Features produced by earlier extractors

        Returns:
            Dict mapping each name in FEATURE_NAMES to its value
        """
        pass

    @classmethod
    def get_defaults(cls) -> Dict[str, FeatureValue]:
        """
        Get default values for all features.

        Returns:
            Dict mapping feature names to default values (0.0 unless overridden)
        """
        return {name: 0.0 for name in cls.FEATURE_NAMES}

    @staticmethod
    def _safe_float(value: Any, default: float = 0.0) -> float:
        """
        Safely convert value to a finite float.

        Args:
            value: Value to convert
            default: Default if conversion fails or the result is NaN/inf

        Returns:
            Float value or default
        """
        if value is None:
            return default
        try:
            result = float(value)
        except (ValueError, TypeError):
            return default
        if not math.isfinite(result):
            return default
        return result

    @classmethod
    def _numeric(cls, computed: Optional[Dict[str, FeatureValue]]) -> DefaultDict[str, float]:
        """Numeric view of earlier-stage features; absent keys read as 0.0."""
        return defaultdict(
            float,
            {
                key: cls._safe_float(value)
                for key, value in (computed or {}).items()
                if not isinstance(value, str)
            },
        )

    @staticmethod
    def _safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
        """Divide, returning `default` when the denominator is zero."""
        if denominator == 0:
            return default
        return numerator / denominator

    def validate_features(self, features: Dict[str, FeatureValue]) -> Dict[str, FeatureValue]:
        """
        Validate extracted features and fill missing with defaults.

        Numeric features are coerced to finite floats. String defaults mark
        categorical features, which are passed through as strings.

        Args:
            features: Extracted feature dict

        Returns:
            Validated feature dict with exactly the expected features
        """
        defaults = self.get_defaults()
        result = defaults.copy()

        for key, value in features.items():
            if key not in result:
                logger.debug(f"{self.name}: dropping unexpected feature {key}")
                continue
            if isinstance(defaults[key], str):
                result[key] = "" if value is None else str(value)
            else:
                result[key] = self._safe_float(value, defaults[key])

        return result
