"""
Feature Extractors Package
==========================
Modular, pure feature extraction classes for the 88-feature prop vector.

Each extractor owns one slice of the schema (FEATURE_NAMES) and reads the
slices produced before it, so FeatureEngine runs them in a fixed order.

Usage:
    from propscore.features.extractors import ShortWindowExtractor, FeatureContext

    context = FeatureContext(game_logs=logs, game_date=date(2025, 11, 20))
    l3 = ShortWindowExtractor().extract(context)
"""

from .advanced_features import AdvancedMetricsExtractor
from .base import BaseFeatureExtractor, FeatureContext
from .categorical_features import CategoricalExtractor
from .context_features import GameContextExtractor
from .interaction_features import InteractionExtractor
from .market_features import MarketFeatureExtractor
from .window_features import LongWindowExtractor, ShortWindowExtractor

__all__ = [
    "BaseFeatureExtractor",
    "FeatureContext",
    "CategoricalExtractor",
    "ShortWindowExtractor",
    "LongWindowExtractor",
    "GameContextExtractor",
    "AdvancedMetricsExtractor",
    "InteractionExtractor",
    "MarketFeatureExtractor",
]
