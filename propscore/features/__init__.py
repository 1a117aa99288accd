"""
Feature Engineering
===================
Fixed-schema feature vectors for the hosted prop classifier.
"""

from propscore.features.feature_engine import FEATURE_NAMES, FeatureEngine, compute_features

__all__ = ["FEATURE_NAMES", "FeatureEngine", "compute_features"]
