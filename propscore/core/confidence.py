"""
Confidence Tiers
================
Maps the model's confidence scalar to a discrete tier and a bet decision.

The model's returned confidence is used as-is. It is never recomputed from the
over/under probabilities.
"""

from enum import Enum

from propscore.config.thresholds import CONFIDENCE_THRESHOLDS, ConfidenceThresholds


class ConfidenceTier(str, Enum):
    """Confidence bucket."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


RECOMMENDED_TIERS = frozenset({ConfidenceTier.HIGH, ConfidenceTier.MEDIUM})


def confidence_tier(
    confidence: float, thresholds: ConfidenceThresholds = CONFIDENCE_THRESHOLDS
) -> ConfidenceTier:
    """
    Bucket a confidence value.

    Examples:
        confidence_tier(0.16) -> HIGH
        confidence_tier(0.15) -> MEDIUM
        confidence_tier(0.10) -> MEDIUM
        confidence_tier(0.09) -> LOW
    """
    if confidence > thresholds.high:
        return ConfidenceTier.HIGH
    if confidence >= thresholds.medium:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def should_bet(confidence: float, thresholds: ConfidenceThresholds = CONFIDENCE_THRESHOLDS) -> bool:
    """True only when confidence is strictly above the bet threshold."""
    return confidence > thresholds.should_bet


def is_recommended(
    prediction, thresholds: ConfidenceThresholds = CONFIDENCE_THRESHOLDS
) -> bool:
    """Whether a parsed prediction belongs in the recommended set."""
    return (
        prediction.should_bet
        and prediction.confidence_tier in RECOMMENDED_TIERS
        and prediction.confidence >= thresholds.min_recommended
    )
