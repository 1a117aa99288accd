"""
Centralized Threshold Configuration for PropScore
=================================================
Frozen dataclasses containing the pipeline's magic numbers.

Usage:
    from propscore.config.thresholds import (
        CONFIDENCE_THRESHOLDS,
        FAN_OUT_CONFIG,
        WINDOW_CONFIG,
    )

    CONFIDENCE_THRESHOLDS.high  # 0.15

Example:
    >>> from propscore.config.thresholds import WINDOW_CONFIG
    >>> WINDOW_CONFIG.long_window
    10
"""

from dataclasses import dataclass

__all__ = [
    "ConfidenceThresholds",
    "WindowConfig",
    "ContextDefaults",
    "FanOutConfig",
    "CacheTTLConfig",
    "TimeoutConfig",
    "CONFIDENCE_THRESHOLDS",
    "WINDOW_CONFIG",
    "CONTEXT_DEFAULTS",
    "FAN_OUT_CONFIG",
    "CACHE_TTL_CONFIG",
    "TIMEOUT_CONFIG",
]


# =============================================================================
# CORE THRESHOLD DATACLASSES
# =============================================================================


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Confidence tier boundaries applied to the model's confidence scalar.

    Attributes:
        high: Confidence strictly above this is HIGH
        medium: Confidence at or above this (and not HIGH) is MEDIUM
        should_bet: Confidence strictly above this is a bet
        min_recommended: Minimum confidence for the recommended set
    """

    high: float = 0.15
    medium: float = 0.10
    should_bet: float = 0.10
    min_recommended: float = 0.10


@dataclass(frozen=True)
class WindowConfig:
    """Trailing game windows.

    Attributes:
        short_window: Games in the short (L3) window
        long_window: Games in the long (L10) window
        default_log_limit: Game logs fetched per player
        recent_days: Lookback for GAMES_IN_LAST_7
    """

    short_window: int = 3
    long_window: int = 10
    default_log_limit: int = 15
    recent_days: int = 7


@dataclass(frozen=True)
class ContextDefaults:
    """Context feature values used when a player has no game logs."""

    days_rest: float = 3.0
    back_to_back: float = 0.0
    games_in_last_7: float = 0.0
    minutes_trend: float = 0.0
    efficiency_stable_margin: float = 5.0
    defensive_impact_base: float = 0.5


@dataclass(frozen=True)
class FanOutConfig:
    """Per-request fan-out and ranking limits.

    Attributes:
        max_concurrency: Candidates processed simultaneously
        top_n: Props returned to the caller
    """

    max_concurrency: int = 4
    top_n: int = 10


@dataclass(frozen=True)
class CacheTTLConfig:
    """Cache lifetimes in seconds."""

    game_logs: int = 3600
    player_ids: int = 86400
    token_lifetime: int = 3600
    token_refresh_margin: int = 300


@dataclass(frozen=True)
class TimeoutConfig:
    """Per-call transport timeouts in seconds. No call is retried."""

    game_logs: float = 10.0
    events: float = 15.0
    predict_single: float = 30.0
    predict_batch: float = 60.0
    token: float = 10.0


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

CONFIDENCE_THRESHOLDS = ConfidenceThresholds()
WINDOW_CONFIG = WindowConfig()
CONTEXT_DEFAULTS = ContextDefaults()
FAN_OUT_CONFIG = FanOutConfig()
CACHE_TTL_CONFIG = CacheTTLConfig()
TIMEOUT_CONFIG = TimeoutConfig()
