# PropScore Configuration Module
import os

# =============================================================================
# Environment Detection
# =============================================================================
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"


def get_environment() -> str:
    """Get current environment name."""
    return ENVIRONMENT


def is_production() -> bool:
    """Check if running in production."""
    return IS_PRODUCTION


# Shared constants
from .constants import (
    BOOKMAKER_DISPLAY_NAMES,
    STAT_TYPE_ALIASES,
    SUPPORTED_SPORT,
    TEAM_CODE_MAP,
)
from .settings import Settings

# Threshold configurations (centralized magic numbers)
from .thresholds import (
    CACHE_TTL_CONFIG,
    CONFIDENCE_THRESHOLDS,
    CONTEXT_DEFAULTS,
    FAN_OUT_CONFIG,
    TIMEOUT_CONFIG,
    WINDOW_CONFIG,
    CacheTTLConfig,
    ConfidenceThresholds,
    FanOutConfig,
    TimeoutConfig,
    WindowConfig,
)

__all__ = [
    # Environment
    "ENVIRONMENT",
    "IS_PRODUCTION",
    "get_environment",
    "is_production",
    # Constants
    "BOOKMAKER_DISPLAY_NAMES",
    "STAT_TYPE_ALIASES",
    "SUPPORTED_SPORT",
    "TEAM_CODE_MAP",
    # Settings
    "Settings",
    # Thresholds
    "CACHE_TTL_CONFIG",
    "CONFIDENCE_THRESHOLDS",
    "CONTEXT_DEFAULTS",
    "FAN_OUT_CONFIG",
    "TIMEOUT_CONFIG",
    "WINDOW_CONFIG",
    "CacheTTLConfig",
    "ConfidenceThresholds",
    "FanOutConfig",
    "TimeoutConfig",
    "WindowConfig",
]
