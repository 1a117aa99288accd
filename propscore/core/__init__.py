"""
PropScore Core Module
=====================
Core utilities shared across the pipeline:
- Custom exceptions
- Structured logging configuration
- TTL cache stores
- Confidence tiers
- Pydantic value objects (see propscore.core.schemas)
"""

from propscore.core.cache import CacheEntry, CacheStore, MemoryCache
from propscore.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    EventNotFoundError,
    FeatureSchemaError,
    InferenceError,
    InferenceParseError,
    InferenceRequestError,
    InvalidConfigError,
    MissingConfigError,
    NoPropsAvailableError,
    NoRosterMatchesError,
    NotFoundError,
    PropScoreError,
    RequestValidationError,
    UnsupportedSportError,
    UpstreamFetchError,
    ValidationError,
)
from propscore.core.logging_config import get_logger, setup_logging

__all__ = [
    # Cache
    "CacheEntry",
    "CacheStore",
    "MemoryCache",
    # Exceptions
    "PropScoreError",
    "ValidationError",
    "RequestValidationError",
    "UnsupportedSportError",
    "NotFoundError",
    "EventNotFoundError",
    "NoPropsAvailableError",
    "NoRosterMatchesError",
    "UpstreamFetchError",
    "InferenceError",
    "AuthenticationError",
    "InferenceRequestError",
    "InferenceParseError",
    "FeatureSchemaError",
    "ConfigurationError",
    "MissingConfigError",
    "InvalidConfigError",
    # Logging
    "get_logger",
    "setup_logging",
]
