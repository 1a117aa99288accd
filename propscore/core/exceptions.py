"""
Custom Exceptions for PropScore
===============================
Centralized exception definitions for the props pipeline.

Usage:
    from propscore.core.exceptions import (
        EventNotFoundError,
        InferenceParseError,
        UpstreamFetchError,
    )

    if event is None:
        raise EventNotFoundError("Lakers", "Celtics")
"""


class PropScoreError(Exception):
    """Base exception for all PropScore errors."""

    pass


# =============================================================================
# Request Validation Errors
# =============================================================================


class ValidationError(PropScoreError):
    """Base exception for invalid client requests."""

    error_label = "Invalid request"


class RequestValidationError(ValidationError):
    """Raised when required request fields are missing."""

    error_label = "Missing required fields"

    def __init__(self, missing_fields: list):
        self.missing_fields = list(missing_fields)
        message = "Missing required fields: team1, team2, sport"
        if self.missing_fields:
            message = f"{message} (missing={', '.join(self.missing_fields)})"
        super().__init__(message)


class UnsupportedSportError(ValidationError):
    """Raised when the requested sport is not served."""

    error_label = "Unsupported sport"

    def __init__(self, sport: str, supported: str = "nba"):
        self.sport = sport
        self.supported = supported
        super().__init__(f"Sport '{sport}' is not supported. Only '{supported}' is available")


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(PropScoreError):
    """Base exception for request outcomes with nothing to return."""

    error_label = "Not found"


class EventNotFoundError(NotFoundError):
    """Raised when no upcoming event matches the requested teams."""

    error_label = "No matching game found"

    def __init__(self, team1: str, team2: str):
        self.team1 = team1
        self.team2 = team2
        super().__init__(
            "Could not find an upcoming game between these teams with available odds "
            f"({team1} vs {team2})"
        )


class NoPropsAvailableError(NotFoundError):
    """Raised when the event carries no priced over/under player props."""

    error_label = "No player props available"

    def __init__(self, event_id: str = None):
        self.event_id = event_id
        message = "No player props with both sides priced for this game"
        if event_id:
            message = f"{message} (event={event_id})"
        super().__init__(message)


class NoRosterMatchesError(NotFoundError):
    """Raised when none of the event's props belong to tracked star players."""

    error_label = "No star player props available"

    def __init__(self, candidates_checked: int = 0):
        self.candidates_checked = candidates_checked
        super().__init__(
            "No props found for tracked star players in this game "
            f"({candidates_checked} props checked)"
        )


# =============================================================================
# Upstream Errors
# =============================================================================


class UpstreamFetchError(PropScoreError):
    """Raised when a stats or odds provider call fails."""

    def __init__(self, provider: str, message: str, status_code: int = None):
        self.provider = provider
        self.status_code = status_code
        full_message = f"{provider} fetch failed: {message}"
        if status_code:
            full_message = f"{full_message} (status={status_code})"
        super().__init__(full_message)


# =============================================================================
# Inference Errors
# =============================================================================


class InferenceError(PropScoreError):
    """Base exception for hosted model errors."""

    pass


class AuthenticationError(InferenceError):
    """Raised when a bearer token for the model endpoint cannot be obtained."""

    error_label = "Model authentication failed"

    def __init__(self, message: str, source: str = None):
        self.source = source
        if source:
            message = f"{message} (source={source})"
        super().__init__(message)


class InferenceRequestError(InferenceError):
    """Raised when the prediction call fails at the transport level."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        if status_code:
            message = f"{message} (status={status_code})"
        super().__init__(message)


class InferenceParseError(InferenceError):
    """Raised when the model response does not match the prediction contract."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        if field:
            message = f"{message} (field={field})"
        super().__init__(message)


# =============================================================================
# Feature Errors
# =============================================================================


class FeatureSchemaError(PropScoreError):
    """Raised when a computed feature vector does not match the model schema."""

    def __init__(self, missing: list = None, unexpected: list = None):
        self.missing = sorted(missing or [])
        self.unexpected = sorted(unexpected or [])
        parts = []
        if self.missing:
            parts.append(f"missing={self.missing}")
        if self.unexpected:
            parts.append(f"unexpected={self.unexpected}")
        super().__init__(f"Feature vector schema mismatch ({', '.join(parts)})")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PropScoreError):
    """Base exception for configuration errors."""

    error_label = "Service misconfigured"


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, config_key: str, source: str = None):
        self.config_key = config_key
        self.source = source
        message = f"Missing required configuration: {config_key}"
        if source:
            message = f"{message} (expected in {source})"
        super().__init__(message)


class InvalidConfigError(ConfigurationError):
    """Raised when configuration value is invalid."""

    def __init__(self, config_key: str, value: str, reason: str = None):
        self.config_key = config_key
        self.value = value
        self.reason = reason
        message = f"Invalid configuration: {config_key}={value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
