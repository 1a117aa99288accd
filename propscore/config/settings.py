"""
Runtime Settings
================
Environment-driven settings for provider credentials, the model endpoint and
the HTTP server.

Usage:
    from propscore.config.settings import Settings

    settings = Settings.from_env()
    api_key = settings.require("sgo_api_key")
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from propscore.config.constants import INFERENCE_URL_TEMPLATE
from propscore.core.exceptions import InvalidConfigError, MissingConfigError

DEFAULT_ROSTER_PATH = Path(__file__).parent.parent / "data" / "star_players.json"

# Settings field -> environment variable
ENV_KEYS: Dict[str, str] = {
    "sgo_api_key": "SGO_API_KEY",
    "api_sports_key": "API_SPORTS_KEY",
    "inference_project_id": "INFERENCE_PROJECT_ID",
    "inference_location": "INFERENCE_LOCATION",
    "inference_endpoint_id": "INFERENCE_ENDPOINT_ID",
    "inference_endpoint_url": "INFERENCE_ENDPOINT_URL",
    "inference_access_token": "INFERENCE_ACCESS_TOKEN",
}


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigError(key, raw, "expected an integer") from None


def _env_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Process settings. Built once at startup and passed to the service container."""

    sgo_api_key: Optional[str] = None
    api_sports_key: Optional[str] = None
    inference_project_id: Optional[str] = None
    inference_location: str = "us-central1"
    inference_endpoint_id: Optional[str] = None
    inference_endpoint_url: Optional[str] = None
    inference_access_token: Optional[str] = None
    roster_path: Path = DEFAULT_ROSTER_PATH
    cors_origins: Tuple[str, ...] = field(default=("*",))
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1
    api_reload: bool = False
    debug: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance

        Raises:
            InvalidConfigError: If a numeric variable cannot be parsed
        """
        env = os.environ if env is None else env

        origins = tuple(
            origin.strip() for origin in env.get("CORS_ORIGINS", "*").split(",") if origin.strip()
        )

        return cls(
            sgo_api_key=env.get("SGO_API_KEY") or None,
            api_sports_key=env.get("API_SPORTS_KEY") or None,
            inference_project_id=env.get("INFERENCE_PROJECT_ID") or None,
            inference_location=env.get("INFERENCE_LOCATION", "us-central1"),
            inference_endpoint_id=env.get("INFERENCE_ENDPOINT_ID") or None,
            inference_endpoint_url=env.get("INFERENCE_ENDPOINT_URL") or None,
            inference_access_token=env.get("INFERENCE_ACCESS_TOKEN") or None,
            roster_path=Path(env.get("ROSTER_PATH", str(DEFAULT_ROSTER_PATH))),
            cors_origins=origins or ("*",),
            api_host=env.get("API_HOST", "0.0.0.0"),
            api_port=_env_int(env, "API_PORT", 8000),
            api_workers=_env_int(env, "API_WORKERS", 1),
            api_reload=_env_bool(env, "API_RELOAD"),
            debug=_env_bool(env, "DEBUG"),
        )

    def require(self, name: str) -> str:
        """
        Return a setting that must be present for the caller to work.

        Raises:
            MissingConfigError: If the setting is empty
        """
        value = getattr(self, name)
        if not value:
            raise MissingConfigError(ENV_KEYS.get(name, name.upper()), source="environment")
        return value

    @property
    def inference_url(self) -> str:
        """Resolved prediction endpoint URL."""
        if self.inference_endpoint_url:
            return self.inference_endpoint_url
        return INFERENCE_URL_TEMPLATE.format(
            location=self.inference_location,
            project=self.require("inference_project_id"),
            endpoint_id=self.require("inference_endpoint_id"),
        )
