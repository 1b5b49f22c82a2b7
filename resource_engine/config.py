"""
Engine Settings

Loads settings from environment variables and provides defaults.
Supports loading from a project .env file using python-dotenv.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .models.config import DEFAULT_CONFIG, RecommendationConfig

PROJECT_ROOT = Path(__file__).resolve().parent.parent

root_env = PROJECT_ROOT / ".env"
if root_env.exists():
    load_dotenv(root_env)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass
class EngineSettings:
    """Engine settings."""

    # JSON file with RecommendationConfig overrides (nested or flat keys)
    config_path: Optional[Path] = None
    # Overrides the config file's cache TTL when set
    cache_ttl_seconds: Optional[float] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Load settings from environment variables."""
        config_path = os.getenv("RESOURCE_ENGINE_CONFIG_PATH")
        path = None
        if config_path:
            path = Path(config_path)
            if not path.is_absolute():
                path = (PROJECT_ROOT / path).resolve()

        ttl = os.getenv("RESOURCE_ENGINE_CACHE_TTL_SECONDS")
        return cls(
            config_path=path,
            cache_ttl_seconds=float(ttl) if ttl else None,
            log_level=os.getenv("RESOURCE_ENGINE_LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the settings.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if self.config_path is not None and not self.config_path.exists():
            errors.append(f"Config file not found: {self.config_path}")
        if self.cache_ttl_seconds is not None and self.cache_ttl_seconds < 0:
            errors.append(f"Cache TTL must be non-negative: {self.cache_ttl_seconds}")
        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            errors.append(f"Unknown log level: {self.log_level}")
        return len(errors) == 0, errors


def load_recommendation_config(
    settings: Optional[EngineSettings] = None,
) -> RecommendationConfig:
    """
    Effective RecommendationConfig: defaults, then the JSON file, then the TTL
    override. Invalid weights raise at this point, not mid-request.
    """
    settings = settings or get_settings()
    config = DEFAULT_CONFIG
    if settings.config_path is not None:
        with open(settings.config_path) as f:
            config = RecommendationConfig.from_dict(json.load(f))
    if settings.cache_ttl_seconds is not None:
        config = RecommendationConfig.model_validate(
            {**config.model_dump(), "cache_ttl_seconds": settings.cache_ttl_seconds}
        )
    return config


def configure_logging(level: Union[str, int, None] = None) -> None:
    """Root handler for scripts; the library itself never configures logging."""
    if level is None:
        level = get_settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)


# Global settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings.from_env()
    return _settings


def reload_settings() -> EngineSettings:
    """Reload settings from environment."""
    global _settings
    _settings = None
    return get_settings()
