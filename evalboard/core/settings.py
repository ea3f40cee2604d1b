"""Evalboard configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides (CLI options, keyword arguments)
2. Environment variables (with EVALBOARD_ prefix)
3. Configuration file (evalboard.config.yaml)
4. Default values

Example usage:
    from evalboard.core.settings import get_settings

    settings = get_settings()
    print(settings.analytics.video_duration)

Environment variable support:
    EVALBOARD_LOGGING__LEVEL=DEBUG
    EVALBOARD_ANALYTICS__TOP_N=5
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["evalboard.config.yaml", "evalboard.config.yml"]

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


def _validate_level(v: str) -> str:
    upper_v = v.upper()
    if upper_v not in _VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of {_VALID_LOG_LEVELS}")
    return upper_v


class AnalyticsSettings(BaseSettings):
    """Default parameters for the analytics components.

    These only seed the CLI and the session reporter; the engine functions
    always take their parameters explicitly.
    """

    video_duration: int = Field(
        default=300,
        ge=0,
        description="Video duration in seconds used when a session has none",
    )
    cluster_width: int = Field(
        default=10,
        ge=1,
        description="Hotspot cluster width in seconds",
    )
    top_n: int = Field(
        default=3,
        ge=0,
        description="Number of hotspots to report",
    )
    high_agreement_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Minimum agreement classified as high",
    )
    moderate_agreement_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Minimum agreement classified as moderate",
    )

    @model_validator(mode="after")
    def check_thresholds(self) -> "AnalyticsSettings":
        if self.moderate_agreement_threshold > self.high_agreement_threshold:
            raise ValueError(
                "moderate_agreement_threshold cannot exceed high_agreement_threshold"
            )
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )
    module_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Log level overrides keyed by module name",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _validate_level(v)

    @field_validator("module_levels")
    @classmethod
    def validate_module_levels(cls, v: dict[str, str]) -> dict[str, str]:
        return {module: _validate_level(level) for module, level in v.items()}


class EvalboardSettings(BaseSettings):
    """Main Evalboard configuration settings.

    Example:
        settings = EvalboardSettings(logging={"level": "DEBUG"})
        print(settings.analytics.top_n)
    """

    model_config = SettingsConfigDict(
        env_prefix="EVALBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from a discovered YAML config file under explicit data."""
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if not config_path:
            return data

        file_config = _load_yaml_config(config_path)
        if not file_config:
            return data

        logger.debug("Loaded configuration from %s", config_path)
        merged = {**file_config, **data}
        for section in ("analytics", "logging"):
            file_section = file_config.get(section)
            if isinstance(file_section, dict):
                data_section = data.get(section)
                merged[section] = {
                    **file_section,
                    **(data_section if isinstance(data_section, dict) else {}),
                }
        return merged

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return self.model_dump()


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> EvalboardSettings:
    """Get an Evalboard settings instance.

    Args:
        config_file: Optional explicit path to configuration file.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured EvalboardSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return EvalboardSettings(**merged)

    return EvalboardSettings(**overrides)


@lru_cache
def get_cached_settings() -> EvalboardSettings:
    """Get cached settings instance.

    The cache can be cleared with get_cached_settings.cache_clear().
    """
    return get_settings()
