"""
fuzzysig settings - process-level runtime configuration.

Settings come from environment variables (prefix ``FUZZYSIG_``) and from a
``.env`` file loaded at import time of the package.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FuzzysigSettings(BaseSettings):
    """
    Engine process settings.

    Environment variables:
        FUZZYSIG_CONFIG_PATH: Engine configuration file. Default: config/signal_engine.yaml
        FUZZYSIG_MAX_WORKERS: Thread pool size for batch evaluation. Default: executor default
        FUZZYSIG_LOG_DIR: Directory for the rotating log file. Default: no file logging
        FUZZYSIG_LOG_LEVEL: Console log level. Default: INFO
        FUZZYSIG_DEBUG: Enable debug logging everywhere. Default: false
    """

    config_path: Path = Field(
        default=Path("config/signal_engine.yaml"),
        description="Engine configuration file",
    )
    max_workers: Optional[int] = Field(
        default=None, gt=0, description="Thread pool size for batch evaluation"
    )
    log_dir: Optional[Path] = Field(default=None, description="Directory for log files")
    log_level: str = Field(default="INFO", description="Console log level")
    debug: bool = Field(default=False, description="Global debug flag")

    model_config = SettingsConfigDict(env_prefix="FUZZYSIG_")

    @field_validator("log_level")
    @classmethod
    def valid_log_level(cls, v: str) -> str:
        """Validate that the logging level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid logging level: {v}. Must be one of {valid_levels}")
        return upper_v


# Cache settings to avoid repeated env access
@lru_cache
def get_settings() -> FuzzysigSettings:
    """Get process settings with caching."""
    return FuzzysigSettings()


# Clear settings cache (for testing)
def clear_settings_cache() -> None:
    """Clear settings cache."""
    get_settings.cache_clear()


__all__ = ["FuzzysigSettings", "get_settings", "clear_settings_cache"]
