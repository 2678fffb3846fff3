"""
Configuration loader for YAML-based engine configuration.

This module loads an engine configuration from YAML and validates it with
the Pydantic models in ``fuzzysig.config.models``.
"""

from pathlib import Path
from typing import Any, Union

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from fuzzysig import get_logger, log_entry_exit, log_error
from fuzzysig.config.models import EngineConfig
from fuzzysig.errors import (
    ConfigurationError,
    ConfigurationFileError,
    ErrorCodes,
    InvalidConfigurationError,
)

# Get module logger
logger = get_logger(__name__)


def parse_engine_config(data: dict[str, Any], source: str = "<dict>") -> EngineConfig:
    """
    Validate a configuration mapping.

    Args:
        data: Parsed configuration content
        source: Where the content came from, for error messages

    Raises:
        InvalidConfigurationError: If validation fails
        ConfigurationError: If a section is semantically invalid
    """
    try:
        return EngineConfig.model_validate(data)
    except ValidationError as e:
        error = InvalidConfigurationError(
            message=f"Configuration validation failed: {e.error_count()} error(s) in {source}",
            error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
            context={"file": source},
            details={
                "validation_errors": [
                    {"field": ".".join(map(str, err["loc"])), "message": err["msg"]}
                    for err in e.errors()
                ]
            },
        )
        log_error(error, logger=logger)
        raise error from e
    except ConfigurationError as e:
        e.context.setdefault("file", source)
        log_error(e, logger=logger)
        raise


@log_entry_exit(logger=logger)
def load_engine_config(config_path: Union[str, Path]) -> EngineConfig:
    """
    Load a YAML configuration file and validate it.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        A validated EngineConfig

    Raises:
        ConfigurationFileError: If the file cannot be found or read
        InvalidConfigurationError: If the YAML is invalid or validation fails
        ConfigurationError: If a section is semantically invalid
    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise ConfigurationFileError(
            message=f"Configuration file not found: {config_path}",
            error_code=ErrorCodes.CONFIG_FILE_NOT_FOUND,
            context={"file": str(config_path)},
            details={"path": str(config_path)},
        )

    try:
        with open(config_path) as file:
            config_dict = yaml.safe_load(file)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            message=f"Invalid YAML format in {config_path}: {e}",
            error_code=ErrorCodes.CONFIG_INVALID_YAML,
            context={"file": str(config_path)},
            details={"yaml_error": str(e)},
        ) from e
    except OSError as e:
        raise ConfigurationFileError(
            message=f"Cannot read configuration file {config_path}: {e}",
            error_code=ErrorCodes.CONFIG_FILE_NOT_FOUND,
            context={"file": str(config_path)},
            details={"path": str(config_path), "error": str(e)},
        ) from e

    if not isinstance(config_dict, dict):
        raise InvalidConfigurationError(
            message=f"Configuration file {config_path} must contain a mapping",
            error_code=ErrorCodes.CONFIG_VALIDATION_FAILED,
            context={"file": str(config_path)},
            details={"received": type(config_dict).__name__},
        )

    config = parse_engine_config(config_dict, source=str(config_path))
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config
