"""Configuration loading for the quality fingerprint tools."""

from __future__ import annotations

import logging
import os
import pathlib
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from core.exceptions import ConfigurationError
from core.models.config_models import AppConfig

# Type definitions for configuration
ConfigValue = dict[str, Any] | list[Any] | str | int | float | bool | None

logger = logging.getLogger("config")
# Handlers are attached later by get_loggers()
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

MAX_CONFIG_SIZE = 1024 * 1024  # 1MB


def resolve_env_vars(config: ConfigValue) -> ConfigValue:
    """Recursively resolve environment variables in config values.

    Args:
        config: Configuration value (dict, list, or primitive).

    Returns:
        ConfigValue: Config with environment variables resolved.

    """
    if isinstance(config, dict):
        return {str(k): resolve_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [resolve_env_vars(item) for item in config]
    if isinstance(config, str):
        # Pure ${VAR} resolves to an empty string when the variable is unset
        if config.startswith("${") and config.endswith("}"):
            return os.getenv(config[2:-1], "")
        if "$" in config:
            config = os.path.expandvars(config)
        if config.startswith("~"):
            config = str(pathlib.Path(config).expanduser())
    return config


def _validate_config_path(path: str) -> pathlib.Path:
    """Resolve and validate the configuration file path.

    Args:
        path: The user-provided path to the configuration file.

    Returns:
        A resolved and validated pathlib.Path object.

    Raises:
        FileNotFoundError: If the path does not exist or is not a file.
        ValueError: If the path is outside allowed directories or has a wrong extension.
        PermissionError: If the file is not readable.

    """
    try:
        resolved_path = pathlib.Path(path).expanduser().resolve(strict=True)
    except FileNotFoundError as e:
        msg = f"Config file not found at the specified path: {path}"
        raise FileNotFoundError(msg) from e

    if not resolved_path.is_file():
        msg = f"Config path does not point to a file: {resolved_path}"
        raise FileNotFoundError(msg)

    allowed_dirs = [
        pathlib.Path.cwd().resolve(),
        (pathlib.Path.home() / ".config").resolve(),
    ]
    if not any(resolved_path.is_relative_to(allowed_dir) for allowed_dir in allowed_dirs):
        allowed_paths_str = ", ".join(f'"{d}"' for d in allowed_dirs)
        msg = f"Access to {resolved_path} is not allowed. Config must be in one of: {allowed_paths_str}"
        raise ValueError(msg)

    if not os.access(resolved_path, os.R_OK):
        msg = f"No read permission for config file: {resolved_path}"
        raise PermissionError(msg)

    if resolved_path.suffix.lower() not in (".yaml", ".yml"):
        msg = "Configuration file must have a .yaml or .yml extension"
        raise ValueError(msg)

    return resolved_path


def _read_and_parse_config(path: pathlib.Path) -> ConfigValue:
    """Read and parse the YAML config file with size validation.

    Raises:
        ValueError: If config file exceeds maximum size (1MB).
        yaml.YAMLError: If YAML parsing fails.

    """
    if path.stat().st_size > MAX_CONFIG_SIZE:
        msg = f"Config file {path} is too large (max {MAX_CONFIG_SIZE} bytes)"
        raise ValueError(msg)

    logger.info("Loading config from: %s", path)
    parsed_yaml: ConfigValue = yaml.safe_load(path.read_text(encoding="utf-8"))
    return parsed_yaml


def _validate_config_data_type(config_data: ConfigValue) -> dict[str, Any]:
    """Validate that config data is a dictionary.

    An empty file parses to None and is treated as an empty mapping.

    Raises:
        TypeError: If configuration data is not a dictionary

    """
    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        msg = "Configuration data is not a dictionary after parsing."
        raise TypeError(msg)
    return config_data


def format_pydantic_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors into a readable string.

    Args:
        error: Pydantic ValidationError instance.

    Returns:
        str: Formatted error message string.

    """
    error_messages: list[str] = []

    for err in error.errors():
        loc_path = ".".join(str(loc) for loc in err["loc"])
        if err["type"] == "missing":
            error_messages.append(f"{loc_path}: Missing required field")
        else:
            error_messages.append(f"{loc_path}: {err['msg']} (type: {err['type']})")

    return "\n".join(error_messages)


def load_config(config_path: str | None = None) -> AppConfig:
    """Load the configuration from a YAML file, resolve environment variables, and validate it.

    Args:
        config_path: Path to the configuration YAML file; defaults apply when None.

    Returns:
        Validated AppConfig Pydantic model with resolved env vars.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not allowed,
            not valid YAML, or fails validation.

    """
    if config_path is None:
        return AppConfig()

    env_loaded = load_dotenv()
    logger.debug(".env file %s", "found and loaded" if env_loaded else "not found, using system environment variables")

    try:
        validated_path = _validate_config_path(config_path)
        config_data = _validate_config_data_type(resolve_env_vars(_read_and_parse_config(validated_path)))
        config_model = AppConfig(**config_data)
    except ValidationError as e:
        msg = f"Configuration validation failed:\n{format_pydantic_errors(e)}"
        logger.critical(msg)
        raise ConfigurationError(msg, config_path) from e
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        logger.critical("Configuration loading failed: %s", e)
        raise ConfigurationError(str(e), config_path) from e

    logger.info("Configuration successfully loaded and validated.")
    return config_model
