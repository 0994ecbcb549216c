"""
Configuration loader for actiongate.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.actiongate/config.yaml)
3. Project config (./.actiongate/project.yaml)
4. Environment variables (ACTIONGATE_*)
"""

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from actiongate.config.merger import deep_merge, set_nested_value
from actiongate.config.schema import Config
from actiongate.storage.paths import find_project_config, get_global_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ACTIONGATE_"

# Nested keys are separated by a double underscore so that single
# underscores survive in field names (bot_token, timeout_ms).
ENV_NESTING = "__"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return content


def apply_env_overrides(
    config: dict[str, Any], environ: Mapping[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern:
    ACTIONGATE_<SECTION>__<KEY>=<value>
    ACTIONGATE_PLATFORMS__DISCORD__BOT_TOKEN=<value>

    Args:
        config: Configuration dictionary to modify.
        environ: Environment to read. Defaults to os.environ.

    Returns:
        Configuration with environment overrides applied.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == "ACTIONGATE_HOME":
            continue

        parts = key[len(ENV_PREFIX) :].lower().split(ENV_NESTING)
        config_key = ".".join(_match_existing_keys(config, parts))
        config = set_nested_value(config, config_key, _parse_env_value(value))
        logger.debug(f"Applied environment override for {config_key}")

    return config


def _match_existing_keys(config: dict[str, Any], parts: list[str]) -> list[str]:
    """
    Map lower-cased env key parts onto keys already present in the config.

    Environment names lose their case, so ``ACTIONGATE_..._ACTIONS__MEMBERINFO``
    must replace a configured ``memberInfo`` rather than add ``memberinfo``.
    """
    matched = []
    current: Any = config
    for part in parts:
        key = part
        if isinstance(current, dict):
            key = next((k for k in current if isinstance(k, str) and k.lower() == part), part)
            current = current.get(key)
        matched.append(key)
    return matched


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Args:
        value: String value from environment.

    Returns:
        Parsed value (bool, int, float, list or string).
    """
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    if "," in value:
        return [item.strip() for item in value.split(",")]

    return value


def load_config(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Loading order (later overrides earlier):
    1. Default values from Config model
    2. Global config (~/.actiongate/config.yaml)
    3. Project config (./.actiongate/project.yaml) if found
    4. Environment variables (ACTIONGATE_*)

    Args:
        project_path: Starting path to search for project config. Defaults to cwd.
        skip_project: Skip loading project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    global_path = get_global_config_path()
    if global_path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(global_path))
        logger.debug(f"Loaded global config from {global_path}")

    if not skip_project:
        project_config_path = find_project_config(project_path)
        if project_config_path is not None:
            config_dict = deep_merge(config_dict, load_yaml_file(project_config_path))
            logger.debug(f"Loaded project config from {project_config_path}")

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Uses a cached instance for performance. Use reload=True to force refresh.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        Config instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
