"""
Configuration management for actiongate.

Configuration is read fresh from YAML files and the environment; every
routing decision works against one validated Config snapshot.
"""

from actiongate.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_yaml_file,
)
from actiongate.config.merger import deep_merge, get_nested_value, set_nested_value
from actiongate.config.schema import (
    AccountConfig,
    AgentConfig,
    Config,
    GatewayConfig,
    PlatformSectionConfig,
    PlatformsConfig,
)

__all__ = [
    "AccountConfig",
    "AgentConfig",
    "Config",
    "ConfigurationError",
    "GatewayConfig",
    "PlatformSectionConfig",
    "PlatformsConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "get_nested_value",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
