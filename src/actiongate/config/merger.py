"""
Configuration merger for actiongate.

Implements deep merge with special array operations (+/- prefixes).
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries with array operation support.

    Merge rules:
    - Scalar values: override replaces base
    - Dicts: recursive deep merge
    - Arrays (default): override replaces base
    - Arrays with '+' prefix key: append to base array
    - Arrays with '-' prefix key: remove items from base array
    - null/None value: remove key from result

    Args:
        base: Base configuration dictionary.
        override: Override configuration dictionary.

    Returns:
        Merged configuration dictionary.

    Examples:
        >>> base = {"capabilities": ["inlineButtons"]}
        >>> override = {"+capabilities": ["reactions"]}
        >>> deep_merge(base, override)
        {"capabilities": ["inlineButtons", "reactions"]}
    """
    result = base.copy()

    for key, value in override.items():
        if key.startswith("+") and isinstance(value, list):
            actual_key = key[1:]
            existing = result.get(actual_key)
            if isinstance(existing, list):
                result[actual_key] = existing + [item for item in value if item not in existing]
            else:
                result[actual_key] = value

        elif key.startswith("-") and isinstance(value, list):
            actual_key = key[1:]
            existing = result.get(actual_key)
            if isinstance(existing, list):
                result[actual_key] = [item for item in existing if item not in value]

        elif value is None:
            result.pop(key, None)

        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)

        else:
            result[key] = value

    return result


def get_nested_value(config: dict[str, Any], key_path: str) -> Any:
    """
    Get a nested value from a configuration dictionary.

    Args:
        config: Configuration dictionary.
        key_path: Dot-separated key path (e.g., "gateway.url").

    Returns:
        The value at the key path, or None if not found.
    """
    current: Any = config
    for key in key_path.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return None
    return current


def set_nested_value(config: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Set a nested value in a configuration dictionary.

    Creates intermediate dictionaries as needed.

    Args:
        config: Configuration dictionary.
        key_path: Dot-separated key path (e.g., "gateway.url").
        value: Value to set.

    Returns:
        Modified configuration dictionary.
    """
    keys = key_path.split(".")
    current = config

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return config
