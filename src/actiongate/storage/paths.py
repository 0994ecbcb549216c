"""
Path utilities for actiongate.

Provides consistent path resolution for configuration files.
"""

import os
from pathlib import Path

PROJECT_DIR_NAME = ".actiongate"
PROJECT_CONFIG_NAME = "project.yaml"


def get_actiongate_home() -> Path:
    """
    Get the actiongate home directory.

    Resolution order:
    1. ACTIONGATE_HOME environment variable
    2. Default: ~/.actiongate

    Returns:
        Path to the actiongate home directory.
    """
    env_home = os.environ.get("ACTIONGATE_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".actiongate"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.actiongate/config.yaml
    """
    return get_actiongate_home() / "config.yaml"


def find_project_config(start_path: Path | None = None) -> Path | None:
    """
    Find the project configuration file by traversing up the directory tree.

    Looks for .actiongate/project.yaml starting from the given path
    (or current directory) and moving up to the root.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to the project config if found, None otherwise.
    """
    current = Path.cwd() if start_path is None else Path(start_path).resolve()

    while True:
        candidate = current / PROJECT_DIR_NAME / PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent
