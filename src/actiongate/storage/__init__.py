"""Filesystem locations used by actiongate."""

from actiongate.storage.paths import (
    find_project_config,
    get_actiongate_home,
    get_global_config_path,
)

__all__ = [
    "find_project_config",
    "get_actiongate_home",
    "get_global_config_path",
]
