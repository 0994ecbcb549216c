"""Agent tool surface for actiongate.

The message tool is the single operation an agent sees: its schema is
recomputed from live capabilities and every call goes through the action
router. Tool implementations live in ``actiongate.tools.builtin``.
"""

from actiongate.tools.base import Tool
from actiongate.tools.models import ToolParameter, ToolResult
from actiongate.tools.registry import ToolRegistry, get_tool_registry, reset_tool_registry

__all__ = [
    "Tool",
    "ToolParameter",
    "ToolResult",
    "ToolRegistry",
    "get_tool_registry",
    "reset_tool_registry",
]
