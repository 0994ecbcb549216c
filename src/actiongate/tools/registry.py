"""Registry of tools offered to the agent."""

import logging
from typing import Any, Optional

from actiongate.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Collection of tools the agent may invoke, keyed by tool name."""

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If the tool name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def unregister(self, name: str) -> bool:
        """Unregister a tool.

        Returns:
            True if the tool was unregistered, False if not found
        """
        if name in self._tools:
            del self._tools[name]
            logger.info(f"Unregistered tool: {name}")
            return True
        return False

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name, or None."""
        return self._tools.get(name)

    def list_tool_names(self) -> list[str]:
        """Names of all registered tools."""
        return list(self._tools.keys())

    def get_tool_definitions(self) -> list[dict[str, Any]]:
        """Tool definitions for every registered tool, ready for an AI provider.

        Definitions are rebuilt on each call so schemas reflect the current
        configuration.
        """
        return [tool.get_tool_definition() for tool in self._tools.values()]

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __repr__(self) -> str:
        tools = ", ".join(self._tools.keys())
        return f"<ToolRegistry tools=[{tools}]>"


# Global registry instance
_tool_registry: Optional[ToolRegistry] = None


def get_tool_registry() -> ToolRegistry:
    """Get the global tool registry instance."""
    global _tool_registry
    if _tool_registry is None:
        _tool_registry = ToolRegistry()
    return _tool_registry


def reset_tool_registry() -> None:
    """Reset the global tool registry instance.

    Useful for testing.
    """
    global _tool_registry
    _tool_registry = None
