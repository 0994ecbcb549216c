"""Base classes for agent tools."""

from abc import ABC, abstractmethod
from typing import Any

from actiongate.tools.models import ToolParameter, ToolResult


class Tool(ABC):
    """Base class for tools exposed to an AI agent.

    Each tool defines:
    - Name and description (for the AI to understand when to use it)
    - Input parameters (JSON schema)
    - Execution logic
    """

    def __init__(self):
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name (must be unique)."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for AI)."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters."""
        pass

    @property
    def is_dangerous(self) -> bool:
        """Whether the tool acts on the outside world and needs approval."""
        return False

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input."""
        properties = {}
        required = []
        for param in self.parameters:
            properties[param.name] = param.to_json_schema()
            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    def get_tool_definition(self) -> dict[str, Any]:
        """Get the complete tool definition for an AI provider.

        Returns:
            Tool definition in Anthropic format
        """
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.get_input_schema(),
        }

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with given parameters.

        Args:
            **kwargs: Tool parameters, plus the internal ``tool_call_id``

        Returns:
            ToolResult with output or error
        """
        pass

    def validate_input(self, **kwargs: Any) -> None:
        """Validate input parameters.

        Raises:
            ValueError: If parameters are unknown or required ones are missing
        """
        param_names = {p.name for p in self.parameters}
        required_params = {p.name for p in self.parameters if p.required}
        provided = set(kwargs.keys())

        # Internal parameters added by the agent loop
        internal_params = {"tool_call_id"}

        unknown = provided - param_names - internal_params
        if unknown:
            raise ValueError(f"Unknown parameters: {', '.join(sorted(unknown))}")

        missing = required_params - provided
        if missing:
            raise ValueError(f"Missing required parameters: {', '.join(sorted(missing))}")

    def _validate_definition(self) -> None:
        """Validate the tool definition.

        Raises:
            ValueError: If the tool definition is invalid
        """
        if not self.name:
            raise ValueError("Tool name cannot be empty")

        if not self.description:
            raise ValueError("Tool description cannot be empty")

        param_names = [p.name for p in self.parameters]
        if len(param_names) != len(set(param_names)):
            raise ValueError("Parameter names must be unique")

    def __str__(self) -> str:
        return f"Tool({self.name})"

    def __repr__(self) -> str:
        return f"<Tool name={self.name} dangerous={self.is_dangerous}>"
