"""Data models for the agent tool surface."""

from typing import Any, Optional

from pydantic import BaseModel


class ToolParameter(BaseModel):
    """Defines a parameter for a tool."""

    name: str
    type: str  # "string", "integer", "number", "boolean", "array", "object"
    description: str
    required: bool = True
    default: Optional[Any] = None
    enum: Optional[list[str]] = None  # For restricted choices
    items: Optional[dict[str, Any]] = None  # Element schema for arrays

    def to_json_schema(self) -> dict[str, Any]:
        """JSON schema fragment for this parameter."""
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum:
            schema["enum"] = self.enum
        if self.items is not None:
            schema["items"] = self.items
        if self.default is not None:
            schema["default"] = self.default
        return schema


class ToolResult(BaseModel):
    """Represents the result of tool execution."""

    tool_call_id: str  # Tool use id from the AI response
    output: str  # Tool output (JSON-encoded dispatch result)
    error: Optional[str] = None  # Error message if failed
    is_error: bool = False  # Whether execution failed

    def __str__(self) -> str:
        """String representation."""
        if self.is_error:
            return f"Error: {self.error}"
        return self.output[:200] + ("..." if len(self.output) > 200 else "")
