"""Tool descriptor and result data structures.

A tool pairs a plain Python callable with the JSON Schema an MCP client uses
to call it.

Example:
    import random

    from mcp_session_proxy.tools import tool, type_integer, type_number

    def draw_normal(n: int, mean: float = 0.0, sd: float = 1.0) -> list[float]:
        return [random.gauss(mean, sd) for _ in range(n)]

    tool_normal = tool(
        draw_normal,
        "Draw numbers from a random normal distribution",
        arguments={
            "n": type_integer("The number of observations. Must be a positive integer."),
            "mean": type_number("The mean value of the distribution."),
            "sd": type_number("The standard deviation of the distribution."),
        },
    )
"""

from __future__ import annotations

import inspect
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Tool:
    """An invocable tool known to the registry."""

    name: str
    description: str
    input_schema: dict[str, Any]
    fn: Callable[..., Any] = field(compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        The schema's own ``description`` member duplicates the tool
        description and is left out.

        Returns:
            Dictionary in MCP tools/list format.
        """
        schema = {k: v for k, v in self.input_schema.items() if k != "description"}
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": schema,
        }


@dataclass
class ToolResult:
    """Result of a tool execution."""

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResult:
        """Build a result holding a single text item."""
        return cls(content=[{"type": "text", "text": text}], is_error=is_error)

    @classmethod
    def from_value(cls, value: Any) -> ToolResult:
        """Wrap whatever a tool function returned.

        Strings pass through, ToolResults are kept, anything else is
        rendered as JSON (falling back to ``str`` for non-JSON values).
        """
        if isinstance(value, ToolResult):
            return value
        if isinstance(value, str):
            return cls.text(value)
        try:
            return cls.text(json.dumps(value))
        except (TypeError, ValueError):
            return cls.text(str(value))

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }


def _type(json_type: str, description: str, **extra: Any) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": json_type, "description": description}
    schema.update(extra)
    return schema


def type_integer(description: str, **extra: Any) -> dict[str, Any]:
    """Schema fragment for an integer argument."""
    return _type("integer", description, **extra)


def type_number(description: str, **extra: Any) -> dict[str, Any]:
    """Schema fragment for a numeric argument."""
    return _type("number", description, **extra)


def type_string(description: str, **extra: Any) -> dict[str, Any]:
    """Schema fragment for a string argument."""
    return _type("string", description, **extra)


def type_boolean(description: str, **extra: Any) -> dict[str, Any]:
    """Schema fragment for a boolean argument."""
    return _type("boolean", description, **extra)


def tool(
    fn: Callable[..., Any],
    description: str,
    arguments: dict[str, dict[str, Any]] | None = None,
    name: str | None = None,
) -> Tool:
    """Describe a Python callable as a tool.

    Args:
        fn: The function to run when the tool is called.
        description: What the tool does, shown to the client.
        arguments: Mapping of argument name to JSON Schema fragment.
        name: Tool name (defaults to ``fn.__name__``).

    Returns:
        The tool descriptor.

    Raises:
        ValueError: If no name can be determined.
    """
    arguments = arguments or {}
    tool_name = name or getattr(fn, "__name__", None)
    if not tool_name or tool_name == "<lambda>":
        raise ValueError("Tool name is required for anonymous functions")

    # Arguments without a default in the signature are required
    required = []
    try:
        parameters = inspect.signature(fn).parameters
    except (TypeError, ValueError):
        parameters = {}
    for arg_name in arguments:
        parameter = parameters.get(arg_name)
        if parameter is not None and parameter.default is inspect.Parameter.empty:
            required.append(arg_name)

    schema: dict[str, Any] = {
        "type": "object",
        "description": description,
        "properties": dict(arguments),
    }
    if required:
        schema["required"] = required

    return Tool(name=tool_name, description=description, input_schema=schema, fn=fn)
