"""Tool registry - maps tool names to descriptors.

The registry is built once at startup and read-only afterwards. Two names are
reserved for the built-in session tools, which always run inside the proxy.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from mcp_session_proxy.tools.base import Tool
from mcp_session_proxy.tools.errors import (
    InvalidToolSource,
    ReservedNameCollision,
    ToolNotFoundError,
)
from mcp_session_proxy.tools.loader import load_tool_source

RESERVED_TOOL_NAMES = frozenset({"list_r_sessions", "select_r_session"})


def is_reserved(name: str | None) -> bool:
    """Check whether a tool name belongs to a built-in tool."""
    return name in RESERVED_TOOL_NAMES


def _resolve_source(tools_or_source: Any) -> list[Any]:
    """Turn the caller's tools argument into a plain list."""
    if tools_or_source is None:
        return []
    if isinstance(tools_or_source, str | Path):
        return load_tool_source(tools_or_source)
    if isinstance(tools_or_source, Mapping):
        return list(tools_or_source.values())
    if isinstance(tools_or_source, list | tuple):
        return list(tools_or_source)
    raise InvalidToolSource(
        "Tools must be a list of tools or a path to a .py file that defines one, "
        f"not {type(tools_or_source).__name__}"
    )


def _check_tools(tools: list[Any]) -> None:
    """Validate caller-supplied tools before anything is registered.

    Raises:
        InvalidToolSource: For non-tools, duplicate names or invalid schemas.
        ReservedNameCollision: If a tool uses a reserved name.
    """
    seen: set[str] = set()
    for item in tools:
        if not isinstance(item, Tool):
            raise InvalidToolSource(
                f"Expected a Tool, got {type(item).__name__}; build tools with tool()"
            )
        if is_reserved(item.name):
            raise ReservedNameCollision(
                f"The tool name '{item.name}' is reserved by mcp-session-proxy"
            )
        if item.name in seen:
            raise InvalidToolSource(f"Duplicate tool name: {item.name}")
        seen.add(item.name)
        try:
            Draft202012Validator.check_schema(item.input_schema)
        except SchemaError as e:
            raise InvalidToolSource(
                f"Invalid input schema for tool '{item.name}': {e.message}"
            ) from e


class ToolRegistry:
    """Process-wide mapping from tool name to tool.

    Built with ``ToolRegistry.register``; user tools come first in listing
    order, followed by the built-in tools.
    """

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        """Initialize the registry.

        Args:
            tools: Tools to index. Use ``register`` to apply the
                reserved-name checks.
        """
        self._tools: dict[str, Tool] = {t.name: t for t in tools}

    @classmethod
    def register(
        cls,
        tools_or_source: Any = None,
        builtins: Iterable[Tool] = (),
    ) -> ToolRegistry:
        """Build a registry from caller-supplied tools plus the built-ins.

        Nothing is registered unless every supplied tool is acceptable.

        Args:
            tools_or_source: A list or mapping of tools, a path to a tool
                source file, or None.
            builtins: The built-in tools, which may use reserved names.

        Returns:
            The populated registry.

        Raises:
            InvalidToolSource: If the input is neither a tool list nor a
                loadable source of one.
            SourceEvaluationFailed: If evaluating a tool source file raises.
            ReservedNameCollision: If a supplied tool uses a reserved name.
        """
        tools = _resolve_source(tools_or_source)
        _check_tools(tools)
        return cls([*tools, *builtins])

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> list[str]:
        """Registered tool names in listing order."""
        return list(self._tools)

    def lookup(self, name: str | None) -> Tool:
        """Find a tool by name.

        Args:
            name: Name of the tool.

        Returns:
            The registered tool.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        if name is None or name not in self._tools:
            raise ToolNotFoundError(f"Tool not found: {name}")
        return self._tools[name]

    def list(self) -> list[dict[str, Any]]:
        """List all tools in MCP format.

        Returns:
            List of tool definitions for tools/list.
        """
        return [t.to_dict() for t in self._tools.values()]

    def is_reserved(self, name: str | None) -> bool:
        """Check whether a tool name belongs to a built-in tool."""
        return is_reserved(name)
