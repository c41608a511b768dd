"""mcp-session-proxy: serve Python tools over MCP, optionally inside a live session."""

__version__ = "0.1.0"

from mcp_session_proxy.tools.base import (  # noqa: E402
    Tool,
    ToolResult,
    tool,
    type_boolean,
    type_integer,
    type_number,
    type_string,
)

__all__ = [
    "Tool",
    "ToolResult",
    "__version__",
    "tool",
    "type_boolean",
    "type_integer",
    "type_number",
    "type_string",
]
