"""Tool descriptors and the tool registry."""

from mcp_session_proxy.tools.base import (
    Tool,
    ToolResult,
    tool,
    type_boolean,
    type_integer,
    type_number,
    type_string,
)
from mcp_session_proxy.tools.errors import (
    InvalidToolSource,
    ReservedNameCollision,
    SourceEvaluationFailed,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistrationError,
)
from mcp_session_proxy.tools.loader import load_tool_source
from mcp_session_proxy.tools.registry import RESERVED_TOOL_NAMES, ToolRegistry

__all__ = [
    "InvalidToolSource",
    "RESERVED_TOOL_NAMES",
    "ReservedNameCollision",
    "SourceEvaluationFailed",
    "Tool",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "ToolRegistry",
    "ToolResult",
    "load_tool_source",
    "tool",
    "type_boolean",
    "type_integer",
    "type_number",
    "type_string",
]
