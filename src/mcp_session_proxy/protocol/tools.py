"""MCP tools/list and tools/call handlers.

Runs tools inside the current process and shapes their results according to
the MCP specification. The proxy uses this for local execution; a session
peer uses the same code to run forwarded calls.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

from mcp_session_proxy.protocol.jsonrpc import format_response
from mcp_session_proxy.tools.base import Tool, ToolResult
from mcp_session_proxy.tools.errors import ToolExecutionError
from mcp_session_proxy.tools.registry import ToolRegistry


class ArgumentValidationError(Exception):
    """Raised when tool arguments do not match the tool's input schema."""

    pass


def validate_arguments(tool: Tool, arguments: dict[str, Any]) -> None:
    """Validate tool arguments against the tool's input schema.

    Args:
        tool: Tool being called.
        arguments: Arguments supplied by the client.

    Raises:
        ArgumentValidationError: If validation fails.
    """
    validator = Draft202012Validator(tool.input_schema)
    errors = list(validator.iter_errors(arguments))
    if errors:
        # Report first error
        error = errors[0]
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        raise ArgumentValidationError(
            f"Invalid arguments for tool '{tool.name}' at '{path}': {error.message}"
        )


def call_tool(tool: Tool, arguments: dict[str, Any]) -> ToolResult:
    """Run a tool with the given arguments.

    Args:
        tool: Tool to run.
        arguments: Keyword arguments for the tool function.

    Returns:
        ToolResult wrapping the function's return value.

    Raises:
        ArgumentValidationError: If the arguments do not match the schema.
        ToolExecutionError: If the tool function raises.
    """
    validate_arguments(tool, arguments)
    try:
        value = tool.fn(**arguments)
    except Exception as e:
        raise ToolExecutionError(f"Tool '{tool.name}' execution failed: {e}") from e
    return ToolResult.from_value(value)


def execute_tool(tool: Tool, arguments: dict[str, Any]) -> ToolResult:
    """Run a tool, turning every failure into an error result.

    Args:
        tool: Tool to run.
        arguments: Tool arguments.

    Returns:
        ToolResult; ``is_error`` is set when validation or execution failed.
    """
    try:
        return call_tool(tool, arguments)
    except (ArgumentValidationError, ToolExecutionError) as e:
        return ToolResult.text(str(e), is_error=True)


def format_call_result(msg_id: Any, result: dict[str, Any]) -> str:
    """Format a tools/call response.

    A tool may hand back content that cannot be encoded as JSON; that is
    reported as an error result rather than raised.

    Args:
        msg_id: Request ID to echo back.
        result: Result in MCP tools/call format.

    Returns:
        JSON string.
    """
    try:
        return format_response(msg_id, result)
    except (TypeError, ValueError) as e:
        failure = ToolResult.text(f"Tool result is not JSON serializable: {e}", is_error=True)
        return format_response(msg_id, failure.to_dict())


class ToolsHandler:
    """Handles tools/list and tools/call MCP requests for local execution."""

    def __init__(self, registry: ToolRegistry) -> None:
        """Initialize the handler.

        Args:
            registry: Registry used to resolve tool names.
        """
        self._registry = registry

    def handle_list(self) -> dict[str, Any]:
        """Handle tools/list request.

        Returns:
            Result in MCP tools/list format.
        """
        return {"tools": self._registry.list()}

    def handle_call(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Handle tools/call request.

        Args:
            name: Name of the tool to call.
            arguments: Tool arguments.

        Returns:
            Result in MCP tools/call format.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        tool = self._registry.lookup(name)
        return execute_tool(tool, arguments).to_dict()


