"""MCP protocol layer for JSON-RPC communication with the client."""

from mcp_session_proxy.protocol.capabilities import MCP_PROTOCOL_VERSION, capabilities
from mcp_session_proxy.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    Message,
    Method,
    decode,
    format_error,
    format_response,
)
from mcp_session_proxy.protocol.tools import ToolsHandler, execute_tool
from mcp_session_proxy.protocol.transport import ClientTransport

__all__ = [
    "ClientTransport",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "Message",
    "Method",
    "PARSE_ERROR",
    "ToolsHandler",
    "capabilities",
    "decode",
    "execute_tool",
    "format_error",
    "format_response",
]
