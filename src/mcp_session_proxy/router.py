"""Router - decides what happens to each message from the client.

Integrates the codec, the tool registry, local execution and the session
forwarder. Each client line produces at most one reply; forwarded calls
produce none here because the session answers them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp_session_proxy.protocol.capabilities import capabilities
from mcp_session_proxy.protocol.jsonrpc import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcError,
    Message,
    Method,
    decode,
    format_error,
    format_response,
)
from mcp_session_proxy.protocol.tools import ToolsHandler, format_call_result
from mcp_session_proxy.session.errors import ForwardingError
from mcp_session_proxy.session.forwarder import PreparedCall
from mcp_session_proxy.tools.errors import ToolNotFoundError
from mcp_session_proxy.traffic import Direction

if TYPE_CHECKING:
    from mcp_session_proxy.context import ProxyContext


class Router:
    """Routes client messages to a local handler or to the session.

    Holds no state of its own beyond the context: the registry is read-only
    and the number of attached sessions is asked for on every tool call.
    """

    def __init__(self, context: ProxyContext) -> None:
        """Initialize the router.

        Args:
            context: The proxy context.
        """
        self._context = context
        self._tools_handler = ToolsHandler(context.registry)

    def dispatch(self, line: str) -> None:
        """Handle one client line and write the reply, if any, to the client.

        Args:
            line: Raw line received from the client.
        """
        traffic = self._context.traffic
        traffic.record(Direction.FROM_CLIENT, line)

        reply = self.handle_message(line)
        if reply is not None:
            traffic.record(Direction.TO_CLIENT, reply)
            self._context.client.write_message(reply)

    def handle_message(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string, or None when nothing should be sent (invalid
            JSON, notifications and forwarded calls).
        """
        try:
            message = decode(raw_message)
        except JsonRpcError as e:
            return format_error(e.msg_id, e.code, e.message)

        if message is None:
            return None

        reply = self._route(message)
        if message.is_notification:
            return None
        return reply

    def _route(self, message: Message) -> str | None:
        match Method.parse(message.method):
            case Method.INITIALIZE:
                return format_response(message.id, capabilities())
            case Method.TOOLS_LIST:
                return format_response(message.id, self._tools_handler.handle_list())
            case Method.TOOLS_CALL:
                return self._handle_tools_call(message)
            case Method.INITIALIZED:
                self._context.client.log("Client initialized")
                return None
            case _:
                return format_error(message.id, METHOD_NOT_FOUND, "Method not found")

    def _handle_tools_call(self, message: Message) -> str | None:
        """Execute a tool call locally or forward it to the session.

        Built-in tools, and every tool while no session is attached, run
        locally. This check comes before the name is resolved.
        """
        name = message.tool_name
        registry = self._context.registry

        if registry.is_reserved(name) or self._context.session.peer_count() == 0:
            try:
                result = self._tools_handler.handle_call(name, message.arguments)
            except ToolNotFoundError:
                return format_error(message.id, METHOD_NOT_FOUND, "Method not found")
            return format_call_result(message.id, result)

        try:
            tool = registry.lookup(name)
        except ToolNotFoundError:
            return format_error(message.id, METHOD_NOT_FOUND, "Method not found")

        try:
            self._context.forwarder.forward(PreparedCall(message=message, tool=tool))
        except ForwardingError as e:
            # Covers EncodingFailed; only this request fails
            self._context.client.log(str(e))
            return format_error(message.id, INTERNAL_ERROR, str(e))
        return None
