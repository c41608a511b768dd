"""Session peer - makes a Python process available to the proxy.

A session listens on the first free session address. The proxy dials it,
sends ``tools/call`` messages carrying a tool handle, and relays whatever the
session answers straight back to the MCP client. Tools therefore run inside
the session process and see its live state.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

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
from mcp_session_proxy.protocol.tools import execute_tool, format_call_result
from mcp_session_proxy.session.errors import HandleResolutionError, SessionError
from mcp_session_proxy.session.handles import decode_handle
from mcp_session_proxy.session.transport import DESCRIBE_METHOD, FRAME_LIMIT
from mcp_session_proxy.tools.base import Tool
from mcp_session_proxy.tools.loader import load_tool_source

if TYPE_CHECKING:
    from mcp_session_proxy.config import ProxyConfig

# Forwarded calls carry no schema; the session accepts any argument object
_ANY_ARGUMENTS = {"type": "object"}


class SessionPeer:
    """Listening side of the session transport."""

    def __init__(self, config: ProxyConfig, description: str | None = None) -> None:
        """Initialize the peer.

        Args:
            config: Proxy configuration (session addresses).
            description: Text shown by list_r_sessions (defaults to the
                working directory and process id).
        """
        self._config = config
        self._description = description
        self._server: asyncio.Server | None = None
        self._writers: set[asyncio.StreamWriter] = set()
        self.session: int | None = None

    @property
    def description(self) -> str:
        """How this session describes itself to list_r_sessions."""
        detail = self._description or f"{os.getcwd()} (pid {os.getpid()})"
        return f"{self.session}: {detail}"

    async def start(self) -> int:
        """Listen on the first free session address.

        Returns:
            The session number taken.

        Raises:
            SessionError: If every session address is in use.
        """
        host = self._config.session_host
        for number in range(1, self._config.max_sessions + 1):
            try:
                self._server = await asyncio.start_server(
                    self._handle_connection,
                    host,
                    self._config.session_port(number),
                    limit=FRAME_LIMIT,
                )
            except OSError:
                continue
            self.session = number
            return number
        raise SessionError(
            f"All {self._config.max_sessions} session addresses on {host} are in use"
        )

    async def serve_forever(self) -> None:
        """Serve connections until cancelled."""
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        """Stop listening and drop every open connection."""
        for writer in list(self._writers):
            writer.close()
        self._writers.clear()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

    async def _handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self._writers.add(writer)
        try:
            while True:
                try:
                    line = await reader.readline()
                except (ConnectionError, ValueError):
                    break
                if not line:
                    break
                reply = self.handle_frame(line.decode("utf-8", errors="replace").strip())
                if reply is not None:
                    writer.write(reply.encode("utf-8") + b"\n")
                    await writer.drain()
        except ConnectionError:
            pass  # Proxy went away mid-reply
        finally:
            self._writers.discard(writer)
            writer.close()

    def handle_frame(self, text: str) -> str | None:
        """Handle one frame from the proxy.

        Args:
            text: Frame text.

        Returns:
            The reply frame, or None when no reply is due.
        """
        try:
            message = decode(text)
        except JsonRpcError as e:
            return format_error(e.msg_id, e.code, e.message)

        if message is None:
            return None

        if message.method == DESCRIBE_METHOD:
            reply = format_response(
                message.id, {"session": self.session, "description": self.description}
            )
        elif Method.parse(message.method) is Method.TOOLS_CALL:
            reply = self._run_tool(message)
        else:
            reply = format_error(message.id, METHOD_NOT_FOUND, "Method not found")

        return None if message.is_notification else reply

    def _run_tool(self, message: Message) -> str:
        handle = (message.raw or {}).get("tool")
        try:
            fn = decode_handle(handle)
        except HandleResolutionError as e:
            return format_error(message.id, INTERNAL_ERROR, str(e))

        name = message.tool_name or getattr(fn, "__name__", "tool")
        result = execute_tool(
            Tool(name=name, description="", input_schema=_ANY_ARGUMENTS, fn=fn),
            message.arguments,
        )
        return format_call_result(message.id, result.to_dict())


async def _serve_session(peer: SessionPeer) -> None:
    number = await peer.start()
    print(f"[mcp-session-proxy] Session {number} ready", file=sys.stderr)
    try:
        await peer.serve_forever()
    finally:
        await peer.close()


def run_session(
    config: ProxyConfig,
    description: str | None = None,
    tools_source: str | Path | None = None,
) -> None:
    """Run a session peer until interrupted.

    Args:
        config: Proxy configuration.
        description: Text shown by list_r_sessions.
        tools_source: Tool source file to load up front, so forwarded calls
            run against this process's copy of its module state.

    Raises:
        SessionError: If every session address is in use.
        ToolRegistrationError: If the tool source cannot be loaded.
    """
    if tools_source is not None:
        load_tool_source(tools_source)
    asyncio.run(_serve_session(SessionPeer(config, description=description)))
