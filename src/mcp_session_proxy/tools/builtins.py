"""Built-in session tools.

These tools manage which session receives forwarded calls, so they always run
inside the proxy process and their names are reserved.

Tools:
    - list_r_sessions: List the sessions currently available
    - select_r_session: Choose the session that receives forwarded calls
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp_session_proxy.tools.base import Tool, ToolResult, tool, type_integer

if TYPE_CHECKING:
    from mcp_session_proxy.session.transport import SessionTransport


class SessionTools:
    """Built-in tools backed by the session transport."""

    def __init__(self, session: SessionTransport, max_sessions: int) -> None:
        """Initialize with the transport the tools inspect and redirect.

        Args:
            session: The proxy's session transport.
            max_sessions: Highest session number to look for.
        """
        self._session = session
        self._max_sessions = max_sessions

    def get_tools(self) -> list[Tool]:
        """Return the built-in tool descriptors."""
        return [
            tool(
                self.list_r_sessions,
                (
                    "List the sessions available to this server. Each line starts with "
                    "the session number, which can be passed to select_r_session. "
                    "Call this before select_r_session to find a session to work in."
                ),
            ),
            tool(
                self.select_r_session,
                (
                    "Choose the session that runs subsequent tool calls. Use the "
                    "session number reported by list_r_sessions."
                ),
                arguments={
                    "session": type_integer("The session number to select.", minimum=1),
                },
            ),
        ]

    def list_r_sessions(self) -> ToolResult:
        """Probe every session address and describe the ones that answer."""
        lines = []
        for number in range(1, self._max_sessions + 1):
            description = self._session.probe(number)
            if description is not None:
                lines.append(description)
        if not lines:
            return ToolResult.text(
                "No sessions are running. Start one with `mcp-session-proxy session`."
            )
        return ToolResult.text("\n".join(lines))

    def select_r_session(self, session: int) -> ToolResult:
        """Redirect forwarded calls to another session."""
        if session > self._max_sessions or self._session.probe(session) is None:
            return ToolResult.text(
                f"Session {session} is not available. Call list_r_sessions to see "
                "the running sessions.",
                is_error=True,
            )
        self._session.select(session)
        return ToolResult.text(f"Selected session {session} successfully.")
