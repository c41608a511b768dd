"""MCP initialize handshake payload.

The proxy negotiates nothing: every ``initialize`` request receives the same
static capabilities descriptor.
"""

from __future__ import annotations

import copy
from typing import Any

from mcp_session_proxy import __version__

MCP_PROTOCOL_VERSION = "2024-11-05"

SERVER_NAME = "mcp-session-proxy"

INSTRUCTIONS = (
    "This server runs Python tools. When a session is attached, tools run inside "
    "that session and can see its live state. Use list_r_sessions and "
    "select_r_session to choose the session."
)

_CAPABILITIES: dict[str, Any] = {
    "protocolVersion": MCP_PROTOCOL_VERSION,
    "capabilities": {
        "prompts": {"listChanged": False},
        "resources": {"subscribe": False, "listChanged": False},
        "tools": {"listChanged": False},
    },
    "serverInfo": {"name": SERVER_NAME, "version": __version__},
    "instructions": INSTRUCTIONS,
}


def capabilities() -> dict[str, Any]:
    """Return the initialize result.

    Returns:
        A fresh copy of the capabilities descriptor, so callers cannot
        alter what later ``initialize`` requests see.
    """
    return copy.deepcopy(_CAPABILITIES)
