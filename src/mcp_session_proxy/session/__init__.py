"""Session side of the proxy: transport, forwarding and the attachable peer."""

from mcp_session_proxy.session.errors import (
    EncodingFailed,
    ForwardingError,
    HandleResolutionError,
    SessionError,
    SessionNotAttached,
)
from mcp_session_proxy.session.forwarder import PreparedCall, SessionForwarder
from mcp_session_proxy.session.handles import decode_handle, encode_handle
from mcp_session_proxy.session.peer import SessionPeer, run_session
from mcp_session_proxy.session.transport import SessionTransport

__all__ = [
    "EncodingFailed",
    "ForwardingError",
    "HandleResolutionError",
    "PreparedCall",
    "SessionError",
    "SessionForwarder",
    "SessionNotAttached",
    "SessionPeer",
    "SessionTransport",
    "decode_handle",
    "encode_handle",
    "run_session",
]
