"""Exceptions raised by the session side of the proxy."""

from __future__ import annotations


class SessionError(Exception):
    """Base class for session transport errors."""

    pass


class SessionNotAttached(SessionError):
    """Raised when a frame is sent while no session peer is attached."""

    pass


class ForwardingError(Exception):
    """Raised when a tool call cannot be forwarded to a session."""

    pass


class EncodingFailed(ForwardingError):
    """Raised when a tool's function cannot be encoded for a session."""

    pass


class HandleResolutionError(Exception):
    """Raised when a session cannot resolve a forwarded tool handle."""

    pass
