"""Session forwarder - hands prepared tool calls to the attached session."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mcp_session_proxy.protocol.jsonrpc import Message
from mcp_session_proxy.session.errors import ForwardingError, SessionError
from mcp_session_proxy.session.handles import encode_handle
from mcp_session_proxy.tools.base import Tool
from mcp_session_proxy.traffic import Direction

if TYPE_CHECKING:
    from mcp_session_proxy.session.transport import SessionTransport
    from mcp_session_proxy.traffic import TrafficLog


@dataclass
class PreparedCall:
    """A tools/call message together with the tool it resolved to."""

    message: Message
    tool: Tool

    def to_frame(self) -> str:
        """Serialize for the session: the original message plus a ``tool`` handle.

        Raises:
            EncodingFailed: If the tool's function cannot be referenced.
        """
        data: dict[str, Any] = self.message.to_dict()
        data["tool"] = encode_handle(self.tool)
        return json.dumps(data)


class SessionForwarder:
    """Sends prepared calls to the session without waiting for a reply.

    The session answers on its own schedule; its reply is relayed to the
    client by the event loop, not by the forwarder.
    """

    def __init__(self, session: SessionTransport, traffic: TrafficLog | None = None) -> None:
        """Initialize the forwarder.

        Args:
            session: Transport to the attached session.
            traffic: Optional traffic log.
        """
        self._session = session
        self._traffic = traffic

    def forward(self, prepared: PreparedCall) -> None:
        """Write one prepared call to the session.

        Args:
            prepared: The call to forward.

        Raises:
            EncodingFailed: If the tool handle cannot be encoded.
            ForwardingError: If the session transport rejects the frame.
        """
        frame = prepared.to_frame()
        if self._traffic is not None:
            self._traffic.record(Direction.TO_SESSION, frame)
        try:
            self._session.send(frame)
        except (SessionError, OSError) as e:
            raise ForwardingError(f"Could not forward to session: {e}") from e
