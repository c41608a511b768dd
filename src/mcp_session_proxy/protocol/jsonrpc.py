"""JSON-RPC 2.0 message decoding and formatting.

Client frames are single lines of JSON. A line that is not valid JSON is
dropped without a reply; a JSON value that cannot be a request is answered
with an Invalid Request error.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcError(Exception):
    """JSON-RPC error with code, message and the id of the offending request."""

    def __init__(
        self,
        code: int,
        message: str,
        msg_id: Any | None = None,
        data: Any | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            msg_id: Id of the request the error answers, if known.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.msg_id = msg_id
        self.data = data


class Method(Enum):
    """The closed set of methods the router understands."""

    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    INITIALIZED = "notifications/initialized"

    @classmethod
    def parse(cls, name: str) -> Method | None:
        """Return the member for ``name``, or None for an unrecognized method."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass
class Message:
    """A decoded JSON-RPC request or notification.

    ``raw`` keeps the whole decoded object so that members the router does
    not interpret survive forwarding.
    """

    method: str
    params: Any = None
    id: Any = None
    has_id: bool = False
    raw: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        """A message without an id never receives a reply."""
        return not self.has_id

    @property
    def tool_name(self) -> str | None:
        """Name of the tool a ``tools/call`` message targets."""
        if isinstance(self.params, dict):
            name = self.params.get("name")
            if isinstance(name, str):
                return name
        return None

    @property
    def arguments(self) -> dict[str, Any]:
        """Arguments of a ``tools/call`` message (empty when absent)."""
        if isinstance(self.params, dict):
            arguments = self.params.get("arguments")
            if isinstance(arguments, dict):
                return arguments
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert back to a JSON-RPC object."""
        if self.raw is not None:
            return dict(self.raw)
        data: dict[str, Any] = {"jsonrpc": "2.0", "method": self.method}
        if self.has_id:
            data["id"] = self.id
        if self.params is not None:
            data["params"] = self.params
        return data


def decode(raw: str) -> Message | None:
    """Decode one client line.

    Args:
        raw: One line of text from the client.

    Returns:
        The decoded message, or None when the text is not valid JSON.

    Raises:
        JsonRpcError: If the JSON value is not an object with a string method.
    """
    try:
        data = json.loads(raw)
    except ValueError:
        # Blank lines and fragments of multi-line JSON land here
        return None

    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request")

    msg_id = data.get("id")
    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request", msg_id=msg_id)

    return Message(
        method=method,
        params=data.get("params"),
        id=msg_id,
        has_id="id" in data and msg_id is not None,
        raw=data,
    )


def format_response(msg_id: Any, result: Any) -> str:
    """Format a successful JSON-RPC response.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        JSON string.
    """
    response = {
        "jsonrpc": "2.0",
        "id": msg_id,
        "result": result,
    }
    return json.dumps(response)


def format_error(
    msg_id: Any | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> str:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None when the request carried none).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        JSON string.
    """
    error_obj: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error_obj["data"] = data

    response = {
        "jsonrpc": "2.0",
        "id": msg_id,
        "error": error_obj,
    }
    return json.dumps(response)
