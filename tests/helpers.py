"""Tools, message builders and fake transports shared by the tests.

Tool functions live at module level here so a session can resolve their
handles by importing this module.
"""

from __future__ import annotations

import asyncio
import io
import json
import socket
import time
from typing import Any

from mcp_session_proxy import tool, type_integer, type_string

CALLS: list[str] = []


def echo(message: str) -> str:
    CALLS.append(message)
    return message


def add(a: int, b: int = 0) -> int:
    CALLS.append(f"add {a} {b}")
    return a + b


def explode() -> str:
    raise RuntimeError("kaboom")


ECHO = tool(echo, "Echoes input", arguments={"message": type_string("Text to echo.")})
ADD = tool(
    add,
    "Adds two integers",
    arguments={"a": type_integer("First addend."), "b": type_integer("Second addend.")},
)
EXPLODE = tool(explode, "Always fails")


def request(method: str, msg_id: Any = 1, **params: Any) -> str:
    """Build a JSON-RPC request line."""
    data: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if msg_id is not None:
        data["id"] = msg_id
    if params:
        data["params"] = params
    return json.dumps(data)


def tool_call(name: str, msg_id: Any = 1, **arguments: Any) -> str:
    """Build a tools/call request line."""
    return request("tools/call", msg_id, name=name, arguments=arguments)


def free_base_port() -> int:
    """Return a base port whose session 1 address is currently free."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return port - 1


class ScriptedStdin:
    """stdin replacement that hands out lines, then reports EOF.

    EOF is held back until ``stdout`` holds ``expected_lines`` lines, so
    replies relayed from a session are written before the loop stops.
    """

    def __init__(
        self,
        lines: list[str],
        stdout: io.StringIO | None = None,
        expected_lines: int = 0,
        timeout: float = 5.0,
    ) -> None:
        self._lines = list(lines)
        self._stdout = stdout
        self._expected_lines = expected_lines
        self._timeout = timeout

    def readline(self) -> str:
        if self._lines:
            return self._lines.pop(0) + "\n"
        deadline = time.monotonic() + self._timeout
        while (
            self._stdout is not None
            and self._stdout.getvalue().count("\n") < self._expected_lines
            and time.monotonic() < deadline
        ):
            time.sleep(0.01)
        return ""


class FakeSession:
    """In-memory stand-in for SessionTransport.

    With ``auto_reply`` set, every sent tools/call is answered with a
    response echoing its id, as a cooperating session would.
    """

    def __init__(self, peers: int = 0, auto_reply: bool = False) -> None:
        self.peers = peers
        self.auto_reply = auto_reply
        self.sent: list[str] = []
        self.frames: asyncio.Queue[str] = asyncio.Queue()
        self.selected: list[int] = []
        self.descriptions: dict[int, str] = {}
        self.started = False
        self.closed = False

    async def start(self) -> None:
        self.started = True

    async def receive(self) -> str:
        return await self.frames.get()

    def send(self, message: str) -> None:
        self.sent.append(message)
        if self.auto_reply:
            data = json.loads(message)
            reply = {
                "jsonrpc": "2.0",
                "id": data["id"],
                "result": {"content": [{"type": "text", "text": "from session"}]},
            }
            self.frames.put_nowait(json.dumps(reply, separators=(",", ":")))

    def peer_count(self) -> int:
        return self.peers

    def probe(self, session: int) -> str | None:
        return self.descriptions.get(session)

    def select(self, session: int) -> None:
        self.selected.append(session)

    async def close(self) -> None:
        self.closed = True


def written(stdout: io.StringIO) -> list[dict[str, Any]]:
    """Decode every line the proxy wrote to the client."""
    return [json.loads(line) for line in stdout.getvalue().splitlines() if line]
