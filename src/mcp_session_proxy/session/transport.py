"""Session transport - the proxy's connection to an attached session peer.

The proxy dials out to the address of the selected session and keeps
redialing until a peer is listening there. Frames are newline-terminated
UTF-8 text in both directions.

A frame is relayed to the client as the text of its line: the ``\\n`` or
``\\r\\n`` terminator is dropped (the client transport adds ``\\n``) and bytes
that are not UTF-8 arrive as U+FFFD. Peers that write UTF-8 JSON lines are
therefore relayed byte-for-byte.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import socket
from typing import TYPE_CHECKING

from mcp_session_proxy.session.errors import SessionNotAttached

if TYPE_CHECKING:
    from mcp_session_proxy.config import ProxyConfig

# Method a session answers with a short description of itself
DESCRIBE_METHOD = "session/describe"

# Largest frame accepted from a session (16 MiB)
FRAME_LIMIT = 16 * 1024 * 1024


def describe_request(request_id: int | str = "describe") -> str:
    """Build the frame that asks a session to describe itself."""
    return json.dumps({"jsonrpc": "2.0", "id": request_id, "method": DESCRIBE_METHOD})


class SessionTransport:
    """Dialing connection to one session peer.

    ``receive`` never completes while no peer is attached; frames only arrive
    once a peer accepts the connection.
    """

    def __init__(self, config: ProxyConfig, session: int = 1) -> None:
        """Initialize the transport.

        Args:
            config: Proxy configuration (session addresses and timings).
            session: Number of the session to dial first.
        """
        self._config = config
        self._session = session
        self._frames: asyncio.Queue[str] = asyncio.Queue()
        self._writer: asyncio.StreamWriter | None = None
        self._dialer: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def session(self) -> int:
        """Number of the session currently dialed."""
        return self._session

    @property
    def address(self) -> tuple[str, int]:
        """Host and port of the session currently dialed."""
        return self._config.session_host, self._config.session_port(self._session)

    async def start(self) -> None:
        """Begin dialing the selected session."""
        self._closed = False
        self._start_dialer()

    def _start_dialer(self) -> None:
        self._dialer = asyncio.get_running_loop().create_task(self._dial_loop(*self.address))

    async def _dial_loop(self, host: str, port: int) -> None:
        """Connect, pump frames into the queue, and redial when the peer goes."""
        while not self._closed:
            try:
                reader, writer = await asyncio.open_connection(host, port, limit=FRAME_LIMIT)
            except OSError:
                await asyncio.sleep(self._config.redial_interval)
                continue

            self._writer = writer
            try:
                await self._pump(reader)
            finally:
                if self._writer is writer:
                    self._writer = None
                writer.close()

            if not self._closed:
                await asyncio.sleep(self._config.redial_interval)

    async def _pump(self, reader: asyncio.StreamReader) -> None:
        while True:
            try:
                line = await reader.readline()
            except (ConnectionError, ValueError):
                # Reset by peer, or a frame over FRAME_LIMIT
                return
            if not line:  # Peer detached
                return
            text = line.decode("utf-8", errors="replace").rstrip("\r\n")
            if text:
                self._frames.put_nowait(text)

    async def receive(self) -> str:
        """Wait for the next frame from the session.

        Returns:
            Frame text without its line terminator.
        """
        return await self._frames.get()

    def send(self, message: str) -> None:
        """Write one frame to the attached session.

        Args:
            message: Frame text (a single line of JSON).

        Raises:
            SessionNotAttached: If no session peer is attached.
        """
        writer = self._writer
        if writer is None or writer.is_closing():
            raise SessionNotAttached(f"No session attached at {self.address[0]}:{self.address[1]}")
        writer.write(message.encode("utf-8") + b"\n")

    def peer_count(self) -> int:
        """Number of session peers attached right now (0 or 1)."""
        writer = self._writer
        return 0 if writer is None or writer.is_closing() else 1

    def probe(self, session: int) -> str | None:
        """Ask the session with the given number to describe itself.

        This blocks for at most ``probe_timeout`` seconds per attempt.

        Args:
            session: Session number to probe.

        Returns:
            The session's description, or None when nothing answers.
        """
        address = (self._config.session_host, self._config.session_port(session))
        try:
            with socket.create_connection(address, timeout=self._config.probe_timeout) as sock:
                sock.sendall(describe_request().encode("utf-8") + b"\n")
                with sock.makefile("r", encoding="utf-8") as stream:
                    line = stream.readline()
        except OSError:
            return None

        try:
            reply = json.loads(line)
        except ValueError:
            return None
        result = reply.get("result") if isinstance(reply, dict) else None
        if not isinstance(result, dict):
            return None
        return str(result.get("description", session))

    def select(self, session: int) -> None:
        """Point the transport at another session.

        The current connection is dropped and the new address is dialed in
        the background. Must be called from within the running event loop.

        Args:
            session: Session number to dial.
        """
        self._session = session
        if self._dialer is not None:
            self._dialer.cancel()
        if self._writer is not None:
            self._writer.close()
            self._writer = None
        if not self._closed:
            self._start_dialer()

    async def close(self) -> None:
        """Release the connection whether or not a peer is attached."""
        self._closed = True
        if self._dialer is not None:
            self._dialer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._dialer
            self._dialer = None
        if self._writer is not None:
            self._writer.close()
            self._writer = None
