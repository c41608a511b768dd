"""STDIO transport for the client side of the proxy.

Reads JSON-RPC lines from stdin and writes responses to stdout. Logging goes
to stderr to avoid corrupting the protocol stream.
"""

from __future__ import annotations

import asyncio
import sys
from typing import BinaryIO, TextIO


class ClientTransport:
    """Line-oriented transport to the MCP client.

    ``receive`` is awaitable so the event loop can wait on the client and the
    session at the same time; the blocking ``readline`` runs in a worker thread.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
            stderr: Log stream (defaults to sys.stderr).
        """
        # Held so a text wrapper does not close its buffer when collected
        self._text_stdin = stdin or sys.stdin
        # Lines are decoded one at a time so invalid UTF-8 spoils only its own line
        self._stdin: TextIO | BinaryIO = getattr(self._text_stdin, "buffer", self._text_stdin)
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr

    def read_message(self) -> str | None:
        """Read a message from stdin.

        Reads lines until a non-empty line is found. Bytes that are not valid
        UTF-8 become U+FFFD, so such a line fails JSON decoding and is dropped
        by the router instead of ending the stream.

        Returns:
            Message string (stripped), or None on EOF.
        """
        while True:
            try:
                line = self._stdin.readline()
            except (OSError, ValueError):
                # Closed stream
                return None

            if not line:  # EOF
                return None

            if isinstance(line, bytes):
                line = line.decode("utf-8", errors="replace")
            line = line.strip()
            if line:  # Skip empty lines
                return line

    async def receive(self) -> str | None:
        """Wait for the next client line without blocking the event loop.

        Returns:
            Message string, or None once the client closed its end.
        """
        return await asyncio.to_thread(self.read_message)

    def write_message(self, message: str) -> None:
        """Write a message to stdout.

        Args:
            message: JSON string to write.
        """
        if not message.endswith("\n"):
            message += "\n"
        self._stdout.write(message)
        self._stdout.flush()

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"[mcp-session-proxy] {message}\n")
        self._stderr.flush()
