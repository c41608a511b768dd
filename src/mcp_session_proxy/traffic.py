"""Traffic logging for the proxy.

The proxy is launched by the MCP client, so its stdout is the protocol stream
and its stderr is rarely visible. Every frame that passes through the proxy is
appended to a JSON Lines file instead.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

# Patterns for sensitive argument keys
SENSITIVE_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"credential", re.IGNORECASE),
    re.compile(r"private[_-]?key", re.IGNORECASE),
]


class Direction(Enum):
    """Which way a logged frame travelled."""

    FROM_CLIENT = "from_client"
    TO_CLIENT = "to_client"
    TO_SESSION = "to_session"
    FROM_SESSION = "from_session"


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name indicates sensitive data."""
    return any(pattern.search(key) for pattern in SENSITIVE_PATTERNS)


def sanitize_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Sanitize arguments by redacting sensitive values.

    Args:
        arguments: Original arguments dictionary.

    Returns:
        New dictionary with sensitive values redacted.
    """
    sanitized = {}
    for key, value in arguments.items():
        if _is_sensitive_key(key):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_arguments(value)
        else:
            sanitized[key] = value
    return sanitized


def redact_frame(text: str) -> str:
    """Redact sensitive tool arguments inside a JSON-RPC frame.

    Frames that are not JSON objects with ``params.arguments`` are returned
    unchanged.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return text
    if not isinstance(data, dict):
        return text
    params = data.get("params")
    if not isinstance(params, dict) or not isinstance(params.get("arguments"), dict):
        return text
    params = dict(params)
    params["arguments"] = sanitize_arguments(params["arguments"])
    data["params"] = params
    return json.dumps(data)


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class TrafficLog:
    """Append-only traffic log with JSON Lines format.

    The log file is flushed after each write so it can be tailed while the
    proxy runs.
    """

    def __init__(self, log_path: Path) -> None:
        """Initialize the traffic log.

        Args:
            log_path: Path to the log file.
        """
        self._log_path = log_path
        self._ensure_directory()
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        """Location of the log file."""
        return self._log_path

    def _ensure_directory(self) -> None:
        """Create log directory if it doesn't exist."""
        self._log_path.parent.mkdir(parents=True, exist_ok=True)

    def _write_line(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the log file and flush."""
        if self._file.closed:
            return
        self._file.write(json.dumps(data) + "\n")
        self._file.flush()

    def record(self, direction: Direction, message: str) -> None:
        """Log one frame.

        Args:
            direction: Which way the frame travelled.
            message: Frame text (sensitive tool arguments are redacted).
        """
        self._write_line(
            {
                "timestamp": _get_timestamp(),
                "direction": direction.value,
                "message": redact_frame(message),
            }
        )

    def note(self, event: str, **details: Any) -> None:
        """Log a proxy event that is not a frame (startup, session changes).

        Args:
            event: Short event name.
            **details: Extra fields for the log entry.
        """
        self._write_line({"timestamp": _get_timestamp(), "event": event, **details})

    def close(self) -> None:
        """Close the log file."""
        if self._file and not self._file.closed:
            self._file.close()

    def __enter__(self) -> TrafficLog:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
