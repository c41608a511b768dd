"""Exceptions raised while building or using the tool registry."""

from __future__ import annotations


class ToolRegistrationError(Exception):
    """Raised when the tool registry cannot be built."""

    pass


class InvalidToolSource(ToolRegistrationError):
    """Raised when tools are neither a tool list nor a loadable source of one."""

    pass


class SourceEvaluationFailed(ToolRegistrationError):
    """Raised when evaluating a tool source file raises."""

    pass


class ReservedNameCollision(ToolRegistrationError):
    """Raised when a supplied tool uses a name reserved for a built-in tool."""

    pass


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""

    pass


class ToolExecutionError(Exception):
    """Raised when a tool fails to execute."""

    pass
