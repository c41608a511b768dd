"""Tool source loader - evaluates a Python file that defines tools."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any

from mcp_session_proxy.tools.errors import InvalidToolSource, SourceEvaluationFailed

# Module-level attribute a tool source file must define
TOOLS_ATTRIBUTE = "tools"


def source_module_name(path: Path) -> str:
    """Name under which a tool source file is registered in ``sys.modules``."""
    return f"mcp_session_proxy_tools.{path.stem}"


def load_tool_source(path: str | Path) -> list[Any]:
    """Evaluate a tool source file and return the tools it defines.

    The file is executed as a module; its ``tools`` attribute must be a list
    (or a mapping whose values are the tools).

    Args:
        path: Path to a ``.py`` file.

    Returns:
        The list the file produced. Items are checked by the registry.

    Raises:
        InvalidToolSource: If the path is not a loadable Python file or the
            module defines no tool list.
        SourceEvaluationFailed: If executing the file raises.
    """
    path = Path(path).expanduser().resolve()
    if path.suffix != ".py":
        raise InvalidToolSource(f"Tool source must be a .py file: {path}")
    if not path.is_file():
        raise InvalidToolSource(f"Tool source not found: {path}")

    module_name = source_module_name(path)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise InvalidToolSource(f"Cannot load tool source from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise SourceEvaluationFailed(f"Sourcing {path} failed: {e}") from e

    tools = getattr(module, TOOLS_ATTRIBUTE, None)
    if isinstance(tools, dict):
        tools = list(tools.values())
    if not isinstance(tools, list | tuple):
        sys.modules.pop(module_name, None)
        raise InvalidToolSource(
            f"{path} must define a module-level '{TOOLS_ATTRIBUTE}' list of tools"
        )

    return list(tools)
