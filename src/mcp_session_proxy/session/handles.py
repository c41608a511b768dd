"""Encoding of invocable tool handles for transport to a session peer.

A forwarded call carries a reference to the tool function rather than the
function itself: the module and qualified name, plus the file the module was
loaded from when it cannot be imported by name. The peer resolves the
reference inside its own process.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp_session_proxy.session.errors import EncodingFailed, HandleResolutionError
from mcp_session_proxy.tools.base import Tool


def _is_importable(module_name: str) -> bool:
    """Check whether a module can be imported by name in a fresh process."""
    if module_name == "__main__":
        return False
    # Tool source files live under a package that exists only in sys.modules
    top_level = module_name.partition(".")[0]
    try:
        return importlib.util.find_spec(top_level) is not None
    except (ImportError, ValueError):
        return False


def encode_handle(tool: Tool) -> dict[str, Any]:
    """Encode a tool's function as a plain-data reference.

    Args:
        tool: Tool whose function should be referenced.

    Returns:
        Dictionary with ``name``, ``module``, ``qualname`` and ``path``.

    Raises:
        EncodingFailed: If the function cannot be referenced from another
            process (lambdas, nested functions, callables without a module).
    """
    fn = tool.fn
    module_name = getattr(fn, "__module__", None)
    qualname = getattr(fn, "__qualname__", None)
    if not module_name or not qualname:
        raise EncodingFailed(f"Tool '{tool.name}' has no importable function")
    if "<lambda>" in qualname or "<locals>" in qualname:
        raise EncodingFailed(
            f"Tool '{tool.name}' uses {qualname}, which cannot be sent to a session"
        )

    path = None
    if not _is_importable(module_name):
        module = sys.modules.get(module_name)
        module_file = getattr(module, "__file__", None)
        if not module_file:
            raise EncodingFailed(
                f"Tool '{tool.name}' is defined in {module_name}, which has no source file"
            )
        path = str(Path(module_file).resolve())

    return {
        "name": tool.name,
        "module": module_name,
        "qualname": qualname,
        "path": path,
    }


def _load_module(module_name: str, path: str | None) -> Any:
    if path is None:
        return importlib.import_module(module_name)

    if module_name == "__main__":
        module_name = f"mcp_session_proxy_remote.{Path(path).stem}"

    module = sys.modules.get(module_name)
    if module is not None and getattr(module, "__file__", None) == path:
        return module

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise HandleResolutionError(f"Cannot load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def decode_handle(handle: dict[str, Any]) -> Callable[..., Any]:
    """Resolve an encoded handle to the function it refers to.

    Args:
        handle: Dictionary produced by ``encode_handle``.

    Returns:
        The referenced callable.

    Raises:
        HandleResolutionError: If the module or attribute cannot be found.
    """
    if not isinstance(handle, dict):
        raise HandleResolutionError("Tool handle must be an object")
    module_name = handle.get("module")
    qualname = handle.get("qualname")
    if not isinstance(module_name, str) or not isinstance(qualname, str):
        raise HandleResolutionError("Tool handle needs 'module' and 'qualname'")

    try:
        target: Any = _load_module(module_name, handle.get("path"))
        for part in qualname.split("."):
            target = getattr(target, part)
    except Exception as e:
        raise HandleResolutionError(f"Cannot resolve {module_name}:{qualname}: {e}") from e

    if not callable(target):
        raise HandleResolutionError(f"{module_name}:{qualname} is not callable")
    return target
