"""Command line interface.

``mcp-session-proxy server`` is launched by an MCP client and is not meant to
be run by hand. ``mcp-session-proxy session`` makes a Python process
available to the server so that tools run inside it.

Example client configuration (Claude Desktop):

    {
      "mcpServers": {
        "python-session": {
          "command": "mcp-session-proxy",
          "args": ["server", "--tools", "/path/to/tools.py"]
        }
      }
    }
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mcp_session_proxy import __version__
from mcp_session_proxy.config import ConfigLoadError, load_config
from mcp_session_proxy.loop import run_server
from mcp_session_proxy.session.errors import SessionError
from mcp_session_proxy.session.peer import run_session
from mcp_session_proxy.tools.errors import ToolRegistrationError


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mcp-session-proxy",
        description="Serve Python tools over MCP, optionally inside a live session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"mcp-session-proxy {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("server", "Run the MCP server on stdin/stdout (launched by an MCP client)"),
        ("session", "Make this process available to the MCP server"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--config",
            "-c",
            type=Path,
            default=None,
            help="Path to configuration YAML file",
        )
        sub.add_argument(
            "--tools",
            "-t",
            type=Path,
            default=None,
            help="Python file defining a module-level 'tools' list",
        )

    subparsers.choices["session"].add_argument(
        "--description",
        "-d",
        default=None,
        help="Text shown for this session by list_r_sessions",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigLoadError as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "server":
            if sys.stdin.isatty():
                print(
                    "Error: 'mcp-session-proxy server' is not intended for interactive use; "
                    "configure it as an MCP server in your client instead.",
                    file=sys.stderr,
                )
                return 1
            run_server(config, tools=args.tools)
        else:
            tools_source = args.tools or config.tools_source
            run_session(config, description=args.description, tools_source=tools_source)

    except ToolRegistrationError as e:
        print(f"Error registering tools: {e}", file=sys.stderr)
        return 1

    except SessionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        return 130  # Standard exit code for SIGINT

    return 0


if __name__ == "__main__":
    sys.exit(main())
