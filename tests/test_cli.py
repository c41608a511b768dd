"""Tests for the command line interface."""

import io
from pathlib import Path
from unittest.mock import patch

import pytest

from mcp_session_proxy import __version__
from mcp_session_proxy.cli import build_parser, main
from mcp_session_proxy.tools import ReservedNameCollision


class Terminal(io.StringIO):
    """stdin that reports being an interactive terminal."""

    def isatty(self) -> bool:
        return True


class TestParser:
    """Tests for argument parsing."""

    def test_server_arguments(self):
        args = build_parser().parse_args(["server", "--tools", "t.py", "-c", "c.yaml"])

        assert args.command == "server"
        assert args.tools == Path("t.py")
        assert args.config == Path("c.yaml")

    def test_session_description(self):
        args = build_parser().parse_args(["session", "-d", "analysis"])

        assert args.command == "session"
        assert args.description == "analysis"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--version"])

        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_missing_config(self, tmp_path: Path, capsys):
        code = main(["server", "--config", str(tmp_path / "absent.yaml")])

        assert code == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_registration_error_exits(self, capsys):
        with (
            patch("sys.stdin", new=io.StringIO()),
            patch(
                "mcp_session_proxy.cli.run_server",
                side_effect=ReservedNameCollision("reserved"),
            ),
        ):
            code = main(["server"])

        assert code == 1
        assert "Error registering tools: reserved" in capsys.readouterr().err

    def test_refuses_interactive_server(self, capsys):
        with (
            patch("sys.stdin", new=Terminal()),
            patch("mcp_session_proxy.cli.run_server") as run,
        ):
            code = main(["server"])

        assert code == 1
        run.assert_not_called()

    def test_server_passes_tools(self):
        with (
            patch("sys.stdin", new=io.StringIO()),
            patch("mcp_session_proxy.cli.run_server") as run,
        ):
            code = main(["server", "--tools", "my_tools.py"])

        assert code == 0
        assert run.call_args.kwargs["tools"] == Path("my_tools.py")

    def test_session_runs_peer(self):
        with patch("mcp_session_proxy.cli.run_session") as run:
            code = main(["session", "--description", "notebook"])

        assert code == 0
        assert run.call_args.kwargs["description"] == "notebook"

    def test_keyboard_interrupt(self):
        with patch("mcp_session_proxy.cli.run_session", side_effect=KeyboardInterrupt):
            assert main(["session"]) == 130
