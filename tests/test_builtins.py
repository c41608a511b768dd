"""Tests for the built-in session tools."""

import pytest
from helpers import FakeSession

from mcp_session_proxy.session import SessionTransport
from mcp_session_proxy.tools.builtins import SessionTools
from mcp_session_proxy.tools.registry import RESERVED_TOOL_NAMES


@pytest.fixture
def fake() -> FakeSession:
    return FakeSession()


@pytest.fixture
def builtins(fake: FakeSession) -> SessionTools:
    return SessionTools(fake, max_sessions=3)


class TestDefinitions:
    """Tests for the built-in tool descriptors."""

    def test_names_are_reserved(self, builtins: SessionTools):
        names = {t.name for t in builtins.get_tools()}

        assert names == set(RESERVED_TOOL_NAMES)

    def test_select_requires_session_number(self, builtins: SessionTools):
        select = next(t for t in builtins.get_tools() if t.name == "select_r_session")

        assert select.input_schema["required"] == ["session"]
        assert select.input_schema["properties"]["session"]["type"] == "integer"


class TestListSessions:
    """Tests for list_r_sessions."""

    def test_no_sessions(self, builtins: SessionTools):
        result = builtins.list_r_sessions()

        assert not result.is_error
        assert "No sessions" in result.content[0]["text"]

    def test_lists_responding_sessions(self, builtins: SessionTools, fake: FakeSession):
        fake.descriptions = {1: "1: /home/a (pid 1)", 3: "3: /home/b (pid 2)"}

        result = builtins.list_r_sessions()

        assert result.content[0]["text"] == "1: /home/a (pid 1)\n3: /home/b (pid 2)"


class TestSelectSession:
    """Tests for select_r_session."""

    def test_selects_running_session(self, builtins: SessionTools, fake: FakeSession):
        fake.descriptions = {2: "2: here"}

        result = builtins.select_r_session(2)

        assert not result.is_error
        assert fake.selected == [2]

    def test_rejects_missing_session(self, builtins: SessionTools, fake: FakeSession):
        result = builtins.select_r_session(2)

        assert result.is_error
        assert fake.selected == []

    def test_rejects_out_of_range(self, builtins: SessionTools, fake: FakeSession):
        fake.descriptions = {5: "5: far"}

        assert builtins.select_r_session(5).is_error
        assert fake.selected == []


class TestWithLivePeer:
    """Built-ins against a peer running in another thread."""

    def test_list_finds_threaded_peer(self, config, threaded_peer):
        tools = SessionTools(SessionTransport(config), config.max_sessions)

        text = tools.list_r_sessions().content[0]["text"]

        assert f"{threaded_peer.session}: test session" in text

    async def test_select_threaded_peer(self, config, threaded_peer):
        transport = SessionTransport(config, session=2)
        await transport.start()
        tools = SessionTools(transport, config.max_sessions)

        result = tools.select_r_session(threaded_peer.session)

        assert not result.is_error
        assert transport.session == threaded_peer.session
        await transport.close()
