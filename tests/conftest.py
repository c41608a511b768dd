"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import io
import threading
from pathlib import Path

import pytest
from helpers import ADD, CALLS, ECHO, EXPLODE, FakeSession, free_base_port

from mcp_session_proxy.config import ProxyConfig
from mcp_session_proxy.context import ProxyContext
from mcp_session_proxy.protocol.transport import ClientTransport
from mcp_session_proxy.session.peer import SessionPeer


@pytest.fixture(autouse=True)
def reset_calls():
    """Forget tool calls recorded by earlier tests."""
    CALLS.clear()
    yield
    CALLS.clear()


@pytest.fixture
def config(tmp_path: Path) -> ProxyConfig:
    """Configuration with a free session address and a temporary log."""
    return ProxyConfig(
        session_base_port=free_base_port(),
        max_sessions=2,
        redial_interval=0.05,
        probe_timeout=1.0,
        log_file=str(tmp_path / "traffic.log"),
    )


@pytest.fixture
def stdout() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def client(stdout: io.StringIO) -> ClientTransport:
    return ClientTransport(stdin=io.StringIO(""), stdout=stdout, stderr=io.StringIO())


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def context(config: ProxyConfig, client: ClientTransport, session: FakeSession):
    """Proxy context with the test tools and a fake session."""
    ctx = ProxyContext.create(
        config, tools=[ECHO, ADD, EXPLODE], client=client, session=session
    )
    yield ctx
    ctx.close()


@pytest.fixture
def threaded_peer(config: ProxyConfig):
    """A SessionPeer serving from its own thread and event loop.

    Blocking probes from the test thread can reach it.
    """
    peer = SessionPeer(config, description="test session")
    loop = asyncio.new_event_loop()
    ready = threading.Event()

    async def run() -> None:
        await peer.start()
        ready.set()
        try:
            await peer.serve_forever()
        except asyncio.CancelledError:
            pass
        finally:
            await peer.close()

    task_holder: dict[str, asyncio.Task[None]] = {}

    def target() -> None:
        asyncio.set_event_loop(loop)
        task_holder["task"] = loop.create_task(run())
        loop.run_until_complete(task_holder["task"])
        loop.close()

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    assert ready.wait(5.0)
    yield peer
    loop.call_soon_threadsafe(task_holder["task"].cancel)
    thread.join(5.0)
