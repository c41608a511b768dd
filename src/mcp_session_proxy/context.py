"""Proxy context - the state shared by the event loop, router and forwarder.

Built once at startup and passed explicitly; nothing in the proxy reaches for
process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcp_session_proxy.config import ProxyConfig
from mcp_session_proxy.protocol.transport import ClientTransport
from mcp_session_proxy.session.forwarder import SessionForwarder
from mcp_session_proxy.session.transport import SessionTransport
from mcp_session_proxy.tools.builtins import SessionTools
from mcp_session_proxy.tools.registry import ToolRegistry
from mcp_session_proxy.traffic import TrafficLog


@dataclass
class ProxyContext:
    """Everything one proxy process needs to serve a client."""

    config: ProxyConfig
    registry: ToolRegistry
    client: ClientTransport
    session: SessionTransport
    forwarder: SessionForwarder
    traffic: TrafficLog

    @classmethod
    def create(
        cls,
        config: ProxyConfig,
        tools: Any = None,
        client: ClientTransport | None = None,
        session: SessionTransport | None = None,
    ) -> ProxyContext:
        """Build the context, registering tools before anything is served.

        Args:
            config: Proxy configuration.
            tools: Tool list, mapping or tool source path (falls back to the
                configured ``tools.source``).
            client: Client transport (defaults to stdio).
            session: Session transport (defaults to one dialing session 1).

        Returns:
            The assembled context.

        Raises:
            ToolRegistrationError: If the tools cannot be registered.
        """
        if tools is None:
            tools = config.tools_source
        session = session or SessionTransport(config)
        builtins = SessionTools(session, config.max_sessions).get_tools()
        registry = ToolRegistry.register(tools, builtins=builtins)

        traffic = TrafficLog(Path(config.log_file))
        return cls(
            config=config,
            registry=registry,
            client=client or ClientTransport(),
            session=session,
            forwarder=SessionForwarder(session, traffic),
            traffic=traffic,
        )

    def close(self) -> None:
        """Close the traffic log."""
        self.traffic.close()
