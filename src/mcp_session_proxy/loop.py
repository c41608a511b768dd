"""Event loop - waits on the client and the session at the same time."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Any

from mcp_session_proxy.config import ProxyConfig
from mcp_session_proxy.context import ProxyContext
from mcp_session_proxy.protocol.transport import ClientTransport
from mcp_session_proxy.router import Router
from mcp_session_proxy.traffic import Direction


def relay_from_session(context: ProxyContext, frame: str) -> None:
    """Pass a session frame to the client untouched.

    The session's frame is already a complete JSON-RPC response.
    """
    context.traffic.record(Direction.FROM_SESSION, frame)
    context.client.write_message(frame)


async def serve(context: ProxyContext) -> None:
    """Run the proxy until the client closes its end.

    One receive is always pending on each transport. Whichever completes
    first is handled first; when both complete together both are handled.

    Args:
        context: The proxy context.
    """
    router = Router(context)
    await context.session.start()

    client_task: asyncio.Task[str | None] = asyncio.ensure_future(context.client.receive())
    session_task: asyncio.Task[str] = asyncio.ensure_future(context.session.receive())
    try:
        while True:
            done, _ = await asyncio.wait(
                {client_task, session_task},
                return_when=asyncio.FIRST_COMPLETED,
            )

            if session_task in done:
                relay_from_session(context, session_task.result())
                session_task = asyncio.ensure_future(context.session.receive())

            if client_task in done:
                line = client_task.result()
                if line is None:
                    context.client.log("EOF received, shutting down")
                    break
                router.dispatch(line)
                client_task = asyncio.ensure_future(context.client.receive())
    finally:
        session_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await session_task
        await context.session.close()


def run_server(
    config: ProxyConfig,
    tools: Any = None,
    client: ClientTransport | None = None,
) -> None:
    """Build the proxy and serve stdin/stdout until end of input.

    Tool registration happens before the loop starts, so registration
    errors abort without serving anything.

    Args:
        config: Proxy configuration.
        tools: Tool list, mapping or tool source path.
        client: Client transport (defaults to stdio).

    Raises:
        ToolRegistrationError: If the tools cannot be registered.
    """
    context = ProxyContext.create(config, tools=tools, client=client)
    context.client.log(f"Serving {len(context.registry)} tools")
    context.traffic.note("start", tools=context.registry.names)
    try:
        asyncio.run(serve(context))
    finally:
        context.close()
