"""
HTTP application: SSE session endpoint, message endpoint, health and info.

Routes:
- GET  /sse       - Open an MCP session (API key required when configured)
- POST /messages  - Submit a JSON-RPC message to a session (API key required)
- GET  /health    - Liveness and configuration presence
- GET  /          - Service info

The two streaming endpoints are raw ASGI callables so the event stream is
written straight to the connection. Everything else is regular FastAPI.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import anyio
from fastapi import FastAPI
from mcp import types
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from wpgate import __version__
from wpgate.api import router as health_router
from wpgate.config import GatewayConfig
from wpgate.framework.errors import AuthRejected, GatewayError, SessionNotFound
from wpgate.server.access import AccessGate, AccessGateMiddleware, rejection_response
from wpgate.server.mcp_server import GatewayMCPServer
from wpgate.server.sessions import SESSION_QUERY_PARAM, SessionRegistry, SseSessionTransport
from wpgate.wordpress.client import WordPressClient, create_wordpress_client

logger = logging.getLogger(__name__)


class GatewayContext:
    """Process-wide state shared by every request.

    Attributes:
        config: Loaded configuration
        gate: API-key gate for the streaming endpoints
        registry: Open SSE sessions
        mcp_server: MCP server run once per session
    """

    def __init__(self, config: GatewayConfig, client: WordPressClient | None = None) -> None:
        self.config = config
        self.gate = AccessGate(config.server.api_key)
        self.registry = SessionRegistry()
        self._client = client
        self.mcp_server = GatewayMCPServer(client_provider=self.get_client)

    def get_client(self) -> WordPressClient:
        """Return the WordPress client, creating it on first use.

        Raises:
            ConfigurationError: If WordPress credentials are not configured
        """
        if self._client is None:
            self._client = create_wordpress_client(self.config.wordpress)
            logger.info("WordPress client created for %s", self.config.wordpress.site_url)
        return self._client

    async def aclose(self) -> None:
        closed = self.registry.close_all()
        if closed:
            logger.info("Closed %d open sessions", closed)
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class SseEndpoint:
    """``GET /sse``: one MCP session per connection."""

    def __init__(self, context: GatewayContext) -> None:
        self.context = context

    async def _serve_session(self, transport: SseSessionTransport) -> None:
        try:
            await self.context.mcp_server.run(transport.read_stream, transport.write_stream)
        except Exception:
            logger.exception(
                "MCP session %s failed", transport.session_id,
                extra={"session_id": transport.session_id},
            )
            # Ends the event stream so the client sees the session go away
            self.context.registry.close(transport.session_id)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        transport = SseSessionTransport(self.context.config.server.message_path)
        session_id = self.context.registry.open(transport)
        logger.info("SSE connection established", extra={"session_id": session_id})

        async with anyio.create_task_group() as tg:
            tg.start_soon(self._serve_session, transport)
            try:
                await transport.stream(scope, receive, send)
            finally:
                self.context.registry.close(session_id)
                tg.cancel_scope.cancel()

        logger.info("SSE connection closed", extra={"session_id": session_id})


class MessageEndpoint:
    """``POST /messages?sessionId=<id>``: route one client message."""

    def __init__(self, context: GatewayContext) -> None:
        self.context = context

    async def _handle(self, request: Request) -> Response:
        session_id = request.query_params.get(SESSION_QUERY_PARAM)
        if not session_id:
            return JSONResponse({"error": "Missing sessionId parameter"}, status_code=400)

        registry = self.context.registry
        if session_id not in registry:
            return JSONResponse({"error": "Session not found"}, status_code=404)

        body = await request.body()
        try:
            message = types.JSONRPCMessage.model_validate_json(body)
        except ValidationError as e:
            logger.warning("Unparseable message for session %s: %s", session_id, e)
            return JSONResponse(
                {"error": "Could not parse message", "message": str(e)}, status_code=400
            )

        try:
            await registry.route(session_id, message)
        except SessionNotFound:
            return JSONResponse({"error": "Session not found"}, status_code=404)

        return Response("Accepted", status_code=202)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = await self._handle(Request(scope, receive))
        await response(scope, receive, send)


async def gateway_error_handler(request: Request, exc: GatewayError) -> Response:
    if isinstance(exc, AuthRejected):
        return rejection_response(exc)
    if exc.status_code >= 500:
        logger.error("Gateway error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        {"error": "Internal server error", "message": str(exc)}, status_code=500
    )


def create_app(config: GatewayConfig, client: WordPressClient | None = None) -> FastAPI:
    """Build the ASGI application.

    Args:
        config: Gateway configuration
        client: Pre-built WordPress client (tests); created lazily otherwise

    Returns:
        FastAPI application with ``app.state.context`` set
    """
    context = GatewayContext(config, client)
    server_config = config.server

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Gateway ready: sse=%s messages=%s access=%s",
            server_config.sse_path,
            server_config.message_path,
            context.gate.state.value,
        )
        yield
        await context.aclose()
        logger.info("Gateway stopped")

    routes: list[Any] = [
        Route(server_config.sse_path, SseEndpoint(context), methods=["GET"]),
        Route(server_config.message_path, MessageEndpoint(context), methods=["POST"]),
    ]

    app = FastAPI(
        title="WordPress MCP Server",
        version=__version__,
        routes=routes,
        lifespan=lifespan,
    )
    app.state.context = context
    app.include_router(health_router)

    app.add_middleware(
        AccessGateMiddleware,
        gate=context.gate,
        paths=(server_config.sse_path, server_config.message_path),
    )
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    return app


__all__ = ["GatewayContext", "MessageEndpoint", "SseEndpoint", "create_app"]
