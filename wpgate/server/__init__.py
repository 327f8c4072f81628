"""MCP-over-SSE server: access gate, sessions, MCP server and HTTP app."""

from wpgate.server.access import AccessDecision, AccessGate, AccessGateMiddleware, GateState
from wpgate.server.http_app import GatewayContext, create_app
from wpgate.server.http_server import run_http_server
from wpgate.server.mcp_server import GatewayMCPServer
from wpgate.server.sessions import SessionRegistry, SseSessionTransport

__all__ = [
    "AccessDecision",
    "AccessGate",
    "AccessGateMiddleware",
    "GateState",
    "GatewayContext",
    "GatewayMCPServer",
    "SessionRegistry",
    "SseSessionTransport",
    "create_app",
    "run_http_server",
]
