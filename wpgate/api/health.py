"""Health and service-info endpoints. Neither requires the API key."""

from typing import Any

from fastapi import APIRouter, Request

from wpgate import __version__

router = APIRouter()


@router.get("/health")
def health(request: Request) -> dict[str, Any]:
    """Liveness plus configuration presence (never the values themselves)."""
    context = request.app.state.context
    return {
        "status": "ok",
        "server": context.mcp_server.server.name,
        "version": __version__,
        "hasCredentials": context.config.wordpress.has_credentials,
        "apiKeyProtected": context.gate.protected,
        "activeSessions": len(context.registry),
    }


@router.get("/")
def service_info(request: Request) -> dict[str, Any]:
    server = request.app.state.context.config.server
    return {
        "name": "WordPress MCP Server",
        "version": __version__,
        "description": "MCP server for WordPress.org site management",
        "endpoints": {
            "sse": f"{server.sse_path} (GET) - SSE MCP endpoint",
            "messages": f"{server.message_path} (POST) - SSE message handler",
            "health": "/health (GET) - Health check",
        },
    }
