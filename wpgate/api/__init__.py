"""Plain HTTP endpoints served next to the MCP transport."""

from wpgate.api.health import router

__all__ = ["router"]
