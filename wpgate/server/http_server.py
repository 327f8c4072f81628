"""uvicorn launcher for the gateway application."""

import logging

import uvicorn

from wpgate.config import GatewayConfig
from wpgate.server.http_app import create_app

logger = logging.getLogger(__name__)


async def run_http_server(config: GatewayConfig) -> None:
    """Serve the gateway until interrupted.

    Args:
        config: Gateway configuration (bind address, paths, credentials)
    """
    server_config = config.server
    logger.info("Starting WordPress MCP server on %s:%s", server_config.host, server_config.port)
    logger.info("Endpoints:")
    logger.info("  GET  /health - Health check")
    logger.info("  GET  %s - SSE MCP endpoint", server_config.sse_path)
    logger.info("  POST %s?sessionId=<id> - Session messages", server_config.message_path)
    for name, state in config.describe().items():
        logger.info("  %s: %s", name, state)

    if not config.wordpress.has_credentials:
        logger.warning("WordPress credentials are incomplete; tool calls will fail until set")

    uvicorn_config = uvicorn.Config(
        create_app(config),
        host=server_config.host,
        port=server_config.port,
        log_level=server_config.log_level.lower(),
        access_log=False,
        # Logging is configured by the CLI
        log_config=None,
    )
    server = uvicorn.Server(uvicorn_config)

    try:
        await server.serve()
    except Exception as e:
        logger.exception("HTTP server error: %s", e)
        raise
