"""
wpgate: WordPress MCP gateway

Exposes a WordPress site's REST API to Model Context Protocol clients over
Server-Sent Events. Each SSE connection is an independent MCP session; tool
calls are translated into authenticated WordPress REST requests.

Public modules:
- wpgate.config: Configuration loading (YAML file plus environment)
- wpgate.wordpress: REST client, request executor and parameter models
- wpgate.tools: MCP tool catalog
- wpgate.server: Access gate, session registry, MCP server and HTTP app
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wpgate")
except PackageNotFoundError:
    # Development checkout, not installed via pip
    __version__ = "0.1.0"

__all__ = ["__version__"]
