"""WordPress MCP server.

Wraps the low-level ``mcp.server.Server`` and exposes the tool catalog:

- ``tools/list`` returns one ``Tool`` per catalog entry, with the pydantic
  input model's JSON schema as ``inputSchema``
- ``tools/call`` validates the arguments against that model, resolves the
  WordPress client and runs the handler

Errors raised by a handler are turned into ``isError`` tool results by the
MCP library; the message text is ``str(error)``.

Example:
    server = GatewayMCPServer(client_provider=context.get_client)
    await server.run(transport.read_stream, transport.write_stream)
"""

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from mcp.server import Server
from mcp.types import TextContent, Tool
from pydantic import ValidationError

from wpgate.framework.errors import GatewayError, ValidationFailure, to_gateway_error
from wpgate.tools import ToolCatalog, build_catalog
from wpgate.wordpress.client import WordPressClient

logger = logging.getLogger(__name__)

SERVER_NAME = "wordpress-mcp"

ClientProvider = Callable[[], WordPressClient]


def _validation_message(tool_name: str, error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "arguments"
        problems.append(f"{location}: {item['msg']}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


class GatewayMCPServer:
    """MCP server exposing WordPress tools.

    Attributes:
        catalog: Tools served by ``tools/list`` and ``tools/call``
        server: Underlying MCP server instance
    """

    def __init__(
        self,
        client_provider: ClientProvider,
        catalog: ToolCatalog | None = None,
        server_name: str = SERVER_NAME,
    ) -> None:
        """Initialize the server.

        Args:
            client_provider: Returns the WordPress client; called on each tool
                call so a missing configuration surfaces as a tool error
            catalog: Tools to expose (default: every built-in tool)
            server_name: Name reported during MCP initialization
        """
        self._client_provider = client_provider
        self.catalog = catalog if catalog is not None else build_catalog()
        self.server: Server = Server(server_name)
        self._register_tools()
        logger.info("Created MCP server %s with %d tools", server_name, len(self.catalog))

    def _register_tools(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> Iterable[Tool]:
            return self.build_tool_list()

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            return await self.handle_tool_call(name, arguments)

    def build_tool_list(self) -> list[Tool]:
        return [
            Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
            for spec in self.catalog
        ]

    async def handle_tool_call(
        self, tool_name: str, arguments: dict[str, Any] | None
    ) -> list[TextContent]:
        """Run one tool and wrap its text in MCP content.

        Raises:
            ValueError: Unknown tool name
            ValidationFailure: Arguments do not match the tool's input model
            GatewayError: Anything the WordPress call raised
        """
        spec = self.catalog.get(tool_name)
        if spec is None:
            msg = f"Unknown tool: {tool_name}"
            raise ValueError(msg)

        try:
            args = spec.input_model.model_validate(arguments or {})
        except ValidationError as e:
            raise ValidationFailure(_validation_message(tool_name, e)) from e

        logger.info("Tool call: %s", tool_name, extra={"tool": tool_name})
        started = time.perf_counter()
        try:
            text = await spec.handler(self._client_provider(), args)
        except GatewayError as e:
            logger.warning("Tool %s failed: %s", tool_name, e, extra={"tool": tool_name})
            raise
        except Exception as e:
            logger.exception("Tool %s raised unexpectedly", tool_name, extra={"tool": tool_name})
            raise to_gateway_error(e) from e

        logger.debug(
            "Tool %s completed in %.1fms",
            tool_name,
            (time.perf_counter() - started) * 1000,
            extra={"tool": tool_name},
        )
        return [TextContent(type="text", text=text)]

    async def run(self, read_stream: Any, write_stream: Any) -> None:
        """Serve one MCP session over the given streams until input ends."""
        await self.server.run(
            read_stream,
            write_stream,
            self.server.create_initialization_options(),
        )


__all__ = ["SERVER_NAME", "GatewayMCPServer"]
