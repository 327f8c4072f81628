"""
SSE sessions and the registry that routes inbound messages to them.

Each ``GET /sse`` connection gets its own ``SseSessionTransport``: a fresh
session id, a pair of anyio memory streams feeding the MCP server, and the
event stream back to the client. The ``SessionRegistry`` maps session ids to
transports so that ``POST /messages?sessionId=...`` reaches exactly the
transport that minted the id.

Lifecycle:
    transport = SseSessionTransport("/messages")
    session_id = registry.open(transport)
    ...                       # MCP server reads transport.read_stream
    await registry.route(session_id, message)
    ...
    registry.close(session_id)  # on disconnect; later routes are not found
"""

import logging
from typing import Any
from urllib.parse import quote
from uuid import uuid4

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp import types
from mcp.shared.message import SessionMessage
from sse_starlette import EventSourceResponse
from starlette.types import Receive, Scope, Send

from wpgate.framework.errors import SessionConflictError, SessionNotFound

logger = logging.getLogger(__name__)

SESSION_QUERY_PARAM = "sessionId"


class SseSessionTransport:
    """One client's SSE channel plus the streams the MCP server runs on.

    Attributes:
        session_id: Identifier minted at construction, never reused
        read_stream: Inbound client messages, consumed by the MCP server
        write_stream: Outbound server messages, emitted as SSE ``message`` events
    """

    def __init__(self, message_path: str) -> None:
        self.session_id = uuid4().hex
        self.message_path = message_path
        self._closed = False

        self._read_writer: MemoryObjectSendStream[SessionMessage | Exception]
        self.read_stream: MemoryObjectReceiveStream[SessionMessage | Exception]
        self._read_writer, self.read_stream = anyio.create_memory_object_stream(0)

        self.write_stream: MemoryObjectSendStream[SessionMessage]
        self._write_reader: MemoryObjectReceiveStream[SessionMessage]
        self.write_stream, self._write_reader = anyio.create_memory_object_stream(0)

    @property
    def closed(self) -> bool:
        return self._closed

    def endpoint_url(self, root_path: str = "") -> str:
        """Relative URL the client must POST its messages to."""
        path = quote(root_path.rstrip("/") + self.message_path)
        return f"{path}?{SESSION_QUERY_PARAM}={self.session_id}"

    async def deliver(self, message: types.JSONRPCMessage) -> None:
        """Hand one inbound message to the MCP server.

        Raises:
            anyio.ClosedResourceError: The transport was closed
            anyio.BrokenResourceError: The server side stopped reading
        """
        await self._read_writer.send(SessionMessage(message))

    async def stream(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Serve the event stream until the client disconnects."""
        sse_writer, sse_reader = anyio.create_memory_object_stream[dict[str, Any]](0)
        endpoint = self.endpoint_url(scope.get("root_path", ""))

        async def pump() -> None:
            async with sse_writer, self._write_reader:
                await sse_writer.send({"event": "endpoint", "data": endpoint})
                async for session_message in self._write_reader:
                    logger.debug("Sending message to session %s", self.session_id)
                    await sse_writer.send(
                        {
                            "event": "message",
                            "data": session_message.message.model_dump_json(
                                by_alias=True, exclude_none=True
                            ),
                        }
                    )

        response = EventSourceResponse(content=sse_reader, data_sender_callable=pump)
        await response(scope, receive, send)

    def close(self) -> None:
        """Mark closed and end both directions. Safe to call twice.

        Only the sending ends are closed here: the MCP server sees end of
        input, the event stream drains and finishes, and any later
        ``deliver`` fails with ``ClosedResourceError``.
        """
        if self._closed:
            return
        self._closed = True
        self._read_writer.close()
        self.write_stream.close()


class SessionRegistry:
    """Maps session ids to their transports.

    ``open``, ``close`` and the lookup half of ``route`` never await, so under
    a single event loop a session is either fully registered or fully gone.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SseSessionTransport] = {}

    def open(self, transport: SseSessionTransport) -> str:
        """Register a transport under its own session id.

        Raises:
            SessionConflictError: The id is taken or the transport is already registered
        """
        session_id = transport.session_id
        if session_id in self._sessions:
            raise SessionConflictError(session_id)
        if any(existing is transport for existing in self._sessions.values()):
            raise SessionConflictError(session_id, "transport already registered")

        self._sessions[session_id] = transport
        logger.info("Session opened: %s (%d active)", session_id, len(self._sessions))
        return session_id

    async def route(self, session_id: str, message: types.JSONRPCMessage) -> None:
        """Deliver a client message to its session.

        Raises:
            SessionNotFound: Unknown id, or the session closed before or during delivery
        """
        transport = self._sessions.get(session_id)
        if transport is None or transport.closed:
            raise SessionNotFound(session_id)

        try:
            await transport.deliver(message)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError) as e:
            logger.info("Session %s closed during delivery", session_id)
            raise SessionNotFound(session_id) from e

    def close(self, session_id: str) -> bool:
        """Remove a session and close its transport.

        Returns:
            True if the session was open, False if it was already gone
        """
        transport = self._sessions.pop(session_id, None)
        if transport is None:
            return False
        transport.close()
        logger.info("Session closed: %s (%d active)", session_id, len(self._sessions))
        return True

    def close_all(self) -> int:
        closed = 0
        for session_id in list(self._sessions):
            if self.close(session_id):
                closed += 1
        return closed

    def get(self, session_id: str) -> SseSessionTransport | None:
        return self._sessions.get(session_id)

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


__all__ = ["SESSION_QUERY_PARAM", "SessionRegistry", "SseSessionTransport"]
