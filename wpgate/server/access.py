"""
API-key gate for the streaming endpoints.

The gate is either OPEN (no key configured, every request is allowed) or
PROTECTED. A protected gate accepts the key from, in order:

1. ``X-API-Key: <key>``
2. ``Authorization: Bearer <key>``
3. ``Authorization: <key>``

and compares it to the configured key by exact string equality.

``AccessGateMiddleware`` is a plain ASGI middleware rather than a
``BaseHTTPMiddleware`` so that the SSE response body is never buffered.
"""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.routing import get_route_path
from starlette.types import ASGIApp, Receive, Scope, Send

from wpgate.framework.errors import AuthRejected, ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"
BEARER_PREFIX = "Bearer "

MISSING_KEY_MESSAGE = (
    "Missing API key. Provide via X-API-Key header or Authorization: Bearer <token>"
)
INVALID_KEY_MESSAGE = "Invalid API key"


class GateState(str, Enum):
    OPEN = "open"
    PROTECTED = "protected"


class AccessDecision(str, Enum):
    ALLOW = "allow"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


def extract_api_key(headers: Mapping[str, str]) -> str | None:
    """Pull the presented key out of request headers (case-insensitive names)."""
    if not isinstance(headers, Headers):
        headers = Headers(headers=dict(headers))

    api_key = headers.get(API_KEY_HEADER)
    if api_key:
        return api_key

    authorization = headers.get("authorization")
    if not authorization:
        return None
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]
    return authorization


class AccessGate:
    """Decides whether a request may reach the SSE and message endpoints."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key or None

    @property
    def state(self) -> GateState:
        return GateState.PROTECTED if self._api_key else GateState.OPEN

    @property
    def protected(self) -> bool:
        return self.state is GateState.PROTECTED

    def check(self, headers: Mapping[str, str]) -> AccessDecision:
        if self._api_key is None:
            return AccessDecision.ALLOW

        presented = extract_api_key(headers)
        if not presented:
            return AccessDecision.UNAUTHORIZED
        if presented != self._api_key:
            return AccessDecision.FORBIDDEN
        return AccessDecision.ALLOW

    def enforce(self, headers: Mapping[str, str]) -> None:
        """Raise if the request may not proceed.

        Raises:
            UnauthorizedError: No key was presented
            ForbiddenError: A key was presented but does not match
        """
        decision = self.check(headers)
        if decision is AccessDecision.UNAUTHORIZED:
            raise UnauthorizedError(MISSING_KEY_MESSAGE)
        if decision is AccessDecision.FORBIDDEN:
            raise ForbiddenError(INVALID_KEY_MESSAGE)


def rejection_response(error: AuthRejected) -> JSONResponse:
    return JSONResponse(
        {"error": error.label, "message": error.message},
        status_code=error.status_code,
    )


class AccessGateMiddleware:
    """Apply an ``AccessGate`` to a fixed set of paths.

    Paths outside ``paths`` (health, info) pass through untouched.
    """

    def __init__(self, app: ASGIApp, gate: AccessGate, paths: Iterable[str]) -> None:
        self.app = app
        self.gate = gate
        self.paths = frozenset(paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        # Match the path the router will dispatch on, without any root_path prefix
        if scope["type"] != "http" or get_route_path(scope) not in self.paths:
            await self.app(scope, receive, send)
            return

        try:
            self.gate.enforce(Headers(scope=scope))
        except AuthRejected as e:
            client = scope.get("client")
            logger.warning(
                "Rejected %s %s from %s: %s",
                scope.get("method"),
                scope["path"],
                client[0] if client else "unknown",
                e.label,
            )
            await rejection_response(e)(scope, receive, send)
            return

        await self.app(scope, receive, send)


__all__ = [
    "AccessDecision",
    "AccessGate",
    "AccessGateMiddleware",
    "GateState",
    "extract_api_key",
]
