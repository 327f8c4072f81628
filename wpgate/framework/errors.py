"""
Error taxonomy for the gateway.

Every failure that crosses a layer boundary is one of the typed exceptions
below. Transport layers translate them into protocol-level rejections:

- HTTP endpoints map ``status_code`` to the response status
- MCP tool calls surface ``str(error)`` as an error tool result

Key features:
- Error code enums (avoid typos)
- Severity levels (fatal, transient, user_error)
- Pydantic model for structured error details
- Boundary translation function
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Error Codes and Severity
# ============================================================================


class ErrorCode(str, Enum):
    """Enumeration of all error codes in the system."""

    # Upstream (WordPress REST API)
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    UPSTREAM_API_ERROR = "UPSTREAM_API_ERROR"

    # Access boundary
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Session routing
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_CONFLICT = "SESSION_CONFLICT"

    # Caller input
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Process setup
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity, used when logging and reporting."""

    FATAL = "fatal"  # Unrecoverable, requires intervention
    TRANSIENT = "transient"  # Temporary, caller may try again
    USER_ERROR = "user_error"  # Caller mistake


# ============================================================================
# Pydantic Error Models
# ============================================================================


class ErrorDetails(BaseModel):
    """Structured error details for serialization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: ErrorCode = Field(..., description="Error code enum")
    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(default=500, description="HTTP-equivalent status")
    context: dict[str, Any] = Field(default_factory=dict, description="Additional context")
    severity: ErrorSeverity = Field(default=ErrorSeverity.FATAL, description="Error severity")


# ============================================================================
# Base Exception Class
# ============================================================================


class GatewayError(Exception):
    """Base class for all gateway errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
        severity: ErrorSeverity = ErrorSeverity.FATAL,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.severity = severity
        if status_code is not None:
            self.status_code = status_code

    def to_details(self) -> ErrorDetails:
        """Convert to structured ErrorDetails."""
        return ErrorDetails(
            code=self.code,
            message=self.message,
            status_code=self.status_code,
            context=self.details,
            severity=self.severity,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }


# ============================================================================
# Upstream Errors
# ============================================================================


class TransportFailure(GatewayError):
    """No response reached us (DNS failure, refused connection, broken stream)."""

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(
            f"WordPress API unreachable ({type(cause).__name__}): {cause}",
            ErrorCode.TRANSPORT_FAILURE,
            {"url": url, "cause_type": type(cause).__name__},
            severity=ErrorSeverity.TRANSIENT,
            status_code=502,
        )
        self.url = url
        self.cause = cause


class UpstreamApiError(GatewayError):
    """Non-2xx response from the WordPress REST API.

    ``upstream_status`` is the status WordPress answered with and
    ``upstream_message`` the text extracted from its body.
    """

    def __init__(self, status_code: int, message: str, body: str | None = None) -> None:
        super().__init__(
            f"WordPress API error ({status_code}): {message}",
            ErrorCode.UPSTREAM_API_ERROR,
            {"upstream_status": status_code},
            severity=ErrorSeverity.TRANSIENT if status_code >= 500 else ErrorSeverity.USER_ERROR,
            status_code=502,
        )
        self.upstream_status = status_code
        self.upstream_message = message
        self.body = body


# ============================================================================
# Access Errors
# ============================================================================


class AuthRejected(GatewayError):
    """Request rejected by the access gate."""

    label: str = "Unauthorized"


class UnauthorizedError(AuthRejected):
    """No API key was presented."""

    def __init__(self, message: str = "Missing API key") -> None:
        super().__init__(
            message, ErrorCode.UNAUTHORIZED, severity=ErrorSeverity.USER_ERROR, status_code=401
        )


class ForbiddenError(AuthRejected):
    """An API key was presented but does not match."""

    label = "Forbidden"

    def __init__(self, message: str = "Invalid API key") -> None:
        super().__init__(
            message, ErrorCode.FORBIDDEN, severity=ErrorSeverity.USER_ERROR, status_code=403
        )


# ============================================================================
# Session Errors
# ============================================================================


class SessionNotFound(GatewayError):
    """No open session with this identifier."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "Session not found",
            ErrorCode.SESSION_NOT_FOUND,
            {"session_id": session_id},
            severity=ErrorSeverity.USER_ERROR,
            status_code=404,
        )
        self.session_id = session_id


class SessionConflictError(GatewayError):
    """A transport tried to register an identifier that is already taken."""

    def __init__(self, session_id: str, reason: str = "session id already registered") -> None:
        super().__init__(
            f"Cannot register session {session_id}: {reason}",
            ErrorCode.SESSION_CONFLICT,
            {"session_id": session_id},
            severity=ErrorSeverity.FATAL,
            status_code=500,
        )
        self.session_id = session_id


# ============================================================================
# Validation / Setup Errors
# ============================================================================


class ValidationFailure(GatewayError):
    """Caller input was malformed or empty."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {}
        if field:
            details["field"] = field
        super().__init__(
            message,
            ErrorCode.VALIDATION_ERROR,
            details,
            severity=ErrorSeverity.USER_ERROR,
            status_code=400,
        )


class ConfigurationError(GatewayError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details, status_code=500)


class InternalError(GatewayError):
    """Internal server error (unexpected condition)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        details = {}
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__
        super().__init__(message, ErrorCode.INTERNAL_ERROR, details, status_code=500)


# ============================================================================
# Boundary Translation
# ============================================================================


def to_gateway_error(exc: Exception) -> GatewayError:
    """
    Translate arbitrary exceptions to GatewayError at boundaries.

    Args:
        exc: Any exception

    Returns:
        GatewayError instance
    """
    if isinstance(exc, GatewayError):
        return exc
    if isinstance(exc, ValueError):
        return ValidationFailure(str(exc))
    return InternalError(f"Unexpected error: {exc}", cause=exc)


__all__ = [
    "AuthRejected",
    "ConfigurationError",
    "ErrorCode",
    "ErrorDetails",
    "ErrorSeverity",
    "ForbiddenError",
    "GatewayError",
    "InternalError",
    "SessionConflictError",
    "SessionNotFound",
    "TransportFailure",
    "UnauthorizedError",
    "UpstreamApiError",
    "ValidationFailure",
    "to_gateway_error",
]
