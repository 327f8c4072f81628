"""Framework-level building blocks shared by every gateway layer."""

from .errors import (
    AuthRejected,
    ConfigurationError,
    ErrorCode,
    ErrorSeverity,
    GatewayError,
    SessionNotFound,
    TransportFailure,
    UpstreamApiError,
    ValidationFailure,
)

__all__ = [
    "AuthRejected",
    "ConfigurationError",
    "ErrorCode",
    "ErrorSeverity",
    "GatewayError",
    "SessionNotFound",
    "TransportFailure",
    "UpstreamApiError",
    "ValidationFailure",
]
