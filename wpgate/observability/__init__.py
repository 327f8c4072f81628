"""
Logging utilities for the gateway.
"""

from .logging import JSONFormatter, RedactingFilter, configure_logging

__all__ = ["JSONFormatter", "RedactingFilter", "configure_logging"]
