"""Logging setup for the gateway process.

Two output styles are supported:
- plain text (default, human readable)
- JSON lines (ELK/Datadog style), enabled with ``structured=True``

Secrets (WordPress application password, gateway API key) are masked by a
filter attached to the root handler so they never reach the log stream.
"""

import json
import logging
import sys
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
REDACTED = "***"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "session_id": getattr(record, "session_id", None),
            "tool": getattr(record, "tool", None),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class RedactingFilter(logging.Filter):
    """Mask configured secret values in log messages."""

    def __init__(self, secrets: Iterable[str | None]) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self._secrets:
            redacted = redacted.replace(secret, REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(
    level: str = "INFO",
    structured: bool = False,
    secrets: Iterable[str | None] = (),
    stream: Any = None,
) -> logging.Handler:
    """Install a single root handler.

    Args:
        level: Logging level name
        structured: Emit JSON lines instead of plain text
        secrets: Values that must never appear in log output
        stream: Target stream (default: stderr)

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
    handler.addFilter(RedactingFilter(secrets))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
