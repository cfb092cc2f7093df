"""Structured logging configuration for evg-client.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the evg_client namespace
- Environment variable control (EVG_LOG_LEVEL, EVG_LOG_FORMAT)

The library never configures logging on import; applications (and the
bundled CLI) call configure_logging() explicitly.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

__all__ = ["LOGGER_NAME", "StructuredFormatter", "TextFormatter", "configure_logging"]

LOGGER_NAME = "evg_client"

# Sensitive keys that should be redacted in log output
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key", "api-key",
    "authorization", "credential", "auth", "key",
}

# Standard LogRecord attributes, never treated as extras
_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs logs in JSON format with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (evg_client hierarchy)
    - message: Log message
    - context: Extras dict merged from LogRecord attributes

    Sensitive keys (api_key, token, etc.) are redacted so credentials never
    reach log output.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }
        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, used when EVG_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure logging for all evg_client loggers.

    Args:
        level: Optional log level override. If not provided, uses EVG_LOG_LEVEL
               environment variable (default: WARNING).
        log_format: Optional format override (json, text). If not provided,
               uses EVG_LOG_FORMAT environment variable (default: json).
    """
    if level is None:
        level = os.getenv("EVG_LOG_LEVEL", "WARNING")
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if log_format is None:
        log_format = os.getenv("EVG_LOG_FORMAT", "json")

    if log_format.lower() == "text":
        formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Idempotent: only add a handler once, refresh its formatter otherwise
    if not logger.handlers:
        handler = logging.StreamHandler()
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
