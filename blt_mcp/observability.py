"""Logging setup and the process-wide exception safety net.

Logs always go to stderr: stdout carries MCP protocol frames.
"""

import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER = "blt_mcp"

_EXTRA_FIELDS = (
    "tool",
    "resource_uri",
    "prompt",
    "endpoint",
    "method",
    "status_code",
    "error_type",
)

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: str = "INFO", fmt: str = "text") -> logging.Logger:
    """Install a single stderr handler on the package logger.

    Args:
        level: Logging level name
        fmt: "text" or "json"

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(ROOT_LOGGER)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    # Avoid duplicating handlers when called more than once
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.propagate = False
    return package_logger


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log exceptions that escaped every handler without stopping the loop."""
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error(
            "Unhandled exception: %s",
            message,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"error_type": type(exc).__name__},
        )
    else:
        logger.error("Unhandled event loop error: %s", message)


def install_safety_net(loop: asyncio.AbstractEventLoop | None = None) -> None:
    """Route escaped asyncio exceptions to the log instead of the default handler."""
    loop = loop or asyncio.get_running_loop()
    loop.set_exception_handler(handle_loop_exception)


__all__ = [
    "JSONFormatter",
    "configure_logging",
    "handle_loop_exception",
    "install_safety_net",
]
