"""Logging configuration for nolisticle."""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any

from .config import get_config_dir

# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_ATTRS = frozenset(
    {
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
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
        "correlation_id",
    }
)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Includes extra fields passed via the `extra` parameter.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextFilter(logging.Filter):
    """Filter that tags every record with the id of the current run."""

    def __init__(self, correlation_id: str | None = None):
        super().__init__()
        self.correlation_id = correlation_id or str(uuid.uuid4())[:8]

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = self.correlation_id
        return True


_context_filter: ContextFilter | None = None


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set a correlation ID for the current logging context.

    Args:
        correlation_id: ID to use, or None to generate a new one

    Returns:
        The correlation ID being used
    """
    global _context_filter
    if _context_filter is None:
        _context_filter = ContextFilter(correlation_id)
    else:
        _context_filter.correlation_id = correlation_id or str(uuid.uuid4())[:8]
    return _context_filter.correlation_id


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = False,
    verbose: bool = False,
    json_format: bool = False,
) -> logging.Logger:
    """
    Set up logging for nolisticle.

    Args:
        level: Logging level (default: INFO)
        log_to_file: Whether to also log to a file in the config dir
        verbose: If True, set level to DEBUG and show all logs on console
        json_format: If True, use JSON format for structured logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("nolisticle")

    # Clear existing handlers to allow reconfiguration
    logger.handlers.clear()

    if verbose:
        level = logging.DEBUG

    logger.setLevel(level)
    set_correlation_id()

    console_handler = logging.StreamHandler(sys.stderr)
    # Normal mode: only warnings and above so the report stays readable
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if json_format:
        console_handler.setFormatter(JSONFormatter())
    elif verbose:
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
    else:
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    # Filters on handlers, not the logger, so child logger records get the id
    console_handler.addFilter(_context_filter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_dir = get_config_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_dir / "nolisticle.log")
        file_handler.setLevel(logging.DEBUG)
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
        file_handler.addFilter(_context_filter)
        logger.addHandler(file_handler)

    return logger
