"""Logging for the recipe parser.

All records go to stderr through a single handler on the ``cooklang_ir`` logger.
Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
- LOG_TYPE: text, json (default: text)

Callers attach recipe context through ``extra`` and both formats render it:

    logger.debug("Parsed line", extra={"line_number": 3})
"""

import json
import logging
import os
import sys
from typing import Any

# Recipe context attributes, in output order
CONTEXT_FIELDS = ("line_number", "recipe_size")


def recipe_context(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the recipe context attached to a record."""
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, recipe context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **recipe_context(record),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class RichTextFormatter(logging.Formatter):
    """Single line text, recipe context in brackets, colored by level on a terminal."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True) -> None:
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as text.

        Example: ``2024-05-01 10:00:00 DEBUG    cooklang_ir Parsed line 3 [line_number=3]``
        """
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        message = f"{timestamp} {record.levelname:<8} {record.name} {record.getMessage()}"

        context = recipe_context(record)
        if context:
            message += " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        color = self.COLORS.get(record.levelname)
        if self.use_color and color:
            message = f"{color}{message}{self.RESET}"
        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure logger instance.

    Args:
        name: Logger name.

    Returns:
        Configured logger instance. Repeated calls return the same logger
        without attaching another handler.
    """
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    log_level_str = os.getenv("LOG_LEVEL", "WARNING").upper()
    logger_instance.setLevel(logging.getLevelNamesMapping().get(log_level_str, logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)
    if os.getenv("LOG_TYPE", "text").lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(RichTextFormatter(use_color=sys.stderr.isatty()))
    logger_instance.addHandler(handler)

    return logger_instance


# Create module-level logger instance
logger = get_logger("cooklang_ir")
