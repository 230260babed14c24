"""Centralized logging configuration for windowfx.

Logging is configured through environment variables or programmatically with
:func:`configure_logging`. Library modules only ever call :func:`get_logger`.
"""

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable names
ENV_LOG_LEVEL = "WINDOWFX_LOG_LEVEL"
ENV_LOG_FILE = "WINDOWFX_LOG_FILE"
ENV_LOG_FORMAT = "WINDOWFX_LOG_FORMAT"
ENV_STRUCTURED_LOGS = "WINDOWFX_STRUCTURED_LOGS"
ENV_PERF_LOG_LEVEL = "WINDOWFX_PERF_LOG_LEVEL"

_RESERVED_RECORD_KEYS = frozenset(
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
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """Formatter that renders log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _resolve_level(level: str | None) -> int:
    level_str = level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL
    return getattr(logging, level_str.upper(), logging.WARNING)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a windowfx module.

    Module loggers propagate to the ``windowfx`` package logger, which owns
    the handlers installed by :func:`configure_logging`.

    Args:
        name: Name of the logger (typically ``__name__`` of the calling module)
        level: Optional log level override for this logger only

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Resolved window", extra={"window_dates": 65})
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_resolve_level(level))
    return logger


def configure_logging(
    level: str | None = None,
    log_file: str | None = None,
    console: bool = True,
    structured: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> None:
    """Configure handlers and formatters for the ``windowfx`` logger tree.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to ``WINDOWFX_LOG_LEVEL`` or WARNING.
        log_file: Path to a log file. Defaults to ``WINDOWFX_LOG_FILE``;
                 no file handler is installed when neither is set.
        console: Whether to log to stderr. Default: True
        structured: Whether to emit JSON lines. ``WINDOWFX_STRUCTURED_LOGS``
                   set to true/1/yes also enables it.
        max_bytes: Maximum size of the log file before rotation (default: 10MB)
        backup_count: Number of rotated log files to keep (default: 5)

    Example:
        >>> configure_logging(level="DEBUG")
        >>> configure_logging(level="INFO", log_file="/var/log/windowfx.log", structured=True)
    """
    logger = logging.getLogger("windowfx")
    logger.handlers.clear()

    log_level = _resolve_level(level)
    logger.setLevel(log_level)

    use_structured = structured or os.getenv(ENV_STRUCTURED_LOGS, "").lower() in (
        "true",
        "1",
        "yes",
    )

    if use_structured:
        formatter: logging.Formatter = StructuredFormatter(datefmt=DEFAULT_DATE_FORMAT)
    else:
        log_format = os.getenv(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)
        formatter = logging.Formatter(log_format, datefmt=DEFAULT_DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    log_file_path = log_file or os.getenv(ENV_LOG_FILE)
    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_performance_logger(name: str) -> logging.Logger:
    """Get a logger for timing information.

    Performance loggers live under ``windowfx.performance`` and default to
    DEBUG so that they can be enabled independently of module loggers.

    Args:
        name: Name of the performance logger

    Returns:
        Logger configured for performance monitoring

    Example:
        >>> perf_logger = get_performance_logger("engine.runner")
        >>> perf_logger.debug("Batch completed", extra={"duration_ms": 12.5, "trades": 10})
    """
    logger = logging.getLogger(f"windowfx.performance.{name}")
    perf_level = os.getenv(ENV_PERF_LOG_LEVEL, "DEBUG")
    logger.setLevel(getattr(logging, perf_level.upper(), logging.DEBUG))
    return logger


def disable_logging() -> None:
    """Silence all windowfx logging."""
    logger = logging.getLogger("windowfx")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


if not logging.getLogger("windowfx").handlers:
    configure_logging()
