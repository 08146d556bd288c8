"""Logging configuration for PlaywrightQuery."""

import logging
import sys
import structlog
from typing import Any, Dict, Optional, List, Union
from enum import IntEnum
import os


class LogLevel(IntEnum):
    """Log levels for PlaywrightQuery."""
    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


# structlog method name for each level
_LEVEL_METHODS = {
    LogLevel.ERROR: "error",
    LogLevel.WARN: "warning",
    LogLevel.INFO: "info",
    LogLevel.DEBUG: "debug",
}


PACKAGE_LOGGER_NAME = "playwright_query"

_LEVEL_NAMES = {
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "info": LogLevel.INFO,
    "debug": LogLevel.DEBUG,
}

_handler_installed = False


def _processors() -> List[Any]:
    processors: List[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if sys.stderr.isatty() and os.getenv("NO_COLOR") is None:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def _wrap_package_logger() -> structlog.stdlib.BoundLogger:
    return structlog.wrap_logger(
        logging.getLogger(PACKAGE_LOGGER_NAME),
        processors=_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def _install_handler() -> None:
    global _handler_installed
    if _handler_installed:
        return

    stdlib_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(handler)
    # Verbosity is filtered per PlaywrightQueryLogger, not here
    stdlib_logger.setLevel(logging.DEBUG)
    stdlib_logger.propagate = False
    _handler_installed = True


def configure_logging(verbose: int = 0) -> structlog.stdlib.BoundLogger:
    """
    Build the structlog logger for a PlaywrightQuery session.

    Only the ``playwright_query`` stdlib logger is touched, and its stderr
    handler is installed once per process. The global structlog and root
    logging configuration are left alone, so sessions with different
    verbosity can coexist.

    Args:
        verbose: Verbosity level (0-3), bound onto every line

    Returns:
        Logger bound to the package's stdlib logger
    """
    _install_handler()
    return _wrap_package_logger().bind(verbose=verbose)


class LogLine:
    """Represents a structured log line."""

    def __init__(
        self,
        category: str,
        message: str,
        level: LogLevel = LogLevel.INFO,
        auxiliary: Optional[Dict[str, Any]] = None,
    ):
        self.category = category
        self.message = message
        self.level = level
        self.auxiliary = auxiliary or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert log line to dictionary."""
        return {
            "category": self.category,
            "level_name": self.level.name,
            **self.auxiliary,
        }


class PlaywrightQueryLogger:
    """Logger wrapper for PlaywrightQuery with category support."""

    def __init__(self, logger: Any, verbose: int = 0):
        self.logger = logger
        self.verbose = verbose

    def log(self, log_line: Union[LogLine, Dict[str, Any]]) -> None:
        """Log a structured log line."""
        if isinstance(log_line, dict):
            level = log_line.get("level", LogLevel.INFO)
            if isinstance(level, str):
                level = _LEVEL_NAMES.get(level.lower(), LogLevel.INFO)
            elif level not in list(LogLevel):
                level = LogLevel.INFO
            log_line = LogLine(
                log_line.get("category", ""),
                log_line.get("message", ""),
                LogLevel(level),
                log_line.get("auxiliary", {}),
            )

        if log_line.level.value > self.verbose:
            return

        log_method = getattr(self.logger, _LEVEL_METHODS[log_line.level], self.logger.info)
        log_method(log_line.message, **log_line.to_dict())

    def error(self, category: str, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self.log(LogLine(category, message, LogLevel.ERROR, kwargs))

    def warn(self, category: str, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self.log(LogLine(category, message, LogLevel.WARN, kwargs))

    def info(self, category: str, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self.log(LogLine(category, message, LogLevel.INFO, kwargs))

    def debug(self, category: str, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self.log(LogLine(category, message, LogLevel.DEBUG, kwargs))

    def child(self, **bindings: Any) -> 'PlaywrightQueryLogger':
        """Create a child logger with additional context."""
        child_logger = self.logger.bind(**bindings)
        return PlaywrightQueryLogger(child_logger, self.verbose)


def get_logger(verbose: int = 0) -> PlaywrightQueryLogger:
    """
    Return a logger for wrappers created outside a PlaywrightQuery session.

    No handler is installed; lines go wherever the application routes the
    ``playwright_query`` stdlib logger.
    """
    return PlaywrightQueryLogger(_wrap_package_logger(), verbose)
