"""Utility helpers for PlaywrightQuery."""

from .logger import (
    LogLevel,
    LogLine,
    PlaywrightQueryLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "LogLevel",
    "LogLine",
    "PlaywrightQueryLogger",
    "configure_logging",
    "get_logger",
]
