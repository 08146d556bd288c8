"""Custom exception hierarchy for PlaywrightQuery.

Only configuration, lifecycle and strict form-fill problems are raised here.
A selector that matches nothing is reported as ``None``, and errors coming
from Playwright itself propagate unchanged.
"""

from typing import Optional, Any, Dict, List


class PlaywrightQueryError(Exception):
    """Base exception for all PlaywrightQuery errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PlaywrightQueryNotInitializedError(PlaywrightQueryError):
    """Raised when PlaywrightQuery methods are called before initialization."""

    def __init__(self):
        super().__init__(
            "PlaywrightQuery not initialized. Call init() before using other methods.",
            {"error_code": "NOT_INITIALIZED"}
        )


class BrowserNotAvailableError(PlaywrightQueryError):
    """Raised when the browser cannot be launched."""

    def __init__(self, reason: str):
        super().__init__(
            f"Browser not available: {reason}",
            {"reason": reason, "error_code": "BROWSER_NOT_AVAILABLE"}
        )


class PageNotAvailableError(PlaywrightQueryError):
    """Raised when a page cannot be created or wrapped."""

    def __init__(self, reason: str):
        super().__init__(
            f"Page not available: {reason}",
            {"reason": reason, "error_code": "PAGE_NOT_AVAILABLE"}
        )


class ElementNotFoundError(PlaywrightQueryError):
    """Raised when element cannot be found."""

    def __init__(self, selector: str, message: Optional[str] = None):
        super().__init__(
            message or f"Element not found: {selector}",
            {"selector": selector, "error_code": "ELEMENT_NOT_FOUND"}
        )


class FieldNotFoundError(ElementNotFoundError):
    """Raised by a strict form fill when named fields are missing."""

    def __init__(self, container: str, fields: List[str]):
        super().__init__(
            container,
            f"Form fields not found under {container!r}: {', '.join(fields)}",
        )
        self.container = container
        self.fields = list(fields)
        self.details.update({"fields": self.fields, "error_code": "FIELD_NOT_FOUND"})


class ConfigurationError(PlaywrightQueryError):
    """Raised when configuration is invalid."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid configuration: {reason}",
            {"reason": reason, "error_code": "CONFIGURATION_ERROR"}
        )
