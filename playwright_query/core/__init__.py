"""Core PlaywrightQuery components."""

from .playwright_query import PlaywrightQuery, headless_from_env
from .context import QueryContext
from .page import QueryPage, field_selector
from .element import ElementSelector, QueryElementHandle
from .errors import (
    PlaywrightQueryError,
    PlaywrightQueryNotInitializedError,
    BrowserNotAvailableError,
    PageNotAvailableError,
    ElementNotFoundError,
    FieldNotFoundError,
    ConfigurationError,
)

__all__ = [
    # Main classes
    "PlaywrightQuery",
    "QueryContext",
    "QueryPage",
    "ElementSelector",
    "QueryElementHandle",
    # Helpers
    "headless_from_env",
    "field_selector",
    # Errors
    "PlaywrightQueryError",
    "PlaywrightQueryNotInitializedError",
    "BrowserNotAvailableError",
    "PageNotAvailableError",
    "ElementNotFoundError",
    "FieldNotFoundError",
    "ConfigurationError",
]
