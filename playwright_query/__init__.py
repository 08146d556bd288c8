"""
PlaywrightQuery - query helpers for Playwright.

PlaywrightQuery wraps Playwright pages and element handles with lazy,
null-safe element queries, bulk attribute collection and form filling.
"""

__version__ = "0.1.0"

from .core import (
    PlaywrightQuery,
    QueryContext,
    QueryPage,
    ElementSelector,
    QueryElementHandle,
    PlaywrightQueryError,
    PlaywrightQueryNotInitializedError,
    BrowserNotAvailableError,
    PageNotAvailableError,
    ElementNotFoundError,
    FieldNotFoundError,
    ConfigurationError,
)

from .types import (
    ResolutionState,
    FieldFillResult,
    FillResult,
    InitResult,
    ConstructorParams,
)

__all__ = [
    # Version
    "__version__",
    # Main classes
    "PlaywrightQuery",
    "QueryContext",
    "QueryPage",
    "ElementSelector",
    "QueryElementHandle",
    # Common types
    "ResolutionState",
    "FieldFillResult",
    "FillResult",
    "InitResult",
    "ConstructorParams",
    # Common errors
    "PlaywrightQueryError",
    "PlaywrightQueryNotInitializedError",
    "BrowserNotAvailableError",
    "PageNotAvailableError",
    "ElementNotFoundError",
    "FieldNotFoundError",
    "ConfigurationError",
]
