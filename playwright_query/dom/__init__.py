"""Browser-side scripts used by PlaywrightQuery."""

from .scripts import (
    GET_ATTRIBUTE,
    GET_ATTRIBUTE_RESOLVED_SRC,
    GET_ATTRIBUTES,
    GET_INNER_TEXT,
    GET_INNER_HTML,
    GET_PROPERTY,
    SET_VALUE,
    page_script,
)

__all__ = [
    "GET_ATTRIBUTE",
    "GET_ATTRIBUTE_RESOLVED_SRC",
    "GET_ATTRIBUTES",
    "GET_INNER_TEXT",
    "GET_INNER_HTML",
    "GET_PROPERTY",
    "SET_VALUE",
    "page_script",
]
