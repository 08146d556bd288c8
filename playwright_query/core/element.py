"""Element-level query helpers.

ElementSelector is a lazy, memoizing reference to the first element matching
a selector. QueryElementHandle wraps an already resolved Playwright
ElementHandle with the same family of read helpers.
"""

import asyncio
from typing import Optional, Any, Dict
from playwright.async_api import Page, ElementHandle

from ..dom.scripts import (
    GET_ATTRIBUTE,
    GET_ATTRIBUTE_RESOLVED_SRC,
    GET_ATTRIBUTES,
    GET_INNER_TEXT,
    GET_INNER_HTML,
    GET_PROPERTY,
    page_script,
)
from ..types import ResolutionState
from ..utils.logger import PlaywrightQueryLogger, get_logger


def _consume_exception(task: asyncio.Future) -> None:
    """Mark a failed query as retrieved even if every waiter was cancelled."""
    if not task.cancelled():
        task.exception()


class ElementSelector:
    """
    Lazy reference to the first element matching a CSS selector.

    Nothing is queried on construction. The first accessor call resolves the
    selector and the outcome, including "no match", is cached for the lifetime
    of the instance. Later page changes are not observed; call reset() to
    resolve again.

    Every accessor returns None when the selector matched nothing. Errors
    raised by Playwright (closed page, destroyed execution context) propagate
    unchanged.
    """

    def __init__(
        self,
        page: Page,
        selector: str,
        logger: Optional[PlaywrightQueryLogger] = None,
    ):
        """
        Initialize ElementSelector.

        Args:
            page: Playwright Page used to resolve and evaluate
            selector: CSS selector, passed to Playwright unmodified
            logger: Parent logger, defaults to the package logger
        """
        self._page = page
        self._selector = selector
        self._logger = (logger or get_logger()).child(component="element")
        self._state = ResolutionState.UNRESOLVED
        self._handle: Optional[ElementHandle] = None
        self._pending: Optional[asyncio.Future] = None
        # Bumped by reset() so a superseded query cannot write the cache
        self._generation = 0

    @property
    def selector(self) -> str:
        """Get the selector this reference resolves."""
        return self._selector

    @property
    def page(self) -> Page:
        """Get the page this reference queries."""
        return self._page

    @property
    def state(self) -> ResolutionState:
        """Get the current resolution state."""
        return self._state

    @property
    def resolved(self) -> bool:
        """Whether a resolution outcome has been cached."""
        return self._state is not ResolutionState.UNRESOLVED

    async def _resolve(self) -> Optional[ElementHandle]:
        if self._state is not ResolutionState.UNRESOLVED:
            return self._handle

        # Concurrent first callers share one query
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._query(self._generation))
            self._pending.add_done_callback(_consume_exception)
        return await asyncio.shield(self._pending)

    async def _query(self, generation: int) -> Optional[ElementHandle]:
        try:
            handle = await self._page.query_selector(self._selector)
        except Exception:
            if generation == self._generation:
                self._pending = None
            raise

        # Superseded by reset(); the newer query owns the cache
        if generation != self._generation:
            return handle

        self._handle = handle
        self._state = ResolutionState.FOUND if handle is not None else ResolutionState.ABSENT
        self._pending = None

        self._logger.debug(
            "element:resolve",
            "Selector resolved",
            selector=self._selector,
            state=self._state.value,
        )
        return handle

    async def _evaluate(self, script: str, arg: Any = None) -> Any:
        handle = await self._resolve()
        if handle is None:
            return None
        return await self._page.evaluate(page_script(script), [handle, arg])

    async def element(self) -> Optional['QueryElementHandle']:
        """
        Resolve the selector.

        Returns:
            Wrapped element handle, or None if nothing matched
        """
        handle = await self._resolve()
        if handle is None:
            return None
        return QueryElementHandle(handle, self._logger)

    async def exists(self) -> bool:
        """Whether the (cached) resolution found an element."""
        return await self._resolve() is not None

    async def is_visible(self) -> Optional[bool]:
        """
        Check if element is rendered.

        Returns:
            True if the element has a bounding box, False if it has none,
            None if the selector matched nothing
        """
        handle = await self._resolve()
        if handle is None:
            return None
        return await handle.bounding_box() is not None

    async def attr(self, name: str) -> Optional[str]:
        """Get an attribute value (getAttribute semantics)."""
        return await self._evaluate(GET_ATTRIBUTE, name)

    async def text(self) -> Optional[str]:
        """Get the rendered inner text."""
        return await self._evaluate(GET_INNER_TEXT)

    async def html(self) -> Optional[str]:
        """Get the inner HTML markup."""
        return await self._evaluate(GET_INNER_HTML)

    async def prop(self, name: str) -> Any:
        """Get a live DOM property, e.g. ``checked`` or ``value``."""
        return await self._evaluate(GET_PROPERTY, name)

    def reset(self) -> None:
        """Drop the cached resolution so the next accessor queries again."""
        self._state = ResolutionState.UNRESOLVED
        self._handle = None
        self._pending = None
        self._generation += 1

    def __repr__(self) -> str:
        return f"<ElementSelector selector='{self._selector}' state={self._state.value}>"


class QueryElementHandle:
    """
    Wraps a Playwright ElementHandle with query helpers.

    The caller already holds a live handle, so no absence checks are made.
    Unknown attributes are proxied to the underlying handle.
    """

    def __init__(self, handle: ElementHandle, logger: Optional[PlaywrightQueryLogger] = None):
        self._handle = handle
        self._logger = logger or get_logger()

    @property
    def handle(self) -> ElementHandle:
        """Get the underlying Playwright ElementHandle."""
        return self._handle

    async def is_visible(self) -> bool:
        """Check if element has a bounding box."""
        return await self._handle.bounding_box() is not None

    async def get_attribute(self, name: str) -> Optional[str]:
        """
        Get an attribute value.

        ``src`` is read from the live property, so a relative path comes back
        as the resolved absolute URL. Every other name uses getAttribute.
        """
        return await self._handle.evaluate(GET_ATTRIBUTE_RESOLVED_SRC, name)

    async def get_raw_attribute(self, name: str) -> Optional[str]:
        """Get an attribute value exactly as written in the markup."""
        return await self._handle.evaluate(GET_ATTRIBUTE, name)

    async def attributes(self) -> Dict[str, str]:
        """Get all attributes as a name to value mapping."""
        return await self._handle.evaluate(GET_ATTRIBUTES)

    async def inner_text(self) -> str:
        """Get element inner text."""
        return await self._handle.evaluate(GET_INNER_TEXT)

    async def inner_html(self) -> str:
        """Get element inner HTML."""
        return await self._handle.evaluate(GET_INNER_HTML)

    async def prop(self, name: str) -> Any:
        """Get a live DOM property."""
        return await self._handle.evaluate(GET_PROPERTY, name)

    def __getattr__(self, name: str) -> Any:
        """Proxy other attributes to the Playwright handle."""
        return getattr(self._handle, name)

    def __repr__(self) -> str:
        return f"<QueryElementHandle handle={self._handle!r}>"
