"""QueryContext implementation."""

import weakref
from typing import Optional, Any, List, TYPE_CHECKING
from playwright.async_api import BrowserContext, Page

from .errors import PageNotAvailableError

if TYPE_CHECKING:
    from .playwright_query import PlaywrightQuery
    from .page import QueryPage


class QueryContext:
    """
    Browser context wrapper that hands out QueryPage instances.

    Each Playwright page is wrapped at most once; the wrapper is reused for
    as long as the page object is alive.
    """

    def __init__(self, context: BrowserContext, playwright_query: 'PlaywrightQuery'):
        """
        Initialize QueryContext.

        Args:
            context: Playwright BrowserContext instance
            playwright_query: Parent PlaywrightQuery instance
        """
        self._context = context
        self._playwright_query = playwright_query
        self._logger = playwright_query.logger.child(component="context")
        self._wrappers: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
        self._context_id = id(self)

        self._logger.debug(
            "context:init",
            "QueryContext created",
            context_id=self._context_id,
        )

    @property
    def playwright_query(self) -> 'PlaywrightQuery':
        """Get parent PlaywrightQuery instance."""
        return self._playwright_query

    @property
    def context_id(self) -> int:
        """Get the identifier used in logs and InitResult."""
        return self._context_id

    def wrap(self, page: Page) -> 'QueryPage':
        """
        Get the QueryPage for a Playwright page of this context.

        Args:
            page: Playwright Page instance

        Returns:
            QueryPage wrapping page
        """
        from .page import QueryPage

        wrapper = self._wrappers.get(page)
        if wrapper is None:
            wrapper = QueryPage(page, self)
            self._wrappers[page] = wrapper
        return wrapper

    async def new_page(self, **kwargs: Any) -> 'QueryPage':
        """
        Create a new QueryPage.

        Raises:
            PageNotAvailableError: If Playwright cannot open the page
        """
        try:
            playwright_page = await self._context.new_page(**kwargs)
        except Exception as e:
            raise PageNotAvailableError(str(e)) from e

        page = self.wrap(playwright_page)

        self._logger.info(
            "context:new_page",
            "Created new page",
            page_id=id(page),
        )
        return page

    def pages(self) -> List['QueryPage']:
        """Get all open pages in this context."""
        return [self.wrap(page) for page in self._context.pages]

    async def close(self) -> None:
        """Close the context and all pages."""
        self._logger.info("context:close", "Closing context")
        await self._context.close()
        self._wrappers = weakref.WeakKeyDictionary()
        self._logger.info("context:close", "Context closed")

    @property
    def browser(self) -> Optional[Any]:
        """Get the browser instance."""
        return self._context.browser

    def __getattr__(self, name: str) -> Any:
        """Proxy other attributes to Playwright context."""
        return getattr(self._context, name)

    def __repr__(self) -> str:
        """String representation."""
        return f"<QueryContext id={self._context_id} pages={len(self._context.pages)}>"
