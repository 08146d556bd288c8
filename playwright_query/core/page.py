"""QueryPage implementation with query helpers."""

import asyncio
from typing import Optional, Any, Dict, List, TYPE_CHECKING
from playwright.async_api import Page

from ..dom.scripts import SET_VALUE
from ..types import FieldFillResult, FillResult
from ..utils.logger import PlaywrightQueryLogger, get_logger
from .element import ElementSelector, QueryElementHandle
from .errors import FieldNotFoundError

if TYPE_CHECKING:
    from .context import QueryContext


def _css_string(value: str) -> str:
    """Escape a value for use inside a double-quoted CSS string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def field_selector(container: str, field: str) -> str:
    """Build the selector for a named field under a container."""
    return f'{container} [name="{_css_string(field)}"]'


class QueryPage:
    """
    Page wrapper that adds query helpers to Playwright's Page.

    Provides q(), exists(), get_elements_attribute() and fill_form(). Anything
    not defined here is proxied to the wrapped Playwright page.
    """

    def __init__(
        self,
        page: Page,
        context: Optional['QueryContext'] = None,
        logger: Optional[PlaywrightQueryLogger] = None,
    ):
        """
        Initialize QueryPage.

        Args:
            page: Playwright Page instance
            context: Parent QueryContext, if created through PlaywrightQuery
            logger: Logger to use when there is no parent context
        """
        self._page = page
        self._context = context
        if context is not None:
            base_logger = context.playwright_query.logger
        else:
            base_logger = logger or get_logger()
        self._logger = base_logger.child(component="page")
        self._page_id = id(self)

        self._logger.debug(
            "page:init",
            "QueryPage created",
            page_id=self._page_id,
        )

    @property
    def page(self) -> Page:
        """Get the underlying Playwright page."""
        return self._page

    @property
    def context(self) -> Optional['QueryContext']:
        """Get parent context."""
        return self._context

    def q(self, selector: str) -> ElementSelector:
        """
        Prepare a lazy query for the first element matching selector.

        Examples:
            title = await page.q("h1").text()
            checked = await page.q("#terms").prop("checked")
        """
        return ElementSelector(self._page, selector, self._logger)

    async def exists(self, selector: str) -> bool:
        """Check if at least one element currently matches selector."""
        return await self._page.query_selector(selector) is not None

    async def query(self, selector: str) -> Optional[QueryElementHandle]:
        """Get the first matching element, wrapped, or None."""
        handle = await self._page.query_selector(selector)
        if handle is None:
            return None
        return QueryElementHandle(handle, self._logger)

    async def query_all(self, selector: str) -> List[QueryElementHandle]:
        """Get all matching elements, wrapped, in document order."""
        handles = await self._page.query_selector_all(selector)
        return [QueryElementHandle(handle, self._logger) for handle in handles]

    async def get_elements_attribute(self, selector: str, attribute: str) -> List[Optional[str]]:
        """
        Collect an attribute from every element matching selector.

        Args:
            selector: CSS selector
            attribute: Attribute name (``src`` yields resolved URLs)

        Returns:
            One value per match, in document order
        """
        elements = await self.query_all(selector)
        values = await asyncio.gather(
            *(element.get_attribute(attribute) for element in elements)
        )

        self._logger.debug(
            "page:get_elements_attribute",
            "Collected attribute values",
            selector=selector,
            attribute=attribute,
            count=len(values),
        )
        return list(values)

    async def fill_form(
        self,
        selector: str,
        fields: Dict[str, str],
        strict: bool = False,
    ) -> FillResult:
        """
        Set the value of named inputs inside a container.

        Each field is located with ``<selector> [name="<field>"]``. Fields that
        match nothing are skipped and reported in the result.

        Args:
            selector: Container selector, e.g. ``"form#login"``
            fields: Field name to value mapping
            strict: Raise FieldNotFoundError if any field was missing

        Returns:
            FillResult with one entry per field

        Raises:
            FieldNotFoundError: In strict mode, after every field was processed

        Examples:
            await page.fill_form("#login", {"user": "alice", "pass": "secret"})
        """
        result = FillResult(container=selector)

        for field, value in fields.items():
            target = field_selector(selector, field)
            handle = await self._page.query_selector(target)

            if handle is None:
                self._logger.warn(
                    "page:fill_form",
                    "Form field not found",
                    field=field,
                    selector=target,
                )
                result.fields.append(FieldFillResult(
                    field=field,
                    selector=target,
                    filled=False,
                    error=f"No element matches {target}",
                ))
                continue

            await handle.evaluate(SET_VALUE, value)
            result.fields.append(FieldFillResult(field=field, selector=target, filled=True))

        self._logger.debug(
            "page:fill_form",
            "Form filled",
            container=selector,
            filled=len(result.fields) - len(result.missing),
            missing=result.missing,
        )

        if strict and result.missing:
            raise FieldNotFoundError(selector, result.missing)

        return result

    # Proxy methods to underlying Playwright page
    async def goto(self, url: str, **kwargs: Any) -> Any:
        """Navigate to URL."""
        self._logger.info("page:navigate", f"Navigating to {url}")
        return await self._page.goto(url, **kwargs)

    async def set_content(self, html: str, **kwargs: Any) -> None:
        """Replace the page document."""
        await self._page.set_content(html, **kwargs)

    async def close(self, **kwargs: Any) -> None:
        """Close the page."""
        self._logger.info("page:close", "Closing page")
        await self._page.close(**kwargs)

    @property
    def url(self) -> str:
        """Get current URL."""
        return self._page.url

    async def title(self) -> str:
        """Get page title."""
        return await self._page.title()

    async def content(self) -> str:
        """Get page content."""
        return await self._page.content()

    async def evaluate(self, expression: str, *args: Any) -> Any:
        """Evaluate JavaScript in the page."""
        return await self._page.evaluate(expression, *args)

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> Optional[QueryElementHandle]:
        """Wait for selector and return the wrapped element."""
        handle = await self._page.wait_for_selector(selector, **kwargs)
        if handle is None:
            return None
        return QueryElementHandle(handle, self._logger)

    async def click(self, selector: str, **kwargs: Any) -> None:
        """Click an element."""
        await self._page.click(selector, **kwargs)

    async def fill(self, selector: str, value: str, **kwargs: Any) -> None:
        """Fill a single input (Playwright semantics)."""
        await self._page.fill(selector, value, **kwargs)

    def __getattr__(self, name: str) -> Any:
        """Proxy other attributes to Playwright page."""
        return getattr(self._page, name)

    def __repr__(self) -> str:
        """String representation."""
        return f"<QueryPage id={self._page_id} url='{self.url}'>"
