"""Core PlaywrightQuery class implementation."""

import os
import uuid
from typing import Optional, Dict, Any, List, TYPE_CHECKING

from playwright.async_api import async_playwright, Browser, Page, Playwright
from pydantic import ValidationError

from ..types import ConstructorParams, InitResult
from ..utils.logger import configure_logging, PlaywrightQueryLogger
from .errors import (
    PlaywrightQueryNotInitializedError,
    BrowserNotAvailableError,
    ConfigurationError,
)

if TYPE_CHECKING:
    from .context import QueryContext
    from .page import QueryPage


HEADLESS_ENV_VAR = "PLAYWRIGHT_QUERY_HEADLESS"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def headless_from_env(default: bool = True) -> bool:
    """
    Read the headless flag from PLAYWRIGHT_QUERY_HEADLESS.

    Raises:
        ConfigurationError: If the variable holds an unrecognised value
    """
    raw = os.getenv(HEADLESS_ENV_VAR)
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{HEADLESS_ENV_VAR} must be a boolean, got {raw!r}")


class PlaywrightQuery:
    """
    Launches a browser and hands out pages with query helpers.

    Examples:
        async with PlaywrightQuery() as pq:
            page = await pq.page()
            await page.goto("https://example.com")
            heading = await page.q("h1").text()
    """

    def __init__(
        self,
        verbose: int = 0,
        headless: Optional[bool] = None,
        browser: str = "chromium",
        browser_args: Optional[List[str]] = None,
        context_options: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize PlaywrightQuery with configuration.

        Args:
            verbose: Logging verbosity (0-3)
            headless: Run browser headless; None reads PLAYWRIGHT_QUERY_HEADLESS
            browser: Browser type ("chromium", "firefox", "webkit")
            browser_args: Additional browser arguments
            context_options: Extra options for the browser context

        Raises:
            ConfigurationError: If any option is invalid
        """
        if headless is None:
            headless = headless_from_env()

        try:
            self.config = ConstructorParams(
                verbose=verbose,
                headless=headless,
                browser=browser,  # type: ignore
                browser_args=browser_args or [],
                context_options=context_options or {},
            )
        except ValidationError as e:
            raise ConfigurationError(str(e))

        self.logger = PlaywrightQueryLogger(
            configure_logging(verbose),
            verbose
        )

        self.initialized = False
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional['QueryContext'] = None
        self.session_id = str(uuid.uuid4())

        self.logger.info(
            "playwright_query:init",
            "PlaywrightQuery created",
            browser=self.config.browser,
            headless=self.config.headless,
            session_id=self.session_id,
        )

    async def init(self) -> InitResult:
        """
        Launch the browser and create the default context.

        Returns:
            InitResult with session details

        Raises:
            BrowserNotAvailableError: If browser fails to start
        """
        if self.initialized:
            self.logger.warn("playwright_query:init", "Already initialized")
            return self._get_init_result()

        try:
            await self._launch()
        except Exception as e:
            self.logger.error(
                "playwright_query:init",
                f"Initialization failed: {e}",
                error=str(e),
            )
            try:
                await self._teardown()
            except Exception as cleanup_error:
                # Report the launch failure, not the cleanup one
                self.logger.error(
                    "playwright_query:init",
                    f"Cleanup after failed initialization failed: {cleanup_error}",
                    error=str(cleanup_error),
                )
            raise BrowserNotAvailableError(str(e)) from e

        self.initialized = True
        result = self._get_init_result()

        self.logger.info(
            "playwright_query:init",
            "Initialization complete",
            context_id=result.context_id,
        )
        return result

    def _launch_args(self) -> List[str]:
        browser_args = list(self.config.browser_args)
        if not any(arg.startswith("--disable-blink-features") for arg in browser_args):
            browser_args.append("--disable-blink-features=AutomationControlled")
        return browser_args

    async def _launch(self) -> None:
        self.playwright = await async_playwright().start()

        browser_type = getattr(self.playwright, self.config.browser)
        launch_options: Dict[str, Any] = {"headless": self.config.headless}
        # Chromium flags are meaningless to the other engines
        if self.config.browser == "chromium":
            launch_options["args"] = self._launch_args()
        elif self.config.browser_args:
            launch_options["args"] = list(self.config.browser_args)
        self.browser = await browser_type.launch(**launch_options)

        await self._create_context()

    async def _create_context(self) -> None:
        if not self.browser:
            raise BrowserNotAvailableError("Browser not initialized")

        from .context import QueryContext

        context_options: Dict[str, Any] = {
            "viewport": {"width": 1280, "height": 720},
        }
        context_options.update(self.config.context_options)

        playwright_context = await self.browser.new_context(**context_options)
        self.context = QueryContext(playwright_context, self)

    async def page(self) -> 'QueryPage':
        """
        Create a new page with query helpers.

        Raises:
            PlaywrightQueryNotInitializedError: If not initialized
        """
        if not self.initialized or not self.context:
            raise PlaywrightQueryNotInitializedError()

        return await self.context.new_page()

    def wrap(self, page: Page) -> 'QueryPage':
        """
        Add query helpers to an existing Playwright page.

        Pages of this session's context reuse the context's wrapper.
        """
        if self.context is not None and page.context is self.context._context:
            return self.context.wrap(page)

        from .page import QueryPage
        return QueryPage(page, logger=self.logger)

    async def _teardown(self) -> None:
        context, browser, playwright = self.context, self.browser, self.playwright
        self.context = None
        self.browser = None
        self.playwright = None
        self.initialized = False

        # Each step runs even if an earlier one fails
        try:
            if context:
                await context.close()
        finally:
            try:
                if browser:
                    await browser.close()
            finally:
                if playwright:
                    await playwright.stop()

    async def close(self) -> None:
        """Clean up resources."""
        self.logger.info("playwright_query:close", "Closing PlaywrightQuery")
        await self._teardown()
        self.logger.info("playwright_query:close", "PlaywrightQuery closed")

    def _get_init_result(self) -> InitResult:
        return InitResult(
            session_id=self.session_id,
            browser=self.config.browser,
            headless=self.config.headless,
            context_id=str(self.context.context_id) if self.context else None,
        )

    async def __aenter__(self) -> 'PlaywrightQuery':
        """Async context manager entry."""
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
