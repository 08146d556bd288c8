"""
Tests for ElementSelector, the lazy element reference.
"""

import asyncio
import gc
import pytest
from unittest.mock import AsyncMock, MagicMock

from playwright_query import ElementSelector, QueryElementHandle, ResolutionState
from playwright_query.dom.scripts import (
    GET_ATTRIBUTE,
    GET_INNER_TEXT,
    GET_INNER_HTML,
    GET_PROPERTY,
    page_script,
)


@pytest.fixture
def handle():
    """Create a mock element handle."""
    element = MagicMock()
    element.bounding_box = AsyncMock(return_value={"x": 0, "y": 0, "width": 10, "height": 10})
    return element


@pytest.fixture
def page(handle):
    """Create a mock page whose selector matches handle."""
    mock = MagicMock()
    mock.query_selector = AsyncMock(return_value=handle)
    mock.evaluate = AsyncMock(return_value="value")
    return mock


class TestConstruction:
    """Tests for creating selectors."""

    def test_no_query_on_construction(self, page):
        """Constructing does not touch the page."""
        selector = ElementSelector(page, "#main")

        assert selector.selector == "#main"
        assert selector.page is page
        assert selector.state is ResolutionState.UNRESOLVED
        assert not selector.resolved
        page.query_selector.assert_not_awaited()

    def test_repr(self, page):
        """repr shows selector and state."""
        assert repr(ElementSelector(page, "h1")) == "<ElementSelector selector='h1' state=unresolved>"


class TestMemoization:
    """Tests for cached resolution."""

    @pytest.mark.asyncio
    async def test_resolves_once(self, page, handle):
        """Accessors share a single resolution."""
        selector = ElementSelector(page, "a.link")

        await selector.attr("href")
        await selector.text()
        await selector.html()

        page.query_selector.assert_awaited_once_with("a.link")
        assert selector.state is ResolutionState.FOUND

    @pytest.mark.asyncio
    async def test_cache_survives_page_change(self, page, handle):
        """A later page change does not affect the cached handle."""
        selector = ElementSelector(page, "#item")
        assert await selector.exists() is True

        # Element is gone from the page now
        page.query_selector.return_value = None

        assert await selector.text() == "value"
        assert await selector.exists() is True
        page.evaluate.assert_awaited_with(page_script(GET_INNER_TEXT), [handle, None])

    @pytest.mark.asyncio
    async def test_absent_is_cached(self, page, handle):
        """A miss is terminal and never retried."""
        page.query_selector.return_value = None
        selector = ElementSelector(page, "#missing")

        assert await selector.text() is None

        page.query_selector.return_value = handle
        assert await selector.text() is None
        assert selector.state is ResolutionState.ABSENT
        page.query_selector.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_resolves_again(self, page, handle):
        """reset() is the only way to drop the cache."""
        page.query_selector.return_value = None
        selector = ElementSelector(page, "#late")
        assert await selector.exists() is False

        page.query_selector.return_value = handle
        selector.reset()

        assert selector.state is ResolutionState.UNRESOLVED
        assert await selector.exists() is True
        assert page.query_selector.await_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_query(self, page, handle):
        """Racing first calls issue one query."""
        async def slow_query(selector):
            await asyncio.sleep(0.01)
            return handle

        page.query_selector = AsyncMock(side_effect=slow_query)
        selector = ElementSelector(page, ".row")

        results = await asyncio.gather(*(selector.text() for _ in range(5)))

        assert results == ["value"] * 5
        page.query_selector.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_shared_query(self, page, handle):
        """Cancelling one caller leaves the query running for the others."""
        release = asyncio.Event()

        async def blocked_query(selector):
            await release.wait()
            return handle

        page.query_selector = AsyncMock(side_effect=blocked_query)
        selector = ElementSelector(page, ".row")

        cancelled = asyncio.ensure_future(selector.text())
        kept = asyncio.ensure_future(selector.text())
        await asyncio.sleep(0)

        cancelled.cancel()
        with pytest.raises(asyncio.CancelledError):
            await cancelled

        release.set()
        assert await kept == "value"
        assert selector.state is ResolutionState.FOUND
        page.query_selector.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_discards_superseded_query(self, page, handle):
        """A query started before reset() cannot overwrite the newer outcome."""
        release = asyncio.Event()
        calls = []

        async def query(selector):
            calls.append(selector)
            if len(calls) == 1:
                await release.wait()
                return handle
            return None

        page.query_selector = AsyncMock(side_effect=query)
        selector = ElementSelector(page, "#item")

        first = asyncio.ensure_future(selector.exists())
        await asyncio.sleep(0)

        selector.reset()
        assert await selector.exists() is False

        release.set()
        assert await first is True

        assert selector.state is ResolutionState.ABSENT
        assert await selector.exists() is False
        assert page.query_selector.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_without_waiters_is_not_reported(self, page):
        """A failed query whose callers were all cancelled is still consumed."""
        loop = asyncio.get_running_loop()
        reported = []
        loop.set_exception_handler(lambda _loop, context: reported.append(context))
        release = asyncio.Event()

        async def failing_query(selector):
            await release.wait()
            raise RuntimeError("Target closed")

        page.query_selector = AsyncMock(side_effect=failing_query)
        selector = ElementSelector(page, "#main")

        try:
            waiter = asyncio.ensure_future(selector.text())
            await asyncio.sleep(0)
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

            release.set()
            for _ in range(5):
                await asyncio.sleep(0)
            del waiter
            gc.collect()
        finally:
            loop.set_exception_handler(None)

        assert reported == []
        assert selector.state is ResolutionState.UNRESOLVED

    @pytest.mark.asyncio
    async def test_transport_failure_propagates_and_is_not_cached(self, page, handle):
        """Query errors surface and leave the selector unresolved."""
        page.query_selector = AsyncMock(side_effect=[RuntimeError("Target closed"), handle])
        selector = ElementSelector(page, "#main")

        with pytest.raises(RuntimeError, match="Target closed"):
            await selector.text()
        assert selector.state is ResolutionState.UNRESOLVED

        assert await selector.text() == "value"
        assert selector.state is ResolutionState.FOUND

    @pytest.mark.asyncio
    async def test_evaluation_failure_propagates(self, page):
        """Errors thrown inside the page are not turned into None."""
        page.evaluate.side_effect = RuntimeError("Execution context was destroyed")
        selector = ElementSelector(page, "#main")

        with pytest.raises(RuntimeError, match="Execution context was destroyed"):
            await selector.attr("id")


class TestAccessors:
    """Tests for the derived queries."""

    @pytest.mark.asyncio
    async def test_attr(self, page, handle):
        """attr() evaluates getAttribute with the name."""
        page.evaluate.return_value = "/about"
        value = await ElementSelector(page, "a").attr("href")

        assert value == "/about"
        page.evaluate.assert_awaited_once_with(page_script(GET_ATTRIBUTE), [handle, "href"])

    @pytest.mark.asyncio
    async def test_text(self, page, handle):
        """text() evaluates innerText."""
        page.evaluate.return_value = "Hello world"
        assert await ElementSelector(page, "p").text() == "Hello world"
        page.evaluate.assert_awaited_once_with(page_script(GET_INNER_TEXT), [handle, None])

    @pytest.mark.asyncio
    async def test_html(self, page, handle):
        """html() evaluates innerHTML."""
        page.evaluate.return_value = "<b>Hi</b>"
        assert await ElementSelector(page, "p").html() == "<b>Hi</b>"
        page.evaluate.assert_awaited_once_with(page_script(GET_INNER_HTML), [handle, None])

    @pytest.mark.asyncio
    async def test_prop(self, page, handle):
        """prop() reads the live property."""
        page.evaluate.return_value = True
        assert await ElementSelector(page, "#terms").prop("checked") is True
        page.evaluate.assert_awaited_once_with(page_script(GET_PROPERTY), [handle, "checked"])

    @pytest.mark.asyncio
    async def test_is_visible(self, page, handle):
        """Visible iff the element has a bounding box."""
        assert await ElementSelector(page, "#shown").is_visible() is True

        handle.bounding_box.return_value = None
        assert await ElementSelector(page, "#hidden").is_visible() is False

    @pytest.mark.asyncio
    async def test_element_wraps_handle(self, page, handle):
        """element() returns a QueryElementHandle."""
        element = await ElementSelector(page, "#main").element()

        assert isinstance(element, QueryElementHandle)
        assert element.handle is handle


class TestAbsence:
    """Tests for selectors that match nothing."""

    @pytest.mark.asyncio
    async def test_every_accessor_returns_none(self, page):
        """No accessor raises on a missing element."""
        page.query_selector.return_value = None
        selector = ElementSelector(page, "#nothing")

        assert await selector.attr("id") is None
        assert await selector.text() is None
        assert await selector.html() is None
        assert await selector.prop("value") is None
        assert await selector.is_visible() is None
        assert await selector.element() is None
        assert await selector.exists() is False
        page.evaluate.assert_not_awaited()
