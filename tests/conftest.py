"""answerbook test configuration: shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest


# ---------------------------------------------------------------------------
# Async backend
# ---------------------------------------------------------------------------


@pytest.fixture()
def anyio_backend() -> str:
    """Run ``@pytest.mark.anyio`` tests on asyncio only (Playwright needs it)."""
    return "asyncio"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear the settings LRU cache between tests."""
    from answerbook.settings.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings():
    """Settings with zero backoff so retry paths never really sleep."""
    from answerbook.settings.config import Settings

    s = Settings()
    s.retry.base_delay_ms = 0
    return s


# ---------------------------------------------------------------------------
# Mock Playwright objects
# ---------------------------------------------------------------------------


def _make_element(box: dict[str, float] | None = None, sample: dict | None = None) -> MagicMock:
    """Mock ``ElementHandle`` with a bounding box and an ``evaluate`` result."""
    element = MagicMock(name="element")
    element.bounding_box = AsyncMock(return_value=box)
    element.evaluate = AsyncMock(return_value=sample or {})
    return element


def _make_page(
    *,
    trigger_box: dict[str, float] | None = None,
    container_box: dict[str, float] | None = None,
    nodes: list[dict] | None = None,
    screenshot: bytes = b"\x89PNG fake",
) -> MagicMock:
    """Mock async Playwright ``Page`` wired for the answer-page flow."""
    page = MagicMock(name="page")
    page.goto = AsyncMock(return_value=MagicMock(name="response"))
    page.wait_for_selector = AsyncMock()
    page.mouse.click = AsyncMock()
    page.evaluate = AsyncMock()
    page.screenshot = AsyncMock(return_value=screenshot)
    page.close = AsyncMock()

    trigger = _make_element(trigger_box) if trigger_box is not None else None
    container = _make_element(container_box) if container_box is not None else None

    async def query_selector(selector: str):
        if selector == "a.book-box":
            return trigger
        if selector == ".content-box":
            return container
        return None

    page.query_selector = AsyncMock(side_effect=query_selector)
    page.query_selector_all = AsyncMock(
        return_value=[_make_element(sample=n) for n in (nodes or [])]
    )
    return page


def _make_session(page: MagicMock) -> MagicMock:
    """Mock ``BrowserSessionManager`` whose ``page()`` lends *page* and closes it."""
    from contextlib import asynccontextmanager

    session = MagicMock(name="session")
    session.is_running = True
    session.start = AsyncMock()
    session.stop = AsyncMock()
    session.page_kwargs = []

    @asynccontextmanager
    async def _page(**kwargs):
        session.page_kwargs.append(kwargs)
        try:
            yield page
        finally:
            await page.close()

    session.page = _page
    return session


@pytest.fixture()
def page_factory():
    """Factory for mock answer pages (see ``_make_page``)."""
    return _make_page


@pytest.fixture()
def session_factory():
    """Factory for mock session managers (see ``_make_session``)."""
    return _make_session
