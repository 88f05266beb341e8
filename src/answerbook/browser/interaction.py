"""Page Interaction Controller: drive the answer page up to the reveal.

A request walks a fixed sequence with no way back::

    prepare → navigate (retried) → locate trigger → click centroid → wait for result

Only navigation is retried.  A missing trigger element fails at once, and
the click is not verified before waiting for the answer content.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from answerbook.browser.retry import RetryPolicy, retry
from answerbook.exceptions import ElementNotFoundError, ExtractionTimeout, NavigationError

if TYPE_CHECKING:
    from playwright.async_api import Page, Response

    from answerbook.settings.config import Settings

logger = logging.getLogger(__name__)

_NET_ERROR_RE = re.compile(r"net::(ERR_[A-Z_]+)")


def prepare_page(page: Page, *, timeout_ms: int = 0) -> None:
    """Apply default navigation and operation timeouts (``0`` = unbounded)."""
    page.set_default_navigation_timeout(timeout_ms)
    page.set_default_timeout(timeout_ms)


def _navigation_reason(exc: PlaywrightError) -> str:
    if isinstance(exc, PlaywrightTimeout):
        return "timeout"
    match = _NET_ERROR_RE.search(str(exc))
    if match:
        return match.group(1).replace("ERR_", "").replace("_", " ").lower()
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__


async def goto_once(page: Page, url: str) -> Response | None:
    """Single navigation attempt; Playwright errors become ``NavigationError``."""
    try:
        logger.debug("goto %s (wait_until=domcontentloaded)", url)
        return await page.goto(url, wait_until="domcontentloaded")
    except PlaywrightError as exc:
        raise NavigationError(url, _navigation_reason(exc)) from exc


async def navigate(
    page: Page,
    url: str,
    *,
    policy: RetryPolicy | None = None,
    **retry_kwargs: Any,
) -> Response | None:
    """Navigate to *url*, retrying with exponential backoff.

    Raises:
        NavigationError: From the final attempt once all attempts failed.
    """
    policy = policy or RetryPolicy()
    return await policy.run(lambda: goto_once(page, url), **retry_kwargs)


def centroid(box: dict[str, float]) -> tuple[float, float]:
    """Centre point of a Playwright bounding box."""
    return box["x"] + box["width"] / 2, box["y"] + box["height"] / 2


async def click_trigger(page: Page, selector: str) -> tuple[float, float]:
    """Click the centre of the element matching *selector*.

    Returns:
        The ``(x, y)`` point that was clicked.

    Raises:
        ElementNotFoundError: If the element is absent or has no layout box.
    """
    element = await page.query_selector(selector)
    box = await element.bounding_box() if element is not None else None
    if not box:
        raise ElementNotFoundError(selector)
    x, y = centroid(box)
    logger.debug("Clicking %s at (%.1f, %.1f)", selector, x, y)
    await page.mouse.click(x, y)
    return x, y


async def wait_for_result(page: Page, selector: str, *, timeout_ms: int = 0) -> None:
    """Block until *selector* is attached to the DOM.

    With ``timeout_ms=0`` this waits forever.

    Raises:
        ExtractionTimeout: If a non-zero bound elapses first.
    """
    try:
        await page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
    except PlaywrightTimeout as exc:
        raise ExtractionTimeout(selector, timeout_ms) from exc


async def open_book(page: Page, settings: Settings, **retry_kwargs: Any) -> None:
    """Navigate to the answer page, click the book and wait for the answer."""
    policy = RetryPolicy(
        max_attempts=settings.retry.max_attempts,
        base_delay_ms=settings.retry.base_delay_ms,
    )
    await navigate(page, settings.page.url, policy=policy, **retry_kwargs)
    await click_trigger(page, settings.page.trigger_selector)
    await wait_for_result(
        page,
        settings.page.result_selector,
        timeout_ms=settings.browser.result_timeout_ms,
    )
    logger.info("Answer revealed on %s", settings.page.url)
