"""Browser Session Manager: one shared Chromium for the whole process.

The manager is an explicitly owned object: the HTTP app keeps it on
``app.state`` and the CLI holds it for the duration of one command.
``start()`` belongs to process start-up and ``stop()`` to shutdown; pages
are lent out per request in between and never shared.

There is no lock around ``start``/``stop``/``new_page``.  Stopping while a
request is still opening a page is a race the caller must avoid by only
stopping at full shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator

from playwright.async_api import async_playwright

from answerbook.exceptions import BrowserNotStartedError

if TYPE_CHECKING:
    from playwright.async_api import Browser, Page, Playwright

    from answerbook.settings.config import BrowserSettings

logger = logging.getLogger(__name__)

SANDBOX_ARGS: tuple[str, ...] = ("--no-sandbox", "--disable-setuid-sandbox")


def build_launch_args(settings: BrowserSettings) -> dict[str, Any]:
    """Arguments for ``chromium.launch()`` derived from browser settings."""
    launch_args: dict[str, Any] = {
        "headless": settings.headless,
        "args": [*SANDBOX_ARGS, *settings.extra_args],
    }
    # Empty path means Playwright's bundled Chromium.
    if settings.executable_path:
        launch_args["executable_path"] = settings.executable_path
    return launch_args


class BrowserSessionManager:
    """Owns the single Playwright browser process.

    Args:
        settings: Browser section of the settings.  Defaults to
            ``get_settings().browser``.
    """

    def __init__(self, settings: BrowserSettings | None = None) -> None:
        if settings is None:
            from answerbook.settings import get_settings

            settings = get_settings().browser
        self._settings = settings
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Launch the browser process."""
        if self._browser is not None:
            logger.warning("Browser already running; ignoring second start()")
            return
        launch_args = build_launch_args(self._settings)
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(**launch_args)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info(
            "Browser started (headless=%s, executable=%s)",
            self._settings.headless,
            self._settings.executable_path or "bundled",
        )

    async def stop(self) -> None:
        """Close the browser process.  A no-op when nothing is running."""
        if self._browser is None and self._playwright is None:
            logger.debug("stop() called with no browser running")
            return
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        logger.info("Browser stopped")

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    async def new_page(self, **context_args: Any) -> Page:
        """Open a fresh page in its own browser context.

        Keyword arguments are passed to ``Browser.new_page`` (``user_agent``,
        ``viewport``, ...).  Closing the page also closes that context.

        Raises:
            BrowserNotStartedError: If ``start()`` has not completed or
                ``stop()`` has already run.
        """
        if self._browser is None:
            raise BrowserNotStartedError()
        return await self._browser.new_page(**context_args)

    @asynccontextmanager
    async def page(self, **context_args: Any) -> AsyncIterator[Page]:
        """Lend a page for one request and close it on every exit path."""
        page = await self.new_page(**context_args)
        try:
            yield page
        finally:
            try:
                await page.close()
            except Exception as exc:
                logger.warning("Page close failed (non-fatal): %s", exc)
