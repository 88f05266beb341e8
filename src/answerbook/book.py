"""Request pipeline: open the book once and turn the result into a reply.

``AnswerBook.capture`` borrows a page from the shared session, drives it
through the interaction controller and the capture formatter, and closes
the page on every path.  ``AnswerBook.answer`` is the outermost handler:
it applies the pacing delay, renders the reply and logs any failure,
returning ``None`` instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from answerbook.browser.capture import INVALID_MODE_TEXT, format_capture, render_text, resolve_mode
from answerbook.browser.diagnostics import settings_notifier
from answerbook.browser.interaction import open_book, prepare_page
from answerbook.browser.useragent import random_user_agent
from answerbook.models import CaptureResult, PresentationMode, Reply

if TYPE_CHECKING:
    from answerbook.browser.session import BrowserSessionManager
    from answerbook.settings.config import Settings

logger = logging.getLogger(__name__)


def prompt_text(settings: Settings) -> str | None:
    """Message to send before opening the book, or ``None`` when suppressed."""
    answer = settings.answer
    if not answer.send_prompt or not answer.prompt_text:
        return None
    return answer.prompt_text


class AnswerBook:
    """Answers requests against a running ``BrowserSessionManager``.

    Args:
        session: The shared, already started browser session.
        settings: Root settings.  Defaults to ``get_settings()``.
        rng: Randomness for the user agent.  Defaults to ``random.SystemRandom()``.
        sleep: Coroutine used for the pacing delay, injectable for tests.
    """

    def __init__(
        self,
        session: BrowserSessionManager,
        settings: Settings | None = None,
        *,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if settings is None:
            from answerbook.settings import get_settings

            settings = get_settings()
        self._session = session
        self._settings = settings
        self._rng = rng or random.SystemRandom()
        self._sleep = sleep

    @property
    def settings(self) -> Settings:
        return self._settings

    def prompt_text(self) -> str | None:
        return prompt_text(self._settings)

    async def capture(self, mode: PresentationMode) -> CaptureResult:
        """Open the book in a fresh page and capture the answer for *mode*."""
        browser = self._settings.browser
        user_agent = random_user_agent(self._rng)
        logger.debug("Opening book with user agent %s", user_agent)
        async with self._session.page(
            user_agent=user_agent,
            viewport={"width": browser.viewport_width, "height": browser.viewport_height},
        ) as page:
            prepare_page(page, timeout_ms=browser.timeout_ms)
            await open_book(page, self._settings, notifier=settings_notifier(self._settings))
            return await format_capture(page, mode, self._settings)

    async def answer(self, mode: PresentationMode | str | None = None) -> Reply | None:
        """Produce a reply for one request.

        Args:
            mode: Presentation mode override; defaults to ``answer.mode``.

        Returns:
            The reply, or ``None`` if the browser pipeline failed (the
            error is logged).  Unknown modes yield the invalid-mode text.
        """
        raw_mode = mode if mode is not None else self._settings.answer.mode
        resolved = resolve_mode(raw_mode)
        if resolved is None:
            logger.warning("Unknown answer mode: %r", raw_mode)
            return Reply(text=INVALID_MODE_TEXT)

        try:
            result = await self.capture(resolved)
        except Exception:
            logger.exception("Failed to open the answer book")
            return None

        if self._settings.answer.wait_time > 0:
            await self._sleep(self._settings.answer.wait_time)

        if resolved.is_image:
            return Reply(image=result.image, mime_type=result.mime_type)
        return Reply(text=render_text(result.text, resolved))
