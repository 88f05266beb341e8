"""FastAPI app for answerbook: hosts the shared browser session.

The lifespan is the process lifecycle: the browser is launched on start-up
and closed on shutdown, and the session manager lives on ``app.state``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from answerbook.api.routes import router
from answerbook.book import AnswerBook
from answerbook.browser.session import BrowserSessionManager
from answerbook.settings import get_settings

logger = logging.getLogger(__name__)

try:
    from importlib.metadata import version

    VERSION = version("answerbook")
except Exception:
    VERSION = "0.0.0"


def create_app(session: BrowserSessionManager | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        session: Session manager to own.  A new one is built from settings
            when omitted.
    """
    settings = get_settings()
    session = session or BrowserSessionManager(settings.browser)

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        await session.start()
        application.state.session = session
        application.state.book = AnswerBook(session, settings)
        try:
            yield
        finally:
            await session.stop()

    application = FastAPI(
        title="Answer Book",
        description="Open the book of answers and return its answer as an image or text.",
        version=VERSION,
        lifespan=lifespan,
    )
    application.include_router(router)
    return application


app = create_app()
