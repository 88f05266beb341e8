"""Answer Book: browser automation for the book-of-answers web page."""

from __future__ import annotations

try:
    from importlib.metadata import version

    __version__ = version("answerbook")
except Exception:
    __version__ = "0.0.0"
