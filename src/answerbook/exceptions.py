"""Answer Book exception hierarchy."""

from __future__ import annotations


class AnswerBookError(Exception):
    """Base exception for all answerbook-specific errors."""


class NavigationError(AnswerBookError):
    """Raised when the browser cannot load a page.

    Attributes:
        url: The URL that failed to load.
        reason: Short human-readable cause.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Navigation to {url} failed: {reason}")


class ElementNotFoundError(AnswerBookError):
    """Raised when a required page element is missing or has no layout box.

    Attributes:
        selector: The CSS selector that matched nothing usable.
        element: What the element is, for the message (the book by default).
    """

    def __init__(self, selector: str, element: str = "书本元素") -> None:
        self.selector = selector
        self.element = element
        super().__init__(f"无法找到{element} ({selector})")


class ExtractionTimeout(AnswerBookError):
    """Raised when the answer content does not appear within the configured bound."""

    def __init__(self, selector: str, timeout_ms: int) -> None:
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(f"Answer content {selector!r} did not appear within {timeout_ms}ms")


class DiagnosticFetchError(AnswerBookError):
    """Raised when the quote service answers with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"请求失败，状态码：{status_code}")


class BrowserNotStartedError(AnswerBookError):
    """Raised when a page is requested from a session that is not running."""

    def __init__(self) -> None:
        super().__init__("Browser not started. Call start() first.")
