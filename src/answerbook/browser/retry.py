"""Bounded retry with exponential backoff for network-dependent steps.

Every failed attempt except the last one first fires the diagnostic
notifier and then sleeps ``base_delay_ms * 2**attempt_index``.  When the
attempts run out the last exception is re-raised as-is, so callers see the
original error type.

Usage::

    from answerbook.browser.retry import retry

    response = await retry(lambda: page.goto(url), max_attempts=3, base_delay_ms=500)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Notifier = Callable[[], Awaitable[None]]
Sleeper = Callable[[float], Awaitable[Any]]

# Marker for "use the quote-service notifier"; ``None`` means no notifier.
DEFAULT_NOTIFIER: Any = object()


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to back off between tries."""

    max_attempts: int = 3
    base_delay_ms: int = 500

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")

    def delay_ms(self, attempt_index: int) -> int:
        """Backoff before the attempt following *attempt_index* (0-based)."""
        return backoff_delay_ms(self.base_delay_ms, attempt_index)

    async def run(self, operation: Callable[[], Awaitable[T]], **kwargs: Any) -> T:
        return await retry(
            operation,
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            **kwargs,
        )


def backoff_delay_ms(base_delay_ms: int, attempt_index: int) -> int:
    return base_delay_ms * (2 ** attempt_index)


async def retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 500,
    *,
    notifier: Notifier | None = DEFAULT_NOTIFIER,
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """Await *operation* until it succeeds or *max_attempts* is reached.

    Args:
        operation: Zero-argument coroutine factory; called once per attempt.
        max_attempts: Total attempts including the first one.
        base_delay_ms: Backoff base in milliseconds.
        notifier: Awaited after each non-final failure, before the sleep.
            Defaults to :func:`answerbook.browser.diagnostics.notify_failure`;
            pass ``None`` to disable.
        sleep: Coroutine used for the backoff (seconds), injectable for tests.

    Returns:
        Whatever *operation* returns on its first successful attempt.

    Raises:
        Exception: The exception from the final attempt, unchanged.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if notifier is DEFAULT_NOTIFIER:
        from answerbook.browser.diagnostics import notify_failure

        notifier = notify_failure

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as exc:
            if attempt + 1 >= max_attempts:
                logger.warning(
                    "Attempt %d/%d failed: %s, giving up",
                    attempt + 1,
                    max_attempts,
                    type(exc).__name__,
                )
                raise
            delay_ms = backoff_delay_ms(base_delay_ms, attempt)
            logger.warning(
                "Attempt %d/%d failed: %s, retrying in %dms",
                attempt + 1,
                max_attempts,
                type(exc).__name__,
                delay_ms,
            )
            if notifier is not None:
                await _notify_quietly(notifier)
            await sleep(delay_ms / 1000)

    # range(max_attempts) always returns or raises above
    raise AssertionError("unreachable")


async def _notify_quietly(notifier: Notifier) -> None:
    try:
        await notifier()
    except Exception as exc:
        logger.error("Diagnostic notifier failed: %s", exc)
