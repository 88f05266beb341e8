"""Best-effort diagnostic side channel for retried failures.

Each time a network step is retried, a quote is fetched from the hitokoto
service and logged at error level.  The quote has nothing to do with the
failure; it is an operator-visible heartbeat showing that outbound
networking still works while the answer page does not.

The fetch has its own nested retry (with the notifier disabled, so a dead
quote service cannot recurse) and nothing here ever raises to the caller.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING

import httpx

from answerbook.browser.retry import Notifier, RetryPolicy, retry
from answerbook.exceptions import DiagnosticFetchError

if TYPE_CHECKING:
    from answerbook.settings.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_URL = "https://v1.hitokoto.cn/"
DEFAULT_QUOTE_FIELD = "hitokoto"


async def fetch_quote(
    client: httpx.AsyncClient,
    url: str = DEFAULT_QUOTE_URL,
    field: str = DEFAULT_QUOTE_FIELD,
) -> str:
    """GET *url* once and return the quote string from its JSON body.

    Raises:
        DiagnosticFetchError: On a non-2xx response.
        httpx.HTTPError: On transport failures.
    """
    resp = await client.get(url)
    if not resp.is_success:
        raise DiagnosticFetchError(resp.status_code)
    body = resp.json()
    return str(body.get(field, ""))


async def notify_failure(
    *,
    url: str | None = None,
    field: str | None = None,
    client: httpx.AsyncClient | None = None,
    policy: RetryPolicy | None = None,
    timeout_sec: float | None = None,
) -> None:
    """Fetch a quote and log it at error level; log the error instead on failure.

    Args:
        url: Quote endpoint.  Defaults to the configured ``diagnostics.quote_url``.
        field: JSON field holding the quote text.
        client: Optional shared ``httpx.AsyncClient``; it is not closed here.
        policy: Retry policy for the nested fetch.  Defaults to the
            configured ``retry`` section.
        timeout_sec: Timeout for a client created here.
    """
    try:
        if url is None or field is None or policy is None or timeout_sec is None:
            from answerbook.settings import get_settings

            settings = get_settings()
            url = url or settings.diagnostics.quote_url
            field = field or settings.diagnostics.quote_field
            policy = policy or RetryPolicy(
                max_attempts=settings.retry.max_attempts,
                base_delay_ms=settings.retry.base_delay_ms,
            )
            timeout_sec = timeout_sec or settings.diagnostics.timeout_sec

        owns_client = client is None
        http = client or httpx.AsyncClient(timeout=timeout_sec)
        try:
            quote = await retry(
                lambda: fetch_quote(http, url, field),
                max_attempts=policy.max_attempts,
                base_delay_ms=policy.base_delay_ms,
                notifier=None,
            )
        finally:
            if owns_client:
                await http.aclose()
        logger.error("%s", quote)
    except Exception as exc:
        # logging reports handler errors itself and never raises here
        logger.error("%s", exc)


def settings_notifier(settings: Settings) -> Notifier:
    """Bind ``notify_failure`` to the diagnostics and retry sections of *settings*."""
    return partial(
        notify_failure,
        url=settings.diagnostics.quote_url,
        field=settings.diagnostics.quote_field,
        policy=RetryPolicy(
            max_attempts=settings.retry.max_attempts,
            base_delay_ms=settings.retry.base_delay_ms,
        ),
        timeout_sec=settings.diagnostics.timeout_sec,
    )
