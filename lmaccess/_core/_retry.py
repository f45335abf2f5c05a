"""Rate-limit retry policy.

HTTP 429 is the only condition lmaccess retries. The wait is fixed
(``Settings.rate_limit_wait``, 60 seconds by default) and, unless the caller
configures a bound, retries never stop: the call either succeeds or the
caller cancels it.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    stop_never,
    wait_fixed,
)

from lmaccess.config import Settings
from lmaccess.exceptions import FetchCancelled, RateLimited

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


def cancellable_sleep(
    cancel: Optional[threading.Event], sleep: Optional[Sleep] = None
) -> Sleep:
    """Build a sleep function that aborts with ``FetchCancelled``.

    Without a custom *sleep* the wait happens on the event itself so that a
    cancellation wakes the caller immediately.
    """

    def _sleep(seconds: float) -> None:
        if cancel is not None and sleep is None:
            if cancel.wait(seconds):
                raise FetchCancelled("Cancelled while waiting out a rate limit")
            return
        (sleep or time.sleep)(seconds)
        if cancel is not None and cancel.is_set():
            raise FetchCancelled("Cancelled while waiting out a rate limit")

    return _sleep


def _log_rate_limited(log: logging.Logger) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        wait = state.next_action.sleep if state.next_action else 0
        log.warning(
            "Rate limited (attempt %s), retrying in %.0f seconds",
            state.attempt_number,
            wait,
        )

    return before_sleep


def rate_limit_retrying(
    settings: Settings,
    *,
    sleep: Optional[Sleep] = None,
    cancel: Optional[threading.Event] = None,
    log: Optional[logging.Logger] = None,
) -> Retrying:
    """Return a ``tenacity.Retrying`` that retries only :class:`RateLimited`.

    Parameters:
        settings: Supplies the wait and the optional attempt/deadline bounds.
        sleep: Replacement for ``time.sleep``, e.g. a recorder in tests.
        cancel: Event that aborts the wait with :class:`FetchCancelled`.
        log: Logger for rate-limit warnings.
    """
    stop = stop_never
    if settings.max_rate_limit_retries is not None:
        stop = stop_after_attempt(settings.max_rate_limit_retries + 1)
    if settings.rate_limit_deadline is not None:
        deadline = stop_after_delay(settings.rate_limit_deadline)
        stop = deadline if stop is stop_never else stop | deadline

    return Retrying(
        retry=retry_if_exception_type(RateLimited),
        wait=wait_fixed(settings.rate_limit_wait),
        stop=stop,
        sleep=cancellable_sleep(cancel, sleep),
        before_sleep=_log_rate_limited(log or logger),
        reraise=True,
    )
