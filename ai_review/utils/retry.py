from __future__ import annotations

import logging
from typing import Callable, TypeVar

from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential

from ai_review.errors import RequestTimeoutError, TransportError

log = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, RequestTimeoutError):
        return True
    if isinstance(exc, TransportError):
        return exc.status_code is None or exc.status_code == 429 or exc.status_code >= 500
    return False


def call_with_retries(
    fn: Callable[[], T],
    *,
    retries: int,
    wait_min: float = 0.6,
    wait_max: float = 6.0,
) -> T:
    """Run fn, retrying transient transport failures up to `retries` extra times."""
    if retries <= 0:
        return fn()
    retrying = Retrying(
        reraise=True,
        stop=stop_after_attempt(retries + 1),
        wait=wait_exponential(multiplier=wait_min, min=wait_min, max=wait_max),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(log, logging.WARNING),
    )
    return retrying(fn)
