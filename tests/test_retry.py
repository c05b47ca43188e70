from __future__ import annotations

import pytest

from ai_review.errors import DecodeError, InvalidInputError, RequestTimeoutError, TransportError
from ai_review.utils.retry import call_with_retries, is_retryable


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (RequestTimeoutError("slow"), True),
        (TransportError(None, "refused"), True),
        (TransportError(429), True),
        (TransportError(503), True),
        (TransportError(400), False),
        (TransportError(401), False),
        (DecodeError("bad"), False),
        (InvalidInputError("empty"), False),
    ],
)
def test_is_retryable(exc: Exception, expected: bool) -> None:
    assert is_retryable(exc) is expected


def test_retries_transient_then_succeeds() -> None:
    calls: list[int] = []

    def flaky() -> str:
        calls.append(1)
        if len(calls) < 3:
            raise TransportError(502)
        return "done"

    assert call_with_retries(flaky, retries=2, wait_min=0, wait_max=0) == "done"
    assert len(calls) == 3


def test_gives_up_and_reraises_original() -> None:
    calls: list[int] = []

    def down() -> str:
        calls.append(1)
        raise TransportError(500, "boom")

    with pytest.raises(TransportError) as exc_info:
        call_with_retries(down, retries=1, wait_min=0, wait_max=0)
    assert exc_info.value.status_code == 500
    assert len(calls) == 2


def test_no_retry_for_permanent_errors_or_zero_retries() -> None:
    calls: list[int] = []

    def bad() -> str:
        calls.append(1)
        raise DecodeError("bad")

    with pytest.raises(DecodeError):
        call_with_retries(bad, retries=3, wait_min=0, wait_max=0)
    with pytest.raises(DecodeError):
        call_with_retries(bad, retries=0)
    assert len(calls) == 2
