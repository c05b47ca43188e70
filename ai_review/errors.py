from __future__ import annotations


def _clip(text: str | None, limit: int = 500) -> str:
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... ({len(text) - limit} more chars)"


class ReviewError(Exception):
    """Base class for every failure a review call can surface."""


class InvalidInputError(ReviewError, ValueError):
    """Caller supplied something that cannot be reviewed. Not retryable."""


class TransportError(ReviewError):
    """Non-success HTTP status, or the connection itself failed (status_code is None)."""

    def __init__(self, status_code: int | None, body_snippet: str = "") -> None:
        self.status_code = status_code
        self.body_snippet = _clip(body_snippet)
        where = f"HTTP {status_code}" if status_code is not None else "connection failed"
        msg = f"completion request failed: {where}"
        if self.body_snippet:
            msg += f": {self.body_snippet}"
        super().__init__(msg)


class RequestTimeoutError(ReviewError, TimeoutError):
    """The configured deadline elapsed before the provider answered."""


class DecodeError(ReviewError):
    """Response body was malformed, empty or truncated."""

    def __init__(self, message: str, fragment: str | None = None) -> None:
        self.fragment = _clip(fragment, 200) if fragment is not None else None
        if self.fragment is not None:
            message = f"{message}: {self.fragment!r}"
        super().__init__(message)
