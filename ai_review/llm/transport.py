from __future__ import annotations

import logging
import time
from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator

import httpx

from ai_review.config import ClientConfig
from ai_review.errors import RequestTimeoutError, TransportError

from .base import ChatRequest, ChatResponse, WireDialect
from .sse import iter_sse_data

log = logging.getLogger(__name__)


class HttpTransport:
    """
    Single-POST chat completion over httpx, buffered or SSE-streamed.

    `timeout_s` bounds every httpx phase and also the whole call: once it has elapsed
    since the request started, reading stops with RequestTimeoutError.

    No retries happen here. Pass `client` to reuse a connection pool; an injected
    client is left open, a client created per call is closed with the response.
    """

    def __init__(
        self,
        *,
        config: ClientConfig,
        dialect: WireDialect,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config
        self.dialect = dialect
        self._client = client

    @contextmanager
    def send_completion(self, request: ChatRequest) -> Iterator[ChatResponse]:
        url = self.config.endpoint
        payload = self.dialect.encode(request, self.config)
        headers = self.dialect.headers(self.config, stream=request.stream)
        timeout = httpx.Timeout(self.config.timeout_s)
        deadline = time.monotonic() + self.config.timeout_s

        with ExitStack() as stack:
            client = self._client
            if client is None:
                client = stack.enter_context(httpx.Client(timeout=timeout))
            try:
                response = stack.enter_context(
                    client.stream("POST", url, json=payload, headers=headers, timeout=timeout)
                )
            except httpx.TimeoutException as exc:
                raise RequestTimeoutError(
                    f"no response from {url} within {self.config.timeout_s}s"
                ) from exc
            except httpx.HTTPError as exc:
                raise TransportError(None, f"{type(exc).__name__}: {exc}") from exc

            log.debug(
                "POST %s -> HTTP %s (dialect=%s, stream=%s)",
                url,
                response.status_code,
                self.dialect.name,
                request.stream,
            )
            if not response.is_success:
                raise TransportError(response.status_code, _read_snippet(response))

            yield ChatResponse(
                status_code=response.status_code,
                streaming=request.stream,
                body=self._iter_body(response, streaming=request.stream, deadline=deadline),
            )

    def _iter_body(self, response: httpx.Response, *, streaming: bool, deadline: float) -> Iterator[str]:
        try:
            if not streaming:
                yield "".join(self._until(deadline, response.iter_text()))
                return
            # Keep-alive comments count against the deadline before the SSE parser drops them.
            yield from iter_sse_data(self._until(deadline, response.iter_lines()))
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(
                f"response from {self.config.endpoint} stalled for more than {self.config.timeout_s}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(None, f"{type(exc).__name__} while reading body: {exc}") from exc

    def _until(self, deadline: float, chunks: Iterable[str]) -> Iterator[str]:
        for chunk in chunks:
            if time.monotonic() > deadline:
                raise RequestTimeoutError(
                    f"response from {self.config.endpoint} exceeded the {self.config.timeout_s}s deadline"
                )
            yield chunk


def _read_snippet(response: httpx.Response) -> str:
    try:
        response.read()
        return response.text
    except httpx.HTTPError:
        return ""
