from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Literal, Protocol

from ai_review.errors import InvalidInputError

if TYPE_CHECKING:
    from ai_review.config import ClientConfig


Role = Literal["system", "user", "assistant"]
ROLES: frozenset[str] = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: tuple[ChatMessage, ...]
    stream: bool = True

    def __post_init__(self) -> None:
        if not self.model or not self.model.strip():
            raise InvalidInputError("model id must not be empty")
        if not self.messages:
            raise InvalidInputError("a chat request needs at least one message")
        for m in self.messages:
            if m.role not in ROLES:
                raise InvalidInputError(f"unknown message role: {m.role!r}")


@dataclass
class ChatResponse:
    """
    One provider response, only valid inside the transport's context manager.

    body yields the whole JSON document once (buffered) or each SSE data payload
    in arrival order (streamed). It can be consumed once.
    """

    status_code: int
    streaming: bool
    body: Iterator[str]


class WireDialect(Protocol):
    """Provider-specific wire format: how to encode requests and read responses."""

    name: str

    def encode(self, request: ChatRequest, config: ClientConfig) -> dict[str, Any]: ...

    def headers(self, config: ClientConfig, *, stream: bool) -> dict[str, str]: ...

    def message_content(self, doc: Any) -> str | None:
        """Assistant text of a buffered response, None when absent."""
        ...

    def frame_delta(self, doc: Any) -> str | None:
        """Incremental text of one streamed frame, None when the frame has none."""
        ...

    def is_sentinel(self, data: str) -> bool: ...

    def is_final_frame(self, doc: Any) -> bool: ...

    def error_message(self, doc: Any) -> str | None: ...


class CompletionTransport(Protocol):
    dialect: WireDialect

    def send_completion(self, request: ChatRequest) -> AbstractContextManager[ChatResponse]:
        """Open the request; the yielded response is released when the block exits."""
        raise NotImplementedError
