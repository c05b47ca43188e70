from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Iterator

from ai_review.errors import DecodeError

from .base import ChatResponse, WireDialect

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamState:
    frames: int = 0
    saw_content: bool = False
    done: bool = False


class ResponseDecoder:
    """Turn a ChatResponse body into assistant text, using the provider's dialect."""

    def __init__(self, dialect: WireDialect) -> None:
        self.dialect = dialect

    def decode(self, response: ChatResponse) -> str:
        return "".join(self.iter_text(response))

    def iter_text(self, response: ChatResponse) -> Iterator[str]:
        """
        Lazily yield text fragments in arrival order. Single use.

        A streamed body must end with a terminal marker and carry the content field
        at least once, otherwise DecodeError is raised after the last fragment.
        """
        if not response.streaming:
            yield self.decode_document("".join(response.body))
            return

        state = StreamState()
        for data in response.body:
            state, delta = self.step(state, data)
            if delta:
                yield delta
            if state.done:
                break

        log.debug("stream finished after %d frame(s), done=%s", state.frames, state.done)
        if not state.done:
            raise DecodeError(f"stream ended after {state.frames} frame(s) without a terminal marker")
        if not state.saw_content:
            raise DecodeError("no frame in the stream carried assistant content")

    def decode_document(self, body: str) -> str:
        doc = _loads(body)
        err = self.dialect.error_message(doc)
        if err:
            raise DecodeError(f"provider returned an error: {err}", body)
        content = self.dialect.message_content(doc)
        if content is None:
            raise DecodeError("response has no assistant message content", body)
        return content

    def step(self, state: StreamState, data: str) -> tuple[StreamState, str | None]:
        """One fold step: consume a frame payload, return the next state and its delta."""
        if self.dialect.is_sentinel(data):
            return replace(state, frames=state.frames + 1, done=True), None

        doc = _loads(data)
        err = self.dialect.error_message(doc)
        if err:
            raise DecodeError(f"provider sent an error frame: {err}", data)

        delta = self.dialect.frame_delta(doc)
        nxt = StreamState(
            frames=state.frames + 1,
            saw_content=state.saw_content or delta is not None,
            done=self.dialect.is_final_frame(doc),
        )
        return nxt, delta


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError("payload is not valid JSON", text) from exc
