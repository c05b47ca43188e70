from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Iterator

from .base import ChatRequest, ChatResponse
from .openai_compat import OpenAICompatDialect


class MockTransport:
    """Deterministic offline backend: useful to verify control-flow without an external LLM."""

    def __init__(self) -> None:
        self.dialect = OpenAICompatDialect()

    @contextmanager
    def send_completion(self, request: ChatRequest) -> Iterator[ChatResponse]:
        text = mock_review(request)
        if request.stream:
            body = _frames(text)
        else:
            doc = {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}
            body = iter([json.dumps(doc)])
        yield ChatResponse(status_code=200, streaming=request.stream, body=body)


def mock_review(request: ChatRequest) -> str:
    # Very small, predictable behavior: count what the diff touches.
    last_user = next((m.content for m in reversed(request.messages) if m.role == "user"), "")
    files = added = removed = 0
    for line in last_user.splitlines():
        if line.startswith("diff --git "):
            files += 1
        elif line.startswith("+") and not line.startswith("+++"):
            added += 1
        elif line.startswith("-") and not line.startswith("---"):
            removed += 1
    return (
        "## Summary\n"
        f"[MOCK] {files} file(s) changed, {added} line(s) added, {removed} line(s) removed.\n\n"
        "## Issues\n"
        "None found (mock provider does not inspect code).\n"
    )


def _frames(text: str) -> Iterator[str]:
    yield json.dumps({"choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}}]})
    for line in text.splitlines(keepends=True):
        yield json.dumps({"choices": [{"index": 0, "delta": {"content": line}}]})
    yield json.dumps({"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]})
    yield "[DONE]"
