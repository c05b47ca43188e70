from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable, Iterable

import httpx
import pytest

from ai_review.config import ClientConfig

AI_REVIEW_ENV = (
    "AI_REVIEW_PROVIDER",
    "AI_REVIEW_ENDPOINT",
    "AI_REVIEW_MODEL",
    "AI_REVIEW_SYSTEM_PROMPT",
    "AI_REVIEW_USER_PREAMBLE",
    "AI_REVIEW_TIMEOUT_S",
    "AI_REVIEW_STREAM",
    "AI_REVIEW_TEMPERATURE",
    "AI_REVIEW_API_KEY",
    "AI_REVIEW_MAX_DIFF_CHARS",
    "AI_REVIEW_LOG_DIR",
    "OPENAI_API_KEY",
    "DASHSCOPE_API_KEY",
)


class TrackingStream(httpx.SyncByteStream):
    """Response body that records whether httpx released it. Exceptions in chunks are raised."""

    def __init__(self, chunks: Iterable[bytes | Exception], *, delay: float = 0.0) -> None:
        self.chunks = list(chunks)
        self.delay = delay
        self.closed = False

    def __iter__(self):
        for chunk in self.chunks:
            if self.delay:
                time.sleep(self.delay)
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    def close(self) -> None:
        self.closed = True


def sse(*payloads: str) -> list[bytes]:
    return [f"data: {p}\n\n".encode("utf-8") for p in payloads]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in AI_REVIEW_ENV:
        monkeypatch.delenv(key, raising=False)
    # load_dotenv() searches upwards from the caller; keep a stray .env out of tests.
    monkeypatch.setattr("ai_review.config.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def make_config() -> Callable[..., ClientConfig]:
    base = ClientConfig(
        provider="openai",
        endpoint="https://llm.test/v1/chat/completions",
        model="test-model",
        system_prompt="You are a reviewer.",
        user_preamble="Review this:\n",
        timeout_s=5.0,
        api_key="sk-test",
        stream=True,
    )

    def _make(**overrides) -> ClientConfig:
        return replace(base, **overrides)

    return _make
