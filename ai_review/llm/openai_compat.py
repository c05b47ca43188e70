from __future__ import annotations

from typing import Any

from ai_review.config import ClientConfig

from .base import ChatRequest


class OpenAICompatDialect:
    """
    OpenAI-compatible Chat Completions wire format.
    Works with OpenAI or any OpenAI-compatible gateway if you point the endpoint accordingly.
    """

    name = "openai"

    def encode(self, request: ChatRequest, config: ClientConfig) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": request.model,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "stream": request.stream,
        }
        if config.temperature is not None:
            payload["temperature"] = float(config.temperature)
        return payload

    def headers(self, config: ClientConfig, *, stream: bool) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream" if stream else "application/json",
        }
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        return headers

    def message_content(self, doc: Any) -> str | None:
        # OpenAI returns: choices[0].message.content
        choice = _first_choice(doc)
        msg = choice.get("message") if choice else None
        content = msg.get("content") if isinstance(msg, dict) else None
        return content if isinstance(content, str) else None

    def frame_delta(self, doc: Any) -> str | None:
        # Stream chunks: choices[0].delta.content. Some gateways flatten this to {"delta": "..."}.
        if isinstance(doc, dict) and isinstance(doc.get("delta"), str):
            return doc["delta"]
        choice = _first_choice(doc)
        delta = choice.get("delta") if choice else None
        content = delta.get("content") if isinstance(delta, dict) else None
        return content if isinstance(content, str) else None

    def is_sentinel(self, data: str) -> bool:
        return data.strip() == "[DONE]"

    def is_final_frame(self, doc: Any) -> bool:
        # finish_reason arrives before [DONE]; the sentinel is what ends the stream.
        return False

    def error_message(self, doc: Any) -> str | None:
        err = doc.get("error") if isinstance(doc, dict) else None
        if err is None:
            return None
        if isinstance(err, dict):
            msg = err.get("message")
            return msg if isinstance(msg, str) and msg.strip() else repr(err)
        return str(err)


def _first_choice(doc: Any) -> dict[str, Any] | None:
    choices = doc.get("choices") if isinstance(doc, dict) else None
    if not isinstance(choices, list) or not choices:
        return None
    return choices[0] if isinstance(choices[0], dict) else None
