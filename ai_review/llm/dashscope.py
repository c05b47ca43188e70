from __future__ import annotations

from typing import Any

from ai_review.config import ClientConfig

from .base import ChatRequest

_FINAL_REASONS = frozenset({"stop", "length"})


class DashScopeDialect:
    """DashScope (Qwen) native text-generation API via raw HTTP."""

    name = "dashscope"

    def encode(self, request: ChatRequest, config: ClientConfig) -> dict[str, Any]:
        # result_format=message gives OpenAI-like choices; incremental_output makes each
        # SSE frame carry only the new text instead of everything so far.
        parameters: dict[str, Any] = {
            "result_format": "message",
            "incremental_output": request.stream,
        }
        if config.temperature is not None:
            parameters["temperature"] = float(config.temperature)
        return {
            "model": request.model,
            "input": {"messages": [{"role": m.role, "content": m.content} for m in request.messages]},
            "parameters": parameters,
        }

    def headers(self, config: ClientConfig, *, stream: bool) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        if stream:
            headers["X-DashScope-SSE"] = "enable"
            headers["Accept"] = "text/event-stream"
        return headers

    def message_content(self, doc: Any) -> str | None:
        # DashScope returns: output.choices[0].message.content
        choice = _first_choice(doc)
        msg = choice.get("message") if choice else None
        content = msg.get("content") if isinstance(msg, dict) else None
        return content if isinstance(content, str) else None

    def frame_delta(self, doc: Any) -> str | None:
        return self.message_content(doc)

    def is_sentinel(self, data: str) -> bool:
        return data.strip() == "[DONE]"

    def is_final_frame(self, doc: Any) -> bool:
        choice = _first_choice(doc)
        return bool(choice) and choice.get("finish_reason") in _FINAL_REASONS

    def error_message(self, doc: Any) -> str | None:
        if not isinstance(doc, dict) or doc.get("output") is not None:
            return None
        code = doc.get("code")
        if not code:
            return None
        return f"{code}: {doc.get('message') or 'unknown error'}"


def _first_choice(doc: Any) -> dict[str, Any] | None:
    output = doc.get("output") if isinstance(doc, dict) else None
    choices = output.get("choices") if isinstance(output, dict) else None
    if not isinstance(choices, list) or not choices:
        return None
    return choices[0] if isinstance(choices[0], dict) else None
