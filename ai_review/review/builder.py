from __future__ import annotations

from ai_review.config import ClientConfig
from ai_review.errors import InvalidInputError
from ai_review.llm.base import ChatMessage, ChatRequest


def build_request(diff: str, config: ClientConfig) -> ChatRequest:
    """
    System prompt first, then preamble + diff as the user turn.

    Pure: prompts may carry sensitive text, so nothing here is logged.
    """
    if not diff or not diff.strip():
        raise InvalidInputError("diff is empty, nothing to review")

    messages: list[ChatMessage] = []
    if config.system_prompt.strip():
        messages.append(ChatMessage("system", config.system_prompt))
    messages.append(ChatMessage("user", config.user_preamble + diff))
    return ChatRequest(model=config.model, messages=tuple(messages), stream=config.stream)
