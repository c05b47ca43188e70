from __future__ import annotations

import httpx

from ai_review.config import ClientConfig

from .base import CompletionTransport, WireDialect
from .dashscope import DashScopeDialect
from .mock import MockTransport
from .openai_compat import OpenAICompatDialect
from .transport import HttpTransport

_DIALECTS: dict[str, type] = {
    "openai": OpenAICompatDialect,
    "dashscope": DashScopeDialect,
}

PROVIDERS = ("openai", "dashscope", "mock")


def build_dialect(provider: str) -> WireDialect:
    try:
        return _DIALECTS[provider]()
    except KeyError:
        raise ValueError(f"Unknown AI_REVIEW_PROVIDER={provider!r}, choose one of: {'|'.join(PROVIDERS)}") from None


def build_transport(config: ClientConfig, *, client: httpx.Client | None = None) -> CompletionTransport:
    provider = config.provider
    if provider == "mock":
        return MockTransport()
    dialect = build_dialect(provider)
    if not config.api_key:
        raise RuntimeError(
            f"No API key configured for AI_REVIEW_PROVIDER={provider}; "
            "set AI_REVIEW_API_KEY or the provider's own key variable"
        )
    if not config.endpoint:
        raise RuntimeError(f"AI_REVIEW_ENDPOINT is empty for AI_REVIEW_PROVIDER={provider}")
    return HttpTransport(config=config, dialect=dialect, client=client)


def build_service(config: ClientConfig, *, client: httpx.Client | None = None):
    from ai_review.review.service import CompletionService

    transport = build_transport(config, client=client)
    return CompletionService(config=config, transport=transport)
