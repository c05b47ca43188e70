from .base import ChatMessage, ChatRequest, ChatResponse, CompletionTransport, WireDialect
from .decoder import ResponseDecoder
from .factory import build_dialect, build_service, build_transport

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "CompletionTransport",
    "ResponseDecoder",
    "WireDialect",
    "build_dialect",
    "build_service",
    "build_transport",
]
