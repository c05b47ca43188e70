from ai_review.config import ClientConfig, load_config
from ai_review.errors import DecodeError, InvalidInputError, RequestTimeoutError, ReviewError, TransportError

__all__ = [
    "ClientConfig",
    "DecodeError",
    "InvalidInputError",
    "RequestTimeoutError",
    "ReviewError",
    "TransportError",
    "load_config",
]
