from .builder import build_request
from .service import CompletionService, ReviewStage

__all__ = ["CompletionService", "ReviewStage", "build_request"]
