from __future__ import annotations

import enum
import logging
import time
from typing import Callable

from ai_review.config import ClientConfig
from ai_review.llm.base import CompletionTransport
from ai_review.llm.decoder import ResponseDecoder

from .builder import build_request

log = logging.getLogger(__name__)


class ReviewStage(str, enum.Enum):
    IDLE = "idle"
    BUILDING = "building"
    SENDING = "sending"
    DECODING = "decoding"
    COMPLETED = "completed"
    FAILED = "failed"


StageCallback = Callable[[ReviewStage], None]


class CompletionService:
    """
    build -> send -> decode, one request per call.

    Holds only read-only collaborators, so concurrent `review` calls are safe.
    Failures propagate unchanged; there is no fallback text.
    """

    def __init__(
        self,
        *,
        config: ClientConfig,
        transport: CompletionTransport,
        decoder: ResponseDecoder | None = None,
        on_stage: StageCallback | None = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.decoder = decoder or ResponseDecoder(transport.dialect)
        self.on_stage = on_stage

    def review(self, diff: str) -> str:
        started = time.monotonic()
        stage = ReviewStage.IDLE

        def enter(nxt: ReviewStage) -> None:
            nonlocal stage
            log.debug("review stage %s -> %s", stage.value, nxt.value)
            stage = nxt
            if self.on_stage is not None:
                self.on_stage(nxt)

        try:
            enter(ReviewStage.BUILDING)
            request = build_request(diff, self.config)

            enter(ReviewStage.SENDING)
            with self.transport.send_completion(request) as response:
                enter(ReviewStage.DECODING)
                text = self.decoder.decode(response)
        except Exception as exc:
            failed_in = stage
            enter(ReviewStage.FAILED)
            log.debug("review failed while %s: %s", failed_in.value, type(exc).__name__)
            raise

        enter(ReviewStage.COMPLETED)
        log.info(
            "review completed (model=%s, stream=%s, diff_chars=%d, review_chars=%d, %.2fs)",
            request.model,
            request.stream,
            len(diff),
            len(text),
            time.monotonic() - started,
        )
        return text
