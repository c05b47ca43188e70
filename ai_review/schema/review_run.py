from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ReviewRun(BaseModel):
    """Metadata of one CLI review run. Never holds prompt, diff or review text."""

    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    run_id: str = ""

    # Request shape
    provider: str
    model: str
    streaming: bool
    diff_chars: int = 0
    diff_budgeted: bool = False

    # Outcome
    status: str = "completed"  # "completed" | "failed"
    review_chars: int = 0
    error_type: str | None = None
    status_code: int | None = None
    attempts: int = 1
    duration_s: float = 0.0
