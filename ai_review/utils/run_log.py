from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ai_review.schema import ReviewRun


@dataclass(frozen=True)
class RunLogPaths:
    run_id: str
    jsonl_path: Path


def make_run_id() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")


def init_run_log(log_dir: Path, run_id: str) -> RunLogPaths:
    log_dir.mkdir(parents=True, exist_ok=True)
    # One file per day; each line is one run.
    day = run_id[:8]
    return RunLogPaths(run_id=run_id, jsonl_path=log_dir / f"reviews_{day}.jsonl")


def append_run(paths: RunLogPaths, run: ReviewRun, *, extra: dict[str, Any] | None = None) -> None:
    payload: dict[str, Any] = run.model_dump(mode="json")
    payload["run_id"] = paths.run_id
    if extra:
        payload.update(extra)
    with paths.jsonl_path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(json.dumps(payload, ensure_ascii=False) + "\n")


def read_runs(path: Path) -> list[ReviewRun]:
    if not path.exists():
        return []
    out: list[ReviewRun] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                out.append(ReviewRun.model_validate_json(line))
    return out
