from __future__ import annotations

import sys
from pathlib import Path


def read_diff(source: str) -> str:
    """Read a diff from a path, or from stdin when source is "-"."""
    if source == "-":
        return decode_best_effort(sys.stdin.buffer.read())
    return decode_best_effort(Path(source).read_bytes())


def decode_best_effort(raw: bytes) -> str:
    # Try utf-8 first; fallback to gbk for some Windows-generated files.
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        return raw.decode("gbk")
    except UnicodeDecodeError:
        return raw.decode("utf-8", errors="replace")


def write_review(path: Path, text: str) -> None:
    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8", newline="\n")
    tmp.replace(path)
