from __future__ import annotations

from typing import Iterable, Iterator


def iter_sse_data(lines: Iterable[str]) -> Iterator[str]:
    """
    Yield the payload of every `data:` line, in arrival order.

    Each data line is one frame (chat-completion streams put one JSON chunk per line).
    Blank lines, `:` comments and the other SSE fields (event/id/retry) are skipped.
    """
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line or line.startswith(":"):
            continue
        field, sep, value = line.partition(":")
        if not sep or field != "data":
            continue
        # SSE allows exactly one optional space after the colon.
        if value.startswith(" "):
            value = value[1:]
        yield value
