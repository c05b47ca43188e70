from __future__ import annotations

from dataclasses import dataclass

_TRUNCATED = "...<truncated>..."


@dataclass(frozen=True)
class FileSection:
    path: str  # "" for text before the first `diff --git` header
    text: str


def split_diff(diff: str) -> list[FileSection]:
    """Split a unified git diff into per-file sections, keeping order."""
    sections: list[FileSection] = []
    path = ""
    buf: list[str] = []
    for line in diff.splitlines(keepends=True):
        if line.startswith("diff --git "):
            if buf:
                sections.append(FileSection(path, "".join(buf)))
            path = _path_from_header(line)
            buf = []
        buf.append(line)
    if buf:
        sections.append(FileSection(path, "".join(buf)))
    return sections


def _path_from_header(line: str) -> str:
    # diff --git a/src/x.py b/src/x.py
    _, sep, rest = line.strip().partition(" b/")
    return rest if sep else line.strip()[len("diff --git ") :]


def clip_section(section: FileSection, *, head_lines: int, tail_lines: int) -> FileSection:
    lines = section.text.splitlines(keepends=True)
    if len(lines) <= head_lines + tail_lines:
        return section
    skipped = len(lines) - head_lines - tail_lines
    tail = lines[-tail_lines:] if tail_lines else []
    text = "".join(lines[:head_lines]) + f"{_TRUNCATED} ({skipped} lines)\n" + "".join(tail)
    return FileSection(section.path, text)


def budget_diff(
    diff: str,
    max_chars: int,
    *,
    head_lines: int = 120,
    tail_lines: int = 40,
) -> str:
    """
    Keep a diff under roughly `max_chars` before it is sent for review.

    Large file sections are clipped to head/tail lines, then whole sections are kept
    in order while they fit. Files that do not fit are listed by path at the end.
    """
    if max_chars <= 0 or len(diff) <= max_chars:
        return diff

    kept: list[str] = []
    omitted: list[str] = []
    used = 0
    for section in split_diff(diff):
        clipped = clip_section(section, head_lines=head_lines, tail_lines=tail_lines)
        if used + len(clipped.text) <= max_chars:
            kept.append(clipped.text)
            used += len(clipped.text)
        elif not kept:
            # Hard cap to keep prompts bounded
            kept.append(clipped.text[:max_chars] + f"\n{_TRUNCATED}\n")
            used = max_chars
        else:
            omitted.append(section.path or "<preamble>")

    out = "".join(kept)
    if omitted:
        out += f"\n{_TRUNCATED} {len(omitted)} file(s) omitted: {', '.join(omitted)}\n"
    return out
