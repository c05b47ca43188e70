from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CmdResult:
    returncode: int
    stdout: str
    stderr: str


def run_git(args: list[str], *, cwd: Path | None = None) -> CmdResult:
    p = subprocess.run(
        ["git", *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return CmdResult(p.returncode, p.stdout, p.stderr)


def git_diff(ref: str | None = None, *, staged: bool = False, cwd: Path | None = None) -> str:
    # Without ref/staged this is the working tree against the index, same as plain `git diff`.
    args = ["diff", "--no-color", "--no-ext-diff"]
    if staged:
        args.append("--cached")
    if ref:
        args.append(ref)
    res = run_git(args, cwd=cwd)
    if res.returncode != 0:
        raise RuntimeError(f"git {' '.join(args)} failed ({res.returncode}): {res.stderr.strip()}")
    return res.stdout
