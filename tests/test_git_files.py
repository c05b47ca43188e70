from __future__ import annotations

import pytest

from ai_review.utils import git
from ai_review.utils.files import decode_best_effort, read_diff, write_review
from ai_review.utils.git import CmdResult, git_diff


def test_git_diff_builds_args(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[list[str]] = []

    def fake_run_git(args, *, cwd=None):
        seen.append(args)
        return CmdResult(0, "diff --git a/x b/x\n", "")

    monkeypatch.setattr(git, "run_git", fake_run_git)

    assert git_diff().startswith("diff --git")
    git_diff("main", staged=True)
    assert seen == [
        ["diff", "--no-color", "--no-ext-diff"],
        ["diff", "--no-color", "--no-ext-diff", "--cached", "main"],
    ]


def test_git_diff_failure_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(git, "run_git", lambda args, *, cwd=None: CmdResult(128, "", "not a git repository"))
    with pytest.raises(RuntimeError, match="not a git repository"):
        git_diff()


def test_decode_best_effort() -> None:
    assert decode_best_effort("+ 中文".encode("utf-8")) == "+ 中文"
    assert decode_best_effort("+ 中文".encode("gbk")) == "+ 中文"


def test_read_and_write(tmp_path) -> None:
    src = tmp_path / "a.diff"
    src.write_bytes(b"+x\n")
    assert read_diff(str(src)) == "+x\n"

    out = tmp_path / "nested" / "review.md"
    write_review(out, "LGTM\n")
    assert out.read_text(encoding="utf-8") == "LGTM\n"
    assert not out.with_suffix(".md.tmp").exists()
