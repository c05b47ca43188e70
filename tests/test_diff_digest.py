from __future__ import annotations

from ai_review.utils.diff_digest import FileSection, budget_diff, clip_section, split_diff


def _file_diff(path: str, n_lines: int) -> str:
    body = "".join(f"+line {i}\n" for i in range(n_lines))
    return f"diff --git a/{path} b/{path}\n--- a/{path}\n+++ b/{path}\n@@ -0,0 +1,{n_lines} @@\n{body}"


def test_split_diff_by_file_keeps_order_and_text() -> None:
    diff = "preamble\n" + _file_diff("a.py", 2) + _file_diff("dir/b.py", 3)
    sections = split_diff(diff)

    assert [s.path for s in sections] == ["", "a.py", "dir/b.py"]
    assert "".join(s.text for s in sections) == diff


def test_clip_section_keeps_head_and_tail() -> None:
    section = FileSection("x.py", "".join(f"{i}\n" for i in range(100)))
    clipped = clip_section(section, head_lines=3, tail_lines=2)

    lines = clipped.text.splitlines()
    assert lines[:3] == ["0", "1", "2"]
    assert lines[-2:] == ["98", "99"]
    assert "95 lines" in lines[3]


def test_budget_diff_small_diff_unchanged() -> None:
    diff = _file_diff("a.py", 5)
    assert budget_diff(diff, 10_000) == diff
    assert budget_diff(diff, 0) == diff


def test_budget_diff_omits_files_that_do_not_fit() -> None:
    diff = _file_diff("a.py", 10) + _file_diff("b.py", 10) + _file_diff("c.py", 10)
    out = budget_diff(diff, len(_file_diff("a.py", 10)) + 5)

    assert out.startswith(_file_diff("a.py", 10))
    assert "2 file(s) omitted: b.py, c.py" in out
    assert "+line 0\n+line 1" in out


def test_budget_diff_hard_caps_single_huge_file() -> None:
    diff = _file_diff("big.py", 10) + "+" + "x" * 50_000 + "\n"
    out = budget_diff(diff, 1_000)
    assert len(out) < 1_100
    assert "truncated" in out
