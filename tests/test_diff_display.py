"""Tests for the unified diff preview."""

from rcsfmt.diff_display import compute_diff, format_colored_diff, show_diff


def test_unchanged_returns_none():
    assert compute_diff("a.go", "x\n", "x\n") is None


def test_unified_diff_headers_and_changes():
    diff = compute_diff("a.go", "x\n  y\n", "x\n\ty\n")
    assert diff.startswith("--- a/a.go\n+++ b/a.go\n")
    assert "-  y\n" in diff
    assert diff.endswith("+\ty")


def test_missing_final_newline_keeps_lines_apart():
    diff = compute_diff("f", "x\na", "x\nb")
    assert diff.splitlines()[-2:] == ["-a", "+b"]


def test_colors():
    colored = format_colored_diff("--- a\n+++ b\n@@ -1 +1 @@\n-old\n+new\n ctx")
    lines = colored.splitlines()
    assert lines[0] == "\033[1m--- a\033[0m"
    assert lines[2].startswith("\033[36m")
    assert lines[3] == "\033[31m-old\033[0m"
    assert lines[4] == "\033[32m+new\033[0m"
    assert lines[5] == " ctx"


def test_show_diff_prints_plain(capsys):
    text = show_diff("a.go", "old\n", "new\n", color=False)
    out = capsys.readouterr().out
    assert text is not None
    assert "-old" in out and "+new" in out
    assert "\033[" not in out
