"""
Diff display — compute and show colored unified diffs of what formatting
changed, for ``rcsfmt format --diff``.
"""

from __future__ import annotations

import difflib
import logging

logger = logging.getLogger(__name__)


def compute_diff(filepath: str, old_content: str, new_content: str) -> str | None:
    """Return unified diff string, or None if the content is unchanged."""
    if old_content == new_content:
        return None

    old_lines = old_content.splitlines(keepends=True)
    new_lines = new_content.splitlines(keepends=True)

    diff = difflib.unified_diff(
        old_lines, new_lines,
        fromfile=f"a/{filepath}",
        tofile=f"b/{filepath}",
        lineterm="",
    )
    # keepends lines carry their own terminators; unterminated last lines don't
    diff_text = "\n".join(line.rstrip("\n") for line in diff)
    return diff_text if diff_text.strip() else None


def format_colored_diff(diff_text: str) -> str:
    """Add ANSI colors to a unified diff string.

    Green for additions (+), red for deletions (-), cyan for @@ hunks.
    """
    colored: list[str] = []
    for line in diff_text.splitlines():
        if line.startswith("+++") or line.startswith("---"):
            colored.append(f"\033[1m{line}\033[0m")  # bold
        elif line.startswith("@@"):
            colored.append(f"\033[36m{line}\033[0m")  # cyan
        elif line.startswith("+"):
            colored.append(f"\033[32m{line}\033[0m")  # green
        elif line.startswith("-"):
            colored.append(f"\033[31m{line}\033[0m")  # red
        else:
            colored.append(line)
    return "\n".join(colored)


def show_diff(filepath: str, old_content: str, new_content: str,
              color: bool = True) -> str | None:
    """Print the diff for one file and return the plain diff text."""
    diff_text = compute_diff(filepath, old_content, new_content)
    if diff_text is None:
        logger.debug("No changes to show for %s", filepath)
        return None

    print(format_colored_diff(diff_text) if color else diff_text.rstrip("\n"))
    return diff_text
