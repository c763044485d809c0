"""
Line buffer — a mutable list of text lines with a tracked cursor.

The buffer is what the patch applier edits in place. Lines are stored
without their terminators; ``trailing_newline`` records whether the last
line ends with one, so ``from_text``/``to_text`` round-trip exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class Cursor:
    """Cursor position: 1-indexed line, 0-indexed column."""
    line: int = 1
    column: int = 0


@dataclass(frozen=True)
class BufferSnapshot:
    """Saved buffer state, used to undo a failed patch."""
    lines: tuple[str, ...]
    trailing_newline: bool
    cursor: Cursor


class LineBuffer:
    """Line-addressable text buffer.

    A list passed to the constructor is used as-is, not copied, so edits
    made through the buffer are visible in the caller's list.
    """

    def __init__(
        self,
        lines: Optional[list[str]] = None,
        trailing_newline: bool = True,
        cursor: Optional[Cursor] = None,
    ) -> None:
        self._lines = lines if lines is not None else []
        self.trailing_newline = trailing_newline
        self.cursor = cursor or Cursor()
        self._clamp_cursor()

    @classmethod
    def from_text(cls, text: str, cursor: Optional[Cursor] = None) -> "LineBuffer":
        """Build a buffer from text, splitting on LF only."""
        if not text:
            return cls([], trailing_newline=True, cursor=cursor)
        lines = text.split("\n")
        trailing_newline = text.endswith("\n")
        if trailing_newline:
            lines.pop()
        return cls(lines, trailing_newline=trailing_newline, cursor=cursor)

    def to_text(self) -> str:
        if not self._lines:
            return ""
        text = "\n".join(self._lines)
        return text + "\n" if self.trailing_newline else text

    @property
    def lines(self) -> list[str]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __getitem__(self, index):
        return self._lines[index]

    def __repr__(self) -> str:
        return (
            f"LineBuffer({len(self._lines)} lines, "
            f"cursor={self.cursor.line}:{self.cursor.column})"
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert_lines(
        self,
        index: int,
        lines: Iterable[str],
        final_newline: bool = True,
    ) -> None:
        """Insert ``lines`` before the 0-indexed position ``index``.

        ``final_newline`` only matters when the insertion becomes the end
        of the buffer: it then decides ``trailing_newline``.
        """
        new_lines = list(lines)
        if not new_lines:
            return
        if index < 0 or index > len(self._lines):
            raise IndexError(
                f"insert position {index} outside buffer of {len(self._lines)} lines"
            )

        at_end = index == len(self._lines)
        self._lines[index:index] = new_lines
        if at_end:
            self.trailing_newline = final_newline

        if index <= self.cursor.line - 1:
            self.cursor.line += len(new_lines)
        self._clamp_cursor()

    def delete_lines(self, index: int, count: int) -> list[str]:
        """Remove ``count`` lines starting at 0-indexed ``index``.

        Returns the removed lines.
        """
        if count <= 0:
            return []
        if index < 0 or index + count > len(self._lines):
            raise IndexError(
                f"delete range {index}:{index + count} outside buffer of "
                f"{len(self._lines)} lines"
            )

        removed = self._lines[index : index + count]
        at_end = index + count == len(self._lines)
        del self._lines[index : index + count]
        if at_end:
            # The new last line was followed by the removed ones
            self.trailing_newline = True

        cursor_index = self.cursor.line - 1
        if cursor_index >= index + count:
            self.cursor.line -= count
        elif cursor_index >= index:
            self.cursor.line = index + 1
            self.cursor.column = 0
        self._clamp_cursor()
        return removed

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> BufferSnapshot:
        return BufferSnapshot(
            lines=tuple(self._lines),
            trailing_newline=self.trailing_newline,
            cursor=Cursor(self.cursor.line, self.cursor.column),
        )

    def restore(self, snapshot: BufferSnapshot) -> None:
        """Put back content and cursor saved by :meth:`snapshot`."""
        self._lines[:] = snapshot.lines
        self.trailing_newline = snapshot.trailing_newline
        self.cursor = Cursor(snapshot.cursor.line, snapshot.cursor.column)
        logger.debug("[RcsPatch] Buffer restored to %d lines", len(self._lines))

    def _clamp_cursor(self) -> None:
        self.cursor.line = max(1, min(self.cursor.line, len(self._lines) or 1))
        self.cursor.column = max(0, self.cursor.column)
