"""
Patch applier — applies RCS add/delete directives to a line buffer in
place, one forward pass with a running line offset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from .diff_parser import (
    AddDirective,
    DeleteDirective,
    DiffDirective,
    PatchError,
    RcsDiffParser,
)
from .line_buffer import LineBuffer

logger = logging.getLogger(__name__)


class OutOfRange(PatchError):
    """Raised when a directive addresses lines outside the current buffer."""

    def __init__(self, message: str, directive: DiffDirective) -> None:
        super().__init__(message)
        self.directive = directive


@dataclass
class ApplyResult:
    """Result of applying an RCS script."""
    directives_applied: int = 0
    lines_added: int = 0
    lines_deleted: int = 0
    deleted_lines: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.directives_applied > 0


class PatchApplier:
    """Apply RCS directives to a buffer."""

    def __init__(self, parser: RcsDiffParser | None = None) -> None:
        self._parser = parser or RcsDiffParser()

    def apply(
        self,
        buffer: Union[LineBuffer, list[str]],
        script: Union[str, Iterable[DiffDirective]],
    ) -> ApplyResult:
        """Apply ``script`` to ``buffer`` in place.

        Parameters
        ----------
        buffer:
            A :class:`LineBuffer`, or a plain list of lines (without
            terminators) which is mutated directly.
        script:
            ``diff -n`` text, or already-parsed directives. Text is parsed
            in full before the buffer is touched.

        Returns
        -------
        ApplyResult
            Counts plus the content of every deleted line, in order.

        Raises
        ------
        MalformedPatch
            The script text breaks the RCS grammar. The buffer is untouched.
        OutOfRange
            A directive addresses lines the buffer does not have. Directives
            before it remain applied.
        """
        if isinstance(script, str):
            directives: Iterable[DiffDirective] = self._parser.parse(script)
        else:
            directives = script

        target = buffer if isinstance(buffer, LineBuffer) else LineBuffer(buffer)
        result = ApplyResult()
        offset = 0

        for directive in directives:
            if isinstance(directive, AddDirective):
                offset -= directive.count
                # Lines to skip from the top before inserting
                position = directive.start - directive.count - offset
                if position < 0 or position > len(target):
                    raise OutOfRange(
                        f"cannot add after line {position}: buffer has "
                        f"{len(target)} lines",
                        directive,
                    )
                target.insert_lines(
                    position,
                    directive.lines,
                    final_newline=not directive.no_newline_at_end,
                )
                result.lines_added += directive.count
            elif isinstance(directive, DeleteDirective):
                line = directive.start - offset
                if line < 1 or line + directive.count - 1 > len(target):
                    raise OutOfRange(
                        f"cannot delete lines {line}-{line + directive.count - 1}: "
                        f"buffer has {len(target)} lines",
                        directive,
                    )
                offset += directive.count
                removed = target.delete_lines(line - 1, directive.count)
                result.deleted_lines.extend(removed)
                result.lines_deleted += directive.count
            else:
                raise TypeError(f"not a diff directive: {directive!r}")

            result.directives_applied += 1

        logger.debug(
            "[RcsPatch] Applied %d directive(s): +%d -%d lines",
            result.directives_applied, result.lines_added, result.lines_deleted,
        )
        return result


def apply_rcs_patch(
    buffer: Union[LineBuffer, list[str]],
    script: Union[str, Iterable[DiffDirective]],
) -> ApplyResult:
    """Apply an RCS script to ``buffer`` in place. See :meth:`PatchApplier.apply`."""
    return PatchApplier().apply(buffer, script)
