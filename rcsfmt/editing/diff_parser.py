"""
RCS diff parser — parses ``diff -n`` ed-script output into add/delete
directives.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Union

logger = logging.getLogger(__name__)

# Patterns
_DIRECTIVE_PATTERN = re.compile(r"([ad])([0-9]+) ([0-9]+)")


class PatchError(Exception):
    """Base class for errors raised while parsing or applying an RCS patch."""


class MalformedPatch(PatchError):
    """Raised when the script does not follow the RCS directive grammar."""

    def __init__(self, message: str, script_line: int | None = None) -> None:
        if script_line is not None:
            message = f"line {script_line}: {message}"
        super().__init__(message)
        self.script_line = script_line


@dataclass(frozen=True)
class DeleteDirective:
    """Remove ``count`` lines starting at original line ``start``."""
    start: int                 # 1-indexed, original numbering
    count: int

    @property
    def action(self) -> str:
        return "d"


@dataclass(frozen=True)
class AddDirective:
    """Insert ``lines`` after original line ``start`` (0 = top of file)."""
    start: int
    lines: tuple[str, ...] = field(default_factory=tuple)
    no_newline_at_end: bool = False

    @property
    def action(self) -> str:
        return "a"

    @property
    def count(self) -> int:
        return len(self.lines)


DiffDirective = Union[AddDirective, DeleteDirective]


class RcsDiffParser:
    """Parse RCS (``diff -n``) scripts."""

    def parse(self, script: str) -> list[DiffDirective]:
        """Parse an RCS script into directives, in script order.

        Parameters
        ----------
        script:
            Raw ``diff -n`` output.

        Returns
        -------
        list[DiffDirective]
            The directives. Empty for an empty script.

        Raises
        ------
        MalformedPatch
            On the first line that breaks the grammar. Nothing is returned
            for the lines parsed before it.
        """
        if not script:
            return []

        # diff only ever splits on LF; a CR is part of the line content
        lines = script.split("\n")
        ends_with_newline = script.endswith("\n")
        if ends_with_newline:
            lines.pop()

        directives: list[DiffDirective] = []
        i = 0
        total = len(lines)

        while i < total:
            match = _DIRECTIVE_PATTERN.fullmatch(lines[i])
            if match is None:
                raise MalformedPatch(
                    f"expected an RCS directive, got {lines[i]!r}",
                    script_line=i + 1,
                )

            action = match.group(1)
            start = int(match.group(2))
            count = int(match.group(3))
            if count < 1:
                raise MalformedPatch(
                    f"directive {lines[i]!r} has a zero line count",
                    script_line=i + 1,
                )
            i += 1

            if action == "d":
                if start < 1:
                    raise MalformedPatch(
                        f"delete directive {lines[i - 1]!r} starts before line 1",
                        script_line=i,
                    )
                directives.append(DeleteDirective(start=start, count=count))
                continue

            if i + count > total:
                raise MalformedPatch(
                    f"add directive declares {count} line(s) but only "
                    f"{total - i} remain in the script",
                    script_line=i,
                )
            content = tuple(lines[i : i + count])
            i += count
            directives.append(AddDirective(
                start=start,
                lines=content,
                no_newline_at_end=not ends_with_newline and i == total,
            ))

        logger.debug("[RcsPatch] Parsed %d directive(s)", len(directives))
        return directives


def parse_rcs_script(script: str) -> list[DiffDirective]:
    """Shortcut for ``RcsDiffParser().parse(script)``."""
    return RcsDiffParser().parse(script)
