"""
Formatter driver — runs an external formatter on a temp copy of a buffer,
diffs the result with ``diff -n`` and patches the buffer in place.

Patching instead of replacing keeps the buffer's cursor on the line it was
on before formatting.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from .config import Config
from .editing.diff_parser import PatchError
from .editing.line_buffer import LineBuffer
from .editing.metrics import log_format_metric
from .editing.patch_applier import ApplyResult, PatchApplier

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".rcsfmt_"

# file:line[:column]: message
_ERROR_LINE_PATTERN = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+)(?::(?P<column>\d+))?:\s*(?P<message>.*)$"
)


class FormatError(Exception):
    """Base class for failures outside the patch itself."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class FormatterError(FormatError):
    """The formatter is missing, timed out, or exited non-zero."""

    def __init__(self, message: str, output: str = "",
                 tmp_path: Optional[str] = None) -> None:
        super().__init__(message, output)
        self.tmp_path = tmp_path


class DiffToolError(FormatError):
    """The diff command is missing or reported trouble (exit status > 1)."""


@dataclass
class FormatterMessage:
    """One diagnostic line from the formatter."""
    filename: Optional[str]
    line: Optional[int]
    column: Optional[int]
    message: str

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        location = f"{self.filename}:{self.line}"
        if self.column is not None:
            location += f":{self.column}"
        return f"{location}: {self.message}"


@dataclass
class FormatResult:
    """Result of formatting one buffer."""
    success: bool = False
    changed: bool = False
    filename: Optional[str] = None
    apply_result: Optional[ApplyResult] = None
    error: str = ""
    errors: list[FormatterMessage] = field(default_factory=list)


def parse_formatter_errors(
    output: str,
    tmp_path: Optional[str] = None,
    filename: Optional[str] = None,
) -> list[FormatterMessage]:
    """Turn formatter stderr into messages pointing at the real file.

    Occurrences of ``tmp_path`` (or stdin markers) are replaced by
    ``filename`` so the messages refer to what the user is editing.
    """
    display_name = filename or "<buffer>"
    messages: list[FormatterMessage] = []

    for raw in output.splitlines():
        if not raw.strip():
            continue
        if tmp_path:
            raw = raw.replace(tmp_path, display_name)
        match = _ERROR_LINE_PATTERN.match(raw)
        if match is None:
            messages.append(FormatterMessage(None, None, None, raw.strip()))
            continue
        source = match.group("file")
        if source in ("<standard input>", "<stdin>", "-"):
            source = display_name
        column = match.group("column")
        messages.append(FormatterMessage(
            filename=source,
            line=int(match.group("line")),
            column=int(column) if column is not None else None,
            message=match.group("message"),
        ))

    return messages


def _write_temp(content: str, suffix: str) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix, prefix=_TMP_PREFIX)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _unlink_quietly(path: Optional[str]) -> None:
    if path is None:
        return
    try:
        os.unlink(path)
    except OSError:
        pass


def run_formatter(content: str, config: Config, suffix: str = "") -> str:
    """Run the configured formatter over ``content`` and return its output.

    Raises
    ------
    FormatterError
        If the command cannot be run, times out, or exits non-zero.
    """
    tmp_path = _write_temp(content, suffix)
    try:
        argv = config.formatter_argv(tmp_path)
        logger.debug("[Format] Running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                input=content.encode("utf-8") if config.STDIN else None,
                capture_output=True,
                timeout=config.TIMEOUT,
                check=False,
            )
        except FileNotFoundError as exc:
            raise FormatterError(f"formatter not found: {config.COMMAND}") from exc
        except subprocess.TimeoutExpired as exc:
            raise FormatterError(
                f"formatter timed out after {config.TIMEOUT:g}s"
            ) from exc

        stderr = proc.stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            # Some formatters report syntax errors on stdout
            output = stderr or proc.stdout.decode("utf-8", errors="replace")
            raise FormatterError(
                f"{config.COMMAND} exited with status {proc.returncode}",
                output=output,
                tmp_path=tmp_path,
            )

        try:
            if config.MODE == "write":
                return _read_text(tmp_path)
            return proc.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatterError(
                f"{config.COMMAND} produced output that is not valid UTF-8: {exc}"
            ) from exc
    finally:
        _unlink_quietly(tmp_path)


def compute_rcs_diff(original: str, formatted: str, diff_command: str = "diff") -> str:
    """Return the ``diff -n`` script turning ``original`` into ``formatted``.

    Empty when the two texts are identical.
    """
    if original == formatted:
        return ""

    original_path = formatted_path = None
    try:
        original_path = _write_temp(original, ".orig")
        formatted_path = _write_temp(formatted, ".fmt")
        try:
            proc = subprocess.run(
                [diff_command, "-n", original_path, formatted_path],
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise DiffToolError(f"diff command not found: {diff_command}") from exc

        # diff: 0 = same, 1 = different, 2 = trouble
        if proc.returncode > 1:
            raise DiffToolError(
                f"{diff_command} exited with status {proc.returncode}",
                output=proc.stderr.decode("utf-8", errors="replace"),
            )
        try:
            return proc.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DiffToolError(
                f"{diff_command} produced output that is not valid UTF-8: {exc}"
            ) from exc
    finally:
        _unlink_quietly(original_path)
        _unlink_quietly(formatted_path)


def format_buffer(
    buffer: LineBuffer,
    config: Config,
    filename: Optional[str] = None,
) -> FormatResult:
    """Format ``buffer`` in place through the configured formatter.

    On any failure the buffer is restored to its pre-format state and the
    returned result carries the error and the parsed formatter messages.
    """
    result = FormatResult(filename=filename)
    snapshot = buffer.snapshot()
    original = buffer.to_text()
    suffix = os.path.splitext(filename)[1] if filename else ""

    try:
        formatted = run_formatter(original, config, suffix=suffix)
        script = compute_rcs_diff(original, formatted, config.DIFF_COMMAND)
        if script:
            result.apply_result = PatchApplier().apply(buffer, script)
            result.changed = True
        else:
            result.apply_result = ApplyResult()
            logger.info("[Format] %s is already formatted", filename or "<buffer>")
        result.success = True
    except FormatterError as exc:
        result.error = str(exc)
        result.errors = parse_formatter_errors(exc.output, exc.tmp_path, filename)
        logger.warning("[Format] Formatter failed for %s: %s", filename or "<buffer>", exc)
    except (DiffToolError, PatchError) as exc:
        buffer.restore(snapshot)
        result.error = str(exc)
        logger.warning(
            "[Format] Could not patch %s, buffer restored: %s",
            filename or "<buffer>", exc,
        )

    if config.METRICS:
        applied = result.apply_result or ApplyResult()
        log_format_metric({
            "file": filename,
            "success": result.success,
            "directives": applied.directives_applied,
            "lines_added": applied.lines_added,
            "lines_deleted": applied.lines_deleted,
            "error": result.error,
        }, metrics_dir=config.METRICS_DIR)

    return result


def format_file(path: str, config: Config, write: bool = True) -> tuple[FormatResult, str, str]:
    """Format the file at ``path``.

    Returns ``(result, original_text, new_text)``. The file is rewritten
    only when ``write`` is true and the content changed.
    """
    original = _read_text(path)
    buffer = LineBuffer.from_text(original)
    result = format_buffer(buffer, config, filename=path)
    new_text = buffer.to_text()

    if write and result.success and result.changed:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(new_text)
        logger.info("[Format] Rewrote %s", path)

    return result, original, new_text
