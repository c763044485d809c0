"""
rcsfmt — run a formatter and patch its output into a buffer in place.

Public API for library usage::

    from rcsfmt import LineBuffer, apply_rcs_patch

    buffer = LineBuffer.from_text(source)
    apply_rcs_patch(buffer, rcs_script)   # output of `diff -n old new`
"""

from .config import Config, ConfigError
from .editing import (
    AddDirective, ApplyResult, Cursor, DeleteDirective, LineBuffer,
    MalformedPatch, OutOfRange, PatchApplier, PatchError, RcsDiffParser,
    apply_rcs_patch, parse_rcs_script,
)
from .formatter import (
    DiffToolError, FormatResult, FormatterError, compute_rcs_diff,
    format_buffer, format_file,
)

__all__ = [
    "Config", "ConfigError",
    "AddDirective", "ApplyResult", "Cursor", "DeleteDirective", "LineBuffer",
    "MalformedPatch", "OutOfRange", "PatchApplier", "PatchError",
    "RcsDiffParser", "apply_rcs_patch", "parse_rcs_script",
    "DiffToolError", "FormatResult", "FormatterError", "compute_rcs_diff",
    "format_buffer", "format_file",
]
