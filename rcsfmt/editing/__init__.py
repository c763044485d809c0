"""RCS patch editing — apply ``diff -n`` scripts to line buffers in place."""

from .diff_parser import (
    RcsDiffParser, AddDirective, DeleteDirective, DiffDirective,
    PatchError, MalformedPatch, parse_rcs_script,
)
from .line_buffer import LineBuffer, Cursor, BufferSnapshot
from .patch_applier import PatchApplier, ApplyResult, OutOfRange, apply_rcs_patch
from .metrics import log_format_metric, read_format_stats

__all__ = [
    "RcsDiffParser", "AddDirective", "DeleteDirective", "DiffDirective",
    "PatchError", "MalformedPatch", "parse_rcs_script",
    "LineBuffer", "Cursor", "BufferSnapshot",
    "PatchApplier", "ApplyResult", "OutOfRange", "apply_rcs_patch",
    "log_format_metric", "read_format_stats",
]
