"""
`rcsfmt` command line.

Commands
--------
rcsfmt format FILE...            -- format files in place through the formatter
rcsfmt format FILE... --check    -- report files that would change, write nothing
rcsfmt format FILE... --diff     -- show a unified diff of the changes
rcsfmt apply FILE PATCH          -- apply a `diff -n` script (PATCH or - for stdin)
rcsfmt stats                     -- show rolling format statistics
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from tqdm import tqdm

from .cli_display import print_stats, report_result, setup_logger
from .config import Config, ConfigError
from .diff_display import show_diff
from .editing.diff_parser import PatchError
from .editing.line_buffer import LineBuffer
from .editing.metrics import read_format_stats
from .editing.patch_applier import PatchApplier
from .formatter import format_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

def _cmd_format(args: argparse.Namespace, cfg: Config) -> int:
    """Format each file, optionally only checking or showing diffs."""
    write = not (args.check or args.diff)
    failed = 0
    changed = 0

    files = args.files
    iterator = tqdm(files, unit="file", desc="Formatting", disable=len(files) < 2,
                    file=sys.stderr)
    for path in iterator:
        try:
            result, original, new_text = format_file(path, cfg, write=write)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("[Format] Cannot read %s: %s", path, exc)
            print(f"error {path}: {exc}", file=sys.stderr)
            failed += 1
            continue

        if not result.success:
            failed += 1
        elif result.changed:
            changed += 1

        if args.diff and result.success:
            show_diff(path, original, new_text, color=sys.stdout.isatty())
        else:
            report_result(result, check=args.check)

    logger.info(
        "[Format] %d file(s): %d changed, %d failed", len(files), changed, failed,
    )
    if failed or (args.check and changed):
        return EXIT_FAILED
    return EXIT_OK


def _cmd_apply(args: argparse.Namespace, cfg: Config) -> int:
    """Apply an existing RCS script to a file."""
    try:
        if args.patch == "-":
            script = sys.stdin.read()
        else:
            with open(args.patch, "r", encoding="utf-8", newline="") as f:
                script = f.read()
        with open(args.file, "r", encoding="utf-8", newline="") as f:
            buffer = LineBuffer.from_text(f.read())
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        result = PatchApplier().apply(buffer, script)
    except PatchError as exc:
        logger.warning("[RcsPatch] Failed to apply %s to %s: %s",
                       args.patch, args.file, exc)
        print(f"error: cannot apply patch to {args.file}: {exc}", file=sys.stderr)
        return EXIT_FAILED

    output = args.output or args.file
    if output == "-":
        sys.stdout.write(buffer.to_text())
    else:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(buffer.to_text())
        print(
            f"applied {result.directives_applied} directive(s) to {output} "
            f"(+{result.lines_added} -{result.lines_deleted})"
        )
    return EXIT_OK


def _cmd_stats(args: argparse.Namespace, cfg: Config) -> int:
    print_stats(read_format_stats(last_n=args.last_n, metrics_dir=cfg.METRICS_DIR))
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rcsfmt",
        description="Run a formatter and patch its changes into files in place",
    )
    parser.add_argument("--config", default=None,
                        help="Path to .rcsfmt.yaml config file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Also log to stderr")
    subparsers = parser.add_subparsers(dest="cmd", metavar="COMMAND")
    subparsers.required = True

    # --- format ---
    format_p = subparsers.add_parser("format", help="Format files in place")
    format_p.add_argument("files", nargs="+", help="Files to format")
    format_p.add_argument("--check", action="store_true",
                          help="Only report files that would change")
    format_p.add_argument("--diff", action="store_true",
                          help="Print a unified diff instead of writing")
    format_p.add_argument("--command", default=None,
                          help="Formatter command line (overrides config)")
    format_p.add_argument("--width", type=int, default=None,
                          help="Line width passed to the formatter")
    format_p.add_argument("--width-flag", dest="width_flag", default=None,
                          help="Formatter flag that takes the width; pass dashed "
                               "flags as --width-flag=-w")
    format_p.set_defaults(func=_cmd_format)

    # --- apply ---
    apply_p = subparsers.add_parser("apply", help="Apply a `diff -n` script")
    apply_p.add_argument("file", help="File to patch")
    apply_p.add_argument("patch", help="RCS script file, or - for stdin")
    apply_p.add_argument("--output", "-o", default=None,
                         help="Write here instead of FILE (- for stdout)")
    apply_p.set_defaults(func=_cmd_apply)

    # --- stats ---
    stats_p = subparsers.add_parser("stats", help="Show rolling format statistics")
    stats_p.add_argument("--last-n", dest="last_n", type=int, default=50,
                         help="Number of recent runs to include (default: 50)")
    stats_p.set_defaults(func=_cmd_stats)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``rcsfmt`` console script. Returns the exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = Config.load(args.config)
        if args.cmd == "format":
            cfg.override(command=args.command, width=args.width,
                         width_flag=args.width_flag)
    except (ConfigError, ValueError) as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    setup_logger(cfg.LOG_DIR, verbose=args.verbose)
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
