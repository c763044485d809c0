import logging
import os
import sys
from datetime import datetime

from .formatter import FormatResult


def setup_logger(log_dir: str = ".rcsfmt/logs", verbose: bool = False) -> logging.Logger:
    """Creates a file logger. All verbose output goes here."""
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"rcsfmt_{timestamp}.log")

    logger = logging.getLogger("rcsfmt")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # File handler — captures everything
    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(fh)

    if verbose:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(logging.INFO)
        sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(sh)

    return logger


def report_result(result: FormatResult, check: bool = False) -> None:
    """Print a one-line status for a formatted file, plus any errors."""
    name = result.filename or "<buffer>"
    if not result.success:
        print(f"\033[31merror\033[0m {name}: {result.error}", file=sys.stderr)
        for message in result.errors:
            print(f"  {message}", file=sys.stderr)
        return

    if not result.changed:
        print(f"  unchanged  {name}")
    elif check:
        print(f"\033[33m  would reformat\033[0m  {name}")
    else:
        applied = result.apply_result
        print(
            f"\033[32m  reformatted\033[0m  {name}  "
            f"(+{applied.lines_added} -{applied.lines_deleted})"
        )


def print_stats(stats: dict) -> None:
    """Pretty-print the rolling metrics summary."""
    print(f"Runs recorded:     {stats['total_runs']}")
    if not stats["total_runs"]:
        return
    print(f"Success rate:      {stats['success_rate']:.1f}%")
    print(f"Changed files:     {stats['changed_rate']:.1f}%")
    print(f"Avg directives:    {stats['avg_directives']:.1f}")
    print(f"Avg lines added:   {stats['avg_lines_added']:.1f}")
    print(f"Avg lines deleted: {stats['avg_lines_deleted']:.1f}")
