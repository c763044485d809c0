"""
Format metrics — tracks formatter runs in a JSONL log file.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_METRICS_DIR = ".rcsfmt"
_METRICS_FILE = "format_metrics.jsonl"


def _metrics_path(metrics_dir: str | None = None) -> str:
    """Return the absolute path to the metrics file."""
    base = metrics_dir or os.path.join(os.getcwd(), _METRICS_DIR)
    return os.path.join(base, _METRICS_FILE)


def log_format_metric(data: dict, metrics_dir: str | None = None) -> None:
    """Append a single format-run entry to the JSONL log.

    Parameters
    ----------
    data:
        Fields to log (file, success, directives, lines_added, ...).
    metrics_dir:
        Directory holding the log. Defaults to ``.rcsfmt`` under CWD.
    """
    path = _metrics_path(metrics_dir)

    entry = {"timestamp": datetime.now(timezone.utc).isoformat()}
    entry.update(data)

    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as exc:
        logger.warning("[Format] Failed to write metrics: %s", exc)


def read_format_stats(
    last_n: int = 50,
    metrics_dir: str | None = None,
) -> dict:
    """Compute rolling statistics from the metrics log.

    Returns
    -------
    dict
        total_runs, success_rate, changed_rate, avg_directives,
        avg_lines_added, avg_lines_deleted.
    """
    path = _metrics_path(metrics_dir)

    entries: list[dict] = []
    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        try:
                            entries.append(json.loads(line))
                        except json.JSONDecodeError:
                            continue
        except OSError as exc:
            logger.warning("[Format] Failed to read metrics: %s", exc)

    entries = entries[-last_n:]

    if not entries:
        return {
            "total_runs": 0,
            "success_rate": 0.0,
            "changed_rate": 0.0,
            "avg_directives": 0.0,
            "avg_lines_added": 0.0,
            "avg_lines_deleted": 0.0,
        }

    total = len(entries)
    successes = sum(1 for e in entries if e.get("success", False))
    changed = sum(1 for e in entries if e.get("directives", 0) > 0)

    def _avg(key: str) -> float:
        return sum(e.get(key, 0) for e in entries) / total

    return {
        "total_runs": total,
        "success_rate": successes / total * 100,
        "changed_rate": changed / total * 100,
        "avg_directives": _avg("directives"),
        "avg_lines_added": _avg("lines_added"),
        "avg_lines_deleted": _avg("lines_deleted"),
    }
