"""
Reconcile metrics — tracks coverage outcomes in a JSONL log file.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_METRICS_DIR = ".review_packets"
_METRICS_FILE = "reconcile_metrics.jsonl"


def _metrics_path(metrics_dir: str | None = None) -> str:
    """Return the path to the metrics file."""
    return os.path.join(metrics_dir or _METRICS_DIR, _METRICS_FILE)


def log_reconcile_metric(data: dict, metrics_dir: str | None = None) -> None:
    """Append a single reconcile metric entry to the JSONL log.

    Parameters
    ----------
    data:
        Metric fields to log (requests, packets, uncovered_lines, etc.).
    metrics_dir:
        Directory holding the log. Defaults to ``.review_packets`` in CWD.
    """
    path = _metrics_path(metrics_dir)

    entry = {"timestamp": datetime.now(timezone.utc).isoformat()}
    entry.update(data)

    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as exc:
        logger.warning("[Reconcile] Failed to write metrics: %s", exc)


def read_reconcile_stats(
    last_n: int = 50,
    metrics_dir: str | None = None,
) -> dict:
    """Compute rolling statistics from the metrics log.

    Parameters
    ----------
    last_n:
        Number of most-recent entries to include.
    metrics_dir:
        Directory holding the log.

    Returns
    -------
    dict
        total_runs, error_rate, avg_packets, safety_net_rate (share of
        successful runs that needed a remaining-changes packet),
        total_uncovered_lines, total_skipped_requests.
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
            logger.warning("[Reconcile] Failed to read metrics: %s", exc)

    # Take last N entries
    entries = entries[-last_n:]

    if not entries:
        return {
            "total_runs": 0,
            "error_rate": 0.0,
            "avg_packets": 0.0,
            "safety_net_rate": 0.0,
            "total_uncovered_lines": 0,
            "total_skipped_requests": 0,
        }

    total = len(entries)
    ok = [e for e in entries if e.get("status") == "ok"]
    errors = total - len(ok)
    with_safety_net = sum(1 for e in ok if e.get("safety_net_packets", 0) > 0)

    return {
        "total_runs": total,
        "error_rate": errors / total * 100,
        "avg_packets": (
            sum(e.get("packets", 0) for e in ok) / len(ok) if ok else 0.0
        ),
        "safety_net_rate": with_safety_net / len(ok) * 100 if ok else 0.0,
        "total_uncovered_lines": sum(e.get("uncovered_lines", 0) for e in ok),
        "total_skipped_requests": sum(e.get("skipped_requests", 0) for e in ok),
    }
