"""
Programmatic API — use the reconciler as a library from Python code.

Example usage::

    from review_packets import reconcile_packets

    result = reconcile_packets(
        "packets-data.json",
        [{"id": 1, "file_id": 3, "start_line": 10, "end_line": 42,
          "title": "Validate input"}],
    )
    if result.ok:
        for packet in result.packets:
            print(packet.part, packet.file_path)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .config import Config
from .hunks.models import Side
from .metrics import log_reconcile_metric
from .reconcile.coverage import CoverageReconciler, audit_coverage
from .reconcile.errors import ReconcileError
from .reconcile.loader import load_file_records, parse_requests
from .reconcile.models import FileDiff, ReviewPacket
from .reconcile.serializers import packet_to_dict

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Structured result returned by :func:`reconcile_packets`.

    An error result never carries packets, so a failure cannot be mistaken
    for a valid empty result.
    """
    status: str
    packets: list[ReviewPacket] = field(default_factory=list)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"status": self.status, "error": self.error, "packets": []}
        return {
            "status": self.status,
            "packets": [packet_to_dict(p) for p in self.packets],
        }


def reconcile_records(
    files: Sequence[FileDiff],
    requests: Iterable[Any],
    config: Config | None = None,
) -> list[ReviewPacket]:
    """Reconcile already-loaded records; errors propagate as exceptions."""
    cfg = config or Config()
    parsed = parse_requests(requests, Side.coerce(cfg.DEFAULT_SIDE))
    return CoverageReconciler.from_config(files, cfg).reconcile(parsed)


def reconcile_packets(
    data_file: str,
    requests: Iterable[Any],
    config: Config | None = None,
) -> ReconcileResult:
    """Read the record set at *data_file* and reconcile *requests* against it.

    Any failure to read the record set or the requests yields a single
    error result with no packets.
    """
    cfg = config or Config()

    try:
        files = load_file_records(data_file)
        parsed = parse_requests(requests, Side.coerce(cfg.DEFAULT_SIDE))
    except ReconcileError as exc:
        logger.error("[Reconcile] %s", exc)
        if cfg.METRICS_ENABLED:
            log_reconcile_metric(
                {"status": "error", "error": str(exc)}, cfg.METRICS_DIR,
            )
        return ReconcileResult(status="error", error=str(exc))

    reconciler = CoverageReconciler.from_config(files, cfg)
    outcome = reconciler.run(parsed)

    gaps = audit_coverage(files, outcome.packets, cfg.SPECIAL_KINDS)
    for file_id, gap in gaps.items():
        logger.warning(
            "[Reconcile] File %r: %d changed line(s) not shown, %d shown twice",
            file_id, len(gap.missing), len(gap.duplicated),
        )

    if cfg.METRICS_ENABLED:
        metric = {"status": "ok", "files": len(files), "coverage_gaps": len(gaps)}
        metric.update(outcome.stats.as_dict())
        log_reconcile_metric(metric, cfg.METRICS_DIR)

    return ReconcileResult(status="ok", packets=outcome.packets)
