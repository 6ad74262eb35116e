"""
CLI entry point — argument parsing and main execution flow.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime

from .api import ReconcileResult, reconcile_packets
from .config import Config
from .hunks.models import Side
from .metrics import read_reconcile_stats
from .reconcile.errors import InvalidRequest
from .reconcile.loader import load_requests


def setup_logger(log_dir: str = ".review_packets/logs",
                 level: str = "INFO") -> logging.Logger:
    """Creates a file logger for the ``review_packets`` package."""
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"reconcile_{timestamp}.log")

    logger = logging.getLogger("review_packets")
    logger.setLevel(getattr(logging, level, logging.INFO))

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(fh)

    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-packets",
        description="Reconcile reviewer line-range requests against a diff "
                    "record set and print the resulting review packets.",
    )
    parser.add_argument("data_file", nargs="?",
                        help="JSON file-record set ({\"files\": [...]})")
    parser.add_argument("requests_file", nargs="?",
                        help="JSON array of range requests")
    parser.add_argument("-o", "--output", default=None,
                        help="Write the result JSON here instead of stdout")
    parser.add_argument("--config", default=None,
                        help="Path to .review-packets.yaml config file")
    parser.add_argument("--context-lines", type=int, default=None,
                        help="Context lines around each change (default: from config)")
    parser.add_argument("--metrics", action="store_true",
                        help="Append a metrics entry for this run")
    parser.add_argument("--stats", action="store_true",
                        help="Print statistics from the metrics log and exit")
    parser.add_argument("--no-log-file", action="store_true",
                        help="Do not write a log file")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # ── 0. Load config ──
    cfg = Config.load(args.config)

    # CLI overrides
    if args.context_lines is not None:
        if args.context_lines < 0:
            parser.error("--context-lines must be >= 0")
        cfg.CONTEXT_LINES = args.context_lines
    if args.metrics:
        cfg.METRICS_ENABLED = True

    if args.stats:
        print(json.dumps(read_reconcile_stats(metrics_dir=cfg.METRICS_DIR), indent=2))
        return 0

    if not args.data_file or not args.requests_file:
        parser.error("data_file and requests_file are required")

    if not args.no_log_file:
        setup_logger(cfg.LOG_DIR, cfg.LOG_LEVEL)

    # ── 1. Reconcile ──
    try:
        requests = load_requests(args.requests_file, Side.coerce(cfg.DEFAULT_SIDE))
    except InvalidRequest as exc:
        result = ReconcileResult(status="error", error=str(exc))
    else:
        result = reconcile_packets(args.data_file, requests, cfg)

    # ── 2. Emit ──
    text = json.dumps(result.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
