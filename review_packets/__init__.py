"""
review_packets — slice unified diffs into review packets that show every
changed line exactly once.

Public API for library usage::

    from review_packets import reconcile_packets, ReconcileResult

    result = reconcile_packets("packets-data.json", requests)
"""

from .api import reconcile_packets, reconcile_records, ReconcileResult

__all__ = ["reconcile_packets", "reconcile_records", "ReconcileResult"]
