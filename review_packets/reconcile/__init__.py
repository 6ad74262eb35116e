"""Reconciliation of reviewer range requests against a file-record set."""

from .errors import ReconcileError, SourceReadFailure, InvalidRequest
from .models import (
    FileDiff, FileStatus, FileKind, AnnotationRequest, ReviewPacket,
    SPECIAL_KINDS,
)
from .loader import (
    load_file_records, parse_file_records, load_requests, parse_requests,
)
from .coverage import (
    CoverageReconciler, ReconcileOutcome, ReconcileStats, CoverageGap,
    audit_coverage,
)
from .labels import packet_label
from .serializers import packet_to_dict, hunk_to_dict, line_to_dict

__all__ = [
    "ReconcileError", "SourceReadFailure", "InvalidRequest",
    "FileDiff", "FileStatus", "FileKind", "AnnotationRequest", "ReviewPacket",
    "SPECIAL_KINDS",
    "load_file_records", "parse_file_records", "load_requests", "parse_requests",
    "CoverageReconciler", "ReconcileOutcome", "ReconcileStats", "CoverageGap",
    "audit_coverage",
    "packet_label",
    "packet_to_dict", "hunk_to_dict", "line_to_dict",
]
