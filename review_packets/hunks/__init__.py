"""Unified-diff hunks — parsing, whitespace classification and range slicing."""

from .models import (
    AddLine, DelLine, ContextLine, DiffLine, Hunk, Side,
    line_number, changed_key, is_changed,
)
from .diff_parser import DiffParser, parse_diff
from .whitespace import WhitespaceClassifier, iter_replacement_blocks
from .header import build_hunk_header
from .range_slicer import RangeSlicer, DEFAULT_CONTEXT_LINES

__all__ = [
    "AddLine", "DelLine", "ContextLine", "DiffLine", "Hunk", "Side",
    "line_number", "changed_key", "is_changed",
    "DiffParser", "parse_diff",
    "WhitespaceClassifier", "iter_replacement_blocks",
    "build_hunk_header",
    "RangeSlicer", "DEFAULT_CONTEXT_LINES",
]
