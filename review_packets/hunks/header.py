"""Synthetic ``@@`` headers for arbitrary line subsets."""

from __future__ import annotations

from typing import Sequence

from .models import DiffLine, new_number_of, old_number_of

EMPTY_HEADER = "@@ -0,0 +0,0 @@"


def build_hunk_header(
    lines: Sequence[DiffLine],
    old_anchor: int = 0,
    new_anchor: int = 0,
) -> str:
    """Build an ``@@ -a,b +c,d @@`` header describing *lines*.

    The start on each side is the number of the first line that has one.
    When no line has a number on a side, the matching anchor is used
    instead (the line after which the change sits, as in ``git diff``).
    """
    if not lines:
        return EMPTY_HEADER

    old_start: int | None = None
    new_start: int | None = None
    old_count = new_count = 0

    for line in lines:
        old = old_number_of(line)
        if old is not None:
            if old_start is None:
                old_start = old
            old_count += 1
        new = new_number_of(line)
        if new is not None:
            if new_start is None:
                new_start = new
            new_count += 1

    if old_start is None:
        old_start = old_anchor
    if new_start is None:
        new_start = new_anchor
    return f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"
