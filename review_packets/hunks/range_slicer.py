"""
Range slicer — restricts parsed hunks to a line range on one side of the
diff, keeping replacement blocks whole and padding with a little context.
"""

from __future__ import annotations

import logging
from typing import Collection, Iterable, Sequence

from .header import build_hunk_header
from .models import (
    ContextLine, DiffLine, Hunk, Side, changed_key, is_changed, line_number,
)
from .whitespace import iter_replacement_blocks

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_LINES = 3

LineRange = tuple[int, int, Side]


class RangeSlicer:
    """Slice hunks down to the lines a reviewer asked about.

    Parameters
    ----------
    context_lines:
        Maximum number of context lines kept before and after each
        selected change.
    """

    def __init__(self, context_lines: int = DEFAULT_CONTEXT_LINES):
        if context_lines < 0:
            raise ValueError("context_lines must be >= 0")
        self.context_lines = context_lines

    def slice(
        self,
        hunks: Sequence[Hunk],
        start: int,
        end: int,
        side: Side = Side.RIGHT,
    ) -> list[Hunk]:
        """Return new hunks holding only the changes in [start, end] on *side*.

        RIGHT ranges use new-file numbers, LEFT ranges old-file numbers.
        """
        return self.slice_ranges(hunks, [(start, end, Side.coerce(side))])

    def slice_ranges(
        self,
        hunks: Sequence[Hunk],
        ranges: Iterable[LineRange],
        exclude: Collection[tuple[Side, int]] = (),
    ) -> list[Hunk]:
        """Like :meth:`slice`, selecting the union of several ranges.

        Changed lines whose ``(side, number)`` key is in *exclude* are not
        selected directly, though they may still be pulled in by a
        replacement block.
        """
        ranges = [(start, end, Side.coerce(side)) for start, end, side in ranges]
        exclude = frozenset(exclude)
        result: list[Hunk] = []
        for hunk in hunks:
            included = self._included(hunk.lines, ranges, exclude)
            result.extend(self._fragments(hunk, included))
        logger.debug("[Slice] %s -> %d hunk(s)", ranges, len(result))
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _included(
        self,
        lines: Sequence[DiffLine],
        ranges: list[LineRange],
        exclude: frozenset,
    ) -> list[bool]:
        # Changed lines whose coordinate falls inside a range
        in_range = [
            is_changed(line) and changed_key(line) not in exclude and any(
                _within(line_number(line, side), start, end)
                for start, end, side in ranges
            )
            for line in lines
        ]

        # Never show half of an equal-length replacement
        for del_start, add_start, add_end in iter_replacement_blocks(lines):
            if add_start - del_start != add_end - add_start:
                continue
            if any(in_range[del_start:add_end]):
                for j in range(del_start, add_end):
                    in_range[j] = True

        included = list(in_range)
        for idx, selected in enumerate(in_range):
            if not selected:
                continue
            for step in (-1, 1):
                for distance in range(1, self.context_lines + 1):
                    neighbor = idx + step * distance
                    if not 0 <= neighbor < len(lines):
                        break
                    if not isinstance(lines[neighbor], ContextLine):
                        break
                    included[neighbor] = True
        return included

    @staticmethod
    def _fragments(hunk: Hunk, included: list[bool]) -> list[Hunk]:
        """Split the included lines of *hunk* into contiguous sub-hunks."""
        fragments: list[Hunk] = []
        current: list[DiffLine] = []
        anchors = (0, 0)
        old_line = max(hunk.old_start - 1, 0)
        new_line = max(hunk.new_start - 1, 0)

        for line, keep in zip(hunk.lines, included):
            if keep:
                if not current:
                    anchors = (old_line, new_line)
                current.append(line)
            elif current:
                fragments.append(_make_hunk(current, anchors))
                current = []

            old = line_number(line, Side.LEFT)
            new = line_number(line, Side.RIGHT)
            if old is not None:
                old_line = old
            if new is not None:
                new_line = new

        if current:
            fragments.append(_make_hunk(current, anchors))
        return fragments


def _within(number: int | None, start: int, end: int) -> bool:
    return number is not None and start <= number <= end


def _make_hunk(lines: list[DiffLine], anchors: tuple[int, int]) -> Hunk:
    old_anchor, new_anchor = anchors
    header = build_hunk_header(lines, old_anchor, new_anchor)
    first_old = next(
        (n for n in (line_number(l, Side.LEFT) for l in lines) if n is not None),
        old_anchor + 1,
    )
    first_new = next(
        (n for n in (line_number(l, Side.RIGHT) for l in lines) if n is not None),
        new_anchor + 1,
    )
    return Hunk(header, tuple(lines), old_start=first_old, new_start=first_new)
