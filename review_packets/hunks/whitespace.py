"""
Whitespace classifier — marks replacement blocks whose deleted and added
lines differ only by whitespace.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Iterator, Sequence

from .models import AddLine, DelLine, DiffLine, Hunk

_WHITESPACE = re.compile(r"\s")


def iter_replacement_blocks(
    lines: Sequence[DiffLine],
) -> Iterator[tuple[int, int, int]]:
    """Yield ``(del_start, add_start, add_end)`` for each replacement block.

    A block is a maximal run of deleted lines immediately followed by a
    maximal run of added lines.  Blocks never overlap; the run lengths are
    not checked here.
    """
    i = 0
    n = len(lines)
    while i < n:
        if not isinstance(lines[i], DelLine):
            i += 1
            continue
        del_start = i
        while i < n and isinstance(lines[i], DelLine):
            i += 1

        # Must be immediately followed by add lines
        if i >= n or not isinstance(lines[i], AddLine):
            continue
        add_start = i
        while i < n and isinstance(lines[i], AddLine):
            i += 1
        yield del_start, add_start, i


def _strip_whitespace(text: str) -> str:
    return _WHITESPACE.sub("", text)


class WhitespaceClassifier:
    """Flag equal-length del/add blocks that only change whitespace."""

    def classify(self, hunks: Sequence[Hunk]) -> list[Hunk]:
        return [self.classify_hunk(hunk) for hunk in hunks]

    def classify_hunk(self, hunk: Hunk) -> Hunk:
        lines = list(hunk.lines)
        changed = False

        for del_start, add_start, add_end in iter_replacement_blocks(lines):
            count = add_start - del_start
            if add_end - add_start != count:
                continue

            pairs = zip(lines[del_start:add_start], lines[add_start:add_end])
            if not all(
                _strip_whitespace(old.text) == _strip_whitespace(new.text)
                for old, new in pairs
            ):
                continue

            for j in range(del_start, add_end):
                if not lines[j].whitespace_only:
                    lines[j] = dataclasses.replace(lines[j], whitespace_only=True)
                    changed = True

        if not changed:
            return hunk
        return dataclasses.replace(hunk, lines=tuple(lines))
