"""
Hunk model — classified, numbered diff lines grouped under an ``@@`` header.

A diff line is one of three variants.  Each variant only carries the
coordinates that make sense for it: an added line has no old-file number,
a deleted line has no new-file number.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union


class Side(str, enum.Enum):
    """Which file's numbering a line range refers to."""
    LEFT = "LEFT"      # old file
    RIGHT = "RIGHT"    # new file

    @classmethod
    def coerce(cls, value) -> "Side":
        """Anything other than LEFT selects the new file."""
        if isinstance(value, Side):
            return value
        return cls.LEFT if str(value).upper() == "LEFT" else cls.RIGHT


@dataclass(frozen=True)
class AddLine:
    new_number: int
    text: str
    whitespace_only: bool = False

    type: ClassVar[str] = "add"


@dataclass(frozen=True)
class DelLine:
    old_number: int
    text: str
    whitespace_only: bool = False

    type: ClassVar[str] = "del"


@dataclass(frozen=True)
class ContextLine:
    old_number: int
    new_number: int
    text: str

    type: ClassVar[str] = "context"


DiffLine = Union[AddLine, DelLine, ContextLine]


def old_number_of(line: DiffLine) -> Optional[int]:
    return None if isinstance(line, AddLine) else line.old_number


def new_number_of(line: DiffLine) -> Optional[int]:
    return None if isinstance(line, DelLine) else line.new_number


def line_number(line: DiffLine, side: Side) -> Optional[int]:
    """Return the line's coordinate on *side*, or None if it has none there."""
    if side == Side.LEFT:
        return old_number_of(line)
    return new_number_of(line)


def is_changed(line: DiffLine) -> bool:
    return not isinstance(line, ContextLine)


def changed_key(line: DiffLine) -> tuple[Side, int]:
    """Coverage key of an add/del line: (side, number)."""
    if isinstance(line, AddLine):
        return Side.RIGHT, line.new_number
    if isinstance(line, DelLine):
        return Side.LEFT, line.old_number
    raise ValueError("context lines have no coverage key")


@dataclass(frozen=True)
class Hunk:
    """One ``@@`` block of a unified diff."""
    header: str
    lines: tuple[DiffLine, ...] = field(default_factory=tuple)
    old_start: int = 0
    new_start: int = 0

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if isinstance(line, AddLine))

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if isinstance(line, DelLine))
