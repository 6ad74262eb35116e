"""
Reconciliation records — the file-record set, the requested ranges and the
review packets produced from them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union

from ..hunks.models import Hunk, Side

PacketId = Union[int, str]


class FileStatus(str, enum.Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class FileKind(str, enum.Enum):
    NORMAL = "normal"
    LOCK = "lock"
    BINARY = "binary"
    GENERATED = "generated"
    MINIFIED = "minified"


SPECIAL_KINDS = frozenset({
    FileKind.LOCK, FileKind.BINARY, FileKind.GENERATED, FileKind.MINIFIED,
})


@dataclass(frozen=True)
class FileDiff:
    """One changed file of the record set, as prepared upstream."""
    id: PacketId
    path: str
    raw_diff_text: str
    status: FileStatus = FileStatus.MODIFIED
    kind: FileKind = FileKind.NORMAL
    additions: int = 0          # file-level counts, as reported upstream
    deletions: int = 0

    @property
    def is_rename_only(self) -> bool:
        return (
            self.status == FileStatus.RENAMED
            and self.additions == 0
            and self.deletions == 0
        )


@dataclass(frozen=True)
class AnnotationRequest:
    """A reviewer-facing range of one file, in presentation order."""
    id: PacketId
    file_id: PacketId
    start_line: int
    end_line: int               # inclusive
    side: Side = Side.RIGHT
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReviewPacket:
    """One unit of output: a file, a slice of its hunks, and a part number.

    ``part_total`` (and the display label) may be revised after creation
    when the safety-net pass appends a packet for the same file.
    """
    id: PacketId
    file_id: PacketId
    file_path: str
    part_index: int
    part_total: int
    kind: str
    additions: int
    deletions: int
    display_content: str
    hunks: list[Hunk] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    remaining: bool = False

    @property
    def part(self) -> str:
        return f"{self.part_index}/{self.part_total}"
