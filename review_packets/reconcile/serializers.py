"""JSON-ready dicts for hunks and review packets."""

from __future__ import annotations

from typing import Any

from ..hunks.models import DiffLine, Hunk, new_number_of, old_number_of
from .models import ReviewPacket


def line_to_dict(line: DiffLine) -> dict[str, Any]:
    out: dict[str, Any] = {"type": line.type}
    old = old_number_of(line)
    if old is not None:
        out["old_number"] = old
    new = new_number_of(line)
    if new is not None:
        out["new_number"] = new
    out["text"] = line.text
    if getattr(line, "whitespace_only", False):
        out["whitespace_only"] = True
    return out


def hunk_to_dict(hunk: Hunk) -> dict[str, Any]:
    return {
        "header": hunk.header,
        "lines": [line_to_dict(line) for line in hunk.lines],
    }


def packet_to_dict(packet: ReviewPacket) -> dict[str, Any]:
    """Serialize *packet*; request metadata is passed through as-is."""
    out: dict[str, Any] = {
        "id": packet.id,
        "file": packet.file_path,
        "part": packet.part,
        "part_index": packet.part_index,
        "total_parts": packet.part_total,
        "type": packet.kind,
        "additions": packet.additions,
        "deletions": packet.deletions,
        "content": packet.display_content,
        "is_imports": False,
        "hunks": [hunk_to_dict(h) for h in packet.hunks],
    }
    for key, value in packet.metadata.items():
        out.setdefault(key, value)
    return out
