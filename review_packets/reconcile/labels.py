"""Short display labels for packets of files split into several parts."""

from __future__ import annotations

from .models import ReviewPacket


def packet_label(packet: ReviewPacket) -> str:
    """Return the ``### `path` (i/t, ...)`` heading for *packet*."""
    parts = [] if packet.part_total <= 1 else [packet.part]

    if packet.remaining:
        parts.append(f"remaining changes, +{packet.additions} -{packet.deletions}")
    elif packet.kind == "new":
        parts.append(f"new file, +{packet.additions}")
    elif packet.kind == "deleted":
        parts.append(f"deleted, -{packet.deletions}")
    else:
        parts.append(f"+{packet.additions} -{packet.deletions}")

    return f"### `{packet.file_path}` ({', '.join(parts)})"
