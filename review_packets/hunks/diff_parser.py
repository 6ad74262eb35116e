"""
Diff parser — turns unified-diff text (optionally wrapped in a markdown
```` ```diff ```` fence) into ordered hunks of classified, numbered lines.
"""

from __future__ import annotations

import logging
import re

from .models import AddLine, ContextLine, DelLine, DiffLine, Hunk
from .whitespace import WhitespaceClassifier

logger = logging.getLogger(__name__)

# Markers
_FENCE_OPEN = "```diff"
_FENCE_CLOSE = "```"
_MARKDOWN_HEADING = "### "
_NO_NEWLINE = "\\ No newline at end of file"

# Patterns
_OLD_START_PATTERN = re.compile(r"^@@ -(\d+)")
_NEW_START_PATTERN = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)")


class DiffParser:
    """Parse unified diffs into :class:`Hunk` objects."""

    def parse(self, content: str) -> list[Hunk]:
        """Parse *content* into hunks, in the order they appear.

        Lines end at ``\n`` (a trailing ``\r`` is dropped).  Only lines
        inside a ```` ```diff ```` fence are read.  Text with no
        fence at all is treated as a bare unified diff.  A malformed ``@@``
        header never aborts parsing: its start numbers fall back to 0.
        """
        text = content or ""
        if text.endswith("\n"):
            text = text[:-1]
        # Only "\n" ends a line; form feeds and other separators are content
        raw_lines = [line.removesuffix("\r") for line in text.split("\n")]
        in_diff = _FENCE_OPEN not in raw_lines

        hunks: list[Hunk] = []
        header: str | None = None
        old_start = new_start = 0
        body: list[DiffLine] = []
        old_line = new_line = 0

        for raw in raw_lines:
            if raw.startswith(_MARKDOWN_HEADING):
                continue
            if raw == _FENCE_OPEN:
                in_diff = True
                continue
            if raw == _FENCE_CLOSE:
                in_diff = False
                continue
            if not in_diff:
                continue

            # File headers
            if raw.startswith("--- ") or raw.startswith("+++ "):
                continue

            if raw.startswith("@@"):
                if header is not None:
                    hunks.append(Hunk(header, tuple(body), old_start, new_start))
                old_start, new_start = self._parse_header(raw)
                old_line = max(old_start - 1, 0)
                new_line = max(new_start - 1, 0)
                header = raw
                body = []
                continue

            if header is None or raw.startswith(_NO_NEWLINE):
                continue

            if raw.startswith("+"):
                new_line += 1
                body.append(AddLine(new_number=new_line, text=raw[1:]))
            elif raw.startswith("-"):
                old_line += 1
                body.append(DelLine(old_number=old_line, text=raw[1:]))
            else:
                old_line += 1
                new_line += 1
                text = raw[1:] if raw.startswith(" ") else raw
                body.append(ContextLine(
                    old_number=old_line, new_number=new_line, text=text,
                ))

        if header is not None:
            hunks.append(Hunk(header, tuple(body), old_start, new_start))

        return hunks

    @staticmethod
    def _parse_header(raw: str) -> tuple[int, int]:
        """Return (old_start, new_start) of an ``@@`` line, 0 where unparsable."""
        old_match = _OLD_START_PATTERN.match(raw)
        new_match = _NEW_START_PATTERN.match(raw)
        if old_match is None or new_match is None:
            logger.debug("[DiffParse] Malformed hunk header: %r", raw)
        old_start = int(old_match.group(1)) if old_match else 0
        new_start = int(new_match.group(1)) if new_match else 0
        return old_start, new_start


def parse_diff(content: str) -> list[Hunk]:
    """Parse *content* and mark whitespace-only replacement blocks."""
    return WhitespaceClassifier().classify(DiffParser().parse(content))
