"""
Coverage reconciler — turns an ordered list of range requests into review
packets, then adds one "remaining changes" packet per file for whatever the
requests missed, so every changed line reaches the reviewer.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..hunks.diff_parser import parse_diff
from ..hunks.models import AddLine, Hunk, Side, changed_key, is_changed
from ..hunks.range_slicer import DEFAULT_CONTEXT_LINES, RangeSlicer
from .labels import packet_label
from .models import (
    SPECIAL_KINDS, AnnotationRequest, FileDiff, FileStatus, PacketId,
    ReviewPacket,
)

logger = logging.getLogger(__name__)

CoverageKey = tuple[Side, int]

REMAINING_SUMMARY = "Changes not covered by other annotations."


@dataclass
class ReconcileStats:
    """Counters describing one reconciliation call."""
    requests: int = 0
    skipped_requests: int = 0
    packets: int = 0
    safety_net_packets: int = 0
    uncovered_lines: int = 0

    def as_dict(self) -> dict:
        return {
            "requests": self.requests,
            "skipped_requests": self.skipped_requests,
            "packets": self.packets,
            "safety_net_packets": self.safety_net_packets,
            "uncovered_lines": self.uncovered_lines,
        }


@dataclass
class ReconcileOutcome:
    packets: list[ReviewPacket]
    stats: ReconcileStats


@dataclass
class _CallState:
    """Working state of a single :meth:`CoverageReconciler.run` call."""
    hunks: dict[PacketId, list[Hunk]] = field(default_factory=dict)
    covered: dict[PacketId, set[CoverageKey]] = field(default_factory=dict)
    parts: Counter = field(default_factory=Counter)
    totals: Counter = field(default_factory=Counter)
    packets: list[ReviewPacket] = field(default_factory=list)
    stats: ReconcileStats = field(default_factory=ReconcileStats)


class CoverageReconciler:
    """Reconcile annotation requests against a file-record set.

    The reconciler only holds the read-only record set and its settings.
    Every call to :meth:`run` builds fresh working state, so one instance
    may serve any number of calls, concurrently or not.

    Parameters
    ----------
    files:
        The file-record set.
    context_lines:
        Context padding passed to the :class:`RangeSlicer`.
    special_kinds:
        File kinds shown as a whole-file summary without hunks.
    safety_net_both_sides:
        When the remaining-changes packet is sliced on the new-file side,
        also pull in uncovered deletions that fall outside that slice.
    """

    def __init__(
        self,
        files: Sequence[FileDiff],
        context_lines: int = DEFAULT_CONTEXT_LINES,
        special_kinds: Iterable[str] | None = None,
        safety_net_both_sides: bool = True,
    ):
        self.files = list(files)
        self.files_by_id = {f.id: f for f in self.files}
        self.slicer = RangeSlicer(context_lines)
        if special_kinds is None:
            special_kinds = (kind.value for kind in SPECIAL_KINDS)
        self.special_kinds = frozenset(str(k) for k in special_kinds)
        self.safety_net_both_sides = safety_net_both_sides

    @classmethod
    def from_config(cls, files: Sequence[FileDiff], config) -> "CoverageReconciler":
        return cls(
            files,
            context_lines=config.CONTEXT_LINES,
            special_kinds=config.SPECIAL_KINDS,
            safety_net_both_sides=config.SAFETY_NET_BOTH_SIDES,
        )

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def reconcile(self, requests: Sequence[AnnotationRequest]) -> list[ReviewPacket]:
        """Return the ordered packet list for *requests*."""
        return self.run(requests).packets

    def run(self, requests: Sequence[AnnotationRequest]) -> ReconcileOutcome:
        state = _CallState()
        state.stats.requests = len(requests)
        for request in requests:
            state.totals[request.file_id] += 1

        for request in requests:
            packet = self._packet_for_request(request, state)
            if packet is not None:
                state.packets.append(packet)

        self._safety_net(state)
        self._relabel(state.packets)

        state.stats.packets = len(state.packets)
        logger.info(
            "[Reconcile] %d request(s) -> %d packet(s), %d remaining-changes "
            "packet(s), %d skipped",
            state.stats.requests, state.stats.packets,
            state.stats.safety_net_packets, state.stats.skipped_requests,
        )
        return ReconcileOutcome(packets=state.packets, stats=state.stats)

    def is_whole_file(self, file: FileDiff) -> bool:
        """True for files shown without hunks (special kinds, pure renames)."""
        return file.kind.value in self.special_kinds or file.is_rename_only

    def packet_kind(self, file: FileDiff) -> str:
        if file.kind.value in self.special_kinds:
            return file.kind.value
        if file.status == FileStatus.ADDED:
            return "new"
        if file.status == FileStatus.DELETED:
            return "deleted"
        if file.is_rename_only:
            return "renamed"
        return "normal"

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _packet_for_request(
        self,
        request: AnnotationRequest,
        state: _CallState,
    ) -> ReviewPacket | None:
        file = self.files_by_id.get(request.file_id)
        if file is None:
            logger.debug(
                "[Reconcile] Request %r names unknown file %r, skipping",
                request.id, request.file_id,
            )
            state.stats.skipped_requests += 1
            return None

        hunks: list[Hunk] = []
        if self.is_whole_file(file):
            additions, deletions = file.additions, file.deletions
        else:
            hunks = self.slicer.slice(
                self._file_hunks(file, state),
                request.start_line, request.end_line, request.side,
            )
            additions, deletions = _count_changes(hunks)
            covered = state.covered.setdefault(file.id, set())
            for hunk in hunks:
                covered.update(
                    changed_key(line) for line in hunk.lines if is_changed(line)
                )

        state.parts[file.id] += 1
        return ReviewPacket(
            id=request.id,
            file_id=file.id,
            file_path=file.path,
            part_index=state.parts[file.id],
            part_total=state.totals[file.id],
            kind=self.packet_kind(file),
            additions=additions,
            deletions=deletions,
            display_content=file.raw_diff_text,
            hunks=hunks,
            metadata=dict(request.metadata),
        )

    @staticmethod
    def _file_hunks(file: FileDiff, state: _CallState) -> list[Hunk]:
        hunks = state.hunks.get(file.id)
        if hunks is None:
            hunks = parse_diff(file.raw_diff_text)
            state.hunks[file.id] = hunks
        return hunks

    # ------------------------------------------------------------------
    # Safety net
    # ------------------------------------------------------------------

    def _safety_net(self, state: _CallState) -> None:
        next_id = _next_packet_id(state.packets)

        for file in self.files:
            if self.is_whole_file(file):
                continue

            hunks = self._file_hunks(file, state)
            covered = state.covered.get(file.id, set())
            uncovered_adds: list[int] = []
            uncovered_dels: list[int] = []
            for hunk in hunks:
                for line in hunk.lines:
                    if not is_changed(line) or changed_key(line) in covered:
                        continue
                    if isinstance(line, AddLine):
                        uncovered_adds.append(line.new_number)
                    else:
                        uncovered_dels.append(line.old_number)
            if not uncovered_adds and not uncovered_dels:
                continue
            uncovered_adds.sort()
            uncovered_dels.sort()

            state.stats.uncovered_lines += len(uncovered_adds) + len(uncovered_dels)
            sliced = self._slice_uncovered(hunks, covered, uncovered_adds, uncovered_dels)
            additions, deletions = len(uncovered_adds), len(uncovered_dels)

            total = state.totals[file.id] + 1
            state.totals[file.id] = total
            for packet in state.packets:
                if packet.file_id == file.id:
                    packet.part_total = total

            logger.info(
                "[Reconcile] %s: %d uncovered line(s), adding part %d",
                file.path, len(uncovered_adds) + len(uncovered_dels), total,
            )
            state.packets.append(ReviewPacket(
                id=next_id,
                file_id=file.id,
                file_path=file.path,
                part_index=total,
                part_total=total,
                kind=self.packet_kind(file),
                additions=additions,
                deletions=deletions,
                display_content=file.raw_diff_text,
                hunks=sliced,
                metadata={
                    "title": f"Remaining changes in {file.path}",
                    "file_status": file.status.value,
                    "language": None,
                    "ai_summary": REMAINING_SUMMARY,
                    "existing_comments": [],
                },
                remaining=True,
            ))
            next_id += 1
            state.stats.safety_net_packets += 1

    def _slice_uncovered(
        self,
        hunks: list[Hunk],
        covered: set[CoverageKey],
        uncovered_adds: list[int],
        uncovered_dels: list[int],
    ) -> list[Hunk]:
        """Slice the bounding range of the uncovered lines.

        Additions win: the range is on the new-file side whenever any
        addition is uncovered.  Lines already shown by a request are left
        out so they do not appear twice.
        """
        if uncovered_adds:
            ranges = [(uncovered_adds[0], uncovered_adds[-1], Side.RIGHT)]
        else:
            ranges = [(uncovered_dels[0], uncovered_dels[-1], Side.LEFT)]
        sliced = self.slicer.slice_ranges(hunks, ranges, exclude=covered)

        if uncovered_adds and uncovered_dels and self.safety_net_both_sides:
            shown = {
                changed_key(line)
                for hunk in sliced for line in hunk.lines if is_changed(line)
            }
            residual = [n for n in uncovered_dels if (Side.LEFT, n) not in shown]
            if residual:
                ranges.append((residual[0], residual[-1], Side.LEFT))
                sliced = self.slicer.slice_ranges(hunks, ranges, exclude=covered)
        return sliced

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    def _relabel(self, packets: list[ReviewPacket]) -> None:
        """Rebuild display labels once part totals are final."""
        for packet in packets:
            file = self.files_by_id[packet.file_id]
            if self.is_whole_file(file):
                continue
            if packet.remaining or packet.part_total > 1:
                packet.display_content = packet_label(packet)


def _count_changes(hunks: Iterable[Hunk]) -> tuple[int, int]:
    additions = deletions = 0
    for hunk in hunks:
        additions += hunk.additions
        deletions += hunk.deletions
    return additions, deletions


def _next_packet_id(packets: Sequence[ReviewPacket]) -> int:
    numeric = [
        p.id for p in packets
        if isinstance(p.id, int) and not isinstance(p.id, bool)
    ]
    return max(numeric) + 1 if numeric else 1


# ----------------------------------------------------------------------
# Auditing
# ----------------------------------------------------------------------


@dataclass
class CoverageGap:
    """Changed lines a file's packets missed or showed more than once."""
    missing: set[CoverageKey] = field(default_factory=set)
    duplicated: set[CoverageKey] = field(default_factory=set)


def audit_coverage(
    files: Sequence[FileDiff],
    packets: Sequence[ReviewPacket],
    special_kinds: Iterable[str] | None = None,
) -> dict[PacketId, CoverageGap]:
    """Compare each file's changed lines with what its packets show.

    Returns only the files with a gap; an empty dict means every changed
    line appears in exactly one packet.
    """
    judge = CoverageReconciler(files, special_kinds=special_kinds)
    shown: dict[PacketId, Counter] = {}
    for packet in packets:
        counter = shown.setdefault(packet.file_id, Counter())
        for hunk in packet.hunks:
            counter.update(
                changed_key(line) for line in hunk.lines if is_changed(line)
            )

    gaps: dict[PacketId, CoverageGap] = {}
    for file in files:
        if judge.is_whole_file(file):
            continue
        expected = {
            changed_key(line)
            for hunk in parse_diff(file.raw_diff_text)
            for line in hunk.lines if is_changed(line)
        }
        seen = shown.get(file.id, Counter())
        gap = CoverageGap(
            missing=expected - set(seen),
            duplicated={key for key, count in seen.items() if count > 1},
        )
        if gap.missing or gap.duplicated:
            gaps[file.id] = gap
    return gaps
