"""Tests for the RangeSlicer."""

import pytest

from review_packets.hunks.diff_parser import parse_diff
from review_packets.hunks.models import ContextLine, Side, changed_key, is_changed
from review_packets.hunks.range_slicer import RangeSlicer


def _parse(header: str, body: str):
    return parse_diff(f"```diff\n{header}\n{body}\n```")


def _texts(hunks):
    return [[line.text for line in h.lines] for h in hunks]


SCENARIO_A = _parse("@@ -10,2 +10,3 @@", " line\n-old\n+new\n+added")

LONG_CONTEXT = _parse(
    "@@ -1,12 +1,12 @@",
    " c1\n c2\n c3\n c4\n c5\n-old\n+new\n c6\n c7\n c8\n c9\n c10",
)

TWO_CHANGES = _parse(
    "@@ -1,13 +1,13 @@",
    " a\n+first\n b\n c\n d\n e\n f\n g\n h\n i\n+second\n j",
)


class TestDirectMembership:
    def test_scenario_singleton_add(self):
        hunks = RangeSlicer().slice(SCENARIO_A, 12, 12, Side.RIGHT)

        assert len(hunks) == 1
        assert _texts(hunks) == [["added"]]
        assert hunks[0].header == "@@ -11,0 +12,1 @@"

    def test_left_side_uses_old_numbers(self):
        hunks = RangeSlicer().slice(SCENARIO_A, 11, 11, Side.LEFT)

        # "-old" is at old line 11; its add run has two lines, so no pairing
        assert _texts(hunks) == [["line", "old"]]
        assert hunks[0].header == "@@ -10,2 +10,1 @@"

    def test_right_is_default_side(self):
        assert RangeSlicer().slice(SCENARIO_A, 12, 12) == \
            RangeSlicer().slice(SCENARIO_A, 12, 12, Side.RIGHT)

    def test_side_accepts_strings(self):
        assert RangeSlicer().slice(SCENARIO_A, 11, 11, "LEFT") == \
            RangeSlicer().slice(SCENARIO_A, 11, 11, Side.LEFT)

    def test_context_alone_never_selects(self):
        # Line 10 is context on both sides
        assert RangeSlicer().slice(SCENARIO_A, 10, 10) == []

    def test_out_of_range_is_empty(self):
        assert RangeSlicer().slice(SCENARIO_A, 100, 200) == []


class TestPairing:
    def test_equal_block_promoted_from_add_side(self):
        hunks = _parse("@@ -5,3 +5,3 @@", "-a\n-b\n+A\n+B\n ctx")
        result = RangeSlicer().slice(hunks, 6, 6, Side.RIGHT)

        assert _texts(result) == [["a", "b", "A", "B", "ctx"]]

    def test_equal_block_promoted_from_del_side(self):
        hunks = _parse("@@ -5,2 +5,2 @@", "-a\n-b\n+A\n+B")
        result = RangeSlicer().slice(hunks, 5, 5, Side.LEFT)

        assert _texts(result) == [["a", "b", "A", "B"]]

    def test_unequal_block_not_promoted(self):
        hunks = _parse("@@ -5,1 +5,2 @@", "-a\n+A\n+B")
        result = RangeSlicer().slice(hunks, 6, 6, Side.RIGHT)

        assert _texts(result) == [["B"]]

    def test_pairing_ignores_whitespace_flag(self):
        hunks = _parse("@@ -1,1 +1,1 @@", "-x=1\n+x = 1")
        result = RangeSlicer().slice(hunks, 1, 1, Side.LEFT)

        assert _texts(result) == [["x=1", "x = 1"]]


class TestPadding:
    def test_at_most_three_lines_each_way(self):
        result = RangeSlicer().slice(LONG_CONTEXT, 6, 6)

        assert _texts(result) == [["c3", "c4", "c5", "old", "new", "c6", "c7", "c8"]]
        assert result[0].header == "@@ -3,7 +3,7 @@"

    def test_configurable_padding(self):
        result = RangeSlicer(context_lines=1).slice(LONG_CONTEXT, 6, 6)
        assert _texts(result) == [["c5", "old", "new", "c6"]]

    def test_zero_padding(self):
        result = RangeSlicer(context_lines=0).slice(LONG_CONTEXT, 6, 6)
        assert _texts(result) == [["old", "new"]]

    def test_padding_stops_at_changed_line(self):
        hunks = _parse("@@ -1,3 +1,4 @@", " a\n-b\n+c\n+d\n e")
        # "+d" alone: neighbor before is "+c", a change, so no padding before
        result = RangeSlicer().slice(hunks, 3, 3)

        assert _texts(result) == [["d", "e"]]

    def test_negative_padding_rejected(self):
        with pytest.raises(ValueError):
            RangeSlicer(context_lines=-1)

    def test_no_more_than_three_context_lines_beyond_change(self):
        result = RangeSlicer().slice(TWO_CHANGES, 2, 2)
        for hunk in result:
            run = 0
            for line in hunk.lines:
                run = run + 1 if isinstance(line, ContextLine) else 0
                assert run <= 3


class TestFragmentation:
    def test_gap_splits_into_sub_hunks(self):
        result = RangeSlicer().slice(TWO_CHANGES, 1, 20)

        assert _texts(result) == [
            ["a", "first", "b", "c", "d"],
            ["g", "h", "i", "second", "j"],
        ]
        assert [h.header for h in result] == ["@@ -1,4 +1,5 @@", "@@ -7,4 +8,5 @@"]

    def test_touching_padding_stays_one_hunk(self):
        hunks = _parse("@@ -1,4 +1,6 @@", "+x\n a\n b\n c\n d\n+y")
        result = RangeSlicer(context_lines=2).slice(hunks, 1, 6)

        assert len(result) == 1
        assert _texts(result) == [["x", "a", "b", "c", "d", "y"]]

    def test_order_preserved_across_hunks(self):
        hunks = parse_diff(
            "```diff\n@@ -1,1 +1,2 @@\n x\n+one\n@@ -50,1 +51,2 @@\n y\n+two\n```"
        )
        result = RangeSlicer().slice(hunks, 1, 100)

        assert _texts(result) == [["x", "one"], ["y", "two"]]
        assert [h.header for h in result] == ["@@ -1,1 +1,2 @@", "@@ -50,1 +51,2 @@"]

    def test_header_matches_first_numbered_line(self):
        result = RangeSlicer().slice(TWO_CHANGES, 11, 11)
        first = result[0].lines[0]

        assert result[0].header.startswith(f"@@ -{first.old_number},")
        assert f"+{first.new_number}," in result[0].header

    def test_input_hunks_unchanged(self):
        before = list(TWO_CHANGES)
        RangeSlicer().slice(TWO_CHANGES, 2, 2)
        assert TWO_CHANGES == before

    def test_sliced_hunk_can_be_sliced_again(self):
        once = RangeSlicer().slice(SCENARIO_A, 11, 12)
        twice = RangeSlicer().slice(once, 12, 12)

        assert _texts(twice) == [["added"]]
        assert twice[0].header == "@@ -11,0 +12,1 @@"


class TestSliceRanges:
    def test_union_of_ranges(self):
        result = RangeSlicer(context_lines=0).slice_ranges(
            TWO_CHANGES, [(2, 2, Side.RIGHT), (11, 11, Side.RIGHT)],
        )
        assert _texts(result) == [["first"], ["second"]]

    def test_mixed_sides(self):
        hunks = _parse("@@ -1,3 +1,3 @@", "-gone\n ctx\n+new")
        result = RangeSlicer(context_lines=0).slice_ranges(
            hunks, [(2, 2, Side.RIGHT), (1, 1, Side.LEFT)],
        )
        assert _texts(result) == [["gone"], ["new"]]

    def test_exclude_drops_direct_selection(self):
        result = RangeSlicer(context_lines=0).slice_ranges(
            TWO_CHANGES, [(1, 20, Side.RIGHT)], exclude={(Side.RIGHT, 2)},
        )
        changed = [changed_key(l) for h in result for l in h.lines if is_changed(l)]
        assert changed == [(Side.RIGHT, 11)]
