"""Tests for the hunk header mini-grammar."""

import pytest

from hunkpick.diff.hunk_header import (
    HunkHeader,
    HunkHeaderError,
    format_hunk_header,
    parse_hunk_header,
)
from hunkpick.diff.models import DiffLine, LineOrigin


class TestParse:
    def test_full_header(self):
        assert parse_hunk_header("@@ -10,3 +10,4 @@") == HunkHeader(10, 3, 10, 4)

    def test_omitted_lengths_default_to_one(self):
        assert parse_hunk_header("@@ -5 +7 @@") == HunkHeader(5, 1, 7, 1)

    def test_section_heading_ignored(self):
        header = parse_hunk_header("@@ -20,2 +20,4 @@ def g():")
        assert header.old_start == 20
        assert header.new_len == 4

    @pytest.mark.parametrize("text", ["", "@@ garbage @@", "-1,2 +1,2", "@@ -a,1 +1 @@"])
    def test_malformed(self, text):
        with pytest.raises(HunkHeaderError):
            parse_hunk_header(text)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_hunk_header("nope")


class TestFormat:
    def test_lengths_written(self):
        assert format_hunk_header(10, 3, 10, 4) == "@@ -10,3 +10,4 @@"

    def test_length_one_omitted(self):
        assert format_hunk_header(4, 1, 4, 2) == "@@ -4 +4,2 @@"
        assert format_hunk_header(4, 2, 4, 1) == "@@ -4,2 +4 @@"

    def test_zero_length_kept(self):
        assert format_hunk_header(0, 0, 1, 3) == "@@ -0,0 +1,3 @@"

    def test_str_matches_format(self):
        assert str(HunkHeader(1, 1, 1, 1)) == "@@ -1 +1 @@"


class TestCountsMatch:
    def test_matching_counts(self, scenario_diff):
        hunk = scenario_diff.hunks[0]
        assert parse_hunk_header(hunk.header).counts_match(hunk.lines)

    def test_mismatch(self):
        lines = [DiffLine("a", LineOrigin.ADDITION, None, 1)]
        assert not HunkHeader(1, 1, 1, 1).counts_match(lines)
        assert HunkHeader(1, 0, 1, 1).counts_match(lines)
