"""Diff layer — models, hunk header grammar, unified diff parsing."""

from hunkpick.diff.diff_parser import DiffParseError, DiffParser, parse_file_diff
from hunkpick.diff.hunk_header import (
    HunkHeader,
    HunkHeaderError,
    format_hunk_header,
    parse_hunk_header,
)
from hunkpick.diff.models import (
    AlignedRow,
    DiffHunk,
    DiffLine,
    FileDiff,
    FileStatus,
    LineKey,
    LineOrigin,
)

__all__ = [
    "AlignedRow",
    "DiffHunk",
    "DiffLine",
    "DiffParseError",
    "DiffParser",
    "FileDiff",
    "FileStatus",
    "HunkHeader",
    "HunkHeaderError",
    "LineKey",
    "LineOrigin",
    "format_hunk_header",
    "parse_file_diff",
    "parse_hunk_header",
]
