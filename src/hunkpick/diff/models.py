"""Data models for parsed diffs, selection coordinates, and split-view rows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class LineOrigin(str, Enum):
    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"

    @property
    def marker(self) -> str:
        """The leading character used for this origin in a unified diff."""
        return _MARKERS[self]


_MARKERS = {
    LineOrigin.CONTEXT: " ",
    LineOrigin.ADDITION: "+",
    LineOrigin.DELETION: "-",
}


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single physical line inside a hunk, without its diff marker."""

    content: str
    origin: LineOrigin
    old_line_no: Optional[int] = None  # None for additions
    new_line_no: Optional[int] = None  # None for deletions
    no_newline: bool = False  # last line of its side, no trailing newline

    @property
    def is_change(self) -> bool:
        return self.origin is not LineOrigin.CONTEXT

    def render(self) -> str:
        return f"{self.origin.marker}{self.content}"


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous change region with its original ``@@`` header."""

    header: str
    lines: Tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class FileDiff:
    """One file's full diff."""

    path: str
    hunks: Tuple[DiffHunk, ...] = ()
    old_path: Optional[str] = None  # set on renames
    status: FileStatus = FileStatus.MODIFIED
    binary: bool = False


class LineKey(NamedTuple):
    """Selection coordinate of one line: zero-based hunk and line index."""

    hunk_index: int
    line_index: int

    def __str__(self) -> str:
        return f"{self.hunk_index}:{self.line_index}"


@dataclass(frozen=True, slots=True)
class AlignedRow:
    """One row of the two-column view.

    ``left`` holds a context or deletion line, ``right`` a context or addition
    line. The ``*_index`` fields give each line's position in its hunk.
    """

    left: Optional[DiffLine] = None
    right: Optional[DiffLine] = None
    left_index: Optional[int] = None
    right_index: Optional[int] = None

    @property
    def is_context(self) -> bool:
        return (
            self.left is not None
            and self.left is self.right
            and self.left.origin is LineOrigin.CONTEXT
        )
