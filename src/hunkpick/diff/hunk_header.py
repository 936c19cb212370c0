"""Hunk header mini-grammar: ``@@ -oldStart[,oldLen] +newStart[,newLen] @@``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from hunkpick.diff.models import DiffLine, LineOrigin

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)


class HunkHeaderError(ValueError):
    """Raised when a hunk header does not follow the unified-diff grammar."""


@dataclass(frozen=True)
class HunkHeader:
    old_start: int
    old_len: int
    new_start: int
    new_len: int

    def counts_match(self, lines: Iterable[DiffLine]) -> bool:
        """Return True if the header lengths agree with *lines*."""
        old = new = 0
        for line in lines:
            if line.origin is not LineOrigin.ADDITION:
                old += 1
            if line.origin is not LineOrigin.DELETION:
                new += 1
        return old == self.old_len and new == self.new_len

    def __str__(self) -> str:
        return format_hunk_header(
            self.old_start, self.old_len, self.new_start, self.new_len
        )


def parse_hunk_header(text: str) -> HunkHeader:
    """Parse *text* into a HunkHeader. Omitted lengths default to 1.

    Trailing section text after the closing ``@@`` is ignored.
    """
    m = _HUNK_HEADER_RE.match(text)
    if m is None:
        raise HunkHeaderError(f"Malformed hunk header: {text!r}")
    return HunkHeader(
        old_start=int(m.group(1)),
        old_len=int(m.group(2)) if m.group(2) is not None else 1,
        new_start=int(m.group(3)),
        new_len=int(m.group(4)) if m.group(4) is not None else 1,
    )


def format_hunk_header(old_start: int, old_len: int, new_start: int, new_len: int) -> str:
    """Build a hunk header, dropping the ``,len`` token when len is 1."""
    old = f"-{old_start}" if old_len == 1 else f"-{old_start},{old_len}"
    new = f"+{new_start}" if new_len == 1 else f"+{new_start},{new_len}"
    return f"@@ {old} {new} @@"
