"""Unified diff parser: turns ``git diff`` output into FileDiff objects.

Handles ``diff --git`` headers and their sub-headers (new/deleted file,
renames, modes, index, similarity), binary markers, ``---``/``+++`` file
headers, hunk headers with or without lengths, and the
``\\ No newline at end of file`` marker, which sets ``no_newline`` on the
line it follows. Line numbers are tracked on both sides so every DiffLine
carries its old/new position.

Lines are split on ``\\n`` only; a trailing ``\\r`` stays part of the
content so patches built from CRLF files still apply.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Generator, List, Optional

from hunkpick.diff.hunk_header import HunkHeaderError, parse_hunk_header
from hunkpick.diff.models import DiffHunk, DiffLine, FileDiff, FileStatus, LineOrigin

logger = logging.getLogger(__name__)

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")
_FILE_HEADER_OLD = re.compile(r"^--- (?:a/(.*?)|(/dev/null))\t?$")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (?:b/(.*?)|(/dev/null))\t?$")
_SIMILARITY_RE = re.compile(r"^(?:dis)?similarity index \d+%$")
_OLD_MODE_RE = re.compile(r"^old mode \d+$")
_NEW_MODE_RE = re.compile(r"^new mode \d+$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_NEW_FILE_RE = re.compile(r"^new file mode \d+$")
_INDEX_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+")


class DiffParseError(Exception):
    """Raised when diff text holds no usable file diff."""


def _unquote(path: str) -> str:
    """Strip the double quotes git puts around paths with special chars."""
    if len(path) >= 2 and path[0] == '"' and path[-1] == '"':
        return path[1:-1]
    return path


@dataclass
class _FileState:
    """Accumulator for the file currently being parsed."""

    path: str
    old_path: Optional[str] = None
    status: FileStatus = FileStatus.MODIFIED
    binary: bool = False
    hunks: List[DiffHunk] = field(default_factory=list)

    def build(self) -> FileDiff:
        return FileDiff(
            path=self.path,
            hunks=tuple(self.hunks),
            old_path=self.old_path if self.status is FileStatus.RENAMED else None,
            status=self.status,
            binary=self.binary,
        )


class DiffParser:
    """Parse unified diff text and yield one FileDiff per file.

    Usage::

        for file_diff in DiffParser(diff_text).parse():
            ...

    *default_path* lets a hunk-only diff (no ``diff --git`` header) be
    attributed to a file.
    """

    def __init__(self, diff_text: str, default_path: Optional[str] = None) -> None:
        lines = diff_text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = lines
        self._default_path = default_path

    def parse(self) -> Generator[FileDiff, None, None]:
        """Yield FileDiff items in the order files appear."""
        idx = 0
        total = len(self._lines)
        current: Optional[_FileState] = None

        while idx < total:
            raw_line = self._lines[idx]

            # --- diff --git header → new file context ---
            m = _DIFF_HEADER_RE.match(raw_line)
            if m:
                if current is not None:
                    yield current.build()
                current = _FileState(path=_unquote(m.group(2)))
                old_path = _unquote(m.group(1))
                idx += 1

                # Parse sub-headers (index, mode changes, renames, new/deleted file)
                while idx < total:
                    sub = self._lines[idx]
                    if _INDEX_RE.match(sub) or _SIMILARITY_RE.match(sub):
                        idx += 1
                        continue
                    if _OLD_MODE_RE.match(sub) or _NEW_MODE_RE.match(sub):
                        idx += 1
                        continue
                    if _DELETED_FILE_RE.match(sub):
                        current.status = FileStatus.DELETED
                        idx += 1
                        continue
                    if _NEW_FILE_RE.match(sub):
                        current.status = FileStatus.ADDED
                        idx += 1
                        continue
                    if (rm := _RENAME_FROM_RE.match(sub)):
                        old_path = _unquote(rm.group(1))
                        current.status = FileStatus.RENAMED
                        idx += 1
                        continue
                    if (rt := _RENAME_TO_RE.match(sub)):
                        current.path = _unquote(rt.group(1))
                        idx += 1
                        continue
                    if _BINARY_RE.match(sub):
                        current.binary = True
                        idx += 1
                        continue
                    break  # not a sub-header → stop

                current.old_path = old_path
                continue

            # --- File headers (--- a/ and +++ b/) ---
            fo = _FILE_HEADER_OLD.match(raw_line)
            if fo:
                if current is None:
                    current = self._start_headerless_file()
                if fo.group(2) and current.status is FileStatus.MODIFIED:
                    current.status = FileStatus.ADDED
                idx += 1
                continue
            fn = _FILE_HEADER_NEW.match(raw_line)
            if fn:
                if current is None:
                    current = self._start_headerless_file()
                if fn.group(2):
                    current.status = FileStatus.DELETED
                elif current.status is not FileStatus.RENAMED:
                    current.path = _unquote(fn.group(1))
                idx += 1
                continue

            # --- Hunk header ---
            if raw_line.startswith("@@"):
                if current is None:
                    current = self._start_headerless_file()
                hunk, idx = self._parse_hunk(idx)
                current.hunks.append(hunk)
                continue

            # Anything else between files (e.g. "warning:" lines) is ignored
            idx += 1

        if current is not None:
            yield current.build()

    def _start_headerless_file(self) -> _FileState:
        if self._default_path is None:
            raise DiffParseError("Hunk found before any file header and no path given")
        return _FileState(path=self._default_path)

    def _parse_hunk(self, idx: int) -> tuple[DiffHunk, int]:
        """Parse the hunk starting at *idx*. Returns the hunk and next index."""
        header = self._lines[idx]
        idx += 1
        try:
            parsed = parse_hunk_header(header)
        except HunkHeaderError:
            # Keep the raw hunk; consumers decide what a bad header means.
            logger.debug("Unparseable hunk header %r", header)
            lines: List[DiffLine] = []
            while idx < len(self._lines) and self._lines[idx][:1] in (" ", "+", "-", "\\"):
                raw = self._lines[idx]
                if raw[:1] != "\\":
                    lines.append(_bare_line(raw))
                elif _NO_NEWLINE_RE.match(raw):
                    _mark_no_newline(lines)
                idx += 1
            return DiffHunk(header=header, lines=tuple(lines)), idx

        old_no, new_no = parsed.old_start, parsed.new_start
        old_rem, new_rem = parsed.old_len, parsed.new_len
        lines = []

        while idx < len(self._lines) and (old_rem > 0 or new_rem > 0):
            raw = self._lines[idx]
            if _NO_NEWLINE_RE.match(raw):
                _mark_no_newline(lines)
                idx += 1
                continue
            marker, content = raw[:1], raw[1:]
            if marker == " " or raw == "":
                lines.append(DiffLine(content, LineOrigin.CONTEXT, old_no, new_no))
                old_no += 1
                new_no += 1
                old_rem -= 1
                new_rem -= 1
            elif marker == "-":
                lines.append(DiffLine(content, LineOrigin.DELETION, old_no, None))
                old_no += 1
                old_rem -= 1
            elif marker == "+":
                lines.append(DiffLine(content, LineOrigin.ADDITION, None, new_no))
                new_no += 1
                new_rem -= 1
            else:
                break  # truncated hunk
            idx += 1

        # Trailing marker for the hunk's last line
        if idx < len(self._lines) and _NO_NEWLINE_RE.match(self._lines[idx]):
            _mark_no_newline(lines)
            idx += 1

        return DiffHunk(header=header, lines=tuple(lines)), idx


def _mark_no_newline(lines: List[DiffLine]) -> None:
    """Flag the line just before a ``\\ No newline at end of file`` marker."""
    if lines:
        lines[-1] = replace(lines[-1], no_newline=True)


def _bare_line(raw: str) -> DiffLine:
    """Build a line without numbers, for hunks whose header cannot be read."""
    origin = {
        " ": LineOrigin.CONTEXT,
        "+": LineOrigin.ADDITION,
        "-": LineOrigin.DELETION,
    }[raw[0]]
    return DiffLine(raw[1:], origin)


def parse_file_diff(diff_text: str, path: Optional[str] = None) -> FileDiff:
    """Return the FileDiff for *path* (or the first file) in *diff_text*."""
    files = list(DiffParser(diff_text, default_path=path).parse())
    if path is not None:
        for file_diff in files:
            if file_diff.path == path or file_diff.old_path == path:
                return file_diff
        raise DiffParseError(f"No diff found for {path}")
    if not files:
        raise DiffParseError("Diff text contains no files")
    return files[0]
