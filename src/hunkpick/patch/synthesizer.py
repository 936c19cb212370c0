"""Patch synthesizer — builds a staging patch holding only the selected lines.

The patch targets the index: selected additions and deletions are kept,
unselected additions are dropped, and unselected deletions are turned back
into context so the index keeps those lines. Hunk lengths are recomputed
from the emitted lines; start lines come from the original headers.
Files that end without a newline get ``\\ No newline at end of file``
markers on whichever side of the patch ends there.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, FrozenSet, List, Literal, Optional, Tuple

from hunkpick.diff.hunk_header import HunkHeaderError, format_hunk_header, parse_hunk_header
from hunkpick.diff.models import DiffHunk, DiffLine, FileDiff, LineKey, LineOrigin

logger = logging.getLogger(__name__)

BadHeaderPolicy = Literal["error", "skip"]

_NEW_FILE_PREFIX = "@@ -0,0"
_NO_NEWLINE_MARKER = "\\ No newline at end of file"


class PatchError(Exception):
    """Raised when a patch cannot be built from the given diff."""


def is_new_file(diff: FileDiff) -> bool:
    """A diff is a new file iff its first hunk starts at ``@@ -0,0``."""
    return bool(diff.hunks) and diff.hunks[0].header.startswith(_NEW_FILE_PREFIX)


def _preamble(diff: FileDiff) -> List[str]:
    if is_new_file(diff):
        return ["--- /dev/null", f"+++ b/{diff.path}"]
    return [f"--- a/{diff.path}", f"+++ b/{diff.path}"]


def _last_index(kept: List[Tuple[str, DiffLine]], markers: str) -> Optional[int]:
    for i in range(len(kept) - 1, -1, -1):
        if kept[i][0] in markers:
            return i
    return None


def _render_kept(kept: List[Tuple[str, DiffLine]]) -> List[str]:
    """Render kept lines, adding no-newline markers where each side ends.

    The old side of the patch is the old side of the diff, so it ends without
    a newline exactly when the diff's did. The new side is the index after
    staging: it ends without a newline when its last line is one the worktree
    or the index already ends with.
    """
    old_end = _last_index(kept, " -")
    new_end = _last_index(kept, " +")
    old_open = old_end is not None and kept[old_end][1].no_newline
    new_open = new_end is not None and kept[new_end][1].no_newline

    out: List[str] = []
    for i, (marker, line) in enumerate(kept):
        if marker == " " and i == old_end and old_open and i != new_end:
            # Old last line stays, but selected additions follow it
            out.extend(["-" + line.content, _NO_NEWLINE_MARKER, "+" + line.content])
            continue
        out.append(marker + line.content)
        if (i == old_end and old_open) or (i == new_end and new_open):
            out.append(_NO_NEWLINE_MARKER)
    return out


def _synthesize_hunk(
    hunk: DiffHunk, hunk_index: int, selection: AbstractSet[LineKey]
) -> Optional[List[str]]:
    """Return the hunk's header and lines, or None if nothing is selected."""
    header = parse_hunk_header(hunk.header)
    kept: List[Tuple[str, DiffLine]] = []
    has_selection = False

    for line_index, line in enumerate(hunk.lines):
        if line.origin is LineOrigin.CONTEXT:
            kept.append((" ", line))
            continue

        selected = LineKey(hunk_index, line_index) in selection

        if line.origin is LineOrigin.ADDITION:
            if selected:
                kept.append(("+", line))
                has_selection = True
            # Unselected additions never reach the index
        elif selected:
            kept.append(("-", line))
            has_selection = True
        else:
            # Unstaged deletion stays in the index as context
            kept.append((" ", line))

    if not has_selection:
        return None
    emitted = _render_kept(kept)
    old_len = sum(1 for text in emitted if text[:1] in (" ", "-"))
    new_len = sum(1 for text in emitted if text[:1] in (" ", "+"))
    return [
        format_hunk_header(header.old_start, old_len, header.new_start, new_len),
        *emitted,
    ]


def synthesize(
    diff: FileDiff,
    selection: AbstractSet[LineKey],
    *,
    on_bad_header: BadHeaderPolicy = "error",
) -> str:
    """Build a unified-diff patch of *diff* restricted to *selection*.

    Returns a header-only patch when no selected line belongs to *diff*;
    callers should treat that as nothing to apply (see :func:`is_empty_patch`).

    *on_bad_header* decides what happens to a hunk whose header cannot be
    parsed: ``"error"`` raises PatchError, ``"skip"`` drops the hunk.
    """
    out = _preamble(diff)
    kept = 0

    for hunk_index, hunk in enumerate(diff.hunks):
        try:
            block = _synthesize_hunk(hunk, hunk_index, selection)
        except HunkHeaderError as exc:
            if on_bad_header == "skip":
                logger.warning("Skipping hunk %d of %s: %s", hunk_index, diff.path, exc)
                continue
            raise PatchError(f"Hunk {hunk_index} of {diff.path}: {exc}") from exc

        if block is None:
            logger.debug("Hunk %d of %s has no selected lines", hunk_index, diff.path)
            continue
        out.extend(block)
        kept += 1

    logger.debug("Synthesized patch for %s with %d hunk(s)", diff.path, kept)
    return "\n".join(out) + "\n"


def count_hunks(patch_text: str) -> int:
    """Number of ``@@`` hunk headers in *patch_text*."""
    return sum(1 for line in patch_text.split("\n") if line.startswith("@@ "))


def is_empty_patch(patch_text: str) -> bool:
    """True for a header-only patch, which must not be handed to git apply."""
    return count_hunks(patch_text) == 0


def all_change_keys(diff: FileDiff) -> FrozenSet[LineKey]:
    """Every selectable (addition or deletion) line of *diff*."""
    return frozenset(
        LineKey(h, l)
        for h, hunk in enumerate(diff.hunks)
        for l, line in enumerate(hunk.lines)
        if line.is_change
    )
