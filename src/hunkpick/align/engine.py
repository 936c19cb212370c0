"""Split-view alignment — pairs deletions with the additions that follow them.

Adjacent deletion and addition runs are treated as a line-level replacement
and paired by position, not by content. Row order always follows the hunk's
line order.
"""

from __future__ import annotations

from typing import List

from hunkpick.diff.models import AlignedRow, DiffHunk, FileDiff, LineOrigin


def align(hunk: DiffHunk) -> List[AlignedRow]:
    """Return the two-column rows for *hunk*."""
    lines = hunk.lines
    total = len(lines)
    rows: List[AlignedRow] = []
    i = 0

    while i < total:
        line = lines[i]

        if line.origin is LineOrigin.CONTEXT:
            rows.append(AlignedRow(left=line, right=line, left_index=i, right_index=i))
            i += 1
            continue

        if line.origin is LineOrigin.ADDITION:
            # Pure insertion, no deletion run before it
            rows.append(AlignedRow(right=line, right_index=i))
            i += 1
            continue

        # Deletion run, then the addition run directly after it
        j = i
        while j < total and lines[j].origin is LineOrigin.DELETION:
            j += 1
        deletions = list(range(i, j))
        while j < total and lines[j].origin is LineOrigin.ADDITION:
            j += 1
        additions = list(range(i + len(deletions), j))

        for k in range(max(len(deletions), len(additions))):
            left_index = deletions[k] if k < len(deletions) else None
            right_index = additions[k] if k < len(additions) else None
            rows.append(
                AlignedRow(
                    left=lines[left_index] if left_index is not None else None,
                    right=lines[right_index] if right_index is not None else None,
                    left_index=left_index,
                    right_index=right_index,
                )
            )
        i = j

    return rows


def align_file(diff: FileDiff) -> List[List[AlignedRow]]:
    """Align every hunk of *diff*."""
    return [align(hunk) for hunk in diff.hunks]
