"""JSON reporter for editor integrations and scripting."""

from __future__ import annotations

import json
from typing import AbstractSet, Any, Dict, List, Optional

from hunkpick.align.engine import align
from hunkpick.diff.models import AlignedRow, DiffLine, FileDiff, LineKey


def _line_dict(line: DiffLine, key: LineKey, selection: AbstractSet[LineKey]) -> Dict[str, Any]:
    return {
        "index": key.line_index,
        "origin": line.origin.value,
        "content": line.content,
        "old_line": line.old_line_no,
        "new_line": line.new_line_no,
        "selectable": line.is_change,
        "selected": line.is_change and key in selection,
    }


def _row_dict(row: AlignedRow) -> Dict[str, Optional[int]]:
    return {"left": row.left_index, "right": row.right_index}


def to_dict(
    diff: FileDiff,
    selection: AbstractSet[LineKey],
    *,
    split: bool = False,
    patch: Optional[str] = None,
) -> Dict[str, Any]:
    """Convert a FileDiff and selection to a JSON-serialisable dict."""
    hunks: List[Dict[str, Any]] = []
    for hunk_index, hunk in enumerate(diff.hunks):
        entry: Dict[str, Any] = {
            "index": hunk_index,
            "header": hunk.header,
            "lines": [
                _line_dict(line, LineKey(hunk_index, i), selection)
                for i, line in enumerate(hunk.lines)
            ],
        }
        if split:
            entry["rows"] = [_row_dict(row) for row in align(hunk)]
        hunks.append(entry)

    return {
        "version": "1.0",
        "path": diff.path,
        **({"old_path": diff.old_path} if diff.old_path else {}),
        "status": diff.status.value,
        "binary": diff.binary,
        "selected": len([k for k in selection if _in_diff(diff, k)]),
        "hunks": hunks,
        **({"patch": patch} if patch is not None else {}),
    }


def _in_diff(diff: FileDiff, key: LineKey) -> bool:
    if not 0 <= key.hunk_index < len(diff.hunks):
        return False
    lines = diff.hunks[key.hunk_index].lines
    return 0 <= key.line_index < len(lines) and lines[key.line_index].is_change


def render(
    diff: FileDiff,
    selection: AbstractSet[LineKey],
    *,
    split: bool = False,
    patch: Optional[str] = None,
) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(diff, selection, split=split, patch=patch), indent=2)
