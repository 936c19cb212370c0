"""Selection tokens from the command line and YAML selection files.

Token forms::

    2        every change line of hunk 2
    2:5      line 5 of hunk 2
    2:5-9    lines 5 through 9 of hunk 2

A selection file maps hunk indices to lists of line tokens, or to ``all``::

    hunks:
      0: [3, 4, "7-9"]
      2: all
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterable, List, Optional, Set

import yaml

from hunkpick.diff.models import FileDiff, LineKey

_TOKEN_RE = re.compile(r"^(\d+)(?::(\d+)(?:-(\d+))?)?$")
_RANGE_RE = re.compile(r"^(\d+)(?:-(\d+))?$")


class SelectionError(Exception):
    """Raised on a malformed selection token or selection file."""


def _hunk_change_lines(diff: Optional[FileDiff], hunk_index: int) -> List[LineKey]:
    if diff is None or not 0 <= hunk_index < len(diff.hunks):
        return []
    return [
        LineKey(hunk_index, i)
        for i, line in enumerate(diff.hunks[hunk_index].lines)
        if line.is_change
    ]


def _expand_range(
    hunk_index: int, start: int, end: Optional[int], token: str, diff: Optional[FileDiff] = None
) -> List[LineKey]:
    if end is None:
        return [LineKey(hunk_index, start)]
    if end < start:
        raise SelectionError(f"Empty line range in {token!r}")
    if diff is not None:
        # Lines past the hunk's end can never be selected
        if not 0 <= hunk_index < len(diff.hunks):
            return []
        end = min(end, len(diff.hunks[hunk_index].lines) - 1)
    return [LineKey(hunk_index, i) for i in range(start, end + 1)]


def parse_selection_tokens(tokens: Iterable[str], diff: Optional[FileDiff] = None) -> Set[LineKey]:
    """Turn CLI tokens into LineKeys.

    A bare hunk index needs *diff* to know which lines are changes.
    """
    keys: Set[LineKey] = set()
    for raw in tokens:
        for token in (t.strip() for t in raw.split(",")):
            if not token:
                continue
            m = _TOKEN_RE.match(token)
            if m is None:
                raise SelectionError(f"Invalid selection {token!r} (expected H, H:L or H:L-M)")
            hunk_index = int(m.group(1))
            if m.group(2) is None:
                keys.update(_hunk_change_lines(diff, hunk_index))
                continue
            end = int(m.group(3)) if m.group(3) is not None else None
            keys.update(_expand_range(hunk_index, int(m.group(2)), end, token, diff))
    return keys


def _keys_from_mapping(data: Any, diff: Optional[FileDiff]) -> Set[LineKey]:
    if not isinstance(data, dict) or not isinstance(data.get("hunks"), dict):
        raise SelectionError("Selection file must contain a 'hunks' mapping")

    keys: Set[LineKey] = set()
    for raw_hunk, entries in data["hunks"].items():
        try:
            hunk_index = int(raw_hunk)
        except (TypeError, ValueError):
            raise SelectionError(f"Invalid hunk index {raw_hunk!r}") from None

        if entries == "all":
            keys.update(_hunk_change_lines(diff, hunk_index))
            continue
        if not isinstance(entries, list):
            raise SelectionError(f"Hunk {hunk_index}: expected a list of lines or 'all'")

        for entry in entries:
            m = _RANGE_RE.match(str(entry).strip())
            if m is None:
                raise SelectionError(f"Hunk {hunk_index}: invalid line entry {entry!r}")
            end = int(m.group(2)) if m.group(2) is not None else None
            keys.update(_expand_range(hunk_index, int(m.group(1)), end, str(entry), diff))
    return keys


def load_selection_file(path: Path, diff: Optional[FileDiff] = None) -> Set[LineKey]:
    """Read a YAML selection file into LineKeys."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise SelectionError(f"Cannot read selection file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SelectionError(f"Failed to parse {path}: {exc}") from exc
    return _keys_from_mapping(data, diff)
