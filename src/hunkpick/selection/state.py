"""Line selection owned by the interactive shell.

The engines never hold on to a LineSelection; callers pass
``selection.snapshot()`` into each call.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator, Optional, Set

from hunkpick.diff.models import FileDiff, LineKey


class LineSelection:
    """Mutable set of selected change lines for one FileDiff."""

    def __init__(self, diff: Optional[FileDiff] = None) -> None:
        self._diff: Optional[FileDiff] = diff
        self._keys: Set[LineKey] = set()

    # ---- binding ----

    @property
    def diff(self) -> Optional[FileDiff]:
        return self._diff

    def bind(self, diff: FileDiff) -> None:
        """Track a new diff. Keys from the previous diff are discarded."""
        self._diff = diff
        self._keys.clear()

    # ---- mutation ----

    def is_selectable(self, hunk_index: int, line_index: int) -> bool:
        """True if the coordinate names an addition or deletion line."""
        if self._diff is None:
            return False
        if not 0 <= hunk_index < len(self._diff.hunks):
            return False
        lines = self._diff.hunks[hunk_index].lines
        if not 0 <= line_index < len(lines):
            return False
        return lines[line_index].is_change

    def toggle_line(self, hunk_index: int, line_index: int) -> bool:
        """Flip one line. Returns the new membership state.

        Context lines and coordinates outside the diff are left alone.
        """
        key = LineKey(hunk_index, line_index)
        if not self.is_selectable(hunk_index, line_index):
            return False
        if key in self._keys:
            self._keys.discard(key)
            return False
        self._keys.add(key)
        return True

    def select_hunk(self, hunk_index: int) -> None:
        self._keys.update(self._hunk_keys(hunk_index))

    def deselect_hunk(self, hunk_index: int) -> None:
        self._keys.difference_update(self._hunk_keys(hunk_index))

    def select_all(self) -> None:
        if self._diff is None:
            return
        for hunk_index in range(len(self._diff.hunks)):
            self.select_hunk(hunk_index)

    def update(self, keys: Iterable[LineKey]) -> None:
        """Add *keys*, keeping only those that name change lines."""
        for key in keys:
            if self.is_selectable(key.hunk_index, key.line_index):
                self._keys.add(key)

    def clear(self) -> None:
        self._keys.clear()

    def _hunk_keys(self, hunk_index: int) -> Iterator[LineKey]:
        if self._diff is None or not 0 <= hunk_index < len(self._diff.hunks):
            return
        for line_index, line in enumerate(self._diff.hunks[hunk_index].lines):
            if line.is_change:
                yield LineKey(hunk_index, line_index)

    # ---- queries ----

    def snapshot(self) -> FrozenSet[LineKey]:
        """Immutable copy to hand to the alignment and patch engines."""
        return frozenset(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[LineKey]:
        return iter(sorted(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        path = self._diff.path if self._diff is not None else None
        return f"LineSelection(path={path!r}, selected={len(self._keys)})"
