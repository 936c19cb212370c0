"""Staging patch synthesis."""

from hunkpick.patch.synthesizer import (
    PatchError,
    all_change_keys,
    count_hunks,
    is_empty_patch,
    is_new_file,
    synthesize,
)

__all__ = [
    "PatchError",
    "all_change_keys",
    "count_hunks",
    "is_empty_patch",
    "is_new_file",
    "synthesize",
]
