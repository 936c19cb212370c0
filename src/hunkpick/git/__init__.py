"""Git interface layer — subprocess adapter for diffs and index patches."""

from hunkpick.git.adapter import (
    GitError,
    apply_patch_to_index,
    get_file_diff,
    get_repo_root,
    get_untracked_file_diff,
    get_worktree_diff,
    is_untracked,
)

__all__ = [
    "GitError",
    "apply_patch_to_index",
    "get_file_diff",
    "get_repo_root",
    "get_untracked_file_diff",
    "get_worktree_diff",
    "is_untracked",
]
