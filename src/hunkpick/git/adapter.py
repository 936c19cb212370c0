"""Git subprocess wrapper — file diffs and applying patches to the index."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(
    args: list[str],
    cwd: Path,
    timeout: int = 30,
    *,
    stdin: Optional[str] = None,
    strict: bool = False,
) -> str:
    """Run a git command and return stdout. Raises GitError on failure.

    Without *strict*, a non-zero exit is only an error when git says
    ``fatal`` (``git diff --no-index`` exits 1 when files differ).
    """
    logger.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            input=stdin,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if not strict and (not stderr or "fatal" not in stderr.lower()):
            return result.stdout
        raise GitError(f"git error: {stderr or f'exit code {result.returncode}'}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    if not out.strip():
        raise GitError(f"Not a git repository: {cwd}")
    return Path(out.strip())


def is_untracked(repo_root: Path, path: str) -> bool:
    """True if *path* exists in the working tree but git does not track it."""
    output = _run_git(
        ["ls-files", "--others", "--exclude-standard", "--", path],
        cwd=repo_root,
    )
    return any(line.strip() == path for line in output.splitlines())


def get_file_diff(repo_root: Path, path: str, *, context_lines: int = 3) -> str:
    """Return the unstaged diff (index vs working tree) of one file."""
    return _run_git(
        ["diff", "--no-color", "--no-ext-diff", f"--unified={context_lines}", "--", path],
        cwd=repo_root,
    )


def get_untracked_file_diff(repo_root: Path, path: str) -> str:
    """Return an all-additions diff for an untracked file."""
    return _run_git(
        ["diff", "--no-color", "--no-ext-diff", "--no-index", "--", "/dev/null", path],
        cwd=repo_root,
    )


def get_worktree_diff(repo_root: Path, path: str, *, context_lines: int = 3) -> str:
    """Diff for *path* whether it is tracked or not."""
    if is_untracked(repo_root, path):
        return get_untracked_file_diff(repo_root, path)
    return get_file_diff(repo_root, path, context_lines=context_lines)


def apply_patch_to_index(
    repo_root: Path,
    patch_text: str,
    *,
    check_only: bool = False,
    unidiff_zero: bool = False,
) -> None:
    """Apply *patch_text* to the index with ``git apply --cached``.

    *check_only* validates without touching the index. *unidiff_zero* is
    needed for patches built from diffs without context lines.
    """
    args = ["apply", "--cached", "--whitespace=nowarn"]
    if check_only:
        args.append("--check")
    if unidiff_zero:
        args.append("--unidiff-zero")
    args.append("-")
    _run_git(args, cwd=repo_root, stdin=patch_text, strict=True)
