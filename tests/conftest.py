"""Shared test fixtures — sample diffs, parsed FileDiffs, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest

from hunkpick.diff.models import DiffHunk, DiffLine, FileDiff, LineOrigin


@pytest.fixture
def sample_diff_modified() -> str:
    """One hunk replacing 'b' with 'x' and 'y'."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -10,3 +10,4 @@ def main():
         a
        -b
        +x
        +y
         c
    """)


@pytest.fixture
def sample_diff_two_hunks() -> str:
    """Two hunks; the first contains an empty context line."""
    return (
        "diff --git a/lib.py b/lib.py\n"
        "index 1111111..2222222 100644\n"
        "--- a/lib.py\n"
        "+++ b/lib.py\n"
        "@@ -1,4 +1,4 @@\n"
        " import os\n"
        "-import sys\n"
        "+import re\n"
        " \n"
        " def f():\n"
        "@@ -20,2 +20,4 @@ def g():\n"
        "     x = 1\n"
        "+    y = 2\n"
        "+    z = 3\n"
        "     return x\n"
    )


@pytest.fixture
def sample_diff_new_file() -> str:
    """A newly added file."""
    return textwrap.dedent("""\
        diff --git a/new.txt b/new.txt
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/new.txt
        @@ -0,0 +1,3 @@
        +one
        +two
        +three
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A diff with a binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A renamed file with one edited line."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 90%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,2 +1,2 @@
         keep = True
        -value = 1
        +value = 2
    """)


@pytest.fixture
def scenario_diff() -> FileDiff:
    """``@@ -10,3 +10,4 @@`` with lines a, -b, +x, +y, c."""
    return FileDiff(
        path="app.py",
        hunks=(
            DiffHunk(
                header="@@ -10,3 +10,4 @@",
                lines=(
                    DiffLine("a", LineOrigin.CONTEXT, 10, 10),
                    DiffLine("b", LineOrigin.DELETION, 11, None),
                    DiffLine("x", LineOrigin.ADDITION, None, 11),
                    DiffLine("y", LineOrigin.ADDITION, None, 12),
                    DiffLine("c", LineOrigin.CONTEXT, 12, 13),
                ),
            ),
        ),
    )


@pytest.fixture
def mixed_hunk() -> DiffHunk:
    """Pure insertion, replacement with more deletions, pure removal."""
    return DiffHunk(
        header="@@ -1,7 +1,6 @@",
        lines=(
            DiffLine("new top", LineOrigin.ADDITION, None, 1),
            DiffLine("keep 1", LineOrigin.CONTEXT, 1, 2),
            DiffLine("old 2", LineOrigin.DELETION, 2, None),
            DiffLine("old 3", LineOrigin.DELETION, 3, None),
            DiffLine("old 4", LineOrigin.DELETION, 4, None),
            DiffLine("new 3", LineOrigin.ADDITION, None, 3),
            DiffLine("keep 5", LineOrigin.CONTEXT, 5, 4),
            DiffLine("gone 6", LineOrigin.DELETION, 6, None),
            DiffLine("keep 7", LineOrigin.CONTEXT, 7, 5),
            DiffLine("new end", LineOrigin.ADDITION, None, 6),
        ),
    )


def _git(*args: str, cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git("config", "user.email", "test@test.com", cwd=tmp_path)
    _git("config", "user.name", "Test", cwd=tmp_path)
    _git("config", "core.autocrlf", "false", cwd=tmp_path)
    # Initial commit
    (tmp_path / "README.md").write_text("# Test\n")
    (tmp_path / "notes.txt").write_text("a\nb\nc\n")
    _git("add", ".", cwd=tmp_path)
    _git("commit", "-m", "init", cwd=tmp_path)
    return tmp_path


@pytest.fixture
def index_content():
    """Return a function reading a file's staged content from a repo."""

    def _read(repo: Path, path: str) -> str:
        result = subprocess.run(
            ["git", "show", f":{path}"],
            cwd=repo, capture_output=True, text=True, check=True,
        )
        return result.stdout

    return _read


@pytest.fixture
def commit_file():
    """Return a function writing *content* to a file and committing it."""

    def _commit(repo: Path, path: str, content: str) -> None:
        (repo / path).write_text(content)
        _git("add", "--", path, cwd=repo)
        _git("commit", "-m", f"add {path}", cwd=repo)

    return _commit


@pytest.fixture
def staged_files():
    """Return a function listing the paths staged in a repo."""

    def _staged(repo: Path) -> list[str]:
        result = subprocess.run(
            ["git", "diff", "--cached", "--name-only", "--no-color"],
            cwd=repo, capture_output=True, text=True, check=True,
        )
        return [line for line in result.stdout.splitlines() if line.strip()]

    return _staged
