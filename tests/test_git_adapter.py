"""Integration tests: git diff in, synthesized patch applied to the index."""

from pathlib import Path

import pytest

from hunkpick.diff.diff_parser import parse_file_diff
from hunkpick.diff.models import LineKey
from hunkpick.git.adapter import (
    GitError,
    apply_patch_to_index,
    get_file_diff,
    get_repo_root,
    get_worktree_diff,
    is_untracked,
)
from hunkpick.patch.synthesizer import all_change_keys, synthesize


class TestRepoQueries:
    def test_repo_root(self, tmp_git_repo: Path):
        assert get_repo_root(tmp_git_repo).resolve() == tmp_git_repo.resolve()

    def test_not_a_repo(self, tmp_path: Path, monkeypatch):
        outside = tmp_path / "plain"
        outside.mkdir()
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        with pytest.raises(GitError):
            get_repo_root(outside)

    def test_untracked(self, tmp_git_repo: Path):
        (tmp_git_repo / "fresh.txt").write_text("hi\n")
        assert is_untracked(tmp_git_repo, "fresh.txt")
        assert not is_untracked(tmp_git_repo, "notes.txt")

    def test_clean_file_has_empty_diff(self, tmp_git_repo: Path):
        assert get_file_diff(tmp_git_repo, "notes.txt").strip() == ""


class TestPartialStaging:
    def test_stage_single_addition(self, tmp_git_repo: Path, index_content, staged_files):
        (tmp_git_repo / "notes.txt").write_text("a\nx\ny\nc\n")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "notes.txt"), "notes.txt")
        # a, -b, +x, +y, c
        patch = synthesize(diff, {LineKey(0, 2)})

        apply_patch_to_index(tmp_git_repo, patch)

        assert index_content(tmp_git_repo, "notes.txt") == "a\nb\nx\nc\n"
        assert staged_files(tmp_git_repo) == ["notes.txt"]
        assert (tmp_git_repo / "notes.txt").read_text() == "a\nx\ny\nc\n"

    def test_stage_only_deletion(self, tmp_git_repo: Path, index_content):
        (tmp_git_repo / "notes.txt").write_text("a\nx\ny\nc\n")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "notes.txt"), "notes.txt")
        apply_patch_to_index(tmp_git_repo, synthesize(diff, {LineKey(0, 1)}))
        assert index_content(tmp_git_repo, "notes.txt") == "a\nc\n"

    def test_full_selection_matches_worktree(self, tmp_git_repo: Path, index_content):
        (tmp_git_repo / "notes.txt").write_text("a\nx\ny\nc\nd\n")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "notes.txt"), "notes.txt")
        apply_patch_to_index(tmp_git_repo, synthesize(diff, all_change_keys(diff)))
        assert index_content(tmp_git_repo, "notes.txt") == "a\nx\ny\nc\nd\n"

    def test_untracked_file_partially_added(self, tmp_git_repo: Path, index_content):
        (tmp_git_repo / "new.txt").write_text("one\ntwo\nthree\n")
        diff = parse_file_diff(get_worktree_diff(tmp_git_repo, "new.txt"), "new.txt")
        patch = synthesize(diff, {LineKey(0, 0), LineKey(0, 2)})
        assert patch.startswith("--- /dev/null\n+++ b/new.txt\n@@ -0,0 +1,2 @@\n")

        apply_patch_to_index(tmp_git_repo, patch)
        assert index_content(tmp_git_repo, "new.txt") == "one\nthree\n"

    def test_check_only_leaves_index(self, tmp_git_repo: Path, index_content):
        (tmp_git_repo / "notes.txt").write_text("a\nx\nc\n")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "notes.txt"), "notes.txt")
        apply_patch_to_index(tmp_git_repo, synthesize(diff, all_change_keys(diff)), check_only=True)
        assert index_content(tmp_git_repo, "notes.txt") == "a\nb\nc\n"

    def test_stale_patch_rejected(self, tmp_git_repo: Path):
        patch = "--- a/notes.txt\n+++ b/notes.txt\n@@ -1 +1,2 @@\n zzz\n+new\n"
        with pytest.raises(GitError):
            apply_patch_to_index(tmp_git_repo, patch)


class TestAwkwardFiles:
    def test_path_with_space(self, tmp_git_repo: Path, index_content, commit_file):
        commit_file(tmp_git_repo, "my file.txt", "a\nb\nc\n")
        (tmp_git_repo / "my file.txt").write_text("a\nB\nc\n")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "my file.txt"), "my file.txt")
        assert diff.path == "my file.txt"

        apply_patch_to_index(tmp_git_repo, synthesize(diff, all_change_keys(diff)))
        assert index_content(tmp_git_repo, "my file.txt") == "a\nB\nc\n"

    def test_unchanged_last_line_without_newline(self, tmp_git_repo: Path, index_content, commit_file):
        commit_file(tmp_git_repo, "eof.txt", "one\ntwo\nthree")
        (tmp_git_repo / "eof.txt").write_text("one\nTWO\nthree")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "eof.txt"), "eof.txt")

        apply_patch_to_index(tmp_git_repo, synthesize(diff, all_change_keys(diff)))
        assert index_content(tmp_git_repo, "eof.txt") == "one\nTWO\nthree"

    def test_changed_last_line_without_newline(self, tmp_git_repo: Path, index_content, commit_file):
        commit_file(tmp_git_repo, "eof.txt", "one\ntwo")
        (tmp_git_repo / "eof.txt").write_text("one\nTWO")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "eof.txt"), "eof.txt")

        apply_patch_to_index(tmp_git_repo, synthesize(diff, all_change_keys(diff)))
        assert index_content(tmp_git_repo, "eof.txt") == "one\nTWO"

    def test_addition_only_after_last_line_without_newline(
        self, tmp_git_repo: Path, index_content, commit_file
    ):
        commit_file(tmp_git_repo, "eof.txt", "one\ntwo")
        (tmp_git_repo / "eof.txt").write_text("one\nTWO")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "eof.txt"), "eof.txt")
        # one, -two, +TWO
        apply_patch_to_index(tmp_git_repo, synthesize(diff, {LineKey(0, 2)}))
        assert index_content(tmp_git_repo, "eof.txt") == "one\ntwo\nTWO"

    def test_deletion_only_before_missing_newline(self, tmp_git_repo: Path, index_content, commit_file):
        commit_file(tmp_git_repo, "eof.txt", "one\ntwo")
        (tmp_git_repo / "eof.txt").write_text("one\nTWO")
        diff = parse_file_diff(get_file_diff(tmp_git_repo, "eof.txt"), "eof.txt")

        apply_patch_to_index(tmp_git_repo, synthesize(diff, {LineKey(0, 1)}))
        assert index_content(tmp_git_repo, "eof.txt") == "one\n"
