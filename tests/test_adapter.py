"""Tests for the git subprocess adapter (argument building + real repos)."""

import subprocess
from pathlib import Path

import pytest

from gitdiffparse.diff.models import FileStatus, NumstatFile, PatchFile, RawFile
from gitdiffparse.git.adapter import (
    GitError,
    build_diff_args,
    diff_numstat,
    diff_patch,
    diff_raw,
    get_repo_root,
)


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


class TestBuildDiffArgs:
    def test_defaults(self):
        assert build_diff_args(["--numstat", "--shortstat"]) == [
            "diff", "--numstat", "--shortstat", "--no-color", "-M",
        ]

    def test_all_options(self):
        args = build_diff_args(
            ["--raw"],
            "HEAD~1",
            "HEAD",
            cached=True,
            merge_base=True,
            find_renames=False,
            find_copies=True,
            dirstat=True,
            pathspecs=["lib", "spec"],
        )
        assert args == [
            "diff", "--raw", "--no-color", "--cached", "--merge-base",
            "-C", "--dirstat", "HEAD~1", "HEAD", "--", "lib", "spec",
        ]

    def test_option_like_commit_rejected(self):
        with pytest.raises(GitError):
            build_diff_args(["--numstat"], "--output=/tmp/x")


class TestRepoRoot:
    def test_finds_root(self, tmp_git_repo: Path):
        assert get_repo_root(tmp_git_repo / "lib").resolve() == tmp_git_repo.resolve()

    def test_not_a_repo(self, tmp_path: Path):
        with pytest.raises(GitError):
            get_repo_root(tmp_path)


class TestDiffAgainstRepo:
    def test_numstat_working_tree(self, tmp_git_repo: Path):
        (tmp_git_repo / "lib" / "foo.rb").write_text("class Foo\n  X = 1\nend\n")
        result = diff_numstat(tmp_git_repo)
        assert result.files_changed == 1
        assert result.total_insertions == 1
        assert result.files == (
            NumstatFile(path="lib/foo.rb", src_path=None, insertions=1, deletions=0),
        )

    def test_raw_cached_added_file(self, tmp_git_repo: Path):
        (tmp_git_repo / "new.txt").write_text("a\nb\n")
        _git(tmp_git_repo, "add", "new.txt")
        result = diff_raw(tmp_git_repo, cached=True)
        assert len(result.files) == 1
        record = result.files[0]
        assert isinstance(record, RawFile)
        assert record.status == FileStatus.ADDED
        assert record.src is None
        assert record.dst.path == "new.txt"
        assert record.insertions == 2

    def test_patch_rename_between_commits(self, tmp_git_repo: Path):
        _git(tmp_git_repo, "mv", "lib/foo.rb", "lib/bar.rb")
        _git(tmp_git_repo, "commit", "-m", "rename")
        result = diff_patch(tmp_git_repo, "HEAD~1", "HEAD")
        assert len(result.files) == 1
        record = result.files[0]
        assert isinstance(record, PatchFile)
        assert record.status == FileStatus.RENAMED
        assert record.similarity == 100
        assert record.src.path == "lib/foo.rb"
        assert record.dst.path == "lib/bar.rb"

    def test_dirstat(self, tmp_git_repo: Path):
        (tmp_git_repo / "lib" / "foo.rb").write_text("changed\n")
        result = diff_numstat(tmp_git_repo, dirstat=True)
        assert result.dirstat is not None
        assert result.dirstat["lib/"] == 100.0

    def test_no_changes(self, tmp_git_repo: Path):
        result = diff_patch(tmp_git_repo)
        assert result.files == ()
        assert result.files_changed == 0

    def test_bad_revision(self, tmp_git_repo: Path):
        with pytest.raises(GitError):
            diff_numstat(tmp_git_repo, "no-such-revision")
