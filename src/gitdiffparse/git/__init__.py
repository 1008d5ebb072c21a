"""Git interface layer, a subprocess adapter for the diff commands."""

from gitdiffparse.git.adapter import (
    GitError,
    build_diff_args,
    diff_numstat,
    diff_patch,
    diff_raw,
    get_repo_root,
)

__all__ = [
    "GitError",
    "build_diff_args",
    "diff_numstat",
    "diff_patch",
    "diff_raw",
    "get_repo_root",
]
