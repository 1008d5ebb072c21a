"""Git subprocess wrapper. Builds diff command lines and parses their output."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from gitdiffparse.diff import numstat, patch, raw
from gitdiffparse.diff.models import DiffResult

logger = logging.getLogger(__name__)

# git diff exits 1 when --exit-code style reporting sees differences
_OK_EXIT_CODES = (0, 1)


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("Running git %s in %s", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}") from exc

    if result.returncode not in _OK_EXIT_CODES:
        stderr = result.stderr.strip()
        raise GitError(f"git error (exit {result.returncode}): {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    if not out.strip():
        raise GitError(f"not a git repository: {cwd}")
    return Path(out.strip())


def build_diff_args(
    format_args: Sequence[str],
    commit1: Optional[str] = None,
    commit2: Optional[str] = None,
    *,
    cached: bool = False,
    merge_base: bool = False,
    find_renames: bool = True,
    find_copies: bool = False,
    dirstat: bool = False,
    pathspecs: Sequence[str] = (),
) -> List[str]:
    """Assemble ``git diff`` arguments. Commits that look like options are rejected."""
    for commit in (commit1, commit2):
        if commit is not None and commit.startswith("-"):
            raise GitError(f"Invalid commit argument: {commit!r}")

    args = ["diff", *format_args, "--no-color"]
    if cached:
        args.append("--cached")
    if merge_base:
        args.append("--merge-base")
    if find_renames:
        args.append("-M")
    if find_copies:
        args.append("-C")
    if dirstat:
        args.append("--dirstat")
    args.extend(c for c in (commit1, commit2) if c is not None)
    if pathspecs:
        args.append("--")
        args.extend(pathspecs)
    return args


def _diff(
    format_args: Sequence[str],
    parser: Callable[..., DiffResult],
    repo_root: Path,
    commit1: Optional[str],
    commit2: Optional[str],
    *,
    dirstat: bool,
    timeout: int,
    **options,
) -> DiffResult:
    args = build_diff_args(format_args, commit1, commit2, dirstat=dirstat, **options)
    output = _run_git(args, cwd=repo_root, timeout=timeout)
    return parser(output, include_dirstat=dirstat)


def diff_numstat(
    repo_root: Path,
    commit1: Optional[str] = None,
    commit2: Optional[str] = None,
    *,
    dirstat: bool = False,
    timeout: int = 30,
    **options,
) -> DiffResult:
    """Per-file line counts: ``git diff --numstat --shortstat``."""
    return _diff(
        ["--numstat", "--shortstat"], numstat.parse, repo_root, commit1, commit2,
        dirstat=dirstat, timeout=timeout, **options,
    )


def diff_raw(
    repo_root: Path,
    commit1: Optional[str] = None,
    commit2: Optional[str] = None,
    *,
    dirstat: bool = False,
    timeout: int = 30,
    **options,
) -> DiffResult:
    """Per-file modes, object ids and status with line counts: ``git diff --raw``."""
    return _diff(
        ["--raw", "--numstat", "--shortstat", "--src-prefix=a/", "--dst-prefix=b/"],
        raw.parse, repo_root, commit1, commit2,
        dirstat=dirstat, timeout=timeout, **options,
    )


def diff_patch(
    repo_root: Path,
    commit1: Optional[str] = None,
    commit2: Optional[str] = None,
    *,
    dirstat: bool = False,
    timeout: int = 30,
    **options,
) -> DiffResult:
    """Full unified diff per file with line counts: ``git diff --patch``."""
    return _diff(
        ["--patch", "--numstat", "--shortstat", "--src-prefix=a/", "--dst-prefix=b/"],
        patch.parse, repo_root, commit1, commit2,
        dirstat=dirstat, timeout=timeout, **options,
    )
