"""Diff output parsing for the numstat, raw and patch formats."""

from gitdiffparse.diff import numstat, patch, raw
from gitdiffparse.diff.models import (
    DiffResult,
    DirstatEntry,
    DirstatInfo,
    FileRecord,
    FileRef,
    FileStats,
    FileStatus,
    NumstatFile,
    PatchFile,
    RawFile,
)
from gitdiffparse.diff.patch import PatchParser
from gitdiffparse.diff.primitives import (
    parse_dirstat,
    parse_rename_path,
    parse_shortstat,
    parse_stat_value,
    unescape_path,
)

__all__ = [
    "DiffResult",
    "DirstatEntry",
    "DirstatInfo",
    "FileRecord",
    "FileRef",
    "FileStats",
    "FileStatus",
    "NumstatFile",
    "PatchFile",
    "PatchParser",
    "RawFile",
    "numstat",
    "parse_dirstat",
    "parse_rename_path",
    "parse_shortstat",
    "parse_stat_value",
    "patch",
    "raw",
    "unescape_path",
]
