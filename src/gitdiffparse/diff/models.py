"""Result types for parsed diff output.

Every value here is a frozen snapshot of one git command's output. The
per-file records form a tagged union: ``NumstatFile`` for ``--numstat``,
``RawFile`` for ``--raw`` and ``PatchFile`` for ``--patch``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple, Union


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class FileRef:
    """One side of a file pair: mode, object id and path."""

    mode: str
    sha: str
    path: str

    @property
    def regular_file(self) -> bool:
        return self.mode == "100644"

    @property
    def executable(self) -> bool:
        return self.mode == "100755"

    @property
    def symlink(self) -> bool:
        return self.mode == "120000"

    @property
    def mode_bits(self) -> int:
        return int(self.mode, 8) if self.mode else 0


@dataclass(frozen=True, slots=True)
class FileStats:
    """Line counts for one path, as recovered from a numstat section."""

    insertions: int = 0
    deletions: int = 0
    binary: bool = False


@dataclass(frozen=True, slots=True)
class NumstatFile:
    """A file from ``--numstat`` output."""

    path: str
    src_path: Optional[str]  # set on renames only
    insertions: int
    deletions: int

    @property
    def renamed(self) -> bool:
        return self.src_path is not None


@dataclass(frozen=True)
class RawFile:
    """A file from ``--raw`` output, enriched with numstat line counts.

    ``src`` is ``None`` for added files and ``dst`` is ``None`` for deleted
    files. ``similarity`` is only set for renames and copies.
    """

    src: Optional[FileRef]
    dst: Optional[FileRef]
    status: FileStatus
    similarity: Optional[int]
    insertions: int
    deletions: int
    binary: bool

    @property
    def path(self) -> Optional[str]:
        """Destination path if the file still exists, otherwise the source path.

        ``None`` only for unmerged entries, where git reports neither side.
        """
        if self.dst is not None:
            return self.dst.path
        if self.src is not None:
            return self.src.path
        return None

    @property
    def src_path(self) -> Optional[str]:
        return self.src.path if self.src is not None else None

    @property
    def renamed(self) -> bool:
        return self.status == FileStatus.RENAMED

    @property
    def copied(self) -> bool:
        return self.status == FileStatus.COPIED

    @property
    def added(self) -> bool:
        return self.status == FileStatus.ADDED

    @property
    def deleted(self) -> bool:
        return self.status == FileStatus.DELETED


@dataclass(frozen=True)
class PatchFile(RawFile):
    """A file from ``--patch`` output; ``patch`` holds its verbatim diff block."""

    patch: str = ""


FileRecord = Union[NumstatFile, RawFile, PatchFile]


@dataclass(frozen=True, slots=True)
class DirstatEntry:
    directory: str  # always ends with '/'
    percentage: float


@dataclass(frozen=True)
class DirstatInfo:
    """Directory-level change percentages from ``--dirstat``.

    Percentages need not add up to 100: git leaves changes below the
    reporting threshold unaccounted for.
    """

    entries: Tuple[DirstatEntry, ...] = ()

    def __getitem__(self, directory: str) -> Optional[float]:
        for entry in self.entries:
            if entry.directory == directory:
                return entry.percentage
        return None

    def __iter__(self) -> Iterator[DirstatEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_dict(self) -> Dict[str, float]:
        return {e.directory: e.percentage for e in self.entries}


@dataclass(frozen=True)
class DiffResult:
    """Everything parsed from one diff invocation."""

    files_changed: int = 0
    total_insertions: int = 0
    total_deletions: int = 0
    files: Tuple[FileRecord, ...] = field(default_factory=tuple)
    dirstat: Optional[DirstatInfo] = None

    @classmethod
    def empty(cls) -> DiffResult:
        return cls()

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files if f.path is not None]

    def file_for(self, path: str) -> Optional[FileRecord]:
        """Return the first record whose primary path is *path*."""
        for f in self.files:
            if f.path == path:
                return f
        return None
