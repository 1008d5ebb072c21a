"""Parser for ``git diff --patch --numstat --shortstat [--dirstat]`` output.

The numstat/shortstat/dirstat sections come first; the unified diff starts
at the first ``diff --git`` header. Each file block is scanned line by line,
collecting header metadata (index line, modes, renames/copies, similarity,
binary markers) until the next header closes it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gitdiffparse.diff import numstat
from gitdiffparse.diff.models import DiffResult, FileRef, FileStats, FileStatus, PatchFile
from gitdiffparse.diff.primitives import (
    parse_dirstat,
    parse_shortstat,
    split_stat_sections,
    unescape_path,
    unquote_c_style,
)

logger = logging.getLogger(__name__)

# --- Regex patterns for patch metadata ---

_DIFF_HEADER_RE = re.compile(r'^diff --git ("?)a/(.+?)\1 ("?)b/(.+?)\3$')
_INDEX_RE = re.compile(r"^index ([0-9a-f]{4,64})\.\.([0-9a-f]{4,64})(?: ([0-7]{6}))?")
_FILE_MODE_RE = re.compile(r"^(new|deleted) file mode ([0-7]{6})")
_OLD_MODE_RE = re.compile(r"^old mode ([0-7]{6})")
_NEW_MODE_RE = re.compile(r"^new mode ([0-7]{6})")
_RENAME_RE = re.compile(r"^rename (from|to) (.+)$")
_COPY_RE = re.compile(r"^copy (from|to) (.+)$")
_SIMILARITY_RE = re.compile(r"^similarity index (\d+)%$")
_BINARY_RE = re.compile(r"^Binary files ")
_GIT_BINARY_PATCH = "GIT binary patch"

_DIFF_HEADER_PREFIX = "diff --git"

_MISSING_STATS = FileStats()


@dataclass
class _FileState:
    """Metadata accumulated for the file block currently being scanned."""

    lines: List[str]
    src_path: Optional[str]
    dst_path: Optional[str]
    src_mode: Optional[str] = None
    dst_mode: Optional[str] = None
    src_sha: str = ""
    dst_sha: str = ""
    status: FileStatus = FileStatus.MODIFIED
    similarity: Optional[int] = None
    binary: bool = False

    @classmethod
    def from_header(cls, match: re.Match[str], line: str) -> _FileState:
        src_quoted, src, dst_quoted, dst = match.groups()
        return cls(
            lines=[line],
            src_path=unquote_c_style(src) if src_quoted else src,
            dst_path=unquote_c_style(dst) if dst_quoted else dst,
        )

    def apply(self, line: str) -> None:
        """Record *line* in the patch text and pick up any metadata it carries."""
        self.lines.append(line)

        if (m := _INDEX_RE.match(line)):
            self.src_sha, self.dst_sha = m.group(1), m.group(2)
            # An unchanged mode is only reported here, once for both sides
            if m.group(3) and self.src_mode is None and self.dst_mode is None:
                self.src_mode = self.dst_mode = m.group(3)
            return

        if (m := _FILE_MODE_RE.match(line)):
            kind, mode = m.groups()
            if kind == "new":
                self.status = FileStatus.ADDED
                self.dst_mode = mode
                self.src_path = None
            else:
                self.status = FileStatus.DELETED
                self.src_mode = mode
                self.dst_path = None
            return

        if (m := _OLD_MODE_RE.match(line)):
            self.src_mode = m.group(1)
            self._detect_type_change()
            return

        if (m := _NEW_MODE_RE.match(line)):
            self.dst_mode = m.group(1)
            self._detect_type_change()
            return

        for pattern, status in ((_RENAME_RE, FileStatus.RENAMED), (_COPY_RE, FileStatus.COPIED)):
            if (m := pattern.match(line)):
                side, path = m.groups()
                if side == "from":
                    self.src_path = unescape_path(path)
                else:
                    self.dst_path = unescape_path(path)
                self.status = status
                return

        if (m := _SIMILARITY_RE.match(line)):
            self.similarity = int(m.group(1))
            return

        if _BINARY_RE.match(line) or line == _GIT_BINARY_PATCH:
            self.binary = True

    def _detect_type_change(self) -> None:
        # The leading three octal digits are the object type (100 file, 120 symlink, 160 gitlink)
        if self.src_mode and self.dst_mode and self.src_mode[:3] != self.dst_mode[:3]:
            self.status = FileStatus.TYPE_CHANGED

    def file_ref(self, side: str) -> Optional[FileRef]:
        path = self.src_path if side == "src" else self.dst_path
        if path is None:
            return None
        if side == "src":
            return FileRef(mode=self.src_mode or "", sha=self.src_sha, path=path)
        return FileRef(mode=self.dst_mode or "", sha=self.dst_sha, path=path)


class PatchParser:
    """Scan unified diff text and build one PatchFile per ``diff --git`` block.

    Usage::

        files = PatchParser(patch_text, numstat_map).parse()

    Lines before the first header are ignored. A block is only emitted once
    the next header (or the end of the text) closes it.
    """

    def __init__(self, patch_text: str, numstat_map: Optional[Dict[str, FileStats]] = None) -> None:
        lines = patch_text.split("\n")
        while lines and not lines[-1]:
            lines.pop()
        self._lines = lines
        self._numstat_map = numstat_map or {}

    def parse(self) -> List[PatchFile]:
        files: List[PatchFile] = []
        current: Optional[_FileState] = None

        for line in self._lines:
            m = _DIFF_HEADER_RE.match(line)
            if m:
                if current is not None:
                    files.append(self._finalize(current))
                current = _FileState.from_header(m, line)
                continue
            if current is None:
                logger.debug("Ignoring line before first diff header: %r", line)
                continue
            current.apply(line)

        if current is not None:
            files.append(self._finalize(current))
        return files

    def _finalize(self, state: _FileState) -> PatchFile:
        path = state.dst_path if state.dst_path is not None else state.src_path
        stats = self._numstat_map.get(path, _MISSING_STATS) if path is not None else _MISSING_STATS
        renamed_or_copied = state.status in (FileStatus.RENAMED, FileStatus.COPIED)

        return PatchFile(
            src=state.file_ref("src"),
            dst=state.file_ref("dst"),
            status=state.status,
            similarity=state.similarity if renamed_or_copied else None,
            insertions=stats.insertions,
            deletions=stats.deletions,
            binary=state.binary,
            patch="\n".join(state.lines),
        )


def split_sections(
    output: str, include_dirstat: bool
) -> Tuple[List[str], Optional[str], List[str], str]:
    """Split output into (numstat lines, shortstat line, dirstat lines, patch text)."""
    lines = output.split("\n")
    first_diff = next(
        (idx for idx, line in enumerate(lines) if line.startswith(_DIFF_HEADER_PREFIX)),
        len(lines),
    )
    pre_diff = [line.rstrip("\r") for line in lines[:first_diff]]
    pre_diff = [line for line in pre_diff if line]
    patch_text = "\n".join(lines[first_diff:])

    numstat_lines, shortstat_line, dirstat_lines = split_stat_sections(pre_diff, include_dirstat)
    return numstat_lines, shortstat_line, dirstat_lines, patch_text


def parse(output: str, *, include_dirstat: bool = False) -> DiffResult:
    """Parse combined numstat + shortstat (+ dirstat) + patch output."""
    numstat_lines, shortstat_line, dirstat_lines, patch_text = split_sections(output, include_dirstat)
    numstat_map = numstat.parse_as_map(numstat_lines)
    shortstat = parse_shortstat(shortstat_line)

    return DiffResult(
        files_changed=shortstat.files_changed,
        total_insertions=shortstat.insertions,
        total_deletions=shortstat.deletions,
        files=tuple(PatchParser(patch_text, numstat_map).parse()),
        dirstat=parse_dirstat(dirstat_lines) if include_dirstat else None,
    )
