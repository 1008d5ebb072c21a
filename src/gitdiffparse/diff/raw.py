"""Parser for ``git diff --raw --numstat --shortstat [--dirstat]`` output.

Raw lines carry file identity (modes, object ids, status letter, paths)::

    :100644 100644 aaa1111 bbb2222 R100\told/path.rb\tnew/path.rb

Line counts are not part of the raw format, so they are looked up from the
numstat lines git prints alongside.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from gitdiffparse.diff import numstat
from gitdiffparse.diff.models import DiffResult, FileRef, FileStats, RawFile
from gitdiffparse.diff.primitives import (
    NULL_MODE,
    parse_dirstat,
    parse_shortstat,
    split_stat_sections,
    status_from_letter,
    unescape_path,
)

logger = logging.getLogger(__name__)

_MISSING_STATS = FileStats()


def _file_ref(mode: str, sha: str, path: Optional[str]) -> Optional[FileRef]:
    """Build a FileRef, or None when the file does not exist on this side."""
    if mode == NULL_MODE or path is None:
        return None
    return FileRef(mode=mode, sha=sha, path=path)


def _extract_paths(paths: Sequence[str]) -> Tuple[str, str]:
    """Return (src_path, dst_path); a single path is both."""
    if len(paths) >= 2:
        return unescape_path(paths[0]), unescape_path(paths[1])
    path = unescape_path(paths[0])
    return path, path


def parse_raw_line(line: str, numstat_map: Dict[str, FileStats]) -> Optional[RawFile]:
    """Parse one ``:``-prefixed raw line; None if it has too few fields."""
    fields = line[1:].split(None, 4)
    if len(fields) < 5:
        logger.debug("Skipping raw line with too few fields: %r", line)
        return None
    src_mode, dst_mode, src_sha, dst_sha, rest = fields

    status_token, *paths = rest.split("\t")
    if not paths or not paths[0]:
        logger.debug("Skipping raw line without a path: %r", line)
        return None

    status, similarity = status_from_letter(status_token)
    src_path, dst_path = _extract_paths(paths)
    stats = numstat_map.get(dst_path, _MISSING_STATS)

    return RawFile(
        src=_file_ref(src_mode, src_sha, src_path),
        dst=_file_ref(dst_mode, dst_sha, dst_path),
        status=status,
        similarity=similarity,
        insertions=stats.insertions,
        deletions=stats.deletions,
        binary=stats.binary,
    )


def parse(output: str, *, include_dirstat: bool = False) -> DiffResult:
    """Parse combined raw + numstat + shortstat (+ dirstat) output."""
    lines = [line for line in output.split("\n") if line]
    raw_lines = [line for line in lines if line.startswith(":")]
    other_lines = [line for line in lines if not line.startswith(":")]

    numstat_lines, shortstat_line, dirstat_lines = split_stat_sections(other_lines, include_dirstat)
    numstat_map = numstat.parse_as_map(numstat_lines)
    shortstat = parse_shortstat(shortstat_line)

    files: List[RawFile] = []
    for line in raw_lines:
        record = parse_raw_line(line, numstat_map)
        if record is not None:
            files.append(record)

    return DiffResult(
        files_changed=shortstat.files_changed,
        total_insertions=shortstat.insertions,
        total_deletions=shortstat.deletions,
        files=tuple(files),
        dirstat=parse_dirstat(dirstat_lines) if include_dirstat else None,
    )
