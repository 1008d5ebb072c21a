"""Parser for ``git diff --numstat --shortstat [--dirstat]`` output."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from gitdiffparse.diff.models import DiffResult, FileStats, NumstatFile
from gitdiffparse.diff.primitives import (
    BINARY_PLACEHOLDER,
    parse_dirstat,
    parse_rename_path,
    parse_shortstat,
    parse_stat_value,
    split_stat_sections,
    unescape_path,
)

logger = logging.getLogger(__name__)


def _split_line(line: str) -> Optional[Tuple[str, str, str]]:
    """Return (insertions, deletions, path token) or None for a malformed line."""
    fields = line.split("\t", 2)
    if len(fields) != 3 or not fields[2]:
        logger.debug("Skipping malformed numstat line: %r", line)
        return None
    return fields[0], fields[1], fields[2]


def _counts(insertions: str, deletions: str, line: str) -> Optional[Tuple[int, int]]:
    try:
        return parse_stat_value(insertions), parse_stat_value(deletions)
    except ValueError:
        logger.debug("Skipping numstat line with bad counts: %r", line)
        return None


def parse_file_stats(lines: Iterable[str]) -> List[NumstatFile]:
    """Turn numstat lines into one NumstatFile per line, in order."""
    files: List[NumstatFile] = []
    for line in lines:
        parts = _split_line(line)
        if parts is None:
            continue
        counts = _counts(parts[0], parts[1], line)
        if counts is None:
            continue
        dst_path, src_path = parse_rename_path(parts[2])
        files.append(
            NumstatFile(
                path=unescape_path(dst_path),
                src_path=unescape_path(src_path) if src_path is not None else None,
                insertions=counts[0],
                deletions=counts[1],
            )
        )
    return files


def parse_as_map(lines: Iterable[str]) -> Dict[str, FileStats]:
    """Index numstat lines by destination path.

    The raw and patch parsers identify files from their own sections and use
    this map to recover line counts. A file is binary when git printed the
    ``-`` placeholder for both counts.
    """
    stats: Dict[str, FileStats] = {}
    for line in lines:
        parts = _split_line(line)
        if parts is None:
            continue
        insertions_s, deletions_s, token = parts
        counts = _counts(insertions_s, deletions_s, line)
        if counts is None:
            continue
        dst_path, _src_path = parse_rename_path(token)
        stats[unescape_path(dst_path)] = FileStats(
            insertions=counts[0],
            deletions=counts[1],
            binary=insertions_s == BINARY_PLACEHOLDER and deletions_s == BINARY_PLACEHOLDER,
        )
    return stats


def parse(output: str, *, include_dirstat: bool = False) -> DiffResult:
    """Parse numstat + shortstat (+ dirstat) output into a DiffResult."""
    lines = [line for line in output.split("\n") if line]
    numstat_lines, shortstat_line, dirstat_lines = split_stat_sections(lines, include_dirstat)
    shortstat = parse_shortstat(shortstat_line)

    return DiffResult(
        files_changed=shortstat.files_changed,
        total_insertions=shortstat.insertions,
        total_deletions=shortstat.deletions,
        files=tuple(parse_file_stats(numstat_lines)),
        dirstat=parse_dirstat(dirstat_lines) if include_dirstat else None,
    )
