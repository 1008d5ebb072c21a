"""Building blocks shared by the numstat, raw and patch parsers.

Number parsing, the shortstat/dirstat sections, git's C-style path quoting
and the two rename notations used by ``--numstat -M``::

    old_name.rb => new_name.rb
    lib/{old_dir => new_dir}/file.rb
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from gitdiffparse.diff.models import DirstatEntry, DirstatInfo, FileStatus

logger = logging.getLogger(__name__)

# --- Status letters from --raw output ---

STATUS_MAP: dict[str, FileStatus] = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.COPIED,
    "T": FileStatus.TYPE_CHANGED,
}

# Mode git reports for the missing side of an added/deleted file
NULL_MODE = "000000"

BINARY_PLACEHOLDER = "-"

# --- Regex patterns ---

_SHORTSTAT_LINE_RE = re.compile(r"^\s*\d+\s+files?\s+changed")
_FILES_CHANGED_RE = re.compile(r"(\d+)\s+files?\s+changed")
_INSERTIONS_RE = re.compile(r"(\d+)\s+insertions?\(\+\)")
_DELETIONS_RE = re.compile(r"(\d+)\s+deletions?\(-\)")
_DIRSTAT_RE = re.compile(r"^\s*([\d.]+)%\s+(.+)$")
_BRACE_RENAME_RE = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$", re.DOTALL)
_SIMPLE_RENAME_RE = re.compile(r"^(.+) => (.+)$", re.DOTALL)
# Octal escapes above \377 are not bytes and stay literal
_ESCAPE_RE = re.compile(r"\\([0-3][0-7]{2}|[abtnvfre\\\"'])")

_NAMED_ESCAPES: dict[str, int] = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    "e": 0x1B,
    "\\": 0x5C,
    '"': 0x22,
    "'": 0x27,
}


@dataclass(frozen=True, slots=True)
class Shortstat:
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0


def parse_stat_value(token: str) -> int:
    """Return *token* as an int; the binary placeholder ``-`` counts as 0."""
    if token == BINARY_PLACEHOLDER:
        return 0
    return int(token)


def is_shortstat_line(line: str) -> bool:
    return _SHORTSTAT_LINE_RE.match(line) is not None


def parse_shortstat(line: Optional[str]) -> Shortstat:
    """Extract totals from a line like `` 3 files changed, 10 insertions(+)``.

    Each of the three phrases is optional; a missing one yields 0.
    """
    if line is None:
        return Shortstat()

    def _grab(pattern: re.Pattern[str]) -> int:
        m = pattern.search(line)
        return int(m.group(1)) if m else 0

    return Shortstat(
        files_changed=_grab(_FILES_CHANGED_RE),
        insertions=_grab(_INSERTIONS_RE),
        deletions=_grab(_DELETIONS_RE),
    )


def parse_dirstat(lines: Iterable[str]) -> DirstatInfo:
    """Parse ``  45.2% lib/commands/`` lines. Lines that don't match are skipped."""
    entries: List[DirstatEntry] = []
    for line in lines:
        m = _DIRSTAT_RE.match(line)
        if m is None:
            logger.debug("Skipping unrecognised dirstat line: %r", line)
            continue
        try:
            percentage = float(m.group(1))
        except ValueError:
            logger.debug("Skipping dirstat line with bad percentage: %r", line)
            continue
        entries.append(DirstatEntry(directory=m.group(2), percentage=percentage))
    return DirstatInfo(entries=tuple(entries))


def split_stat_sections(
    lines: Sequence[str], include_dirstat: bool
) -> Tuple[List[str], Optional[str], List[str]]:
    """Split non-empty lines into (numstat lines, shortstat line, dirstat lines)."""
    for idx, line in enumerate(lines):
        if is_shortstat_line(line):
            dirstat_lines = list(lines[idx + 1:]) if include_dirstat else []
            return list(lines[:idx]), line, dirstat_lines
    return list(lines), None, []


# --- Path quoting ---


def unquote_c_style(body: str) -> str:
    """Decode the inside of a git-quoted path.

    Octal escapes are raw bytes, so the decoded byte string is interpreted
    as UTF-8 once complete. Bytes that are not valid UTF-8 are kept as
    surrogate escapes, matching ``os.fsdecode``.
    """
    out = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(body):
        out += body[pos:m.start()].encode("utf-8", "surrogateescape")
        esc = m.group(1)
        if len(esc) == 3:
            out.append(int(esc, 8))
        else:
            out.append(_NAMED_ESCAPES[esc])
        pos = m.end()
    out += body[pos:].encode("utf-8", "surrogateescape")
    return out.decode("utf-8", "surrogateescape")


def unescape_path(token: str) -> str:
    """Unquote *token* if git wrapped it in double quotes, else return it as is."""
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return unquote_c_style(token[1:-1])
    return token


# --- Renames ---


def _join_brace(prefix: str, part: str, suffix: str) -> str:
    # git prints a move into or out of a directory as ``{ => sub}/a.rb``;
    # an empty side must not leave a doubled or leading slash behind.
    if not part and suffix.startswith("/") and (not prefix or prefix.endswith("/")):
        suffix = suffix[1:]
    return f"{prefix}{part}{suffix}"


def parse_rename_path(token: str) -> Tuple[str, Optional[str]]:
    """Split a numstat path token into ``(dst_path, src_path)``.

    ``src_path`` is ``None`` when the token names a single unchanged path.
    """
    m = _BRACE_RENAME_RE.match(token)
    if m:
        prefix, old, new, suffix = m.groups()
        return _join_brace(prefix, new, suffix), _join_brace(prefix, old, suffix)
    m = _SIMPLE_RENAME_RE.match(token)
    if m:
        return m.group(2), m.group(1)
    return token, None


# --- Status ---


def status_from_letter(token: str) -> Tuple[FileStatus, Optional[int]]:
    """Map a raw status token like ``M`` or ``R075`` to (status, similarity).

    Only renames and copies carry a similarity; the score git appends to
    other letters (the dissimilarity of a ``-B`` rewrite) is dropped.
    """
    if not token:
        return FileStatus.UNKNOWN, None
    status = STATUS_MAP.get(token[0], FileStatus.UNKNOWN)
    if status not in (FileStatus.RENAMED, FileStatus.COPIED):
        return status, None
    digits = token[1:]
    similarity = int(digits) if digits.isascii() and digits.isdigit() else None
    return status, similarity
