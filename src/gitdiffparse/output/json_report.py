"""JSON reporter for scripts and CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from gitdiffparse import __version__
from gitdiffparse.diff.models import DiffResult, FileRecord, FileRef, NumstatFile, PatchFile


def _ref_dict(ref: Optional[FileRef]) -> Optional[Dict[str, str]]:
    if ref is None:
        return None
    return {"mode": ref.mode, "sha": ref.sha, "path": ref.path}


def file_to_dict(record: FileRecord, *, include_patch: bool = True) -> Dict[str, Any]:
    """Convert one file record to a plain dict; the keys depend on its format."""
    if isinstance(record, NumstatFile):
        return {
            "path": record.path,
            "src_path": record.src_path,
            "insertions": record.insertions,
            "deletions": record.deletions,
        }

    data: Dict[str, Any] = {
        "path": record.path,
        "status": record.status.value,
        "similarity": record.similarity,
        "src": _ref_dict(record.src),
        "dst": _ref_dict(record.dst),
        "insertions": record.insertions,
        "deletions": record.deletions,
        "binary": record.binary,
    }
    if include_patch and isinstance(record, PatchFile):
        data["patch"] = record.patch
    return data


def to_dict(result: DiffResult, *, include_patch: bool = True) -> Dict[str, Any]:
    """Convert a DiffResult to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = [
        file_to_dict(f, include_patch=include_patch) for f in result.files
    ]
    data: Dict[str, Any] = {
        "version": __version__,
        "files_changed": result.files_changed,
        "total_insertions": result.total_insertions,
        "total_deletions": result.total_deletions,
        "files": files,
    }
    if result.dirstat is not None:
        data["dirstat"] = [
            {"directory": e.directory, "percentage": e.percentage}
            for e in result.dirstat
        ]
    return data


def render(result: DiffResult, *, include_patch: bool = True) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result, include_patch=include_patch), indent=2, ensure_ascii=False)
