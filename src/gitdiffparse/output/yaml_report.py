"""YAML reporter. Emits the same document as the JSON reporter."""

from __future__ import annotations

import yaml

from gitdiffparse.diff.models import DiffResult
from gitdiffparse.output.json_report import to_dict


def render(result: DiffResult, *, include_patch: bool = True) -> str:
    """Return the result as a YAML document."""
    return yaml.safe_dump(
        to_dict(result, include_patch=include_patch),
        sort_keys=False,
        allow_unicode=True,
    )
