"""Configuration schema: dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json", "yaml"]

OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "json", "yaml")


@dataclass
class DiffConfig:
    find_renames: bool = True  # pass -M
    find_copies: bool = False  # pass -C
    dirstat: bool = False
    timeout: int = 30  # seconds before the git subprocess is abandoned


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True
    show_patch: bool = False  # terminal only: print each file's patch text


@dataclass
class GitDiffParseConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
