"""Configuration loading, schema, and defaults."""

from gitdiffparse.config.loader import ConfigError, load_config
from gitdiffparse.config.schema import DiffConfig, GitDiffParseConfig, OutputConfig

__all__ = [
    "ConfigError",
    "DiffConfig",
    "GitDiffParseConfig",
    "OutputConfig",
    "load_config",
]
