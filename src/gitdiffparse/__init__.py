"""gitdiffparse: typed results from git diff --numstat, --raw and --patch output."""

__version__ = "0.1.0"
