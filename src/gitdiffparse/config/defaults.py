"""Starter .gitdiffparse.toml template."""

DEFAULT_TOML = """\
# gitdiffparse configuration
version = "1.0"

[diff]
find_renames = true       # -M: report renames instead of delete + add
find_copies = false       # -C: also detect copies
dirstat = false           # include per-directory change percentages
timeout = 30              # seconds before git is abandoned

[output]
format = "terminal"       # terminal | json | yaml
show_summary = true
show_patch = false        # terminal: print the patch text of each file
"""
