"""gitdiffparse CLI: Typer application with numstat, raw, patch, parse and init commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gitdiffparse import __version__
from gitdiffparse.config.schema import OUTPUT_FORMATS, GitDiffParseConfig
from gitdiffparse.diff.models import DiffResult

app = typer.Typer(
    name="gitdiffparse",
    help="Typed summaries of git diff output.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_KINDS = ("numstat", "raw", "patch")


def _configure_logging(verbose: bool, debug: bool) -> None:
    if not (verbose or debug):
        return
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from gitdiffparse.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load_config(repo_root: Path, config: Optional[str]) -> GitDiffParseConfig:
    from gitdiffparse.config.loader import ConfigError, load_config

    try:
        return load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _apply_format(cfg: GitDiffParseConfig, format: Optional[str]) -> None:
    if format is None:
        return
    if format not in OUTPUT_FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)
    cfg.output.format = format  # type: ignore[assignment]


def _emit(
    result: DiffResult,
    cfg: GitDiffParseConfig,
    output: Optional[str],
    *,
    include_patch: bool = True,
) -> None:
    from gitdiffparse.output import json_report, terminal, yaml_report

    report_text: Optional[str] = None
    if cfg.output.format == "terminal":
        terminal.render(
            result,
            show_summary=cfg.output.show_summary,
            show_patch=cfg.output.show_patch and include_patch,
        )
    elif cfg.output.format == "json":
        report_text = json_report.render(result, include_patch=include_patch)
    elif cfg.output.format == "yaml":
        report_text = yaml_report.render(result, include_patch=include_patch)

    if report_text is None:
        if output:
            # Terminal output can't go to a file; write JSON instead
            Path(output).write_text(
                json_report.render(result, include_patch=include_patch), encoding="utf-8"
            )
        return

    if output:
        Path(output).write_text(report_text, encoding="utf-8")
    else:
        print(report_text)


def _run_diff(
    kind: str,
    commit1: Optional[str],
    commit2: Optional[str],
    *,
    cached: bool,
    merge_base: bool,
    dirstat: Optional[bool],
    find_copies: Optional[bool],
    no_renames: bool,
    paths: Optional[List[str]],
    format: Optional[str],
    output: Optional[str],
    config: Optional[str],
    include_patch: bool = True,
) -> None:
    from gitdiffparse.git.adapter import GitError, diff_numstat, diff_patch, diff_raw

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config)
    _apply_format(cfg, format)

    runner = {"numstat": diff_numstat, "raw": diff_raw, "patch": diff_patch}[kind]
    try:
        result = runner(
            repo_root,
            commit1,
            commit2,
            cached=cached,
            merge_base=merge_base,
            find_renames=cfg.diff.find_renames and not no_renames,
            find_copies=cfg.diff.find_copies if find_copies is None else find_copies,
            dirstat=cfg.diff.dirstat if dirstat is None else dirstat,
            pathspecs=paths or (),
            timeout=cfg.diff.timeout,
        )
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    logging.getLogger(__name__).info("Parsed %d file(s) from git diff --%s", len(result.files), kind)
    _emit(result, cfg, output, include_patch=include_patch)


# ── shared options ────────────────────────────────────────────────────────────

_COMMIT1 = typer.Argument(None, help="First commit (default: working tree vs index)")
_COMMIT2 = typer.Argument(None, help="Second commit")
_CACHED = typer.Option(False, "--cached", "--staged", help="Compare the index with HEAD")
_MERGE_BASE = typer.Option(False, "--merge-base", help="Use the merge base of the commits")
_DIRSTAT = typer.Option(None, "--dirstat/--no-dirstat", help="Include directory percentages")
_FIND_COPIES = typer.Option(None, "--find-copies/--no-find-copies", help="Detect copies (-C)")
_NO_RENAMES = typer.Option(False, "--no-renames", help="Report renames as delete + add")
_PATHS = typer.Option(None, "--path", "-p", help="Limit the diff to this pathspec (repeatable)")
_FORMAT = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml")
_OUTPUT = typer.Option(None, "--output", "-o", help="Write report to file")
_CONFIG = typer.Option(None, "--config", "-c", help="Path to .gitdiffparse.toml")
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Verbose output")
_DEBUG = typer.Option(False, "--debug", help="Debug output")
_NO_PATCH_TEXT = typer.Option(
    False, "--no-patch-text", help="Leave each file's patch text out of the report"
)


# ── numstat / raw / patch ─────────────────────────────────────────────────────


@app.command()
def numstat(
    commit1: Optional[str] = _COMMIT1,
    commit2: Optional[str] = _COMMIT2,
    cached: bool = _CACHED,
    merge_base: bool = _MERGE_BASE,
    dirstat: Optional[bool] = _DIRSTAT,
    find_copies: Optional[bool] = _FIND_COPIES,
    no_renames: bool = _NO_RENAMES,
    paths: Optional[List[str]] = _PATHS,
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    config: Optional[str] = _CONFIG,
    verbose: bool = _VERBOSE,
    debug: bool = _DEBUG,
) -> None:
    """Per-file insertions and deletions."""
    _configure_logging(verbose, debug)
    _run_diff(
        "numstat", commit1, commit2, cached=cached, merge_base=merge_base,
        dirstat=dirstat, find_copies=find_copies, no_renames=no_renames,
        paths=paths, format=format, output=output, config=config,
    )


@app.command()
def raw(
    commit1: Optional[str] = _COMMIT1,
    commit2: Optional[str] = _COMMIT2,
    cached: bool = _CACHED,
    merge_base: bool = _MERGE_BASE,
    dirstat: Optional[bool] = _DIRSTAT,
    find_copies: Optional[bool] = _FIND_COPIES,
    no_renames: bool = _NO_RENAMES,
    paths: Optional[List[str]] = _PATHS,
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    config: Optional[str] = _CONFIG,
    verbose: bool = _VERBOSE,
    debug: bool = _DEBUG,
) -> None:
    """Per-file status, modes and object ids, with line counts."""
    _configure_logging(verbose, debug)
    _run_diff(
        "raw", commit1, commit2, cached=cached, merge_base=merge_base,
        dirstat=dirstat, find_copies=find_copies, no_renames=no_renames,
        paths=paths, format=format, output=output, config=config,
    )


@app.command()
def patch(
    commit1: Optional[str] = _COMMIT1,
    commit2: Optional[str] = _COMMIT2,
    cached: bool = _CACHED,
    merge_base: bool = _MERGE_BASE,
    dirstat: Optional[bool] = _DIRSTAT,
    find_copies: Optional[bool] = _FIND_COPIES,
    no_renames: bool = _NO_RENAMES,
    paths: Optional[List[str]] = _PATHS,
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    config: Optional[str] = _CONFIG,
    no_patch_text: bool = _NO_PATCH_TEXT,
    verbose: bool = _VERBOSE,
    debug: bool = _DEBUG,
) -> None:
    """Full per-file patches, with status and line counts."""
    _configure_logging(verbose, debug)
    _run_diff(
        "patch", commit1, commit2, cached=cached, merge_base=merge_base,
        dirstat=dirstat, find_copies=find_copies, no_renames=no_renames,
        paths=paths, format=format, output=output, config=config,
        include_patch=not no_patch_text,
    )


# ── parse ─────────────────────────────────────────────────────────────────────


@app.command()
def parse(
    kind: str = typer.Argument(..., help="Output kind: numstat | raw | patch"),
    file: Optional[str] = typer.Argument(None, help="File with captured git output (default: stdin)"),
    dirstat: bool = typer.Option(False, "--dirstat", help="Input ends with a --dirstat section"),
    format: Optional[str] = _FORMAT,
    output: Optional[str] = _OUTPUT,
    config: Optional[str] = _CONFIG,
    no_patch_text: bool = _NO_PATCH_TEXT,
    debug: bool = _DEBUG,
) -> None:
    """Parse already-captured git diff output.

    Settings come from .gitdiffparse.toml in the current directory (or
    --config) and GITDIFFPARSE_* variables; flags override both.
    """
    from gitdiffparse.diff import numstat as numstat_parser
    from gitdiffparse.diff import patch as patch_parser
    from gitdiffparse.diff import raw as raw_parser

    _configure_logging(False, debug)

    if kind not in _KINDS:
        console.print(f"[bold red]Invalid kind:[/bold red] {kind}")
        raise typer.Exit(code=2)

    cfg = _load_config(Path.cwd(), config)
    _apply_format(cfg, format)

    from_stdin = file is None or file == "-"
    source = "stdin" if from_stdin else file
    try:
        if from_stdin:
            text = sys.stdin.read()
        else:
            text = Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {source}: {exc}")
        raise typer.Exit(code=2) from exc

    parser = {"numstat": numstat_parser, "raw": raw_parser, "patch": patch_parser}[kind]
    _emit(
        parser.parse(text, include_dirstat=dirstat), cfg, output,
        include_patch=not no_patch_text,
    )


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitdiffparse.toml in the repo root."""
    from gitdiffparse.config.defaults import DEFAULT_TOML
    from gitdiffparse.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitdiffparse {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """Typed summaries of git diff output."""
