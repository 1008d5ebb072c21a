"""Rich terminal reporter for file tables, totals and dirstat."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from gitdiffparse.diff.models import DiffResult, DirstatInfo, FileStatus, PatchFile, RawFile

_STATUS_STYLE = {
    FileStatus.ADDED: "bold green",
    FileStatus.MODIFIED: "bold yellow",
    FileStatus.DELETED: "bold red",
    FileStatus.RENAMED: "bold cyan",
    FileStatus.COPIED: "bold blue",
    FileStatus.TYPE_CHANGED: "bold magenta",
    FileStatus.UNKNOWN: "dim",
}

_STATUS_LETTER = {
    FileStatus.ADDED: "A",
    FileStatus.MODIFIED: "M",
    FileStatus.DELETED: "D",
    FileStatus.RENAMED: "R",
    FileStatus.COPIED: "C",
    FileStatus.TYPE_CHANGED: "T",
    FileStatus.UNKNOWN: "?",
}


def _status_cell(status: FileStatus, similarity: Optional[int]) -> Text:
    label = _STATUS_LETTER[status]
    if similarity is not None:
        label = f"{label}{similarity:03d}"
    return Text(label, style=_STATUS_STYLE[status])


def render(
    result: DiffResult,
    *,
    show_summary: bool = True,
    show_patch: bool = False,
    console: Optional[Console] = None,
) -> None:
    """Print a DiffResult to the terminal using Rich."""
    console = console or Console()

    if not result.files:
        console.print("[dim]No changes.[/dim]")
    else:
        _print_files(console, result)

    if show_patch:
        for f in result.files:
            if isinstance(f, PatchFile) and f.patch:
                console.print()
                console.print(Syntax(f.patch, "diff", word_wrap=True))

    if result.dirstat is not None:
        _print_dirstat(console, result.dirstat)

    if show_summary:
        _print_summary(console, result)


def _print_files(console: Console, result: DiffResult) -> None:
    detailed = any(isinstance(f, RawFile) for f in result.files)

    table = Table(title="Changed files", title_style="bold", border_style="dim")
    if detailed:
        table.add_column("Status", justify="center")
    table.add_column("Path", style="magenta")
    table.add_column("From", style="dim")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    if detailed:
        table.add_column("Binary", justify="center")

    for f in result.files:
        counts = [str(f.insertions), str(f.deletions)]
        if isinstance(f, RawFile):
            src_path = f.src_path if f.src_path != f.path else None
            table.add_row(
                _status_cell(f.status, f.similarity),
                f.path or "",
                src_path or "",
                *counts,
                "yes" if f.binary else "",
            )
        else:
            table.add_row(f.path, f.src_path or "", *counts)

    console.print(table)


def _print_dirstat(console: Console, dirstat: DirstatInfo) -> None:
    table = Table(title="Directory changes", title_style="bold", border_style="dim")
    table.add_column("%", justify="right", style="cyan")
    table.add_column("Directory", style="magenta")
    for entry in dirstat:
        table.add_row(f"{entry.percentage:.1f}", entry.directory)
    console.print(table)


def _print_summary(console: Console, result: DiffResult) -> None:
    console.print()
    console.print(f"[dim]Files changed:[/dim]  {result.files_changed}")
    console.print(f"[dim]Insertions:[/dim]     [green]{result.total_insertions}[/green]")
    console.print(f"[dim]Deletions:[/dim]      [red]{result.total_deletions}[/red]")
