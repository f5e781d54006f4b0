"""Rich terminal reporter: branch line, entry table, summary."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from gitreport.status.models import (
    EntryKind,
    EntryStatus,
    Report,
    StatusEntry,
)

_KIND_STYLE = {
    EntryKind.ORDINARY: "cyan",
    EntryKind.RENAMED: "magenta",
    EntryKind.UNMERGED: "bold white on red",
    EntryKind.UNTRACKED: "yellow",
    EntryKind.IGNORED: "dim",
}

_STATUS_LETTER = {
    EntryStatus.UNMODIFIED: ".",
    EntryStatus.MODIFIED: "M",
    EntryStatus.TYPE_CHANGED: "T",
    EntryStatus.ADDED: "A",
    EntryStatus.DELETED: "D",
    EntryStatus.RENAMED: "R",
    EntryStatus.COPIED: "C",
    EntryStatus.UPDATED_BUT_UNMERGED: "U",
}


def _letter(status: Optional[EntryStatus]) -> str:
    if status is None:
        return " "
    return _STATUS_LETTER.get(status, "?")


def _kind_pill(entry: StatusEntry) -> Text:
    return Text(f" {entry.kind.value} ", style=_KIND_STYLE.get(entry.kind, ""))


def _describe(entry: StatusEntry) -> str:
    if entry.kind == EntryKind.RENAMED:
        return f"{entry.original_path} -> {entry.path} ({entry.similarity_score}%)"  # type: ignore[union-attr]
    if entry.kind == EntryKind.UNMERGED:
        return f"{entry.path} [{entry.conflict_type.value}]"  # type: ignore[union-attr]
    return entry.path


def branch_line(report: Report) -> str:
    branch = report.branch
    if branch is None:
        return "[dim]No branch information.[/dim]"
    name = "[yellow](detached)[/yellow]" if branch.detached else f"[bold]{escape(branch.name)}[/bold]"
    oid = branch.oid[:12] if branch.oid else "(no commits yet)"
    line = f"On {name} at {oid}"
    if branch.has_upstream:
        line += f", tracking {escape(branch.upstream)} (+{branch.ahead or 0} -{branch.behind or 0})"
    return line


def render(report: Report, *, show_summary: bool = True, console: Optional[Console] = None) -> None:
    """Print a status report to the terminal using Rich."""
    console = console or Console(stderr=True)

    console.print(branch_line(report))
    if report.stash.count:
        console.print(f"[dim]Stash entries:[/dim] {report.stash.count}")

    if not report.entries:
        console.print("[bold green]✅ Working tree clean.[/bold green]")
        return

    table = Table(show_lines=False, border_style="dim")
    table.add_column("Kind", justify="center", width=12)
    table.add_column("XY", justify="center", style="green")
    table.add_column("Path")

    for entry in report.entries:
        xy = f"{_letter(entry.index_status)}{_letter(entry.worktree_status)}"
        table.add_row(_kind_pill(entry), xy, Text(_describe(entry)))

    console.print(table)

    if show_summary:
        _print_summary(console, report)

    if report.merge_conflict:
        console.print()
        console.print(
            f"[bold red]❌ {len(report.unmerged)} unresolved merge conflict(s).[/bold red]"
        )


def _print_summary(console: Console, report: Report) -> None:
    console.print()
    console.print(f"[dim]Staged:[/dim]        {len(report.staged)}")
    console.print(f"[dim]Fully staged:[/dim]  {len(report.fully_staged)}")
    console.print(f"[dim]Unstaged:[/dim]      {len(report.unstaged)}")
    console.print(f"[dim]Untracked:[/dim]     {len(report.untracked)}")
    console.print(f"[dim]Ignored:[/dim]       {len(report.ignored)}")
    console.print(f"[dim]Unmerged:[/dim]      {len(report.unmerged)}")
