"""Rich terminal reporter: status colours, tables, coloured diffs."""

from __future__ import annotations

from typing import Iterable, List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from svnscope.status.coordinator import StatusSnapshot
from svnscope.status.tree import FileInfo
from svnscope.svn.models import (
    BlameResult,
    DiffResult,
    ExternalDef,
    InfoResult,
    LineType,
    ListResult,
    LogResult,
    RepoKind,
    StatusChar,
    StatusEntry,
)

_STATUS_STYLE = {
    StatusChar.CONFLICTED: "bold white on red",
    StatusChar.MISSING: "bold red",
    StatusChar.OBSTRUCTED: "bold red",
    StatusChar.MODIFIED: "bold yellow",
    StatusChar.DELETED: "red",
    StatusChar.REPLACED: "magenta",
    StatusChar.ADDED: "green",
    StatusChar.EXTERNAL: "cyan",
    StatusChar.UNVERSIONED: "bright_black",
    StatusChar.IGNORED: "dim",
    StatusChar.NORMAL: "",
}

_LINE_STYLE = {
    LineType.ADDED: "green",
    LineType.REMOVED: "red",
    LineType.HUNK_HEADER: "cyan",
    LineType.CONTEXT: "",
}

_LINE_MARKER = {
    LineType.ADDED: "+",
    LineType.REMOVED: "-",
    LineType.CONTEXT: " ",
}


def _console(console: Optional[Console]) -> Console:
    return console or Console()


def status_pill(status: StatusChar) -> Text:
    return Text(f" {status.value} ", style=_STATUS_STYLE.get(status, ""))


def _opt(value: Optional[object]) -> str:
    return "-" if value is None or value == "" else str(value)


def render_status(
    entries: Iterable[StatusEntry],
    *,
    title: str = "Status",
    console: Optional[Console] = None,
) -> None:
    console = _console(console)
    entries = list(entries)
    if not entries:
        console.print("[bold green]Working copy is clean.[/bold green]")
        return

    table = Table(title=title, title_style="bold", border_style="dim")
    table.add_column("St", justify="center", width=4)
    table.add_column("Path", style="magenta")
    table.add_column("Rev", justify="right", style="green")
    table.add_column("Author", style="cyan")
    table.add_column("Lock")
    for entry in entries:
        table.add_row(
            status_pill(entry.status),
            entry.path,
            _opt(entry.revision),
            _opt(entry.author),
            entry.lock.owner if entry.lock else "",
        )
    console.print(table)


def render_snapshot(snapshot: StatusSnapshot, *, console: Optional[Console] = None) -> None:
    changed = [e for e in snapshot.entries if e.status is not StatusChar.NORMAL]
    render_status(changed, title=f"Status of {snapshot.path}", console=console)


def render_tree(files: List[FileInfo], *, console: Optional[Console] = None) -> None:
    console = _console(console)
    table = Table(border_style="dim", show_header=True)
    table.add_column("St", justify="center", width=4)
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Rev", justify="right", style="green")
    table.add_column("Author", style="cyan")
    for info in files:
        status = info.status
        name = Text(info.name + ("/" if info.is_directory else ""))
        if info.is_directory:
            name.stylize("bold blue")
        table.add_row(
            status_pill(status.status) if status else Text(""),
            name,
            "" if info.is_directory else str(info.size),
            _opt(status.revision) if status else "",
            _opt(status.author) if status else "",
        )
    console.print(table)


def render_log(result: LogResult, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    if not result.entries:
        console.print("[dim]No log entries.[/dim]")
        return
    for entry in result.entries:
        console.print(
            f"[bold green]r{entry.revision}[/bold green] | [cyan]{entry.author}[/cyan] | "
            f"[dim]{entry.date}[/dim]"
        )
        for p in entry.paths:
            line = f"   {p.action.value or ' '} {p.path}"
            if p.copyfrom_path:
                line += f" (from {p.copyfrom_path}:{p.copyfrom_rev})"
            console.print(line, highlight=False)
        if entry.message:
            console.print()
            console.print(entry.message, highlight=False)
        console.print("[dim]" + "-" * 72 + "[/dim]")


def render_info(info: InfoResult, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    rows = [
        ("Path", info.path),
        ("Working Copy Root", _opt(info.working_copy_root)),
        ("URL", info.url),
        ("Relative URL", info.relative_url),
        ("Repository Root", info.repository_root),
        ("Repository UUID", info.repository_uuid),
        ("Revision", str(info.revision)),
        ("Node Kind", info.node_kind),
        ("Last Changed Author", info.last_changed_author),
        ("Last Changed Rev", str(info.last_changed_revision)),
        ("Last Changed Date", info.last_changed_date),
    ]
    for label, value in rows:
        console.print(f"[dim]{label + ':':<21}[/dim] {value}", highlight=False)


def render_diff(result: DiffResult, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    if result.is_binary:
        console.print("[yellow]Binary file; no textual diff.[/yellow]")
        return
    if not result.has_changes:
        console.print("[dim]No changes.[/dim]")
        return
    for diff_file in result.files:
        console.print(f"[bold]--- {diff_file.old_path}[/bold]", highlight=False)
        console.print(f"[bold]+++ {diff_file.new_path}[/bold]", highlight=False)
        for hunk in diff_file.hunks:
            for line in hunk.lines:
                text = line.content
                if line.type is not LineType.HUNK_HEADER:
                    text = _LINE_MARKER[line.type] + text
                console.print(Text(text, style=_LINE_STYLE[line.type]))


def render_blame(result: BlameResult, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    table = Table(title=result.path, title_style="bold", border_style="dim", show_edge=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Rev", justify="right", style="green")
    table.add_column("Author", style="cyan")
    table.add_column("Line", overflow="fold")
    for line in result.lines:
        table.add_row(
            str(line.line_number),
            str(line.revision) if line.revision else "-",
            line.author,
            Text(line.content),
        )
    console.print(table)


def render_list(result: ListResult, *, console: Optional[Console] = None) -> None:
    console = _console(console)
    table = Table(title=result.path, title_style="bold", border_style="dim")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Rev", justify="right", style="green")
    table.add_column("Author", style="cyan")
    table.add_column("Date", style="dim")
    table.add_column("Lock")
    for entry in result.entries:
        is_dir = entry.kind is RepoKind.DIR
        table.add_row(
            Text(entry.name + ("/" if is_dir else ""), style="bold blue" if is_dir else ""),
            _opt(entry.size),
            str(entry.revision),
            entry.author,
            entry.date,
            entry.lock_owner or "",
        )
    console.print(table)


def render_externals(externals: List[ExternalDef], *, console: Optional[Console] = None) -> None:
    console = _console(console)
    if not externals:
        console.print("[dim]No externals defined.[/dim]")
        return
    table = Table(title="Externals", title_style="bold", border_style="dim")
    table.add_column("Path", style="magenta")
    table.add_column("URL")
    table.add_column("Rev", justify="right", style="green")
    for ext in externals:
        rev = ext.revision if ext.revision is not None else ext.peg_revision
        table.add_row(ext.path, ext.url, _opt(rev))
    console.print(table)
