"""svnscope CLI: Typer application over the svn client facade."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from svnscope import __version__

app = typer.Typer(
    name="svnscope",
    help="Inspect Subversion working copies and repositories.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_FORMATS = ("terminal", "json")

ConfigOption = typer.Option(None, "--config", "-c", help="Path to .svnscope.toml")
FormatOption = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json")


def _config_root(path: str) -> Path:
    """Directory searched for .svnscope.toml: *path* itself or its parent."""
    if "://" in path:
        return Path.cwd()
    p = Path(path)
    return p if p.is_dir() else p.parent


def _client(path: str, config: Optional[str], fmt: str):
    """Validate options, load config, set up logging and return an SvnClient."""
    from svnscope.client import SvnClient
    from svnscope.config.loader import ConfigError, load_config
    from svnscope.log_config import configure_from

    if fmt not in _FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {fmt}")
        raise typer.Exit(code=2)

    try:
        cfg = load_config(_config_root(path), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    configure_from(cfg.logging)
    return SvnClient(cfg)


def _svn_failed(exc) -> typer.Exit:
    console.print(f"[bold red]svn error:[/bold red] {exc.message}")
    return typer.Exit(code=1)


def _emit(fmt: str, kind: str, payload, render_terminal) -> None:
    from svnscope.output import json_report

    if fmt == "json":
        print(json_report.render(kind, payload))
    else:
        render_terminal(payload)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    path: str = typer.Argument(".", help="Working-copy path"),
    deep: bool = typer.Option(False, "--deep", help="Recursive scan (cancellable, degrades to empty)"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """Show changed items in a working copy."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError
    from svnscope.svn.models import StatusChar

    client = _client(path, config, format)

    if deep:
        snapshot = client.deep_status(path)
        _emit(format, "status", snapshot, terminal.render_snapshot)
        return

    try:
        result = client.status(path, depth="immediates")
    except SvnError as exc:
        raise _svn_failed(exc) from exc

    changed = [e for e in result.entries if e.status is not StatusChar.NORMAL]
    _emit(
        format,
        "status",
        result,
        lambda _: terminal.render_status(changed, title=f"Status of {path}"),
    )


# ── tree ──────────────────────────────────────────────────────────────────────


@app.command()
def tree(
    path: str = typer.Argument(".", help="Working-copy directory"),
    deep: bool = typer.Option(False, "--deep", help="Roll up status from all descendants"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """List a directory with per-file status and folder rollups."""
    from svnscope.output import terminal
    from svnscope.status.tree import apply_status, list_directory

    if not Path(path).is_dir():
        console.print(f"[bold red]Not a directory:[/bold red] {path}")
        raise typer.Exit(code=2)

    client = _client(path, config, format)
    snapshot = client.deep_status(path) if deep else client.shallow_status(path)
    files = apply_status(list_directory(path), snapshot.direct, snapshot.entries)
    _emit(format, "tree", files, terminal.render_tree)


# ── log ───────────────────────────────────────────────────────────────────────


@app.command()
def log(
    path: str = typer.Argument(".", help="Working-copy path or URL"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum entries (default from config)"),
    start: Optional[int] = typer.Option(None, "--start", help="First revision"),
    end: Optional[int] = typer.Option(None, "--end", help="Last revision"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """Show commit history."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    client = _client(path, config, format)
    try:
        result = client.log(path, limit=limit, start_revision=start, end_revision=end)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "log", result, terminal.render_log)


# ── info ──────────────────────────────────────────────────────────────────────


@app.command()
def info(
    path: str = typer.Argument(".", help="Working-copy path or URL"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """Show repository and working-copy information."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    client = _client(path, config, format)
    try:
        result = client.info(path)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "info", result, terminal.render_info)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    path: str = typer.Argument(".", help="Working-copy path"),
    change: Optional[str] = typer.Option(None, "--change", "-c", help="Show the change made in revision N"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """Show local modifications (or one committed change) as a parsed diff."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    client = _client(path, config, format)
    try:
        result = client.diff(path, change)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "diff", result, terminal.render_diff)


# ── blame ─────────────────────────────────────────────────────────────────────


@app.command()
def blame(
    path: str = typer.Argument(..., help="File to annotate"),
    start: Optional[int] = typer.Option(None, "--start", help="First revision"),
    end: Optional[int] = typer.Option(None, "--end", help="Last revision"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """Show the revision and author of every line of a file."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    if (start is None) != (end is None):
        console.print("[bold red]--start and --end must be given together[/bold red]")
        raise typer.Exit(code=2)

    client = _client(path, config, format)
    try:
        result = client.blame(path, start, end)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "blame", result, terminal.render_blame)


# ── ls ────────────────────────────────────────────────────────────────────────


@app.command("ls")
def ls(
    url: str = typer.Argument(..., help="Repository URL"),
    revision: Optional[str] = typer.Option(None, "--revision", "-r", help="Revision to list"),
    depth: Optional[str] = typer.Option(None, "--depth", help="empty | files | immediates | infinity"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """List repository entries."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    client = _client(url, config, format)
    try:
        result = client.list(url, revision=revision, depth=depth)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "list", result, terminal.render_list)


# ── externals ─────────────────────────────────────────────────────────────────


@app.command()
def externals(
    path: str = typer.Argument(".", help="Working-copy path"),
    config: Optional[str] = ConfigOption,
    format: str = FormatOption,
) -> None:
    """List svn:externals definitions below a path."""
    from svnscope.output import terminal
    from svnscope.svn.errors import SvnError

    client = _client(path, config, format)
    try:
        result = client.externals(path)
    except SvnError as exc:
        raise _svn_failed(exc) from exc
    _emit(format, "externals", result, terminal.render_externals)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: str = typer.Argument(".", help="Working-copy root"),
) -> None:
    """Generate a starter .svnscope.toml."""
    from svnscope.config.defaults import DEFAULT_TOML
    from svnscope.config.loader import CONFIG_FILENAME

    config_path = Path(path) / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"svnscope {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """svnscope: inspect Subversion working copies and repositories."""
