"""gitreport CLI: Typer application with status, run, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console

from gitreport import __version__

app = typer.Typer(
    name="gitreport",
    help="Run git and report its status as structured data.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(debug: bool) -> None:
    if not debug:
        return
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _worktree_root(cwd: Path, cfg) -> Optional[Path]:
    """Top level of the worktree containing *cwd*, None outside a worktree."""
    from gitreport.git import command_line

    result = command_line.run(
        "rev-parse", "--show-toplevel",
        git_chdir=cwd, config=cfg, chomp=True, raise_on_error=False,
    )
    if not result.success or not result.stdout:
        return None
    return Path(result.stdout).resolve()


def _load_config(config_override: Optional[str] = None):
    """Load config from --config, the cwd, or the enclosing worktree root.

    The result becomes the process-wide config. Exits 2 on a bad config file;
    git errors from the worktree lookup propagate to the caller.
    """
    from gitreport.config.loader import ConfigError, find_config_file, load_config
    from gitreport.git.command_line import set_config

    cwd = Path.cwd()
    try:
        cfg = load_config(cwd, config_override)
        if config_override is None and find_config_file(cwd) is None:
            root = _worktree_root(cwd, cfg)
            if root is not None and root != cwd.resolve():
                cfg = load_config(root)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    set_config(cfg)
    return cfg


def _open_worktree(config_override: Optional[str]):
    """Open the worktree around the cwd and load its config, exit 2 on failure."""
    from gitreport.command.errors import GitReportError
    from gitreport.git.worktree import Worktree

    try:
        cfg = _load_config(config_override)
        worktree = Worktree.open(Path.cwd(), config=cfg)
    except GitReportError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return worktree, cfg


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    path_specs: Optional[List[str]] = typer.Argument(None, help="Limit the report to these paths"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitreport.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    untracked_files: Optional[str] = typer.Option(None, "--untracked-files", help="no | normal | all"),
    ignored: Optional[str] = typer.Option(None, "--ignored", help="traditional | no | matching"),
    ignore_submodules: Optional[str] = typer.Option(
        None, "--ignore-submodules", help="none | untracked | dirty | all"
    ),
    debug: bool = typer.Option(False, "--debug", help="Log every git invocation"),
) -> None:
    """Report branch, stash, and per-path status of the current worktree."""
    from gitreport.command.errors import GitReportError
    from gitreport.config.schema import OUTPUT_FORMATS
    from gitreport.output import json_report, terminal

    _configure_logging(debug)
    worktree, cfg = _open_worktree(config)

    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]

    try:
        report = worktree.status(
            *(path_specs or []),
            untracked_files=untracked_files or cfg.status.untracked_files,
            ignored=ignored or cfg.status.ignored,
            ignore_submodules=ignore_submodules or cfg.status.ignore_submodules,
        )
    except GitReportError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render(report))
    else:
        terminal.render(report, show_summary=cfg.output.show_summary)


# ── run ───────────────────────────────────────────────────────────────────────


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    args: List[str] = typer.Argument(..., help="git subcommand and its arguments"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Kill git after this many seconds"),
    chomp: bool = typer.Option(False, "--chomp", help="Strip one trailing newline from the output"),
    normalize_encoding: bool = typer.Option(
        False, "--normalize-encoding", help="Transcode output to UTF-8"
    ),
    debug: bool = typer.Option(False, "--debug", help="Log the git invocation"),
) -> None:
    """Run an arbitrary git command and print its output."""
    from gitreport.command.errors import CommandLineError, GitReportError
    from gitreport.git import command_line

    _configure_logging(debug)

    options = {"chomp": chomp}
    if timeout is not None:
        options["timeout_after"] = timeout
    if normalize_encoding:
        options["normalize_encoding"] = True

    try:
        _load_config()
        result = command_line.run(*args, **options)
    except CommandLineError as exc:
        console.print(f"[bold red]git failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    except GitReportError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if result.stdout:
        typer.echo(result.stdout, nl=chomp)
    if result.stderr:
        typer.echo(result.stderr, err=True, nl=chomp)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitreport.toml in the worktree root."""
    from gitreport.config.defaults import DEFAULT_TOML
    from gitreport.config.loader import CONFIG_FILENAME

    worktree, _ = _open_worktree(None)
    config_path = worktree.path / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _git_version() -> Tuple[int, ...]:
    from gitreport.git.binary import GitBinary, default_binary_path
    from gitreport.git.command_line import get_config

    git = get_config().git
    return GitBinary(git.binary_path or default_binary_path()).version(git.timeout_after)


def _version_callback(value: bool) -> None:
    if not value:
        return
    from gitreport.command.errors import GitReportError

    print(f"gitreport {__version__}")
    try:
        _load_config()
        print(f"git {'.'.join(str(part) for part in _git_version())}")
    except GitReportError as exc:
        console.print(f"[yellow]git version unavailable:[/yellow] {exc}")
    raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitreport: run git and report its status as structured data."""
