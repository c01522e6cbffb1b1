from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from dvcbridge.commands import files_argument
from dvcbridge.config import parse_extension_list
from dvcbridge.context import BridgeContext
from dvcbridge.errors import BridgeError
from dvcbridge.models import CommandResult, RemoteRecord
from dvcbridge.notices import ConsoleNotifier
from dvcbridge.scanner import resolve_vault_paths


app = typer.Typer(help="Drive dvc from a notes vault")
settings_app = typer.Typer(help="Show or change the vault's sync settings")
app.add_typer(settings_app, name="settings")
console = Console()


@dataclass(slots=True)
class CliState:
    vault: Path
    show: bool


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _open_context(state: CliState) -> BridgeContext:
    return BridgeContext.open(state.vault, notify=ConsoleNotifier(console))


def _exit_code(result: CommandResult | None) -> int:
    if result is None:
        return 0
    return 0 if result.ok else 1


def _render_remotes(records: list[RemoteRecord]) -> None:
    if not records:
        console.print("[yellow]No remotes configured.[/yellow]")
        return

    table = Table(title="Remotes")
    table.add_column("Name")
    table.add_column("Path")
    for record in records:
        table.add_row(record.name, record.path or Text("-", style="dim"))
    console.print(table)


def _render_path_summary(title: str, paths: list[str], style: str) -> None:
    if not paths:
        return
    console.print(Text(f"{title} ({len(paths)}):", style=style))
    for path in paths:
        console.print(f"  {path}")


def _dispatch(state: CliState, operation: str, paths: list[str] | None) -> int:
    async def _run() -> CommandResult:
        context = _open_context(state)
        argument = files_argument(resolve_vault_paths(context.vault_root, tuple(paths or ())))
        method = getattr(context.dispatcher, operation)
        return await method(argument, show=state.show)

    try:
        return _exit_code(asyncio.run(_run()))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        return 1


@app.callback()
def main(
    ctx: typer.Context,
    vault: Path = typer.Option(
        Path("."),
        "--vault",
        help="Vault root directory (working directory for dvc).",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report failures."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)
    ctx.obj = CliState(vault=vault.resolve(), show=not quiet)


async def _init_async(state: CliState) -> int:
    context = _open_context(state)
    return _exit_code(await context.dispatcher.init(show=state.show))


@app.command()
def init(ctx: typer.Context) -> None:
    """Initialize git and dvc tracking in the vault."""
    try:
        code = asyncio.run(_init_async(ctx.obj))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1
    raise typer.Exit(code=code)


async def _status_async(state: CliState) -> int:
    context = _open_context(state)
    return _exit_code(await context.dispatcher.status(show=state.show))


@app.command()
def status(ctx: typer.Context) -> None:
    """Show dvc status for the vault."""
    try:
        code = asyncio.run(_status_async(ctx.obj))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1
    raise typer.Exit(code=code)


async def _remote_async(state: CliState) -> int:
    context = _open_context(state)
    result, records = await context.dispatcher.list_remotes(show=False)
    if result.ok:
        _render_remotes(records)
    return _exit_code(result)


@app.command()
def remote(ctx: typer.Context) -> None:
    """List the configured dvc remotes."""
    try:
        code = asyncio.run(_remote_async(ctx.obj))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1
    raise typer.Exit(code=code)


@app.command()
def add(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(..., help="Files to start tracking."),
) -> None:
    """Track files with dvc."""
    raise typer.Exit(code=_dispatch(ctx.obj, "add", paths))


@app.command()
def push(
    ctx: typer.Context,
    paths: list[str] | None = typer.Argument(None, help="Files to push. Defaults to all."),
) -> None:
    """Upload tracked data to the remote."""
    raise typer.Exit(code=_dispatch(ctx.obj, "push", paths))


@app.command()
def pull(
    ctx: typer.Context,
    paths: list[str] | None = typer.Argument(None, help="Files to pull. Defaults to all."),
) -> None:
    """Download tracked data from the remote."""
    raise typer.Exit(code=_dispatch(ctx.obj, "pull", paths))


@app.command()
def remove(
    ctx: typer.Context,
    paths: list[str] = typer.Argument(..., help="Marker files to stop tracking."),
) -> None:
    """Stop tracking files with dvc."""
    raise typer.Exit(code=_dispatch(ctx.obj, "remove", paths))


async def _gc_async(state: CliState, cloud: bool) -> int:
    context = _open_context(state)
    if cloud:
        result = await context.dispatcher.gc_workspace_and_remote(show=state.show)
    else:
        result = await context.dispatcher.gc_workspace(show=state.show)
    return _exit_code(result)


@app.command()
def gc(
    ctx: typer.Context,
    cloud: bool = typer.Option(
        False,
        "--cloud",
        help="Also remove unused data from the remote.",
    ),
) -> None:
    """Garbage-collect cached data not used by the workspace."""
    try:
        code = asyncio.run(_gc_async(ctx.obj, cloud))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1
    raise typer.Exit(code=code)


@app.command()
def files(ctx: typer.Context) -> None:
    """List the dvc marker files in the vault."""
    try:
        context = _open_context(ctx.obj)
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    markers = context.index.refresh()
    if not markers:
        console.print("[yellow]No tracked files in this vault.[/yellow]")
        return
    _render_path_summary("Tracked", [marker.path for marker in markers], "green")


async def _open_async(state: CliState, note: str) -> int:
    context = _open_context(state)
    document = resolve_vault_paths(context.vault_root, (note,))[0]
    if not context.settings.autopull:
        console.print("[yellow]Auto pull is disabled.[/yellow] Enable it with `dvcb settings autopull true`.")
        return 0
    result = await context.trigger.on_file_open(document, show=state.show)
    if result is None:
        console.print("[green]No tracked attachments to pull.[/green]")
    return _exit_code(result)


@app.command(name="open")
def open_note(
    ctx: typer.Context,
    note: str = typer.Argument(..., help="Note whose tracked attachments should be pulled."),
) -> None:
    """Handle opening a note: pull its tracked embedded attachments."""
    try:
        code = asyncio.run(_open_async(ctx.obj, note))
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        code = 1
    raise typer.Exit(code=code)


def _settings_context(ctx: typer.Context) -> BridgeContext:
    try:
        return _open_context(ctx.obj)
    except BridgeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)


@settings_app.command("show")
def settings_show(ctx: typer.Context) -> None:
    """Print the current settings."""
    context = _settings_context(ctx)
    table = Table(title=str(context.settings_path))
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("autostage", str(context.settings.autostage))
    table.add_row("autopull", str(context.settings.autopull))
    table.add_row("autopullExtension", " ".join(context.settings.autopull_extensions))
    console.print(table)


@settings_app.command("autostage")
def settings_autostage(ctx: typer.Context, enabled: bool = typer.Argument(...)) -> None:
    """Stage files in git after `dvc add`."""
    context = _settings_context(ctx)
    result = asyncio.run(context.dispatcher.set_autostage(enabled))
    context.settings.autostage = enabled
    path = context.save_settings()
    console.print(f"autostage = {enabled} ({path})")
    raise typer.Exit(code=_exit_code(result))


@settings_app.command("autopull")
def settings_autopull(ctx: typer.Context, enabled: bool = typer.Argument(...)) -> None:
    """Pull tracked attachments when a note is opened."""
    context = _settings_context(ctx)
    context.settings.autopull = enabled
    path = context.save_settings()
    console.print(f"autopull = {enabled} ({path})")


@settings_app.command("extensions")
def settings_extensions(
    ctx: typer.Context,
    value: str = typer.Argument("", help="Extensions separated by spaces, e.g. \"mp4 png\"."),
) -> None:
    """Set the attachment extensions that auto pull reacts to."""
    context = _settings_context(ctx)
    context.settings.autopull_extensions = parse_extension_list(value)
    path = context.save_settings()
    console.print(f"autopullExtension = {context.settings.autopull_extensions} ({path})")
