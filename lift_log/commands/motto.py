"""Motto commands."""

from __future__ import annotations

import typer

from lift_log.commands.common import get_state, open_store, print_json_payload, storage_errors
from lift_log.core.constants import DEFAULT_MOTTO
from lift_log.core.state import CLIState

app = typer.Typer(help="Show or change your training motto")


def _report(state: CLIState, motto: str, status: str) -> None:
    if state.json_output:
        print_json_payload(state, {"status": status, "motto": motto})
        return
    if state.plain_output:
        typer.echo(motto)
        return
    state.console.print(f"[bold]{motto}[/bold]", highlight=False)


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the current motto."""
    state = get_state(ctx)
    store = open_store(state)
    _report(state, store.motto, "ok")


@app.command("set")
def set_command(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="New motto; blank resets to the default"),
) -> None:
    """Replace the motto."""
    state = get_state(ctx)
    store = open_store(state)
    with storage_errors(state):
        motto = store.save_motto(text)
    _report(state, motto, "saved")


@app.command("edit")
def edit_command(ctx: typer.Context) -> None:
    """Edit the motto interactively, starting from the current one."""
    state = get_state(ctx)
    store = open_store(state)
    editor = store.edit_motto()

    try:
        text = typer.prompt("Motto", default=editor.buffer)
    except typer.Abort:
        editor.cancel()
        _report(state, store.motto, "cancelled")
        raise typer.Exit(code=0)

    editor.update(text)
    with storage_errors(state):
        motto = editor.save()
    _report(state, motto, "saved")


@app.command("reset")
def reset_command(ctx: typer.Context) -> None:
    """Restore the default motto."""
    state = get_state(ctx)
    store = open_store(state)
    with storage_errors(state):
        motto = store.save_motto(DEFAULT_MOTTO)
    _report(state, motto, "saved")
