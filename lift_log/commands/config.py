"""Configuration commands."""

from __future__ import annotations

import typer

from lift_log.commands.common import get_state, print_json_payload
from lift_log.core.config import config_to_toml, save_config

app = typer.Typer(help="Inspect or create the config file")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    state = get_state(ctx)
    payload = {
        "config_path": str(state.config_path),
        "store_path": str(state.store_path),
        "config": state.config,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"config_path\t{state.config_path}")
        typer.echo(f"store_path\t{state.store_path}")
        return

    state.console.print(f"# {state.config_path}", highlight=False)
    state.console.print(f"# store: {state.store_path}", highlight=False)
    state.console.print(config_to_toml(state.config), highlight=False, markup=False)


@app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write the effective configuration to the config path."""
    state = get_state(ctx)

    if state.config_path.exists() and not force:
        typer.echo(f"Config file already exists: {state.config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    path = save_config(state.config, state.config_path)
    if state.json_output:
        print_json_payload(state, {"status": "written", "config_path": str(path)})
        return
    typer.echo(f"Wrote {path}")
