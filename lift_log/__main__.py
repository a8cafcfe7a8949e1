"""Entry point for lift."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from lift_log import __version__
from lift_log.commands import config as config_commands
from lift_log.commands import motto as motto_commands
from lift_log.commands.export import export_command
from lift_log.commands.log import add_command, delete_command, exercises_command, log_command
from lift_log.commands.stats import chart_command, stats_command
from lift_log.core.config import ConfigError, default_config_path, load_config, resolve_store_path
from lift_log.core.state import CLIState
from lift_log.utils.log import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Strength-training workout log",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    store: Optional[Path] = typer.Option(None, "--store", help="Path to the workout store file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        store_path=resolve_store_path(cfg, explicit=store),
        console=console,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("add")(add_command)
app.command("delete")(delete_command)
app.command("log")(log_command)
app.command("stats")(stats_command)
app.command("chart")(chart_command)
app.command("exercises")(exercises_command)
app.command("export")(export_command)
app.add_typer(motto_commands.app, name="motto")
app.add_typer(config_commands.app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
