"""Summary statistics and chart series commands."""

from __future__ import annotations

from typing import Any, Dict, Optional

import typer
from rich.table import Table

from lift_log.commands.common import (
    chart_limit,
    get_state,
    open_store,
    print_json_payload,
    units,
    view_state,
)
from lift_log.core.analysis import derive_view
from lift_log.core.constants import ALL_EXERCISES, EMPTY_CHART_MESSAGE, STAT_LABELS, VIEW_CHART, VIEW_LOG
from lift_log.core.state import CLIState
from lift_log.utils.formatting import format_amount, format_number


def render_stats(state: CLIState, stats: Dict[str, Any]) -> None:
    unit_label = units(state)
    table = Table(title="Stats")
    for label in STAT_LABELS.values():
        table.add_column(label, justify="right")
    table.add_row(
        format_amount(stats["maxWeight"], unit_label),
        format_amount(stats["totalVolume"], unit_label),
        format_amount(stats["avgWeight"], unit_label),
        str(stats["totalWorkouts"]),
    )
    state.console.print(table)


def stats_command(
    ctx: typer.Context,
    exercise: Optional[str] = typer.Option(None, "--exercise", "-e", help="Only include this exercise"),
) -> None:
    """Show max/average weight, total volume and entry count."""
    state = get_state(ctx)
    store = open_store(state)
    view = derive_view(store.workouts, view_state(state, exercise, VIEW_LOG))
    stats = view["stats"]

    if state.json_output:
        print_json_payload(state, {"filter": view["filter"], "stats": stats})
        return

    if stats is None:
        message = "No workouts logged"
        if view["filter"] != ALL_EXERCISES:
            message = f"No workouts logged for {view['filter']}"
        if state.plain_output:
            typer.echo("stats\tnone")
        else:
            state.console.print(message, highlight=False)
        return

    if state.plain_output:
        for key in STAT_LABELS:
            typer.echo(f"{key}\t{stats[key]}")
        return

    render_stats(state, stats)


def chart_command(
    ctx: typer.Context,
    exercise: Optional[str] = typer.Option(None, "--exercise", "-e", help="Only chart this exercise"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Number of most recent points (default from config)"),
) -> None:
    """Show the weight-progress series: heaviest entry per exercise per day."""
    state = get_state(ctx)
    max_points = chart_limit(state, limit)
    store = open_store(state)
    view = derive_view(store.workouts, view_state(state, exercise, VIEW_CHART), chart_limit=max_points)
    points = view["chart"]

    if state.json_output:
        print_json_payload(state, {"filter": view["filter"], "points": points})
        return

    if state.plain_output:
        typer.echo("date\texercise\tweight")
        for point in points:
            typer.echo(f"{point['displayDate']}\t{point['exercise']}\t{format_number(point['weight'])}")
        return

    if not points:
        state.console.print(EMPTY_CHART_MESSAGE)
        return

    unit_label = units(state)
    table = Table(title="Weight Progress")
    table.add_column("Date")
    table.add_column("Exercise")
    table.add_column(f"Weight ({unit_label})" if unit_label else "Weight", justify="right")
    for point in points:
        table.add_row(point["displayDate"], point["exercise"], format_number(point["weight"]))
    state.console.print(table)
