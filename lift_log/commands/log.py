"""Workout logging commands: add, delete, log, exercises."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from lift_log.commands.common import (
    get_state,
    open_store,
    print_json_payload,
    storage_errors,
    units,
    view_state,
)
from lift_log.commands.stats import render_stats
from lift_log.core.analysis import derive_view, unique_exercises
from lift_log.core.constants import ALL_EXERCISES, EMPTY_LOG_MESSAGE, INCOMPLETE_FORM_MESSAGE, VIEW_LOG
from lift_log.core.models import ValidationError
from lift_log.utils.formatting import format_amount, to_fixed


def add_command(
    ctx: typer.Context,
    exercise: str = typer.Option("", "--exercise", "-e", help="Exercise name, e.g. 'Bench Press'"),
    weight: str = typer.Option("", "--weight", "-w", help="Weight, a number or range like 100-110"),
    reps: str = typer.Option("", "--reps", "-r", help="Reps, a number or range"),
    sets: str = typer.Option("", "--sets", "-s", help="Sets, a number or range"),
) -> None:
    """Log a workout entry."""
    state = get_state(ctx)
    store = open_store(state)

    try:
        with storage_errors(state):
            entry = store.add_workout(exercise=exercise, weight=weight, reps=reps, sets=sets)
    except ValidationError as exc:
        if state.json_output:
            print_json_payload(state, {"status": "rejected", "error": str(exc)})
        elif state.plain_output:
            typer.echo(f"error\t{exc}")
        else:
            state.console.print(f"[red]{INCOMPLETE_FORM_MESSAGE}[/red]")
        raise typer.Exit(code=1)

    payload = {"status": "created", "workout": entry.to_dict()}
    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"id\t{entry.id}")
        return

    state.console.print(
        f"Logged {entry.exercise}: {format_amount(entry.weight, units(state))} "
        f"x {entry.reps} reps x {entry.sets} sets (id {entry.id})",
        highlight=False,
    )


def delete_command(
    ctx: typer.Context,
    workout_id: int = typer.Argument(..., help="Workout ID"),
    force: bool = typer.Option(False, "--force", help="Skip confirmation prompt"),
) -> None:
    """Delete workout by ID."""
    state = get_state(ctx)
    store = open_store(state)

    if not force:
        confirmed = typer.confirm(f"Delete workout {workout_id}?", default=False)
        if not confirmed:
            raise typer.Exit(code=0)

    with storage_errors(state):
        removed = store.delete_workout(workout_id)

    payload = {"status": "deleted" if removed else "not_found", "workoutId": workout_id}
    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"status\t{payload['status']}")
        typer.echo(f"workout_id\t{workout_id}")
        return

    if removed is None:
        state.console.print(f"No workout with id {workout_id}")
        return
    state.console.print(f"Deleted workout {workout_id} ({removed.exercise}, {removed.display_date})")


def log_command(
    ctx: typer.Context,
    exercise: Optional[str] = typer.Option(None, "--exercise", "-e", help="Only show this exercise"),
) -> None:
    """Show the workout history with summary stats."""
    state = get_state(ctx)
    store = open_store(state)
    view = derive_view(store.workouts, view_state(state, exercise, VIEW_LOG))
    unit_label = units(state)

    if state.json_output:
        print_json_payload(
            state,
            {"filter": view["filter"], "workouts": view["workouts"], "stats": view["stats"]},
        )
        return

    if state.plain_output:
        typer.echo("id\tdate\texercise\tweight\treps\tsets\tvolume")
        for row in view["workouts"]:
            typer.echo(
                "\t".join(
                    [
                        str(row["id"]),
                        row["displayDate"],
                        row["exercise"],
                        row["weight"],
                        row["reps"],
                        row["sets"],
                        to_fixed(row["volume"], 0),
                    ]
                )
            )
        typer.echo(f"total\t{len(view['workouts'])}")
        return

    if view["stats"]:
        render_stats(state, view["stats"])

    title = "Workout History"
    if view["filter"] != ALL_EXERCISES:
        title = f"Workout History: {view['filter']}"
    if not view["workouts"]:
        state.console.print(EMPTY_LOG_MESSAGE)
        return

    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Exercise")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume", justify="right")

    for row in view["workouts"]:
        table.add_row(
            str(row["id"]),
            row["displayDate"],
            row["exercise"],
            format_amount(row["weight"], unit_label),
            row["reps"],
            row["sets"],
            format_amount(to_fixed(row["volume"], 0), unit_label),
        )

    state.console.print(table)


def exercises_command(ctx: typer.Context) -> None:
    """List distinct exercise names."""
    state = get_state(ctx)
    store = open_store(state)
    names = unique_exercises(store.workouts)

    if state.json_output:
        print_json_payload(state, {"exercises": names})
        return

    for name in names:
        if state.plain_output:
            typer.echo(name)
        else:
            state.console.print(name, highlight=False)
