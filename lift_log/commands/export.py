"""Export the workout log to external formats."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

import typer

from lift_log.commands.common import get_state, open_store, view_state
from lift_log.core.analysis import derive_view
from lift_log.core.constants import VIEW_LOG
from lift_log.exporters.json_export import write_json
from lift_log.exporters.yaml_export import dump_yaml, write_yaml
from lift_log.utils.formatting import to_fixed

CSV_FIELDS = ["id", "date", "displayDate", "exercise", "weight", "reps", "sets", "volume"]


def _csv_rows(handle: TextIO, workouts: List[Dict[str, Any]]) -> None:
    writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS, extrasaction="ignore")
    writer.writeheader()
    for workout in workouts:
        writer.writerow(dict(workout, volume=to_fixed(workout["volume"], 0)))


def _write_csv(path: Path, workouts: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as handle:
        _csv_rows(handle, workouts)


def export_command(
    ctx: typer.Context,
    export_format: str = typer.Option("json", "--format", help="Export format: json|yaml|csv"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    exercise: Optional[str] = typer.Option(None, "--exercise", "-e", help="Only export this exercise"),
) -> None:
    """Export logged workouts with their volume and summary stats."""
    state = get_state(ctx)

    if export_format not in {"json", "yaml", "csv"}:
        raise typer.BadParameter("--format must be one of: json, yaml, csv")

    store = open_store(state)
    view = derive_view(store.workouts, view_state(state, exercise, VIEW_LOG))
    payload = {
        "motto": store.motto,
        "filter": view["filter"],
        "stats": view["stats"],
        "workouts": view["workouts"],
    }

    if output is not None:
        output = output.expanduser()
        if export_format == "json":
            write_json(output, payload)
        elif export_format == "yaml":
            write_yaml(output, payload)
        else:
            _write_csv(output, view["workouts"])

        if state.plain_output or state.json_output:
            typer.echo(f"exported\t{len(view['workouts'])}\t{output}")
        else:
            state.console.print(f"Exported {len(view['workouts'])} workouts to: {output}", highlight=False)
        return

    if export_format == "json":
        typer.echo(json.dumps(payload, indent=2))
    elif export_format == "yaml":
        typer.echo(dump_yaml(payload), nl=False)
    else:
        buffer = io.StringIO()
        _csv_rows(buffer, view["workouts"])
        typer.echo(buffer.getvalue(), nl=False)
