"""Shared command helpers."""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from lift_log.core.config import resolve_exercise
from lift_log.core.constants import CHART_MAX_POINTS
from lift_log.core.models import ViewState
from lift_log.core.state import CLIState
from lift_log.core.storage import CorruptStoreError, JsonFileStore, StorageError
from lift_log.core.store import WorkoutStore


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def warn(state: CLIState, message: str) -> None:
    """Surface a recoverable problem without a traceback."""
    if state.plain_output or state.json_output:
        typer.echo(f"warning\t{message}")
        return
    state.console.print(f"[yellow]Warning:[/yellow] {message}", highlight=False)


@contextmanager
def storage_errors(state: CLIState) -> Iterator[None]:
    """Turn storage failures into a warning and exit code 1."""
    try:
        yield
    except CorruptStoreError as exc:
        warn(state, f"{exc}. Fix or move {state.store_path}, or set storage.on_corrupt = \"reset\".")
        raise typer.Exit(code=1)
    except StorageError as exc:
        warn(state, f"Changes were not saved: {exc}")
        raise typer.Exit(code=1)


def open_store(state: CLIState) -> WorkoutStore:
    """Open the workout store configured for this invocation."""
    with storage_errors(state):
        return WorkoutStore.from_config(JsonFileStore(state.store_path), state.config)


def view_state(state: CLIState, exercise: Optional[str], view: str) -> ViewState:
    return ViewState(view=view, selected_exercise=resolve_exercise(state.config, exercise))


def chart_limit(state: CLIState, explicit: Optional[int] = None) -> int:
    if explicit is not None:
        if explicit < 1:
            raise typer.BadParameter("--limit must be a positive integer")
        return explicit
    return int(state.config.get("chart", {}).get("max_points", CHART_MAX_POINTS))


def units(state: CLIState) -> str:
    return str(state.config.get("display", {}).get("units") or "")
