from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
from typer.testing import CliRunner

from lift_log.core.models import WorkoutEntry
from lift_log.core.storage import MemoryStore
from lift_log.core.store import WorkoutStore

NOON = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LIFT_CONFIG_FILE", str(tmp_path / "config" / "config.toml"))
    monkeypatch.setenv("LIFT_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("LIFT_STORE_FILE", raising=False)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def store_file(tmp_path: Path) -> Path:
    return tmp_path / "store.json"


@pytest.fixture()
def ticking_clock() -> Callable[[], datetime]:
    """Clock that advances one minute per call, starting at noon UTC."""
    state = {"now": NOON}

    def _clock() -> datetime:
        current = state["now"]
        state["now"] = current + timedelta(minutes=1)
        return current

    return _clock


@pytest.fixture()
def memory_store(ticking_clock: Callable[[], datetime]) -> WorkoutStore:
    return WorkoutStore(MemoryStore(), clock=ticking_clock)


def make_entry(
    entry_id: int,
    exercise: str,
    weight: str,
    date: str,
    display_date: str,
    reps: str = "5",
    sets: str = "3",
) -> WorkoutEntry:
    return WorkoutEntry(
        id=entry_id,
        exercise=exercise,
        weight=weight,
        reps=reps,
        sets=sets,
        date=date,
        display_date=display_date,
    )


@pytest.fixture()
def sample_entries() -> List[WorkoutEntry]:
    # Newest first, as the store keeps them.
    return [
        make_entry(4, "Squat", "225", "2026-02-12T18:00:00.000Z", "2/12/2026", reps="5", sets="5"),
        make_entry(3, "Bench Press", "185-195", "2026-02-11T18:00:00.000Z", "2/11/2026", reps="8", sets="3"),
        make_entry(2, "Squat", "215", "2026-02-10T18:30:00.000Z", "2/10/2026", reps="5", sets="5"),
        make_entry(1, "Squat", "205", "2026-02-10T18:00:00.000Z", "2/10/2026", reps="5", sets="5"),
    ]


@pytest.fixture()
def write_store(store_file: Path):
    def _write(workouts: List[Dict[str, Any]], motto: str | None = None) -> Path:
        data: Dict[str, str] = {"workoutData": json.dumps(workouts)}
        if motto is not None:
            data["workoutMotto"] = motto
        store_file.write_text(json.dumps(data, indent=2) + "\n")
        return store_file

    return _write


@pytest.fixture()
def entry_factory() -> Callable[..., WorkoutEntry]:
    return make_entry
