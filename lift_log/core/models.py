"""Lightweight data models used across commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from lift_log.core.constants import ALL_EXERCISES, VIEW_LOG, VIEWS


class ValidationError(ValueError):
    """Raised when a workout form is incomplete."""


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class WorkoutEntry:
    """One logged exercise. Never mutated after creation."""

    id: int
    exercise: str
    weight: str
    reps: str
    sets: str
    date: str
    display_date: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "exercise": self.exercise,
            "weight": self.weight,
            "reps": self.reps,
            "sets": self.sets,
            "date": self.date,
            "displayDate": self.display_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutEntry":
        """Build an entry from its persisted camelCase layout."""
        raw_id = data.get("id")
        try:
            entry_id = int(raw_id)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Workout entry has invalid id: {raw_id!r}") from exc

        return cls(
            id=entry_id,
            exercise=_field_text(data.get("exercise")),
            weight=_field_text(data.get("weight")),
            reps=_field_text(data.get("reps")),
            sets=_field_text(data.get("sets")),
            date=_field_text(data.get("date")),
            display_date=_field_text(data.get("displayDate")),
        )


@dataclass(frozen=True)
class ViewState:
    """Immutable UI selection passed through the derivation functions."""

    view: str = VIEW_LOG
    selected_exercise: str = ALL_EXERCISES

    def __post_init__(self) -> None:
        if self.view not in VIEWS:
            raise ValueError(f"Unknown view: {self.view}")

    def with_filter(self, exercise: Optional[str]) -> "ViewState":
        return replace(self, selected_exercise=exercise or ALL_EXERCISES)

    def with_view(self, view: str) -> "ViewState":
        return replace(self, view=view)


@dataclass(frozen=True)
class WorkoutStats:
    """Summary statistics over a filtered set of entries."""

    max_weight: str
    total_volume: str
    avg_weight: str
    total_workouts: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxWeight": self.max_weight,
            "totalVolume": self.total_volume,
            "avgWeight": self.avg_weight,
            "totalWorkouts": self.total_workouts,
        }
