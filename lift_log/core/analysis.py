"""Derivations over the workout list: parsing, filters, chart series and stats."""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from lift_log.core.constants import ALL_EXERCISES, CHART_MAX_POINTS
from lift_log.core.models import ViewState, WorkoutEntry, WorkoutStats
from lift_log.utils.formatting import parse_timestamp, to_fixed

_LEADING_NUMBER = re.compile(r"\s*([+]?(?:\d+\.?\d*|\.\d+)(?:[eE][+]?\d+)?)")

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_leading_number(value: Any) -> float:
    """Parse the lower bound of a field like ``"100-110"``; unparseable is 0."""
    if value is None:
        return 0.0
    head = str(value).split("-", 1)[0]
    match = _LEADING_NUMBER.match(head)
    if not match:
        return 0.0
    number = float(match.group(1))
    if not math.isfinite(number):
        return 0.0
    return number


def volume(entry: WorkoutEntry) -> float:
    """Weight x reps x sets, each by its leading number."""
    return (
        parse_leading_number(entry.weight)
        * parse_leading_number(entry.reps)
        * parse_leading_number(entry.sets)
    )


def filter_entries(entries: Sequence[WorkoutEntry], selection: str = ALL_EXERCISES) -> List[WorkoutEntry]:
    if selection == ALL_EXERCISES:
        return list(entries)
    return [entry for entry in entries if entry.exercise == selection]


def unique_exercises(entries: Iterable[WorkoutEntry]) -> List[str]:
    return sorted({entry.exercise for entry in entries})


def _sort_key(point: Dict[str, Any]) -> datetime:
    return parse_timestamp(point.get("date")) or _EARLIEST


def chart_series(entries: Iterable[WorkoutEntry], limit: int = CHART_MAX_POINTS) -> List[Dict[str, Any]]:
    """Heaviest entry per exercise per display date, oldest first, last ``limit`` points."""
    grouped: Dict[str, Dict[str, Any]] = {}

    for entry in entries:
        key = f"{entry.display_date}-{entry.exercise}"
        weight = parse_leading_number(entry.weight)
        current = grouped.get(key)
        # Strictly greater: the first entry scanned keeps a tie.
        if current is None or current["weight"] < weight:
            point = entry.to_dict()
            point["weight"] = weight
            grouped[key] = point

    points = sorted(grouped.values(), key=_sort_key)
    if limit <= 0:
        return []
    return points[-limit:]


def summary_stats(entries: Sequence[WorkoutEntry]) -> Optional[WorkoutStats]:
    """Aggregate stats, or None when there is nothing to summarize."""
    if not entries:
        return None

    weights = [parse_leading_number(entry.weight) for entry in entries]
    total_volume = sum(volume(entry) for entry in entries)
    avg_weight = sum(weights) / len(entries)

    return WorkoutStats(
        max_weight=to_fixed(max(weights), 0),
        total_volume=to_fixed(total_volume, 0),
        avg_weight=to_fixed(avg_weight, 1),
        total_workouts=len(entries),
    )


def derive_view(
    entries: Sequence[WorkoutEntry],
    view_state: ViewState,
    chart_limit: int = CHART_MAX_POINTS,
) -> Dict[str, Any]:
    """Compute everything a view shows from entries and an immutable selection."""
    filtered = filter_entries(entries, view_state.selected_exercise)
    stats = summary_stats(filtered)
    return {
        "view": view_state.view,
        "filter": view_state.selected_exercise,
        "exercises": unique_exercises(entries),
        "workouts": [dict(entry.to_dict(), volume=volume(entry)) for entry in filtered],
        "stats": stats.to_dict() if stats else None,
        "chart": chart_series(filtered, limit=chart_limit),
    }
