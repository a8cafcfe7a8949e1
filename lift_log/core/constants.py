"""Static constants for the workout log."""

from __future__ import annotations

ALL_EXERCISES = "all"

DEFAULT_MOTTO = "BRICK BY BRICK"

WORKOUTS_KEY = "workoutData"
MOTTO_KEY = "workoutMotto"

CHART_MAX_POINTS = 10

VIEW_LOG = "log"
VIEW_CHART = "chart"
VIEWS = (VIEW_LOG, VIEW_CHART)

CORRUPT_POLICIES = ("error", "reset")

FORM_FIELDS = ("exercise", "weight", "reps", "sets")

STAT_LABELS = {
    "maxWeight": "Max Weight",
    "totalVolume": "Total Volume",
    "avgWeight": "Avg Weight",
    # Counts logged entries, not the sum of the sets field.
    "totalWorkouts": "Total Sets",
}

EMPTY_LOG_MESSAGE = "No workouts logged yet. Start tracking your lifts with `lift add`!"
EMPTY_CHART_MESSAGE = "No data to display. Log some workouts first!"
INCOMPLETE_FORM_MESSAGE = "Please fill in all fields"
