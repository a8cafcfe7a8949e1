"""Workout collection and motto, saved to the key-value store after every change."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from lift_log.core.constants import (
    CORRUPT_POLICIES,
    DEFAULT_MOTTO,
    FORM_FIELDS,
    INCOMPLETE_FORM_MESSAGE,
    MOTTO_KEY,
    WORKOUTS_KEY,
)
from lift_log.core.models import ValidationError, WorkoutEntry
from lift_log.core.storage import CorruptStoreError, KeyValueStore, StorageError
from lift_log.utils.formatting import display_date, iso_timestamp

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def normalize_motto(text: Optional[str]) -> str:
    """Trim a motto; blank falls back to the default."""
    return (text or "").strip() or DEFAULT_MOTTO


class WorkoutStore:
    """Owns the workout list and motto; every mutation is persisted in full."""

    def __init__(
        self,
        backend: KeyValueStore,
        workouts_key: str = WORKOUTS_KEY,
        motto_key: str = MOTTO_KEY,
        on_corrupt: str = "error",
        clock: Optional[Callable[[], datetime]] = None,
        date_format: str = "",
    ) -> None:
        if on_corrupt not in CORRUPT_POLICIES:
            raise ValueError(f"on_corrupt must be one of {', '.join(CORRUPT_POLICIES)}")
        self.backend = backend
        self.workouts_key = workouts_key
        self.motto_key = motto_key
        self.on_corrupt = on_corrupt
        self.clock = clock or _local_now
        self.date_format = date_format
        self._workouts: List[WorkoutEntry] = []
        self._motto = DEFAULT_MOTTO
        self.load()

    @classmethod
    def from_config(
        cls,
        backend: KeyValueStore,
        config: Dict[str, Any],
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "WorkoutStore":
        storage_cfg = config.get("storage", {})
        display_cfg = config.get("display", {})
        return cls(
            backend,
            workouts_key=str(storage_cfg.get("workouts_key") or WORKOUTS_KEY),
            motto_key=str(storage_cfg.get("motto_key") or MOTTO_KEY),
            on_corrupt=str(storage_cfg.get("on_corrupt") or "error"),
            clock=clock,
            date_format=str(display_cfg.get("date_format") or ""),
        )

    @property
    def workouts(self) -> Tuple[WorkoutEntry, ...]:
        """Entries, newest first."""
        return tuple(self._workouts)

    @property
    def motto(self) -> str:
        return self._motto

    def load(self) -> None:
        """(Re)load both keys from the backend."""
        self._workouts = self._load_workouts()
        self._motto = self.backend.get(self.motto_key) or DEFAULT_MOTTO
        logger.debug("Loaded %d workouts", len(self._workouts))

    def _load_workouts(self) -> List[WorkoutEntry]:
        raw = self.backend.get(self.workouts_key)
        if not raw:
            return []
        try:
            return self._decode_workouts(raw)
        except CorruptStoreError as exc:
            if self.on_corrupt == "reset":
                logger.warning("%s; starting from an empty workout log", exc)
                return []
            raise

    def _decode_workouts(self, raw: str) -> List[WorkoutEntry]:
        try:
            loaded = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptStoreError(f"Stored value for {self.workouts_key!r} is not valid JSON: {exc}") from exc
        if not isinstance(loaded, list):
            raise CorruptStoreError(f"Stored value for {self.workouts_key!r} must be a JSON array")

        entries: List[WorkoutEntry] = []
        for index, item in enumerate(loaded):
            if not isinstance(item, dict):
                raise CorruptStoreError(f"Workout #{index} in {self.workouts_key!r} is not an object")
            try:
                entries.append(WorkoutEntry.from_dict(item))
            except ValueError as exc:
                raise CorruptStoreError(f"Workout #{index} in {self.workouts_key!r}: {exc}") from exc
        return entries

    def _save_workouts(self) -> None:
        payload = json.dumps([entry.to_dict() for entry in self._workouts], separators=(",", ":"))
        self.backend.set(self.workouts_key, payload)

    def _commit(self, workouts: List[WorkoutEntry]) -> None:
        previous = self._workouts
        self._workouts = workouts
        try:
            self._save_workouts()
        except StorageError:
            self._workouts = previous
            raise

    def _next_id(self, moment: datetime) -> int:
        candidate = int(moment.timestamp() * 1000)
        taken = {entry.id for entry in self._workouts}
        while candidate in taken:
            candidate += 1
        return candidate

    def add_workout(self, exercise: str, weight: str, reps: str, sets: str) -> WorkoutEntry:
        """Validate the form, prepend a new entry and save.

        Raises ValidationError without touching state when any field is blank.
        """
        form = {"exercise": exercise, "weight": weight, "reps": reps, "sets": sets}
        missing = [name for name in FORM_FIELDS if not (form[name] or "").strip()]
        if missing:
            raise ValidationError(f"{INCOMPLETE_FORM_MESSAGE} (missing: {', '.join(missing)})")

        moment = self.clock()
        entry = WorkoutEntry(
            id=self._next_id(moment),
            exercise=exercise.strip(),
            weight=weight,
            reps=reps,
            sets=sets,
            date=iso_timestamp(moment),
            display_date=display_date(moment, self.date_format),
        )
        self._commit([entry, *self._workouts])
        logger.debug("Added workout %s (%s)", entry.id, entry.exercise)
        return entry

    def delete_workout(self, workout_id: int) -> Optional[WorkoutEntry]:
        """Remove the entry with this id; unknown ids are a no-op returning None."""
        removed = next((entry for entry in self._workouts if entry.id == workout_id), None)
        if removed is None:
            return None
        self._commit([entry for entry in self._workouts if entry.id != workout_id])
        logger.debug("Deleted workout %s", workout_id)
        return removed

    def save_motto(self, text: Optional[str]) -> str:
        motto = normalize_motto(text)
        self.backend.set(self.motto_key, motto)
        self._motto = motto
        return motto

    def edit_motto(self) -> "MottoEditor":
        editor = MottoEditor(self)
        editor.begin()
        return editor


class MottoEditor:
    """Viewing/editing flow over the store's motto."""

    def __init__(self, store: WorkoutStore) -> None:
        self.store = store
        self.editing = False
        self.buffer = ""

    def begin(self) -> str:
        self.buffer = self.store.motto
        self.editing = True
        return self.buffer

    def update(self, text: str) -> None:
        self._require_editing()
        self.buffer = text

    def save(self) -> str:
        self._require_editing()
        motto = self.store.save_motto(self.buffer)
        self.editing = False
        self.buffer = ""
        return motto

    def cancel(self) -> None:
        self._require_editing()
        self.editing = False
        self.buffer = ""

    def _require_editing(self) -> None:
        if not self.editing:
            raise RuntimeError("Motto is not being edited")
