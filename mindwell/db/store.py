"""
Progress store

In-memory storage for user progress, the mood log and the exercise
completion log, with per-user serialization. Optionally mirrors every
collection to a JSON file under DATA_PATH so progress survives restarts.

Concurrency:
- All read-modify-write cycles for one user go through update(), which holds
  that user's asyncio.Lock, so two concurrent completions can never both read
  the same total_xp and drop an award
- Different users never wait on each other

Commits:
- update() saves the new state and appends its log records together; if any
  write fails, the state and the records are rolled back as a unit
"""

import asyncio
import inspect
import json
import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

import pydantic

from mindwell.exceptions import RecordNotFoundError, StorageError, wrap_storage_exception
from mindwell.models.exercise import ExerciseCompletionEvent
from mindwell.models.mood import MoodEntry
from mindwell.models.progress import UserProgressState

logger = logging.getLogger(__name__)

T = TypeVar("T")

LogRecord = Union[MoodEntry, ExerciseCompletionEvent]

PROGRESS_FILE = "progress.json"
MOODS_FILE = "moods.json"
COMPLETIONS_FILE = "completions.json"


class ProgressStore:
    """Per-user serialized store for UserProgressState and the activity logs"""

    def __init__(self, data_path: Optional[Path] = None, default_timezone: str = "UTC"):
        self.data_path = data_path
        self.default_timezone = default_timezone
        self._states: Dict[str, UserProgressState] = {}
        self._moods: Dict[str, List[MoodEntry]] = defaultdict(list)
        self._completions: Dict[str, List[ExerciseCompletionEvent]] = defaultdict(list)
        self._locks: Dict[str, asyncio.Lock] = {}

        if data_path is None:
            logger.info("ProgressStore initialized in memory (not persisted)")
        else:
            logger.info(f"ProgressStore initialized with data path {data_path}")

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def user_lock(self, user_id: str) -> asyncio.Lock:
        """Lock serializing all writes for one user"""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def get_state(self, user_id: str) -> UserProgressState:
        """Current state for a user, a fresh state if the user is unknown"""
        state = self._states.get(user_id)
        if state is None:
            state = UserProgressState(user_id=user_id, timezone=self.default_timezone)
        return state

    def has_user(self, user_id: str) -> bool:
        return user_id in self._states

    async def update(
        self,
        user_id: str,
        transition: Callable[[UserProgressState], Any],
        records: Iterable[LogRecord] = ()
    ) -> T:
        """
        Atomically read, transform and save a user's state

        transition receives the current state and returns (new_state, result).
        It may be a coroutine function; the user's lock is held while it runs.
        records are appended to the mood or completion log in the same commit.
        If transition raises or a write fails, neither the state nor the
        records are kept and the exception propagates.

        Returns:
            The result returned by transition
        """
        async with self.user_lock(user_id):
            previous = self._states.get(user_id)

            outcome = transition(self.get_state(user_id))
            if inspect.isawaitable(outcome):
                outcome = await outcome
            new_state, result = outcome

            records = list(records)
            self._states[user_id] = new_state
            for record in records:
                self._log_for(record)[record.user_id].append(record)

            try:
                self._save_progress()
                self._save_logs(records)
            except StorageError:
                self._rollback(user_id, previous, records)
                raise

            return result

    async def set_timezone(self, user_id: str, timezone: str) -> UserProgressState:
        """Change the timezone used to find a user's local day"""
        def transition(state: UserProgressState):
            new_state = UserProgressState.model_validate({**state.model_dump(), "timezone": timezone})
            return new_state, new_state

        return await self.update(user_id, transition)

    def _rollback(self, user_id: str, previous: Optional[UserProgressState], records: List[LogRecord]) -> None:
        if previous is None:
            self._states.pop(user_id, None)
        else:
            self._states[user_id] = previous

        for record in reversed(records):
            self._log_for(record)[record.user_id].pop()

        # Files written before the failure now hold the rejected commit
        try:
            self._save_progress()
            self._save_logs(records)
        except StorageError as e:
            logger.error(f"Could not restore store files for user {user_id}: {e}")

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def _log_for(self, record: LogRecord) -> Dict[str, list]:
        if isinstance(record, MoodEntry):
            return self._moods
        return self._completions

    def get_moods(self, user_id: str, limit: Optional[int] = None) -> List[MoodEntry]:
        """Mood entries for a user, newest first"""
        entries = sorted(self._moods.get(user_id, []), key=lambda e: e.occurred_at, reverse=True)
        return entries[:limit] if limit else entries

    def get_latest_mood(self, user_id: str) -> MoodEntry:
        """
        Most recent mood entry

        Raises:
            RecordNotFoundError: user has no mood entries
        """
        entries = self.get_moods(user_id, limit=1)
        if not entries:
            raise RecordNotFoundError(
                f"No mood entries for user {user_id}",
                record_type="Mood entry",
                user_id=user_id,
                operation="get_latest_mood",
            )
        return entries[0]

    def get_completions(self, user_id: str, limit: Optional[int] = None) -> List[ExerciseCompletionEvent]:
        """Exercise completions for a user, newest first"""
        events = sorted(self._completions.get(user_id, []), key=lambda e: e.occurred_at, reverse=True)
        return events[:limit] if limit else events

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """
        Load collections from DATA_PATH (no-op for in-memory stores)

        Raises:
            StorageError: a file is unreadable, not JSON, or fails validation
        """
        if self.data_path is None:
            return

        try:
            progress = self._read_json(PROGRESS_FILE) or {}
            moods = self._read_json(MOODS_FILE) or {}
            completions = self._read_json(COMPLETIONS_FILE) or {}

            states = {
                user_id: UserProgressState.model_validate(data)
                for user_id, data in progress.items()
            }
            mood_log = defaultdict(list)
            for user_id, entries in moods.items():
                mood_log[user_id] = [MoodEntry.model_validate(e) for e in entries]
            completion_log = defaultdict(list)
            for user_id, events in completions.items():
                completion_log[user_id] = [ExerciseCompletionEvent.model_validate(e) for e in events]
        except (OSError, json.JSONDecodeError, pydantic.ValidationError) as e:
            raise wrap_storage_exception(e, operation="load_store") from e

        self._states = states
        self._moods = mood_log
        self._completions = completion_log

        logger.info(
            f"Loaded progress for {len(self._states)} users, "
            f"{sum(len(v) for v in self._moods.values())} mood entries and "
            f"{sum(len(v) for v in self._completions.values())} exercise completions"
        )

    def _read_json(self, filename: str) -> Optional[dict]:
        path = self.data_path / filename
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _write_json(self, filename: str, payload: dict) -> None:
        if self.data_path is None:
            return

        path = self.data_path / filename
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            self.data_path.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise wrap_storage_exception(e, operation=f"write {filename}") from e

    def _save_progress(self) -> None:
        self._write_json(PROGRESS_FILE, {
            user_id: state.model_dump(mode="json")
            for user_id, state in self._states.items()
        })

    def _save_logs(self, records: Iterable[LogRecord]) -> None:
        records = list(records)
        if any(isinstance(r, MoodEntry) for r in records):
            self._write_log(MOODS_FILE, self._moods)
        if any(isinstance(r, ExerciseCompletionEvent) for r in records):
            self._write_log(COMPLETIONS_FILE, self._completions)

    def _write_log(self, filename: str, log: Dict[str, list]) -> None:
        self._write_json(filename, {
            user_id: [record.model_dump(mode="json") for record in records]
            for user_id, records in log.items()
        })
