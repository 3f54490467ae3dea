"""
Persistence adapter for in-progress games and daily completion records.

Records are JSON strings in a key-value store:
- wordChainsState-<YYYY-MM-DD>-<difficulty>: the in-progress snapshot
- wordChainsProgress-<YYYY-MM-DD>: completion state per difficulty

A snapshot saved against a different level file (content hash) or a
different difficulty is stale. Stale or unreadable records are ignored but
never deleted: they may become valid again and are useful for diagnosis.
"""

import json
import logging
from datetime import date
from typing import Dict, List, Optional
from pydantic import ValidationError

from ..engine.models import DIFFICULTIES, SavedProgress
from .backends import KeyValueStore
from .models import DailyProgress, DailyProgressEntry, LevelCompletionSummary, StoredProgress

logger = logging.getLogger(__name__)


def in_progress_key(day: date, difficulty: str) -> str:
    return f"wordChainsState-{day.isoformat()}-{difficulty}"


def daily_progress_key(day: date) -> str:
    return f"wordChainsProgress-{day.isoformat()}"


class ProgressStore:
    """Reads and writes session snapshots and daily summaries."""

    def __init__(self, backend: KeyValueStore):
        self.backend = backend

    # -- in-progress snapshots -----------------------------------------------

    def load_in_progress(self, day: date, difficulty: str, file_hash: int) -> Optional[SavedProgress]:
        """
        Load the saved progress for a level, if it is still usable.

        Args:
            day: Level date
            difficulty: Requested difficulty
            file_hash: Content hash of the level file currently loaded

        Returns:
            The saved progress, or None if absent or stale
        """
        key = in_progress_key(day, difficulty)
        raw = self.backend.get(key)
        if raw is None:
            logger.debug(f"No in-progress state for '{key}'")
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse in-progress state '{key}', ignoring it: {e}")
            return None

        if not isinstance(data, dict) or data.get("sourceDifficulty") is None:
            logger.warning(f"In-progress state '{key}' has no sourceDifficulty, ignoring it")
            return None

        if data["sourceDifficulty"] != difficulty:
            logger.warning(
                f"Source difficulty mismatch for '{key}': saved for '{data['sourceDifficulty']}', "
                f"loading '{difficulty}'. Ignoring it."
            )
            return None

        if data.get("contentHash") != file_hash:
            logger.warning(
                f"Level hash mismatch for '{key}': saved {data.get('contentHash')}, "
                f"current {file_hash}. Ignoring it."
            )
            return None

        try:
            stored = StoredProgress.model_validate(data)
        except ValidationError as e:
            logger.warning(f"In-progress state '{key}' is structurally invalid, ignoring it: {e}")
            return None

        logger.info(f"Restoring {len(stored.progress.history)} saved moves from '{key}'")
        return stored.progress

    def save_in_progress(
        self,
        day: date,
        difficulty: str,
        progress: SavedProgress,
        file_hash: int,
        source_difficulty: Optional[str],
    ) -> bool:
        """
        Save in-progress state.

        Args:
            day: Level date
            difficulty: Difficulty the record is keyed under
            progress: State to save
            file_hash: Content hash of the level the state belongs to
            source_difficulty: Difficulty of the level the state came from

        Returns:
            True if saved; False if refused or the write failed
        """
        key = in_progress_key(day, difficulty)

        if source_difficulty is None:
            logger.error(f"No source difficulty given, refusing to save '{key}'")
            return False

        if source_difficulty != difficulty:
            logger.error(
                f"Refusing to save '{key}': state belongs to difficulty '{source_difficulty}'"
            )
            return False

        stored = StoredProgress(
            content_hash=file_hash,
            source_difficulty=source_difficulty,
            progress=progress,
        )
        try:
            self.backend.set(key, stored.model_dump_json(by_alias=True))
        except OSError as e:
            logger.error(f"Failed to save in-progress state '{key}': {e}")
            return False

        logger.debug(f"Saved '{key}' (hash {file_hash}, {len(progress.history)} moves)")
        return True

    def remove_in_progress(self, day: date, difficulty: str) -> None:
        """Explicitly delete a snapshot. Only ever called on player request."""
        key = in_progress_key(day, difficulty)
        self.backend.remove(key)
        logger.info(f"Removed in-progress state '{key}'")

    # -- daily completion ----------------------------------------------------

    def _read_daily(self, day: date) -> Optional[DailyProgress]:
        """Parsed daily record; None if a record exists but cannot be read."""
        key = daily_progress_key(day)
        raw = self.backend.get(key)
        if raw is None:
            return {}

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("daily progress must be a JSON object")
            return {
                difficulty: DailyProgressEntry.model_validate(entry)
                for difficulty, entry in data.items()
                if entry is not None
            }
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse daily progress '{key}': {e}")
            return None

    def load_daily_progress(self, day: date) -> DailyProgress:
        """Completion entries for a day, keyed by difficulty. Empty if unreadable."""
        progress = self._read_daily(day)
        return progress if progress is not None else {}

    def save_daily_progress(self, day: date, progress: DailyProgress) -> bool:
        """
        Save a day's completion record.

        The whole record is refused if any summary is filed under a
        difficulty other than its own.
        """
        key = daily_progress_key(day)

        for difficulty, entry in progress.items():
            if entry.summary is not None and entry.summary.difficulty != difficulty:
                logger.error(
                    f"Refusing to save '{key}': summary for '{entry.summary.difficulty}' "
                    f"filed under '{difficulty}'"
                )
                return False

        payload = {
            difficulty: entry.model_dump(mode="json", by_alias=True, exclude_none=True)
            for difficulty, entry in progress.items()
        }
        try:
            self.backend.set(key, json.dumps(payload))
        except OSError as e:
            logger.error(f"Failed to save daily progress '{key}': {e}")
            return False

        logger.debug(f"Saved daily progress '{key}' ({', '.join(progress) or 'empty'})")
        return True

    def record_completion(self, day: date, summary: LevelCompletionSummary) -> bool:
        """
        Mark a difficulty as completed with its summary.

        An existing completed entry is kept as is. Nothing is written if the
        stored record for the day cannot be read.
        """
        progress = self._read_daily(day)
        if progress is None:
            logger.error(f"Not recording completion for {day}: existing record is unreadable")
            return False

        existing = progress.get(summary.difficulty)
        if existing is not None and existing.completed and existing.summary is not None:
            logger.debug(f"'{summary.difficulty}' on {day} already recorded as completed")
            return True

        progress[summary.difficulty] = DailyProgressEntry(completed=True, summary=summary)
        return self.save_daily_progress(day, progress)

    def load_completion_status(self, day: date, difficulties: Optional[List[str]] = None) -> Dict[str, bool]:
        progress = self.load_daily_progress(day)
        return {d: bool(progress.get(d) and progress[d].completed) for d in difficulties or DIFFICULTIES}

    def load_all_summaries(
        self, day: date, difficulties: Optional[List[str]] = None
    ) -> Dict[str, Optional[LevelCompletionSummary]]:
        progress = self.load_daily_progress(day)
        return {d: progress[d].summary if d in progress else None for d in difficulties or DIFFICULTIES}

    def load_summary(self, day: date, difficulty: str) -> Optional[LevelCompletionSummary]:
        entry = self.load_daily_progress(day).get(difficulty)
        return entry.summary if entry else None
