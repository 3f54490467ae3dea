"""Persistence of in-progress games and daily completion records."""

from .models import StoredProgress, LevelCompletionSummary, DailyProgressEntry, DailyProgress
from .backends import KeyValueStore, MemoryStore, JsonDirectoryStore
from .progress import ProgressStore, in_progress_key, daily_progress_key

__all__ = [
    "StoredProgress",
    "LevelCompletionSummary",
    "DailyProgressEntry",
    "DailyProgress",
    "KeyValueStore",
    "MemoryStore",
    "JsonDirectoryStore",
    "ProgressStore",
    "in_progress_key",
    "daily_progress_key",
]
