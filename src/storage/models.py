"""Models for persisted progress and daily completion records."""

from typing import Dict, List, Optional
from pydantic import Field

from ..engine.models import CamelModel, Difficulty, Grid, HistoryEntry, SavedProgress


class StoredProgress(CamelModel):
    """An in-progress snapshot together with what it was saved against."""
    content_hash: int
    source_difficulty: Difficulty
    progress: SavedProgress


class LevelCompletionSummary(CamelModel):
    """What a finished game looked like, for the end-of-game panel."""
    history: List[HistoryEntry] = Field(default_factory=list)
    score: int = 0
    unique_words_found: List[str] = Field(default_factory=list)
    max_score: int = 0
    optimal_path_words: List[str] = Field(default_factory=list)
    difficulty: Difficulty
    final_grid: Grid = Field(default_factory=list)


class DailyProgressEntry(CamelModel):
    """Completion state of one difficulty on one day."""
    completed: bool = False
    summary: Optional[LevelCompletionSummary] = None


DailyProgress = Dict[str, DailyProgressEntry]
