import logging
from datetime import date
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from .analysis import find_longest_word_chain, path_words
from .engine import CellCoordinate, Difficulty, GameState, PathStep, SwapResult, UndoResult, WordChainGame
from .levels import level_file_path, load_level_file
from .storage import LevelCompletionSummary, ProgressStore

logger = logging.getLogger(__name__)


class GameSession(BaseModel):
    """
    Top-level orchestrator for one day's level at one difficulty.

    Loads the level file, restores saved progress, drives the engine and
    persists after every change. When the level is completed the day's
    completion record is written once.

    Attributes:
        day: Level date
        difficulty: Level difficulty
        game: The progression engine
        store: Persistence adapter
        file_hash: Content hash of the loaded level file
        viewing_solution: True when the level was already completed and is shown read-only
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    day: date
    difficulty: Difficulty
    game: WordChainGame
    store: ProgressStore
    file_hash: int
    viewing_solution: bool = False

    @classmethod
    def open(
        cls,
        levels_dir: str | Path,
        store: ProgressStore,
        day: date,
        difficulty: Difficulty,
        strict: bool = True,
    ) -> "GameSession":
        """
        Factory method to open a level with any saved progress applied.

        Args:
            levels_dir: Root directory of the level files
            store: Persistence adapter
            day: Level date
            difficulty: Level difficulty
            strict: Verify tree invariants when loading

        Returns:
            A GameSession ready to play

        Raises:
            FileNotFoundError: If the day's level does not exist
            InvalidLevelData: If the level file is malformed
        """
        path = level_file_path(levels_dir, difficulty, day)
        game_data, file_hash = load_level_file(path, strict=strict)

        saved = store.load_in_progress(day, difficulty, file_hash)
        game = WordChainGame.create(game_data, saved)
        session = cls(day=day, difficulty=difficulty, game=game, store=store, file_hash=file_hash)

        summary = store.load_summary(day, difficulty)
        if summary is not None and summary.difficulty == difficulty and summary.final_grid and summary.history:
            logger.info(f"'{difficulty}' on {day} already completed; showing the solution")
            game.view_solution(summary.final_grid, summary.history)
            session.viewing_solution = True

        return session

    @property
    def state(self) -> GameState:
        return self.game.get_current_state()

    def swap(self, cell_a: CellCoordinate, cell_b: CellCoordinate) -> SwapResult:
        """Attempt a swap, then persist and record completion if reached."""
        result = self.game.perform_swap(cell_a, cell_b)
        self._after_change()
        return result

    def undo(self) -> UndoResult:
        """Take back the last move. Leaves solution view if it was active."""
        result = self.game.undo_last_move()
        if result.success:
            self.viewing_solution = False
        self._after_change()
        return result

    def reset(self) -> GameState:
        """Start the level over. Leaves solution view if it was active."""
        self.viewing_solution = False
        state = self.game.reset_level()
        self._after_change()
        return state

    def optimal_path(self) -> List[PathStep]:
        """Longest chain through the tree, following the player's moves where possible."""
        return find_longest_word_chain(self.game.game_data.exploration_tree, self.game.history)

    def build_summary(self) -> LevelCompletionSummary:
        state = self.state
        return LevelCompletionSummary(
            history=state.history,
            score=state.current_depth,
            unique_words_found=self.game.player_unique_words(),
            max_score=state.max_depth_attainable,
            optimal_path_words=path_words(self.optimal_path()),
            difficulty=self.difficulty,
            final_grid=state.grid,
        )

    def save(self) -> bool:
        """Persist the current progress. Nothing is saved while showing a solution."""
        if self.viewing_solution:
            return False
        progress = self.game.get_state_for_saving()
        if progress is None:
            return False
        return self.store.save_in_progress(self.day, self.difficulty, progress, self.file_hash, self.difficulty)

    def _after_change(self) -> None:
        self.save()
        if not self.viewing_solution and self.game.status == "completed":
            self.store.record_completion(self.day, self.build_summary())
