import logging
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .grid import are_adjacent, copy_grid, find_word_coordinates, swap_cells
from .models import (
    CellCoordinate,
    ExplorationNode,
    GameData,
    GameState,
    GameStatus,
    Grid,
    HistoryEntry,
    MoveRecord,
    SavedProgress,
    SwapResult,
    UndoResult,
)

logger = logging.getLogger(__name__)


def find_matching_node(
    candidates: List[ExplorationNode],
    cell_a: CellCoordinate,
    cell_b: CellCoordinate,
) -> Optional[ExplorationNode]:
    """Return the first candidate whose move swaps the two cells, in either order."""
    for node in candidates:
        if node.move is not None and node.move.matches(cell_a, cell_b):
            return node
    return None


class WordChainGame(BaseModel):
    """
    Progression engine for a single play session.

    Validates swaps against the level's exploration tree, keeps the move
    history for exact undo, and tracks whether the player has left every
    branch that still reaches the level's maximum depth.

    Attributes:
        game_data: The loaded level
        grid: Current letter grid
        current_possible_moves: Children of the last played node, or the tree roots
        history: One entry per move played, captured before the move
        has_deviated: Whether any move so far ruled out the maximum depth
        turn_failed_attempts: Rejected swaps since the last successful one
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    game_data: Optional[GameData] = None
    grid: Grid = Field(default_factory=list)
    current_possible_moves: List[ExplorationNode] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)
    has_deviated: bool = False
    turn_failed_attempts: int = 0

    @classmethod
    def create(cls, game_data: GameData, saved: Optional[SavedProgress] = None) -> "WordChainGame":
        """
        Factory method to create an engine with a level already loaded.

        Args:
            game_data: The level to play
            saved: Optional saved progress to restore

        Returns:
            A new WordChainGame instance
        """
        game = cls()
        game.load_level(game_data, saved)
        return game

    # -- derived state -------------------------------------------------------

    @property
    def current_depth(self) -> int:
        """Number of moves played."""
        return len(self.history)

    @property
    def max_depth_attainable(self) -> int:
        return self.game_data.max_depth_reached if self.game_data else 0

    @property
    def word_length(self) -> int:
        return self.game_data.word_length if self.game_data else 4

    @property
    def status(self) -> GameStatus:
        """Where the session stands, computed from depth, candidates and deviation."""
        max_depth = self.max_depth_attainable
        if self.game_data is not None and max_depth > 0 and self.current_depth == max_depth:
            return "completed"
        if not self.current_possible_moves and self.current_depth > 0:
            return "stuck_deviated" if self.has_deviated else "stuck_optimal"
        return "in_progress"

    @property
    def is_game_over(self) -> bool:
        # Stuck after deviating is not terminal: the player is expected to undo
        return self.status in ("completed", "stuck_optimal")

    # -- transitions ---------------------------------------------------------

    def load_level(self, game_data: GameData, saved: Optional[SavedProgress] = None) -> GameState:
        """
        Load a level, optionally restoring saved progress.

        Saved grid, history, deviation flag and failed count are restored as
        stored. The candidate moves are re-derived by replaying the history
        against the tree; if the history no longer fits the tree the
        candidates are left empty but the trail still loads.

        Args:
            game_data: The level to play
            saved: Optional saved progress

        Returns:
            Snapshot of the loaded state
        """
        self.game_data = game_data

        if saved is None:
            self._restart()
            return self.get_current_state()

        self.grid = copy_grid(saved.last_grid)
        self.history = list(saved.history)
        self.has_deviated = saved.has_deviated
        self.turn_failed_attempts = saved.turn_failed_attempts

        if saved.current_depth != len(self.history):
            logger.warning(
                f"Saved depth {saved.current_depth} disagrees with history length "
                f"{len(self.history)}; using history length"
            )

        self.current_possible_moves = self._replay_history()
        logger.debug(f"Restored {len(self.history)} moves, {len(self.current_possible_moves)} candidates")
        return self.get_current_state()

    def reset_level(self) -> GameState:
        """
        Return to the level's starting position.

        Raises:
            ValueError: If no level is loaded
        """
        if self.game_data is None:
            raise ValueError("Game data not loaded")
        self._restart()
        return self.get_current_state()

    def perform_swap(self, cell_a: CellCoordinate, cell_b: CellCoordinate) -> SwapResult:
        """
        Attempt to swap two cells.

        A swap succeeds only if it matches one of the current candidate moves
        (in either direction). Rejected swaps count as failed attempts and
        leave everything else untouched.

        Args:
            cell_a: First cell
            cell_b: Second cell

        Returns:
            SwapResult with the words formed on success, or a message on failure
        """
        if self.game_data is None:
            return SwapResult(success=False, message="Game data not loaded.")

        if self.is_game_over:
            return SwapResult(success=False, message="Game is over.", state=self.get_current_state())

        if not are_adjacent(cell_a, cell_b):
            self.turn_failed_attempts += 1
            return SwapResult(
                success=False,
                message="Must swap adjacent cells.",
                state=self.get_current_state(),
            )

        node = find_matching_node(self.current_possible_moves, cell_a, cell_b)
        if node is None:
            self.turn_failed_attempts += 1
            return SwapResult(
                success=False,
                message="Invalid move! No new word found!",
                state=self.get_current_state(),
            )

        self.history.append(HistoryEntry(
            grid=copy_grid(self.grid),
            possible_moves=list(self.current_possible_moves),
            depth_before_move=self.current_depth,
            move_made=node.move.to_record(),
            words_formed_by_move=list(node.words_formed),
            failed_attempts_before_move=self.turn_failed_attempts,
            was_deviated_before_move=self.has_deviated,
        ))

        swap_cells(self.grid, cell_a, cell_b)
        self.current_possible_moves = list(node.next_moves)

        suboptimal = self.current_depth + node.max_depth_reached < self.max_depth_attainable
        self.has_deviated = self.has_deviated or suboptimal
        self.turn_failed_attempts = 0

        logger.debug(
            f"Move {node.move.from_} -> {node.move.to} formed {node.words_formed}; "
            f"depth {self.current_depth}/{self.max_depth_attainable}, status {self.status}"
        )

        return SwapResult(
            success=True,
            words_formed=list(node.words_formed),
            move_details=node.move,
            state=self.get_current_state(),
        )

    def undo_last_move(self) -> UndoResult:
        """
        Undo the most recent move.

        Everything is restored to the values captured before that move,
        including the deviation flag and the failed attempt count.

        Returns:
            UndoResult carrying the undone move reversed (to -> from)
        """
        if not self.history:
            return UndoResult(success=False, message="Nothing to undo.", state=self.get_current_state())

        entry = self.history.pop()
        self.grid = copy_grid(entry.grid)
        self.current_possible_moves = list(entry.possible_moves)
        self.has_deviated = entry.was_deviated_before_move
        self.turn_failed_attempts = entry.failed_attempts_before_move

        if entry.depth_before_move != self.current_depth:
            logger.warning(
                f"History entry recorded depth {entry.depth_before_move} "
                f"but {self.current_depth} moves remain"
            )

        return UndoResult(
            success=True,
            undone_move=entry.move_made.reversed(),
            state=self.get_current_state(),
        )

    def view_solution(self, grid: Grid, history: List[HistoryEntry]) -> GameState:
        """
        Show a finished game.

        Used when the level was already completed earlier: the final grid and
        history are displayed with no further moves available.

        Raises:
            ValueError: If no level is loaded
        """
        if self.game_data is None:
            raise ValueError("Game data not loaded")
        self.grid = copy_grid(grid)
        self.history = list(history)
        self.current_possible_moves = []
        self.has_deviated = False
        self.turn_failed_attempts = 0
        return self.get_current_state()

    # -- queries -------------------------------------------------------------

    def get_current_state(self) -> GameState:
        """Take an immutable snapshot of the session."""
        return GameState(
            grid=copy_grid(self.grid),
            current_possible_moves=list(self.current_possible_moves),
            current_depth=self.current_depth,
            history=list(self.history),
            has_deviated=self.has_deviated,
            turn_failed_attempts=self.turn_failed_attempts,
            is_game_over=self.is_game_over,
            status=self.status,
            max_depth_attainable=self.max_depth_attainable,
            word_length=self.word_length,
        )

    def get_state_for_saving(self) -> Optional[SavedProgress]:
        """Progress in the persisted snapshot shape, or None if nothing is loaded."""
        if self.game_data is None:
            return None
        return SavedProgress(
            last_grid=copy_grid(self.grid),
            history=list(self.history),
            current_depth=self.current_depth,
            turn_failed_attempts=self.turn_failed_attempts,
            has_deviated=self.has_deviated,
        )

    def player_unique_words(self) -> List[str]:
        """Every word the player has formed, in the order first found."""
        words: dict = {}
        for entry in self.history:
            for word in entry.words_formed_by_move:
                words.setdefault(word, None)
        return list(words)

    def calculate_hint_coordinates(self) -> List[CellCoordinate]:
        """
        Cells of the word formed by the best available move.

        The best move is the first candidate with the greatest remaining
        depth. Its swap is applied to a scratch grid and the first word it
        forms is located there.
        """
        if not self.grid or not self.grid[0]:
            return []

        best: Optional[ExplorationNode] = None
        for node in self.current_possible_moves:
            if best is None or node.max_depth_reached > best.max_depth_reached:
                best = node

        if best is None or best.move is None or not best.words_formed:
            return []

        scratch = copy_grid(self.grid)
        move = best.move
        swap_cells(
            scratch,
            CellCoordinate(row=move.from_[0], col=move.from_[1]),
            CellCoordinate(row=move.to[0], col=move.to[1]),
        )
        return find_word_coordinates(scratch, best.words_formed[0], move)

    # -- internals -----------------------------------------------------------

    def _restart(self) -> None:
        self.grid = copy_grid(self.game_data.initial_grid)
        self.current_possible_moves = list(self.game_data.exploration_tree)
        self.history = []
        self.has_deviated = False
        self.turn_failed_attempts = 0

    def _replay_history(self) -> List[ExplorationNode]:
        """Walk the tree along the history and return the candidates at its end."""
        candidates = list(self.game_data.exploration_tree)
        for depth, entry in enumerate(self.history, start=1):
            node = find_matching_node(candidates, entry.move_made.from_, entry.move_made.to)
            if node is None:
                logger.warning(
                    f"Saved move {depth} ({entry.move_made.from_.row},{entry.move_made.from_.col}) -> "
                    f"({entry.move_made.to.row},{entry.move_made.to.col}) not found in tree; "
                    f"no moves available from restored position"
                )
                return []
            candidates = list(node.next_moves)
        return candidates
