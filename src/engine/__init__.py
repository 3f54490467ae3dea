"""Game progression engine for word chain puzzles."""

from .models import (
    Difficulty,
    GameStatus,
    Grid,
    DIFFICULTIES,
    CellCoordinate,
    GameMove,
    MoveRecord,
    ExplorationNode,
    GameData,
    HistoryEntry,
    GameState,
    SavedProgress,
    SwapResult,
    UndoResult,
    PathStep,
    PlayConfig,
)
from .grid import are_adjacent, copy_grid, in_bounds, swap_cells, find_word_coordinates, render_grid
from .game import WordChainGame, find_matching_node

__all__ = [
    # Models
    "Difficulty",
    "GameStatus",
    "Grid",
    "DIFFICULTIES",
    "CellCoordinate",
    "GameMove",
    "MoveRecord",
    "ExplorationNode",
    "GameData",
    "HistoryEntry",
    "GameState",
    "SavedProgress",
    "SwapResult",
    "UndoResult",
    "PathStep",
    "PlayConfig",
    # Grid utilities
    "are_adjacent",
    "copy_grid",
    "in_bounds",
    "swap_cells",
    "find_word_coordinates",
    "render_grid",
    # Engine
    "WordChainGame",
    "find_matching_node",
]
