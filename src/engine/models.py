"""
Pydantic models for the game engine.

Level files and persisted records use camelCase keys, so every model here
reads and writes camelCase aliases while exposing snake_case attributes.
The exploration tree models are frozen: a loaded tree is shared read-only
between the engine and the path analyzer.
"""

from typing import List, Optional, Literal, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


# Type aliases
Difficulty = Literal["normal", "hard", "impossible"]
GameStatus = Literal["in_progress", "completed", "stuck_optimal", "stuck_deviated"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Grid = List[List[str]]

DIFFICULTIES: List[str] = ["normal", "hard", "impossible"]


class CamelModel(BaseModel):
    """Base model that serializes to the camelCase wire format."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CellCoordinate(CamelModel):
    """A single grid cell."""
    model_config = ConfigDict(frozen=True)

    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)


class GameMove(CamelModel):
    """A swap between two cells as stored in the exploration tree."""
    model_config = ConfigDict(frozen=True)

    from_: Tuple[int, int] = Field(..., alias="from")
    to: Tuple[int, int]

    def matches(self, cell_a: CellCoordinate, cell_b: CellCoordinate) -> bool:
        """True if this move swaps the two cells, in either order."""
        a = (cell_a.row, cell_a.col)
        b = (cell_b.row, cell_b.col)
        return (self.from_ == a and self.to == b) or (self.from_ == b and self.to == a)

    def to_record(self) -> "MoveRecord":
        return MoveRecord(
            from_=CellCoordinate(row=self.from_[0], col=self.from_[1]),
            to=CellCoordinate(row=self.to[0], col=self.to[1]),
        )


class MoveRecord(CamelModel):
    """A move as recorded in history, with row/col cell objects."""
    model_config = ConfigDict(frozen=True)

    from_: CellCoordinate = Field(..., alias="from")
    to: CellCoordinate

    def reversed(self) -> "MoveRecord":
        return MoveRecord(from_=self.to, to=self.from_)


class ExplorationNode(CamelModel):
    """One move in the exploration tree and everything reachable after it."""
    model_config = ConfigDict(frozen=True)

    move: Optional[GameMove] = None  # Absent only on a display-only root placeholder
    words_formed: List[str] = Field(default_factory=list)
    max_depth_reached: int = Field(0, ge=0)
    next_moves: List["ExplorationNode"] = Field(default_factory=list)

    @field_validator("words_formed", "next_moves", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        # Generated files omit empty lists; older ones write null
        return [] if value is None else value

    @property
    def is_terminal(self) -> bool:
        return not self.next_moves or self.max_depth_reached == 0


ExplorationNode.model_rebuild()


class GameData(CamelModel):
    """A level definition. Immutable for the duration of a session."""
    model_config = ConfigDict(frozen=True)

    initial_grid: Grid
    word_length: int = Field(4, ge=1)
    min_word_length: int = Field(0, ge=0)
    max_depth_reached: int = Field(0, ge=0)
    exploration_tree: List[ExplorationNode] = Field(default_factory=list)
    required_min_turns: Optional[int] = None
    required_max_turns: Optional[int] = None

    @field_validator("exploration_tree", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class HistoryEntry(CamelModel):
    """
    State captured immediately before a move was applied.

    Undo restores these values verbatim. The wire names match the records
    already written by earlier saves.
    """
    model_config = ConfigDict(frozen=True)

    grid: Grid
    possible_moves: List[ExplorationNode] = Field(default_factory=list, alias="currentPossibleMoves")
    depth_before_move: int = Field(0, ge=0, alias="currentDepth")
    move_made: MoveRecord
    words_formed_by_move: List[str] = Field(default_factory=list)
    failed_attempts_before_move: int = Field(0, ge=0, alias="turnFailedAttempts")
    was_deviated_before_move: bool = Field(False, alias="isDeviated")


class GameState(CamelModel):
    """Immutable snapshot of a session, returned after every engine call."""
    model_config = ConfigDict(frozen=True)

    grid: Grid
    current_possible_moves: List[ExplorationNode] = Field(default_factory=list)
    current_depth: int = 0
    history: List[HistoryEntry] = Field(default_factory=list)
    has_deviated: bool = False
    turn_failed_attempts: int = 0
    is_game_over: bool = False
    status: GameStatus = "in_progress"
    max_depth_attainable: int = 0
    word_length: int = 4


class SavedProgress(CamelModel):
    """The `progress` part of a persisted session snapshot."""
    last_grid: Grid
    history: List[HistoryEntry] = Field(default_factory=list)
    current_depth: int = Field(0, ge=0)
    turn_failed_attempts: int = Field(0, ge=0)
    has_deviated: bool = False


class SwapResult(CamelModel):
    """Outcome of a swap attempt."""
    success: bool
    message: Optional[str] = None
    words_formed: Optional[List[str]] = None
    move_details: Optional[GameMove] = None
    state: Optional[GameState] = None


class UndoResult(CamelModel):
    """Outcome of an undo request."""
    success: bool
    message: Optional[str] = None
    undone_move: Optional[MoveRecord] = None  # Reversed, ready for a reverse animation
    state: Optional[GameState] = None


class PathStep(CamelModel):
    """One move of an analyzed path through the exploration tree."""
    model_config = ConfigDict(frozen=True)

    from_: Tuple[int, int] = Field(..., alias="from")
    to: Tuple[int, int]
    words_formed: Tuple[str, ...] = ()

    @classmethod
    def from_node(cls, node: ExplorationNode) -> "PathStep":
        return cls(from_=node.move.from_, to=node.move.to, words_formed=tuple(node.words_formed))


class PlayConfig(BaseModel):
    """Configuration for a play or analyze run."""
    levels_dir: str = "levels"
    save_dir: str = ".wordchains"
    difficulty: Difficulty = "normal"
    date: Optional[str] = None  # YYYY-MM-DD, defaults to today
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value
