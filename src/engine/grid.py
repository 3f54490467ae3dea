"""Grid utilities: adjacency, swapping, word location and rendering."""

import logging
from typing import List, Optional, Sequence

from .models import CellCoordinate, GameMove, Grid

logger = logging.getLogger(__name__)


def copy_grid(grid: Sequence[Sequence[str]]) -> Grid:
    """Return a row-by-row copy of the grid."""
    return [list(row) for row in grid]


def in_bounds(grid: Sequence[Sequence[str]], row: int, col: int) -> bool:
    """Check that a position lies inside the grid (rows may differ in length)."""
    return 0 <= row < len(grid) and 0 <= col < len(grid[row])


def are_adjacent(cell_a: Optional[CellCoordinate], cell_b: Optional[CellCoordinate]) -> bool:
    """True if the cells share an edge (no diagonals)."""
    if cell_a is None or cell_b is None:
        return False
    row_diff = abs(cell_a.row - cell_b.row)
    col_diff = abs(cell_a.col - cell_b.col)
    return (row_diff, col_diff) in ((1, 0), (0, 1))


def swap_cells(grid: Grid, cell_a: CellCoordinate, cell_b: CellCoordinate) -> None:
    """Swap two cells in place."""
    grid[cell_a.row][cell_a.col], grid[cell_b.row][cell_b.col] = (
        grid[cell_b.row][cell_b.col],
        grid[cell_a.row][cell_a.col],
    )


def find_word_coordinates(grid: Sequence[Sequence[str]], word: str, move: GameMove) -> List[CellCoordinate]:
    """
    Locate a word formed by a move.

    Only the rows and columns touched by the move are searched: rows first,
    then columns, returning the first occurrence found.

    Args:
        grid: Grid with the move already applied
        word: The word to locate
        move: The move that formed the word

    Returns:
        The word's cells in reading order, or an empty list if not found
    """
    if not word or not grid:
        return []

    rows = len(grid)
    cols = len(grid[0])

    for r in dict.fromkeys((move.from_[0], move.to[0])):
        if not 0 <= r < rows:
            continue
        index = "".join(grid[r]).find(word)
        if index != -1:
            return [CellCoordinate(row=r, col=index + i) for i in range(len(word))]

    for c in dict.fromkeys((move.from_[1], move.to[1])):
        if not 0 <= c < cols:
            continue
        column = "".join(grid[r][c] if c < len(grid[r]) else "?" for r in range(rows))
        index = column.find(word)
        if index != -1:
            return [CellCoordinate(row=index + i, col=c) for i in range(len(word))]

    logger.warning(f"Cells for word '{word}' not found after move {move.from_} -> {move.to}")
    return []


def render_grid(grid: Sequence[Sequence[str]], highlight: Sequence[CellCoordinate] = ()) -> str:
    """
    Render the grid as text, one row per line.

    Highlighted cells are wrapped in brackets; others are padded to line up.
    """
    marked = {(cell.row, cell.col) for cell in highlight}
    lines = []
    for r, row in enumerate(grid):
        cells = [
            f"[{letter.upper()}]" if (r, c) in marked else f" {letter.upper()} "
            for c, letter in enumerate(row)
        ]
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)
