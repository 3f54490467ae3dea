"""
Level verification for word chain puzzles.

Validates:
1. Grid shape (non-empty, rectangular, single-letter cells)
2. Tree nodes (every node carries a move inside the grid, between adjacent cells, forming words)
3. Depth annotations (each node's depth agrees with its children, the level's with its roots)
"""

from typing import List, Sequence, Tuple

from ..engine.grid import are_adjacent, in_bounds
from ..engine.models import CellCoordinate, ExplorationNode, GameData, Grid
from .models import LevelIssue, LevelReport


def validate_grid(grid: Grid) -> List[LevelIssue]:
    """Validate grid shape and cell contents."""
    errors: List[LevelIssue] = []

    if not grid or not grid[0]:
        errors.append(LevelIssue(code="EMPTY_GRID", message="Initial grid is empty"))
        return errors

    width = len(grid[0])
    for r, row in enumerate(grid):
        if len(row) != width:
            errors.append(LevelIssue(
                code="RAGGED_GRID",
                message=f"Row {r} has {len(row)} cells, expected {width}",
            ))
        for c, cell in enumerate(row):
            if not isinstance(cell, str) or len(cell) != 1:
                errors.append(LevelIssue(
                    code="BAD_CELL",
                    message=f"Cell ({r},{c}) must be a single character, got {cell!r}",
                ))

    return errors


def validate_tree(
    nodes: Sequence[ExplorationNode],
    grid: Grid,
    path: str = "explorationTree",
) -> Tuple[List[LevelIssue], int]:
    """
    Validate every node below `nodes`.

    Returns:
        Tuple of (errors, number of nodes visited)
    """
    errors: List[LevelIssue] = []
    count = 0

    for i, node in enumerate(nodes):
        where = f"{path}[{i}]"
        count += 1

        if node.move is None:
            errors.append(LevelIssue(code="MISSING_MOVE", message="Node has no move", path=where))
        else:
            start, end = node.move.from_, node.move.to
            if not (in_bounds(grid, *start) and in_bounds(grid, *end)):
                errors.append(LevelIssue(
                    code="MOVE_OUT_OF_BOUNDS",
                    message=f"Move {start} -> {end} leaves the grid",
                    path=where,
                ))
            elif not are_adjacent(
                CellCoordinate(row=start[0], col=start[1]),
                CellCoordinate(row=end[0], col=end[1]),
            ):
                errors.append(LevelIssue(
                    code="NON_ADJACENT_MOVE",
                    message=f"Move {start} -> {end} does not swap adjacent cells",
                    path=where,
                ))

        if not node.words_formed:
            errors.append(LevelIssue(code="EMPTY_WORDS", message="Node forms no words", path=where))

        expected = 1 + max(child.max_depth_reached for child in node.next_moves) if node.next_moves else 0
        if node.max_depth_reached != expected:
            errors.append(LevelIssue(
                code="DEPTH_MISMATCH",
                message=f"maxDepthReached is {node.max_depth_reached}, children imply {expected}",
                path=where,
            ))

        child_errors, child_count = validate_tree(node.next_moves, grid, f"{where}.nextMoves")
        errors.extend(child_errors)
        count += child_count

    return errors, count


def verify_level(game_data: GameData) -> LevelReport:
    """
    Main verification function: checks a level's structural invariants.

    Returns a LevelReport with:
    - valid: True if the level passes all checks
    - errors: List of issues found
    - node_count: Number of tree nodes visited
    - max_depth: Depth implied by the root nodes
    """
    errors = validate_grid(game_data.initial_grid)

    tree_errors, node_count = validate_tree(game_data.exploration_tree, game_data.initial_grid)
    errors.extend(tree_errors)

    roots = game_data.exploration_tree
    implied = max((1 + root.max_depth_reached for root in roots), default=0)
    if game_data.max_depth_reached != implied:
        errors.append(LevelIssue(
            code="GLOBAL_DEPTH_MISMATCH",
            message=f"Level maxDepthReached is {game_data.max_depth_reached}, tree implies {implied}",
        ))

    return LevelReport(
        valid=len(errors) == 0,
        errors=errors,
        node_count=node_count,
        max_depth=implied,
    )
