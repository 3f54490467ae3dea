"""Shared level fixtures.

All levels use the same 2x4 grid:

    a c t e
    o d g z

Swapping (0,0)-(0,1) spells "cat" along row 0 and swapping (1,0)-(1,1)
spells "dog" along row 1.
"""

import json

import pytest

from src.engine import CellCoordinate, GameData


GRID = [["a", "c", "t", "e"], ["o", "d", "g", "z"]]


def node(frm, to, words, depth=0, children=None) -> dict:
    """Build a raw exploration node in the level file format."""
    raw = {
        "move": {"from": list(frm), "to": list(to)},
        "wordsFormed": list(words),
        "maxDepthReached": depth,
    }
    if children:
        raw["nextMoves"] = children
    return raw


def level(tree, max_depth) -> dict:
    """Build a raw level in the level file format."""
    return {
        "initialGrid": [row[:] for row in GRID],
        "minWordLength": 3,
        "wordLength": 3,
        "requiredMinTurns": 1,
        "maxDepthReached": max_depth,
        "explorationTree": tree,
    }


def cell(row: int, col: int) -> CellCoordinate:
    return CellCoordinate(row=row, col=col)


@pytest.fixture
def line_raw() -> dict:
    """One optimal line: cat then dog."""
    return level([
        node((0, 0), (0, 1), ["cat"], 1, [node((1, 0), (1, 1), ["dog"], 0)]),
    ], 2)


@pytest.fixture
def line_level(line_raw) -> GameData:
    return GameData.model_validate(line_raw)


@pytest.fixture
def branching_level() -> GameData:
    """An optimal root (cat, then dog) and a dead-end root (ace)."""
    return GameData.model_validate(level([
        node((0, 0), (0, 1), ["cat"], 1, [node((1, 0), (1, 1), ["dog"], 0)]),
        node((0, 2), (0, 3), ["ace"], 0),
    ], 2))


@pytest.fixture
def rich_level() -> GameData:
    """
    Depth 3 level with one optimal path and two dead ends.

        cat (2) -> dog (1) -> ate (0)
                -> goz (0)
        ace (1) -> dog (0)
    """
    return GameData.model_validate(level([
        node((0, 0), (0, 1), ["cat"], 2, [
            node((1, 0), (1, 1), ["dog"], 1, [node((0, 2), (0, 3), ["ate"], 0)]),
            node((1, 2), (1, 3), ["goz"], 0),
        ]),
        node((0, 2), (0, 3), ["ace"], 1, [node((1, 0), (1, 1), ["dog"], 0)]),
    ], 3))


@pytest.fixture
def twin_level() -> GameData:
    """Two equally long paths: cat -> dog and ace -> ogz."""
    return GameData.model_validate(level([
        node((0, 0), (0, 1), ["cat"], 1, [node((1, 0), (1, 1), ["dog"], 0)]),
        node((0, 2), (0, 3), ["ace"], 1, [node((1, 2), (1, 3), ["ogz"], 0)]),
    ], 2))


@pytest.fixture
def write_level(tmp_path):
    """Write a raw level under tmp_path/levels/<difficulty>/YYYY/MM/DD.json."""
    def _write(raw: dict, day, difficulty: str = "normal"):
        path = tmp_path / "levels" / difficulty / f"{day.year:04d}" / f"{day.month:02d}" / f"{day.day:02d}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(raw))
        return path
    return _write
