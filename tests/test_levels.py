"""
Test suite for level loading and verification.

Tests:
- Structural verification (grid shape, node moves, depth annotations)
- Loading from disk, schema errors and strict/lenient modes
- Content hashing
"""

import json
from datetime import date

import pytest

from src.engine import GameData
from src.levels import (
    InvalidLevelData,
    content_hash,
    level_file_path,
    load_level_file,
    parse_level,
    simple_hash,
    verify_level,
)
from conftest import level, node


def codes(report_or_error):
    issues = getattr(report_or_error, "errors", None) or getattr(report_or_error, "issues", [])
    return [issue.code for issue in issues]


class TestVerifyLevel:
    """Test cases for structural verification."""

    def test_valid_levels(self, line_level, branching_level, rich_level):
        for game_data in (line_level, branching_level, rich_level):
            report = verify_level(game_data)
            assert report.valid is True
            assert report.errors == []

    def test_counts_nodes_and_depth(self, rich_level):
        report = verify_level(rich_level)
        assert report.node_count == 6
        assert report.max_depth == 3

    def test_node_depth_mismatch(self):
        raw = level([node((0, 0), (0, 1), ["cat"], 3, [node((1, 0), (1, 1), ["dog"], 0)])], 4)
        report = verify_level(GameData.model_validate(raw))
        assert report.valid is False
        assert "DEPTH_MISMATCH" in codes(report)
        assert report.errors[0].path == "explorationTree[0]"

    def test_global_depth_mismatch(self):
        raw = level([node((0, 0), (0, 1), ["cat"], 0)], 2)
        report = verify_level(GameData.model_validate(raw))
        assert codes(report) == ["GLOBAL_DEPTH_MISMATCH"]

    def test_non_adjacent_move(self):
        raw = level([node((0, 0), (1, 1), ["cat"], 0)], 1)
        assert codes(verify_level(GameData.model_validate(raw))) == ["NON_ADJACENT_MOVE"]

    def test_move_out_of_bounds(self):
        raw = level([node((0, 3), (0, 4), ["cat"], 0)], 1)
        assert codes(verify_level(GameData.model_validate(raw))) == ["MOVE_OUT_OF_BOUNDS"]

    def test_negative_move_out_of_bounds(self):
        raw = level([node((0, 0), (-1, 0), ["cat"], 0)], 1)
        assert codes(verify_level(GameData.model_validate(raw))) == ["MOVE_OUT_OF_BOUNDS"]

    def test_move_past_short_row(self):
        game_data = GameData.model_validate({
            "initialGrid": [["a", "b", "c"], ["d", "e"]],
            "maxDepthReached": 1,
            "explorationTree": [node((1, 1), (1, 2), ["abc"], 0)],
        })
        assert codes(verify_level(game_data)) == ["RAGGED_GRID", "MOVE_OUT_OF_BOUNDS"]

    def test_missing_move_and_words(self):
        raw = level([{"wordsFormed": [], "maxDepthReached": 0}], 1)
        assert codes(verify_level(GameData.model_validate(raw))) == ["MISSING_MOVE", "EMPTY_WORDS"]

    def test_nested_issue_path(self):
        raw = level([node((0, 0), (0, 1), ["cat"], 1, [node((1, 0), (1, 1), [], 0)])], 2)
        report = verify_level(GameData.model_validate(raw))
        assert codes(report) == ["EMPTY_WORDS"]
        assert report.errors[0].path == "explorationTree[0].nextMoves[0]"

    def test_grid_shape(self):
        ragged = GameData(initial_grid=[["a", "b"], ["c"]], exploration_tree=[])
        assert "RAGGED_GRID" in codes(verify_level(ragged))

        empty = GameData(initial_grid=[], exploration_tree=[])
        assert "EMPTY_GRID" in codes(verify_level(empty))

        wide_cell = GameData(initial_grid=[["ab", "c"]], exploration_tree=[])
        assert "BAD_CELL" in codes(verify_level(wide_cell))


class TestParseLevel:
    """Test cases for building GameData from decoded JSON."""

    def test_reads_camel_case(self, line_raw):
        game_data = parse_level(line_raw)
        assert game_data.word_length == 3
        assert game_data.min_word_length == 3
        assert game_data.required_min_turns == 1
        assert game_data.exploration_tree[0].next_moves[0].words_formed == ["dog"]

    def test_null_next_moves(self, line_raw):
        line_raw["explorationTree"][0]["nextMoves"][0]["nextMoves"] = None
        game_data = parse_level(line_raw)
        assert game_data.exploration_tree[0].next_moves[0].next_moves == []

    def test_missing_fields(self):
        with pytest.raises(InvalidLevelData) as exc_info:
            parse_level({"initialGrid": [["a"]]})
        assert codes(exc_info.value) == ["MISSING_FIELD"]

    def test_not_an_object(self):
        with pytest.raises(InvalidLevelData):
            parse_level([1, 2, 3])

    def test_schema_error(self, line_raw):
        line_raw["maxDepthReached"] = -1
        with pytest.raises(InvalidLevelData) as exc_info:
            parse_level(line_raw)
        assert codes(exc_info.value) == ["SCHEMA"]

    def test_strict_and_lenient(self):
        raw = level([node((0, 0), (0, 1), ["cat"], 0)], 2)
        with pytest.raises(InvalidLevelData) as exc_info:
            parse_level(raw)
        assert "GLOBAL_DEPTH_MISMATCH" in codes(exc_info.value)

        assert parse_level(raw, strict=False).max_depth_reached == 2


class TestLoadLevelFile:
    """Test cases for reading level files."""

    def test_file_path_layout(self, tmp_path):
        path = level_file_path(tmp_path, "hard", date(2025, 5, 7))
        assert path == tmp_path / "hard" / "2025" / "05" / "07.json"

    def test_load_returns_hash(self, write_level, line_raw):
        path = write_level(line_raw, date(2025, 5, 7))
        game_data, file_hash = load_level_file(path)
        assert game_data.max_depth_reached == 2
        assert file_hash == content_hash(line_raw)

    def test_hash_changes_with_content(self, write_level, line_raw):
        day = date(2025, 5, 7)
        _, first = load_level_file(write_level(line_raw, day))
        line_raw["explorationTree"][0]["wordsFormed"] = ["act"]
        _, second = load_level_file(write_level(line_raw, day))
        assert first != second

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_level_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InvalidLevelData, match="not valid JSON"):
            load_level_file(path)


class TestSimpleHash:
    """Test the 32-bit rolling hash."""

    def test_known_values(self):
        assert simple_hash("") == 0
        assert simple_hash("a") == 97
        assert simple_hash("ab") == 97 * 31 + 98
        assert simple_hash("hello") == 99162322

    def test_wraps_to_signed_32_bit(self):
        assert simple_hash("polygenelubricants") == -2147483648
        assert simple_hash("hello world") == 1794106052

    def test_content_hash_is_compact_json(self):
        raw = {"a": [1, 2], "b": "x"}
        assert content_hash(raw) == simple_hash('{"a":[1,2],"b":"x"}')
        assert content_hash(raw) == content_hash(json.loads(json.dumps(raw, indent=2)))
