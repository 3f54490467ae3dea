"""Test path analysis over exploration trees."""

from src.analysis import (
    find_longest_word_chain,
    get_all_optimal_paths,
    get_all_unique_terminal_paths,
    path_words,
)
from src.engine import GameData, WordChainGame
from conftest import cell, level, node


def words_of(paths):
    return [path_words(path) for path in paths]


class TestOptimalPaths:
    """Test enumeration of paths reaching the maximum depth."""

    def test_single_line(self, line_level):
        paths = get_all_optimal_paths(line_level)
        assert words_of(paths) == [["cat", "dog"]]
        assert paths[0][0].from_ == (0, 0)
        assert paths[0][0].to == (0, 1)

    def test_prunes_dead_ends(self, rich_level):
        """Only the branch that reaches depth 3 is returned."""
        paths = get_all_optimal_paths(rich_level)
        assert words_of(paths) == [["cat", "dog", "ate"]]

    def test_every_path_has_max_length(self, twin_level, rich_level, branching_level):
        for game_data in (twin_level, rich_level, branching_level):
            for path in get_all_optimal_paths(game_data):
                assert len(path) == game_data.max_depth_reached

    def test_empty_when_max_depth_zero(self):
        game_data = GameData.model_validate(level([node((0, 0), (0, 1), ["cat"], 0)], 0))
        assert get_all_optimal_paths(game_data) == []

    def test_duplicates_removed(self, line_raw):
        """The same sequence reachable twice is returned once."""
        line_raw["explorationTree"].append(line_raw["explorationTree"][0])
        game_data = GameData.model_validate(line_raw)

        assert len(get_all_optimal_paths(game_data)) == 1
        assert len(get_all_unique_terminal_paths(game_data)) == 1

    def test_keeps_distinct_paths_in_tree_order(self, twin_level):
        paths = get_all_optimal_paths(twin_level)
        assert words_of(paths) == [["cat", "dog"], ["ace", "ogz"]]


class TestTerminalPaths:
    """Test enumeration of every path ending in a dead end."""

    def test_includes_short_dead_ends(self, rich_level):
        paths = get_all_unique_terminal_paths(rich_level)
        assert words_of(paths) == [
            ["cat", "dog", "ate"],
            ["cat", "goz"],
            ["ace", "dog"],
        ]

    def test_contains_every_optimal_path(self, rich_level, branching_level, twin_level):
        for game_data in (rich_level, branching_level, twin_level):
            terminal = get_all_unique_terminal_paths(game_data)
            for path in get_all_optimal_paths(game_data):
                assert path in terminal

    def test_empty_tree(self):
        game_data = GameData(initial_grid=[["a"]], max_depth_reached=0, exploration_tree=[])
        assert get_all_unique_terminal_paths(game_data) == []


class TestLongestWordChain:
    """Test selection of the single chain shown to the player."""

    def test_prefers_longest(self, rich_level):
        chain = find_longest_word_chain(rich_level.exploration_tree)
        assert path_words(chain) == ["cat", "dog", "ate"]

    def test_tie_keeps_tree_order_without_history(self, twin_level):
        chain = find_longest_word_chain(twin_level.exploration_tree, [])
        assert path_words(chain) == ["cat", "dog"]

    def test_tie_follows_player_history(self, twin_level):
        """Among equally long chains the one matching the player's moves wins."""
        game = WordChainGame.create(twin_level)
        game.perform_swap(cell(0, 2), cell(0, 3))

        chain = find_longest_word_chain(twin_level.exploration_tree, game.history)

        assert path_words(chain) == ["ace", "ogz"]

    def test_history_match_is_case_insensitive(self, twin_level):
        game = WordChainGame.create(twin_level)
        game.perform_swap(cell(0, 2), cell(0, 3))
        shouted = [game.history[0].model_copy(update={"words_formed_by_move": ["ACE"]})]

        chain = find_longest_word_chain(twin_level.exploration_tree, shouted)

        assert path_words(chain) == ["ace", "ogz"]

    def test_length_beats_history(self, rich_level):
        """A longer chain wins even if the player started elsewhere."""
        game = WordChainGame.create(rich_level)
        game.perform_swap(cell(0, 2), cell(0, 3))

        chain = find_longest_word_chain(rich_level.exploration_tree, game.history)

        assert path_words(chain) == ["cat", "dog", "ate"]

    def test_empty_tree(self):
        assert find_longest_word_chain([]) == []

    def test_steps_carry_moves(self, line_level):
        chain = find_longest_word_chain(line_level.exploration_tree)
        assert [(step.from_, step.to) for step in chain] == [((0, 0), (0, 1)), ((1, 0), (1, 1))]
