"""Path analysis over exploration trees."""

from .paths import (
    get_all_optimal_paths,
    get_all_unique_terminal_paths,
    find_longest_word_chain,
    path_words,
)

__all__ = [
    "get_all_optimal_paths",
    "get_all_unique_terminal_paths",
    "find_longest_word_chain",
    "path_words",
]
