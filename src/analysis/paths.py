"""
Path analysis over a level's exploration tree.

All functions here are pure: they read the tree and never modify it.
Recursion depth is bounded by the level's maximum depth, which is small.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..engine.models import ExplorationNode, GameData, HistoryEntry, PathStep


Path = List[PathStep]


def _collect_paths(
    nodes: Iterable[ExplorationNode],
    prefix: Tuple[PathStep, ...],
    found: Dict[Tuple[PathStep, ...], None],
    target_depth: Optional[int],
) -> None:
    for node in nodes:
        if node.move is None:
            continue

        path = prefix + (PathStep.from_node(node),)
        length = len(path)

        if target_depth is not None and length + node.max_depth_reached < target_depth:
            continue  # Cannot reach the optimum through this branch

        if node.is_terminal:
            if target_depth is None or (node.max_depth_reached == 0 and length == target_depth):
                found.setdefault(path, None)
            continue

        _collect_paths(node.next_moves, path, found, target_depth)


def get_all_optimal_paths(game_data: GameData) -> List[Path]:
    """
    Every distinct move sequence that reaches the level's maximum depth.

    Branches that can no longer reach the maximum are pruned. Duplicate
    sequences (same moves and words in the same order) are returned once,
    in the order they were first found.

    Args:
        game_data: The level to analyze

    Returns:
        List of paths, each exactly `max_depth_reached` steps long
    """
    global_max = game_data.max_depth_reached
    if global_max == 0:
        return []

    found: Dict[Tuple[PathStep, ...], None] = {}
    _collect_paths(game_data.exploration_tree, (), found, global_max)
    return [list(path) for path in found]


def get_all_unique_terminal_paths(game_data: GameData) -> List[Path]:
    """
    Every distinct move sequence that ends where no further move exists.

    No depth pruning is applied, so the result includes all optimal paths
    plus every shorter dead end.
    """
    found: Dict[Tuple[PathStep, ...], None] = {}
    _collect_paths(game_data.exploration_tree, (), found, None)
    return [list(path) for path in found]


def _history_match_count(path: Sequence[PathStep], history: Sequence[HistoryEntry]) -> int:
    """Count leading steps whose first word equals the player's word at that depth."""
    count = 0
    for step, entry in zip(path, history):
        played = entry.words_formed_by_move[0] if entry.words_formed_by_move else None
        word = step.words_formed[0] if step.words_formed else None
        if played and word and played.upper() == word.upper():
            count += 1
        else:
            break
    return count


def find_longest_word_chain(
    tree: Sequence[ExplorationNode],
    play_history: Optional[Sequence[HistoryEntry]] = None,
) -> Path:
    """
    Pick one longest path through the tree, staying close to the player's moves.

    Longer paths always win. Among equally long paths the one sharing the
    longest prefix with `play_history` (compared by first word formed,
    case-insensitively) wins; remaining ties keep the earliest path in tree
    order.

    Args:
        tree: Root nodes of the exploration tree
        play_history: Moves already played, oldest first

    Returns:
        The chosen path, or an empty list for an empty tree
    """
    history = list(play_history or [])

    def trace(node: ExplorationNode, prefix: Path) -> Tuple[Path, int]:
        path = prefix + [PathStep.from_node(node)]
        best = (path, _history_match_count(path, history))

        for child in node.next_moves:
            if child.move is None:
                continue
            candidate = trace(child, path)
            if _is_better(candidate, best):
                best = candidate
        return best

    best: Tuple[Path, int] = ([], -1)
    for root in tree:
        if root.move is None:
            continue
        candidate = trace(root, [])
        if _is_better(candidate, best):
            best = candidate
    return best[0]


def _is_better(candidate: Tuple[Path, int], best: Tuple[Path, int]) -> bool:
    if len(candidate[0]) != len(best[0]):
        return len(candidate[0]) > len(best[0])
    return candidate[1] > best[1]


def path_words(path: Sequence[PathStep]) -> List[str]:
    """Flatten a path into the words it forms, in order."""
    return [word for step in path for word in step.words_formed]
