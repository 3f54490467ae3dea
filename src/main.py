"""
Main entry point for playing and analyzing word chain levels.

Usage:
    python -m src.main play --difficulty hard
    python -m src.main play --config config.yaml --date 2025-05-07 --verbose
    python -m src.main analyze --config config.yaml
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

from .analysis import find_longest_word_chain, get_all_optimal_paths, get_all_unique_terminal_paths, path_words
from .engine import DIFFICULTIES, CellCoordinate, PathStep, PlayConfig, render_grid
from .levels import InvalidLevelData, level_file_path, load_level_file
from .session import GameSession
from .storage import JsonDirectoryStore, ProgressStore

HELP_TEXT = """Commands:
  swap R1 C1 R2 C2   swap two adjacent cells (0-based row/col)
  undo               take back the last move
  reset              start the level over
  hint               highlight the word formed by the best move
  paths              show the longest chain from here
  quit               save and exit"""


def load_config(config_path: Optional[str]) -> PlayConfig:
    """Load play configuration from a YAML file, or defaults if no path is given."""
    if not config_path:
        return PlayConfig()

    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return PlayConfig(**data)


def format_step(step: PathStep) -> str:
    words = ", ".join(word.upper() for word in step.words_formed)
    return f"({step.from_[0]},{step.from_[1]}) <-> ({step.to[0]},{step.to[1]})  {words}"


def print_state(session: GameSession, highlight=()) -> None:
    state = session.state
    print(render_grid(state.grid, highlight))
    print(
        f"Depth {state.current_depth}/{state.max_depth_attainable}"
        f"  |  status: {state.status}"
        f"{'  |  off the best path' if state.has_deviated else ''}"
    )


def run_play(session: GameSession) -> int:
    """Interactive loop on stdin."""
    print(HELP_TEXT)
    print()
    print_state(session)

    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break

        if not line:
            continue

        command, *args = line.split()
        command = command.lower()

        if command in ("quit", "exit", "q"):
            break

        if command == "swap":
            try:
                r1, c1, r2, c2 = (int(a) for a in args)
                cell_a = CellCoordinate(row=r1, col=c1)
                cell_b = CellCoordinate(row=r2, col=c2)
            except ValueError:
                print("Usage: swap R1 C1 R2 C2 (non-negative integers)")
                continue
            result = session.swap(cell_a, cell_b)
            if result.success:
                print(f"✓ {', '.join(w.upper() for w in result.words_formed)}")
            else:
                print(f"✗ {result.message} (failed attempts: {session.state.turn_failed_attempts})")

        elif command == "undo":
            result = session.undo()
            if not result.success:
                print(result.message)

        elif command == "reset":
            session.reset()

        elif command == "hint":
            cells = session.game.calculate_hint_coordinates()
            if not cells:
                print("No hint available")
            print_state(session, cells)
            continue

        elif command == "paths":
            for step in session.optimal_path():
                print(f"  {format_step(step)}")
            continue

        else:
            print(HELP_TEXT)
            continue

        print_state(session)
        if session.state.is_game_over:
            summary = session.build_summary()
            print()
            print("=== Game Over ===")
            print(f"Score: {summary.score}/{summary.max_score}")
            print(f"Words found: {', '.join(w.upper() for w in summary.unique_words_found)}")
            print(f"Longest chain: {', '.join(w.upper() for w in summary.optimal_path_words)}")
            print("(undo or reset to keep playing)")

    session.save()
    return 0


def run_analyze(path: Path, strict: bool) -> int:
    """Print the path analysis of a level file."""
    game_data, file_hash = load_level_file(path, strict=strict)

    optimal = get_all_optimal_paths(game_data)
    terminal = get_all_unique_terminal_paths(game_data)
    chain = find_longest_word_chain(game_data.exploration_tree)

    print(f"Level: {path}")
    print(f"Hash: {file_hash}")
    print(render_grid(game_data.initial_grid))
    print(f"Max depth: {game_data.max_depth_reached}")
    print(f"Optimal paths: {len(optimal)}")
    print(f"Terminal paths: {len(terminal)}")
    print(f"Dead ends: {len(terminal) - len(optimal)}")
    print()
    print("Longest chain:")
    for i, step in enumerate(chain, start=1):
        print(f"  {i}. {format_step(step)}")
    print(f"Words: {', '.join(w.upper() for w in path_words(chain))}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Play or analyze a word chain level",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  levels_dir: levels
  save_dir: .wordchains
  difficulty: hard
  log_level: INFO
        """
    )
    parser.add_argument(
        "command",
        choices=["play", "analyze"],
        help="play interactively or print the path analysis"
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--difficulty", "-d",
        choices=DIFFICULTIES,
        help="Level difficulty (overrides config)"
    )
    parser.add_argument(
        "--date",
        help="Level date as YYYY-MM-DD (default: today)"
    )
    parser.add_argument(
        "--level",
        help="Analyze this level file instead of the dated one"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip tree invariant checks when loading"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr"
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.difficulty:
        config.difficulty = args.difficulty
    if args.date:
        config.date = args.date

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        day = date.fromisoformat(config.date) if config.date else date.today()
    except ValueError:
        print(f"Error: invalid date '{config.date}', expected YYYY-MM-DD", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "analyze":
            path = Path(args.level) if args.level else level_file_path(config.levels_dir, config.difficulty, day)
            return run_analyze(path, strict=not args.lenient)

        store = ProgressStore(JsonDirectoryStore(config.save_dir))
        session = GameSession.open(config.levels_dir, store, day, config.difficulty, strict=not args.lenient)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except InvalidLevelData as e:
        print(f"Error: {e}", file=sys.stderr)
        for issue in e.issues[:5]:
            print(f"  - {issue.code}: {issue.message}{f' at {issue.path}' if issue.path else ''}", file=sys.stderr)
        sys.exit(1)

    print(f"{config.difficulty.capitalize()} level for {day.isoformat()}")
    if session.viewing_solution:
        print("Already completed today. Showing your solution (reset to play again).")

    try:
        return run_play(session)
    except KeyboardInterrupt:
        print("\nInterrupted, saving progress")
        session.save()
        return 0


if __name__ == "__main__":
    sys.exit(main())
