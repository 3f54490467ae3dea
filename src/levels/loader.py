"""Reading level files from disk."""

import json
import logging
import struct
from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Tuple
from pydantic import ValidationError

from ..engine.models import GameData
from .models import LevelIssue
from .verify import verify_level

logger = logging.getLogger(__name__)


class InvalidLevelData(ValueError):
    """A level file is unreadable, malformed, or breaks the tree invariants."""

    def __init__(self, message: str, issues: Optional[List[LevelIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


def level_file_path(levels_dir: str | Path, difficulty: str, day: date) -> Path:
    """Location of a day's level: <levels_dir>/<difficulty>/YYYY/MM/DD.json."""
    return Path(levels_dir) / difficulty / f"{day.year:04d}" / f"{day.month:02d}" / f"{day.day:02d}.json"


def simple_hash(text: str) -> int:
    """
    32-bit signed rolling hash (h = h * 31 + unit) over UTF-16 code units.

    Matches the hash stored alongside saved progress, so snapshots written
    by other clients of the same level files stay valid.
    """
    h = 0
    for (unit,) in struct.iter_unpack("<H", text.encode("utf-16-le")):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def content_hash(raw: Any) -> int:
    """Hash of a level's compact JSON serialization."""
    return simple_hash(json.dumps(raw, separators=(",", ":"), ensure_ascii=False))


def parse_level(raw: Any, strict: bool = True) -> GameData:
    """
    Build GameData from decoded JSON.

    Args:
        raw: Decoded level JSON
        strict: Also run the structural verifier

    Raises:
        InvalidLevelData: If required fields are missing or invariants fail
    """
    if not isinstance(raw, dict):
        raise InvalidLevelData("Level data must be a JSON object")

    missing = [key for key in ("initialGrid", "explorationTree") if raw.get(key) is None]
    if missing:
        raise InvalidLevelData(
            f"Level data is missing {', '.join(missing)}",
            [LevelIssue(code="MISSING_FIELD", message=f"'{key}' is required") for key in missing],
        )

    try:
        game_data = GameData.model_validate(raw)
    except ValidationError as e:
        issues = [
            LevelIssue(
                code="SCHEMA",
                message=err["msg"],
                path=".".join(str(part) for part in err["loc"]),
            )
            for err in e.errors()
        ]
        raise InvalidLevelData(f"Level data does not match the schema ({len(issues)} errors)", issues) from e

    if strict:
        report = verify_level(game_data)
        if not report.valid:
            raise InvalidLevelData(
                f"Level data breaks {len(report.errors)} invariant(s): {report.errors[0].message}",
                report.errors,
            )

    return game_data


def load_level_file(path: str | Path, strict: bool = True) -> Tuple[GameData, int]:
    """
    Load and validate a level file.

    Args:
        path: Path to the level JSON file
        strict: Also run the structural verifier

    Returns:
        Tuple of (game data, content hash)

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidLevelData: If the file is not valid level data
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Level file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidLevelData(f"Level file {path} is not valid JSON: {e}") from e

    game_data = parse_level(raw, strict=strict)
    file_hash = content_hash(raw)
    logger.info(f"Loaded level {path} (max depth {game_data.max_depth_reached}, hash {file_hash})")
    return game_data, file_hash
