"""Level file loading and verification."""

from .models import LevelIssue, LevelReport
from .verify import verify_level, validate_grid, validate_tree
from .loader import (
    InvalidLevelData,
    level_file_path,
    simple_hash,
    content_hash,
    parse_level,
    load_level_file,
)

__all__ = [
    # Models
    "LevelIssue",
    "LevelReport",
    # Verification
    "verify_level",
    "validate_grid",
    "validate_tree",
    # Loading
    "InvalidLevelData",
    "level_file_path",
    "simple_hash",
    "content_hash",
    "parse_level",
    "load_level_file",
]
