"""Data models for level verification."""

from typing import List, Optional
from pydantic import BaseModel, Field


class LevelIssue(BaseModel):
    """A single problem found in a level file."""
    code: str
    message: str
    path: Optional[str] = None  # Node location, e.g. "explorationTree[0].nextMoves[2]"


class LevelReport(BaseModel):
    """Result of level verification."""
    valid: bool
    errors: List[LevelIssue] = Field(default_factory=list)
    node_count: int = 0
    max_depth: int = 0
