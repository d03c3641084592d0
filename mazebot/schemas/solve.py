"""Solve schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field

from mazebot.schemas.maze import MazePosition, MazeSource


class SolveRequest(MazeSource):
    """Schema for a one-shot solve request."""

    max_steps: Optional[int] = Field(None, gt=0)


class SolveResponse(BaseModel):
    """Schema for solve response."""

    outcome: str  # solved, stuck, aborted
    steps: int
    path: list[MazePosition]
    path_length: int
    goal: Optional[MazePosition] = None
    frame: str
