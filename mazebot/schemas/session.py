"""Session schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from mazebot.schemas.maze import MazePosition, MazeSource


class SessionCreateRequest(MazeSource):
    """Schema for creating a new session."""

    pass


class SessionState(BaseModel):
    """Schema for session state."""

    id: uuid.UUID
    maze_name: str
    position: MazePosition
    direction: str
    status: str  # advancing, backtracking, solved, stuck
    steps: int
    history_depth: int
    created_at: datetime
    completed_at: Optional[datetime] = None
    frame: str


class StepRequest(BaseModel):
    """Schema for step request."""

    count: int = Field(1, ge=1)


class StepEventSchema(BaseModel):
    """Schema for a single step event."""

    step: int
    kind: str  # advanced, turned, backtracked, solved, stuck
    state: str
    position: MazePosition
    direction: str


class StepResponse(BaseModel):
    """Schema for step response."""

    events: list[StepEventSchema]
    session: SessionState
    path: list[MazePosition] = Field(default_factory=list)
