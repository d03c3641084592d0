"""Maze schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field


class MazePosition(BaseModel):
    """Schema for a position in the maze."""

    row: int
    column: int


class ExitPointSchema(BaseModel):
    """Schema for an entrance/exit cell."""

    position: MazePosition
    direction: str


class MazeBase(BaseModel):
    """Base maze schema with common fields."""

    name: str
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class MazeListItem(MazeBase):
    """Schema for maze list item (without grid data)."""

    slug: str
    exit_count: int


class MazeDetail(MazeBase):
    """Schema for detailed maze response with grid data."""

    slug: str
    grid_data: str
    start: ExitPointSchema
    goals: list[ExitPointSchema]


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class MazeSource(BaseModel):
    """Either inline grid data or the name of a bundled maze."""

    grid_data: Optional[str] = Field(None, min_length=1)
    maze_name: Optional[str] = Field(None, min_length=1, max_length=100)
