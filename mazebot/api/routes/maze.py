"""Maze routes for listing and retrieving bundled mazes."""

from fastapi import APIRouter, HTTPException, status

from mazebot.api.deps import Catalog
from mazebot.core.grid import ExitPoint
from mazebot.schemas.maze import (
    ExitPointSchema,
    MazeDetail,
    MazeListItem,
    MazeListResponse,
    MazePosition,
)

router = APIRouter(prefix="/maze", tags=["Mazes"])


def _exit_schema(exit_point: ExitPoint) -> ExitPointSchema:
    return ExitPointSchema(
        position=MazePosition(
            row=exit_point.position.row,
            column=exit_point.position.column,
        ),
        direction=exit_point.direction.value,
    )


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes(catalog: Catalog) -> MazeListResponse:
    """List all bundled mazes.

    Grid data is not included - use GET /v1/maze/{name} for full details.
    """
    maze_items = [
        MazeListItem(
            name=maze.name,
            slug=catalog.slug(maze.name),
            width=maze.width,
            height=maze.height,
            exit_count=len(maze.exits),
        )
        for maze in catalog.list_mazes()
    ]

    return MazeListResponse(
        mazes=maze_items,
        total=len(maze_items),
    )


@router.get(
    "/{name}",
    response_model=MazeDetail,
)
async def get_maze(name: str, catalog: Catalog) -> MazeDetail:
    """Get detailed information about a bundled maze, including grid data."""
    maze = catalog.get_maze(name)

    if not maze:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {name}",
        )

    return MazeDetail(
        name=maze.name,
        slug=catalog.slug(maze.name),
        width=maze.width,
        height=maze.height,
        grid_data=maze.grid_data,
        start=_exit_schema(maze.start),
        goals=[_exit_schema(goal) for goal in maze.goals],
    )
