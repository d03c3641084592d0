"""API dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from mazebot.config import Settings, get_settings
from mazebot.core.maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedMaze,
    parse_maze_text,
)
from mazebot.schemas.maze import MazeSource
from mazebot.services.catalog_service import MazeCatalog, get_maze_catalog
from mazebot.services.session_service import SessionService, get_session_service


def resolve_maze(source: MazeSource, catalog: MazeCatalog) -> ParsedMaze:
    """Parse inline grid data or look up a bundled maze by name."""
    if source.grid_data is not None:
        try:
            return parse_maze_text(source.grid_data, name="Inline")
        except (MazeParseError, MazeValidationError) as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e),
            )

    if source.maze_name is not None:
        maze = catalog.get_maze(source.maze_name)
        if maze is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Maze not found: {source.maze_name}",
            )
        return maze

    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail="Either grid_data or maze_name is required",
    )


# Type aliases for cleaner route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Catalog = Annotated[MazeCatalog, Depends(get_maze_catalog)]
Sessions = Annotated[SessionService, Depends(get_session_service)]
