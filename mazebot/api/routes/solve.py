"""Solve route for running a maze to completion in one request."""

import logging

from fastapi import APIRouter

from mazebot.api.deps import AppSettings, Catalog, resolve_maze
from mazebot.core.renderer import render_frame
from mazebot.core.stepper import Stepper
from mazebot.schemas.maze import MazePosition
from mazebot.schemas.solve import SolveRequest, SolveResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/solve", tags=["Solve"])


@router.post(
    "",
    response_model=SolveResponse,
)
async def solve_maze(
    request: SolveRequest,
    catalog: Catalog,
    settings: AppSettings,
) -> SolveResponse:
    """Solve a maze in one go.

    Runs the bot from the maze's first entrance until it reaches another exit
    or gets stuck. A stuck bot is a normal result, not an error.
    """
    maze = resolve_maze(request, catalog)
    max_steps = request.max_steps or settings.max_steps

    stepper = Stepper.from_maze(maze)
    result = stepper.run(max_steps=max_steps)
    logger.info(
        f"Solved '{maze.name}' ({maze.width}x{maze.height}): "
        f"{result.outcome.value} in {result.steps} steps"
    )

    return SolveResponse(
        outcome=result.outcome.value,
        steps=result.steps,
        path=[MazePosition(row=p.row, column=p.column) for p in result.path],
        path_length=result.path_length,
        goal=MazePosition(row=result.goal.row, column=result.goal.column) if result.goal else None,
        frame=render_frame(maze.grid, path=result.path),
    )
