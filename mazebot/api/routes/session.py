"""Session routes for stepping a maze solve one decision at a time."""

import logging
import uuid

from fastapi import APIRouter, HTTPException, status

from mazebot.api.deps import AppSettings, Catalog, Sessions, resolve_maze
from mazebot.core.renderer import render_frame
from mazebot.core.stepper import StepperState
from mazebot.schemas.maze import MazePosition
from mazebot.schemas.session import (
    SessionCreateRequest,
    SessionState,
    StepEventSchema,
    StepRequest,
    StepResponse,
)
from mazebot.services.session_service import (
    SessionLimitError,
    SessionNotFoundError,
    SessionService,
    SolveSession,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["Sessions"])


def _get_or_404(sessions: SessionService, session_id: uuid.UUID) -> SolveSession:
    try:
        return sessions.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )


def _session_state(session: SolveSession) -> SessionState:
    stepper = session.stepper
    path = stepper.route() if stepper.state is StepperState.SOLVED else None

    return SessionState(
        id=session.id,
        maze_name=session.maze.name,
        position=MazePosition(
            row=stepper.bot.position.row,
            column=stepper.bot.position.column,
        ),
        direction=stepper.bot.direction.value,
        status=session.status,
        steps=stepper.steps,
        history_depth=len(stepper.history),
        created_at=session.created_at,
        completed_at=session.completed_at,
        frame=render_frame(session.maze.grid, bot=stepper.bot.position, path=path),
    )


@router.post(
    "",
    response_model=SessionState,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    request: SessionCreateRequest,
    catalog: Catalog,
    sessions: Sessions,
) -> SessionState:
    """Create a new solve session.

    The bot starts at the maze's first entrance, facing into the maze.
    """
    maze = resolve_maze(request, catalog)

    try:
        session = sessions.create_session(maze)
    except SessionLimitError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(e),
        )

    return _session_state(session)


@router.get(
    "/{session_id}",
    response_model=SessionState,
)
async def get_session(session_id: uuid.UUID, sessions: Sessions) -> SessionState:
    """Get session state by ID."""
    return _session_state(_get_or_404(sessions, session_id))


@router.post(
    "/{session_id}/step",
    response_model=StepResponse,
)
async def step(
    session_id: uuid.UUID,
    request: StepRequest,
    sessions: Sessions,
    settings: AppSettings,
) -> StepResponse:
    """Advance the bot by up to `count` decisions.

    Stops early when the bot reaches an exit or gets stuck.
    """
    session = _get_or_404(sessions, session_id)

    if session.stepper.is_finished:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Session is not active (status: {session.status})",
        )

    if request.count > settings.max_steps_per_request:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"count must not exceed {settings.max_steps_per_request}",
        )

    events = sessions.step(session_id, request.count)

    path = []
    if session.stepper.state is StepperState.SOLVED:
        path = [MazePosition(row=p.row, column=p.column) for p in session.stepper.route()]

    return StepResponse(
        events=[
            StepEventSchema(
                step=event.step,
                kind=event.kind.value,
                state=event.state.value,
                position=MazePosition(row=event.position.row, column=event.position.column),
                direction=event.direction.value,
            )
            for event in events
        ],
        session=_session_state(session),
        path=path,
    )


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def end_session(session_id: uuid.UUID, sessions: Sessions) -> None:
    """End and discard a session."""
    if not sessions.end_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    logger.info(f"Ended session {session_id}")
