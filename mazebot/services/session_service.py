"""Session service holding step-by-step solves in memory."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from mazebot.config import get_settings
from mazebot.core.maze_parser import ParsedMaze
from mazebot.core.stepper import StepEvent, Stepper

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    """Raised when a session ID is unknown."""

    pass


class SessionLimitError(Exception):
    """Raised when the maximum number of sessions is reached."""

    pass


@dataclass
class SolveSession:
    """A stepper bound to the maze it is solving."""

    id: uuid.UUID
    maze: ParsedMaze
    stepper: Stepper
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_active_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def status(self) -> str:
        return self.stepper.state.value


class SessionService:
    """In-memory registry of solve sessions.

    The stepper of a session is only touched from request handlers, which run
    on a single event loop; step() itself never awaits.
    """

    def __init__(self, max_sessions: int, session_ttl_seconds: Optional[int] = None):
        self.max_sessions = max_sessions
        self.session_ttl = (
            timedelta(seconds=session_ttl_seconds) if session_ttl_seconds is not None else None
        )
        self._sessions: dict[uuid.UUID, SolveSession] = {}

    def create_session(self, maze: ParsedMaze) -> SolveSession:
        """
        Create a new session at the maze's start exit.

        Idle sessions past their TTL are evicted first. When the registry is
        still full, finished sessions make room for the new one.
        """
        self.evict_expired()
        if len(self._sessions) >= self.max_sessions:
            self.evict_finished()

        if len(self._sessions) >= self.max_sessions:
            raise SessionLimitError(f"Session limit reached ({self.max_sessions})")

        session = SolveSession(
            id=uuid.uuid4(),
            maze=maze,
            stepper=Stepper.from_maze(maze),
        )
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id} for maze '{maze.name}'")
        return session

    def get_session(self, session_id: uuid.UUID) -> SolveSession:
        """Get session by ID."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    def step(self, session_id: uuid.UUID, count: int = 1) -> list[StepEvent]:
        """
        Advance a session's stepper.

        Args:
            session_id: Active session ID.
            count: Maximum number of steps; stops early when the search ends.

        Returns:
            The step events, in order.

        Raises:
            SessionNotFoundError: If the session does not exist.
            StepperFinishedError: If the session already finished.
        """
        session = self.get_session(session_id)
        session.last_active_at = datetime.now(timezone.utc)
        stepper = session.stepper

        events = [stepper.step()]
        while len(events) < count and not stepper.is_finished:
            events.append(stepper.step())

        if stepper.is_finished and session.completed_at is None:
            session.completed_at = datetime.now(timezone.utc)
            logger.info(
                f"Session {session_id} finished: {session.status} "
                f"after {stepper.steps} steps"
            )

        return events

    def evict_expired(self) -> int:
        """Remove sessions idle for longer than the TTL. Returns the count removed."""
        if self.session_ttl is None:
            return 0

        cutoff = datetime.now(timezone.utc) - self.session_ttl
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.last_active_at < cutoff
        ]
        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info(f"Evicted {len(expired)} expired sessions")
        return len(expired)

    def evict_finished(self) -> int:
        """Remove solved and stuck sessions. Returns the count removed."""
        finished = [
            session_id
            for session_id, session in self._sessions.items()
            if session.stepper.is_finished
        ]
        for session_id in finished:
            del self._sessions[session_id]

        if finished:
            logger.info(f"Evicted {len(finished)} finished sessions")
        return len(finished)

    def end_session(self, session_id: uuid.UUID) -> bool:
        """End and remove a session."""
        if session_id in self._sessions:
            del self._sessions[session_id]
            return True
        return False

    @property
    def active_count(self) -> int:
        return len(self._sessions)


# Global service instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get singleton session service."""
    global _session_service
    if _session_service is None:
        settings = get_settings()
        _session_service = SessionService(
            max_sessions=settings.max_sessions,
            session_ttl_seconds=settings.session_ttl_seconds,
        )
    return _session_service
