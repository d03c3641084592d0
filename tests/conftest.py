"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mazebot.core.maze_parser import ParsedMaze, parse_maze_text
from mazebot.main import app
from mazebot.services.catalog_service import MazeCatalog, get_maze_catalog
from mazebot.services.session_service import SessionService, get_session_service

MAZES_DIR = Path(__file__).parent.parent / "mazes"

# Entrance at the top, exit at the bottom right
SIMPLE_MAZE = "\n".join([
    "X XXXXXXX",
    "X   X   X",
    "XXX X X X",
    "X   X X X",
    "X XXX X X",
    "X     X X",
    "XXXXXXX X",
])


@pytest.fixture
def simple_maze() -> ParsedMaze:
    """The simple maze, parsed."""
    return parse_maze_text(SIMPLE_MAZE, name="Simple")


@pytest.fixture
def session_service() -> SessionService:
    """A fresh session registry per test."""
    return SessionService(max_sessions=3)


@pytest.fixture
def maze_catalog() -> MazeCatalog:
    """Catalog over the bundled mazes directory."""
    return MazeCatalog(MAZES_DIR)


@pytest_asyncio.fixture(scope="function")
async def client(session_service, maze_catalog) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    app.dependency_overrides[get_session_service] = lambda: session_service
    app.dependency_overrides[get_maze_catalog] = lambda: maze_catalog

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
