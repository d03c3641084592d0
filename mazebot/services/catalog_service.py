"""Catalog of the mazes bundled in the mazes directory."""

import logging
from pathlib import Path
from typing import Optional

from mazebot.config import get_settings
from mazebot.core.maze_parser import ParsedMaze, load_all_mazes

logger = logging.getLogger(__name__)


class MazeCatalog:
    """Lazily loaded, name-indexed set of maze files."""

    def __init__(self, mazes_dir: Path):
        self.mazes_dir = Path(mazes_dir)
        self._mazes: Optional[dict[str, ParsedMaze]] = None

    def _load(self) -> dict[str, ParsedMaze]:
        if self._mazes is None:
            if self.mazes_dir.is_dir():
                mazes = load_all_mazes(self.mazes_dir)
            else:
                logger.warning(f"Mazes directory not found: {self.mazes_dir}")
                mazes = []
            self._mazes = {self.slug(maze.name): maze for maze in mazes}
            logger.info(f"Loaded {len(self._mazes)} mazes from {self.mazes_dir}")
        return self._mazes

    @staticmethod
    def slug(name: str) -> str:
        """Lookup key for a maze name ("Dead End" -> "dead-end")."""
        return "-".join(name.lower().split())

    def list_mazes(self) -> list[ParsedMaze]:
        """All mazes, sorted by name."""
        return sorted(self._load().values(), key=lambda maze: maze.name)

    def get_maze(self, name: str) -> Optional[ParsedMaze]:
        """Get maze by name or slug."""
        return self._load().get(self.slug(name))


# Global catalog instance
_catalog: Optional[MazeCatalog] = None


def get_maze_catalog() -> MazeCatalog:
    """Get singleton maze catalog."""
    global _catalog
    if _catalog is None:
        _catalog = MazeCatalog(get_settings().mazes_dir)
    return _catalog
