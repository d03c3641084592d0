"""
Maze Parser for Maze Bot.

Loads and validates maze files and discovers their exit points.

Maze Format:
    X = Wall (impassable)
    O = Designated exit
      = Open path (space; "." is accepted too)

Every row must have the same width. Blank lines are ignored. The first open
cell of the top and bottom rows and the open ends of the rows in between are
entrances/exits; the first one found (row-major) is where the bot starts.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mazebot.core.grid import CellType, Direction, ExitPoint, Grid, Position

logger = logging.getLogger(__name__)


class MazeParseError(Exception):
    """Exception raised when maze parsing fails."""

    pass


class MazeValidationError(Exception):
    """Exception raised when maze validation fails."""

    pass


@dataclass
class ParsedMaze:
    """Parsed maze ready for solving."""

    name: str
    grid_data: str
    grid: Grid
    exits: list[ExitPoint]

    @property
    def width(self) -> int:
        return self.grid.columns

    @property
    def height(self) -> int:
        return self.grid.rows

    @property
    def start(self) -> ExitPoint:
        """Exit point the bot enters from."""
        return self.exits[0]

    @property
    def goals(self) -> list[ExitPoint]:
        """Exit points that end the search."""
        return self.exits[1:]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "grid_data": self.grid_data,
            "width": self.width,
            "height": self.height,
            "start": self.start.to_dict(),
            "goals": [goal.to_dict() for goal in self.goals],
        }


VALID_CHARS = {"X", "O", " ", "."}
MIN_EXITS = 2


def _split_rows(maze_text: str) -> list[str]:
    """Split maze text into rows, dropping blank lines and carriage returns."""
    rows = []
    for line in maze_text.replace("\r", "").split("\n"):
        if len(line) == 0:
            continue
        rows.append(line)
    return rows


def _boundary_exits(grid: Grid) -> list[Position]:
    """
    Find the entrance/exit cells in the outer wall, in row-major order.

    The top and bottom rows each contribute their first open cell; every row
    in between contributes its left and right end cells when they are open. A
    grid one cell wide is a corridor whose exits are its two end cells.
    """
    if grid.rows == 1 or grid.columns == 1:
        ends = [Position(0, 0), Position(grid.rows - 1, grid.columns - 1)]
        exits = []
        for position in ends:
            if grid.is_open(position) and position not in exits:
                exits.append(position)
        return exits

    last_row, last_column = grid.rows - 1, grid.columns - 1
    exits = []
    for row in range(grid.rows):
        if row in (0, last_row):
            for column in range(grid.columns):
                if grid.is_open(Position(row, column)):
                    exits.append(Position(row, column))
                    break
        else:
            for column in (0, last_column):
                if grid.is_open(Position(row, column)):
                    exits.append(Position(row, column))

    return exits


def _inward_direction(grid: Grid, position: Position) -> Direction:
    """Direction a bot entering at position should face."""
    if grid.is_boundary(position):
        candidates = []
        if position.row == 0:
            candidates.append(Direction.DOWN)
        if position.row == grid.rows - 1:
            candidates.append(Direction.UP)
        if position.column == 0:
            candidates.append(Direction.RIGHT)
        if position.column == grid.columns - 1:
            candidates.append(Direction.LEFT)
    else:
        candidates = list(Direction)

    for direction in candidates:
        if grid.is_open(position.moved(direction)):
            return direction
    for direction in candidates:
        if grid.in_bounds(position.moved(direction)):
            return direction
    return Direction.UP


def find_exit_points(grid: Grid) -> list[ExitPoint]:
    """
    Find all entry and exit points of a maze.

    Boundary exits come first (row-major), then the cells marked O that
    are not already listed.

    Args:
        grid: Maze wall map.

    Returns:
        List of ExitPoint, distinct by position.
    """
    positions = _boundary_exits(grid)
    for position in sorted(grid.marked_exits, key=lambda p: (p.row, p.column)):
        if position not in positions:
            positions.append(position)

    return [
        ExitPoint(position=position, direction=_inward_direction(grid, position))
        for position in positions
    ]


def parse_maze_text(maze_text: str, name: str = "Unnamed") -> ParsedMaze:
    """
    Parse maze text and find its exit points.

    Args:
        maze_text: Multi-line string representing the maze grid.
        name: Name of the maze.

    Returns:
        ParsedMaze with grid and exit points.

    Raises:
        MazeParseError: If the maze cannot be parsed.
        MazeValidationError: If the maze is invalid.
    """
    if not maze_text or not maze_text.strip("\r\n"):
        raise MazeParseError("Maze text is empty")

    rows = _split_rows(maze_text)
    if len(rows) == 0:
        raise MazeParseError("Maze has no rows")

    width = len(rows[0])
    walls: list[list[bool]] = []
    marked_exits: set[Position] = set()

    for row, line in enumerate(rows):
        if len(line) != width:
            raise MazeValidationError(
                f"Inconsistent maze proportions: row {row} has width {len(line)}, "
                f"expected {width}"
            )

        wall_row = []
        for column, char in enumerate(line):
            if char not in VALID_CHARS:
                raise MazeValidationError(
                    f"Invalid character '{char}' at position ({column}, {row}). "
                    f"Valid characters: X, O, space"
                )

            cell = CellType.from_char(char)
            if cell == CellType.EXIT:
                marked_exits.add(Position(row, column))
            wall_row.append(cell == CellType.WALL)

        walls.append(wall_row)

    grid = Grid(walls, marked_exits=frozenset(marked_exits))
    exits = find_exit_points(grid)

    if len(exits) < MIN_EXITS:
        raise MazeValidationError(
            f"The maze must have at least {MIN_EXITS} entrances/exits, found {len(exits)}"
        )

    return ParsedMaze(
        name=name,
        grid_data="\n".join(rows),
        grid=grid,
        exits=exits,
    )


def load_maze_file(file_path: Path | str, name: Optional[str] = None) -> ParsedMaze:
    """
    Load and parse a maze file from the filesystem.

    Args:
        file_path: Path to the maze file.
        name: Optional name override. If not provided, uses filename.

    Returns:
        ParsedMaze with grid and exit points.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file cannot be read.
        MazeParseError: If the maze cannot be parsed.
        MazeValidationError: If the maze is invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Maze file not found: {file_path}")

    if not file_path.is_file():
        raise MazeParseError(f"Path is not a file: {file_path}")

    try:
        maze_text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MazeParseError(f"Maze file is not valid UTF-8: {e}") from e

    if name is None:
        name = file_path.stem.replace("_", " ").replace("-", " ").title()

    return parse_maze_text(maze_text, name=name)


def load_all_mazes(mazes_dir: Path | str) -> list[ParsedMaze]:
    """
    Load all maze files from a directory.

    Invalid files are logged and skipped.

    Args:
        mazes_dir: Path to the directory containing maze files.

    Returns:
        List of ParsedMaze objects, sorted by filename.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
    """
    mazes_dir = Path(mazes_dir)

    if not mazes_dir.exists():
        raise FileNotFoundError(f"Mazes directory not found: {mazes_dir}")

    if not mazes_dir.is_dir():
        raise MazeParseError(f"Path is not a directory: {mazes_dir}")

    mazes = []
    for maze_file in sorted(mazes_dir.glob("*.txt")):
        try:
            mazes.append(load_maze_file(maze_file))
        except (OSError, MazeParseError, MazeValidationError) as e:
            logger.warning(f"Failed to load {maze_file}: {e}")

    return mazes


def validate_maze_text(maze_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate maze text without raising exceptions.

    Args:
        maze_text: Multi-line string representing the maze grid.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_maze_text(maze_text)
        return True, None
    except (MazeParseError, MazeValidationError) as e:
        return False, str(e)
