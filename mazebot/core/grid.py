"""
Maze Bot Grid Model

Immutable maze geometry shared by the loader, the stepper and the renderer:
- Position: (row, column) cell address
- Direction: the four unit moves and their axis relations
- ExitPoint: a cell where a bot may enter or leave the maze
- Grid: the boolean wall map

Cell Format:
    X = Wall (impassable)
    O = Designated exit
      = Open path (space, "." is accepted too)
"""

from enum import Enum
from dataclasses import dataclass
from typing import Iterator


class CellType(Enum):
    """Types of cells in the maze text."""
    OPEN = " "
    WALL = "X"
    EXIT = "O"

    @classmethod
    def from_char(cls, char: str) -> "CellType":
        """Convert character to CellType. Raises KeyError for unknown characters."""
        mapping = {
            " ": cls.OPEN,
            ".": cls.OPEN,
            "X": cls.WALL,
            "O": cls.EXIT,
        }
        return mapping[char]


class Direction(Enum):
    """Movement directions, declared in tie-break order."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (drow, dcol) for this direction."""
        deltas = {
            Direction.UP: (-1, 0),
            Direction.DOWN: (1, 0),
            Direction.LEFT: (0, -1),
            Direction.RIGHT: (0, 1),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        """Get the direction pointing back the way this one came."""
        opposites = {
            Direction.UP: Direction.DOWN,
            Direction.DOWN: Direction.UP,
            Direction.LEFT: Direction.RIGHT,
            Direction.RIGHT: Direction.LEFT,
        }
        return opposites[self]

    @property
    def is_vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)

    @property
    def perpendicular(self) -> tuple["Direction", "Direction"]:
        """Get the two directions of the other axis, in tie-break order."""
        if self.is_vertical:
            return (Direction.LEFT, Direction.RIGHT)
        return (Direction.UP, Direction.DOWN)


@dataclass(frozen=True)
class Position:
    """Cell address in the maze."""
    row: int
    column: int

    def moved(self, direction: Direction) -> "Position":
        """Return the neighbouring position in direction (not bounds-checked)."""
        drow, dcol = direction.delta
        return Position(self.row + drow, self.column + dcol)

    def is_adjacent(self, other: "Position") -> bool:
        """True if other is exactly one unit move away."""
        return abs(self.row - other.row) + abs(self.column - other.column) == 1

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"row": self.row, "column": self.column}

    def __str__(self) -> str:
        return f"{self.column},{self.row}"


@dataclass(frozen=True)
class ExitPoint:
    """An entrance/exit cell and the direction a bot entering there faces."""
    position: Position
    direction: Direction

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position.to_dict(),
            "direction": self.direction.value,
        }


class Grid:
    """
    Boolean wall map of a rectangular maze.

    Built once by the loader and never mutated afterwards. Queries outside the
    grid raise IndexError from is_wall(); use in_bounds() or is_open() when a
    position may fall off the edge.
    """

    def __init__(
        self,
        walls: list[list[bool]],
        marked_exits: frozenset[Position] = frozenset(),
    ):
        if not walls or not walls[0]:
            raise ValueError("Grid must have at least one row and one column")

        columns = len(walls[0])
        if any(len(row) != columns for row in walls):
            raise ValueError("All grid rows must have the same length")

        self._walls: tuple[tuple[bool, ...], ...] = tuple(tuple(row) for row in walls)
        self._marked_exits = frozenset(marked_exits)
        self.rows: int = len(walls)
        self.columns: int = columns

    def in_bounds(self, position: Position) -> bool:
        """Check whether position lies inside the grid."""
        return 0 <= position.row < self.rows and 0 <= position.column < self.columns

    def is_wall(self, position: Position) -> bool:
        """Get wall flag at position. Raises IndexError when out of bounds."""
        if not self.in_bounds(position):
            raise IndexError(f"Position ({position.row}, {position.column}) out of bounds")
        return self._walls[position.row][position.column]

    def is_open(self, position: Position) -> bool:
        """True for an in-bounds, non-wall cell."""
        return self.in_bounds(position) and not self._walls[position.row][position.column]

    def is_marked_exit(self, position: Position) -> bool:
        """True for cells the maze author marked with O."""
        return position in self._marked_exits

    def is_boundary(self, position: Position) -> bool:
        """True for cells on the outer edge of the grid."""
        return (
            position.row in (0, self.rows - 1)
            or position.column in (0, self.columns - 1)
        )

    @property
    def marked_exits(self) -> frozenset[Position]:
        return self._marked_exits

    @property
    def open_cells(self) -> int:
        """Number of non-wall cells."""
        return sum(not wall for _, wall in self.cells())

    def cells(self) -> Iterator[tuple[Position, bool]]:
        """Iterate (position, is_wall) in row-major order."""
        for row, line in enumerate(self._walls):
            for column, wall in enumerate(line):
                yield Position(row, column), wall

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, columns={self.columns})"
