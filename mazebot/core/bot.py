"""Bot position and facing, mutated only by the stepper."""

from dataclasses import dataclass

from mazebot.core.grid import Direction, Position


@dataclass
class Bot:
    """
    Where the search currently is.

    A plain value holder: no bounds or wall checks happen here. The stepper
    verifies every move before calling advance().
    """
    position: Position
    direction: Direction

    def advance(self, direction: Direction) -> Position:
        """Face direction and move one cell. Returns the new position."""
        self.direction = direction
        self.position = self.position.moved(direction)
        return self.position

    def teleport(self, position: Position) -> None:
        """Jump to position without turning (used when backtracking)."""
        self.position = position

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position.to_dict(),
            "direction": self.direction.value,
        }
