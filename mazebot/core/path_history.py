"""
Path History

Stack of visited-node records used by the stepper to remember the current
route and to unwind bad branches.

Each VisitedNode stores:
- which of the four neighbours were passable when the node was first
  surveyed (frozen for the node's lifetime)
- which directions have already been attempted from it (only ever grows)
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from mazebot.core.grid import Direction, Grid, Position


class PathHistoryError(Exception):
    """Raised when the path history is used in a way the stepper never should."""

    pass


class HistoryUnderflowError(PathHistoryError):
    """Raised when top() or pop() is called on an empty history."""

    pass


class HistoryOverflowError(PathHistoryError):
    """Raised when a push would exceed the history depth cap."""

    pass


@dataclass
class VisitedNode:
    """A cell on the current route and the branches tried from it."""
    position: Position
    passable: frozenset[Direction]
    explored: set[Direction] = field(default_factory=set)

    @classmethod
    def survey(cls, grid: Grid, position: Position) -> "VisitedNode":
        """Create a node, computing passability from the grid (out of bounds = blocked)."""
        passable = frozenset(
            direction for direction in Direction
            if grid.is_open(position.moved(direction))
        )
        return cls(position=position, passable=passable)

    def can_move(self, direction: Direction) -> bool:
        return direction in self.passable

    def has_tried(self, direction: Direction) -> bool:
        return direction in self.explored

    def mark_explored(self, direction: Direction) -> None:
        """Record that direction was attempted. Sticky."""
        self.explored.add(direction)

    @property
    def unexplored(self) -> frozenset[Direction]:
        """Passable directions that have not been attempted yet."""
        return self.passable - self.explored

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position.to_dict(),
            "passable": sorted(d.value for d in self.passable),
            "explored": sorted(d.value for d in self.explored),
        }


class PathHistory:
    """
    List-backed stack of VisitedNode.

    Iteration runs top-to-bottom, i.e. most recently visited first.
    """

    def __init__(self, max_depth: Optional[int] = None):
        """
        Initialize an empty history.

        Args:
            max_depth: Optional cap on the number of nodes. Reaching it means
                the search is no longer making progress.
        """
        self._nodes: list[VisitedNode] = []
        self.max_depth = max_depth

    def push(self, node: VisitedNode) -> None:
        """Push node as the new top."""
        if self.max_depth is not None and len(self._nodes) >= self.max_depth:
            raise HistoryOverflowError(
                f"Path history exceeded {self.max_depth} nodes at {node.position}"
            )

        if self._nodes:
            previous = self._nodes[-1]
            if (
                previous.position == node.position
                and previous.unexplored == node.unexplored
            ):
                raise PathHistoryError(
                    f"No-progress push: {node.position} is already on top of the history"
                )

        self._nodes.append(node)

    def top(self) -> VisitedNode:
        """Get the most recently pushed node."""
        if not self._nodes:
            raise HistoryUnderflowError("top() on empty path history")
        return self._nodes[-1]

    def pop(self) -> VisitedNode:
        """Remove and return the most recently pushed node."""
        if not self._nodes:
            raise HistoryUnderflowError("pop() on empty path history")
        return self._nodes.pop()

    def is_empty(self) -> bool:
        return not self._nodes

    def positions(self) -> list[Position]:
        """Positions from top to bottom (most recent first)."""
        return [node.position for node in reversed(self._nodes)]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[VisitedNode]:
        return reversed(self._nodes)

    def __contains__(self, position: object) -> bool:
        return any(node.position == position for node in self._nodes)
