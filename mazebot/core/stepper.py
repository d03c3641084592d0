"""
Maze Bot Stepper

Wall-following, backtracking depth-first navigation:
- Keep going straight while the cell ahead is open
- Otherwise try the two perpendicular turns (left before right, up before down)
- Reverse only at nodes where the way back was never used (start node,
  nodes restored by backtracking)
- With nothing left to try, retire the node and teleport back to the previous one

The bot never re-enters a cell it has already visited during the solve, so
every step either advances into a new cell or permanently retires a node and
the search ends after at most 2 * open_cells + 1 steps.

Example usage:
    maze = parse_maze_text(maze_text)
    stepper = Stepper.from_maze(maze)

    while not stepper.is_finished:
        event = stepper.step()
        print(render_frame(maze.grid, bot=stepper.bot.position))

    result = stepper.result()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, TYPE_CHECKING

from mazebot.core.bot import Bot
from mazebot.core.grid import Direction, ExitPoint, Grid, Position
from mazebot.core.path_history import PathHistory, VisitedNode

if TYPE_CHECKING:
    from mazebot.core.maze_parser import ParsedMaze

logger = logging.getLogger(__name__)


class StepperState(Enum):
    """Where the stepper is in its search."""
    ADVANCING = "advancing"
    BACKTRACKING = "backtracking"
    SOLVED = "solved"
    STUCK = "stuck"


class StepKind(Enum):
    """What a single step did."""
    ADVANCED = "advanced"
    TURNED = "turned"
    BACKTRACKED = "backtracked"
    SOLVED = "solved"
    STUCK = "stuck"


class SolveOutcome(Enum):
    """Terminal result of a run."""
    SOLVED = "solved"
    STUCK = "stuck"
    ABORTED = "aborted"


class StepperFinishedError(Exception):
    """Raised when step() is called after the search has ended."""

    pass


@dataclass(frozen=True)
class StepEvent:
    """Result of one step() call."""
    step: int
    kind: StepKind
    state: StepperState
    position: Position
    direction: Direction

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step": self.step,
            "kind": self.kind.value,
            "state": self.state.value,
            "position": self.position.to_dict(),
            "direction": self.direction.value,
        }


@dataclass
class SolveResult:
    """Outcome of running a stepper to completion (or to its step cap)."""
    outcome: SolveOutcome
    steps: int
    path: list[Position] = field(default_factory=list)
    goal: Optional[Position] = None

    @property
    def solved(self) -> bool:
        return self.outcome is SolveOutcome.SOLVED

    @property
    def path_length(self) -> int:
        return len(self.path)

    @property
    def path_most_recent_first(self) -> list[Position]:
        """The path read top-to-bottom off the history (goal first)."""
        return list(reversed(self.path))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "outcome": self.outcome.value,
            "steps": self.steps,
            "path": [position.to_dict() for position in self.path],
            "path_length": self.path_length,
            "goal": self.goal.to_dict() if self.goal else None,
        }


class Stepper:
    """
    Decision procedure that moves a Bot through a Grid.

    The stepper exclusively owns the Bot and the PathHistory. It performs no
    I/O and no pacing; drivers call step() at whatever cadence they like.
    """

    def __init__(
        self,
        grid: Grid,
        start: ExitPoint,
        goals: Sequence[ExitPoint],
        max_history: Optional[int] = None,
    ):
        """
        Initialize the stepper at the start exit.

        Args:
            grid: Maze wall map.
            start: Exit point the bot enters from.
            goals: Exit points that end the search when reached.
            max_history: Optional path history cap. Defaults to the number of
                open cells, which a correct search can never exceed.

        Raises:
            ValueError: If the start cell is not open or no goal remains.
        """
        if not grid.is_open(start.position):
            raise ValueError(f"Start position {start.position} is not an open cell")

        self.grid = grid
        self.start = start
        self.goals: tuple[ExitPoint, ...] = tuple(
            goal for goal in goals if goal.position != start.position
        )
        if not self.goals:
            raise ValueError("Stepper needs at least one goal distinct from the start")
        self._goal_positions = frozenset(goal.position for goal in self.goals)

        self.bot = Bot(position=start.position, direction=start.direction)
        self.history = PathHistory(
            max_depth=max_history if max_history is not None else grid.open_cells
        )
        self.state = StepperState.ADVANCING
        self.steps = 0
        self.goal: Optional[Position] = None

        self._visited: set[Position] = {start.position}
        self.history.push(VisitedNode.survey(grid, start.position))

    @classmethod
    def from_maze(cls, maze: "ParsedMaze", max_history: Optional[int] = None) -> "Stepper":
        """Build a stepper from a loaded maze (first exit is the start)."""
        return cls(maze.grid, maze.start, maze.goals, max_history=max_history)

    @property
    def is_finished(self) -> bool:
        return self.state in (StepperState.SOLVED, StepperState.STUCK)

    @property
    def visited(self) -> frozenset[Position]:
        """Every cell the bot has stood on so far."""
        return frozenset(self._visited)

    def step(self) -> StepEvent:
        """
        Perform one logical step.

        Returns:
            StepEvent describing what happened.

        Raises:
            StepperFinishedError: If the search already ended.
        """
        if self.is_finished:
            raise StepperFinishedError(f"Stepper already finished ({self.state.value})")

        self.steps += 1
        node = self.history.top()
        direction = self._next_direction(node)

        if direction is None:
            return self._backtrack()

        turned = direction != self.bot.direction
        self._advance(node, direction)

        if self.bot.position in self._goal_positions:
            self.state = StepperState.SOLVED
            self.goal = self.bot.position
            logger.info(
                f"Reached exit {self.goal} after {self.steps} steps "
                f"(path length {len(self.history)})"
            )
            return self._event(StepKind.SOLVED)

        self.state = StepperState.ADVANCING
        return self._event(StepKind.TURNED if turned else StepKind.ADVANCED)

    def run(self, max_steps: Optional[int] = None) -> SolveResult:
        """
        Step until the search ends.

        Args:
            max_steps: Optional cap on the total number of steps. When reached
                before a terminal state the result is ABORTED.

        Returns:
            SolveResult for the run.
        """
        while not self.is_finished:
            if max_steps is not None and self.steps >= max_steps:
                logger.warning(f"Aborting solve after {self.steps} steps (cap {max_steps})")
                return SolveResult(
                    outcome=SolveOutcome.ABORTED,
                    steps=self.steps,
                    path=self.route(),
                )
            self.step()

        return self.result()

    def result(self) -> SolveResult:
        """Get the result for the current state (ABORTED while still running)."""
        if self.state is StepperState.SOLVED:
            return SolveResult(
                outcome=SolveOutcome.SOLVED,
                steps=self.steps,
                path=self.route(),
                goal=self.goal,
            )
        if self.state is StepperState.STUCK:
            return SolveResult(outcome=SolveOutcome.STUCK, steps=self.steps)
        return SolveResult(outcome=SolveOutcome.ABORTED, steps=self.steps, path=self.route())

    def solution_path(self) -> list[Position]:
        """Current route read top-to-bottom (most recent cell first)."""
        return self.history.positions()

    def route(self) -> list[Position]:
        """Current route from the start cell to the bot."""
        return list(reversed(self.history.positions()))

    def _next_direction(self, node: VisitedNode) -> Optional[Direction]:
        """Pick straight, then the perpendicular turns, then reverse."""
        facing = self.bot.direction
        for direction in (facing, *facing.perpendicular, facing.opposite):
            if self._is_viable(node, direction):
                return direction
        return None

    def _is_viable(self, node: VisitedNode, direction: Direction) -> bool:
        if not node.can_move(direction) or node.has_tried(direction):
            return False

        destination = node.position.moved(direction)
        if destination in self._visited:
            # Rejected for good: the cell is already part of the search tree
            node.mark_explored(direction)
            logger.debug(f"Skipping {direction.value} from {node.position}: {destination} visited")
            return False

        return True

    def _advance(self, node: VisitedNode, direction: Direction) -> None:
        node.mark_explored(direction)
        destination = self.bot.advance(direction)
        self._visited.add(destination)

        arrived = VisitedNode.survey(self.grid, destination)
        arrived.mark_explored(direction.opposite)
        self.history.push(arrived)

        logger.debug(f"Step {self.steps}: moved {direction.value} to {destination}")

    def _backtrack(self) -> StepEvent:
        abandoned = self.history.pop()

        if self.history.is_empty():
            self.state = StepperState.STUCK
            logger.info(
                f"Bot got stuck after {self.steps} steps: "
                f"no untried branch left from {abandoned.position}"
            )
            return self._event(StepKind.STUCK)

        restored = self.history.top()
        self.bot.teleport(restored.position)
        self.state = StepperState.BACKTRACKING
        logger.debug(
            f"Step {self.steps}: retired {abandoned.position}, "
            f"backtracked to {restored.position}"
        )
        return self._event(StepKind.BACKTRACKED)

    def _event(self, kind: StepKind) -> StepEvent:
        return StepEvent(
            step=self.steps,
            kind=kind,
            state=self.state,
            position=self.bot.position,
            direction=self.bot.direction,
        )


def solve(
    maze: "ParsedMaze",
    max_steps: Optional[int] = None,
    max_history: Optional[int] = None,
) -> SolveResult:
    """Run a fresh stepper on maze to completion."""
    return Stepper.from_maze(maze, max_history=max_history).run(max_steps=max_steps)
