"""Tests for the navigation stepper."""

from pathlib import Path

import pytest

from mazebot.core.grid import Direction, ExitPoint, Position
from mazebot.core.maze_parser import load_maze_file, parse_maze_text
from mazebot.core.path_history import HistoryOverflowError
from mazebot.core.stepper import (
    SolveOutcome,
    StepKind,
    Stepper,
    StepperFinishedError,
    StepperState,
    solve,
)

MAZES_DIR = Path(__file__).parent.parent / "mazes"

# A single winding corridor of 25 cells
SIMPLE_MAZE = "\n".join([
    "X XXXXXXX",
    "X   X   X",
    "XXX X X X",
    "X   X X X",
    "X XXX X X",
    "X     X X",
    "XXXXXXX X",
])

# Dead-end arm to the right of the first junction
DEAD_END_MAZE = "\n".join([
    "   ",
    "X X",
    "XOX",
])

# Entrance cell's only neighbour is a wall
WALLED_MAZE = "\n".join([
    "X X",
    "XXX",
    "X X",
])

# Open rectangle with two gaps in the outer wall
OPEN_ROOM_MAZE = "\n".join([
    "X XXX",
    "X   X",
    "X   X",
    "XXX X",
])


def run_events(stepper: Stepper) -> list:
    events = []
    while not stepper.is_finished:
        events.append(stepper.step())
    return events


class TestScenarios:
    """End-to-end behaviour on small hand-checked mazes."""

    def test_straight_corridor(self):
        """Test that a 1x5 corridor is crossed in four forward advances."""
        stepper = Stepper.from_maze(parse_maze_text("     "))

        events = run_events(stepper)

        assert [e.kind for e in events] == [
            StepKind.ADVANCED,
            StepKind.ADVANCED,
            StepKind.ADVANCED,
            StepKind.SOLVED,
        ]
        result = stepper.result()
        assert result.outcome is SolveOutcome.SOLVED
        assert result.steps == 4
        assert result.path_length == 5
        assert result.path == [Position(0, c) for c in range(5)]
        assert result.goal == Position(0, 4)

    def test_dead_end_is_explored_then_abandoned(self):
        """Test that the dead-end arm is tried, marked and left out of the path."""
        stepper = Stepper.from_maze(parse_maze_text(DEAD_END_MAZE))

        events = run_events(stepper)

        assert [(e.kind, e.position) for e in events] == [
            (StepKind.ADVANCED, Position(0, 1)),
            (StepKind.ADVANCED, Position(0, 2)),
            (StepKind.BACKTRACKED, Position(0, 1)),
            (StepKind.TURNED, Position(1, 1)),
            (StepKind.SOLVED, Position(2, 1)),
        ]

        junction = next(n for n in stepper.history if n.position == Position(0, 1))
        assert junction.has_tried(Direction.RIGHT)
        assert junction.has_tried(Direction.DOWN)

        result = stepper.result()
        assert result.path == [Position(0, 0), Position(0, 1), Position(1, 1), Position(2, 1)]
        assert Position(0, 2) not in result.path

    def test_walled_in_entrance_gets_stuck(self):
        """Test that the start node is retired at once and the history drained."""
        stepper = Stepper.from_maze(parse_maze_text(WALLED_MAZE))

        event = stepper.step()

        assert event.kind is StepKind.STUCK
        assert stepper.state is StepperState.STUCK
        assert stepper.history.is_empty()
        result = stepper.result()
        assert result.outcome is SolveOutcome.STUCK
        assert result.steps == 1
        assert result.path == []

    def test_open_room(self):
        """Test the exact route through an open room with UP/LEFT-first tie-breaks.

        Down the left side, right along the middle row, up-branch into the top
        row (dead end: every neighbour visited), back out and down to the exit.
        """
        stepper = Stepper.from_maze(parse_maze_text(OPEN_ROOM_MAZE))

        events = run_events(stepper)

        assert [e.kind for e in events] == [
            StepKind.ADVANCED,
            StepKind.ADVANCED,
            StepKind.TURNED,
            StepKind.ADVANCED,
            StepKind.TURNED,
            StepKind.TURNED,
            StepKind.BACKTRACKED,
            StepKind.BACKTRACKED,
            StepKind.SOLVED,
        ]
        result = stepper.result()
        assert result.path == [
            Position(0, 1),
            Position(1, 1),
            Position(2, 1),
            Position(2, 2),
            Position(2, 3),
            Position(3, 3),
        ]
        # Manhattan distance (3 + 2) plus the start cell: no net detour
        assert result.path_length == 6
        assert result.steps == 9

    def test_winding_corridor(self):
        """Test a branch-free maze is solved without backtracking."""
        result = solve(parse_maze_text(SIMPLE_MAZE))

        assert result.outcome is SolveOutcome.SOLVED
        assert result.steps == 24
        assert result.path_length == 25
        assert result.path[0] == Position(0, 1)
        assert result.goal == Position(6, 7)

    def test_unreachable_exit_gets_stuck(self):
        """Test the bundled unsolvable maze."""
        stepper = Stepper.from_maze(load_maze_file(MAZES_DIR / "no_solution.txt"))

        result = stepper.run()

        assert result.outcome is SolveOutcome.STUCK
        assert result.steps == 3
        assert stepper.history.is_empty()

    def test_open_room_without_inner_walls(self):
        """Test that a fully open grid is accepted and solved at once."""
        result = solve(parse_maze_text("   \n   \n   "))

        assert result.outcome is SolveOutcome.SOLVED
        assert result.steps == 1
        assert result.goal == Position(1, 0)

    def test_marked_interior_exit(self):
        """Test that an O inside the maze is a valid goal."""
        result = solve(load_maze_file(MAZES_DIR / "marked_exit.txt"))

        assert result.outcome is SolveOutcome.SOLVED
        assert result.goal == Position(4, 4)


class TestProperties:
    """Invariants that hold for every maze."""

    @pytest.mark.parametrize(
        "maze_file",
        ["tutorial.txt", "loops.txt", "dead_end.txt", "marked_exit.txt", "no_solution.txt"],
    )
    def test_terminates_within_bound(self, maze_file):
        """Test that every run ends within 4 x open cells steps."""
        maze = load_maze_file(MAZES_DIR / maze_file)
        stepper = Stepper.from_maze(maze)

        result = stepper.run(max_steps=4 * maze.grid.open_cells)

        assert result.outcome in (SolveOutcome.SOLVED, SolveOutcome.STUCK)
        assert result.steps <= 2 * maze.grid.open_cells + 1

    def test_deterministic(self):
        """Test that two runs on the same maze match exactly."""
        maze = load_maze_file(MAZES_DIR / "loops.txt")

        first = solve(maze)
        second = solve(maze)

        assert first.path == second.path
        assert first.steps == second.steps

    @pytest.mark.parametrize("maze_file", ["tutorial.txt", "loops.txt", "marked_exit.txt"])
    def test_solution_is_sound(self, maze_file):
        """Test that the path is made of open, adjacent cells from start to goal."""
        maze = load_maze_file(MAZES_DIR / maze_file)

        result = solve(maze)

        assert result.solved
        assert result.path[0] == maze.start.position
        assert result.path[-1] == result.goal
        assert result.goal in {goal.position for goal in maze.goals}
        for position in result.path:
            assert maze.grid.is_open(position)
        for previous, current in zip(result.path, result.path[1:]):
            assert previous.is_adjacent(current)

    def test_passability_frozen_and_exploration_monotonic(self):
        """Test node flags across a full run on a maze with loops."""
        stepper = Stepper.from_maze(load_maze_file(MAZES_DIR / "loops.txt"))
        seen: dict[int, tuple] = {}

        while not stepper.is_finished:
            stepper.step()
            for node in stepper.history:
                if id(node) in seen:
                    node_ref, passable, explored = seen[id(node)]
                    assert node_ref is node
                    assert node.passable == passable
                    assert explored <= node.explored
                seen[id(node)] = (node, node.passable, set(node.explored))

    def test_visited_cells_are_never_reentered(self):
        """Test that a junction where loops meet never leads back into the tree."""
        maze = load_maze_file(MAZES_DIR / "loops.txt")
        stepper = Stepper.from_maze(maze)

        events = run_events(stepper)

        entered = [
            e.position for e in events
            if e.kind in (StepKind.ADVANCED, StepKind.TURNED, StepKind.SOLVED)
        ]
        assert len(entered) == len(set(entered))
        assert maze.start.position not in entered
        assert len(entered) <= maze.grid.open_cells - 1

    def test_history_top_tracks_bot(self):
        """Test that the top node always sits under the bot between steps."""
        stepper = Stepper.from_maze(load_maze_file(MAZES_DIR / "loops.txt"))

        while not stepper.is_finished:
            stepper.step()
            if not stepper.history.is_empty():
                assert stepper.history.top().position == stepper.bot.position

    def test_solution_path_is_most_recent_first(self):
        stepper = Stepper.from_maze(parse_maze_text("     "))
        stepper.run()

        assert stepper.solution_path() == list(reversed(stepper.route()))
        assert stepper.solution_path()[0] == Position(0, 4)


class TestStepperApi:
    """Tests for construction, caps and misuse."""

    def test_initial_state(self):
        maze = parse_maze_text(SIMPLE_MAZE)
        stepper = Stepper.from_maze(maze)

        assert stepper.state is StepperState.ADVANCING
        assert stepper.steps == 0
        assert stepper.bot.position == Position(0, 1)
        assert stepper.bot.direction is Direction.DOWN
        assert len(stepper.history) == 1
        assert stepper.visited == frozenset({Position(0, 1)})

    def test_step_after_finish_raises(self):
        stepper = Stepper.from_maze(parse_maze_text("     "))
        stepper.run()

        with pytest.raises(StepperFinishedError):
            stepper.step()

    def test_run_with_cap_aborts(self):
        """Test that a caller-supplied cap ends the run as ABORTED."""
        stepper = Stepper.from_maze(parse_maze_text(SIMPLE_MAZE))

        result = stepper.run(max_steps=2)

        assert result.outcome is SolveOutcome.ABORTED
        assert result.steps == 2
        assert result.path == [Position(0, 1), Position(1, 1), Position(1, 2)]
        assert not stepper.is_finished

    def test_run_resumes_after_abort(self):
        stepper = Stepper.from_maze(parse_maze_text(SIMPLE_MAZE))
        stepper.run(max_steps=2)

        result = stepper.run()

        assert result.outcome is SolveOutcome.SOLVED
        assert result.steps == 24

    def test_history_cap_is_enforced(self):
        stepper = Stepper.from_maze(parse_maze_text(SIMPLE_MAZE), max_history=2)
        stepper.step()

        with pytest.raises(HistoryOverflowError):
            stepper.step()

    def test_start_must_be_open(self):
        maze = parse_maze_text(SIMPLE_MAZE)
        wall_start = ExitPoint(Position(0, 0), Direction.DOWN)

        with pytest.raises(ValueError, match="not an open cell"):
            Stepper(maze.grid, wall_start, maze.goals)

    def test_goal_distinct_from_start_required(self):
        maze = parse_maze_text(SIMPLE_MAZE)

        with pytest.raises(ValueError, match="at least one goal"):
            Stepper(maze.grid, maze.start, [maze.start])

    def test_event_to_dict(self):
        stepper = Stepper.from_maze(parse_maze_text("     "))

        assert stepper.step().to_dict() == {
            "step": 1,
            "kind": "advanced",
            "state": "advancing",
            "position": {"row": 0, "column": 1},
            "direction": "right",
        }

    def test_result_path_most_recent_first(self):
        result = solve(parse_maze_text(DEAD_END_MAZE))

        assert result.path_most_recent_first == [
            Position(2, 1),
            Position(1, 1),
            Position(0, 1),
            Position(0, 0),
        ]
        assert result.path[0] == Position(0, 0)

    def test_result_to_dict(self):
        result = solve(parse_maze_text("   "))

        assert result.to_dict() == {
            "outcome": "solved",
            "steps": 2,
            "path": [
                {"row": 0, "column": 0},
                {"row": 0, "column": 1},
                {"row": 0, "column": 2},
            ],
            "path_length": 3,
            "goal": {"row": 0, "column": 2},
        }
