#!/usr/bin/env python3
"""
Maze Bot command line driver.

Loads a maze file, lets the bot solve it and prints the result.

Usage:
    mazebot mazes/tutorial.txt
    mazebot mazes/tutorial.txt --animate --delay 0.5

Exit codes:
    0 = solved
    1 = maze file not found or unreadable
    2 = malformed maze
    3 = bot got stuck (no solution)
    4 = aborted by --max-steps
"""

import argparse
import logging
import sys
import time
from typing import Optional

from mazebot.config import get_settings
from mazebot.core.maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedMaze,
    load_maze_file,
)
from mazebot.core.renderer import render_frame, render_path
from mazebot.core.stepper import SolveOutcome, SolveResult, Stepper, StepKind

logger = logging.getLogger("mazebot.cli")

EXIT_SOLVED = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_MAZE = 2
EXIT_STUCK = 3
EXIT_ABORTED = 4

CLEAR_SCREEN = "\033[2J\033[H"

OUTCOME_EXIT_CODES = {
    SolveOutcome.SOLVED: EXIT_SOLVED,
    SolveOutcome.STUCK: EXIT_STUCK,
    SolveOutcome.ABORTED: EXIT_ABORTED,
}


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="mazebot",
        description="Solve a text maze with a wall-following, backtracking bot.",
    )
    parser.add_argument("maze_file", help="Path to the maze file (X = wall, O = exit)")
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.step_delay_seconds,
        help="Seconds to wait between steps (default: %(default)s)",
    )
    parser.add_argument(
        "--animate",
        action="store_true",
        help="Redraw the maze after every step",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Give up after this many steps",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: %(default)s)",
    )
    return parser


def run_solver(
    maze: ParsedMaze,
    delay: float = 0.0,
    animate: bool = False,
    max_steps: Optional[int] = None,
) -> SolveResult:
    """
    Drive a stepper to completion, pacing and drawing as requested.

    Args:
        maze: Loaded maze.
        delay: Seconds to sleep between steps.
        animate: Redraw the frame after each step.
        max_steps: Optional step cap.

    Returns:
        SolveResult of the run.
    """
    stepper = Stepper.from_maze(maze)

    while not stepper.is_finished:
        if max_steps is not None and stepper.steps >= max_steps:
            break

        if delay > 0:
            time.sleep(delay)

        event = stepper.step()

        if animate:
            print(CLEAR_SCREEN, end="")
            print(render_frame(maze.grid, bot=stepper.bot.position))
            print(f"Position: {event.position}")
            if event.kind is StepKind.BACKTRACKED:
                print("The bot is currently backtracking to an unused branch")

    return stepper.result()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        maze = load_maze_file(args.maze_file)
    except OSError as e:
        # Missing or unreadable file
        print(f"Error: {e}")
        return EXIT_FILE_NOT_FOUND
    except (MazeParseError, MazeValidationError) as e:
        print(f"Error: {e}")
        return EXIT_INVALID_MAZE

    print(f"Going to solve a {maze.width}x{maze.height} maze:")
    print(render_frame(maze.grid, bot=maze.start.position))

    result = run_solver(
        maze,
        delay=max(args.delay, 0.0),
        animate=args.animate,
        max_steps=args.max_steps,
    )

    if result.outcome is SolveOutcome.SOLVED:
        print(render_path(result.path_most_recent_first))
        print(render_frame(maze.grid, path=result.path))
        print(f"Bot has found the exit in {result.steps} steps!")
        print("The path taken is designated by '*'")
    elif result.outcome is SolveOutcome.STUCK:
        print(f"Error: Bot got stuck after {result.steps} steps! No solution.")
    else:
        print(f"Gave up after {result.steps} steps.")

    logger.debug(f"Exit outcome: {result.outcome.value}")
    return OUTCOME_EXIT_CODES[result.outcome]


if __name__ == "__main__":
    sys.exit(main())
