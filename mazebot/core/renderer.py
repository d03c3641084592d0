"""
ASCII rendering of maze frames.

Frame Format:
    X = Wall
    O = Designated exit
    * = Cell on the solution path
    B = Bot
"""

from typing import Iterable, Optional

from mazebot.core.grid import CellType, Grid, Position

BOT_MARKER = "B"
PATH_MARKER = "*"


def render_frame(
    grid: Grid,
    bot: Optional[Position] = None,
    path: Optional[Iterable[Position]] = None,
) -> str:
    """
    Generate an ASCII frame of the maze.

    Args:
        grid: Maze to draw.
        bot: If provided, draws the bot at this position.
        path: If provided, marks these cells with the path marker. The bot
            marker wins where both apply.

    Returns:
        Multi-line string, one line per grid row.
    """
    path_cells = set(path) if path is not None else set()

    lines = []
    for row in range(grid.rows):
        line = ""
        for column in range(grid.columns):
            position = Position(row, column)
            if bot is not None and position == bot:
                line += BOT_MARKER
            elif position in path_cells:
                line += PATH_MARKER
            elif grid.is_wall(position):
                line += CellType.WALL.value
            elif grid.is_marked_exit(position):
                line += CellType.EXIT.value
            else:
                line += CellType.OPEN.value
        lines.append(line)

    return "\n".join(lines)


def render_path(path: Iterable[Position]) -> str:
    """List path positions as "column,row" lines."""
    return "\n".join(str(position) for position in path)
