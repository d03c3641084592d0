# Core module
from .grid import CellType, Direction, ExitPoint, Grid, Position
from .bot import Bot
from .path_history import (
    HistoryOverflowError,
    HistoryUnderflowError,
    PathHistory,
    PathHistoryError,
    VisitedNode,
)
from .stepper import (
    SolveOutcome,
    SolveResult,
    StepEvent,
    StepKind,
    Stepper,
    StepperFinishedError,
    StepperState,
    solve,
)
from .maze_parser import (
    MazeParseError,
    MazeValidationError,
    ParsedMaze,
    find_exit_points,
    parse_maze_text,
    load_maze_file,
    load_all_mazes,
    validate_maze_text,
)
from .renderer import render_frame, render_path

__all__ = [
    "CellType",
    "Direction",
    "ExitPoint",
    "Grid",
    "Position",
    "Bot",
    "HistoryOverflowError",
    "HistoryUnderflowError",
    "PathHistory",
    "PathHistoryError",
    "VisitedNode",
    "SolveOutcome",
    "SolveResult",
    "StepEvent",
    "StepKind",
    "Stepper",
    "StepperFinishedError",
    "StepperState",
    "solve",
    "MazeParseError",
    "MazeValidationError",
    "ParsedMaze",
    "find_exit_points",
    "parse_maze_text",
    "load_maze_file",
    "load_all_mazes",
    "validate_maze_text",
    "render_frame",
    "render_path",
]
