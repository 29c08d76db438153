"""Multi-player Sokoban game package."""

from .types import (
    Action,
    ActionResult,
    Box,
    Direction,
    Empty,
    Exit,
    Failed,
    InvalidInput,
    Move,
    Player,
    Position,
    Success,
    Undo,
    Wall,
)
from .board_map import BoardMap, MalformedMap, dump_board, load_board, parse_board
from .state import Checkpoint, GameState
from .engine import process_action, should_stop

__all__ = [
    "Action",
    "ActionResult",
    "BoardMap",
    "Box",
    "Checkpoint",
    "Direction",
    "Empty",
    "Exit",
    "Failed",
    "GameState",
    "InvalidInput",
    "MalformedMap",
    "Move",
    "Player",
    "Position",
    "Success",
    "Undo",
    "Wall",
    "dump_board",
    "load_board",
    "parse_board",
    "process_action",
    "should_stop",
]
