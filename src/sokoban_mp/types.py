"""Core value types for multi-player Sokoban.

Rule reminders:
- Coordinates are (x, y) from the top-left; x is the column, y the row.
- Player ids are 0-based (``A`` -> 0); box ``a`` belongs to player 0.
- An absent cell (outside the irregular board outline) is ``None``, never ``Empty``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Direction(Enum):
    """Step directions with their unit vectors."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value


@dataclass(frozen=True)
class Position:
    """A cell coordinate on the board."""

    x: int
    y: int

    def step(self, direction: Direction) -> "Position":
        """Return the neighbouring position one step towards ``direction``."""

        dx, dy = direction.vector
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Empty:
    """Walkable floor or an unoccupied destination tile."""


@dataclass(frozen=True)
class Wall:
    pass


@dataclass(frozen=True)
class Player:
    id: int


@dataclass(frozen=True)
class Box:
    """A box that only the player with ``owner_id`` may push."""

    owner_id: int


Entity = Union[Empty, Wall, Player, Box]
Cell = Optional[Entity]


@dataclass(frozen=True)
class Move:
    """Move player ``player_id`` one step in ``direction``."""

    player_id: int
    direction: Direction


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class InvalidInput:
    reason: str = "Invalid Input."


Action = Union[Move, Undo, Exit, InvalidInput]


@dataclass(frozen=True)
class Success:
    action: Action

    @property
    def exit_requested(self) -> bool:
        """Whether this result asks the game loop to stop."""

        return isinstance(self.action, Exit)


@dataclass(frozen=True)
class Failed:
    """A rejected action; the state was left untouched."""

    action: Action
    reason: str

    @property
    def exit_requested(self) -> bool:
        return False


ActionResult = Union[Success, Failed]
