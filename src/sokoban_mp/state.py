"""Mutable game state built from an immutable :class:`BoardMap`."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set

from .board_map import BoardMap
from .types import Box, Cell, Empty, Player, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Checkpoint:
    """Player and box positions recorded right after a successful push."""

    player_positions: Dict[int, Position]
    box_positions: Dict[Position, int]

    @classmethod
    def of(cls, player_positions: Dict[int, Position], box_positions: Dict[Position, int]) -> "Checkpoint":
        return cls(player_positions=dict(player_positions), box_positions=dict(box_positions))


class GameState:
    """Live occupancy of a running game plus its checkpoint history.

    ``player_positions`` and ``box_positions`` always agree with the grid. They
    are updated incrementally by :meth:`move` and rebuilt from the grid only at
    construction and after :meth:`undo`.
    """

    def __init__(self, board: BoardMap) -> None:
        self.board = board
        self.undo_remaining: Optional[int] = board.undo_limit
        self.checkpoints: List[Checkpoint] = []
        self.player_positions: Dict[int, Position] = {}
        self.box_positions: Dict[Position, int] = {}
        self._grid: List[List[Cell]] = self._initial_grid()
        self._sync_positions()

    def _initial_grid(self) -> List[List[Cell]]:
        return [list(row) for row in self.board.cells]

    def _sync_positions(self) -> None:
        self.player_positions = {}
        self.box_positions = {}
        for y, row in enumerate(self._grid):
            for x, cell in enumerate(row):
                if isinstance(cell, Player):
                    self.player_positions[cell.id] = Position(x, y)
                elif isinstance(cell, Box):
                    self.box_positions[Position(x, y)] = cell.owner_id

    def _set(self, pos: Position, cell: Cell) -> None:
        self._grid[pos.y][pos.x] = cell

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    @property
    def destinations(self) -> FrozenSet[Position]:
        return self.board.destinations

    @property
    def player_ids(self) -> Set[int]:
        return set(self.player_positions)

    def undo_quota(self) -> Optional[int]:
        """Remaining undo count, or ``None`` when undo is unlimited."""

        return self.undo_remaining

    def entity_at(self, pos: Position) -> Cell:
        if not self.board.in_bounds(pos):
            return None
        return self._grid[pos.y][pos.x]

    def player_position(self, player_id: int) -> Optional[Position]:
        return self.player_positions.get(player_id)

    def move(self, src: Position, dst: Position) -> None:
        """Swap the contents of ``src`` and ``dst`` without any legality check."""

        for pos in (src, dst):
            if not self.board.in_bounds(pos):
                raise ValueError(f"Position {pos} is outside the board")
        if src == dst:
            return

        moving = self.entity_at(src)
        displaced = self.entity_at(dst)
        self._set(src, displaced)
        self._set(dst, moving)

        relocated_boxes = []
        for entity, old, new in ((moving, src, dst), (displaced, dst, src)):
            if isinstance(entity, Player):
                self.player_positions[entity.id] = new
            elif isinstance(entity, Box):
                del self.box_positions[old]
                relocated_boxes.append((new, entity.owner_id))
        for pos, owner_id in relocated_boxes:
            self.box_positions[pos] = owner_id

    def checkpoint(self) -> None:
        self.checkpoints.append(Checkpoint.of(self.player_positions, self.box_positions))

    def undo(self) -> None:
        """Revert to the previous checkpoint, or to the initial layout if none remains.

        The caller must ensure undo quota is left.
        """

        if self.undo_remaining is not None:
            self.undo_remaining -= 1

        if self.checkpoints:
            self.checkpoints.pop()

        if not self.checkpoints:
            self._grid = self._initial_grid()
            logger.debug("Undo restored the initial layout")
        else:
            target = self.checkpoints[-1]
            for pos in list(self.player_positions.values()) + list(self.box_positions):
                self._set(pos, Empty())
            for player_id, pos in target.player_positions.items():
                self._set(pos, Player(player_id))
            for pos, owner_id in target.box_positions.items():
                self._set(pos, Box(owner_id))
            logger.debug("Undo restored checkpoint %d", len(self.checkpoints))

        self._sync_positions()

    def is_win(self) -> bool:
        """Whether every box currently sits on a destination."""

        return all(pos in self.board.destinations for pos in self.box_positions)
