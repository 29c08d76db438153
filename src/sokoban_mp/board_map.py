"""Parsing, validation and serialization of Sokoban board text.

The first line holds the undo limit (``-1`` unlimited, ``0`` no undo, ``n`` a
budget of n). Each following line is one board row:

- ``#`` wall, ``@`` empty destination, ``.`` floor, space absent
- ``A``-``Z`` player, ``a``-``z`` box owned by the matching player

Rows may be ragged; missing trailing columns are absent cells.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .types import Box, Cell, Empty, Player, Position, Wall

logger = logging.getLogger(__name__)

UNLIMITED_UNDO = -1


class MalformedMap(ValueError):
    """Raised when board text cannot be turned into a playable board."""


@dataclass(frozen=True)
class BoardMap:
    """Immutable parsed board: dimensions, destinations, undo policy and initial layout.

    ``cells`` is indexed ``cells[y][x]``; absent cells hold ``None``.
    ``undo_limit`` is ``None`` when undo is unlimited.
    """

    width: int
    height: int
    destinations: FrozenSet[Position]
    undo_limit: Optional[int]
    cells: Tuple[Tuple[Cell, ...], ...]

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def entity_at(self, pos: Position) -> Cell:
        """Return the initial entity at ``pos`` or ``None`` if absent/out of range."""

        if not self.in_bounds(pos):
            return None
        return self.cells[pos.y][pos.x]

    @property
    def player_ids(self) -> FrozenSet[int]:
        return frozenset(cell.id for row in self.cells for cell in row if isinstance(cell, Player))

    @property
    def box_count(self) -> int:
        return sum(1 for row in self.cells for cell in row if isinstance(cell, Box))


def _parse_undo_limit(token: str) -> Optional[int]:
    stripped = token.strip()
    if not re.fullmatch(r"[+-]?[0-9]+", stripped):
        raise MalformedMap(f"Undo limit must be an integer, got '{stripped}'")
    value = int(stripped)
    if value < UNLIMITED_UNDO:
        raise MalformedMap("Undo limit does not accept negative numbers smaller than -1")
    return None if value == UNLIMITED_UNDO else value


def _cell_for(char: str, pos: Position) -> Cell:
    if char == "#":
        return Wall()
    if char in ".@":
        return Empty()
    if char == " ":
        return None
    if "A" <= char <= "Z":
        return Player(ord(char) - ord("A"))
    if "a" <= char <= "z":
        return Box(ord(char) - ord("a"))
    raise MalformedMap(f"Unknown character '{char}' at ({pos.x}, {pos.y})")


def parse_board(text: str) -> BoardMap:
    """Parse board text into a validated :class:`BoardMap`.

    Raises:
        MalformedMap: on a bad undo limit, duplicate or missing players,
            a box/destination count mismatch, or unmatched players and boxes.
    """

    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise MalformedMap("Map text is empty")

    undo_limit = _parse_undo_limit(lines[0])
    rows = lines[1:]
    width = max((len(row) for row in rows), default=0)

    destinations = set()
    players: Dict[int, Position] = {}
    box_owners: List[int] = []
    grid: List[Tuple[Cell, ...]] = []

    for y, row in enumerate(rows):
        cells: List[Cell] = []
        for x, char in enumerate(row.ljust(width)):
            pos = Position(x, y)
            cell = _cell_for(char, pos)
            if char == "@":
                destinations.add(pos)
            if isinstance(cell, Player):
                if cell.id in players:
                    raise MalformedMap(f"Player '{char}' appears more than once")
                players[cell.id] = pos
            elif isinstance(cell, Box):
                box_owners.append(cell.owner_id)
            cells.append(cell)
        grid.append(tuple(cells))

    if not players:
        raise MalformedMap("There are no players in the map")
    if len(box_owners) != len(destinations):
        raise MalformedMap(
            f"Number of boxes ({len(box_owners)}) is not equal to number of destinations ({len(destinations)})"
        )
    owners = set(box_owners)
    unmatched_players = sorted(set(players) - owners)
    if unmatched_players:
        letters = ", ".join(chr(ord("A") + pid) for pid in unmatched_players)
        raise MalformedMap(f"Players without boxes: {letters}")
    unmatched_boxes = sorted(owners - set(players))
    if unmatched_boxes:
        letters = ", ".join(chr(ord("a") + pid) for pid in unmatched_boxes)
        raise MalformedMap(f"Boxes without players: {letters}")

    logger.info(
        "Parsed board %dx%d with %d players and %d boxes", width, len(grid), len(players), len(box_owners)
    )
    return BoardMap(
        width=width,
        height=len(grid),
        destinations=frozenset(destinations),
        undo_limit=undo_limit,
        cells=tuple(grid),
    )


def cell_char(cell: Cell, is_destination: bool) -> str:
    """Board-text character for a single cell."""

    if cell is None:
        return " "
    if isinstance(cell, Wall):
        return "#"
    if isinstance(cell, Player):
        return chr(ord("A") + cell.id)
    if isinstance(cell, Box):
        return chr(ord("a") + cell.owner_id)
    return "@" if is_destination else "."


def dump_board(board: BoardMap) -> str:
    """Serialize the initial layout of ``board`` back to board text."""

    undo = UNLIMITED_UNDO if board.undo_limit is None else board.undo_limit
    lines: List[str] = [str(undo)]
    for y, row in enumerate(board.cells):
        chars = [cell_char(cell, Position(x, y) in board.destinations) for x, cell in enumerate(row)]
        lines.append("".join(chars).rstrip(" "))
    return "\n".join(lines) + "\n"


def load_board(path: str) -> BoardMap:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return parse_board(text)
