"""Plain-text rendering of a running game."""
from __future__ import annotations

from typing import List

from .board_map import cell_char
from .state import GameState
from .types import Position


def render_board(state: GameState) -> str:
    """Render the live grid using the board-text alphabet."""

    lines: List[str] = []
    for y in range(state.height):
        chars = []
        for x in range(state.width):
            pos = Position(x, y)
            chars.append(cell_char(state.entity_at(pos), pos in state.destinations))
        lines.append("".join(chars))
    return "\n".join(lines)


def format_undo_quota(state: GameState) -> str:
    quota = state.undo_quota()
    if quota is None:
        return "Unlimited"
    return f"Undo Quota: {quota}"
