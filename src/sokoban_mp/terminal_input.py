"""Utilities for turning terminal lines into game actions."""
from __future__ import annotations

import sys
from typing import Dict, Optional, TextIO, Tuple

from .types import Action, Direction, Exit, InvalidInput, Move, Undo

KEY_BINDINGS: Dict[str, Tuple[int, Direction]] = {
    "W": (0, Direction.UP),
    "A": (0, Direction.LEFT),
    "S": (0, Direction.DOWN),
    "D": (0, Direction.RIGHT),
    "K": (1, Direction.UP),
    "H": (1, Direction.LEFT),
    "J": (1, Direction.DOWN),
    "L": (1, Direction.RIGHT),
}


def parse_action_text(raw: str) -> Action:
    """Parse a single terminal line (case-insensitive).

    - ``W``/``A``/``S``/``D`` move player A up/left/down/right
    - ``K``/``H``/``J``/``L`` move player B up/left/down/right
    - ``U`` undoes to the last checkpoint, ``EXIT`` quits

    Anything else becomes :class:`InvalidInput`.
    """

    text = raw.strip().upper()
    if text == "EXIT":
        return Exit()
    if text == "U":
        return Undo()
    binding = KEY_BINDINGS.get(text)
    if binding is None:
        return InvalidInput()
    player_id, direction = binding
    return Move(player_id=player_id, direction=direction)


class TerminalInput:
    """Blocking action source reading one line per action."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdin

    def fetch_action(self) -> Action:
        line = self.stream.readline()
        if not line:
            # End of input ends the game instead of looping on empty reads.
            return Exit()
        return parse_action_text(line)
