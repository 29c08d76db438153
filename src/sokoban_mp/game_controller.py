"""Terminal game loop for multi-player Sokoban.

This module only sequences input, turn resolution and rendering. Every
decision about legality lives in :mod:`sokoban_mp.engine` so the loop can be
driven from tests with in-memory streams.
"""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from . import engine
from .render import format_undo_quota, render_board
from .state import GameState
from .terminal_input import TerminalInput
from .types import ActionResult, Failed

MAX_TERMINAL_PLAYERS = 2


class TerminalSokobanGame:
    """Run one game reading actions from ``input_source`` and printing to ``stdout``."""

    def __init__(
        self,
        state: GameState,
        input_source: Optional[TerminalInput] = None,
        stdout: Optional[TextIO] = None,
        max_players: int = MAX_TERMINAL_PLAYERS,
    ) -> None:
        if len(state.player_ids) > max_players:
            raise ValueError(f"There cannot be more than {max_players} players in the map!")
        self.state = state
        self.input_source = input_source or TerminalInput()
        self.stdout = stdout or sys.stdout
        self.history: List[ActionResult] = []

    def message(self, content: str) -> None:
        print(content, file=self.stdout)

    def render(self) -> None:
        self.message(render_board(self.state))

    def step(self) -> ActionResult:
        """Fetch and resolve one action, reporting a failure reason if any."""

        result = engine.process_action(self.state, self.input_source.fetch_action())
        self.history.append(result)
        if isinstance(result, Failed):
            self.message(result.reason)
        return result

    def run(self) -> bool:
        """Play until exit or win; return whether the board was solved."""

        self.message("Sokoban game is ready.")
        self.render()

        result: Optional[ActionResult] = None
        while not engine.should_stop(self.state, result):
            self.message(format_undo_quota(self.state))
            self.message(">>>")
            result = self.step()
            self.render()

        self.message("Game exits.")
        won = self.state.is_win()
        if won:
            self.message("You win.")
        self.stdout.flush()
        return won
