"""CLI runner for multi-player Sokoban.

Usage examples:
- Interactive game: ``python -m sokoban_mp.runner --map maps/map00.map``
- Scripted game: ``python -m sokoban_mp.runner --map maps/map00.map --input moves.txt``
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from .board_map import MalformedMap, load_board
from .game_controller import MAX_TERMINAL_PLAYERS, TerminalSokobanGame
from .state import GameState
from .terminal_input import TerminalInput

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class GameConfig:
    map_path: str
    input_path: Optional[str] = None
    max_players: int = MAX_TERMINAL_PLAYERS
    log_level: str = "WARNING"


def parse_args(argv: Optional[List[str]] = None) -> GameConfig:
    parser = argparse.ArgumentParser(description="Multi-player Sokoban in the terminal")
    parser.add_argument("--map", required=True, help="Path to the board file")
    parser.add_argument("--input", type=str, default=None, help="Read actions from this file instead of stdin")
    parser.add_argument(
        "--max-players", type=int, default=MAX_TERMINAL_PLAYERS, help="Largest number of players the board may hold"
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Diagnostics level on stderr")
    args = parser.parse_args(argv)
    return GameConfig(
        map_path=args.map,
        input_path=args.input,
        max_players=args.max_players,
        log_level=args.log_level,
    )


def play(config: GameConfig) -> bool:
    """Load the board named by ``config`` and play it to completion."""

    board = load_board(config.map_path)
    state = GameState(board)
    if config.input_path is None:
        return TerminalSokobanGame(state, max_players=config.max_players).run()
    with open(config.input_path, "r", encoding="utf-8") as stream:
        game = TerminalSokobanGame(state, input_source=TerminalInput(stream), max_players=config.max_players)
        return game.run()


def main(argv: Optional[List[str]] = None) -> None:
    config = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        play(config)
    except MalformedMap as exc:
        print(f"Invalid map: {exc}")
        raise SystemExit(1)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Could not read file: {exc}")
        raise SystemExit(1)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
