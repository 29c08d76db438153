"""Replay scripted terminal input against a board."""
from __future__ import annotations

import argparse
from typing import Iterable, List, Tuple

from . import engine
from .board_map import BoardMap, load_board
from .render import render_board
from .state import GameState
from .terminal_input import parse_action_text
from .types import ActionResult, Failed


def replay_lines(
    board: BoardMap, lines: Iterable[str], verbose: bool = False
) -> Tuple[GameState, List[ActionResult]]:
    """Replay input lines until they run out, an exit, or a win.

    Blank lines are skipped. Returns the final state and every result produced.
    """

    state = GameState(board)
    results: List[ActionResult] = []
    for idx, raw_line in enumerate(lines, start=1):
        if not raw_line.strip():
            continue
        result = engine.process_action(state, parse_action_text(raw_line))
        results.append(result)
        if verbose:
            status = f"failed: {result.reason}" if isinstance(result, Failed) else "ok"
            print(f"Line {idx}: {raw_line.strip()} -> {status}")
            print(render_board(state))
            print()
        if engine.should_stop(state, result):
            break
    return state, results


def replay_file(map_path: str, script_path: str, verbose: bool = False) -> Tuple[GameState, List[ActionResult]]:
    board = load_board(map_path)
    with open(script_path, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    return replay_lines(board, lines, verbose=verbose)


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Replay a Sokoban input script")
    parser.add_argument("--map", required=True, help="Path to the board file")
    parser.add_argument("--file", required=True, help="Path to the input script, one action per line")
    parser.add_argument("--verbose", action="store_true", help="Print each board during replay")
    args = parser.parse_args(argv)

    state, results = replay_file(args.map, args.file, verbose=args.verbose)
    rejected = sum(1 for result in results if isinstance(result, Failed))
    print(f"Actions: {len(results)} (rejected {rejected})")
    print(f"Solved: {'yes' if state.is_win() else 'no'}")
    print("Final board:")
    print(render_board(state))


if __name__ == "__main__":
    main()
