"""Turn resolution for multi-player Sokoban.

Rules:
- A player steps onto empty floor or an empty destination.
- Walls, absent cells and other players block the step.
- A player may push only their own box, one box per step, and only into an
  empty cell. Every successful push records one checkpoint.
- Undo is allowed while quota remains; an unlimited quota never runs out.
- The game stops on an explicit exit or once every box sits on a destination.
"""

from __future__ import annotations

import logging
from typing import Optional

from .state import GameState
from .types import Action, ActionResult, Box, Empty, Exit, Failed, InvalidInput, Move, Player, Success, Undo, Wall

logger = logging.getLogger(__name__)

INVALID_INPUT = "Invalid Input."
OUT_OF_UNDO = "You have run out of your undo quota."
PLAYER_NOT_FOUND = "Player not found."
HIT_WALL = "You hit a wall."
HIT_PLAYER = "You hit another player."
FOREIGN_BOX = "You cannot move other players' boxes."
PUSH_BLOCKED = "Failed to push the box."


def _reject(action: Action, reason: str) -> Failed:
    logger.info("Rejected %s: %s", action, reason)
    return Failed(action=action, reason=reason)


def _resolve_move(state: GameState, move: Move) -> ActionResult:
    current = state.player_position(move.player_id)
    if current is None:
        return _reject(move, PLAYER_NOT_FOUND)

    target = current.step(move.direction)
    occupant = state.entity_at(target)

    if isinstance(occupant, Empty):
        state.move(current, target)
        return Success(move)
    if occupant is None or isinstance(occupant, Wall):
        return _reject(move, HIT_WALL)
    if isinstance(occupant, Player):
        return _reject(move, HIT_PLAYER)
    if isinstance(occupant, Box):
        if occupant.owner_id != move.player_id:
            return _reject(move, FOREIGN_BOX)
        beyond = target.step(move.direction)
        if not isinstance(state.entity_at(beyond), Empty):
            return _reject(move, PUSH_BLOCKED)
        # Box first so the player's swap lands on the freed cell.
        state.move(target, beyond)
        state.move(current, target)
        state.checkpoint()
        return Success(move)
    raise TypeError(f"Unknown entity {occupant!r} at {target}")


def process_action(state: GameState, action: Action) -> ActionResult:
    """Apply ``action`` to ``state`` and return its outcome.

    Rejected actions never mutate the state.
    """

    logger.debug("Processing %s", action)
    if isinstance(action, InvalidInput):
        return _reject(action, INVALID_INPUT)
    if isinstance(action, Exit):
        return Success(action)
    if isinstance(action, Undo):
        if state.undo_quota() == 0:
            return _reject(action, OUT_OF_UNDO)
        state.undo()
        return Success(action)
    if isinstance(action, Move):
        return _resolve_move(state, action)
    raise TypeError(f"Unknown action {action!r}")


def should_stop(state: GameState, result: Optional[ActionResult] = None) -> bool:
    """Whether the game loop should stop after ``result``."""

    if result is not None and result.exit_requested:
        return True
    return state.is_win()
