from collections import Counter

from sokoban_mp import engine
from sokoban_mp.board_map import parse_board
from sokoban_mp.state import GameState
from sokoban_mp.types import Direction, Exit, Failed, InvalidInput, Move, Position, Success, Undo

CORRIDOR = "0\n####\n#Aa@#\n####"
TWO_PLAYERS = "-1\n#######\n#AB..@#\n#b.a.@#\n#.....#\n#######"
LONG_CORRIDOR = "2\n#######\n#Aa..@#\n#######"


def build_state(text: str) -> GameState:
    return GameState(parse_board(text))


def snapshot(state: GameState):
    return dict(state.player_positions), dict(state.box_positions), len(state.checkpoints), state.undo_quota()


def right(player_id: int = 0) -> Move:
    return Move(player_id=player_id, direction=Direction.RIGHT)


def test_corridor_push_wins_then_undo_is_out_of_quota():
    state = build_state(CORRIDOR)
    assert not state.is_win()

    result = engine.process_action(state, right())

    assert isinstance(result, Success)
    assert state.is_win()
    assert engine.should_stop(state, result)
    assert state.player_position(0) == Position(2, 1)

    before = snapshot(state)
    undo_result = engine.process_action(state, Undo())
    assert isinstance(undo_result, Failed)
    assert undo_result.reason == engine.OUT_OF_UNDO
    assert snapshot(state) == before


def test_foreign_box_blocks_then_step_onto_floor():
    state = build_state(TWO_PLAYERS)
    result = engine.process_action(state, Move(player_id=0, direction=Direction.DOWN))
    assert result == Failed(action=Move(0, Direction.DOWN), reason=engine.FOREIGN_BOX)

    result = engine.process_action(state, Move(player_id=1, direction=Direction.DOWN))
    assert isinstance(result, Success)
    assert state.player_position(1) == Position(2, 2)
    assert state.checkpoints == []


def test_hit_another_player_leaves_state_untouched():
    state = build_state(TWO_PLAYERS)
    before = snapshot(state)
    result = engine.process_action(state, right(0))
    assert isinstance(result, Failed)
    assert result.reason == "You hit another player."
    assert snapshot(state) == before


def test_hit_wall():
    state = build_state(TWO_PLAYERS)
    result = engine.process_action(state, Move(player_id=0, direction=Direction.UP))
    assert isinstance(result, Failed)
    assert result.reason == "You hit a wall."


def test_absent_and_out_of_range_cells_block_like_walls():
    state = build_state("-1\n   \n#Aa@#")
    up = engine.process_action(state, Move(player_id=0, direction=Direction.UP))
    assert isinstance(up, Failed) and up.reason == engine.HIT_WALL

    edge = build_state("-1\nAa@")
    left = engine.process_action(edge, Move(player_id=0, direction=Direction.LEFT))
    assert isinstance(left, Failed) and left.reason == engine.HIT_WALL
    assert edge.player_position(0) == Position(0, 0)


def test_push_into_wall_fails_without_mutation():
    state = build_state("-1\n#####\n#.Aa#\n#@..#\n#####")
    before = snapshot(state)
    result = engine.process_action(state, right())
    assert isinstance(result, Failed)
    assert result.reason == "Failed to push the box."
    assert snapshot(state) == before


def test_cannot_push_two_boxes_in_a_row():
    state = build_state("-1\n#######\n#Aaa@@#\n#######")
    before = snapshot(state)
    result = engine.process_action(state, right())
    assert isinstance(result, Failed)
    assert result.reason == engine.PUSH_BLOCKED
    assert snapshot(state) == before


def test_cannot_push_box_into_player():
    state = build_state("-1\n######\n#AaB@#\n#b..@#\n######")
    result = engine.process_action(state, right())
    assert isinstance(result, Failed)
    assert result.reason == engine.PUSH_BLOCKED


def test_push_moves_box_and_player_and_records_one_checkpoint():
    state = build_state(LONG_CORRIDOR)
    result = engine.process_action(state, right())
    assert isinstance(result, Success)
    assert state.player_position(0) == Position(2, 1)
    assert state.box_positions == {Position(3, 1): 0}
    assert len(state.checkpoints) == 1


def test_plain_step_records_no_checkpoint():
    state = build_state(TWO_PLAYERS)
    engine.process_action(state, Move(player_id=1, direction=Direction.RIGHT))
    assert state.checkpoints == []


def test_push_then_undo_restores_positions():
    state = build_state(LONG_CORRIDOR)
    before = snapshot(state)
    engine.process_action(state, right())
    result = engine.process_action(state, Undo())
    assert isinstance(result, Success)
    players, boxes, checkpoints, quota = snapshot(state)
    assert (players, boxes, checkpoints) == before[:3]
    assert quota == 1


def test_undo_budget_counts_down_then_rejects():
    state = build_state(LONG_CORRIDOR)
    engine.process_action(state, right())
    engine.process_action(state, right())
    assert state.box_positions == {Position(4, 1): 0}

    assert isinstance(engine.process_action(state, Undo()), Success)
    assert state.undo_quota() == 1
    assert state.box_positions == {Position(3, 1): 0}
    assert state.player_position(0) == Position(2, 1)

    assert isinstance(engine.process_action(state, Undo()), Success)
    assert state.undo_quota() == 0
    assert state.box_positions == {Position(2, 1): 0}

    before = snapshot(state)
    result = engine.process_action(state, Undo())
    assert isinstance(result, Failed)
    assert result.reason == engine.OUT_OF_UNDO
    assert snapshot(state) == before


def test_unknown_player():
    state = build_state(CORRIDOR)
    result = engine.process_action(state, right(5))
    assert isinstance(result, Failed)
    assert result.reason == "Player not found."


def test_invalid_input_rejected():
    state = build_state(CORRIDOR)
    result = engine.process_action(state, InvalidInput())
    assert result == Failed(action=InvalidInput(), reason="Invalid Input.")
    assert not engine.should_stop(state, result)


def test_exit_signals_termination():
    state = build_state(CORRIDOR)
    result = engine.process_action(state, Exit())
    assert isinstance(result, Success)
    assert result.exit_requested
    assert engine.should_stop(state, result)
    assert not engine.should_stop(state, None)


def test_box_owners_are_conserved():
    state = build_state(TWO_PLAYERS)
    owners = Counter(state.box_positions.values())
    actions = [
        Move(1, Direction.DOWN),
        Move(1, Direction.RIGHT),
        Move(1, Direction.RIGHT),
        Move(0, Direction.RIGHT),
        Undo(),
        Move(0, Direction.DOWN),
        Undo(),
        Undo(),
    ]
    for action in actions:
        engine.process_action(state, action)
        assert Counter(state.box_positions.values()) == owners
        assert len(state.box_positions) == len(state.destinations)
