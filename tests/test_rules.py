"""Tests for GameState and the ConnectFourGame session."""

import random

import numpy as np
import pytest

from connect4.game.rules import GameState, ConnectFourGame
from connect4.utils import (Player, GameResult, MoveStatus,
                            InvalidColumnError, GameOverError)


def test_initial_state():
    state = GameState(6, 7)
    assert state.height == 6
    assert state.width == 7
    assert state.current_player == Player.ONE
    assert state.result == GameResult.IN_PROGRESS
    assert state.last_move is None
    assert state.moves_made == 0
    assert np.all(state.get_grid() == 0)


def test_apply_move_places_piece_and_switches_turn():
    state = GameState(6, 7)
    outcome = state.apply_move(3)

    assert outcome.accepted
    assert outcome.status == MoveStatus.APPLIED
    assert (outcome.row, outcome.column) == (5, 3)
    assert outcome.player == Player.ONE
    assert outcome.result == GameResult.IN_PROGRESS
    assert state.get_grid()[5, 3] == Player.ONE.value
    assert state.current_player == Player.TWO
    assert state.last_move == (5, 3)


def test_turn_alternates_strictly():
    state = GameState(6, 7)
    for col in [0, 1, 2, 0, 1, 2]:
        before = state.current_player
        assert state.apply_move(col).accepted
        assert state.current_player == before.other()


def test_full_column_is_a_no_op():
    state = GameState(6, 7)
    for _ in range(6):
        assert state.apply_move(0).accepted

    grid_before = state.get_grid()
    player_before = state.current_player
    outcome = state.apply_move(0)

    assert outcome.status == MoveStatus.COLUMN_FULL
    assert not outcome.accepted
    assert outcome.row is None and outcome.column is None
    assert state.current_player == player_before
    assert state.moves_made == 6
    assert np.array_equal(state.get_grid(), grid_before)


@pytest.mark.parametrize("column", [7, -1])
def test_invalid_column_raises_and_leaves_state(column):
    state = GameState(6, 7)
    state.apply_move(2)
    grid_before = state.get_grid()

    with pytest.raises(InvalidColumnError):
        state.apply_move(column)

    assert np.array_equal(state.get_grid(), grid_before)
    assert state.current_player == Player.TWO
    assert state.moves_made == 1


def test_vertical_win_scenario():
    state = GameState(6, 7)
    for col in [3, 0, 3, 0, 3, 0]:
        state.apply_move(col)
    outcome = state.apply_move(3)

    assert outcome.result == GameResult.PLAYER_ONE_WIN
    assert state.winner == Player.ONE
    assert state.is_game_over()
    # The winner keeps the turn; there is nobody left to move
    assert state.current_player == Player.ONE
    assert set(state.winning_line) == {(5, 3), (4, 3), (3, 3), (2, 3)}


def test_forced_consecutive_moves_win():
    """Player one dropping into column 3 four times wins vertically."""
    state = GameState(6, 7)
    for _ in range(4):
        state.board.drop(3, Player.ONE)

    assert state.check_for_win(Player.ONE)
    assert not state.check_for_win(Player.TWO)
    assert set(state.board.get_winning_line(Player.ONE)) == {(5, 3), (4, 3), (3, 3), (2, 3)}


def test_player_two_can_win():
    state = GameState(6, 7)
    for col in [0, 1, 0, 2, 0, 3, 5]:
        state.apply_move(col)
    outcome = state.apply_move(4)

    assert outcome.player == Player.TWO
    assert outcome.result == GameResult.PLAYER_TWO_WIN
    assert state.winning_line == [(5, 1), (5, 2), (5, 3), (5, 4)]


def test_tie_game(tie_sequence):
    state = GameState(6, 7)
    for col in tie_sequence[:-1]:
        outcome = state.apply_move(col)
        assert outcome.accepted
        assert outcome.result == GameResult.IN_PROGRESS

    outcome = state.apply_move(tie_sequence[-1])
    assert outcome.result == GameResult.TIE
    assert state.is_board_full()
    assert state.winner is None
    assert state.winning_line == []


def test_terminal_state_is_sticky():
    state = GameState(6, 7)
    for col in [3, 0, 3, 0, 3, 0, 3]:
        state.apply_move(col)
    grid_before = state.get_grid()

    for col in range(7):
        with pytest.raises(GameOverError) as excinfo:
            state.apply_move(col)
        assert excinfo.value.result == GameResult.PLAYER_ONE_WIN

    assert state.result == GameResult.PLAYER_ONE_WIN
    assert np.array_equal(state.get_grid(), grid_before)


def test_game_over_checked_before_column():
    state = GameState(6, 7)
    for col in [3, 0, 3, 0, 3, 0, 3]:
        state.apply_move(col)
    with pytest.raises(GameOverError):
        state.apply_move(99)


def test_reset_reuses_instance():
    state = GameState(5, 8)
    for col in [3, 0, 3, 0, 3, 0, 3]:
        state.apply_move(col)
    board_dims = (state.height, state.width)

    state.reset()

    assert (state.height, state.width) == board_dims
    assert state.result == GameResult.IN_PROGRESS
    assert state.current_player == Player.ONE
    assert state.moves_made == 0
    assert state.last_move is None
    assert np.all(state.get_grid() == 0)


def test_grid_snapshot_is_read_only_copy():
    state = GameState(6, 7)
    grid = state.get_grid()
    grid[:, :] = Player.TWO.value
    assert np.all(state.get_grid() == 0)


def test_piece_count_matches_applied_moves():
    rng = random.Random(7)
    state = GameState(6, 7)
    applied = 0
    for _ in range(200):
        if state.is_game_over():
            break
        if state.apply_move(rng.randrange(7)).accepted:
            applied += 1
        assert np.count_nonzero(state.get_grid()) == applied == state.moves_made


@pytest.mark.parametrize("seed", range(20))
def test_local_check_agrees_with_full_scan(seed):
    rng = random.Random(seed)
    state = GameState(6, 7)
    while not state.is_game_over():
        columns = [c for c in range(7) if state.find_landing_row(c) is not None]
        outcome = state.apply_move(rng.choice(columns))
        won = outcome.result.winner is not None
        assert won == state.check_for_win(outcome.player)
        assert state.check_for_win(outcome.player.other()) is False


def test_session_reports_all_outcome_kinds():
    game = ConnectFourGame(6, 7)

    assert game.submit_move(7).status == MoveStatus.INVALID_COLUMN
    assert game.get_current_player() == Player.ONE

    for _ in range(6):
        assert game.submit_move(0).status == MoveStatus.APPLIED
    assert game.submit_move(0).status == MoveStatus.COLUMN_FULL

    for col in [3, 1, 3, 1, 3, 1, 3]:
        game.submit_move(col)
    assert game.get_result() == GameResult.PLAYER_ONE_WIN

    outcome = game.submit_move(4)
    assert outcome.status == MoveStatus.GAME_OVER
    assert outcome.result == GameResult.PLAYER_ONE_WIN


def test_session_queries_and_reset():
    game = ConnectFourGame(6, 7)
    assert game.get_valid_moves() == list(range(7))

    for _ in range(6):
        game.submit_move(2)
    assert 2 not in game.get_valid_moves()

    game.reset()
    assert game.get_valid_moves() == list(range(7))
    assert game.get_result() == GameResult.IN_PROGRESS
    assert not game.is_game_over()
    assert np.all(game.get_grid() == 0)


def test_session_valid_moves_empty_after_game_over():
    game = ConnectFourGame(6, 7)
    for col in [3, 0, 3, 0, 3, 0, 3]:
        game.submit_move(col)
    assert game.get_valid_moves() == []
    assert game.get_winner() == Player.ONE
    assert len(game.get_winning_line()) == 4


def test_sessions_are_isolated():
    first = ConnectFourGame(6, 7)
    second = ConnectFourGame(6, 7)
    first.submit_move(3)
    assert np.all(second.get_grid() == 0)
    assert second.get_current_player() == Player.ONE
