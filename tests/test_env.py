"""Tests for ConnectFourEnv."""

import numpy as np

from connect4.game.rules import ConnectFourEnv
from connect4.utils import Player


def test_env_spaces():
    env = ConnectFourEnv(height=5, width=8)
    assert env.action_space.n == 8
    assert env.observation_space.shape == (5, 8)


def test_env_reset():
    env = ConnectFourEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == (6, 7)
    assert obs.dtype == np.int8
    assert np.all(obs == 0)
    assert info['valid_moves'] == list(range(7))
    assert info['current_player'] == Player.ONE.value
    assert info['game_result'] == 'IN_PROGRESS'
    assert env.observation_space.contains(obs)


def test_env_step():
    env = ConnectFourEnv()
    env.reset()
    obs, reward, terminated, truncated, info = env.step(0)

    assert obs[5, 0] == Player.ONE.value
    assert reward == env.reward_step
    assert not terminated and not truncated
    assert info['current_player'] == Player.TWO.value
    assert info['move_status'] == 'APPLIED'
    assert info['last_move'] == (5, 0)


def test_env_invalid_action_leaves_state():
    env = ConnectFourEnv()
    env.reset()
    env.step(1)
    obs, reward, terminated, truncated, info = env.step(7)

    assert reward == env.reward_invalid_move
    assert truncated and not terminated
    assert info['move_status'] == 'INVALID_COLUMN'
    assert info['moves_made'] == 1
    assert info['current_player'] == Player.TWO.value


def test_env_full_column_action():
    env = ConnectFourEnv()
    env.reset()
    for _ in range(6):
        env.step(0)
    obs, reward, terminated, truncated, info = env.step(0)

    assert truncated
    assert info['move_status'] == 'COLUMN_FULL'
    assert 0 not in info['valid_moves']
    assert np.count_nonzero(obs) == 6


def test_env_win():
    env = ConnectFourEnv()
    env.reset()
    for action in [0, 1, 0, 1, 0, 1]:
        env.step(action)
    obs, reward, terminated, truncated, info = env.step(0)

    assert terminated
    assert reward == env.reward_win
    assert info['game_result'] == 'PLAYER_ONE_WIN'
    assert set(info['winning_line']) == {(5, 0), (4, 0), (3, 0), (2, 0)}
    assert info['valid_moves'] == []

    obs_after, reward, terminated, truncated, info = env.step(3)
    assert info['move_status'] == 'GAME_OVER'
    assert np.array_equal(obs, obs_after)


def test_env_tie(tie_sequence):
    env = ConnectFourEnv()
    env.reset()
    for action in tie_sequence[:-1]:
        env.step(action)
    obs, reward, terminated, truncated, info = env.step(tie_sequence[-1])

    assert terminated
    assert reward == env.reward_draw
    assert info['game_result'] == 'TIE'


def test_env_render_modes():
    env = ConnectFourEnv(render_mode="ascii")
    env.reset()
    env.step(3)
    assert "X" in env.render()

    env = ConnectFourEnv(render_mode="rgb_array", colors={Player.ONE: (0, 255, 0)})
    env.reset()
    env.step(3)
    frame = env.render()
    size = env.CELL_PIXELS
    assert frame.shape == (6 * size, 7 * size, 3)
    centre = (5 * size + size // 2, 3 * size + size // 2)
    assert tuple(frame[centre]) == (0, 255, 0)
    assert tuple(frame[0, 0]) == (0, 0, 128)

    assert ConnectFourEnv().render() is None


def test_env_only_a_win_is_rewarded(tie_sequence):
    env = ConnectFourEnv()
    env.reset()
    _, reward, _, _, _ = env.step(3)
    assert reward == 0.0
    _, reward, _, truncated, _ = env.step(9)
    assert truncated and reward == 0.0

    env.reset()
    for action in tie_sequence[:-1]:
        env.step(action)
    _, reward, terminated, _, info = env.step(tie_sequence[-1])
    assert terminated and info['game_result'] == 'TIE'
    assert reward == 0.0

    env.reset()
    for action in [0, 1, 0, 1, 0, 1]:
        env.step(action)
    _, reward, _, _, _ = env.step(0)
    assert reward == 1.0
