"""
rules.py - Game state management and Gymnasium environment for Connect Four

This module provides:
1. GameState, which owns the board, the turn and the result of one game
2. ConnectFourGame, the session interface a presentation layer talks to
3. ConnectFourEnv, a gymnasium-compatible environment over a GameState
"""

from typing import Dict, List, NamedTuple, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from connect4.debug import debug
from connect4.game.board import Board
from connect4.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, Coord, Player, GameResult,
                            MoveStatus, InvalidColumnError, GameOverError)


class MoveOutcome(NamedTuple):
    """Result of submitting a move. row/column are set only when applied."""
    status: MoveStatus
    result: GameResult
    player: Player
    row: Optional[int] = None
    column: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.status == MoveStatus.APPLIED


class GameState:
    """
    Owns the grid, the turn order and the result of a single game.

    A GameState is not thread-safe; the session that owns it must submit
    one move at a time. Separate sessions need separate instances.
    """

    def __init__(self, height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH):
        debug.debug("Initializing GameState", "game")
        self.initialize(height, width)

    def initialize(self, height: int, width: int) -> None:
        """Start a fresh game on an empty height x width board."""
        self.board = Board(height, width)
        self.current_player = Player.ONE
        self.result = GameResult.IN_PROGRESS
        self.last_move: Optional[Coord] = None
        self.moves_made = 0

    def reset(self) -> None:
        """Discard the current game and start again with the same dimensions."""
        debug.debug("Resetting game", "game")
        self.initialize(self.board.height, self.board.width)

    @property
    def height(self) -> int:
        return self.board.height

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def winner(self) -> Optional[Player]:
        return self.result.winner

    @property
    def winning_line(self) -> List[Coord]:
        winner = self.winner
        if winner is None:
            return []
        return self.board.get_winning_line(winner)

    def is_game_over(self) -> bool:
        return self.result.is_game_over()

    def find_landing_row(self, column: int) -> Optional[int]:
        return self.board.find_landing_row(column)

    def check_for_win(self, player: Player) -> bool:
        return self.board.check_for_win(player)

    def is_board_full(self) -> bool:
        return self.board.is_full()

    def get_grid(self) -> np.ndarray:
        return self.board.get_state()

    def apply_move(self, column: int) -> MoveOutcome:
        """
        Drop the current player's piece into column.

        Args:
            column: Column to place a piece (0-indexed)

        Returns:
            MoveOutcome with status APPLIED and the landing cell, or
            COLUMN_FULL with nothing changed

        Raises:
            GameOverError: If the game already has a terminal result
            InvalidColumnError: If column is outside [0, width)
        """
        if self.is_game_over():
            debug.debug(f"Rejecting move in column {column}: game is over", "game")
            raise GameOverError(self.result)

        mover = self.current_player
        row = self.find_landing_row(column)
        if row is None:
            debug.debug(f"Column {column} is full, move ignored", "game")
            return MoveOutcome(MoveStatus.COLUMN_FULL, self.result, mover)

        self.board.grid[row, column] = mover.value
        self.last_move = (row, column)
        self.moves_made += 1
        debug.trace(f"{mover.name} placed at ({row}, {column})", "game")

        if self.board.check_win_at(row, column):
            self.result = GameResult.for_winner(mover)
            debug.info(f"Player {mover.name} wins after move at {self.last_move}", "game")
        elif self.is_board_full():
            self.result = GameResult.TIE
            debug.info("Game ends in a tie", "game")
        else:
            self.current_player = mover.other()

        return MoveOutcome(MoveStatus.APPLIED, self.result, mover, row, column)


class ConnectFourGame:
    """
    Session-level interface for a presentation layer.

    Wraps one long-lived GameState and turns the expected rejections into
    MoveOutcome statuses instead of exceptions.
    """

    def __init__(self, height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH):
        debug.debug(f"Starting {height}x{width} session", "session")
        self.state = GameState(height, width)

    def reset(self) -> None:
        debug.debug("New game requested", "session")
        self.state.reset()

    def submit_move(self, column: int) -> MoveOutcome:
        """
        Submit a move for the current player.

        Returns:
            MoveOutcome whose status is APPLIED, COLUMN_FULL, INVALID_COLUMN
            or GAME_OVER
        """
        try:
            return self.state.apply_move(column)
        except InvalidColumnError as e:
            debug.debug(str(e), "session")
            return MoveOutcome(MoveStatus.INVALID_COLUMN, self.state.result,
                               self.state.current_player)
        except GameOverError as e:
            debug.debug(str(e), "session")
            return MoveOutcome(MoveStatus.GAME_OVER, self.state.result,
                               self.state.current_player)

    def get_current_player(self) -> Player:
        return self.state.current_player

    def get_result(self) -> GameResult:
        return self.state.result

    def get_grid(self) -> np.ndarray:
        return self.state.get_grid()

    def get_winner(self) -> Optional[Player]:
        return self.state.winner

    def get_winning_line(self) -> List[Coord]:
        return self.state.winning_line

    def is_game_over(self) -> bool:
        return self.state.is_game_over()

    def get_valid_moves(self) -> List[int]:
        """Columns that still accept a piece; empty once the game is over."""
        if self.is_game_over():
            return []
        return [col for col in range(self.state.width)
                if self.state.find_landing_row(col) is not None]

    def render(self, symbols: Optional[dict] = None) -> str:
        return self.state.board.render(symbols)


# Default RGB colours for rgb_array rendering
DEFAULT_RGB = {
    Player.EMPTY: (0, 0, 0),
    Player.ONE: (255, 0, 0),
    Player.TWO: (255, 255, 0),
}


class ConnectFourEnv(gym.Env):
    """
    Connect Four environment following the Gymnasium interface.

    Both players act through step(); rewards are from the point of view of
    the player who made the move.
    """

    metadata = {'render_modes': ['ascii', 'human', 'rgb_array'], 'render_fps': 4}

    CELL_PIXELS = 50

    def __init__(self, render_mode: Optional[str] = None,
                 height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH,
                 colors: Optional[Dict[Player, Tuple[int, int, int]]] = None):
        debug.debug("Initializing ConnectFourEnv", "env")

        self.state = GameState(height, width)
        self.render_mode = render_mode
        self.colors = {**DEFAULT_RGB, **(colors or {})}

        self.action_space = spaces.Discrete(width)
        self.observation_space = spaces.Box(
            low=0, high=2, shape=(height, width), dtype=np.int8
        )

        # Only a win scores; every other outcome is neutral
        self.reward_win = 1.0
        self.reward_draw = 0.0
        self.reward_invalid_move = 0.0
        self.reward_step = 0.0

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        super().reset(seed=seed)
        self.state.reset()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Drop a piece for the current player.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        action = int(action)
        debug.debug(f"Environment step with action {action}", "env")

        try:
            outcome = self.state.apply_move(action)
            status = outcome.status
        except InvalidColumnError:
            status = MoveStatus.INVALID_COLUMN
        except GameOverError:
            status = MoveStatus.GAME_OVER

        if status != MoveStatus.APPLIED:
            debug.warning(f"Rejected action {action}: {status.name}", "env")
            info = self._get_info()
            info['move_status'] = status.name
            return self._get_observation(), self.reward_invalid_move, False, True, info

        reward = self.reward_step
        terminated = self.state.is_game_over()
        if outcome.result == GameResult.TIE:
            reward = self.reward_draw
        elif terminated:
            reward = self.reward_win

        if self.render_mode == "human":
            self.render()

        info = self._get_info()
        info['move_status'] = status.name
        return self._get_observation(), reward, terminated, False, info

    def render(self) -> Optional[Union[str, np.ndarray]]:
        if self.render_mode is None:
            return None

        if self.render_mode == "ascii":
            return self.state.board.render()

        if self.render_mode == "human":
            print(self.state.board.render())
            return None

        if self.render_mode == "rgb_array":
            return self._render_rgb()

        return None

    def _render_rgb(self) -> np.ndarray:
        size = self.CELL_PIXELS
        grid = self.state.board.grid
        height, width = grid.shape

        rgb_array = np.zeros((height * size, width * size, 3), dtype=np.uint8)
        rgb_array[:, :] = [0, 0, 128]

        radius = size * 2 // 5
        yy, xx = np.mgrid[0:size, 0:size]
        disc = (xx - size // 2) ** 2 + (yy - size // 2) ** 2 <= radius ** 2

        for row in range(height):
            for col in range(width):
                cell = rgb_array[row * size:(row + 1) * size, col * size:(col + 1) * size]
                cell[disc] = self.colors[Player(int(grid[row, col]))]

        return rgb_array

    def _get_observation(self) -> np.ndarray:
        return self.state.get_grid().astype(np.int8)

    def _get_info(self) -> Dict:
        valid_moves = [col for col in range(self.state.width)
                       if not self.state.is_game_over()
                       and self.state.find_landing_row(col) is not None]
        return {
            'valid_moves': valid_moves,
            'current_player': self.state.current_player.value,
            'game_result': self.state.result.name,
            'moves_made': self.state.moves_made,
            'winning_line': self.state.winning_line,
            'last_move': self.state.last_move,
        }

    def close(self):
        pass
