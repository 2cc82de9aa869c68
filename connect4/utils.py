"""
utils.py - Constants, enumerations, errors and helpers for Connect Four

This module holds everything the board, the game state and the interfaces
share: default dimensions, player and result enumerations, direction vectors
used by the win scans, the typed errors, and ASCII rendering.
"""

from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

# Game constants
DEFAULT_HEIGHT = 6
DEFAULT_WIDTH = 7
CONNECT_N = 4  # Number of pieces in a row to win
MIN_DIMENSION = CONNECT_N

Coord = Tuple[int, int]


class Player(Enum):
    """Opaque player identifiers. Value 0 marks an empty cell."""
    EMPTY = 0
    ONE = 1
    TWO = 2

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.ONE:
            return "X"
        return "O"


class GameResult(Enum):
    """Outcome of a game."""
    IN_PROGRESS = auto()
    PLAYER_ONE_WIN = auto()
    PLAYER_TWO_WIN = auto()
    TIE = auto()

    def is_game_over(self) -> bool:
        return self != GameResult.IN_PROGRESS

    @property
    def winner(self) -> Optional[Player]:
        if self == GameResult.PLAYER_ONE_WIN:
            return Player.ONE
        if self == GameResult.PLAYER_TWO_WIN:
            return Player.TWO
        return None

    @classmethod
    def for_winner(cls, player: Player) -> 'GameResult':
        if player == Player.ONE:
            return cls.PLAYER_ONE_WIN
        if player == Player.TWO:
            return cls.PLAYER_TWO_WIN
        raise ValueError(f"No win result for {player!r}")


class MoveStatus(Enum):
    """What happened to a submitted move."""
    APPLIED = auto()
    COLUMN_FULL = auto()
    INVALID_COLUMN = auto()
    GAME_OVER = auto()


class Direction(Enum):
    """Directions a run of four is scanned in, from its starting cell."""
    RIGHT = auto()
    DOWN = auto()
    DOWN_RIGHT = auto()
    DOWN_LEFT = auto()


# Direction vectors (row, col); row 0 is the top of the board
DIRECTION_VECTORS = {
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.DOWN_RIGHT: (1, 1),
    Direction.DOWN_LEFT: (1, -1),
}


class Connect4Error(Exception):
    """Base class for errors raised by the game core."""


class InvalidColumnError(Connect4Error, ValueError):
    """A column index outside [0, width)."""

    def __init__(self, column, width: int):
        self.column = column
        self.width = width
        super().__init__(f"Column {column} is out of range (valid: 0-{width - 1})")


class GameOverError(Connect4Error):
    """A move was submitted after the game reached a terminal result."""

    def __init__(self, result: GameResult):
        self.result = result
        super().__init__(f"Game is already over ({result.name})")


def is_valid_position(row: int, col: int, height: int, width: int) -> bool:
    return 0 <= row < height and 0 <= col < width


def render_board_ascii(grid: np.ndarray, symbols: Optional[dict] = None) -> str:
    """
    Render a grid as ASCII art.

    Args:
        grid: The board grid (height x width of Player values)
        symbols: Optional mapping of Player to a single display character

    Returns:
        ASCII representation of the board with column numbers underneath
    """
    height, width = grid.shape
    symbols = symbols or {player: str(player) for player in Player}

    border = "|" + "-" * (width * 2 - 1) + "|"
    lines = [border]
    for row in range(height):
        cells = [symbols[Player(int(grid[row, col]))] for col in range(width)]
        lines.append("|" + " ".join(cells) + "|")
    lines.append(border)
    # Column numbers only line up while they are single digits
    lines.append("|" + " ".join(str(col % 10) for col in range(width)) + "|")

    return "\n".join(lines)
