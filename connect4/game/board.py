"""
board.py - Board representation for Connect Four

This module implements the Board class: a height x width grid filled from the
bottom up, with landing-row search, full-board and local win scans, and
fullness checks. Turn order and results live in connect4.game.rules.
"""

from typing import List, Optional

import numpy as np

from connect4.debug import debug
from connect4.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, CONNECT_N, MIN_DIMENSION,
                            DIRECTION_VECTORS, Coord, Player, InvalidColumnError,
                            is_valid_position, render_board_ascii)


class Board:
    """
    A Connect Four grid.

    Row 0 is the top row; pieces come to rest in the highest-numbered empty
    row of a column. Cells hold Player values (0 for empty).
    """

    def __init__(self, height: int = DEFAULT_HEIGHT, width: int = DEFAULT_WIDTH):
        if height <= 0 or width <= 0:
            raise ValueError(f"Board dimensions must be positive, got {height}x{width}")
        if height < MIN_DIMENSION or width < MIN_DIMENSION:
            debug.warning(f"Board {height}x{width} is smaller than {MIN_DIMENSION} "
                          f"along one axis; some wins are impossible", "board")

        self.height = height
        self.width = width
        debug.debug(f"Initializing {height}x{width} board", "board")
        self.clear()

    def clear(self):
        """Empty every cell."""
        self.grid = np.zeros((self.height, self.width), dtype=int)

    def copy(self) -> 'Board':
        """
        Create an independent copy of the board.

        Returns:
            A new Board with the same dimensions and a copied grid
        """
        new_board = Board.__new__(Board)
        new_board.height = self.height
        new_board.width = self.width
        new_board.grid = self.grid.copy()
        return new_board

    def is_valid_column(self, column) -> bool:
        """
        Check if column is an integer index inside [0, width).

        Args:
            column: Candidate column index

        Returns:
            True if a piece could be aimed at this column, False otherwise
        """
        if isinstance(column, bool) or not isinstance(column, (int, np.integer)):
            return False
        return 0 <= column < self.width

    def find_landing_row(self, column: int) -> Optional[int]:
        """
        Find the row a piece dropped in this column would land in.

        Args:
            column: Column index (0-indexed)

        Returns:
            The lowest empty row, or None if the column is full

        Raises:
            InvalidColumnError: If column is outside [0, width)
        """
        if not self.is_valid_column(column):
            raise InvalidColumnError(column, self.width)

        for row in range(self.height - 1, -1, -1):
            if self.grid[row, column] == Player.EMPTY.value:
                return row
        return None

    def drop(self, column: int, player: Player) -> Optional[int]:
        """
        Drop a piece for player into column.

        Returns:
            The row the piece landed in, or None if the column is full
        """
        row = self.find_landing_row(column)
        if row is None:
            debug.debug(f"Column {column} is full", "board")
            return None

        debug.trace(f"Placing {player.name} at ({row}, {column})", "board")
        self.grid[row, column] = player.value
        return row

    def is_full(self) -> bool:
        """True if no cell is empty."""
        return bool(np.all(self.grid != Player.EMPTY.value))

    def count_pieces(self) -> int:
        """Number of pieces on the board."""
        return int(np.count_nonzero(self.grid))

    def _run_from(self, row: int, col: int, dr: int, dc: int, player: Player) -> bool:
        """True if the CONNECT_N cells starting at (row, col) along (dr, dc) are all player's."""
        for step in range(CONNECT_N):
            r, c = row + dr * step, col + dc * step
            if not is_valid_position(r, c, self.height, self.width):
                return False
            if self.grid[r, c] != player.value:
                return False
        return True

    def get_winning_line(self, player: Player) -> List[Coord]:
        """
        Scan every cell as the start of a run of four for player.

        Returns:
            The (row, col) cells of the first run found, or an empty list
        """
        if player == Player.EMPTY:
            return []

        for row in range(self.height):
            for col in range(self.width):
                for dr, dc in DIRECTION_VECTORS.values():
                    if self._run_from(row, col, dr, dc, player):
                        return [(row + dr * i, col + dc * i) for i in range(CONNECT_N)]
        return []

    def check_for_win(self, player: Player) -> bool:
        """Full-board scan: does player own four collinear consecutive cells?"""
        return bool(self.get_winning_line(player))

    def check_win_at(self, row: int, col: int) -> bool:
        """
        Check only the lines through (row, col) for the owner of that cell.

        Equivalent to check_for_win for that owner when (row, col) was the
        last piece placed and the board had no win before it.
        """
        player_value = self.grid[row, col]
        if player_value == Player.EMPTY.value:
            return False

        for dr, dc in DIRECTION_VECTORS.values():
            count = 1

            r, c = row + dr, col + dc
            while is_valid_position(r, c, self.height, self.width) and self.grid[r, c] == player_value:
                count += 1
                r += dr
                c += dc

            r, c = row - dr, col - dc
            while is_valid_position(r, c, self.height, self.width) and self.grid[r, c] == player_value:
                count += 1
                r -= dr
                c -= dc

            if count >= CONNECT_N:
                return True

        return False

    def get_state(self) -> np.ndarray:
        """Copy of the grid, safe to hand to callers."""
        return self.grid.copy()

    def render(self, symbols: Optional[dict] = None) -> str:
        return render_board_ascii(self.grid, symbols)

    def __str__(self) -> str:
        return self.render()
