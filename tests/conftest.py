"""Shared fixtures for the Connect Four tests."""

import numpy as np
import pytest

from connect4.utils import Player

# Column order that fills a 6x7 board, two rows at a time, into the
# no-win pattern below while players alternate starting with ONE.
TIE_SEQUENCE = [2, 0, 3, 1, 6, 4, 0, 5, 1, 2, 4, 3, 5, 6] * 3


def tie_pattern(height: int = 6, width: int = 7) -> np.ndarray:
    """Full grid with no four-in-a-row for either player."""
    grid = np.zeros((height, width), dtype=int)
    for row in range(height):
        for col in range(width):
            grid[row, col] = Player.ONE.value if ((col // 2) + row) % 2 == 0 else Player.TWO.value
    return grid


@pytest.fixture
def tie_sequence():
    return list(TIE_SEQUENCE)


@pytest.fixture
def tie_grid():
    return tie_pattern()
