"""
connect4.game - Core game mechanics for Connect Four

This package contains the board representation, the game state machine
and the session interface used by presentation layers.
"""

from connect4.game.board import Board
from connect4.game.rules import GameState, MoveOutcome, ConnectFourGame, ConnectFourEnv

__all__ = ['Board', 'GameState', 'MoveOutcome', 'ConnectFourGame', 'ConnectFourEnv']
