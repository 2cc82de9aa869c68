"""
connect4 - Two-player Connect Four

This package provides the board, the game state machine, a session
interface for front ends, a Gymnasium environment and a terminal interface.
"""

# Version number
__version__ = '0.2.0'
