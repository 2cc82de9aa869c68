"""
cli.py - Command-line interface for Connect Four

This module is the presentation layer: it maps players to colours, reads
column choices, renders the board and announces results. All game rules
are delegated to connect4.game.rules.ConnectFourGame.
"""

import argparse
import random
import sys
from typing import Dict, List, Optional, Union

import numpy as np

from connect4.debug import debug, DebugLevel
from connect4.game.board import Board
from connect4.game.rules import ConnectFourGame, MoveOutcome
from connect4.utils import (DEFAULT_HEIGHT, DEFAULT_WIDTH, Player, GameResult,
                            MoveStatus, Connect4Error)

QUIT = 'quit'
RESTART = 'restart'


class ComputerPlayer:
    """
    Placeholder opponent. It draws a random number once and announces it
    after player two moves; it never picks or submits a move.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.x = (rng or random).random() * 8

    def get_x(self) -> str:
        return f"The random number is {self.x}"


def color_symbols(colors: Dict[Player, str]) -> Dict[Player, str]:
    """Board symbols taken from the colour initials, or X/O if they clash."""
    symbols = {Player.EMPTY: " "}
    initials = {player: color[:1].upper() for player, color in colors.items()}
    if len(set(initials.values())) == len(initials) and all(initials.values()):
        symbols.update(initials)
    else:
        symbols.update({Player.ONE: str(Player.ONE), Player.TWO: str(Player.TWO)})
    return symbols


def end_message(result: GameResult, colors: Dict[Player, str]) -> str:
    if result == GameResult.TIE:
        return "Tie!"
    return f"Player {colors[result.winner]} won!"


def parse_position(position: str, height: int, width: int) -> Board:
    """Build a board from a comma-separated list of height*width cell values."""
    values = [int(c) for c in position.split(',')]
    if len(values) != height * width:
        raise ValueError(f"Position string must have {height * width} values, got {len(values)}")
    if any(v not in (p.value for p in Player) for v in values):
        raise ValueError("Cell values must be 0, 1 or 2")

    board = Board(height, width)
    board.grid = np.array(values, dtype=int).reshape(height, width)
    return board


class SimpleCLI:
    """Terminal front end for Connect Four."""

    def __init__(self):
        self.args = None
        self.game: Optional[ConnectFourGame] = None
        self.colors: Dict[Player, str] = {Player.ONE: 'red', Player.TWO: 'yellow'}
        self.computer: Optional[ComputerPlayer] = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four CLI')
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')
        parser.add_argument('--debug-level', default='info',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level')
        parser.add_argument('--log-file', default=None, help='Also log to this file')
        parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Board rows')
        parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Board columns')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a two-player game')
        play_parser.add_argument('--color1', default='red', help='Colour of player one')
        play_parser.add_argument('--color2', default='yellow', help='Colour of player two')
        play_parser.add_argument('--computer', action='store_true',
                                 help='Show the computer player placeholder after player two moves')

        test_parser = subparsers.add_parser('test', help='Analyse a board position')
        test_parser.add_argument('--position', type=str,
                                 help='Comma-separated cell values (0 empty, 1, 2), row by row from the top')

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark win detection')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        self.args = self.build_parser().parse_args(argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the command selected on the command line. Returns an exit code."""
        if not self.args:
            self.parse_args(argv)

        if self.args.height <= 0 or self.args.width <= 0:
            print("Board dimensions must be positive.")
            return 2

        if self.args.command == 'benchmark' and self.args.iterations <= 0:
            print("Iterations must be positive.")
            return 2

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'test':
            return self.test_position()
        elif self.args.command == 'benchmark':
            self.benchmark()
        else:
            print("Please specify a command. Use --help for options.")
            return 1
        return 0

    def render(self) -> str:
        return self.game.render(color_symbols(self.colors))

    def play_game(self) -> None:
        """Play Connect Four interactively until the users quit."""
        self.colors = {Player.ONE: self.args.color1, Player.TWO: self.args.color2}
        self.game = ConnectFourGame(self.args.height, self.args.width)
        if getattr(self.args, 'computer', False):
            self.computer = ComputerPlayer()

        last_col = self.args.width - 1
        print("Starting a new Connect Four game!")
        print(f"Enter a column number (0-{last_col}) to drop a piece.")
        print("Other commands: 'q' to quit, 'r' for a new game.")
        print(self.render())

        while True:
            if self.game.is_game_over():
                command = self.get_command("New game? ('r' to restart, 'q' to quit): ")
            else:
                player = self.game.get_current_player()
                command = self.get_command(
                    f"Player {self.colors[player]}, your move (0-{last_col}, q/r): ")

            if command == QUIT:
                print("Quitting game.")
                return
            if command == RESTART:
                self.game.reset()
                if self.computer is not None:
                    self.computer = ComputerPlayer()
                print("New game started.")
                print(self.render())
                continue
            if command is None or self.game.is_game_over():
                continue

            self.handle_outcome(self.game.submit_move(command))

    def handle_outcome(self, outcome: MoveOutcome) -> None:
        """Report what happened to a move."""
        if outcome.status == MoveStatus.COLUMN_FULL:
            print("That column is full, pick another.")
            return
        if outcome.status == MoveStatus.INVALID_COLUMN:
            print(f"Column must be between 0 and {self.args.width - 1}.")
            return
        if outcome.status == MoveStatus.GAME_OVER:
            print("The game is over.")
            return

        print(self.render())
        if outcome.player == Player.TWO and self.computer is not None:
            print(self.computer.get_x())

        if outcome.result.is_game_over():
            print(end_message(outcome.result, self.colors))

    def get_command(self, prompt: str) -> Union[int, str, None]:
        """
        Read one command from the user.

        Returns:
            A column number, QUIT, RESTART, or None for unreadable input
        """
        try:
            user_input = input(prompt).strip().lower()
        except EOFError:
            return QUIT

        if user_input == 'q':
            return QUIT
        if user_input == 'r':
            return RESTART

        try:
            return int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or a command.")
            return None

    def test_position(self) -> int:
        """Analyse a board position given with --position."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return 1

        try:
            board = parse_position(self.args.position, self.args.height, self.args.width)
        except (ValueError, Connect4Error) as e:
            print(f"Error parsing position: {e}")
            return 1

        print("Loaded position:")
        print(board.render())

        winners = []
        for player in (Player.ONE, Player.TWO):
            line = board.get_winning_line(player)
            if line:
                winners.append(player)
                print(f"Win for player {player.name} at {line}")
        if not winners:
            print("No win detected for any player")

        if board.is_full():
            print("Board is full" + ("" if winners else " (tie)"))
        else:
            print(f"Empty spaces: {board.height * board.width - board.count_pieces()}")

        valid_columns = [col for col in range(board.width)
                         if board.find_landing_row(col) is not None]
        print(f"Valid moves: {valid_columns}")
        return 0

    def benchmark(self) -> None:
        """Time random games and compare the full-board and local win checks."""
        iterations = self.args.iterations
        height, width = self.args.height, self.args.width
        print(f"Running benchmark with {iterations} iterations...")

        boards = []
        for _ in range(iterations):
            board = Board(height, width)
            for _ in range(random.randint(0, height * width // 2)):
                board.drop(random.randrange(width), random.choice([Player.ONE, Player.TWO]))
            boards.append(board)

        debug.start_timer("full_scan")
        for board in boards:
            board.check_for_win(Player.ONE)
            board.check_for_win(Player.TWO)
        full_time = debug.end_timer("full_scan", "cli")
        print(f"Full-board scans: {full_time:.6f} seconds total, "
              f"{full_time / (2 * iterations) * 1000:.6f} ms per scan")

        debug.start_timer("local_check")
        checks_done = 0
        for board in boards:
            for row, col in zip(*np.nonzero(board.grid)):
                board.check_win_at(row, col)
                checks_done += 1
        local_time = debug.end_timer("local_check", "cli")
        print(f"Local checks: {checks_done} in {local_time:.6f} seconds, "
              f"{local_time / max(checks_done, 1) * 1000:.6f} ms per check")

        games = max(iterations // 10, 1)
        total_moves = 0
        debug.start_timer("game_simulation")
        for _ in range(games):
            game = ConnectFourGame(height, width)
            while not game.is_game_over():
                game.submit_move(random.choice(game.get_valid_moves()))
                total_moves += 1
        simulation_time = debug.end_timer("game_simulation", "cli")
        print(f"Played {games} games with {total_moves} total moves: "
              f"{simulation_time / games * 1000:.6f} ms per game, "
              f"{simulation_time / max(total_moves, 1) * 1000:.6f} ms per move")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    return SimpleCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
