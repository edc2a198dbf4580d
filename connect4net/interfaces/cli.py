"""
cli.py - Command-line front end for a networked Connect Four game

One process hosts, the other joins. Each side is played either by a human
typing column numbers or by the random computer player.
"""

import argparse
import sys
from typing import List, Optional

from connect4net.config import PLAYER_TYPES, SessionConfig
from connect4net.debug import debug
from connect4net.errors import ColumnFullError, Connect4Error, TransportError
from connect4net.net.events import BoardReset, MovePlaced, SessionEvent, TransportFailed
from connect4net.net.session import PeerSession
from connect4net.players import RandomMoveSource
from connect4net.utils import COLS

# Special return codes from get_human_move()
QUIT = -1
RESET = -2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Connect Four over the network')
    subparsers = parser.add_subparsers(dest='command', help='Which side of the connection to play')

    host_parser = subparsers.add_parser('host', help='Wait for the other player to connect (moves first)')
    join_parser = subparsers.add_parser('join', help='Connect to a hosting player')

    for sub in (host_parser, join_parser):
        sub.add_argument('--address', type=str, default=None,
                         help='Address to bind (host) or connect to (join)')
        sub.add_argument('--port', type=int, default=None, help='TCP port (default 4000)')
        sub.add_argument('--player', choices=PLAYER_TYPES, default='human',
                         help='Who makes the local moves')
        sub.add_argument('--reply-timeout', type=float, default=None,
                         help='Give up on the peer after this many seconds (default: wait forever)')
        sub.add_argument('--debug', action='store_true', help='Enable debug logging')
        sub.add_argument('--debug-level', type=str, default=None,
                         choices=['none', 'error', 'warning', 'info', 'debug', 'trace'],
                         help='Logging level')
        sub.add_argument('--log-file', type=str, default=None, help='Also log to this file')

    return parser


class NetworkCLI:
    """Drives one PeerSession from the terminal."""

    def __init__(self, config: SessionConfig, session: Optional[PeerSession] = None):
        self.config = config
        self.session = session or PeerSession(reply_timeout=config.reply_timeout)
        self.computer = RandomMoveSource() if config.player == 'computer' else None
        self.session.subscribe(self.on_event)

    def on_event(self, event: SessionEvent) -> None:
        """Render every change to the board."""
        if isinstance(event, MovePlaced):
            who = "You" if event.local else "Opponent"
            print(f"\n{who} played column {event.move.column}")
            print(self.session.board.render())
        elif isinstance(event, BoardReset):
            print("\nNew game")
            print(self.session.board.render())
        elif isinstance(event, TransportFailed):
            print(f"\nConnection problem: {event.error}")

    def connect(self) -> None:
        if self.config.role == 'host':
            port = self.session.listen(self.config.port, self.config.address)
            print(f"Waiting for the other player on port {port}...")
            self.session.accept()
        else:
            print(f"Joining {self.config.address}:{self.config.port}...")
            self.session.join(self.config.address, self.config.port)
        print(f"Connected. You are {self.session.color}.")
        print(self.session.board.render())

    def run(self) -> int:
        try:
            self.connect()
        except TransportError as e:
            print(f"Could not connect: {e}")
            return 1

        try:
            self.play()
        finally:
            self.session.close()
        return 0

    def play(self) -> None:
        """Alternate between local moves and waiting for the peer."""
        session = self.session
        while True:
            if session.is_game_over() or session.is_draw():
                self.announce_result()
                if not self.ask_again():
                    return
                session.reset()
                continue

            if session.stalled:
                if not self.ask_again("Reset and try again? [y/N] "):
                    return
                session.reset()
                continue

            if session.can_move():
                if not self.local_turn():
                    return
                continue

            print("Waiting for the opponent...")
            if not session.wait_for_turn() and not (session.is_game_over() or session.stalled):
                # Nothing pending and not our turn: the round cannot progress
                print("The game cannot continue.")
                return

    def local_turn(self) -> bool:
        """Make one local move. Returns False if the player quit."""
        if self.computer is not None:
            self.session.submit_computer_move(self.computer)
            return True

        while True:
            move = self.get_human_move()
            if move is None:
                continue
            if move == QUIT:
                return False
            if move == RESET:
                self.session.reset()
                return True
            try:
                self.session.submit_local_move(move)
                return True
            except ColumnFullError as e:
                print(e)

    def get_human_move(self) -> Optional[int]:
        """
        Get a move from human player input.

        Returns:
            Column index, QUIT, RESET, or None if the input was invalid
        """
        try:
            user_input = input(f"Your move (columns 0-{COLS - 1}, r/q): ").strip().lower()
        except EOFError:
            return QUIT

        if user_input == 'q':
            return QUIT
        if user_input == 'r':
            return RESET

        try:
            move = int(user_input)
        except ValueError:
            print("Invalid input. Please enter a column number or command.")
            return None
        if not 0 <= move < COLS:
            print(f"Column must be between 0 and {COLS - 1}.")
            return None
        return move

    def announce_result(self) -> None:
        winner = self.session.winner()
        if winner is None:
            print("It's a draw!")
        elif winner is self.session.color:
            print("You win! Congratulations!")
        else:
            print("Your opponent wins. Better luck next time.")

    def ask_again(self, prompt: str = "Play again? [y/N] ") -> bool:
        if self.computer is not None:
            return False
        try:
            return input(prompt).strip().lower() in ('y', 'yes')
        except EOFError:
            return False


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    try:
        config = SessionConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    debug.set_from_string(config.debug_level)
    if config.log_file:
        debug.configure(log_file=config.log_file)

    try:
        return NetworkCLI(config).run()
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except Connect4Error as e:
        debug.error(f"Unexpected game error: {e}", "cli")
        return 1


if __name__ == "__main__":
    sys.exit(main())
