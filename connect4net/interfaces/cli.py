"""
cli.py - Command-line front end for Connect Four

Plays a game in the terminal, either locally or against another process over
TCP, with a human typing columns or the random agent choosing them.

    python run.py play [--agent]
    python run.py host --port 4000 [--agent]
    python run.py join --host 127.0.0.1 --port 4000 [--agent]
"""

import argparse
import sys
from typing import List, Optional

from connect4net.config import GameConfig, load_config, save_config
from connect4net.debug import debug
from connect4net.game.board import Move
from connect4net.game.coordinator import TurnCoordinator, new_game
from connect4net.game.session import GameListener
from connect4net.network.errors import PeerLinkError
from connect4net.utils import COLS


class ConsoleListener(GameListener):
    """Prints the board after every move and the final verdict."""

    def __init__(self, cli: 'SimpleCLI'):
        self.cli = cli

    def on_move(self, move: Move) -> None:
        coordinator = self.cli.coordinator
        print(f"\n{move.player} plays column {move.column}")
        if coordinator is not None:
            print(coordinator.board.render())

    def on_rejected(self, move: Move) -> None:
        print("Column full, pick somewhere else!")

    def on_game_over(self, won: bool) -> None:
        print("You won!" if won else "You lost. :(")


class SimpleCLI:
    """Command-line interface for local and networked games."""

    def __init__(self):
        self.args = None
        self.config: Optional[GameConfig] = None
        self.coordinator: Optional[TurnCoordinator] = None

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and resolve the effective config."""
        parser = argparse.ArgumentParser(description='Connect Four over the network')
        parser.add_argument('--config', help='Path of the JSON settings file')
        parser.add_argument('--debug-level', choices=['none', 'error', 'warning', 'info',
                                                      'debug', 'trace'],
                            help='Logging verbosity')
        parser.add_argument('--log-file', help='Also write logs to this file')
        parser.add_argument('--seed', type=int, help='Seed for the random agent')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play both colors on this machine')
        play_parser.add_argument('--agent', action='store_true',
                                 help='Let the random agent play the whole game')

        host_parser = subparsers.add_parser('host', help='Wait for a peer and move first')
        host_parser.add_argument('--port', type=int, help='Port to listen on')
        host_parser.add_argument('--agent', action='store_true', help='Play with the random agent')
        host_parser.add_argument('--save-config', action='store_true',
                                 help='Remember the port in the settings file')

        join_parser = subparsers.add_parser('join', help='Connect to a host and move second')
        join_parser.add_argument('--host', help='Address of the host')
        join_parser.add_argument('--port', type=int, help='Port of the host')
        join_parser.add_argument('--agent', action='store_true', help='Play with the random agent')
        join_parser.add_argument('--save-config', action='store_true',
                                 help='Remember host and port in the settings file')

        self.args = parser.parse_args(argv)

        base = load_config(self.args.config)
        self.config = base.merged(
            host=getattr(self.args, 'host', None),
            port=getattr(self.args, 'port', None),
            seed=self.args.seed,
            debug_level=self.args.debug_level,
        )

        debug.set_from_string(self.config.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

        if getattr(self.args, 'save_config', False):
            save_config(self.config, self.args.config)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the selected command; returns the process exit code."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command not in ('play', 'host', 'join'):
            print("Please specify a command. Use --help for options.")
            return 1

        self.coordinator = new_game(ConsoleListener(self), config=self.config)
        try:
            if self.args.command == 'host':
                print(f"Waiting for a peer on port {self.config.port}...")
                self.coordinator.start_server(self.config.port)
                print("Peer connected, you move first.")
            elif self.args.command == 'join':
                print(f"Connecting to {self.config.host}:{self.config.port}...")
                self.coordinator.start_client(self.config.host, self.config.port,
                                              as_human=not self.args.agent)
                print("Connected, waiting for the first move.")

            if self.args.agent:
                self.play_agent()
            else:
                self.play_human()
        except PeerLinkError as exc:
            print(f"Network error: {exc}")
            return 2
        except KeyboardInterrupt:
            print("\nQuitting game.")
            return 130
        finally:
            self.coordinator.close()

        if self.coordinator.failure is not None:
            print(f"Connection to the peer was lost: {self.coordinator.failure}")
            return 2
        return 0

    def play_agent(self) -> None:
        if self.args.command == 'join':
            self.coordinator.start_agent_receive_loop()
        else:
            self.coordinator.start_agent_turn_loop()

    def play_human(self) -> None:
        """Prompt for columns whenever it is the local turn."""
        coordinator = self.coordinator
        print(coordinator.board.render())
        while coordinator.wait_for_local_turn():
            column = self.get_human_move()
            if column is None:
                print("Quitting game.")
                return
            coordinator.human_move(column)

    def get_human_move(self) -> Optional[int]:
        """
        Read a column from the terminal.

        Returns:
            Column index, or None if the player quit
        """
        while True:
            try:
                user_input = input(f"Your move (columns 0-{COLS - 1}, q to quit): ")
            except EOFError:
                return None
            user_input = user_input.strip().lower()
            if user_input == 'q':
                return None
            try:
                column = int(user_input)
            except ValueError:
                print("Invalid input. Please enter a column number.")
                continue
            if 0 <= column < COLS:
                return column
            print(f"Column must be between 0 and {COLS - 1}.")


def main(argv: Optional[List[str]] = None) -> int:
    return SimpleCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
