"""
session.py - Game session and the caller notification boundary

GameSession wraps one Board and is the only place the engine talks to the
caller (a UI, the CLI or a test). Every placement attempt is reported
through a GameListener.
"""

from typing import Optional

from connect4net.debug import debug
from connect4net.game.board import Board, Move
from connect4net.utils import Player


class GameListener:
    """
    Callbacks the engine invokes on the caller.

    Subclass and override what you need; every hook defaults to a no-op.
    Hooks may run on the background receiver thread.
    """

    def on_move(self, move: Move) -> None:
        """A piece was placed (locally or replayed from the peer)."""

    def on_rejected(self, move: Move) -> None:
        """The requested column was full; `move` is REJECTED_MOVE."""

    def on_game_over(self, won: bool) -> None:
        """The game ended; `won` is False when this side counts as the loser."""


class GameSession:
    """Thin adapter between a Board and the caller's listener."""

    def __init__(self, listener: Optional[GameListener] = None, board: Optional[Board] = None):
        self.board = board if board is not None else Board()
        self.listener = listener if listener is not None else GameListener()

    @property
    def current_player(self) -> Player:
        return self.board.current_player

    def apply_local_move(self, column: int) -> Move:
        """
        Place a piece in `column` and notify the listener.

        Args:
            column: Column to play

        Returns:
            The Move, or REJECTED_MOVE if the column was full
        """
        move = self.board.place(column)
        if move.is_rejected:
            debug.debug(f"Column {column} rejected", "session")
            self.listener.on_rejected(move)
        else:
            debug.debug(f"Applied {move}", "session")
            self.listener.on_move(move)
        return move

    def is_over(self) -> bool:
        return self.board.is_game_over()
