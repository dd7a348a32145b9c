"""
board.py - Board representation and core game mechanics for Connect Four

This module implements the Board class, which owns the 6x7 grid, tracks how
far each column is filled, places pieces for whichever color is to move and
answers whether the game is over. It performs no I/O.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from connect4net.debug import debug
from connect4net.utils import (ROWS, COLS, CONNECT_N, Player, Direction,
                               find_line, render_board_ascii)


@dataclass(frozen=True)
class Move:
    """
    A placement that has happened on some Board.

    REJECTED_MOVE (player EMPTY) is the only Move that does not describe a
    real placement; it reports that the requested column was full.
    """
    row: int
    column: int
    player: Player

    @property
    def is_rejected(self) -> bool:
        return self.player == Player.EMPTY

    @property
    def color_code(self) -> int:
        return self.player.value

    def __str__(self) -> str:
        if self.is_rejected:
            return "Move(rejected)"
        return f"Move({self.player.name} -> row {self.row}, col {self.column})"


REJECTED_MOVE = Move(0, 0, Player.EMPTY)

# Scan order for is_game_over: rows, columns, then both diagonals
WIN_DIRECTIONS = (Direction.HORIZONTAL, Direction.VERTICAL,
                  Direction.DIAGONAL_UP, Direction.DIAGONAL_DOWN)


class Board:
    """
    Represents a Connect Four game board.

    Row 0 is the bottom row. `heights[c]` is the next free row of column c,
    so a column holding ROWS pieces is full.
    """

    def __init__(self, rows: int = ROWS, cols: int = COLS):
        """Initialize an empty board; player ONE moves first."""
        debug.debug(f"Initializing new {rows}x{cols} Board", "board")
        self.rows = rows
        self.cols = cols
        self.grid = np.zeros((rows, cols), dtype=np.int8)
        self.heights = np.zeros(cols, dtype=np.int8)
        self.current_player = Player.ONE
        self.moves_made: List[Move] = []

    def next_free_row(self, column: int) -> int:
        """Row the next piece in `column` would land in (self.rows if full)."""
        return int(self.heights[column])

    def is_column_full(self, column: int) -> bool:
        return self.next_free_row(column) >= self.rows

    def place(self, column: int) -> Move:
        """
        Drop a piece of the current color into `column`.

        The column index is trusted; validating it is the caller's job.

        Args:
            column: Column to play (0-indexed)

        Returns:
            The resulting Move, or REJECTED_MOVE if the column is full. A
            rejected placement changes nothing, including the turn color.
        """
        if self.is_column_full(column):
            debug.debug(f"Column {column} is full, rejecting move for {self.current_player.name}",
                        "board")
            return REJECTED_MOVE

        row = self.next_free_row(column)
        player = self.current_player
        self.grid[row, column] = player.value
        self.heights[column] = row + 1
        self.current_player = player.other()

        move = Move(row, column, player)
        self.moves_made.append(move)
        debug.trace(f"Placed {move}, next to move: {self.current_player.name}", "board")
        return move

    def find_winning_line(self) -> List[Tuple[int, int]]:
        """
        Get the cells of a completed line, re-derived from the grid.

        Returns:
            CONNECT_N (row, col) positions, or an empty list if nobody has won
        """
        for direction in WIN_DIRECTIONS:
            line = find_line(self.grid, direction, CONNECT_N)
            if line:
                return line
        return []

    def winner(self) -> Optional[Player]:
        """Color of the first completed line found, or None."""
        line = self.find_winning_line()
        if not line:
            return None
        row, col = line[0]
        return Player(int(self.grid[row, col]))

    def is_full(self) -> bool:
        return bool(np.all(self.grid != Player.EMPTY.value))

    def is_game_over(self) -> bool:
        """
        Check whether someone has four in a row or the board is full.

        Nothing is cached: every call recomputes the answer from the grid,
        so repeated calls without a placement agree.
        """
        return bool(self.find_winning_line()) or self.is_full()

    def get_state(self) -> np.ndarray:
        """
        Get the current board state as a numpy array.

        Returns:
            Copy of the grid (row 0 at the bottom)
        """
        return self.grid.copy()

    def render(self) -> str:
        return render_board_ascii(self.grid)

    def __str__(self) -> str:
        return self.render()
