"""
utils.py - Constants, enumerations and grid helpers for Connect Four

Rows are counted from the bottom of the board: row 0 is where the first
piece dropped into a column lands.
"""

from enum import Enum, auto
from typing import Iterator, List, Tuple

import numpy as np

# Board geometry
ROWS = 6
COLS = 7
CONNECT_N = 4  # pieces in a line needed to win


class Player(Enum):
    """Cell states; ONE and TWO double as the two player colors."""
    EMPTY = 0
    ONE = 1    # moves first
    TWO = 2

    def other(self) -> 'Player':
        """Get the opposing color (EMPTY has no opponent)."""
        if self == Player.ONE:
            return Player.TWO
        elif self == Player.TWO:
            return Player.ONE
        return Player.EMPTY

    def __str__(self):
        if self == Player.EMPTY:
            return "."
        elif self == Player.ONE:
            return "X"
        else:
            return "O"


class Direction(Enum):
    """Line directions checked for four in a row."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()    # bottom-left to top-right
    DIAGONAL_DOWN = auto()  # top-left to bottom-right


# (row, col) steps; rows grow upwards
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (1, 1),
    Direction.DIAGONAL_DOWN: (-1, 1),
}


def window_starts(direction: Direction, rows: int = ROWS, cols: int = COLS,
                  length: int = CONNECT_N) -> Iterator[Tuple[int, int]]:
    """
    Yield every cell from which a line of `length` cells in `direction` stays
    on a rows x cols board.
    """
    dr, dc = DIRECTION_VECTORS[direction]
    for row in range(rows):
        end_row = row + dr * (length - 1)
        if not 0 <= end_row < rows:
            continue
        for col in range(cols):
            if 0 <= col + dc * (length - 1) < cols:
                yield row, col


def window_cells(row: int, col: int, direction: Direction,
                 length: int = CONNECT_N) -> List[Tuple[int, int]]:
    """Cells of the line starting at (row, col) in `direction`."""
    dr, dc = DIRECTION_VECTORS[direction]
    return [(row + dr * i, col + dc * i) for i in range(length)]


def find_line(grid: np.ndarray, direction: Direction,
              length: int = CONNECT_N) -> List[Tuple[int, int]]:
    """
    Find the first line of `length` equal non-empty cells in `direction`.

    Args:
        grid: Board grid of cell codes, row 0 at the bottom
        direction: Direction to scan
        length: Required line length

    Returns:
        The line's cells, or an empty list if there is none
    """
    rows, cols = grid.shape
    for row, col in window_starts(direction, rows, cols, length):
        color = grid[row, col]
        if color == Player.EMPTY.value:
            continue
        cells = window_cells(row, col, direction, length)
        if all(grid[r, c] == color for r, c in cells[1:]):
            return cells
    return []


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render the board as ASCII art, top row first.

    Args:
        grid: Board grid of cell codes, row 0 at the bottom

    Returns:
        Multi-line string with column numbers underneath
    """
    rows, cols = grid.shape
    border = "+" + "-" * (cols * 2 - 1) + "+"
    lines = [border]
    for row in range(rows - 1, -1, -1):
        cells = (str(Player(int(grid[row, col]))) for col in range(cols))
        lines.append("|" + " ".join(cells) + "|")
    lines.append(border)
    lines.append(" " + " ".join(str(col) for col in range(cols)) + " ")
    return "\n".join(lines)
