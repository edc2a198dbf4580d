"""
utils.py - Constants, enumerations and helpers shared by board and network code

Board dimensions, the color values used both on the grid and on the wire,
and the direction vectors for line detection all live here.
"""

from enum import Enum, auto
from typing import List

import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win

# Network constants
DEFAULT_PORT = 4000
MESSAGE_FORMAT = "!iii"  # row, column, color as big-endian int32


class Color(Enum):
    """Cell contents and piece colors. Values are the wire encoding."""
    EMPTY = 0
    YELLOW = 1   # Host pieces
    RED = 2      # Join pieces

    def other(self) -> "Color":
        """Get the opposing color."""
        if self == Color.YELLOW:
            return Color.RED
        elif self == Color.RED:
            return Color.YELLOW
        return Color.EMPTY

    def symbol(self) -> str:
        if self == Color.YELLOW:
            return "Y"
        elif self == Color.RED:
            return "R"
        return "."

    def __str__(self):
        return self.name.lower()


PIECE_COLORS = (Color.YELLOW, Color.RED)


class Direction(Enum):
    """Line directions checked for four in a row."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_UP = auto()    # Bottom-left to top-right
    DIAGONAL_DOWN = auto()  # Top-left to bottom-right


# Direction vectors (row, col); row 0 is the top of the board
DIRECTION_VECTORS = {
    Direction.HORIZONTAL: (0, 1),
    Direction.VERTICAL: (1, 0),
    Direction.DIAGONAL_UP: (-1, 1),
    Direction.DIAGONAL_DOWN: (1, 1)
}


def is_valid_position(row: int, col: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        row: Row index
        col: Column index

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= row < ROWS and 0 <= col < COLS


def is_valid_column(col: int) -> bool:
    return 0 <= col < COLS


def render_board_ascii(grid: np.ndarray) -> str:
    """
    Render a grid as ASCII art, top row first, with column numbers underneath.

    Args:
        grid: ROWS x COLS array of Color values

    Returns:
        Multi-line string representation of the board
    """
    border = "+" + "-" * (COLS * 2 - 1) + "+"
    lines: List[str] = [border]
    for row in range(ROWS):
        cells = [Color(int(grid[row, col])).symbol() for col in range(COLS)]
        lines.append("|" + " ".join(cells) + "|")
    lines.append(border)
    lines.append(" " + " ".join(str(col) for col in range(COLS)) + " ")
    return "\n".join(lines)
