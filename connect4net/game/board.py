"""
board.py - Board representation and win detection for Connect Four

This module implements the Board class which owns the 7x6 grid, applies the
gravity rule when a piece is dropped and scans the whole grid for four in a
row. Row ROWS-1 is the floor of the board; row 0 is the top.
"""

import numpy as np
from typing import List, Tuple

from connect4net.debug import debug
from connect4net.errors import ColumnFullError
from connect4net.utils import (ROWS, COLS, CONNECT_N, Color, PIECE_COLORS,
                               DIRECTION_VECTORS, is_valid_column,
                               is_valid_position, render_board_ascii)


class Board:
    """
    Represents a Connect Four game board.

    The board is only mutated through drop() and reset(); everything else is
    a query. Each peer keeps its own Board and never shares it.
    """

    def __init__(self):
        """Initialize an empty Connect Four board."""
        self.grid = np.zeros((ROWS, COLS), dtype=np.int8)

    def reset(self) -> None:
        """Reset every cell to empty."""
        debug.debug("Resetting board", "board")
        self.grid.fill(Color.EMPTY.value)

    def copy(self) -> 'Board':
        """
        Create a deep copy of the current board.

        Returns:
            A new Board instance with the same cells
        """
        new_board = Board()
        new_board.grid = self.grid.copy()
        return new_board

    def cell(self, row: int, column: int) -> Color:
        """Color of the piece at (row, column), EMPTY if there is none."""
        return Color(int(self.grid[row, column]))

    def column_height(self, column: int) -> int:
        """Number of pieces currently stacked in column."""
        self._check_column(column)
        return int(np.count_nonzero(self.grid[:, column]))

    def is_column_full(self, column: int) -> bool:
        """True when the top cell of column is taken."""
        self._check_column(column)
        return self.grid[0, column] != Color.EMPTY.value

    def valid_columns(self) -> List[int]:
        """Columns that can still accept a piece, left to right."""
        return [col for col in range(COLS) if self.grid[0, col] == Color.EMPTY.value]

    def is_full(self) -> bool:
        """True when no column can take another piece."""
        return not self.valid_columns()

    def move_count(self) -> int:
        """Number of pieces on the board."""
        return int(np.count_nonzero(self.grid))

    def drop(self, column: int, color: Color) -> int:
        """
        Drop a piece of the given color into column.

        The piece lands in the lowest empty row. Nothing is written when the
        column is full.

        Args:
            column: The column to place a piece (0-indexed)
            color: Color of the piece, never Color.EMPTY

        Returns:
            The row the piece landed in

        Raises:
            ColumnFullError: if the column has no empty cell
            ValueError: if column is out of range or color is EMPTY
        """
        self._check_column(column)
        if color not in PIECE_COLORS:
            raise ValueError(f"Cannot drop a piece of color {color!r}")

        for row in range(ROWS - 1, -1, -1):
            if self.grid[row, column] == Color.EMPTY.value:
                self.grid[row, column] = color.value
                debug.trace(f"Placed {color} at ({row}, {column})", "board")
                return row

        debug.debug(f"Rejected {color} drop: column {column} is full", "board")
        raise ColumnFullError(column)

    def winning_line(self, color: Color) -> List[Tuple[int, int]]:
        """
        Find a line of CONNECT_N pieces of color anywhere on the board.

        Every cell is tried as the start of a line in each direction, so the
        result does not depend on which move completed the line.

        Args:
            color: The color to look for, never Color.EMPTY

        Returns:
            List of (row, col) positions forming the line, or empty list
        """
        if color not in PIECE_COLORS:
            raise ValueError(f"Cannot check a win for color {color!r}")

        value = color.value
        for row in range(ROWS):
            for col in range(COLS):
                if self.grid[row, col] != value:
                    continue
                for dr, dc in DIRECTION_VECTORS.values():
                    end_row = row + dr * (CONNECT_N - 1)
                    end_col = col + dc * (CONNECT_N - 1)
                    if not is_valid_position(end_row, end_col):
                        continue
                    positions = [(row + dr * i, col + dc * i) for i in range(CONNECT_N)]
                    if all(self.grid[r, c] == value for r, c in positions):
                        return positions
        return []

    def is_win(self, color: Color) -> bool:
        """Check whether color has four in a row anywhere on the board."""
        return bool(self.winning_line(color))

    def is_draw(self) -> bool:
        """Board is full and neither color has a line."""
        return self.is_full() and not any(self.is_win(c) for c in PIECE_COLORS)

    def get_state(self) -> np.ndarray:
        """
        Get the current board state as a numpy array.

        Returns:
            Copy of the ROWS x COLS grid of color values
        """
        return self.grid.copy()

    def render(self) -> str:
        """ASCII picture of the board, top row first."""
        return render_board_ascii(self.grid)

    def __str__(self) -> str:
        return self.render()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    @staticmethod
    def _check_column(column: int) -> None:
        if not is_valid_column(column):
            raise ValueError(f"Column {column} out of range 0..{COLS - 1}")
