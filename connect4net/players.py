"""
players.py - Move sources that pick a column for the local side

A move source only has to return a legal column for the board it is shown.
The session applies and sends the move.
"""

import random
from typing import Optional, Protocol

from connect4net.debug import debug
from connect4net.errors import ColumnFullError
from connect4net.game.board import Board
from connect4net.utils import COLS


class MoveSource(Protocol):
    def choose_column(self, board: Board) -> int:
        ...


class RandomMoveSource:
    """
    Pick a random column; if it is full, walk right (wrapping) to the next
    column with room.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_column(self, board: Board) -> int:
        if board.is_full():
            raise ColumnFullError()

        column = self.rng.randrange(COLS)
        while board.is_column_full(column):
            column = (column + 1) % COLS
        debug.trace(f"Random source picked column {column}", "players")
        return column


class FirstFreeMoveSource:
    """Always play the leftmost column with room."""

    def choose_column(self, board: Board) -> int:
        columns = board.valid_columns()
        if not columns:
            raise ColumnFullError()
        return columns[0]
