"""Unit tests for connect4net/players.py"""

import random

import pytest

from connect4net.errors import ColumnFullError
from connect4net.game.board import Board
from connect4net.players import FirstFreeMoveSource, RandomMoveSource
from connect4net.utils import COLS, ROWS, Color


def fill_column(board: Board, column: int) -> None:
    for i in range(ROWS):
        board.drop(column, Color.RED if i % 2 else Color.YELLOW)


def test_random_source_returns_a_legal_column():
    source = RandomMoveSource(random.Random(7))
    board = Board()
    for _ in range(50):
        assert 0 <= source.choose_column(board) < COLS


def test_random_source_walks_past_full_columns():
    board = Board()
    for column in range(COLS):
        if column != 4:
            fill_column(board, column)
    source = RandomMoveSource(random.Random(1))
    assert {source.choose_column(board) for _ in range(20)} == {4}


def test_random_source_wraps_around_to_the_left():
    board = Board()
    for column in range(1, COLS):
        fill_column(board, column)

    class Rigged(random.Random):
        def randrange(self, *args, **kwargs):
            return COLS - 1

    assert RandomMoveSource(Rigged()).choose_column(board) == 0


def test_sources_refuse_a_full_board():
    board = Board()
    for column in range(COLS):
        fill_column(board, column)
    with pytest.raises(ColumnFullError, match="Board is full") as excinfo:
        RandomMoveSource().choose_column(board)
    assert excinfo.value.column is None
    with pytest.raises(ColumnFullError, match="Board is full"):
        FirstFreeMoveSource().choose_column(board)


def test_first_free_source_prefers_the_leftmost_column():
    board = Board()
    fill_column(board, 0)
    assert FirstFreeMoveSource().choose_column(board) == 1
