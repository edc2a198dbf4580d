"""
errors.py - Exception hierarchy for networked Connect Four
"""

from typing import Optional


class Connect4Error(Exception):
    """Base class for all errors raised by connect4net."""


class ColumnFullError(Connect4Error):
    """A piece was dropped into a column with no empty cell left."""

    def __init__(self, column: Optional[int] = None):
        if column is None:
            message = "Board is full, no column can take a piece"
        else:
            message = f"Column {column} is full, pick somewhere else"
        super().__init__(message)
        self.column = column


class TransportError(Connect4Error):
    """The link to the peer failed: connect, read, write or protocol."""


class WireFormatError(TransportError):
    """A received payload could not be decoded into a move."""


class SessionStateError(Connect4Error):
    """An operation was attempted in a session state that does not allow it."""
