"""
message.py - Wire format for a single move

One MoveMessage is exchanged per round. It is encoded as three big-endian
signed 32-bit integers: row, column and color. There is no envelope, length
prefix or version field; the frame size is fixed.
"""

import struct
from dataclasses import dataclass

from connect4net.errors import WireFormatError
from connect4net.utils import COLS, MESSAGE_FORMAT, Color, PIECE_COLORS, is_valid_column

_CODEC = struct.Struct(MESSAGE_FORMAT)

# Size of one encoded message in bytes
MESSAGE_SIZE = _CODEC.size

# Row sent when the sender does not know or care where the piece landed
UNKNOWN_ROW = -1


@dataclass(frozen=True)
class MoveMessage:
    """A move: where a piece of a given color was dropped.

    ``row`` is informational. Receivers recompute it from their own board
    with the gravity rule and only trust ``column`` and ``color``.
    """
    row: int
    column: int
    color: Color

    def encode(self) -> bytes:
        return _CODEC.pack(self.row, self.column, self.color.value)

    @classmethod
    def decode(cls, payload: bytes) -> "MoveMessage":
        """
        Decode exactly one message.

        Raises:
            WireFormatError: if the payload has the wrong size or carries a
                column or color that cannot be a move
        """
        if len(payload) != MESSAGE_SIZE:
            raise WireFormatError(
                f"Expected {MESSAGE_SIZE} bytes, got {len(payload)}")

        row, column, color_value = _CODEC.unpack(payload)
        try:
            color = Color(color_value)
        except ValueError:
            raise WireFormatError(f"Unknown color value {color_value}") from None
        if color not in PIECE_COLORS:
            raise WireFormatError("Move carries the empty color")
        if not is_valid_column(column):
            raise WireFormatError(f"Column {column} out of range 0..{COLS - 1}")

        return cls(row=row, column=column, color=color)

    def __str__(self) -> str:
        return f"{self.color} -> column {self.column} (row {self.row})"
