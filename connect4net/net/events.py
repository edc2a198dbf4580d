"""
events.py - Notifications published by a PeerSession to its subscribers

Subscribers (a renderer, a log, a test) receive one of these per change, on
the thread that drives the session: during submit_local_move(), reset() or
pump(). They never run on the network worker.
"""

from dataclasses import dataclass
from typing import Callable, Union

from connect4net.net.message import MoveMessage


@dataclass(frozen=True)
class MovePlaced:
    """A piece was placed on the local board."""
    move: MoveMessage
    local: bool  # True for our own move, False for the peer's


@dataclass(frozen=True)
class BoardReset:
    """The board was cleared for a new game."""


@dataclass(frozen=True)
class TransportFailed:
    """A round failed; the session is stalled until reset() or close()."""
    error: Exception


SessionEvent = Union[MovePlaced, BoardReset, TransportFailed]
Subscriber = Callable[[SessionEvent], None]
