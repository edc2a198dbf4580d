"""
session.py - Turn synchronization between two peers

A PeerSession owns one board, one channel to the other peer and the local
turn flag. Each round is: drop our piece locally, send the move, wait for the
peer's move, drop it on our board, and take the turn back.

Network I/O runs on two single-thread executors, one for sends and one for
reads, so the caller is never blocked. Completed futures are posted to an
inbox; the board is only touched by the thread that calls pump() (or
wait_for_turn()), which is also where subscribers are notified.

The session is permissive: submit_local_move() does not refuse a call made
out of turn. Callers gate their input on can_move().
"""

import queue
import time
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import List, Optional

from connect4net.debug import debug
from connect4net.errors import ColumnFullError, SessionStateError, TransportError
from connect4net.game.board import Board
from connect4net.net.channel import Listener, SocketChannel
from connect4net.net.events import (BoardReset, MovePlaced, SessionEvent,
                                    Subscriber, TransportFailed)
from connect4net.net.message import UNKNOWN_ROW, MoveMessage
from connect4net.utils import Color


class Role(Enum):
    """Which side of the connection this peer is."""
    HOST = "host"
    JOIN = "join"

    @property
    def color(self) -> Color:
        return Color.YELLOW if self is Role.HOST else Color.RED

    @property
    def moves_first(self) -> bool:
        return self is Role.HOST


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    TERMINATED = "terminated"


class PeerSession:
    """
    One peer's half of a networked game.

    Lifecycle: DISCONNECTED -> CONNECTING (listen/join) -> CONNECTED ->
    TERMINATED (close). A failed round leaves the session CONNECTED but
    stalled until reset() or close().
    """

    def __init__(self, board: Optional[Board] = None, reply_timeout: Optional[float] = None):
        """
        Args:
            board: Board to play on; a fresh one is created if omitted
            reply_timeout: Optional per-read/write socket timeout in seconds.
                None waits for the peer indefinitely.
        """
        self.board = board if board is not None else Board()
        self.reply_timeout = reply_timeout
        self.last_error: Optional[Exception] = None

        self._role: Optional[Role] = None
        self._state = SessionState.DISCONNECTED
        self._channel: Optional[SocketChannel] = None
        self._listener: Optional[Listener] = None
        self._sender: Optional[ThreadPoolExecutor] = None
        self._reader: Optional[ThreadPoolExecutor] = None
        self._inbox: "queue.Queue[Future]" = queue.Queue()
        self._read_future: Optional[Future] = None
        self._replies_owed = 0
        self._subscribers: List[Subscriber] = []
        self._my_turn = False
        self._last_color: Optional[Color] = None
        self._stalled = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def role(self) -> Optional[Role]:
        return self._role

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def color(self) -> Optional[Color]:
        return self._role.color if self._role else None

    @property
    def peer_color(self) -> Optional[Color]:
        return self._role.color.other() if self._role else None

    @property
    def my_turn(self) -> bool:
        return self._my_turn

    @property
    def connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    @property
    def stalled(self) -> bool:
        return self._stalled

    @property
    def awaiting_reply(self) -> bool:
        return self._read_future is not None

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------
    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        self._subscribers.remove(callback)

    def _publish(self, event: SessionEvent) -> None:
        # A failing subscriber must not break the round it is observing
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                debug.error(f"Subscriber {callback!r} failed on {event}: {e!r}", "session")

    # ------------------------------------------------------------------
    # Connection setup
    # ------------------------------------------------------------------
    def listen(self, port: int, address: str = "") -> int:
        """
        Start hosting: bind and listen for one peer.

        Returns:
            The bound port (useful when port is 0)
        """
        self._require(SessionState.DISCONNECTED, "listen")
        self._state = SessionState.CONNECTING
        try:
            self._listener = Listener(address, port)
        except TransportError:
            self._state = SessionState.DISCONNECTED
            raise
        return self._listener.port

    def accept(self) -> None:
        """Block until the peer connects. The host moves first."""
        self._require(SessionState.CONNECTING, "accept")
        if self._listener is None:
            raise SessionStateError("accept() called before listen()")
        listener, self._listener = self._listener, None
        try:
            channel = listener.accept(self.reply_timeout)
        except TransportError:
            self._state = SessionState.DISCONNECTED
            raise
        self.attach(channel, Role.HOST)

    def host(self, port: int, address: str = "") -> None:
        """Listen on port and wait for exactly one peer."""
        self.listen(port, address)
        self.accept()

    def join(self, address: str, port: int) -> None:
        """
        Connect to a hosting peer.

        Returns as soon as the connection is up; the host's first move is
        read in the background.
        """
        self._require(SessionState.DISCONNECTED, "join")
        self._state = SessionState.CONNECTING
        try:
            channel = SocketChannel.connect(address, port, self.reply_timeout)
        except TransportError:
            self._state = SessionState.DISCONNECTED
            raise
        self.attach(channel, Role.JOIN)

    def attach(self, channel: SocketChannel, role: Role) -> None:
        """Adopt an already connected channel and start playing as role."""
        if self._state not in (SessionState.DISCONNECTED, SessionState.CONNECTING):
            raise SessionStateError(f"Cannot attach a channel while {self._state.value}")

        self._channel = channel
        self._role = role
        self._sender = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{role.value}-send")
        self._reader = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{role.value}-recv")
        self._state = SessionState.CONNECTED
        self._my_turn = role.moves_first
        debug.info(f"Connected as {role.value} playing {self.color}", "session")

        if not role.moves_first:
            self._replies_owed = 1
            self._await_reply()

    # ------------------------------------------------------------------
    # Turn queries
    # ------------------------------------------------------------------
    def can_move(self) -> bool:
        """True when it is our turn on a live connection and nobody has won."""
        return self._my_turn and self.connected and not self.is_game_over()

    def is_game_over(self) -> bool:
        """Whether the color that moved last has four in a row."""
        if self._last_color is None:
            return False
        return self.board.is_win(self._last_color)

    def is_draw(self) -> bool:
        return self.board.is_draw()

    def winner(self) -> Optional[Color]:
        return self._last_color if self.is_game_over() else None

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def submit_local_move(self, column: int) -> Future:
        """
        Play our color in column and send the move to the peer.

        Does not check whose turn it is; see can_move().

        Returns:
            Future resolving to the peer's raw reply message

        Raises:
            ColumnFullError: column is full; nothing was sent and the turn
                is unchanged
            SessionStateError: the session is not connected
        """
        self._require(SessionState.CONNECTED, "submit a move")
        color = self.color
        row = self.board.drop(column, color)
        message = MoveMessage(row=row, column=column, color=color)

        self._last_color = color
        self._my_turn = False
        debug.info(f"Local move: {message}", "session")
        reply = self.dispatch_and_await_reply(message)
        self._publish(MovePlaced(move=message, local=True))
        if self.is_game_over():
            debug.info(f"{color} wins", "session")
        return reply

    def submit_computer_move(self, source) -> Future:
        """Ask a move source for a column and play it."""
        column = source.choose_column(self.board.copy())
        debug.debug(f"Move source chose column {column}", "session")
        return self.submit_local_move(column)

    def dispatch_and_await_reply(self, message: MoveMessage) -> Future:
        """
        Send message to the peer and make sure a read for the reply is pending.

        Neither step blocks the caller. The reply is applied to the board the
        next time pump() runs.

        Returns:
            Future of the read that will carry the peer's reply
        """
        self._require(SessionState.CONNECTED, "send a move")
        send_future = self._sender.submit(self._channel.send, message)
        send_future.add_done_callback(self._inbox.put)
        self._replies_owed += 1
        return self._await_reply()

    def _await_reply(self) -> Future:
        # A read that is still pending from before a reset is reused.
        if self._read_future is None:
            self._read_future = self._reader.submit(self._channel.receive)
            self._read_future.add_done_callback(self._inbox.put)
        return self._read_future

    # ------------------------------------------------------------------
    # Completion handling (caller's thread)
    # ------------------------------------------------------------------
    def pump(self, timeout: Optional[float] = 0.0) -> int:
        """
        Apply finished network work to the board.

        Args:
            timeout: Seconds to wait for the first completion. 0 only drains
                what is already there; None waits indefinitely.

        Returns:
            Number of peer moves applied
        """
        applied = 0
        block = timeout is None or timeout > 0
        while True:
            try:
                future = self._inbox.get(block=block, timeout=timeout if block else None)
            except queue.Empty:
                return applied
            block = False
            if self._complete(future):
                applied += 1

    def wait_for_turn(self, timeout: Optional[float] = None) -> bool:
        """
        Pump until it is our turn.

        Returns False without waiting further if the game is over, the
        session stalled or closed, no reply is pending, or timeout expires.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._my_turn:
            if not self.connected or self._stalled or self.is_game_over():
                return False
            if self._read_future is None and self._inbox.empty():
                return False
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
            self.pump(remaining)
        return True

    def _complete(self, future: Future) -> bool:
        is_read = future is self._read_future
        if is_read:
            self._read_future = None

        if not self.connected:
            debug.debug("Ignoring network completion after close", "session")
            return False
        if future.cancelled():
            return False

        error = future.exception()
        if error is not None:
            self._fail(error)
            return False
        if not is_read:
            return False

        message = future.result()
        if self._replies_owed == 0:
            debug.warning(f"Discarding unexpected move {message}", "session")
            return False
        self._replies_owed -= 1

        try:
            self._apply_remote_move(message)
        except TransportError as e:
            self._fail(e)
            return False

        if self._replies_owed:
            self._await_reply()
        return True

    def _apply_remote_move(self, message: MoveMessage) -> None:
        if message.color is not self.peer_color:
            raise TransportError(
                f"Peer moved with {message.color}, expected {self.peer_color}")
        try:
            row = self.board.drop(message.column, message.color)
        except ColumnFullError as e:
            raise TransportError(
                f"Peer played into full column {message.column}; boards have diverged") from e

        if message.row not in (row, UNKNOWN_ROW):
            debug.warning(f"Peer row hint {message.row} differs from landing row {row}", "session")

        placed = MoveMessage(row=row, column=message.column, color=message.color)
        self._last_color = message.color
        self._my_turn = True
        debug.info(f"Peer move: {placed}", "session")
        self._publish(MovePlaced(move=placed, local=False))
        if self.is_game_over():
            debug.info(f"{message.color} wins", "session")

    def _fail(self, error: Exception) -> None:
        self.last_error = error
        self._stalled = True
        debug.error(f"Round failed, session stalled: {error}", "session")
        self._publish(TransportFailed(error=error))

    # ------------------------------------------------------------------
    # Reset and teardown
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """
        Start a new game on the same connection.

        Moves that arrived but were not yet applied belong to the old game
        and are dropped.
        """
        self._discard_completed()
        self.board.reset()
        self._last_color = None
        self._stalled = False
        self.last_error = None
        self._my_turn = bool(self._role and self._role.moves_first)
        self._replies_owed = 0
        debug.info("New game", "session")
        self._publish(BoardReset())

        if self.connected and not self._role.moves_first:
            self._replies_owed = 1
            self._await_reply()

    def _discard_completed(self) -> None:
        while True:
            try:
                future = self._inbox.get_nowait()
            except queue.Empty:
                return
            if future is self._read_future:
                self._read_future = None
                if not future.cancelled() and future.exception() is None:
                    debug.warning(f"Dropping move from previous game: {future.result()}", "session")

    def close(self) -> None:
        """Tear the connection down. The session cannot be reused."""
        if self._state is SessionState.TERMINATED:
            return
        if self._listener is not None:
            self._listener.close()
            self._listener = None
        self._state = SessionState.TERMINATED
        self._my_turn = False
        if self._channel is not None:
            self._channel.close()
        for executor in (self._sender, self._reader):
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)
        debug.info("Session closed", "session")

    def __enter__(self) -> "PeerSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require(self, state: SessionState, action: str) -> None:
        if self._state is not state:
            raise SessionStateError(f"Cannot {action} while {self._state.value}")
