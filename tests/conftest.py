"""
Fixtures shared by the board, channel and session tests.

Sessions talk over real sockets: either a host/join pair on a loopback
ephemeral port, or one session wired to a raw socket the test drives by hand.
"""

import socket
from typing import Callable, Generator, List, Tuple

import pytest

from connect4net.game.board import Board
from connect4net.net.channel import SocketChannel
from connect4net.net.events import SessionEvent
from connect4net.net.message import MESSAGE_SIZE, MoveMessage
from connect4net.net.session import PeerSession, Role

# Upper bound for any wait on the other peer in tests
WAIT = 5.0


@pytest.fixture
def board() -> Board:
    return Board()


@pytest.fixture
def connected_pair() -> Generator[Tuple[PeerSession, PeerSession], None, None]:
    """A host and a join session connected over 127.0.0.1."""
    host = PeerSession()
    join = PeerSession()
    port = host.listen(0, "127.0.0.1")
    join.join("127.0.0.1", port)
    host.accept()
    try:
        yield host, join
    finally:
        join.close()
        host.close()


class RawPeer:
    """The far end of a socketpair, speaking the wire format by hand."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self.sock.settimeout(WAIT)

    def read_move(self) -> MoveMessage:
        data = b""
        while len(data) < MESSAGE_SIZE:
            chunk = self.sock.recv(MESSAGE_SIZE - len(data))
            assert chunk, "session closed the connection"
            data += chunk
        return MoveMessage.decode(data)

    def send_move(self, message: MoveMessage) -> None:
        self.sock.sendall(message.encode())

    def send_raw(self, payload: bytes) -> None:
        self.sock.sendall(payload)

    def nothing_pending(self, wait: float = 0.3) -> bool:
        self.sock.settimeout(wait)
        try:
            return self.sock.recv(1) == b""
        except socket.timeout:
            return True
        finally:
            self.sock.settimeout(WAIT)

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def attached_session() -> Generator[Callable[..., Tuple[PeerSession, RawPeer]], None, None]:
    """Call with a Role (and optional channel timeout) to get a session and its raw peer."""
    created: List[Tuple[PeerSession, RawPeer]] = []

    def _attach(role: Role = Role.HOST, timeout=None) -> Tuple[PeerSession, RawPeer]:
        local, remote = socket.socketpair()
        session = PeerSession()
        session.attach(SocketChannel(local, timeout), role)
        peer = RawPeer(remote)
        created.append((session, peer))
        return session, peer

    yield _attach

    for session, peer in created:
        session.close()
        peer.close()


@pytest.fixture
def recorder() -> Callable[[PeerSession], List[SessionEvent]]:
    """Subscribe a list to a session and return it."""

    def _record(session: PeerSession) -> List[SessionEvent]:
        events: List[SessionEvent] = []
        session.subscribe(events.append)
        return events

    return _record
