"""
channel.py - Framed duplex channel carrying MoveMessages over a socket

Both peers follow a strict send-then-receive discipline, so the channel has
no locking: at most one read and one write are ever in progress.
"""

import socket
from typing import Optional, Tuple

from connect4net.debug import debug
from connect4net.errors import TransportError
from connect4net.net.message import MESSAGE_SIZE, MoveMessage


class SocketChannel:
    """Sends and receives fixed-size move frames on a connected stream socket."""

    def __init__(self, sock: socket.socket, timeout: Optional[float] = None):
        """
        Args:
            sock: A connected stream socket; the channel takes ownership
            timeout: Seconds to wait on any single read or write. None blocks
                forever. Setting one is a hardening extension: a peer that
                never replies then fails the round instead of stalling it.
        """
        self._sock = sock
        self._sock.settimeout(timeout)
        self._closed = False
        try:
            self.peer_name = sock.getpeername()
        except OSError:
            self.peer_name = None

    @classmethod
    def connect(cls, address: str, port: int, timeout: Optional[float] = None) -> "SocketChannel":
        """Open a TCP connection to a hosting peer."""
        debug.info(f"Connecting to {address}:{port}", "channel")
        try:
            sock = socket.create_connection((address, port))
        except OSError as e:
            raise TransportError(f"Could not connect to {address}:{port}: {e}") from e
        return cls(sock, timeout)

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, message: MoveMessage) -> None:
        debug.trace(f"Sending {message}", "channel")
        try:
            self._sock.sendall(message.encode())
        except OSError as e:
            raise TransportError(f"Send failed: {e}") from e

    def receive(self) -> MoveMessage:
        """
        Block until one complete message has arrived.

        Raises:
            TransportError: on timeout, reset, or the peer closing the link
            WireFormatError: if the frame does not decode to a move
        """
        payload = self._recv_exact(MESSAGE_SIZE)
        message = MoveMessage.decode(payload)
        debug.trace(f"Received {message}", "channel")
        return message

    def _recv_exact(self, size: int) -> bytes:
        chunks = []
        remaining = size
        while remaining:
            try:
                chunk = self._sock.recv(remaining)
            except socket.timeout as e:
                raise TransportError("Timed out waiting for the peer") from e
            except OSError as e:
                raise TransportError(f"Receive failed: {e}") from e
            if not chunk:
                received = size - remaining
                raise TransportError(
                    f"Peer closed the connection ({received} of {size} bytes received)")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        """Shut the socket down, waking any blocked reader."""
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected
            pass
        self._sock.close()
        debug.debug("Channel closed", "channel")


class Listener:
    """Listening socket that hands out exactly one connection."""

    def __init__(self, address: str = "", port: int = 0):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            self._sock.bind((address, port))
            self._sock.listen(1)
        except OSError as e:
            self._sock.close()
            raise TransportError(f"Could not listen on {address or '*'}:{port}: {e}") from e
        self.address: Tuple[str, int] = self._sock.getsockname()[:2]
        debug.info(f"Listening on {self.address[0]}:{self.address[1]}", "channel")

    @property
    def port(self) -> int:
        return self.address[1]

    def accept(self, timeout: Optional[float] = None) -> SocketChannel:
        """Wait for one peer, then stop listening."""
        try:
            sock, peer = self._sock.accept()
        except OSError as e:
            raise TransportError(f"Accept failed: {e}") from e
        finally:
            self.close()
        debug.info(f"Accepted peer {peer[0]}:{peer[1]}", "channel")
        return SocketChannel(sock, timeout)

    def close(self) -> None:
        self._sock.close()
