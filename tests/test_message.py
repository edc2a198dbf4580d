"""Unit tests for connect4net/net/message.py and connect4net/net/channel.py"""

import socket
import struct

import pytest

from connect4net.errors import TransportError, WireFormatError
from connect4net.net.channel import Listener, SocketChannel
from connect4net.net.message import MESSAGE_SIZE, UNKNOWN_ROW, MoveMessage
from connect4net.utils import COLS, Color


def test_encoding_is_three_big_endian_int32():
    message = MoveMessage(row=5, column=3, color=Color.YELLOW)
    assert MESSAGE_SIZE == 12
    assert message.encode() == struct.pack("!iii", 5, 3, 1)


@pytest.mark.parametrize("column", [0, COLS - 1])
@pytest.mark.parametrize("color", [Color.YELLOW, Color.RED])
def test_decode_recovers_column_and_color(column, color):
    decoded = MoveMessage.decode(MoveMessage(row=2, column=column, color=color).encode())
    assert (decoded.column, decoded.color) == (column, color)


def test_unknown_row_hint_is_accepted():
    payload = struct.pack("!iii", UNKNOWN_ROW, 4, 2)
    assert MoveMessage.decode(payload) == MoveMessage(row=-1, column=4, color=Color.RED)


@pytest.mark.parametrize("payload", [b"", b"\x00" * 11, b"\x00" * 13])
def test_wrong_size_is_rejected(payload):
    with pytest.raises(WireFormatError):
        MoveMessage.decode(payload)


@pytest.mark.parametrize("color_value", [0, 3, -1])
def test_non_piece_color_is_rejected(color_value):
    with pytest.raises(WireFormatError):
        MoveMessage.decode(struct.pack("!iii", 5, 0, color_value))


@pytest.mark.parametrize("column", [-1, COLS])
def test_column_out_of_range_is_rejected(column):
    with pytest.raises(WireFormatError):
        MoveMessage.decode(struct.pack("!iii", 5, column, 1))


def test_decode_errors_are_transport_errors():
    assert issubclass(WireFormatError, TransportError)


def test_messages_are_immutable():
    message = MoveMessage(row=0, column=0, color=Color.RED)
    with pytest.raises(AttributeError):
        message.column = 1


def test_channel_reassembles_split_frames():
    local, remote = socket.socketpair()
    channel = SocketChannel(local)
    try:
        payload = MoveMessage(row=4, column=6, color=Color.RED).encode()
        remote.sendall(payload[:5])
        remote.sendall(payload[5:])
        assert channel.receive() == MoveMessage(row=4, column=6, color=Color.RED)
    finally:
        channel.close()
        remote.close()


def test_channel_reports_peer_hangup_mid_frame():
    local, remote = socket.socketpair()
    channel = SocketChannel(local)
    remote.sendall(b"\x00" * 7)
    remote.close()
    with pytest.raises(TransportError, match="closed"):
        channel.receive()
    channel.close()


def test_channel_timeout_is_a_transport_error():
    local, remote = socket.socketpair()
    channel = SocketChannel(local, timeout=0.1)
    try:
        with pytest.raises(TransportError, match="Timed out"):
            channel.receive()
    finally:
        channel.close()
        remote.close()


def test_listener_hands_out_one_connection():
    listener = Listener("127.0.0.1", 0)
    client = SocketChannel.connect("127.0.0.1", listener.port)
    server = listener.accept()
    try:
        client.send(MoveMessage(row=5, column=1, color=Color.YELLOW))
        assert server.receive().column == 1
        # The listening socket is gone after the first accept
        with pytest.raises(TransportError):
            SocketChannel.connect("127.0.0.1", listener.port)
    finally:
        client.close()
        server.close()


def test_connect_refused_is_a_transport_error():
    listener = Listener("127.0.0.1", 0)
    port = listener.port
    listener.close()
    with pytest.raises(TransportError):
        SocketChannel.connect("127.0.0.1", port)
