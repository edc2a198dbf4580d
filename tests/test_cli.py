"""Tests for connect4net/interfaces/cli.py"""

import pytest

from connect4net.config import SessionConfig
from connect4net.interfaces import cli
from connect4net.net.events import BoardReset, MovePlaced, TransportFailed
from connect4net.net.message import MoveMessage
from connect4net.errors import TransportError
from connect4net.utils import Color


@pytest.fixture
def front_end() -> cli.NetworkCLI:
    return cli.NetworkCLI(SessionConfig(role="join"))


@pytest.mark.parametrize("typed, expected", [
    ("3", 3),
    (" 0 ", 0),
    ("q", cli.QUIT),
    ("R", cli.RESET),
    ("7", None),
    ("-1", None),
    ("left", None),
])
def test_human_input(monkeypatch, front_end, typed, expected):
    monkeypatch.setattr("builtins.input", lambda prompt="": typed)
    assert front_end.get_human_move() == expected


def test_end_of_input_quits(monkeypatch, front_end):
    def closed(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)
    assert front_end.get_human_move() == cli.QUIT


def test_events_are_rendered(front_end, capsys):
    front_end.session.board.drop(2, Color.YELLOW)
    front_end.on_event(MovePlaced(move=MoveMessage(row=5, column=2, color=Color.YELLOW), local=False))
    front_end.on_event(BoardReset())
    front_end.on_event(TransportFailed(error=TransportError("Peer closed the connection")))

    out = capsys.readouterr().out
    assert "Opponent played column 2" in out
    assert "|. . Y . . . .|" in out
    assert "New game" in out
    assert "Connection problem: Peer closed the connection" in out


def test_main_without_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "host" in capsys.readouterr().out


def test_main_reports_refused_connection(monkeypatch, capsys):
    def refuse(self, address, port):
        raise TransportError(f"Could not connect to {address}:{port}")

    monkeypatch.setattr(cli.PeerSession, "join", refuse)
    assert cli.main(["join", "--port", "4999", "--debug-level", "error"]) == 1
    assert "Could not connect" in capsys.readouterr().out
