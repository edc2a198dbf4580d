"""
connect4net.net - Wire format, socket channel and peer session

The session keeps two boards in sync by exchanging one MoveMessage per
turn over a single TCP connection.
"""

from connect4net.net.message import MoveMessage
from connect4net.net.session import PeerSession, Role, SessionState

__all__ = ['MoveMessage', 'PeerSession', 'Role', 'SessionState']
