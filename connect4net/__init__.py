"""
connect4net - Two-player Connect Four over a direct network link

This package provides the board and win detection, the wire format for
moves, and the peer session that keeps two boards in sync by exchanging
one move per turn over a TCP connection.
"""

# Version number
__version__ = '0.2.0'
