"""
connect4net.game - Board representation for Connect Four

This package contains the grid, the gravity rule and win detection.
It has no knowledge of the network.
"""

from connect4net.game.board import Board

__all__ = ['Board']
