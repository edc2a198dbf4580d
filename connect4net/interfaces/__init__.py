"""
connect4net.interfaces - User interfaces for networked Connect Four
"""

# Don't import anything here to avoid circular imports
__all__ = []
