"""
connect4.interfaces - User interfaces for Connect Four

Front ends that drive a ConnectFourGame session. They own everything
presentational: colours, input parsing and messages.
"""

# Don't import anything here to avoid circular imports
__all__ = []
