"""
connect4net.interfaces - Front ends for the engine

The CLI is a thin caller: it forwards column choices and prints the
notifications it receives.
"""

# Don't import anything here to avoid circular imports
__all__ = []
