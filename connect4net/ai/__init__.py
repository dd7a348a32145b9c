"""
connect4net.ai - Computer players

Only a uniform random column picker is provided.
"""

from connect4net.ai.random_agent import RandomAgent

__all__ = ['RandomAgent']
