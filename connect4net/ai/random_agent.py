"""
random_agent.py - Uniform random column picker

The agent draws columns from a gymnasium Discrete action space that it owns,
so two agents never share a random stream and a seed makes a game
reproducible. It does not look at the board: full columns are simply drawn
again by the caller's retry loop.
"""

from typing import Optional

from gymnasium import spaces

from connect4net.debug import debug
from connect4net.utils import COLS


class RandomAgent:
    """Picks columns 0..cols-1 uniformly at random."""

    def __init__(self, seed: Optional[int] = None, cols: int = COLS):
        """
        Args:
            seed: Seed for the agent's own random stream (None for entropy)
            cols: Number of columns to choose from
        """
        self.seed = seed
        self.action_space = spaces.Discrete(cols, seed=seed)
        debug.debug(f"RandomAgent created with seed {seed}", "agent")

    def choose_column(self) -> int:
        column = int(self.action_space.sample())
        debug.trace(f"Agent picked column {column}", "agent")
        return column
