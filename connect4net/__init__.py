"""
connect4net - Connect Four over a network connection

This package provides the Connect Four board engine, a turn-synchronization
protocol for playing between two processes over TCP, and a random-move agent
that can stand in for either player.
"""

__version__ = '0.1.0'

from connect4net.game.board import Board, Move, REJECTED_MOVE
from connect4net.game.coordinator import TurnCoordinator, TurnState, new_game
from connect4net.game.session import GameListener, GameSession
from connect4net.utils import Player

__all__ = ['Board', 'Move', 'REJECTED_MOVE', 'GameListener', 'GameSession',
           'TurnCoordinator', 'TurnState', 'new_game', 'Player']
