"""
connect4net.game - Board engine and turn coordination

This package contains the board representation, the session that reports
moves to the caller, and the coordinator that keeps two sides in step.
"""

from connect4net.game.board import Board, Move, REJECTED_MOVE
from connect4net.game.session import GameListener, GameSession
from connect4net.game.coordinator import TurnCoordinator, TurnState, new_game

__all__ = ['Board', 'Move', 'REJECTED_MOVE', 'GameListener', 'GameSession',
           'TurnCoordinator', 'TurnState', 'new_game']
