"""Tests for GameSession notifications."""

from connect4net.game.board import Move, REJECTED_MOVE
from connect4net.game.session import GameListener, GameSession
from connect4net.utils import ROWS, Player


def test_move_is_reported_to_listener(listener):
    session = GameSession(listener)
    move = session.apply_local_move(4)
    assert move == Move(0, 4, Player.ONE)
    assert listener.moves == [move]
    assert listener.rejections == []


def test_full_column_is_reported_as_rejection(listener):
    session = GameSession(listener)
    for _ in range(ROWS):
        session.apply_local_move(0)
    assert session.apply_local_move(0) is REJECTED_MOVE
    assert listener.rejections == [REJECTED_MOVE]
    assert len(listener.moves) == ROWS


def test_current_player_follows_board():
    session = GameSession()
    assert session.current_player == Player.ONE
    session.apply_local_move(1)
    assert session.current_player == Player.TWO


def test_is_over_delegates_to_board():
    session = GameSession(GameListener())
    for col in [0, 1, 0, 1, 0, 1]:
        session.apply_local_move(col)
    assert not session.is_over()
    session.apply_local_move(0)
    assert session.is_over()
