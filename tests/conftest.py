"""
Pytest configuration for connect4net tests.

Provides a listener that records every notification and helpers for running
the two sides of a networked game on background threads.
"""

import threading

import pytest

from connect4net.game.session import GameListener


class RecordingListener(GameListener):
    def __init__(self):
        self.moves = []
        self.rejections = []
        self.results = []
        self.game_over = threading.Event()

    def on_move(self, move):
        self.moves.append(move)

    def on_rejected(self, move):
        self.rejections.append(move)

    def on_game_over(self, won):
        self.results.append(won)
        self.game_over.set()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def make_listener():
    return RecordingListener


@pytest.fixture
def run_in_thread():
    """Start targets on daemon threads and join them at teardown."""
    threads = []

    def start(target, *args):
        errors = []

        def wrapper():
            try:
                target(*args)
            except Exception as exc:  # surfaced to the test through `errors`
                errors.append(exc)

        thread = threading.Thread(target=wrapper, daemon=True)
        thread.errors = errors
        thread.start()
        threads.append(thread)
        return thread

    yield start

    for thread in threads:
        thread.join(timeout=5)
