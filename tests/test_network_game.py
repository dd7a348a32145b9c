"""Two coordinators playing each other over loopback TCP."""

import socket

import numpy as np
import pytest

from connect4net.game.board import REJECTED_MOVE
from connect4net.game.coordinator import TurnState, new_game
from connect4net.network.errors import ConnectionFailure, PeerReadFailure
from connect4net.utils import ROWS, Player

TIMEOUT = 10


@pytest.fixture
def connect(run_in_thread, make_listener):
    """Pair a server and a client coordinator; closes both afterwards."""
    games = []

    def pair(server_seed=None, client_seed=None, client_is_human=True):
        server_listener, client_listener = make_listener(), make_listener()
        server = new_game(server_listener, seed=server_seed)
        client = new_game(client_listener, seed=client_seed)
        games.extend([server, client])

        accept = run_in_thread(server.start_server, 0, "127.0.0.1")
        assert server.link.listening.wait(TIMEOUT)
        client.start_client("127.0.0.1", server.link.bound_port, as_human=client_is_human)
        accept.join(TIMEOUT)
        assert not accept.errors
        assert server.connected and client.connected
        return server, client, server_listener, client_listener

    yield pair

    for game in games:
        game.close()


class TestAgentGame:
    @pytest.mark.parametrize("seeds", [(1, 2), (3, 4), (5, 6)])
    def test_agents_converge(self, connect, run_in_thread, seeds):
        server, client, server_events, client_events = connect(*seeds, client_is_human=False)

        server_thread = run_in_thread(server.start_agent_turn_loop)
        client_thread = run_in_thread(client.start_agent_receive_loop)
        server_thread.join(TIMEOUT)
        client_thread.join(TIMEOUT)
        assert not server_thread.errors and not client_thread.errors

        assert server.state == client.state == TurnState.FINISHED
        assert np.array_equal(server.board.get_state(), client.board.get_state())
        assert server.board.moves_made == client.board.moves_made

        # the side that sent the final move keeps last_move_was_mine
        last_sender_is_server = server.board.moves_made[-1].player == Player.ONE
        assert server.is_loser() == last_sender_is_server
        assert client.is_loser() != last_sender_is_server
        assert server_events.results == [not server.is_loser()]
        assert client_events.results == [not client.is_loser()]


class TestHumanGame:
    def test_moves_travel_both_ways(self, connect):
        server, client, server_events, client_events = connect()
        assert server.local_turn and not client.local_turn

        server.human_move(3)
        assert client.wait_for_local_turn(TIMEOUT)
        assert client_events.moves[-1].player == Player.ONE
        assert client.board.get_state()[0, 3] == Player.ONE.value

        client.human_move(3)
        assert server.wait_for_local_turn(TIMEOUT)
        assert server.board.get_state()[1, 3] == Player.TWO.value
        assert not server.is_loser()

    def test_moves_out_of_turn_are_ignored(self, connect):
        server, client, _, _ = connect()
        assert client.human_move(0) is None
        server.human_move(0)
        assert server.human_move(1) is None
        assert client.wait_for_local_turn(TIMEOUT)
        assert server.board.moves_made == client.board.moves_made

    def test_full_column_is_not_sent(self, connect):
        server, client, server_events, _ = connect()
        for _ in range(ROWS // 2):
            server.human_move(0)
            assert client.wait_for_local_turn(TIMEOUT)
            client.human_move(0)
            assert server.wait_for_local_turn(TIMEOUT)

        assert server.human_move(0) is REJECTED_MOVE
        assert server_events.rejections == [REJECTED_MOVE]
        assert server.local_turn
        assert not client.wait_for_local_turn(0.2)

        server.human_move(1)
        assert client.wait_for_local_turn(TIMEOUT)
        assert client.board.get_state()[0, 1] == Player.ONE.value

    def test_winning_sender_is_reported_as_loser(self, connect):
        server, client, server_events, client_events = connect()
        for _ in range(3):
            server.human_move(0)
            assert client.wait_for_local_turn(TIMEOUT)
            client.human_move(1)
            assert server.wait_for_local_turn(TIMEOUT)
        server.human_move(0)

        assert server.state == TurnState.FINISHED
        assert client.wait_until_finished(TIMEOUT)
        assert server.board.winner() == client.board.winner() == Player.ONE
        assert server.is_loser() and server_events.results == [False]
        assert not client.is_loser() and client_events.results == [True]


class TestFailures:
    def test_peer_hangup_stalls_the_waiting_side(self, connect):
        server, client, _, _ = connect()
        server.link.close()

        assert not client.wait_until_finished(TIMEOUT)
        assert isinstance(client.failure, PeerReadFailure)
        assert client.state == TurnState.SENDING_AND_WAITING
        assert not client.local_turn

    def test_connect_to_nobody(self):
        probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        probe.bind(("127.0.0.1", 0))
        port = probe.getsockname()[1]
        probe.close()

        game = new_game()
        with pytest.raises(ConnectionFailure):
            game.start_client("127.0.0.1", port)
        assert not game.connected
        assert game.state == TurnState.IDLE
